"""Tests for the currency ledger."""
import pytest
from porttown.core.events import EventBus, BalanceChangedEvent
from porttown.core.ledger import Ledger


class TestLedger:
    """Tests for Ledger deposit and withdraw."""

    def test_deposit(self):
        """Test depositing increases the balance."""
        ledger = Ledger("Wayfarer", 100.0)
        assert ledger.deposit(50.0, "test")
        assert ledger.balance == pytest.approx(150.0)

    def test_negative_deposit_rejected(self):
        """Test a negative deposit is a no-op."""
        ledger = Ledger("Wayfarer", 100.0)
        assert not ledger.deposit(-10.0)
        assert ledger.balance == pytest.approx(100.0)

    def test_withdraw(self):
        """Test a covered withdraw succeeds."""
        ledger = Ledger("Wayfarer", 100.0)
        assert ledger.try_withdraw(40.0, "test")
        assert ledger.balance == pytest.approx(60.0)

    def test_withdraw_exact_balance(self):
        """Test withdrawing the whole balance leaves zero."""
        ledger = Ledger("Wayfarer", 100.0)
        assert ledger.try_withdraw(100.0)
        assert ledger.balance == 0.0

    def test_overdraw_fails_unchanged(self):
        """Test a withdraw above the balance fails without partial effect."""
        ledger = Ledger("Wayfarer", 30.0)
        assert not ledger.try_withdraw(50.0)
        assert ledger.balance == pytest.approx(30.0)

    def test_negative_withdraw_rejected(self):
        """Test a negative withdraw is a no-op."""
        ledger = Ledger("Wayfarer", 30.0)
        assert not ledger.try_withdraw(-5.0)
        assert ledger.balance == pytest.approx(30.0)

    def test_negative_initial_balance(self):
        """Test a ledger cannot start in debt."""
        with pytest.raises(ValueError):
            Ledger("Wayfarer", -1.0)

    def test_can_afford(self):
        """Test affordability check."""
        ledger = Ledger("Wayfarer", 30.0)
        assert ledger.can_afford(30.0)
        assert not ledger.can_afford(30.01)
        assert not ledger.can_afford(-1.0)

    def test_balance_events(self):
        """Test balance changes are published."""
        bus = EventBus()
        received = []
        bus.subscribe(BalanceChangedEvent, received.append)

        ledger = Ledger("Wayfarer", 10.0, bus)
        ledger.deposit(5.0)
        ledger.try_withdraw(100.0)
        ledger.try_withdraw(15.0)

        assert [e.balance for e in received] == [pytest.approx(15.0), pytest.approx(0.0)]
        assert all(e.owner_name == "Wayfarer" for e in received)
