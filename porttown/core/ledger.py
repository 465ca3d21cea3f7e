"""Currency ledger held by towns, ports and ships."""
from __future__ import annotations
import logging
import threading

from .events import EventBus, BalanceChangedEvent

logger = logging.getLogger(__name__)


class Ledger:
    """A balance holder with deposit and all-or-nothing withdraw.

    The balance can never go negative: a withdraw larger than the balance
    fails and leaves the balance untouched. Negative amounts are caller
    errors and are rejected with a warning.
    """

    def __init__(
        self,
        owner_name: str,
        balance: float = 0.0,
        event_bus: EventBus | None = None
    ) -> None:
        if balance < 0:
            raise ValueError(f"Initial balance for {owner_name} cannot be negative: {balance}")
        self.owner_name = owner_name
        self._balance = float(balance)
        self._event_bus = event_bus
        self._lock = threading.Lock()

    @property
    def balance(self) -> float:
        """Current balance (read-only)."""
        return self._balance

    def deposit(self, amount: float, source: str = "unknown source") -> bool:
        """Add money to the account. Returns False if the amount was rejected."""
        if amount < 0:
            logger.warning(
                "%s: attempted to deposit negative amount %.2f from %s",
                self.owner_name, amount, source
            )
            return False

        with self._lock:
            self._balance += amount
            new_balance = self._balance

        logger.debug("%s received %.2f from %s. Balance: %.2f",
                     self.owner_name, amount, source, new_balance)
        self._notify(new_balance)
        return True

    def try_withdraw(self, amount: float, reason: str = "unknown reason") -> bool:
        """Remove money if the balance covers it. Returns True on success."""
        if amount < 0:
            logger.warning(
                "%s: attempted to withdraw negative amount %.2f for %s",
                self.owner_name, amount, reason
            )
            return False

        with self._lock:
            if self._balance < amount:
                current = self._balance
                ok = False
            else:
                self._balance -= amount
                current = self._balance
                ok = True

        if not ok:
            logger.warning("%s: insufficient funds to pay %.2f for %s. Balance: %.2f",
                           self.owner_name, amount, reason, current)
            return False

        logger.debug("%s paid %.2f for %s. Balance: %.2f",
                     self.owner_name, amount, reason, current)
        self._notify(current)
        return True

    def can_afford(self, amount: float) -> bool:
        """Check whether a withdraw of amount would currently succeed."""
        return 0 <= amount <= self._balance

    def _notify(self, balance: float) -> None:
        if self._event_bus is not None:
            self._event_bus.publish(BalanceChangedEvent(owner_name=self.owner_name, balance=balance))

    def __repr__(self) -> str:
        return f"Ledger({self.owner_name!r}, balance={self._balance:.2f})"
