"""Tests for supply/demand price formation."""
import pytest
from porttown.core.registries import Good
from porttown.simulation.economy import Demand
from porttown.simulation.pricing import PriceSettings, calculate_price

CLOTH = Good("cloth", "Cloth", 10.0)


class TestCalculatePrice:
    """Tests for calculate_price."""

    def test_half_stocked_sell_price(self):
        """Test price at half the ideal stock."""
        demand = Demand(CLOTH, ideal_quantity=100, consumption_rate=0.1)
        price = calculate_price(CLOTH, 50, demand, 0.9, 0.4, 0.6, 1.8)
        assert price == pytest.approx(10.8)

    def test_at_ideal_stock(self):
        """Test price at the ideal stock is the plain multiplier."""
        demand = Demand(CLOTH, ideal_quantity=100, consumption_rate=0.1)
        assert calculate_price(CLOTH, 100, demand, 1.1, 0.4, 0.6, 1.8) == pytest.approx(11.0)

    def test_no_demand(self):
        """Test goods without demand get no elasticity adjustment."""
        assert calculate_price(CLOTH, 0, None, 0.9, 0.4, 0.6, 1.8) == pytest.approx(9.0)
        assert calculate_price(CLOTH, 5000, None, 0.9, 0.4, 0.6, 1.8) == pytest.approx(9.0)

    def test_zero_ideal_ignored(self):
        """Test a demand with zero ideal stock does not divide by zero."""
        demand = Demand(CLOTH, ideal_quantity=0, consumption_rate=0.1)
        assert calculate_price(CLOTH, 10, demand, 0.9, 0.4, 0.6, 1.8) == pytest.approx(9.0)

    def test_clamped_to_bounds(self):
        """Test extreme shortage and surplus are clamped."""
        demand = Demand(CLOTH, ideal_quantity=100, consumption_rate=0.1)

        assert calculate_price(CLOTH, 0, demand, 1.1, 2.0, 0.6, 1.8) == pytest.approx(18.0)
        assert calculate_price(CLOTH, 10000, demand, 0.9, 0.4, 0.6, 1.8) == pytest.approx(6.0)

    def test_bounds_for_all_stock_levels(self):
        """Test the price stays within its bounds for any stock and elasticity."""
        demand = Demand(CLOTH, ideal_quantity=50, consumption_rate=0.1)
        for elasticity in (0.0, 0.4, 1.0, 3.0):
            for stock in range(0, 500, 7):
                price = calculate_price(CLOTH, stock, demand, 1.0, elasticity, 0.6, 1.8)
                assert 6.0 <= price <= 18.0

    def test_monotonic_in_stock(self):
        """Test more stock never raises the price."""
        demand = Demand(CLOTH, ideal_quantity=80, consumption_rate=0.1)
        prices = [calculate_price(CLOTH, stock, demand, 0.9, 0.4, 0.6, 1.8) for stock in range(0, 400)]
        assert all(later <= earlier for earlier, later in zip(prices, prices[1:]))


class TestPriceSettings:
    """Tests for PriceSettings."""

    def test_buy_above_sell(self):
        """Test a town pays players more than it charges them at equal stock."""
        settings = PriceSettings()
        demand = Demand(CLOTH, ideal_quantity=100, consumption_rate=0.1)
        assert settings.buy_price(CLOTH, 40, demand) > settings.sell_price(CLOTH, 40, demand)

    def test_invalid_settings(self):
        """Test invalid multipliers are rejected."""
        with pytest.raises(ValueError):
            PriceSettings(elasticity=-0.1)
        with pytest.raises(ValueError):
            PriceSettings(min_multiplier=2.0, max_multiplier=1.0)

    def test_prices_cannot_reach_zero(self):
        """Test settings that would let a clamped price fall to zero are rejected."""
        with pytest.raises(ValueError):
            PriceSettings(min_multiplier=0.0)
        with pytest.raises(ValueError):
            PriceSettings(buy_multiplier=0.0)
        with pytest.raises(ValueError):
            PriceSettings(sell_multiplier=-1.0)
