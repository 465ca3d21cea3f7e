"""Supply/demand price formation."""
from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .. import config
from ..core.registries import Good

if TYPE_CHECKING:
    from .economy import Demand


def calculate_price(
    good: Good,
    stock_quantity: int,
    demand: Demand | None,
    base_multiplier: float,
    elasticity: float,
    min_multiplier: float,
    max_multiplier: float
) -> float:
    """Unit price of a good given current stock.

    Stock below the demanded ideal raises the price, surplus lowers it.
    The result is clamped to [base_value * min_multiplier, base_value * max_multiplier].
    A demand with an ideal quantity of zero is ignored.
    """
    base_value = good.base_value
    price = base_value * base_multiplier

    if demand is not None and demand.ideal_quantity > 0:
        supply_ratio = stock_quantity / demand.ideal_quantity
        price *= 1.0 + (1.0 - supply_ratio) * elasticity

    return max(base_value * min_multiplier, min(base_value * max_multiplier, price))


@dataclass(frozen=True)
class PriceSettings:
    """Per-town pricing configuration."""
    buy_multiplier: float = config.BUY_PRICE_MULTIPLIER
    sell_multiplier: float = config.SELL_PRICE_MULTIPLIER
    elasticity: float = config.PRICE_ELASTICITY
    min_multiplier: float = config.MIN_PRICE_MULTIPLIER
    max_multiplier: float = config.MAX_PRICE_MULTIPLIER

    def __post_init__(self) -> None:
        if self.elasticity < 0:
            raise ValueError("Price elasticity cannot be negative")
        if self.buy_multiplier <= 0 or self.sell_multiplier <= 0:
            raise ValueError("Buy and sell multipliers must be positive")
        if not 0 < self.min_multiplier <= self.max_multiplier:
            raise ValueError("Price multipliers must satisfy 0 < min <= max")

    def buy_price(self, good: Good, stock_quantity: int, demand: Demand | None) -> float:
        """What the town pays a player per unit."""
        return calculate_price(good, stock_quantity, demand, self.buy_multiplier,
                               self.elasticity, self.min_multiplier, self.max_multiplier)

    def sell_price(self, good: Good, stock_quantity: int, demand: Demand | None) -> float:
        """What a player pays the town per unit."""
        return calculate_price(good, stock_quantity, demand, self.sell_multiplier,
                               self.elasticity, self.min_multiplier, self.max_multiplier)
