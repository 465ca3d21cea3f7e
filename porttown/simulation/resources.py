"""Inventory management for towns and ships."""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterator

from ..core.registries import Good


@dataclass
class Inventory:
    """Whole-unit stock of goods held by one agent.

    Quantities are never negative. Entries are created on first add and
    dropped when they reach zero; ``ensure`` can seed an explicit zero entry.
    """
    goods: dict[Good, int] = field(default_factory=dict)

    def add(self, good: Good, quantity: int) -> bool:
        """Add units of a good. Returns False for a non-positive quantity."""
        if quantity <= 0:
            return False
        self.goods[good] = self.goods.get(good, 0) + quantity
        return True

    def remove(self, good: Good, quantity: int) -> bool:
        """Remove units of a good.

        Fails without changing anything if the quantity is not positive,
        the good is absent, or fewer units are held than requested.
        """
        current = self.goods.get(good)
        if quantity <= 0 or current is None or current < quantity:
            return False

        remaining = current - quantity
        if remaining == 0:
            del self.goods[good]
        else:
            self.goods[good] = remaining
        return True

    def ensure(self, good: Good) -> None:
        """Create an empty entry for a good if it has none."""
        self.goods.setdefault(good, 0)

    def get(self, good: Good) -> int:
        """Get quantity of a good (0 if absent)."""
        return self.goods.get(good, 0)

    def has(self, good: Good, quantity: int) -> bool:
        """Check if at least quantity units are held."""
        return self.get(good) >= quantity

    def items(self) -> Iterator[tuple[Good, int]]:
        """Iterate over a snapshot of (good, quantity) pairs."""
        return iter(list(self.goods.items()))

    def __contains__(self, good: object) -> bool:
        return good in self.goods

    def __len__(self) -> int:
        return len(self.goods)

    @property
    def total_quantity(self) -> int:
        """Total units across all goods."""
        return sum(self.goods.values())

    @property
    def total_weight(self) -> int:
        """Total hold space used, weighted by each good's capacity."""
        return sum(good.base_capacity * qty for good, qty in self.goods.items())

    @property
    def is_empty(self) -> bool:
        """Check if no units are held."""
        return self.total_quantity == 0

    def as_dict(self) -> dict[str, int]:
        """Quantities keyed by good id."""
        return {good.id: qty for good, qty in self.goods.items()}
