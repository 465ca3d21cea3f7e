"""Data-driven catalog of tradeable goods.

Goods are static reference data loaded from JSON. Adding a new cargo type
only requires a change to the JSON file, no code changes needed.
"""
from __future__ import annotations
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Iterator


# Path to data directory
DATA_DIR = Path(__file__).parent.parent / "data"
DEFAULT_CATALOG_PATH = DATA_DIR / "cargo.json"


@dataclass(frozen=True)
class Good:
    """Immutable cargo type definition."""
    id: str
    name: str
    base_value: float  # Value of one unit
    base_capacity: int = 1  # Hold space one unit takes on a ship
    description: str = ""

    def __post_init__(self) -> None:
        if self.base_value <= 0:
            raise ValueError(f"Good {self.id!r} must have a positive base value")
        if self.base_capacity < 1:
            raise ValueError(f"Good {self.id!r} must take at least one unit of capacity")

    def __str__(self) -> str:
        return self.name


class CargoCatalog:
    """Registry of goods keyed by id."""

    def __init__(self, goods: Iterable[Good] = ()) -> None:
        self._goods: dict[str, Good] = {}
        for good in goods:
            self.register(good)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CargoCatalog:
        """Build a catalog from the parsed JSON layout ({"goods": {id: {...}}})."""
        catalog = cls()
        for good_id, good_data in data.get("goods", {}).items():
            catalog.register(Good(
                id=good_id,
                name=good_data.get("name", good_id),
                base_value=float(good_data.get("base_value", 10.0)),
                base_capacity=int(good_data.get("base_capacity", 1)),
                description=good_data.get("description", ""),
            ))
        return catalog

    @classmethod
    def load(cls, path: Path | str = DEFAULT_CATALOG_PATH) -> CargoCatalog:
        """Load goods from a JSON file."""
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return cls.from_dict(data)

    def register(self, good: Good) -> None:
        """Add a good. Ids must be unique."""
        if good.id in self._goods:
            raise ValueError(f"Duplicate good id: {good.id}")
        self._goods[good.id] = good

    def get(self, good_id: str) -> Good | None:
        """Get a good by id, or None."""
        return self._goods.get(good_id)

    def __getitem__(self, good_id: str) -> Good:
        return self._goods[good_id]

    def __contains__(self, good_id: object) -> bool:
        return good_id in self._goods

    def __iter__(self) -> Iterator[Good]:
        return iter(self._goods.values())

    def __len__(self) -> int:
        return len(self._goods)

    def ids(self) -> list[str]:
        """All good ids in registration order."""
        return list(self._goods)
