"""Tests for goods, the cargo catalog and inventories."""
import pytest
from porttown.core.registries import CargoCatalog, Good
from porttown.simulation.resources import Inventory

FISH = Good("fish", "Fish", 4.0)
TIMBER = Good("timber", "Timber", 8.0, base_capacity=2)


class TestGood:
    """Tests for Good definitions."""

    def test_non_positive_value_rejected(self):
        """Test goods must be worth something."""
        with pytest.raises(ValueError):
            Good("junk", "Junk", 0.0)

    def test_capacity_must_be_positive(self):
        """Test every unit takes hold space."""
        with pytest.raises(ValueError):
            Good("air", "Air", 1.0, base_capacity=0)

    def test_hashable(self):
        """Test equal goods share a dictionary key."""
        assert {FISH: 1}[Good("fish", "Fish", 4.0)] == 1


class TestCargoCatalog:
    """Tests for CargoCatalog."""

    def test_load_default(self):
        """Test the bundled catalog loads."""
        catalog = CargoCatalog.load()

        assert len(catalog) == 8
        assert "fish" in catalog
        assert catalog["tools"].name == "Iron Tools"
        assert catalog["timber"].base_capacity == 2
        assert catalog.ids()[0] == "fish"

    def test_from_dict(self):
        """Test building a catalog from parsed data."""
        catalog = CargoCatalog.from_dict({
            "goods": {"pearls": {"name": "Pearls", "base_value": 60}},
        })

        pearls = catalog["pearls"]
        assert pearls.base_value == 60.0
        assert pearls.base_capacity == 1
        assert catalog.get("gold") is None

    def test_duplicate_id(self):
        """Test ids must be unique."""
        with pytest.raises(ValueError):
            CargoCatalog([FISH, Good("fish", "Other Fish", 2.0)])

    def test_unknown_id(self):
        """Test indexing an unknown id raises."""
        with pytest.raises(KeyError):
            CargoCatalog([FISH])["gold"]

    def test_missing_file(self, tmp_path):
        """Test loading a missing file raises."""
        with pytest.raises(FileNotFoundError):
            CargoCatalog.load(tmp_path / "missing.json")


class TestInventory:
    """Tests for Inventory."""

    def test_add(self):
        """Test adding goods."""
        inv = Inventory()
        assert inv.add(FISH, 5)
        assert inv.add(FISH, 3)
        assert inv.get(FISH) == 8

    def test_add_non_positive(self):
        """Test zero or negative adds are rejected."""
        inv = Inventory()
        assert not inv.add(FISH, 0)
        assert not inv.add(FISH, -2)
        assert FISH not in inv

    def test_remove_prunes_at_zero(self):
        """Test removing everything drops the entry."""
        inv = Inventory()
        inv.add(FISH, 5)
        assert inv.remove(FISH, 5)
        assert FISH not in inv
        assert inv.get(FISH) == 0

    def test_remove_more_than_held(self):
        """Test over-removal fails without change."""
        inv = Inventory()
        inv.add(FISH, 5)
        assert not inv.remove(FISH, 6)
        assert inv.get(FISH) == 5

    def test_remove_absent_or_invalid(self):
        """Test removing absent goods or bad quantities fails."""
        inv = Inventory()
        inv.add(FISH, 5)
        assert not inv.remove(TIMBER, 1)
        assert not inv.remove(FISH, 0)
        assert not inv.remove(FISH, -1)
        assert inv.get(FISH) == 5

    def test_ensure(self):
        """Test ensure seeds a zero entry without overwriting."""
        inv = Inventory()
        inv.ensure(FISH)
        assert FISH in inv
        assert inv.get(FISH) == 0

        inv.add(FISH, 2)
        inv.ensure(FISH)
        assert inv.get(FISH) == 2

    def test_totals(self):
        """Test quantity and weight totals."""
        inv = Inventory()
        inv.add(FISH, 3)
        inv.add(TIMBER, 4)

        assert inv.total_quantity == 7
        assert inv.total_weight == 3 + 8
        assert not inv.is_empty
        assert inv.has(TIMBER, 4)
        assert not inv.has(TIMBER, 5)
        assert inv.as_dict() == {"fish": 3, "timber": 4}

    def test_items_is_snapshot(self):
        """Test mutating while iterating items is safe."""
        inv = Inventory()
        inv.add(FISH, 3)
        inv.add(TIMBER, 4)

        for good, qty in inv.items():
            inv.remove(good, qty)

        assert inv.is_empty
