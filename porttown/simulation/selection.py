"""Multi-item quantity selection for a ship's sell and drop actions."""
from __future__ import annotations
import logging
from dataclasses import dataclass
from enum import Enum

from ..core.registries import Good
from .resources import Inventory

logger = logging.getLogger(__name__)


class ActionState(Enum):
    """A ship's inventory interaction mode."""
    NORMAL = "normal"  # Viewing cargo
    SELLING = "selling"  # Choosing cargo to sell
    DROPPING = "dropping"  # Choosing cargo to give away or throw overboard


# NORMAL <-> SELLING and NORMAL <-> DROPPING only
_ALLOWED_TRANSITIONS: dict[ActionState, frozenset[ActionState]] = {
    ActionState.NORMAL: frozenset({ActionState.SELLING, ActionState.DROPPING}),
    ActionState.SELLING: frozenset({ActionState.NORMAL}),
    ActionState.DROPPING: frozenset({ActionState.NORMAL}),
}


@dataclass
class SelectionSlot:
    """Selection state of one good."""
    selected: bool = False
    quantity: int = 0


@dataclass(frozen=True)
class SlotView:
    """Read-only view of a cargo slot for display."""
    good: Good
    held: int
    selected: bool
    selected_quantity: int


class SelectionSession:
    """Tracks which goods, and how many units, are picked for the current action.

    Held quantities come from the ship's inventory. A slot never selects more
    than is held, and an unselected slot always has a quantity of zero.
    """

    def __init__(self, inventory: Inventory) -> None:
        self._inventory = inventory
        self._slots: dict[Good, SelectionSlot] = {}
        self.state = ActionState.NORMAL

    def set_state(self, new_state: ActionState) -> bool:
        """Switch action mode, clearing all selections.

        Returns True if the state changed. Setting the current state is a
        no-op; illegal transitions are rejected.
        """
        if new_state == self.state:
            return False
        if new_state not in _ALLOWED_TRANSITIONS[self.state]:
            logger.warning("Illegal action state transition %s -> %s",
                           self.state.value, new_state.value)
            return False

        logger.debug("Action state %s -> %s", self.state.value, new_state.value)
        self.state = new_state
        self._slots.clear()
        return True

    def toggle(self, good: Good) -> bool:
        """Toggle selection of a held good. Selecting starts at one unit."""
        if self.state == ActionState.NORMAL:
            return False
        held = self._inventory.get(good)
        if held <= 0:
            return False

        slot = self._slots.setdefault(good, SelectionSlot())
        slot.selected = not slot.selected
        if slot.selected:
            if slot.quantity == 0:
                slot.quantity = 1
        else:
            slot.quantity = 0
        return True

    def set_quantity(self, good: Good, quantity: int) -> bool:
        """Set the selected quantity of a selected good.

        Rejects negative quantities, more than is held, and unselected goods.
        """
        slot = self._slots.get(good)
        if slot is None or not slot.selected:
            return False
        if quantity < 0 or quantity > self._inventory.get(good):
            logger.warning("Invalid selection quantity %d for %s (held %d)",
                           quantity, good.name, self._inventory.get(good))
            return False
        slot.quantity = quantity
        return True

    def increase(self, good: Good, step: int = 1) -> int:
        """Select up to step more units, capped at what is held. Returns the new quantity."""
        slot = self._slots.get(good)
        if slot is None or not slot.selected or step <= 0:
            return self.selected_quantity(good)
        slot.quantity = min(slot.quantity + step, self._inventory.get(good))
        return slot.quantity

    def decrease(self, good: Good, step: int = 1) -> int:
        """Select up to step fewer units, floored at zero. Returns the new quantity."""
        slot = self._slots.get(good)
        if slot is None or not slot.selected or step <= 0:
            return self.selected_quantity(good)
        slot.quantity = max(slot.quantity - step, 0)
        return slot.quantity

    def clear(self) -> bool:
        """Drop all selections. Returns True if anything was selected."""
        changed = any(slot.selected or slot.quantity > 0 for slot in self._slots.values())
        self._slots.clear()
        return changed

    def sync(self, good: Good) -> None:
        """Clamp a slot after the held quantity changed."""
        slot = self._slots.get(good)
        if slot is None:
            return
        held = self._inventory.get(good)
        if held <= 0:
            del self._slots[good]
            return
        slot.quantity = min(slot.quantity, held)

    def is_selected(self, good: Good) -> bool:
        slot = self._slots.get(good)
        return slot is not None and slot.selected

    def selected_quantity(self, good: Good) -> int:
        slot = self._slots.get(good)
        return slot.quantity if slot is not None else 0

    def selected_items(self) -> list[tuple[Good, int]]:
        """Goods picked for the action with a positive quantity."""
        return [(good, slot.quantity) for good, slot in self._slots.items()
                if slot.selected and slot.quantity > 0]

    def slots(self) -> list[SlotView]:
        """One view per held good, in inventory order."""
        views = []
        for good, held in self._inventory.items():
            slot = self._slots.get(good)
            views.append(SlotView(
                good=good,
                held=held,
                selected=slot.selected if slot else False,
                selected_quantity=slot.quantity if slot else 0,
            ))
        return views
