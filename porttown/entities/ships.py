"""Ships: mobile traders carrying cargo and a purse."""
from __future__ import annotations
import logging
from typing import TYPE_CHECKING
from dataclasses import dataclass
from enum import Enum

from .. import config
from ..core.events import (
    EventBus, ShipCargoChangedEvent, ActionStateChangedEvent, TradeTargetChangedEvent,
)
from ..core.ledger import Ledger
from ..core.registries import Good
from ..core.world import World
from ..simulation.resources import Inventory
from ..simulation.selection import ActionState, SelectionSession, SlotView

if TYPE_CHECKING:
    from .ports import Port

logger = logging.getLogger(__name__)


class ShipType(Enum):
    """Types of ships."""
    SLOOP = "sloop"  # Small and cheap
    BRIGANTINE = "brigantine"  # Medium trader
    GALLEON = "galleon"  # Large merchant


SHIP_CONFIGS: dict[ShipType, dict] = {
    ShipType.SLOOP: {
        "credits": 500.0,
    },
    ShipType.BRIGANTINE: {
        "credits": config.DEFAULT_SHIP_CREDITS,
    },
    ShipType.GALLEON: {
        "credits": 5000.0,
    },
}


@dataclass(frozen=True)
class ShipSnapshot:
    """Read-only view of a ship for display."""
    name: str
    balance: float
    action_state: ActionState
    port_name: str | None
    other_ship_name: str | None
    slots: tuple[SlotView, ...]


class Ship:
    """A ship with a cargo hold, a ledger and an in-progress action selection.

    The current port and the ship in range are owned by the ship and only
    change through the set/clear methods, which the movement layer calls
    on proximity events.
    """

    def __init__(
        self,
        name: str,
        ledger: Ledger,
        ship_type: ShipType = ShipType.BRIGANTINE,
        event_bus: EventBus | None = None,
    ) -> None:
        self.name = name
        self.ship_type = ship_type
        self.ledger = ledger
        self.event_bus = event_bus or EventBus()
        self.cargo = Inventory()
        self.selection = SelectionSession(self.cargo)
        self._current_port: Port | None = None
        self._current_other_ship: Ship | None = None

    # --- Cargo -------------------------------------------------------------

    def add_cargo(self, good: Good, quantity: int) -> bool:
        """Load cargo."""
        if not self.cargo.add(good, quantity):
            return False
        self.selection.sync(good)
        logger.debug("%s loaded %d %s. Total: %d", self.name, quantity, good.name, self.cargo.get(good))
        self._notify_cargo()
        return True

    def remove_cargo(self, good: Good, quantity: int) -> bool:
        """Unload cargo. False if not enough is held."""
        if not self.cargo.remove(good, quantity):
            logger.warning("%s: could not remove %d %s (held %d)",
                           self.name, quantity, good.name, self.cargo.get(good))
            return False
        self.selection.sync(good)
        logger.debug("%s unloaded %d %s. Total: %d", self.name, quantity, good.name, self.cargo.get(good))
        self._notify_cargo()
        return True

    def cargo_quantity(self, good: Good) -> int:
        return self.cargo.get(good)

    # --- Action state and selection ----------------------------------------

    @property
    def action_state(self) -> ActionState:
        return self.selection.state

    def set_action_state(self, new_state: ActionState) -> bool:
        """Change action mode. Selections are cleared on every change."""
        if not self.selection.set_state(new_state):
            return False
        logger.info("%s action state: %s", self.name, new_state.value)
        self._notify_cargo()
        self.event_bus.publish(ActionStateChangedEvent(ship_name=self.name, state=new_state.value))
        return True

    def exit_action_state(self) -> bool:
        """Cancel the current action and return to normal mode."""
        return self.set_action_state(ActionState.NORMAL)

    def toggle_selection(self, good: Good) -> bool:
        if not self.selection.toggle(good):
            return False
        self._notify_cargo()
        return True

    def set_selected_quantity(self, good: Good, quantity: int) -> bool:
        if not self.selection.set_quantity(good, quantity):
            return False
        self._notify_cargo()
        return True

    def increase_selected(self, good: Good, large_step: bool = False) -> int:
        """The +1 / +10 selection buttons. Returns the new selected quantity."""
        step = config.SELECTION_LARGE_STEP if large_step else 1
        before = self.selection.selected_quantity(good)
        after = self.selection.increase(good, step)
        if after != before:
            self._notify_cargo()
        return after

    def decrease_selected(self, good: Good, large_step: bool = False) -> int:
        """The -1 / -10 selection buttons. Returns the new selected quantity."""
        step = config.SELECTION_LARGE_STEP if large_step else 1
        before = self.selection.selected_quantity(good)
        after = self.selection.decrease(good, step)
        if after != before:
            self._notify_cargo()
        return after

    def clear_selections(self) -> None:
        if self.selection.clear():
            self._notify_cargo()

    # --- Trade targets -----------------------------------------------------

    @property
    def current_port(self) -> Port | None:
        return self._current_port

    @property
    def current_other_ship(self) -> Ship | None:
        return self._current_other_ship

    def set_current_port(self, port: Port | None) -> None:
        """Called when the ship enters a port's trade zone."""
        self._current_port = port
        if port is not None:
            logger.info("%s entered %s trade zone", self.name, port.name)
        self._notify_target()

    def clear_current_port(self) -> None:
        """Called when the ship leaves a port's trade zone."""
        if self._current_port is not None:
            logger.info("%s left %s trade zone", self.name, self._current_port.name)
        self._current_port = None
        self._notify_target()

    def set_current_other_ship(self, other: Ship | None) -> None:
        """Called when another ship comes into range."""
        if other is self:
            logger.warning("%s cannot trade with itself", self.name)
            return
        self._current_other_ship = other
        if other is not None:
            logger.info("%s in range of %s", self.name, other.name)
        self._notify_target()

    def clear_current_other_ship(self) -> None:
        """Called when the other ship leaves range."""
        self._current_other_ship = None
        self._notify_target()

    @property
    def has_trade_target(self) -> bool:
        return self._current_port is not None or self._current_other_ship is not None

    # --- Observers ---------------------------------------------------------

    def snapshot(self) -> ShipSnapshot:
        """Read-only state for display."""
        return ShipSnapshot(
            name=self.name,
            balance=self.ledger.balance,
            action_state=self.action_state,
            port_name=self._current_port.name if self._current_port else None,
            other_ship_name=self._current_other_ship.name if self._current_other_ship else None,
            slots=tuple(self.selection.slots()),
        )

    def _notify_cargo(self) -> None:
        self.event_bus.publish(ShipCargoChangedEvent(ship_name=self.name))

    def _notify_target(self) -> None:
        self.event_bus.publish(TradeTargetChangedEvent(
            ship_name=self.name,
            port_name=self._current_port.name if self._current_port else None,
            other_ship_name=self._current_other_ship.name if self._current_other_ship else None,
        ))

    def __repr__(self) -> str:
        return f"Ship({self.name!r}, {self.ship_type.value})"


def create_ship(
    world: World,
    name: str,
    ship_type: ShipType = ShipType.BRIGANTINE,
    credits: float | None = None,
    cargo: dict[Good, int] | None = None,
) -> Ship:
    """Create a ship and register it with the world.

    Args:
        world: The simulation world
        name: Ship name
        ship_type: Type of ship
        credits: Starting purse (defaults to the ship type's)
        cargo: Starting cargo

    Returns:
        The created ship
    """
    ship_config = SHIP_CONFIGS[ship_type]
    starting_credits = ship_config["credits"] if credits is None else credits

    ship = Ship(
        name=name,
        ledger=Ledger(name, starting_credits, world.event_bus),
        ship_type=ship_type,
        event_bus=world.event_bus,
    )
    for good, quantity in (cargo or {}).items():
        ship.add_cargo(good, quantity)

    world.add_ship(ship)
    return ship
