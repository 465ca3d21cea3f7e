"""Event bus for decoupled communication between the simulation and its observers."""
from __future__ import annotations
from dataclasses import dataclass
from typing import Callable


@dataclass
class Event:
    """Base class for all events."""
    pass


@dataclass
class EconomyChangedEvent(Event):
    """Fired when a town's economy points change."""
    town_name: str
    economy_points: float


@dataclass
class PopulationChangedEvent(Event):
    """Fired when a town's population changes."""
    town_name: str
    population: int


@dataclass
class GoodsChangedEvent(Event):
    """Fired when the stock of a good in a town changes."""
    town_name: str
    good_id: str
    quantity: int


@dataclass
class TownDataChangedEvent(Event):
    """Fired after any town handler or trade touches town state."""
    town_name: str


@dataclass
class InvestmentPayoutEvent(Event):
    """Fired when a town pays an investment return to the player."""
    town_name: str
    amount: float
    economy_change: float  # Fractional economy change over the payout period


@dataclass
class BalanceChangedEvent(Event):
    """Fired when a ledger balance changes."""
    owner_name: str
    balance: float


@dataclass
class ShipCargoChangedEvent(Event):
    """Fired when a ship's cargo or selection state changes."""
    ship_name: str


@dataclass
class ActionStateChangedEvent(Event):
    """Fired when a ship switches between normal, selling and dropping modes."""
    ship_name: str
    state: str  # ActionState.value


@dataclass
class TradeTargetChangedEvent(Event):
    """Fired when a ship enters or leaves a port zone or another ship's range."""
    ship_name: str
    port_name: str | None
    other_ship_name: str | None


Listener = Callable[[Event], None]


class EventBus:
    """Delivers domain events from towns, ships and ledgers to observers.

    Listeners registered for a base class (e.g. ``Event``) also receive every
    subclass event, after the listeners for the exact type. Events raised by
    listeners are queued behind the event being delivered, so every listener
    sees events in the same order.
    """

    def __init__(self) -> None:
        self._listeners: dict[type[Event], list[Listener]] = {}
        self._pending: list[Event] = []
        self._draining = False

    def subscribe(self, event_type: type[Event], listener: Listener) -> None:
        """Register a listener for an event type and its subclasses."""
        self._listeners.setdefault(event_type, []).append(listener)

    def unsubscribe(self, event_type: type[Event], listener: Listener) -> None:
        """Remove a listener. Unknown listeners are ignored."""
        listeners = self._listeners.get(event_type, [])
        if listener in listeners:
            listeners.remove(listener)

    def publish(self, event: Event) -> None:
        """Deliver an event to its listeners.

        Events published by a listener are held until every listener has
        seen the current event, then delivered in publication order.
        """
        self._pending.append(event)
        if self._draining:
            return

        self._draining = True
        try:
            while self._pending:
                batch, self._pending = self._pending, []
                for queued in batch:
                    self._deliver(queued)
        except Exception:
            # A failing listener abandons the events it left queued
            self._pending.clear()
            raise
        finally:
            self._draining = False

    def _deliver(self, event: Event) -> None:
        exact = type(event)
        for listener in list(self._listeners.get(exact, ())):
            listener(event)

        for event_type, listeners in list(self._listeners.items()):
            if event_type is not exact and isinstance(event, event_type):
                for listener in list(listeners):
                    listener(event)

    def clear(self) -> None:
        """Forget all listeners and held events."""
        self._listeners.clear()
        self._pending.clear()
