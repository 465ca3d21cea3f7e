"""World state container and host tick loop."""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from .. import config
from .events import EventBus
from .transactions import TransactionService

if TYPE_CHECKING:
    from ..entities.ports import Port
    from ..entities.ships import Ship
    from ..simulation.economy import TownEconomy

logger = logging.getLogger(__name__)


@dataclass
class SimulationClock:
    """Tracks simulated time."""
    total_seconds: float = 0.0

    SECONDS_PER_DAY: ClassVar[float] = 600.0  # One in-game day per ten simulated minutes

    def advance(self, dt: float) -> None:
        """Advance simulated time by dt seconds."""
        self.total_seconds += dt

    @property
    def day(self) -> int:
        """Current in-game day, starting at 1."""
        return int(self.total_seconds // self.SECONDS_PER_DAY) + 1

    def __str__(self) -> str:
        return f"Day {self.day} ({self.total_seconds:.0f}s)"


class World:
    """Main world state container. Coordinates towns, ports, ships and events."""

    def __init__(self, event_bus: EventBus | None = None) -> None:
        self.event_bus = event_bus or EventBus()
        self.transactions = TransactionService(self.event_bus)
        self.clock = SimulationClock()
        self.towns: dict[str, TownEconomy] = {}
        self.ports: dict[str, Port] = {}
        self.ships: dict[str, Ship] = {}
        self._speed: float = config.MIN_SIMULATION_SPEED

    def add_town(self, town: TownEconomy) -> None:
        """Register a town so it is advanced every tick."""
        if town.name in self.towns:
            raise ValueError(f"Town already registered: {town.name}")
        self.towns[town.name] = town

    def add_port(self, port: Port) -> None:
        """Register a port. Its town is registered too if it isn't yet."""
        if port.name in self.ports:
            raise ValueError(f"Port already registered: {port.name}")
        self.ports[port.name] = port
        if port.town.name not in self.towns:
            self.add_town(port.town)

    def add_ship(self, ship: Ship) -> None:
        """Register a ship."""
        if ship.name in self.ships:
            raise ValueError(f"Ship already registered: {ship.name}")
        self.ships[ship.name] = ship

    def update(self, dt: float) -> None:
        """Advance the clock and every town by one frame."""
        if dt <= 0:
            logger.warning("World.update called with non-positive dt %.4f; ignored", dt)
            return

        scaled_dt = dt * self._speed
        self.clock.advance(scaled_dt)
        self.transactions.set_game_time(self.clock.total_seconds)

        for town in self.towns.values():
            town.advance(scaled_dt)

    @property
    def speed(self) -> float:
        """Get simulation speed."""
        return self._speed

    @speed.setter
    def speed(self, value: float) -> None:
        """Set simulation speed (clamped to the configured range)."""
        self._speed = max(config.MIN_SIMULATION_SPEED, min(config.MAX_SIMULATION_SPEED, value))
