"""Ports: the trade-zone front of a town, collecting tax on player sales."""
from __future__ import annotations
from dataclasses import dataclass

from .. import config
from ..core.ledger import Ledger
from ..core.world import World
from ..simulation.economy import TownEconomy


@dataclass
class Port:
    """A port connected to a town."""
    name: str
    town: TownEconomy
    ledger: Ledger
    tax_percentage: float = config.DEFAULT_TAX_PERCENTAGE  # Share of player sale proceeds kept by the port

    def __post_init__(self) -> None:
        if not 0 <= self.tax_percentage <= 1:
            raise ValueError(f"Port {self.name}: tax percentage must be within [0, 1]")


def create_port(
    world: World,
    name: str,
    town: TownEconomy,
    tax_percentage: float = config.DEFAULT_TAX_PERCENTAGE,
    treasury: float = config.DEFAULT_PORT_TREASURY,
) -> Port:
    """Create a port for a town and register both with the world."""
    port = Port(
        name=name,
        town=town,
        ledger=Ledger(name, treasury, world.event_bus),
        tax_percentage=tax_percentage,
    )
    world.add_port(port)
    return port
