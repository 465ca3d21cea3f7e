"""Town archetypes and the town factory."""
from __future__ import annotations
import random
from enum import Enum

from .. import config
from ..core.ledger import Ledger
from ..core.registries import Good
from ..core.world import World
from ..simulation.economy import Demand, TownEconomy, TownSettings


class TownType(Enum):
    """Kinds of settlement, differing in size and starting wealth."""
    FISHING_VILLAGE = "fishing_village"  # Small, poor, self-sufficient in food
    FARMING_TOWN = "farming_town"  # Mid-sized breadbasket
    PLANTATION = "plantation"  # Cash crops, depends on imported food
    TRADE_HUB = "trade_hub"  # Large, wealthy, produces little itself


TOWN_CONFIGS: dict[TownType, dict] = {
    TownType.FISHING_VILLAGE: {
        "economy_points": 60.0,
        "population": 50,
        "treasury": 1500.0,
    },
    TownType.FARMING_TOWN: {
        "economy_points": 120.0,
        "population": 150,
        "treasury": 3000.0,
    },
    TownType.PLANTATION: {
        "economy_points": 200.0,
        "population": 120,
        "treasury": 6000.0,
    },
    TownType.TRADE_HUB: {
        "economy_points": 500.0,
        "population": 600,
        "treasury": 20000.0,
    },
}


def create_town(
    world: World,
    name: str,
    town_type: TownType,
    producible: list[Good] | None = None,
    demands: list[Demand] | None = None,
    generation_modifiers: dict[Good, float] | None = None,
    initial_goods: dict[Good, int] | None = None,
    settings: TownSettings | None = None,
    rng: random.Random | None = None,
) -> TownEconomy:
    """Create a town and register it with the world.

    Args:
        world: The simulation world
        name: Town name
        town_type: Archetype providing starting economy, population and treasury
        producible: Goods the town makes at full rate
        demands: Goods the town consumes
        generation_modifiers: Per-good production multipliers (e.g. biome bonuses)
        initial_goods: Starting stock
        settings: Economy tuning; defaults from config
        rng: Random source for supply jitter

    Returns:
        The created town
    """
    town_config = TOWN_CONFIGS[town_type]

    town = TownEconomy(
        name=name,
        ledger=Ledger(name, town_config.get("treasury", config.DEFAULT_TOWN_TREASURY), world.event_bus),
        settings=settings,
        producible=producible or [],
        demands=demands or [],
        generation_modifiers=generation_modifiers,
        economy_points=town_config["economy_points"],
        population=town_config["population"],
        event_bus=world.event_bus,
        rng=rng,
    )

    for good, quantity in (initial_goods or {}).items():
        town.add_cargo(good, quantity)

    world.add_town(town)
    return town
