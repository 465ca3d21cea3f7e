"""Entry point and simulation loop."""
from __future__ import annotations
import argparse
import logging
import random

import pygame

from . import config
from .core.registries import CargoCatalog
from .core.world import World
from .entities.ports import create_port
from .entities.ships import ShipType, create_ship
from .entities.towns import TownType, create_town
from .simulation.economy import Demand
from .simulation.selection import ActionState
from .simulation.trade import TradeService

logger = logging.getLogger(__name__)


def create_initial_world(world: World, catalog: CargoCatalog, rng: random.Random | None = None) -> None:
    """Set up a small archipelago of towns, their ports and two trading ships."""
    rng = rng or random.Random()
    fish, grain, timber = catalog["fish"], catalog["grain"], catalog["timber"]
    cloth, sugar, rum = catalog["cloth"], catalog["sugar"], catalog["rum"]
    tools, spices = catalog["tools"], catalog["spices"]

    # Self-sufficient in food, short on everything made elsewhere
    saltmarsh = create_town(
        world, "Saltmarsh", TownType.FISHING_VILLAGE,
        producible=[fish, timber],
        demands=[
            Demand(fish, ideal_quantity=60, consumption_rate=0.1, essential=True),
            Demand(grain, ideal_quantity=40, consumption_rate=0.05, essential=True),
            Demand(tools, ideal_quantity=10, consumption_rate=0.01),
        ],
        generation_modifiers={fish: 1.5},
        initial_goods={fish: 80, timber: 30, grain: 20},
        rng=rng,
    )

    greenhollow = create_town(
        world, "Greenhollow", TownType.FARMING_TOWN,
        producible=[grain, cloth],
        demands=[
            Demand(grain, ideal_quantity=120, consumption_rate=0.1, essential=True),
            Demand(fish, ideal_quantity=40, consumption_rate=0.03),
            Demand(tools, ideal_quantity=20, consumption_rate=0.01),
        ],
        generation_modifiers={grain: 2.0},
        initial_goods={grain: 200, cloth: 40},
        rng=rng,
    )

    # Cash crops only; food must be shipped in
    canefield = create_town(
        world, "Canefield", TownType.PLANTATION,
        producible=[sugar, rum],
        demands=[
            Demand(grain, ideal_quantity=80, consumption_rate=0.08, essential=True),
            Demand(fish, ideal_quantity=50, consumption_rate=0.05, essential=True),
            Demand(cloth, ideal_quantity=30, consumption_rate=0.02),
        ],
        generation_modifiers={sugar: 1.5},
        initial_goods={sugar: 120, rum: 60, grain: 40, fish: 30},
        rng=rng,
    )

    kingsport = create_town(
        world, "Kingsport", TownType.TRADE_HUB,
        producible=[tools, spices],
        demands=[
            Demand(grain, ideal_quantity=300, consumption_rate=0.06, essential=True),
            Demand(fish, ideal_quantity=200, consumption_rate=0.04, essential=True),
            Demand(rum, ideal_quantity=100, consumption_rate=0.02),
            Demand(sugar, ideal_quantity=100, consumption_rate=0.02),
            Demand(cloth, ideal_quantity=80, consumption_rate=0.01),
        ],
        initial_goods={grain: 300, fish: 150, tools: 60, spices: 20},
        rng=rng,
    )

    create_port(world, "Saltmarsh Quay", saltmarsh, tax_percentage=0.05)
    create_port(world, "Greenhollow Landing", greenhollow)
    create_port(world, "Canefield Wharf", canefield, tax_percentage=0.12)
    create_port(world, "Kingsport Harbour", kingsport, tax_percentage=0.15)

    create_ship(world, "Wayfarer", ShipType.BRIGANTINE)
    create_ship(world, "Gull", ShipType.SLOOP, cargo={timber: 10})


def run_demo_voyage(world: World, trade: TradeService, catalog: CargoCatalog) -> None:
    """Buy grain in Greenhollow, sell it in Canefield and invest some of the profit."""
    ship = world.ships["Wayfarer"]
    grain = catalog["grain"]

    ship.set_current_port(world.ports["Greenhollow Landing"])
    trade.buy_from_town(ship, grain, 40)
    ship.clear_current_port()

    ship.set_current_port(world.ports["Canefield Wharf"])
    ship.set_action_state(ActionState.SELLING)
    ship.toggle_selection(grain)
    ship.set_selected_quantity(grain, ship.cargo_quantity(grain))
    trade.execute_selected_action(ship)
    trade.invest(ship, 100.0)
    ship.clear_current_port()

    # Gull hands its timber over at sea
    gull = world.ships["Gull"]
    gull.set_current_other_ship(ship)
    gull.set_action_state(ActionState.DROPPING)
    timber = catalog["timber"]
    gull.toggle_selection(timber)
    gull.set_selected_quantity(timber, gull.cargo_quantity(timber))
    trade.execute_selected_action(gull)
    gull.clear_current_other_ship()


def log_summary(world: World) -> None:
    """Log the state of every town and ship."""
    logger.info("=== %s ===", world.clock)
    for town in world.towns.values():
        snap = town.snapshot()
        stock = ", ".join(f"{good_id}={qty}" for good_id, qty in snap.stock.items())
        logger.info("%s: economy %.1f, population %d, treasury %.2f, stock [%s]",
                    snap.name, snap.economy_points, snap.population, snap.balance, stock)
    for ship in world.ships.values():
        logger.info("%s: balance %.2f, cargo %s", ship.name, ship.ledger.balance, ship.cargo.as_dict())
    logger.info("%d transactions recorded", len(world.transactions))


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="porttown", description=config.TITLE)
    parser.add_argument("--duration", type=float, default=config.DEFAULT_RUN_DURATION,
                        help="simulated seconds to run")
    parser.add_argument("--fixed-step", type=float, default=None,
                        help="advance by this many seconds per step instead of real time")
    parser.add_argument("--speed", type=float, default=10.0,
                        help="simulation speed multiplier")
    parser.add_argument("--log-level", default=config.LOG_LEVEL,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--seed", type=int, default=None,
                        help="seed for supply generation")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level, format=config.LOG_FORMAT)

    world = World()
    world.speed = args.speed
    catalog = CargoCatalog.load()
    create_initial_world(world, catalog, random.Random(args.seed))

    trade = TradeService(world.transactions)
    run_demo_voyage(world, trade, catalog)

    if args.fixed_step is not None:
        if args.fixed_step <= 0:
            raise SystemExit("--fixed-step must be positive")
        while world.clock.total_seconds < args.duration:
            world.update(args.fixed_step)
    else:
        pygame.init()
        clock = pygame.time.Clock()
        try:
            while world.clock.total_seconds < args.duration:
                dt = clock.tick(config.FPS) / 1000.0  # Convert to seconds
                if dt > 0:
                    world.update(dt)
        except KeyboardInterrupt:
            logger.info("Interrupted")
        finally:
            pygame.quit()

    log_summary(world)


if __name__ == "__main__":
    main()
