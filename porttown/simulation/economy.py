"""Town economy simulation: supply, consumption, population and investment."""
from __future__ import annotations
import logging
import random
from dataclasses import dataclass, field
from typing import Iterable

from .. import config
from ..core.events import (
    Event, EventBus, EconomyChangedEvent, PopulationChangedEvent,
    GoodsChangedEvent, TownDataChangedEvent, InvestmentPayoutEvent,
)
from ..core.ledger import Ledger
from ..core.registries import Good
from .pricing import PriceSettings
from .resources import Inventory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Demand:
    """A town's standing need for one good."""
    good: Good
    ideal_quantity: int  # Stock level the town tries to keep; drives prices
    consumption_rate: float  # Units consumed per population unit per consumption tick
    essential: bool = False  # Shortage hurts economy and population

    def __post_init__(self) -> None:
        if self.ideal_quantity < 0:
            raise ValueError(f"Ideal quantity for {self.good.id} cannot be negative")
        if self.consumption_rate < 0:
            raise ValueError(f"Consumption rate for {self.good.id} cannot be negative")


@dataclass
class IntervalTimer:
    """Countdown that fires at most once per tick, then restarts from its interval.

    Overshoot is not carried over: if dt spans several intervals only one
    firing happens.
    """
    interval: float
    remaining: float = field(init=False)

    def __post_init__(self) -> None:
        if self.interval <= 0:
            raise ValueError("Timer interval must be positive")
        self.remaining = self.interval

    def tick(self, dt: float) -> bool:
        """Count down by dt. Returns True if the timer fired."""
        self.remaining -= dt
        if self.remaining <= 0:
            self.remaining = self.interval
            return True
        return False


@dataclass(frozen=True)
class TownSettings:
    """Tunable economy parameters for one town."""
    # Economy points
    min_economy: float = config.MIN_ECONOMY_POINTS
    max_economy: float = config.MAX_ECONOMY_POINTS
    economy_growth_rate: float = config.ECONOMY_GROWTH_RATE
    economy_decay_rate: float = config.ECONOMY_DECAY_RATE
    currency_per_economy_point: float = config.CURRENCY_PER_ECONOMY_POINT
    # Population
    min_population: int = config.MIN_POPULATION
    max_population: int = config.MAX_POPULATION
    population_growth_rate: float = config.POPULATION_GROWTH_RATE
    population_decay_rate: float = config.POPULATION_DECAY_RATE
    # Timers (seconds)
    supply_interval: float = config.SUPPLY_GENERATION_INTERVAL
    consumption_interval: float = config.CONSUMPTION_INTERVAL
    population_interval: float = config.POPULATION_EVALUATION_INTERVAL
    investment_interval: float = config.INVESTMENT_PAYOUT_INTERVAL
    # Supply generation
    production_per_economy_point: float = config.PRODUCTION_PER_ECONOMY_POINT
    production_per_population: float = config.PRODUCTION_PER_POPULATION
    unproducible_multiplier: float = config.UNPRODUCIBLE_MULTIPLIER
    # Consumption
    essential_goods_threshold: float = config.ESSENTIAL_GOODS_THRESHOLD
    economy_penalty_multiplier: float = config.UNMET_NEEDS_ECONOMY_PENALTY
    population_penalty_multiplier: float = config.UNMET_NEEDS_POPULATION_PENALTY
    # Investment
    base_return_rate: float = config.BASE_INVESTMENT_RETURN_RATE
    return_multiplier: float = config.PLAYER_RETURN_MULTIPLIER
    # Pricing
    prices: PriceSettings = field(default_factory=PriceSettings)

    def __post_init__(self) -> None:
        if self.min_economy > self.max_economy:
            raise ValueError("min_economy cannot exceed max_economy")
        if self.min_population > self.max_population:
            raise ValueError("min_population cannot exceed max_population")
        if not 0 <= self.unproducible_multiplier <= 1:
            raise ValueError("unproducible_multiplier must be within [0, 1]")
        if self.currency_per_economy_point <= 0:
            raise ValueError("currency_per_economy_point must be positive")


@dataclass(frozen=True)
class TownSnapshot:
    """Read-only view of a town for display."""
    name: str
    economy_points: float
    population: int
    balance: float
    player_investment: float
    stock: dict[str, int]


class TownEconomy:
    """Stateful economy of a single port town.

    Driven by ``advance(dt)``, which runs four independent timers in a fixed
    order: supply generation, consumption, population evaluation and
    investment payout. Trades with players go through ``buy_from_player``,
    ``sell_to_player`` and ``player_invest``.
    """

    def __init__(
        self,
        name: str,
        ledger: Ledger,
        settings: TownSettings | None = None,
        producible: Iterable[Good] = (),
        demands: Iterable[Demand] = (),
        generation_modifiers: dict[Good, float] | None = None,
        economy_points: float = config.DEFAULT_ECONOMY_POINTS,
        population: int = config.DEFAULT_POPULATION,
        event_bus: EventBus | None = None,
        rng: random.Random | None = None,
        player_ledger: Ledger | None = None,
    ) -> None:
        self.name = name
        self.ledger = ledger
        self.settings = settings or TownSettings()
        self.producible: frozenset[Good] = frozenset(producible)
        self.demands: tuple[Demand, ...] = tuple(demands)
        self.generation_modifiers: dict[Good, float] = dict(generation_modifiers or {})
        self.event_bus = event_bus or EventBus()
        self.rng = rng or random.Random()
        self.player_ledger = player_ledger

        self._demands_by_good: dict[Good, Demand] = {}
        for demand in self.demands:
            if demand.good in self._demands_by_good:
                raise ValueError(f"{name}: duplicate demand for {demand.good.id}")
            self._demands_by_good[demand.good] = demand

        s = self.settings
        self.economy_points = max(s.min_economy, min(s.max_economy, float(economy_points)))
        self.population = max(s.min_population, min(s.max_population, int(population)))
        self.player_investment = 0.0
        self.last_economy_snapshot = self.economy_points

        # Producible goods first, then demanded ones, without duplicates
        self._tracked_goods: tuple[Good, ...] = tuple(dict.fromkeys(
            [good for good in producible] + [d.good for d in self.demands]
        ))
        self.stock = Inventory()
        for good in self._tracked_goods:
            self.stock.ensure(good)

        self.supply_timer = IntervalTimer(s.supply_interval)
        self.consumption_timer = IntervalTimer(s.consumption_interval)
        self.population_timer = IntervalTimer(s.population_interval)
        self.investment_timer = IntervalTimer(s.investment_interval)

        self._step_events: list[Event] | None = None

        logger.info("%s initialized with %.1f economy points and %d population",
                    name, self.economy_points, self.population)

    # --- Tick loop ---------------------------------------------------------

    def advance(self, dt: float) -> list[Event]:
        """Advance the town by dt seconds.

        Returns the events emitted during this step, in emission order.
        """
        if dt <= 0:
            logger.warning("%s: advance called with non-positive dt %.4f; ignored", self.name, dt)
            return []

        self._step_events = []
        try:
            if self.supply_timer.tick(dt):
                self.generate_supplies()
            if self.consumption_timer.tick(dt):
                self.consume_goods()
            if self.population_timer.tick(dt):
                self.evaluate_population()
            if self.investment_timer.tick(dt):
                self.evaluate_player_investments()
            return self._step_events
        finally:
            self._step_events = None

    def generate_supplies(self) -> None:
        """Produce goods from economy and population, with random jitter."""
        if not self._tracked_goods:
            return

        s = self.settings
        for good in self._tracked_goods:
            rate = (self.economy_points * s.production_per_economy_point
                    + self.population * s.production_per_population)
            if good not in self.producible:
                rate *= s.unproducible_multiplier
            rate *= self.generation_modifiers.get(good, 1.0)
            rate = max(0.0, rate)

            jitter = self.rng.uniform(config.SUPPLY_JITTER_MIN, config.SUPPLY_JITTER_MAX)
            amount = max(0, round(rate * jitter))
            if amount > 0:
                self.add_cargo(good, amount)

        logger.debug("%s generated supplies", self.name)
        self._emit(TownDataChangedEvent(town_name=self.name))

    def consume_goods(self) -> None:
        """Consume demanded goods, spoil surpluses and punish essential shortages."""
        s = self.settings
        unmet_essential = False

        for demand in self.demands:
            good = demand.good
            required = round(demand.consumption_rate * self.population)

            held = self.stock.get(good)
            # A zero entry and a missing entry are the same shortage
            if held == 0:
                if demand.essential:
                    unmet_essential = True
                    logger.warning("%s: completely out of essential %s", self.name, good.name)
                self._emit(GoodsChangedEvent(town_name=self.name, good_id=good.id, quantity=0))
                continue

            consumed = min(required, held)
            if consumed > 0:
                self.stock.remove(good, consumed)
            remaining = held - consumed

            threshold = demand.ideal_quantity * s.essential_goods_threshold
            if demand.essential and remaining < threshold:
                unmet_essential = True
                logger.warning("%s: low on essential %s (%d, threshold %.0f)",
                               self.name, good.name, remaining, threshold)
            self._emit(GoodsChangedEvent(town_name=self.name, good_id=good.id, quantity=remaining))

        # Surplus spoils
        for good, quantity in self.stock.items():
            demand = self._demands_by_good.get(good)
            if demand is None or quantity > demand.ideal_quantity * config.EXCESS_STOCK_RATIO:
                depletion = round(quantity * config.EXCESS_DEPLETION_RATE)
                if depletion > 0:
                    self.remove_cargo(good, depletion)

        if unmet_essential:
            self.adjust_economy(-self.economy_points * s.economy_decay_rate * s.economy_penalty_multiplier)
            self.adjust_population(round(-self.population * s.population_decay_rate
                                         * s.population_penalty_multiplier))
            logger.warning("%s: economy and population suffered due to unmet essential needs", self.name)

        self._emit(TownDataChangedEvent(town_name=self.name))

    def evaluate_population(self) -> None:
        """Grow a prosperous town, shrink a struggling one."""
        s = self.settings
        if (self.economy_points > s.max_economy * config.PROSPERITY_THRESHOLD
                and self.population < s.max_population):
            self.adjust_population(round(self.population * s.population_growth_rate))
        elif (self.economy_points < s.min_economy * config.HARDSHIP_THRESHOLD
                and self.population > s.min_population):
            self.adjust_population(round(-self.population * s.population_decay_rate))

    def evaluate_player_investments(self) -> None:
        """Pay the investor a share of the economy's growth since the last payout.

        Only positive returns are paid; a shrinking economy never takes
        money back from the investor.
        """
        if self.player_investment <= 0:
            return

        s = self.settings
        change_pct = 0.0
        if self.last_economy_snapshot > 0:
            change_pct = (self.economy_points - self.last_economy_snapshot) / self.last_economy_snapshot

        payout = self.player_investment * change_pct * s.base_return_rate * s.return_multiplier

        if payout > config.MIN_PAYOUT:
            if self.player_ledger is not None:
                self.player_ledger.deposit(payout, f"Investment return from {self.name}")
                logger.info("Player investment in %s yielded %.2f (economy change %.2f%%)",
                            self.name, payout, change_pct * 100)
                self._emit(InvestmentPayoutEvent(town_name=self.name, amount=payout,
                                                 economy_change=change_pct))
            else:
                logger.warning("%s: no player ledger set; cannot pay investment return", self.name)

        self.last_economy_snapshot = self.economy_points
        self._emit(TownDataChangedEvent(town_name=self.name))

    # --- State adjustment --------------------------------------------------

    def adjust_economy(self, change: float) -> None:
        """Add change to economy points, clamped to the configured bounds."""
        s = self.settings
        self.economy_points = max(s.min_economy, min(s.max_economy, self.economy_points + change))
        self._emit(EconomyChangedEvent(town_name=self.name, economy_points=self.economy_points))
        self._emit(TownDataChangedEvent(town_name=self.name))

    def adjust_population(self, change: int) -> None:
        """Add change to population, clamped to the configured bounds."""
        s = self.settings
        self.population = max(s.min_population, min(s.max_population, self.population + int(change)))
        logger.debug("%s population adjusted by %d. New population: %d",
                     self.name, change, self.population)
        self._emit(PopulationChangedEvent(town_name=self.name, population=self.population))
        self._emit(TownDataChangedEvent(town_name=self.name))

    def invest_profit_into_economy(self, net_profit: float) -> None:
        """Convert trade profit into economy points."""
        if net_profit <= 0:
            return
        gained = net_profit / self.settings.currency_per_economy_point
        self.adjust_economy(gained)
        logger.debug("%s invested profit %.2f as %.2f economy points", self.name, net_profit, gained)

    def set_player_ledger(self, ledger: Ledger | None) -> None:
        """Set where investment returns are paid."""
        self.player_ledger = ledger

    # --- Stock -------------------------------------------------------------

    def add_cargo(self, good: Good, quantity: int) -> bool:
        """Add goods to the town's stock."""
        if not self.stock.add(good, quantity):
            return False
        new_quantity = self.stock.get(good)
        logger.debug("%s received %d %s. Total now: %d", self.name, quantity, good.name, new_quantity)
        self._emit(GoodsChangedEvent(town_name=self.name, good_id=good.id, quantity=new_quantity))
        self._emit(TownDataChangedEvent(town_name=self.name))
        return True

    def remove_cargo(self, good: Good, quantity: int) -> bool:
        """Remove goods from the town's stock. False if not enough is held."""
        if not self.stock.remove(good, quantity):
            logger.warning("%s: tried to remove %d %s, but only %d available",
                           self.name, quantity, good.name, self.stock.get(good))
            return False
        self._emit(GoodsChangedEvent(town_name=self.name, good_id=good.id,
                                     quantity=self.stock.get(good)))
        self._emit(TownDataChangedEvent(town_name=self.name))
        return True

    def quantity(self, good: Good) -> int:
        """Units of a good in stock."""
        return self.stock.get(good)

    def demand_for(self, good: Good) -> Demand | None:
        """The town's demand entry for a good, if any."""
        return self._demands_by_good.get(good)

    # --- Prices and trades -------------------------------------------------

    def buy_price(self, good: Good) -> float:
        """Unit price the town pays when buying from a player."""
        return self.settings.prices.buy_price(good, self.quantity(good), self.demand_for(good))

    def sell_price(self, good: Good) -> float:
        """Unit price a player pays when buying from the town."""
        return self.settings.prices.sell_price(good, self.quantity(good), self.demand_for(good))

    def buy_from_player(self, good: Good, quantity: int) -> float:
        """Buy goods from a player. Returns the amount paid, 0 on failure."""
        if quantity <= 0:
            return 0.0

        total_cost = self.buy_price(good) * quantity
        if total_cost <= 0:
            logger.warning("%s: refusing to buy %d %s at no cost", self.name, quantity, good.name)
            return 0.0
        if not self.ledger.try_withdraw(total_cost, f"Purchasing {quantity} {good.name} from player"):
            logger.warning("%s: not enough money to buy %d %s. Required %.2f, balance %.2f",
                           self.name, quantity, good.name, total_cost, self.ledger.balance)
            return 0.0

        self.add_cargo(good, quantity)
        self.adjust_economy(total_cost * config.ACQUISITION_ECONOMY_BOOST)
        return total_cost

    def sell_to_player(self, good: Good, quantity: int) -> float:
        """Sell goods to a player. Returns the revenue, 0 on failure."""
        if quantity <= 0:
            return 0.0

        available = self.quantity(good)
        if available < quantity:
            logger.warning("%s: not enough %s to sell. Requested %d, available %d",
                           self.name, good.name, quantity, available)
            return 0.0

        total_revenue = self.sell_price(good) * quantity
        if total_revenue <= 0:
            logger.warning("%s: refusing to sell %d %s for nothing", self.name, quantity, good.name)
            return 0.0
        self.ledger.deposit(total_revenue, f"Selling {quantity} {good.name} to player")
        self.remove_cargo(good, quantity)
        self.invest_profit_into_economy(total_revenue)
        return total_revenue

    def player_invest(self, amount: float, player_ledger: Ledger) -> bool:
        """Take a player's investment into the town's economy.

        The player's ledger becomes the payout destination if none is set.
        """
        if amount <= 0:
            logger.warning("%s: cannot invest a non-positive amount (%.2f)", self.name, amount)
            return False

        if not player_ledger.try_withdraw(amount, f"Investment in {self.name}"):
            logger.warning("%s: player cannot afford to invest %.2f", self.name, amount)
            return False

        if self.player_ledger is None:
            self.player_ledger = player_ledger
        self.player_investment += amount
        self.adjust_economy(amount * self.settings.economy_growth_rate * config.INVESTMENT_ECONOMY_BOOST)
        logger.info("Player invested %.2f in %s. Total investment: %.2f",
                    amount, self.name, self.player_investment)
        return True

    # --- Observers ---------------------------------------------------------

    def snapshot(self) -> TownSnapshot:
        """Read-only state for display."""
        return TownSnapshot(
            name=self.name,
            economy_points=self.economy_points,
            population=self.population,
            balance=self.ledger.balance,
            player_investment=self.player_investment,
            stock=self.stock.as_dict(),
        )

    def _emit(self, event: Event) -> None:
        if self._step_events is not None:
            self._step_events.append(event)
        self.event_bus.publish(event)

    def __repr__(self) -> str:
        return (f"TownEconomy({self.name!r}, economy={self.economy_points:.1f}, "
                f"population={self.population})")
