"""Ship-initiated trade protocol: buying, selling, giving and investing.

Each operation composes cargo moves, ledger moves, port tax and economy
feedback into one step. Failures are reported through ``TradeResult`` and
never leave partial state behind, except where noted (selling several goods
at once settles each good on its own).
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from ..core.registries import Good
from ..core.transactions import TransactionService, TransactionType
from .selection import ActionState

if TYPE_CHECKING:
    from ..entities.ports import Port
    from ..entities.ships import Ship

logger = logging.getLogger(__name__)


class TradeError(Enum):
    """Why a trade step did not go through."""
    INSUFFICIENT_FUNDS = "insufficient_funds"
    INSUFFICIENT_STOCK = "insufficient_stock"
    INVALID_QUANTITY = "invalid_quantity"
    MISSING_DESTINATION = "missing_destination"
    COMPENSATED = "compensated"  # Sale reversed because the buyer could not pay


@dataclass(frozen=True)
class TradeResult:
    """Outcome of one trade step."""
    success: bool
    good: Good | None = None
    quantity: int = 0
    amount: float = 0.0  # Credits paid to or by the acting ship, before tax
    destination: str | None = None
    error: TradeError | None = None

    @classmethod
    def failed(
        cls,
        error: TradeError,
        good: Good | None = None,
        quantity: int = 0,
        destination: str | None = None
    ) -> TradeResult:
        return cls(success=False, good=good, quantity=quantity, destination=destination, error=error)


class TradeService:
    """Runs trades for ships against ports, towns and other ships."""

    def __init__(self, transactions: TransactionService | None = None) -> None:
        self.transactions = transactions or TransactionService()

    # --- Buying from a town ------------------------------------------------

    def buy_from_town(self, ship: Ship, good: Good, quantity: int) -> TradeResult:
        """Buy goods from the town at the ship's current port.

        The town sells first; if the ship then cannot pay, the goods go back
        into the town's stock and the ship's ledger is left untouched.
        """
        port = ship.current_port
        if port is None:
            logger.info("%s: cannot buy cargo, not in a port", ship.name)
            return TradeResult.failed(TradeError.MISSING_DESTINATION, good, quantity)
        if quantity <= 0:
            return TradeResult.failed(TradeError.INVALID_QUANTITY, good, quantity, port.town.name)

        town = port.town
        revenue = town.sell_to_player(good, quantity)
        if revenue <= 0:
            logger.info("%s: %s could not sell %d %s", ship.name, town.name, quantity, good.name)
            self.transactions.record(
                TransactionType.TRADE, town.name, ship.name, good_id=good.id, quantity=quantity,
                reason=f"{ship.name} buying from {town.name}", success=False,
                error_message="insufficient stock",
            )
            return TradeResult.failed(TradeError.INSUFFICIENT_STOCK, good, quantity, town.name)

        if not ship.ledger.try_withdraw(revenue, f"Purchasing {quantity} {good.name} from {town.name}"):
            # Compensate: the stock goes back; a local add cannot fail
            town.add_cargo(good, quantity)
            logger.warning("%s: insufficient funds to buy %d %s. Needed %.2f, balance %.2f",
                           ship.name, quantity, good.name, revenue, ship.ledger.balance)
            self.transactions.record(
                TransactionType.REFUND, ship.name, town.name, good_id=good.id, quantity=quantity,
                reason=f"Returned unpaid {good.name} to {town.name}",
            )
            return TradeResult.failed(TradeError.COMPENSATED, good, quantity, town.name)

        ship.add_cargo(good, quantity)
        self.transactions.record(
            TransactionType.TRADE, town.name, ship.name, credits=revenue, good_id=good.id,
            quantity=quantity, reason=f"{ship.name} bought from {town.name}",
        )
        logger.info("%s bought %d %s from %s for %.2f", ship.name, quantity, good.name, town.name, revenue)
        return TradeResult(success=True, good=good, quantity=quantity, amount=revenue, destination=town.name)

    # --- Selected-cargo actions --------------------------------------------

    def execute_selected_action(self, ship: Ship) -> list[TradeResult]:
        """Run the ship's current sell or drop action on its selected cargo.

        The ship returns to normal mode afterwards. Nothing happens when no
        cargo is selected with a positive quantity.
        """
        if not ship.selection.selected_items():
            logger.info("%s: no cargo selected for action", ship.name)
            return []

        results: list[TradeResult] = []
        if ship.action_state == ActionState.SELLING:
            results = self.sell_selected(ship)
        elif ship.action_state == ActionState.DROPPING:
            results = self.drop_selected(ship)

        ship.set_action_state(ActionState.NORMAL)
        return results

    def sell_selected(self, ship: Ship) -> list[TradeResult]:
        """Sell selected cargo to the current port, or else the ship in range.

        Every good settles on its own: one failing does not undo the others.
        """
        items = ship.selection.selected_items()
        if ship.current_port is not None:
            return [self._sell_to_port(ship, ship.current_port, good, qty) for good, qty in items]
        if ship.current_other_ship is not None:
            return [self._sell_to_ship(ship, ship.current_other_ship, good, qty) for good, qty in items]

        logger.warning("%s: no port or other ship in range to sell cargo to", ship.name)
        return [TradeResult.failed(TradeError.MISSING_DESTINATION, good, qty) for good, qty in items]

    def _sell_to_port(self, ship: Ship, port: Port, good: Good, quantity: int) -> TradeResult:
        town = port.town
        if not ship.cargo.has(good, quantity):
            return TradeResult.failed(TradeError.INVALID_QUANTITY, good, quantity, town.name)

        unit_price = town.buy_price(good)
        paid = town.buy_from_player(good, quantity)
        if paid <= 0:
            logger.warning("%s: %s could not buy %d %s at %.2f", ship.name, town.name,
                           quantity, good.name, unit_price)
            self.transactions.record(
                TransactionType.TRADE, ship.name, town.name, credits=unit_price * quantity,
                good_id=good.id, quantity=quantity, reason=f"{ship.name} selling to {town.name}",
                success=False, error_message="town has insufficient funds",
            )
            return TradeResult.failed(TradeError.INSUFFICIENT_FUNDS, good, quantity, town.name)

        tax = paid * port.tax_percentage
        ship.ledger.deposit(paid - tax, f"Sold {quantity} {good.name} at {town.name} (net of tax)")
        port.ledger.deposit(tax, f"Tax on {quantity} {good.name} from {ship.name}")
        ship.remove_cargo(good, quantity)

        self.transactions.record(
            TransactionType.TRADE, ship.name, town.name, credits=paid, good_id=good.id,
            quantity=quantity, reason=f"{ship.name} sold to {town.name}",
        )
        self.transactions.record(
            TransactionType.TAX, ship.name, port.name, credits=tax,
            reason=f"Port tax on {good.name}",
        )
        logger.info("%s sold %d %s to %s for %.2f (tax %.2f)",
                    ship.name, quantity, good.name, town.name, paid, tax)
        return TradeResult(success=True, good=good, quantity=quantity, amount=paid, destination=town.name)

    def _sell_to_ship(self, seller: Ship, buyer: Ship, good: Good, quantity: int) -> TradeResult:
        if not seller.cargo.has(good, quantity):
            return TradeResult.failed(TradeError.INVALID_QUANTITY, good, quantity, buyer.name)

        # Ship-to-ship deals use the good's base value, not town pricing
        value = good.base_value * quantity
        if not buyer.ledger.try_withdraw(value, f"Buying {quantity} {good.name} from {seller.name}"):
            logger.warning("%s could not buy %d %s from %s: insufficient funds",
                           buyer.name, quantity, good.name, seller.name)
            self.transactions.record(
                TransactionType.TRADE, seller.name, buyer.name, credits=value, good_id=good.id,
                quantity=quantity, reason=f"{seller.name} selling to {buyer.name}",
                success=False, error_message="buyer has insufficient funds",
            )
            return TradeResult.failed(TradeError.INSUFFICIENT_FUNDS, good, quantity, buyer.name)

        seller.remove_cargo(good, quantity)
        buyer.add_cargo(good, quantity)
        seller.ledger.deposit(value, f"Sold {quantity} {good.name} to {buyer.name}")

        self.transactions.record(
            TransactionType.TRADE, seller.name, buyer.name, credits=value, good_id=good.id,
            quantity=quantity, reason=f"{seller.name} sold to {buyer.name}",
        )
        logger.info("%s sold %d %s to %s for %.2f", seller.name, quantity, good.name, buyer.name, value)
        return TradeResult(success=True, good=good, quantity=quantity, amount=value, destination=buyer.name)

    def drop_selected(self, ship: Ship) -> list[TradeResult]:
        """Give selected cargo to the port's town or the ship in range, or throw it overboard."""
        port = ship.current_port
        other = ship.current_other_ship
        results = []

        for good, quantity in ship.selection.selected_items():
            if not ship.remove_cargo(good, quantity):
                results.append(TradeResult.failed(TradeError.INVALID_QUANTITY, good, quantity))
                continue

            if port is not None:
                port.town.add_cargo(good, quantity)
                destination = port.town.name
                tx_type = TransactionType.TRANSFER
            elif other is not None:
                other.add_cargo(good, quantity)
                destination = other.name
                tx_type = TransactionType.TRANSFER
            else:
                destination = None
                tx_type = TransactionType.JETTISON

            self.transactions.record(
                tx_type, ship.name, destination, good_id=good.id, quantity=quantity,
                reason=f"{ship.name} dropped {good.name}",
            )
            results.append(TradeResult(success=True, good=good, quantity=quantity, destination=destination))

        if port is None and other is None:
            logger.info("%s dropped selected cargo into the sea", ship.name)
        else:
            logger.info("%s gave selected cargo to %s", ship.name,
                        port.town.name if port is not None else other.name)
        return results

    # --- Investment --------------------------------------------------------

    def invest(self, ship: Ship, amount: float) -> TradeResult:
        """Invest from the ship's ledger in the current port's town."""
        port = ship.current_port
        if port is None:
            return TradeResult.failed(TradeError.MISSING_DESTINATION)
        if amount <= 0:
            return TradeResult.failed(TradeError.INVALID_QUANTITY, destination=port.town.name)

        town = port.town
        if not town.player_invest(amount, ship.ledger):
            self.transactions.record(
                TransactionType.INVESTMENT, ship.name, town.name, credits=amount,
                reason=f"{ship.name} investing in {town.name}", success=False,
                error_message="insufficient funds",
            )
            return TradeResult.failed(TradeError.INSUFFICIENT_FUNDS, destination=town.name)

        self.transactions.record(
            TransactionType.INVESTMENT, ship.name, town.name, credits=amount,
            reason=f"{ship.name} invested in {town.name}",
        )
        return TradeResult(success=True, amount=amount, destination=town.name)
