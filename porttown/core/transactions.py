"""Audit trail for trade protocol outcomes.

Every credit or cargo movement performed by the trade service is recorded
here, successful or not, so trades can be inspected after the fact:
- one ledger of all money and cargo movement
- events for UI notifications
- per-party balance summaries
"""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from uuid import UUID, uuid4

from .. import config
from .events import EventBus, Event


class TransactionType(Enum):
    """Types of recorded transactions."""
    TRADE = "trade"
    TAX = "tax"
    TRANSFER = "transfer"  # Cargo given away without payment
    JETTISON = "jettison"  # Cargo destroyed with no destination
    INVESTMENT = "investment"
    REFUND = "refund"  # Compensating action after a failed trade


@dataclass
class Transaction:
    """Record of a single transaction."""
    timestamp: float  # Simulated seconds
    transaction_type: TransactionType
    from_party: str | None
    to_party: str | None
    credits: float = 0.0
    good_id: str | None = None
    quantity: int = 0
    reason: str = ""
    success: bool = True
    error_message: str = ""
    id: UUID = field(default_factory=uuid4)


@dataclass
class TransactionCompleteEvent(Event):
    """Event fired when a transaction is recorded."""
    transaction_id: UUID = field(default_factory=uuid4)
    transaction_type: str = ""
    from_party: str | None = None
    to_party: str | None = None
    credits: float = 0.0
    good_id: str | None = None
    quantity: int = 0
    success: bool = True


class TransactionService:
    """Records trade outcomes with a bounded history."""

    def __init__(
        self,
        event_bus: EventBus | None = None,
        max_history: int = config.MAX_TRANSACTION_HISTORY
    ) -> None:
        self.event_bus = event_bus
        self._ledger: list[Transaction] = []
        self._max_ledger_size = max_history
        self._game_time: float = 0.0

    def set_game_time(self, game_time: float) -> None:
        """Update current simulated time for transaction timestamps."""
        self._game_time = game_time

    def record(
        self,
        transaction_type: TransactionType,
        from_party: str | None,
        to_party: str | None,
        credits: float = 0.0,
        good_id: str | None = None,
        quantity: int = 0,
        reason: str = "",
        success: bool = True,
        error_message: str = ""
    ) -> Transaction:
        """Record a transaction and notify subscribers.

        Args:
            transaction_type: Category of the transaction
            from_party: Name of the paying / giving party (None for a source outside the system)
            to_party: Name of the receiving party (None for a sink, e.g. cargo thrown overboard)
            credits: Money moved
            good_id: Cargo moved, if any
            quantity: Units of cargo moved
            reason: Human-readable description
            success: Whether the movement happened
            error_message: Why it failed

        Returns:
            The stored transaction record
        """
        transaction = Transaction(
            timestamp=self._game_time,
            transaction_type=transaction_type,
            from_party=from_party,
            to_party=to_party,
            credits=credits,
            good_id=good_id,
            quantity=quantity,
            reason=reason,
            success=success,
            error_message=error_message,
        )
        self._record_transaction(transaction)

        if self.event_bus is not None:
            self.event_bus.publish(TransactionCompleteEvent(
                transaction_id=transaction.id,
                transaction_type=transaction_type.value,
                from_party=from_party,
                to_party=to_party,
                credits=credits,
                good_id=good_id,
                quantity=quantity,
                success=success,
            ))

        return transaction

    def _record_transaction(self, transaction: Transaction) -> None:
        """Add transaction to ledger, trimming if needed."""
        self._ledger.append(transaction)

        if len(self._ledger) > self._max_ledger_size:
            self._ledger = self._ledger[-self._max_ledger_size:]

    def get_ledger(
        self,
        party: str | None = None,
        after: float | None = None,
        transaction_type: TransactionType | None = None,
        limit: int = 100
    ) -> list[Transaction]:
        """Query the transaction history.

        Args:
            party: Filter by party involvement (as sender or receiver)
            after: Only return transactions after this simulated time
            transaction_type: Filter by transaction type
            limit: Maximum number of transactions to return

        Returns:
            List of matching transactions, newest first
        """
        results = []

        for tx in reversed(self._ledger):
            if party is not None and tx.from_party != party and tx.to_party != party:
                continue
            if after is not None and tx.timestamp <= after:
                continue
            if transaction_type is not None and tx.transaction_type != transaction_type:
                continue

            results.append(tx)
            if len(results) >= limit:
                break

        return results

    def get_balance_changes(
        self,
        party: str,
        after: float | None = None
    ) -> tuple[float, int]:
        """Calculate net credit change and cargo units moved for a party.

        Returns:
            Tuple of (credits_delta, units_traded)
        """
        credits_delta = 0.0
        units_traded = 0

        for tx in self._ledger:
            if after is not None and tx.timestamp <= after:
                continue
            if not tx.success:
                continue
            # A refund undoes cargo that never changed hands
            if tx.transaction_type == TransactionType.REFUND:
                continue

            # Credits flow opposite to cargo in a trade: the cargo receiver pays
            if tx.transaction_type == TransactionType.TRADE:
                if tx.to_party == party:
                    credits_delta -= tx.credits
                if tx.from_party == party:
                    credits_delta += tx.credits
            else:
                if tx.to_party == party:
                    credits_delta += tx.credits
                if tx.from_party == party:
                    credits_delta -= tx.credits

            if tx.quantity > 0 and party in (tx.to_party, tx.from_party):
                units_traded += tx.quantity

        return credits_delta, units_traded

    def clear_ledger(self) -> None:
        """Clear all transactions."""
        self._ledger.clear()

    def __len__(self) -> int:
        return len(self._ledger)
