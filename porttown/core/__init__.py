"""Core simulation plumbing: ledgers, events, goods and the world container."""
from .world import World, SimulationClock
from .events import EventBus, Event
from .ledger import Ledger
from .registries import Good, CargoCatalog
from .transactions import TransactionService, Transaction, TransactionType

__all__ = [
    'World', 'SimulationClock', 'EventBus', 'Event',
    'Ledger',
    'Good', 'CargoCatalog',
    'TransactionService', 'Transaction', 'TransactionType',
]
