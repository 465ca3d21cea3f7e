"""Town economy and trade simulation."""
from .economy import TownEconomy, TownSettings, Demand
from .pricing import PriceSettings, calculate_price
from .resources import Inventory
from .selection import ActionState, SelectionSession
from .trade import TradeService, TradeResult, TradeError

__all__ = [
    'TownEconomy', 'TownSettings', 'Demand',
    'PriceSettings', 'calculate_price',
    'Inventory',
    'ActionState', 'SelectionSession',
    'TradeService', 'TradeResult', 'TradeError',
]
