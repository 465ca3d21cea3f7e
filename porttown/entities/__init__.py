"""Towns, ports and ships, with their factories."""
from .towns import TownType, create_town
from .ports import Port, create_port
from .ships import Ship, ShipType, create_ship

__all__ = [
    'TownType', 'create_town',
    'Port', 'create_port',
    'Ship', 'ShipType', 'create_ship',
]
