"""Simulation constants and default settings."""

# Tick driver
FPS = 60
TITLE = "Port Town: Trade and Settlement Economy"
DEFAULT_RUN_DURATION = 600.0  # Simulated seconds for the demo run
MIN_SIMULATION_SPEED = 1.0
MAX_SIMULATION_SPEED = 100.0

# Logging
LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
LOG_LEVEL = "INFO"

# Economy points
DEFAULT_ECONOMY_POINTS = 100.0
MIN_ECONOMY_POINTS = 10.0
MAX_ECONOMY_POINTS = 1000.0
ECONOMY_GROWTH_RATE = 0.1
ECONOMY_DECAY_RATE = 0.05
CURRENCY_PER_ECONOMY_POINT = 100.0  # $100 of profit buys 1 economy point

# Population
DEFAULT_POPULATION = 100
MIN_POPULATION = 10
MAX_POPULATION = 1000
POPULATION_GROWTH_RATE = 0.005
POPULATION_DECAY_RATE = 0.015
PROSPERITY_THRESHOLD = 0.75  # Fraction of max economy above which towns grow
HARDSHIP_THRESHOLD = 1.5  # Multiple of min economy below which towns shrink

# Timer intervals (seconds)
SUPPLY_GENERATION_INTERVAL = 60.0
CONSUMPTION_INTERVAL = 30.0
POPULATION_EVALUATION_INTERVAL = 120.0
INVESTMENT_PAYOUT_INTERVAL = 600.0

# Supply generation
PRODUCTION_PER_ECONOMY_POINT = 0.005
PRODUCTION_PER_POPULATION = 0.002
UNPRODUCIBLE_MULTIPLIER = 0.1  # Import friction for goods the town cannot make
SUPPLY_JITTER_MIN = 0.8
SUPPLY_JITTER_MAX = 1.2

# Consumption
ESSENTIAL_GOODS_THRESHOLD = 0.3
UNMET_NEEDS_ECONOMY_PENALTY = 0.75
UNMET_NEEDS_POPULATION_PENALTY = 1.0
EXCESS_STOCK_RATIO = 1.5  # Stock above ideal * ratio starts to spoil
EXCESS_DEPLETION_RATE = 0.05

# Pricing
BUY_PRICE_MULTIPLIER = 1.1  # Town pays more than base when buying from players
SELL_PRICE_MULTIPLIER = 0.9  # Town sells cheaper than base to players
PRICE_ELASTICITY = 0.4
MIN_PRICE_MULTIPLIER = 0.6
MAX_PRICE_MULTIPLIER = 1.8
ACQUISITION_ECONOMY_BOOST = 0.005  # Economy gained per credit spent buying goods

# Player investment
BASE_INVESTMENT_RETURN_RATE = 0.01
PLAYER_RETURN_MULTIPLIER = 2.0
INVESTMENT_ECONOMY_BOOST = 0.05
MIN_PAYOUT = 0.01

# Ports and ships
DEFAULT_TAX_PERCENTAGE = 0.1
DEFAULT_TOWN_TREASURY = 5000.0
DEFAULT_PORT_TREASURY = 0.0
DEFAULT_SHIP_CREDITS = 1000.0
SELECTION_LARGE_STEP = 10

# Audit trail
MAX_TRANSACTION_HISTORY = 10000
