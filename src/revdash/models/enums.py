"""
Enums for the revenue simulation state machine
"""

from enum import Enum, auto


class SimulationState(Enum):
    """
    Controller operating states

    LIVE: revenue ticks and transactions are being generated
    PAUSED: every timer is cancelled, totals are frozen
    """
    LIVE = auto()
    PAUSED = auto()


class TransactionCategory(Enum):
    """Transaction categories (value = wire/config name)"""
    SUBSCRIPTION = "subscription"
    ONE_TIME = "one-time"
    ENTERPRISE = "enterprise"


class EventSource(Enum):
    """Event source identifiers for application events"""
    SIMULATION = auto()   # SimulationController state changes
    REVENUE = auto()      # Accumulator ticks
    GENERATOR = auto()    # TransactionGenerator emissions


class LogLevel(Enum):
    """Log severity levels"""
    DEBUG = auto()
    INFO = auto()
    WARN = auto()
    ERROR = auto()


class LogCategory(Enum):
    """Log categories for grouping related events"""
    CONFIG = auto()       # Configuration loading, validation
    SIMULATION = auto()   # Controller state machine
    REVENUE = auto()      # Accumulator ticks and totals
    TRANSACTION = auto()  # Generator and feed
    ANIMATION = auto()    # Counter interpolation
    RENDER = auto()       # Render loop
    EVENT = auto()        # Event bus events and handling
    SYSTEM = auto()       # Startup, shutdown, errors

    API = auto()
    WEBSOCKET = auto()

    SHUTDOWN = auto()
    TASK = auto()
