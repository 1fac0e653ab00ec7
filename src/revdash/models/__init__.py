"""
Models package - Data models for the revenue simulation
"""

from .enums import SimulationState, TransactionCategory, EventSource, LogLevel, LogCategory
from .errors import SimulationError, InvalidAmountError, TransactionCatalogError, ControllerShutdownError
from .transaction import Transaction, CategoryTiers, TransactionCatalog
from .revenue import RevenueState
from .animation import AnimationState
from .config import SimulationConfig, default_catalog

__all__ = [
    "SimulationState",
    "TransactionCategory",
    "EventSource",
    "LogLevel",
    "LogCategory",
    "SimulationError",
    "InvalidAmountError",
    "TransactionCatalogError",
    "ControllerShutdownError",
    "Transaction",
    "CategoryTiers",
    "TransactionCatalog",
    "RevenueState",
    "AnimationState",
    "SimulationConfig",
    "default_catalog",
]
