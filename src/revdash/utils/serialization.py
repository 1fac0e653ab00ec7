"""
Serialization utilities - Central enum and model serialization for JSON

Provides conversion between:
- Enums ↔ Strings (SimulationState, TransactionCategory, ...)
- Domain models → Dicts (Transaction, DashboardSnapshot)

Single source of truth for the websocket stream and config parsing.
"""

from enum import Enum
from typing import Any, Dict, Optional, Type, TypeVar

from revdash.models.dashboard import DashboardSnapshot
from revdash.models.enums import TransactionCategory
from revdash.models.transaction import Transaction

T = TypeVar('T', bound=Enum)


class Serializer:
    """Central enum and model serialization"""

    # ========================================================================
    # ENUM SERIALIZATION
    # ========================================================================

    @staticmethod
    def enum_to_str(value: Optional[Enum]) -> Optional[str]:
        """Convert any enum to string name"""
        return value.name if value else None

    @staticmethod
    def to_str(value) -> Optional[str]:
        """
        Polymorphic conversion: handles Enum, str and anything else

        Args:
            value: Enum, str, or None

        Returns:
            String representation or None
        """
        if value is None:
            return None
        if isinstance(value, Enum):
            return value.name
        if isinstance(value, str):
            return value
        return str(value)

    @staticmethod
    def str_to_enum(value: str, enum_type: Type[T]) -> T:
        """Convert string name to enum, raise ValueError if invalid"""
        try:
            return enum_type[value]
        except KeyError:
            raise ValueError(f"Invalid {enum_type.__name__}: {value}")

    @staticmethod
    def category_from_str(value: str) -> TransactionCategory:
        """
        Parse a transaction category from its wire value ("one-time")
        or its enum name ("ONE_TIME").
        """
        try:
            return TransactionCategory(value)
        except ValueError:
            pass
        try:
            return TransactionCategory[value.upper().replace("-", "_")]
        except KeyError:
            raise ValueError(f"Invalid TransactionCategory: {value}")

    # ========================================================================
    # MODEL SERIALIZATION
    # ========================================================================

    @staticmethod
    def transaction_to_dict(tx: Transaction) -> Dict[str, Any]:
        return {
            "id": tx.id,
            "amount": tx.amount,
            "timestamp": tx.timestamp.isoformat(),
            "category": tx.category.value,
            "description": tx.description,
        }

    @staticmethod
    def snapshot_to_dict(snapshot: DashboardSnapshot) -> Dict[str, Any]:
        """JSON-compatible dict of a dashboard snapshot"""
        return {
            "displayed_total": snapshot.displayed_total,
            "total": snapshot.total,
            "today": snapshot.today,
            "month": snapshot.month,
            "avg_per_day": snapshot.avg_per_day,
            "revenue_per_second": snapshot.revenue_per_second,
            "growth_percent": snapshot.growth_percent,
            "state": snapshot.state.name,
            "live": snapshot.is_live,
            "transactions": [Serializer.transaction_to_dict(tx) for tx in snapshot.transactions],
        }
