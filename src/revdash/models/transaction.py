"""Transaction domain model and the per-category tier catalog"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Tuple

from revdash.models.enums import TransactionCategory
from revdash.models.errors import InvalidAmountError, TransactionCatalogError


@dataclass(frozen=True)
class CategoryTiers:
    """
    Fixed description and amount tables for one transaction category.

    Both tables are sampled independently, so any description can pair
    with any amount of the same category.
    """
    category: TransactionCategory
    descriptions: Tuple[str, ...]
    amounts: Tuple[float, ...]

    def __post_init__(self):
        if not self.descriptions:
            raise TransactionCatalogError(f"{self.category.value}: no descriptions")
        if not self.amounts:
            raise TransactionCatalogError(f"{self.category.value}: no amount tiers")
        for amount in self.amounts:
            if not math.isfinite(amount) or amount <= 0:
                raise TransactionCatalogError(
                    f"{self.category.value}: amount tier {amount!r} must be positive"
                )


@dataclass(frozen=True)
class TransactionCatalog:
    """All category tier tables, keyed by category"""
    tiers: Dict[TransactionCategory, CategoryTiers] = field(default_factory=dict)

    def __post_init__(self):
        missing = [c.value for c in TransactionCategory if c not in self.tiers]
        if missing:
            raise TransactionCatalogError(f"Missing categories: {missing}")

    @property
    def categories(self) -> Tuple[TransactionCategory, ...]:
        """Categories in declaration order (uniform sampling base)"""
        return tuple(c for c in TransactionCategory if c in self.tiers)

    def for_category(self, category: TransactionCategory) -> CategoryTiers:
        return self.tiers[category]

    def is_consistent(self, tx: "Transaction") -> bool:
        """True when amount and description both come from tx.category's tables"""
        tiers = self.tiers.get(tx.category)
        if tiers is None:
            return False
        return tx.amount in tiers.amounts and tx.description in tiers.descriptions


@dataclass(frozen=True)
class Transaction:
    """
    Immutable synthetic transaction record.

    Attributes:
        id: Short random token (uniqueness not guaranteed)
        amount: Positive amount from the category amount tiers
        timestamp: Creation instant
        category: subscription / one-time / enterprise
        description: Entry from the category description list
    """
    id: str
    amount: float
    timestamp: datetime
    category: TransactionCategory
    description: str

    def __post_init__(self):
        if not math.isfinite(self.amount) or self.amount <= 0:
            raise InvalidAmountError(self.amount)
