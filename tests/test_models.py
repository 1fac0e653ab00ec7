from datetime import datetime

import pytest

from revdash.models.config import SimulationConfig, default_catalog
from revdash.models.enums import TransactionCategory
from revdash.models.errors import InvalidAmountError, TransactionCatalogError
from revdash.models.transaction import CategoryTiers, Transaction, TransactionCatalog


def test_transaction_requires_positive_amount():
    with pytest.raises(InvalidAmountError):
        Transaction("abcdef", 0.0, datetime(2025, 1, 1), TransactionCategory.ONE_TIME, "API Credits")


def test_catalog_requires_every_category():
    tiers = default_catalog().for_category(TransactionCategory.SUBSCRIPTION)
    with pytest.raises(TransactionCatalogError):
        TransactionCatalog(tiers={TransactionCategory.SUBSCRIPTION: tiers})


def test_tiers_reject_empty_tables():
    with pytest.raises(TransactionCatalogError):
        CategoryTiers(TransactionCategory.ENTERPRISE, descriptions=(), amounts=(499.99,))
    with pytest.raises(TransactionCatalogError):
        CategoryTiers(TransactionCategory.ENTERPRISE, descriptions=("SLA Upgrade",), amounts=())


def test_is_consistent_rejects_cross_category_values():
    catalog = default_catalog()
    tx = Transaction("abcdef", 4999.99, datetime(2025, 1, 1), TransactionCategory.SUBSCRIPTION, "Monthly Pro")

    assert not catalog.is_consistent(tx)


@pytest.mark.parametrize("overrides", [
    {"min_delay_ms": 8000, "max_delay_ms": 3000},
    {"feed_capacity": 0},
    {"tick_interval_ms": 0},
    {"render_fps": 0},
    {"initial_revenue": -1},
])
def test_config_validation(overrides):
    with pytest.raises(ValueError):
        SimulationConfig(**overrides)
