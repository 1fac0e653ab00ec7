"""Simulation configuration model"""

from dataclasses import dataclass, field

from revdash.models.enums import TransactionCategory
from revdash.models.transaction import CategoryTiers, TransactionCatalog


def default_catalog() -> TransactionCatalog:
    """Built-in tier tables (same values as config/factory_defaults.yaml)"""
    return TransactionCatalog(tiers={
        TransactionCategory.SUBSCRIPTION: CategoryTiers(
            category=TransactionCategory.SUBSCRIPTION,
            descriptions=("Pro Plan Renewal", "Team License", "Annual Subscription", "Monthly Pro"),
            amounts=(9.99, 19.99, 49.99, 99.99),
        ),
        TransactionCategory.ONE_TIME: CategoryTiers(
            category=TransactionCategory.ONE_TIME,
            descriptions=("API Credits", "Export Package", "Custom Report", "Data Bundle"),
            amounts=(4.99, 14.99, 29.99, 49.99),
        ),
        TransactionCategory.ENTERPRISE: CategoryTiers(
            category=TransactionCategory.ENTERPRISE,
            descriptions=("Enterprise Contract", "Custom Integration", "SLA Upgrade", "Volume License"),
            amounts=(499.99, 999.99, 2499.99, 4999.99),
        ),
    })


@dataclass(frozen=True)
class SimulationConfig:
    """
    Every fixed constant of the simulation.

    Times are in milliseconds. Default values defined here are the single
    source of truth used when YAML configuration is unavailable.
    """

    # === Revenue ===
    initial_revenue: float = 47832.56
    revenue_per_tick: float = 0.23
    tick_interval_ms: float = 1000.0

    # === Derived metrics ===
    today_factor: float = 0.032
    month_factor: float = 0.41
    days_per_month: int = 30
    growth_percent: float = 34.7  # static display figure

    # === Counter animation ===
    animation_duration_ms: float = 500.0
    render_fps: int = 60

    # === Feed ===
    feed_capacity: int = 10

    # === Transaction schedule ===
    burst_count: int = 5
    burst_spacing_ms: float = 200.0
    min_delay_ms: float = 3000.0
    max_delay_ms: float = 8000.0

    catalog: TransactionCatalog = field(default_factory=default_catalog)

    def __post_init__(self):
        if self.initial_revenue < 0:
            raise ValueError("initial_revenue must be >= 0")
        if self.revenue_per_tick < 0:
            raise ValueError("revenue_per_tick must be >= 0")
        if self.tick_interval_ms <= 0:
            raise ValueError("tick_interval_ms must be > 0")
        if self.feed_capacity < 1:
            raise ValueError("feed_capacity must be >= 1")
        if self.burst_count < 0:
            raise ValueError("burst_count must be >= 0")
        if not 0 <= self.min_delay_ms < self.max_delay_ms:
            raise ValueError("delay bounds must satisfy 0 <= min_delay_ms < max_delay_ms")
        if not 1 <= self.render_fps <= 240:
            raise ValueError("render_fps must be within 1..240")
