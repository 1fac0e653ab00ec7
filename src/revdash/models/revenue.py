"""Revenue read-side state"""

from dataclasses import dataclass


@dataclass(frozen=True)
class RevenueState:
    """
    Snapshot of the running total plus its presentation projections.

    today/month/avg_per_day are derived on read from total and are never
    tracked independently.
    """
    total: float
    today_factor: float = 0.032
    month_factor: float = 0.41
    days_per_month: int = 30

    @property
    def today(self) -> float:
        return self.total * self.today_factor

    @property
    def month(self) -> float:
        return self.total * self.month_factor

    @property
    def avg_per_day(self) -> float:
        return self.month / self.days_per_month
