"""
RevenueAccumulator - running revenue total.

The total only ever grows: ticks add a fixed non-negative increment and
transactions must carry a positive amount. Invalid input is rejected
before anything is applied.
"""

import math

from revdash.models.errors import InvalidAmountError
from revdash.models.revenue import RevenueState
from revdash.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.REVENUE)


class RevenueAccumulator:
    """
    Holds the running total and exposes derived presentation metrics.

    No internal concurrency: every mutation is one synchronous call made by
    the SimulationController from a timer callback.

    Example:
        acc = RevenueAccumulator(increment=0.23)
        acc.initialize(47832.56)
        acc.tick(); acc.tick(); acc.tick()
        acc.total  # ≈ 47833.25
    """

    def __init__(
        self,
        increment: float = 0.23,
        today_factor: float = 0.032,
        month_factor: float = 0.41,
        days_per_month: int = 30,
    ):
        if not math.isfinite(increment) or increment < 0:
            raise InvalidAmountError(increment, "per-tick increment must be >= 0")

        self.increment = increment
        self.today_factor = today_factor
        self.month_factor = month_factor
        self.days_per_month = days_per_month

        self._total = 0.0
        self.tick_count = 0
        self.transaction_count = 0

    def initialize(self, seed: float) -> None:
        """Reset the total to seed (start of a session)"""
        if not math.isfinite(seed) or seed < 0:
            raise InvalidAmountError(seed, "seed must be >= 0")
        self._total = float(seed)
        self.tick_count = 0
        self.transaction_count = 0
        log.info("Revenue initialized", seed=f"{seed:.2f}")

    def tick(self) -> float:
        """Apply one per-second increment; returns the new total"""
        self._total += self.increment
        self.tick_count += 1
        log.debug("Tick applied", total=f"{self._total:.2f}")
        return self._total

    def apply_transaction(self, amount: float) -> float:
        """
        Add a transaction amount to the total.

        Raises:
            InvalidAmountError: amount is not a finite number > 0
        """
        if isinstance(amount, bool) or not isinstance(amount, (int, float)) or not math.isfinite(amount) or amount <= 0:
            log.error("Rejected transaction amount", amount=amount)
            raise InvalidAmountError(amount)

        self._total += amount
        self.transaction_count += 1
        return self._total

    # === Read side ===

    @property
    def total(self) -> float:
        return self._total

    @property
    def today(self) -> float:
        return self.state().today

    @property
    def month(self) -> float:
        return self.state().month

    @property
    def avg_per_day(self) -> float:
        return self.state().avg_per_day

    def state(self) -> RevenueState:
        """Immutable snapshot with derived metrics"""
        return RevenueState(
            total=self._total,
            today_factor=self.today_factor,
            month_factor=self.month_factor,
            days_per_month=self.days_per_month,
        )
