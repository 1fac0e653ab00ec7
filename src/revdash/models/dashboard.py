"""Dashboard read model consumed by the presentation layer"""

from dataclasses import dataclass
from typing import Tuple

from revdash.models.enums import SimulationState
from revdash.models.transaction import Transaction


@dataclass(frozen=True)
class DashboardSnapshot:
    """
    Point-in-time view of the simulation.

    displayed_total is the animator sample (what the counter shows right
    now); total is the exact accumulated value it is heading to.
    """
    displayed_total: float
    total: float
    today: float
    month: float
    avg_per_day: float
    revenue_per_second: float
    growth_percent: float
    state: SimulationState
    transactions: Tuple[Transaction, ...] = ()

    @property
    def is_live(self) -> bool:
        return self.state is SimulationState.LIVE
