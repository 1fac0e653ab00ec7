"""
Dashboard schemas - Pydantic models for the read-model endpoints

Built from the engine's DashboardSnapshot / Transaction dataclasses via
the from_* classmethods; the engine itself never depends on pydantic.
"""

from datetime import datetime
from typing import List

from pydantic import BaseModel, Field

from revdash.models.dashboard import DashboardSnapshot
from revdash.models.transaction import Transaction


class TransactionResponse(BaseModel):
    """One entry of the recent-transactions feed"""
    id: str = Field(description="Random 6-character identifier (may collide)")
    amount: float = Field(gt=0, description="Positive amount in dollars")
    timestamp: datetime = Field(description="Wall-clock creation time")
    category: str = Field(description="subscription | one-time | enterprise")
    description: str

    @classmethod
    def from_transaction(cls, tx: Transaction) -> "TransactionResponse":
        return cls(
            id=tx.id,
            amount=tx.amount,
            timestamp=tx.timestamp,
            category=tx.category.value,
            description=tx.description,
        )


class TransactionListResponse(BaseModel):
    count: int
    transactions: List[TransactionResponse] = Field(description="Newest first")


class DashboardResponse(BaseModel):
    """Point-in-time dashboard snapshot"""
    displayed_total: float = Field(description="Animated counter value at request time")
    total: float = Field(description="Exact accumulated total")
    today: float
    month: float
    avg_per_day: float
    revenue_per_second: float
    growth_percent: float
    state: str = Field(description="LIVE or PAUSED")
    live: bool
    transactions: List[TransactionResponse] = Field(default_factory=list, description="Newest first")

    @classmethod
    def from_snapshot(cls, snapshot: DashboardSnapshot) -> "DashboardResponse":
        return cls(
            displayed_total=snapshot.displayed_total,
            total=snapshot.total,
            today=snapshot.today,
            month=snapshot.month,
            avg_per_day=snapshot.avg_per_day,
            revenue_per_second=snapshot.revenue_per_second,
            growth_percent=snapshot.growth_percent,
            state=snapshot.state.name,
            live=snapshot.is_live,
            transactions=[TransactionResponse.from_transaction(tx) for tx in snapshot.transactions],
        )


class LiveRequest(BaseModel):
    """Request body for POST /dashboard/live"""
    live: bool = Field(description="True to resume, False to pause")


class LiveStateResponse(BaseModel):
    state: str
    live: bool
