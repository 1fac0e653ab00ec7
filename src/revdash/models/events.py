"""
Event system for the revenue simulation

Controller state changes, revenue ticks and generated transactions are
published as events so observers (logging, websocket streaming) stay
decoupled from the engine.
"""

import time
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Dict, Generic, TypeVar

from revdash.models.enums import EventSource, SimulationState
from revdash.models.transaction import Transaction


class EventType(Enum):
    """Event types in the system"""
    REVENUE_TICKED = auto()
    TRANSACTION_RECORDED = auto()
    SIMULATION_STATE_CHANGED = auto()


TSource = TypeVar("TSource", bound=Enum)


@dataclass
class Event(Generic[TSource]):
    """
    Base event class

    All events inherit from this and must specify:
    - type: EventType (what kind of event)
    - source: Enum (where it came from)
    - data: dict (event-specific payload)
    - timestamp: float (when it happened)
    """
    type: EventType
    source: TSource | None
    data: Dict[str, Any]
    timestamp: float


@dataclass
class RevenueTickedEvent(Event[EventSource]):
    """Per-second revenue increment applied"""

    def __init__(self, total: float, increment: float):
        super().__init__(
            type=EventType.REVENUE_TICKED,
            source=EventSource.REVENUE,
            data={"total": total, "increment": increment},
            timestamp=time.time()
        )

    @property
    def total(self) -> float:
        return self.data["total"]


@dataclass
class TransactionRecordedEvent(Event[EventSource]):
    """Transaction applied to both the total and the feed"""

    def __init__(self, transaction: Transaction, total: float):
        super().__init__(
            type=EventType.TRANSACTION_RECORDED,
            source=EventSource.GENERATOR,
            data={"transaction": transaction, "total": total},
            timestamp=time.time()
        )

    @property
    def transaction(self) -> Transaction:
        return self.data["transaction"]

    @property
    def total(self) -> float:
        return self.data["total"]


@dataclass
class SimulationStateChangedEvent(Event[EventSource]):
    """LIVE <-> PAUSED transition"""

    def __init__(self, previous: SimulationState | None, current: SimulationState):
        super().__init__(
            type=EventType.SIMULATION_STATE_CHANGED,
            source=EventSource.SIMULATION,
            data={"previous": previous, "current": current},
            timestamp=time.time()
        )

    @property
    def current(self) -> SimulationState:
        return self.data["current"]
