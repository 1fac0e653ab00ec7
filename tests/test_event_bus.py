"""
Event bus tests: publishing, filtering, middleware, fault tolerance and
events published from synchronous simulation callbacks.
"""

import asyncio
from datetime import datetime

import pytest

from revdash.engine.clock import AsyncioClock
from revdash.models.config import SimulationConfig
from revdash.models.enums import SimulationState, TransactionCategory
from revdash.models.events import (
    EventType,
    RevenueTickedEvent,
    SimulationStateChangedEvent,
    TransactionRecordedEvent,
)
from revdash.models.transaction import Transaction
from revdash.services.event_bus import EventBus
from revdash.services.middleware import log_middleware
from revdash.services.simulation_controller import SimulationController


def make_tx(amount: float = 499.99, category=TransactionCategory.ENTERPRISE) -> Transaction:
    return Transaction(
        id="abc123",
        amount=amount,
        timestamp=datetime(2025, 1, 1, 12),
        category=category,
        description="Enterprise Contract",
    )


async def test_basic_pub_sub(event_bus):
    received = []

    async def handler(event):
        received.append(event)

    event_bus.subscribe(EventType.REVENUE_TICKED, handler)
    await event_bus.publish(RevenueTickedEvent(47832.79, 0.23))

    assert len(received) == 1
    assert received[0].total == pytest.approx(47832.79)


async def test_sync_handlers_supported(event_bus):
    received = []
    event_bus.subscribe(EventType.TRANSACTION_RECORDED, received.append)

    await event_bus.publish(TransactionRecordedEvent(make_tx(), 48332.55))

    assert received[0].transaction.id == "abc123"


async def test_filtering(event_bus):
    large = []
    event_bus.subscribe(
        EventType.TRANSACTION_RECORDED,
        large.append,
        filter_fn=lambda e: e.transaction.amount > 100,
    )

    await event_bus.publish(TransactionRecordedEvent(make_tx(9.99, TransactionCategory.SUBSCRIPTION), 1.0))
    await event_bus.publish(TransactionRecordedEvent(make_tx(999.99), 2.0))

    assert [e.transaction.amount for e in large] == [999.99]


async def test_priority_order(event_bus):
    order = []
    event_bus.subscribe(EventType.REVENUE_TICKED, lambda e: order.append("low"), priority=0)
    event_bus.subscribe(EventType.REVENUE_TICKED, lambda e: order.append("high"), priority=10)

    await event_bus.publish(RevenueTickedEvent(1.0, 0.23))

    assert order == ["high", "low"]


async def test_middleware_can_block(event_bus):
    received = []
    event_bus.subscribe(EventType.REVENUE_TICKED, received.append)
    event_bus.add_middleware(lambda e: None)

    await event_bus.publish(RevenueTickedEvent(1.0, 0.23))

    assert received == []
    assert event_bus.get_event_history() == []


async def test_log_middleware_passes_events_through(event_bus):
    received = []
    event_bus.add_middleware(log_middleware)
    event_bus.subscribe(EventType.SIMULATION_STATE_CHANGED, received.append)

    await event_bus.publish(SimulationStateChangedEvent(None, SimulationState.LIVE))
    await event_bus.publish(TransactionRecordedEvent(make_tx(), 1.0))
    await event_bus.publish(RevenueTickedEvent(1.0, 0.23))

    assert received[0].current is SimulationState.LIVE
    assert len(event_bus.get_event_history()) == 3


async def test_failing_handler_does_not_stop_others(event_bus):
    received = []

    def broken(event):
        raise RuntimeError("boom")

    event_bus.subscribe(EventType.REVENUE_TICKED, broken, priority=10)
    event_bus.subscribe(EventType.REVENUE_TICKED, received.append)

    await event_bus.publish(RevenueTickedEvent(1.0, 0.23))

    assert len(received) == 1


async def test_unsubscribe(event_bus):
    received = []
    event_bus.subscribe(EventType.REVENUE_TICKED, received.append)
    event_bus.unsubscribe(EventType.REVENUE_TICKED, received.append)

    await event_bus.publish(RevenueTickedEvent(1.0, 0.23))

    assert received == []


def test_publish_nowait_without_loop_drops_event(event_bus):
    assert event_bus.publish_nowait(RevenueTickedEvent(1.0, 0.23)) is None


async def test_controller_publishes_from_timer_callbacks():
    bus = EventBus()
    states, transactions = [], []
    bus.subscribe(EventType.SIMULATION_STATE_CHANGED, states.append)
    bus.subscribe(EventType.TRANSACTION_RECORDED, transactions.append)

    config = SimulationConfig(burst_spacing_ms=1.0)
    controller = SimulationController(config, AsyncioClock(), event_bus=bus)
    controller.start()
    await asyncio.sleep(0.1)
    controller.pause()
    controller.shutdown()
    await bus.drain()

    assert [e.current for e in states] == [SimulationState.LIVE, SimulationState.PAUSED]
    assert len(transactions) == 5
    assert transactions[-1].total == pytest.approx(controller.snapshot().total)


async def test_equal_priorities_keep_subscription_order(event_bus):
    order = []
    event_bus.subscribe(EventType.REVENUE_TICKED, lambda e: order.append("first"), priority=5)
    event_bus.subscribe(EventType.REVENUE_TICKED, lambda e: order.append("second"), priority=5)
    event_bus.subscribe(EventType.REVENUE_TICKED, lambda e: order.append("urgent"), priority=9)

    await event_bus.publish(RevenueTickedEvent(1.0, 0.23))

    assert order == ["urgent", "first", "second"]


async def test_history_is_bounded():
    bus = EventBus(history_limit=3)
    for i in range(5):
        await bus.publish(RevenueTickedEvent(float(i), 0.23))

    assert [e.total for e in bus.get_event_history(limit=10)] == [2.0, 3.0, 4.0]
