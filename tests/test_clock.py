import asyncio

import pytest

from revdash.engine.clock import AsyncioClock, ManualClock


def test_call_later_fires_at_due_time():
    clock = ManualClock()
    fired = []
    clock.call_later(200, lambda: fired.append(clock.now()))

    clock.advance(199)
    assert fired == []
    clock.advance(1)
    assert fired == [200]


def test_timers_fire_in_due_order():
    clock = ManualClock()
    order = []
    clock.call_later(300, lambda: order.append("c"))
    clock.call_later(100, lambda: order.append("a"))
    clock.call_later(200, lambda: order.append("b"))

    clock.advance(1000)

    assert order == ["a", "b", "c"]


def test_same_due_time_keeps_scheduling_order():
    clock = ManualClock()
    order = []
    for name in "xyz":
        clock.call_later(0, lambda name=name: order.append(name))

    clock.advance(0)

    assert order == ["x", "y", "z"]


def test_cancelled_timer_never_fires():
    clock = ManualClock()
    fired = []
    handle = clock.call_later(100, lambda: fired.append(1))

    handle.cancel()
    handle.cancel()
    clock.advance(1000)

    assert fired == []
    assert handle.cancelled
    assert not handle.active
    assert clock.pending() == 0


def test_call_every_keeps_fixed_cadence():
    clock = ManualClock()
    times = []
    handle = clock.call_every(1000, lambda: times.append(clock.now()))

    clock.advance(3500)
    assert times == [1000, 2000, 3000]

    handle.cancel()
    clock.advance(5000)
    assert times == [1000, 2000, 3000]


def test_callback_can_schedule_within_same_advance():
    clock = ManualClock()
    times = []

    def chain():
        times.append(clock.now())
        if len(times) < 3:
            clock.call_later(100, chain)

    clock.call_later(100, chain)
    clock.advance(1000)

    assert times == [100, 200, 300]
    assert clock.now() == 1000


def test_negative_delay_rejected():
    with pytest.raises(ValueError):
        ManualClock().call_later(-1, lambda: None)


def test_manual_clock_cannot_go_backwards():
    with pytest.raises(ValueError):
        ManualClock().advance(-5)


def test_wall_time_tracks_virtual_time():
    clock = ManualClock()
    start = clock.wall_time()
    clock.advance(1500)
    assert (clock.wall_time() - start).total_seconds() == pytest.approx(1.5)


@pytest.mark.asyncio
async def test_asyncio_clock_fires_and_cancels():
    clock = AsyncioClock()
    fired = asyncio.Event()
    cancelled = []

    clock.call_later(10, fired.set)
    handle = clock.call_later(10, lambda: cancelled.append(1))
    handle.cancel()

    await asyncio.wait_for(fired.wait(), timeout=1.0)
    await asyncio.sleep(0.02)

    assert cancelled == []
