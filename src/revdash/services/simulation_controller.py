"""
SimulationController - LIVE/PAUSED state machine wiring the engine together.

Owns the RevenueAccumulator and TransactionFeed exclusively, plus the two
timer sources (revenue tick handle, TransactionGenerator schedule).

    start()             → LIVE  (seed total, arm tick, start burst)
    LIVE   → pause()    → PAUSED (cancel tick + schedule synchronously)
    PAUSED → resume()   → LIVE  (fresh tick cadence, fresh burst)
    shutdown()          → every timer torn down, controller unusable
"""

import random
from typing import Optional

from revdash.engine.clock import Clock, TimerHandle
from revdash.engine.counter_animator import CounterAnimator
from revdash.engine.revenue_accumulator import RevenueAccumulator
from revdash.engine.transaction_feed import TransactionFeed
from revdash.engine.transaction_generator import TransactionGenerator
from revdash.models.config import SimulationConfig
from revdash.models.dashboard import DashboardSnapshot
from revdash.models.enums import SimulationState
from revdash.models.errors import ControllerShutdownError
from revdash.models.events import (
    Event,
    RevenueTickedEvent,
    SimulationStateChangedEvent,
    TransactionRecordedEvent,
)
from revdash.models.transaction import Transaction
from revdash.services.event_bus import EventBus
from revdash.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SIMULATION)


class SimulationController:
    """
    Drives the fabricated revenue dashboard.

    A fresh controller is PAUSED with no timers armed; start() seeds the
    total and enters LIVE. Once started, the session alternates between
    LIVE and PAUSED until shutdown().

    Every mutation happens inside one timer callback (or one public call),
    so accumulator, feed and animator are always observed consistently:
    a transaction is never visible in the feed without being in the total.

    Example:
        clock = ManualClock()
        controller = SimulationController(SimulationConfig(), clock)
        controller.start()
        clock.advance(1000)
        controller.snapshot().total
    """

    def __init__(
        self,
        config: SimulationConfig,
        clock: Clock,
        event_bus: Optional[EventBus] = None,
        rng: Optional[random.Random] = None,
    ):
        self.config = config
        self.clock = clock
        self.event_bus = event_bus

        self.accumulator = RevenueAccumulator(
            increment=config.revenue_per_tick,
            today_factor=config.today_factor,
            month_factor=config.month_factor,
            days_per_month=config.days_per_month,
        )
        self.accumulator.initialize(config.initial_revenue)
        self.feed = TransactionFeed(capacity=config.feed_capacity)
        self.animator = CounterAnimator(
            initial_value=config.initial_revenue,
            duration=config.animation_duration_ms,
        )
        self.generator = TransactionGenerator(
            clock=clock,
            sink=self._on_transaction,
            catalog=config.catalog,
            rng=rng,
            burst_count=config.burst_count,
            burst_spacing_ms=config.burst_spacing_ms,
            min_delay_ms=config.min_delay_ms,
            max_delay_ms=config.max_delay_ms,
        )

        self._state = SimulationState.PAUSED
        self._started = False
        self._tick_timer: Optional[TimerHandle] = None
        self._shut_down = False

        log.info(
            "SimulationController initialized",
            seed=f"{config.initial_revenue:.2f}",
            per_tick=config.revenue_per_tick,
            feed_capacity=config.feed_capacity,
        )

    # ------------------------------------------------------------
    # State
    # ------------------------------------------------------------

    @property
    def state(self) -> SimulationState:
        return self._state

    @property
    def is_started(self) -> bool:
        return self._started

    @property
    def is_live(self) -> bool:
        return self._state is SimulationState.LIVE

    @property
    def is_shut_down(self) -> bool:
        return self._shut_down

    @property
    def revenue_per_second(self) -> float:
        return self.config.revenue_per_tick * 1000.0 / self.config.tick_interval_ms

    # ------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------

    def start(self) -> None:
        """Begin a fresh session: seed the total and go LIVE"""
        self._ensure_usable()
        if self._started:
            log.warn("Simulation already started", state=self._state.name)
            return

        self._started = True
        self.accumulator.initialize(self.config.initial_revenue)
        self.feed.clear()
        self.animator.reset(self.accumulator.total)
        self._enter_live(previous=None)

    def pause(self) -> None:
        """LIVE → PAUSED; no timer survives this call"""
        self._ensure_usable()
        if self._state is not SimulationState.LIVE:
            return

        self._cancel_timers()
        self._set_state(SimulationState.PAUSED, previous=SimulationState.LIVE)

    def resume(self) -> None:
        """PAUSED → LIVE; missed ticks are not replayed"""
        self._ensure_usable()
        if not self._started:
            self.start()
            return
        if self._state is not SimulationState.PAUSED:
            return

        self._enter_live(previous=SimulationState.PAUSED)

    def toggle(self) -> SimulationState:
        """Flip LIVE/PAUSED and return the new state"""
        if self.is_live:
            self.pause()
        else:
            self.resume()
        return self._state

    def set_live(self, live: bool) -> SimulationState:
        if live:
            self.resume()
        else:
            self.pause()
        return self._state

    def shutdown(self) -> None:
        """Tear down every timer; the controller cannot be restarted"""
        if self._shut_down:
            return
        self._cancel_timers()
        self._shut_down = True
        log.info(
            "SimulationController shut down",
            total=f"{self.accumulator.total:.2f}",
            ticks=self.accumulator.tick_count,
            transactions=self.accumulator.transaction_count,
        )

    def _enter_live(self, previous: Optional[SimulationState]) -> None:
        self._set_state(SimulationState.LIVE, previous=previous)
        self._tick_timer = self.clock.call_every(
            self.config.tick_interval_ms, self._on_tick, label="revenue-tick"
        )
        self.generator.start_schedule()

    def _cancel_timers(self) -> None:
        if self._tick_timer is not None:
            self._tick_timer.cancel()
            self._tick_timer = None
        self.generator.stop_schedule()

    def _set_state(self, state: SimulationState, previous: Optional[SimulationState]) -> None:
        self._state = state
        log.info(f"Simulation {state.name}", previous=previous.name if previous else None)
        self._publish(SimulationStateChangedEvent(previous, state))

    def _ensure_usable(self) -> None:
        if self._shut_down:
            raise ControllerShutdownError("SimulationController was shut down")

    # ------------------------------------------------------------
    # Timer callbacks
    # ------------------------------------------------------------

    def _on_tick(self) -> None:
        if not self.is_live:
            log.warn("Stale revenue tick ignored")
            return

        total = self.accumulator.tick()
        self.animator.set_target(total, self.clock.now())
        self._publish(RevenueTickedEvent(total, self.accumulator.increment))

    def _on_transaction(self, tx: Transaction) -> None:
        if not self.is_live:
            log.warn("Transaction arrived while not live, dropped", id=tx.id)
            return

        # Accumulator validates first: nothing reaches the feed if it raises
        total = self.accumulator.apply_transaction(tx.amount)
        self.feed.append(tx)
        self.animator.set_target(total, self.clock.now())

        log.info(
            "Transaction recorded",
            category=tx.category.value,
            amount=f"{tx.amount:.2f}",
            description=tx.description,
            total=f"{total:.2f}",
        )
        self._publish(TransactionRecordedEvent(tx, total))

    def _publish(self, event: Event) -> None:
        if self.event_bus is not None:
            self.event_bus.publish_nowait(event)

    # ------------------------------------------------------------
    # Read model
    # ------------------------------------------------------------

    def snapshot(self) -> DashboardSnapshot:
        """Read model for the presentation layer at the current clock time"""
        revenue = self.accumulator.state()
        return DashboardSnapshot(
            displayed_total=self.animator.sample(self.clock.now()),
            total=revenue.total,
            today=revenue.today,
            month=revenue.month,
            avg_per_day=revenue.avg_per_day,
            revenue_per_second=self.revenue_per_second,
            growth_percent=self.config.growth_percent,
            state=self._state,
            transactions=tuple(self.feed.to_list()),
        )
