"""
TransactionGenerator - randomized transactions on a jittered schedule.

Schedule:
  start_schedule()
    ├─ burst: N emissions at 0, spacing, 2*spacing, ... ms
    └─ armed at the same moment: recurring chain, first emission after
       uniform(min_delay, max_delay) ms, each next one the same delay after
       the previous recurring emission

stop_schedule() cancels every pending timer and bumps the schedule
generation, so a callback armed during an earlier LIVE period can never
emit into a later one.
"""

import random
import string
from typing import Callable, List, Optional

from revdash.engine.clock import Clock, TimerHandle
from revdash.models.config import default_catalog
from revdash.models.transaction import Transaction, TransactionCatalog
from revdash.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.TRANSACTION)

_ID_ALPHABET = string.digits + string.ascii_lowercase
_ID_LENGTH = 6

TransactionSink = Callable[[Transaction], None]


class TransactionGenerator:
    """
    Produces Transaction records and emits them to a sink on a schedule.

    The sink (SimulationController) applies each emission to the revenue
    total and the feed in one synchronous step.
    """

    def __init__(
        self,
        clock: Clock,
        sink: Optional[TransactionSink] = None,
        catalog: Optional[TransactionCatalog] = None,
        rng: Optional[random.Random] = None,
        burst_count: int = 5,
        burst_spacing_ms: float = 200.0,
        min_delay_ms: float = 3000.0,
        max_delay_ms: float = 8000.0,
    ):
        self.clock = clock
        self.sink = sink
        self.catalog = catalog or default_catalog()
        self.rng = rng or random.Random()

        self.burst_count = burst_count
        self.burst_spacing_ms = burst_spacing_ms
        self.min_delay_ms = min_delay_ms
        self.max_delay_ms = max_delay_ms

        self._timers: List[TimerHandle] = []
        self._generation = 0
        self._scheduled = False
        self.emitted_count = 0

    # ------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------

    def _new_id(self) -> str:
        return "".join(self.rng.choice(_ID_ALPHABET) for _ in range(_ID_LENGTH))

    def generate(self) -> Transaction:
        """Build one random transaction consistent with its category tables"""
        category = self.rng.choice(self.catalog.categories)
        tiers = self.catalog.for_category(category)

        return Transaction(
            id=self._new_id(),
            amount=self.rng.choice(tiers.amounts),
            timestamp=self.clock.wall_time(),
            category=category,
            description=self.rng.choice(tiers.descriptions),
        )

    def next_delay(self) -> float:
        """Jittered delay in [min_delay_ms, max_delay_ms)"""
        return self.min_delay_ms + self.rng.random() * (self.max_delay_ms - self.min_delay_ms)

    # ------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------

    @property
    def is_scheduled(self) -> bool:
        return self._scheduled

    @property
    def pending_timers(self) -> int:
        return sum(1 for t in self._timers if t.active)

    def start_schedule(self) -> None:
        """Begin a fresh burst followed by the recurring jittered cycle"""
        if self._scheduled:
            log.warn("Schedule already running, restarting from burst")
            self.stop_schedule()

        self._generation += 1
        self._scheduled = True
        generation = self._generation

        for i in range(self.burst_count):
            self._arm(
                i * self.burst_spacing_ms,
                lambda: self._emit(generation, chain=False),
                label=f"burst-{i + 1}",
            )
        # Recurring cycle runs alongside the burst, timed from activation
        self._schedule_next(generation)

        log.info(
            "Transaction schedule started",
            generation=generation,
            burst=self.burst_count,
            delay=f"{self.min_delay_ms:.0f}-{self.max_delay_ms:.0f}ms",
        )

    def stop_schedule(self) -> None:
        """Cancel every pending emission synchronously (idempotent)"""
        if not self._scheduled and not self._timers:
            return

        cancelled = 0
        for timer in self._timers:
            if timer.active:
                cancelled += 1
            timer.cancel()
        self._timers.clear()

        self._generation += 1
        self._scheduled = False
        log.info("Transaction schedule stopped", cancelled_timers=cancelled)

    def _arm(self, delay_ms: float, callback: Callable[[], None], label: str) -> None:
        # Drop finished handles so the list only tracks what can still fire
        self._timers = [t for t in self._timers if t.active]
        self._timers.append(self.clock.call_later(delay_ms, callback, label=label))

    def _schedule_next(self, generation: int) -> None:
        delay = self.next_delay()
        self._arm(delay, lambda: self._emit(generation, chain=True), label="recurring")
        log.debug("Next transaction scheduled", delay_ms=f"{delay:.0f}")

    def _emit(self, generation: int, chain: bool) -> None:
        if generation != self._generation:
            log.warn("Stale transaction timer ignored", generation=generation, current=self._generation)
            return

        tx = self.generate()
        self.emitted_count += 1
        if self.sink is not None:
            self.sink(tx)

        if chain and generation == self._generation:
            self._schedule_next(generation)
