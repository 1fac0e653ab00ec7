import random

import pytest

from revdash.engine.clock import ManualClock
from revdash.engine.transaction_generator import TransactionGenerator
from revdash.models.config import default_catalog


@pytest.fixture
def emitted():
    return []


@pytest.fixture
def generator(clock, rng, emitted):
    gen = TransactionGenerator(clock, sink=emitted.append, rng=rng)
    yield gen
    gen.stop_schedule()


def test_generated_transactions_match_their_category_tables(generator):
    catalog = default_catalog()

    for _ in range(200):
        tx = generator.generate()
        tiers = catalog.for_category(tx.category)
        assert tx.amount in tiers.amounts
        assert tx.description in tiers.descriptions
        assert catalog.is_consistent(tx)
        assert tx.amount > 0


def test_ids_are_six_base36_chars(generator):
    alphabet = set("0123456789abcdefghijklmnopqrstuvwxyz")

    for _ in range(50):
        tx = generator.generate()
        assert len(tx.id) == 6
        assert set(tx.id) <= alphabet


def test_all_categories_eventually_appear(generator):
    categories = {generator.generate().category for _ in range(300)}
    assert categories == set(default_catalog().categories)


def test_timestamp_comes_from_clock(clock, generator):
    clock.advance(1500)
    tx = generator.generate()
    assert tx.timestamp == clock.wall_time()


def test_delay_within_bounds(generator):
    delays = [generator.next_delay() for _ in range(500)]
    assert all(3000.0 <= d < 8000.0 for d in delays)


def test_burst_emits_every_200ms(clock, generator, emitted):
    generator.start_schedule()
    assert emitted == []

    clock.advance(0)
    assert len(emitted) == 1

    for expected in range(2, 6):
        clock.advance(199)
        assert len(emitted) == expected - 1
        clock.advance(1)
        assert len(emitted) == expected


class ShortestDelayRng(random.Random):
    """Every jitter draw lands on the lower bound"""

    def random(self):
        return 0.0


def test_recurring_chain_is_timed_from_activation(clock):
    times = []
    gen = TransactionGenerator(clock, sink=lambda tx: times.append(clock.now()), rng=ShortestDelayRng(3))
    gen.start_schedule()

    # 5 burst timers plus the first recurring one
    assert gen.pending_timers == 6

    clock.advance(3000)
    assert times == [0.0, 200.0, 400.0, 600.0, 800.0, 3000.0]

    clock.advance(3000)
    assert times[-1] == 6000.0
    gen.stop_schedule()


def test_first_recurring_emission_within_bounds_of_activation(clock, rng, emitted):
    gen = TransactionGenerator(clock, sink=emitted.append, rng=rng)
    start = clock.wall_time()
    gen.start_schedule()

    clock.advance(800)
    assert len(emitted) == 5
    assert gen.pending_timers == 1

    clock.advance(8000 - 800)
    gen.stop_schedule()

    assert len(emitted) >= 6
    offset_ms = (emitted[5].timestamp - start).total_seconds() * 1000
    assert 3000.0 <= offset_ms < 8000.0


def test_recurring_gaps_stay_within_bounds(clock, rng):
    times = []
    gen = TransactionGenerator(clock, sink=lambda tx: times.append(clock.now()), rng=rng)
    gen.start_schedule()

    clock.advance(120_000)
    gen.stop_schedule()

    recurring = times[5:]
    assert 3000.0 <= recurring[0] < 8000.0
    gaps = [b - a for a, b in zip(recurring, recurring[1:])]
    assert gaps
    assert all(3000.0 <= g < 8000.0 for g in gaps)


def test_stop_cancels_pending_timers(clock, generator, emitted):
    generator.start_schedule()
    clock.advance(200)
    assert len(emitted) == 2

    generator.stop_schedule()

    assert generator.pending_timers == 0
    assert not generator.is_scheduled
    clock.advance(60_000)
    assert len(emitted) == 2


def test_stop_is_idempotent(generator):
    generator.stop_schedule()
    generator.start_schedule()
    generator.stop_schedule()
    generator.stop_schedule()
    assert generator.pending_timers == 0


def test_restart_is_a_fresh_burst(clock, generator, emitted):
    generator.start_schedule()
    clock.advance(400)
    assert len(emitted) == 3

    generator.stop_schedule()
    generator.start_schedule()
    clock.advance(800)

    assert len(emitted) == 8


def test_start_while_scheduled_restarts(clock, generator, emitted):
    generator.start_schedule()
    generator.start_schedule()

    clock.advance(800)

    assert len(emitted) == 5


def test_zero_burst_goes_straight_to_recurring(clock, rng):
    times = []
    gen = TransactionGenerator(clock, sink=lambda tx: times.append(clock.now()), rng=rng, burst_count=0)
    gen.start_schedule()

    clock.advance(2999)
    assert times == []
    clock.advance(5001)
    assert 3000.0 <= times[0] < 8000.0
    gen.stop_schedule()


def test_same_seed_same_sequence():
    first = TransactionGenerator(ManualClock(), rng=random.Random(7))
    second = TransactionGenerator(ManualClock(), rng=random.Random(7))

    assert [first.generate() for _ in range(20)] == [second.generate() for _ in range(20)]
