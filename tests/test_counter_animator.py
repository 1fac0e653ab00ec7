import pytest

from revdash.engine.counter_animator import CounterAnimator
from revdash.models.easing import ease_out_cubic


def test_ease_out_cubic_endpoints():
    assert ease_out_cubic(0.0) == 0.0
    assert ease_out_cubic(1.0) == 1.0
    assert ease_out_cubic(0.5) == pytest.approx(0.875)


def test_midpoint_sample():
    anim = CounterAnimator(initial_value=100, duration=500)
    anim.set_target(200, now=0)

    assert anim.sample(250) == pytest.approx(187.5)


def test_exact_endpoints():
    anim = CounterAnimator(initial_value=100, duration=500)
    anim.set_target(200, now=1000)

    assert anim.sample(1000) == 100.0
    assert anim.sample(1500) == 200.0


def test_completion_commits_target():
    anim = CounterAnimator(initial_value=100, duration=500)
    anim.set_target(200, now=0)

    anim.sample(600)

    assert not anim.is_animating
    assert anim.committed_value == 200.0
    assert anim.sample(10_000) == 200.0


def test_retarget_mid_animation_starts_from_displayed_value():
    anim = CounterAnimator(initial_value=100, duration=500)
    anim.set_target(200, now=0)

    displayed = anim.sample(100)
    assert displayed == pytest.approx(148.8)

    anim.set_target(300, now=100)

    assert anim.state.start_value == pytest.approx(148.8)
    assert anim.state.target_value == 300.0
    assert anim.state.start_time == 100
    assert anim.sample(100) == pytest.approx(148.8)
    assert anim.sample(600) == 300.0


def test_retarget_after_completion_starts_from_committed_value():
    anim = CounterAnimator(initial_value=100, duration=500)
    anim.set_target(200, now=0)
    anim.sample(500)

    anim.set_target(250, now=800)

    assert anim.state.start_value == 200.0


def test_samples_are_monotonic_toward_target():
    anim = CounterAnimator(initial_value=100, duration=500)
    anim.set_target(200, now=0)

    samples = [anim.sample(t) for t in range(0, 501, 25)]

    assert samples == sorted(samples)
    assert all(100.0 <= s <= 200.0 for s in samples)


def test_reset_drops_running_animation():
    anim = CounterAnimator(initial_value=100, duration=500)
    anim.set_target(200, now=0)

    anim.reset(50)

    assert not anim.is_animating
    assert anim.sample(250) == 50.0

