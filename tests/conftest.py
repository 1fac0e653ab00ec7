"""Shared fixtures: deterministic clock, seeded randomness, default config"""

import random

import pytest

from revdash.engine.clock import ManualClock
from revdash.lifecycle.task_registry import TaskRegistry
from revdash.models.config import SimulationConfig
from revdash.services.event_bus import EventBus
from revdash.services.simulation_controller import SimulationController


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def config():
    return SimulationConfig()


@pytest.fixture
def quiet_config():
    """Ticks only: no burst and a recurring delay far beyond any test window"""
    return SimulationConfig(burst_count=0, min_delay_ms=600_000, max_delay_ms=700_000)


@pytest.fixture
def controller(config, clock, rng):
    ctrl = SimulationController(config, clock, rng=rng)
    yield ctrl
    ctrl.shutdown()


@pytest.fixture
def quiet_controller(quiet_config, clock, rng):
    ctrl = SimulationController(quiet_config, clock, rng=rng)
    yield ctrl
    ctrl.shutdown()


@pytest.fixture
def event_bus():
    return EventBus()


@pytest.fixture(autouse=True)
def fresh_task_registry():
    TaskRegistry.reset()
    yield
    TaskRegistry.reset()
