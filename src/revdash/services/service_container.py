"""Service Container - Dependency injection container for the core services"""

from dataclasses import dataclass

from revdash.engine.clock import Clock
from revdash.engine.render_loop import RenderLoop
from revdash.models.config import SimulationConfig
from revdash.services.event_bus import EventBus
from revdash.services.simulation_controller import SimulationController


@dataclass
class ServiceContainer:
    """
    Everything the API layer needs, built once in main_asyncio.py.

    Usage:
        services = ServiceContainer(
            config=config,
            clock=clock,
            event_bus=event_bus,
            controller=controller,
            render_loop=render_loop,
        )
        set_service_container(services)
    """

    config: SimulationConfig
    clock: Clock
    event_bus: EventBus
    controller: SimulationController
    render_loop: RenderLoop
