"""Application services: event bus, simulation controller, container"""

from .event_bus import EventBus
from .middleware import log_middleware
from .service_container import ServiceContainer
from .simulation_controller import SimulationController

__all__ = [
    "EventBus",
    "log_middleware",
    "ServiceContainer",
    "SimulationController",
]
