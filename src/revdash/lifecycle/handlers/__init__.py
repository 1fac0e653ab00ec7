from .all_tasks_cancellation_handler import AllTasksCancellationHandler
from .api_server_shutdown_handler import APIServerShutdownHandler
from .render_loop_shutdown_handler import RenderLoopShutdownHandler
from .simulation_shutdown_handler import SimulationShutdownHandler

__all__ = [
    "AllTasksCancellationHandler",
    "APIServerShutdownHandler",
    "RenderLoopShutdownHandler",
    "SimulationShutdownHandler",
]
