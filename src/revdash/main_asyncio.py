"""
main_asyncio.py - Application entry point for the revenue dashboard
-------------------------------------------------------------------

Responsible for:
- loading configuration and wiring dependencies
- starting the simulation, render loop and API server
- graceful shutdown on Ctrl+C, SIGTERM or a critical task failure

Environment:
    REVDASH_CONFIG     path to a simulation.yaml (default: bundled config)
    REVDASH_HOST       API bind address (default: 127.0.0.1)
    REVDASH_PORT       API port (default: 8000)
    REVDASH_LOG_LEVEL  DEBUG | INFO | WARN | ERROR (default: INFO)
"""

import sys

if hasattr(sys.stdout, 'reconfigure') and sys.stdout.encoding != 'UTF-8':
    sys.stdout.reconfigure(encoding='utf-8')  # type: ignore

import asyncio
import os

from revdash.api.dependencies import set_service_container
from revdash.api.main import create_app
from revdash.engine.clock import AsyncioClock
from revdash.engine.render_loop import RenderLoop
from revdash.lifecycle import ShutdownCoordinator
from revdash.lifecycle.api_server_wrapper import APIServerWrapper
from revdash.lifecycle.handlers import (
    AllTasksCancellationHandler,
    APIServerShutdownHandler,
    RenderLoopShutdownHandler,
    SimulationShutdownHandler,
)
from revdash.lifecycle.task_registry import TaskCategory, TaskRegistry, create_tracked_task
from revdash.managers import ConfigManager
from revdash.models.enums import LogCategory, LogLevel
from revdash.services import EventBus, ServiceContainer, SimulationController, log_middleware
from revdash.utils.logger import configure_logger, get_logger
from revdash.utils.serialization import Serializer

log = get_logger().for_category(LogCategory.SYSTEM)


def _log_level_from_env() -> LogLevel:
    name = os.environ.get("REVDASH_LOG_LEVEL", "INFO").upper()
    try:
        return Serializer.str_to_enum(name, LogLevel)
    except ValueError:
        log.warn(f"Unknown REVDASH_LOG_LEVEL '{name}', using INFO")
        return LogLevel.INFO


# ---------------------------------------------------------------------------
# Application Entry
# ---------------------------------------------------------------------------

async def main() -> None:
    """Main async entry point (dependency injection and event loop startup)."""
    configure_logger(_log_level_from_env())
    log.info("Starting revenue dashboard...")

    # ========================================================================
    # 1. CONFIGURATION
    # ========================================================================

    config_manager = ConfigManager(os.environ.get("REVDASH_CONFIG"))
    config = config_manager.load()

    # ========================================================================
    # 2. SERVICES
    # ========================================================================

    event_bus = EventBus()
    event_bus.add_middleware(log_middleware)

    clock = AsyncioClock(asyncio.get_running_loop())
    controller = SimulationController(config, clock, event_bus=event_bus)
    render_loop = RenderLoop(controller.snapshot, fps=config.render_fps)

    services = ServiceContainer(
        config=config,
        clock=clock,
        event_bus=event_bus,
        controller=controller,
        render_loop=render_loop,
    )
    set_service_container(services)

    # ========================================================================
    # 3. SIMULATION + RENDERING
    # ========================================================================

    controller.start()
    create_tracked_task(
        render_loop.start(),
        category=TaskCategory.RENDER,
        description="RenderLoop start",
    )

    # ========================================================================
    # 4. API SERVER
    # ========================================================================

    host = os.environ.get("REVDASH_HOST", "127.0.0.1")
    port = int(os.environ.get("REVDASH_PORT", "8000"))

    api_wrapper = APIServerWrapper(create_app(), host=host, port=port)
    api_task = create_tracked_task(
        api_wrapper.start(),
        category=TaskCategory.API,
        description="FastAPI/Uvicorn Server",
    )

    # ========================================================================
    # 5. SHUTDOWN COORDINATOR
    # ========================================================================

    coordinator = ShutdownCoordinator()
    coordinator.register(RenderLoopShutdownHandler(render_loop))
    coordinator.register(SimulationShutdownHandler(controller))
    coordinator.register(APIServerShutdownHandler(api_wrapper, render_loop))
    coordinator.register(AllTasksCancellationHandler(exclude_tasks=[api_task]))

    coordinator.setup_signal_handlers(asyncio.get_running_loop())

    log.info("Application initialized. Waiting for exit signal...")
    await coordinator.wait_for_shutdown()
    await coordinator.shutdown_all()

    set_service_container(None)
    log.info(TaskRegistry.instance().summary())
    log.info("Revenue dashboard shut down cleanly.")


def run() -> None:
    """Console-script entry point."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        log.info("Keyboard interrupt received")
    except Exception as e:
        log.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


# ---------------------------------------------------------------------------
# ENTRY POINT
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    run()
