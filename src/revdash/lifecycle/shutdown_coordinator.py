"""
Shutdown coordinator that orchestrates graceful shutdown of all components.

Manages signal handlers, critical task monitoring and shutdown sequencing
across multiple shutdown handlers in priority order.
"""

import asyncio
import signal
from typing import List, Optional, Set

from revdash.lifecycle.task_registry import TaskRegistry
from revdash.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SHUTDOWN)


class ShutdownCoordinator:
    """
    Coordinates graceful shutdown of multiple components.

    Example:
        coordinator = ShutdownCoordinator()
        coordinator.register(RenderLoopShutdownHandler(render_loop))
        coordinator.register(SimulationShutdownHandler(controller))
        coordinator.register(APIServerShutdownHandler(api_wrapper))

        coordinator.setup_signal_handlers(loop)
        await coordinator.wait_for_shutdown()
        await coordinator.shutdown_all()
    """

    # Failure of a task in one of these categories shuts the app down
    CRITICAL_CATEGORIES: Set[str] = {"API", "RENDER", "SIMULATION"}

    def __init__(self, timeout_per_handler: float = 5.0, total_timeout: float = 15.0):
        """
        Args:
            timeout_per_handler: Timeout for each individual handler (seconds)
            total_timeout: Total timeout for entire shutdown sequence (seconds)
        """
        self._handlers: List = []
        self._shutdown_event: Optional[asyncio.Event] = None
        self._timeout_per_handler = timeout_per_handler
        self._total_timeout = total_timeout
        self._reason: Optional[str] = None

    @property
    def reason(self) -> Optional[str]:
        return self._reason

    def register(self, handler) -> None:
        """
        Register a shutdown handler.

        Handler must have:
        - shutdown_priority property (int)
        - async shutdown() method
        """
        if not hasattr(handler, "shutdown_priority"):
            raise ValueError(f"Handler {handler} missing shutdown_priority property")
        if not hasattr(handler, "shutdown"):
            raise ValueError(f"Handler {handler} missing shutdown() method")

        self._handlers.append(handler)
        log.debug(f"Registered shutdown handler: {handler.__class__.__name__}")

    def setup_signal_handlers(self, loop: asyncio.AbstractEventLoop) -> None:
        """Install SIGINT (Ctrl+C) and SIGTERM handlers on the running loop."""
        self._shutdown_event = asyncio.Event()
        shutdown_event = self._shutdown_event

        def signal_handler(sig: signal.Signals) -> None:
            self._reason = sig.name
            log.info(f"Signal {sig.name} received → triggering shutdown")
            shutdown_event.set()

        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, lambda s=sig: signal_handler(s))

        log.info("Signal handlers installed (SIGINT, SIGTERM)")

    def request_shutdown(self, reason: str) -> None:
        """Trigger shutdown from application code (no signal involved)."""
        if self._shutdown_event is None:
            self._shutdown_event = asyncio.Event()
        self._reason = reason
        self._shutdown_event.set()

    # ------------------------------------------------------------
    # Critical task monitoring
    # ------------------------------------------------------------

    def _critical_tasks(self) -> List[asyncio.Task]:
        return [
            r.task for r in TaskRegistry.instance().active()
            if r.info.category.name in self.CRITICAL_CATEGORIES
        ]

    def _check_critical_task_failures(self) -> bool:
        for record in TaskRegistry.instance().failed():
            if record.info.category.name in self.CRITICAL_CATEGORIES:
                log.error(
                    f"Critical task failed: {record.info.description}",
                    category=record.info.category.name,
                    error=str(record.finished_with_error),
                )
                self._reason = f"Task failure: {record.info.description}"
                return True
        return False

    async def _wait_once(self, critical_tasks: List[asyncio.Task]) -> Optional[bool]:
        """
        Wait for either the shutdown signal or a critical task to finish.

        Returns:
            True if shutdown signal received
            False if a critical task FAILED
            None to keep monitoring
        """
        if not critical_tasks:
            try:
                await asyncio.wait_for(self._shutdown_event.wait(), timeout=0.2)
                return True
            except asyncio.TimeoutError:
                return None

        shutdown_waiter = asyncio.create_task(self._shutdown_event.wait())
        try:
            done, _ = await asyncio.wait(
                {shutdown_waiter, *critical_tasks},
                return_when=asyncio.FIRST_COMPLETED,
            )
            if shutdown_waiter in done:
                return True

            # Clean completion of a critical task is not a failure
            if self._check_critical_task_failures():
                return False
            return None
        finally:
            # Critical tasks are long-lived; only the waiter is ours to cancel
            if not shutdown_waiter.done():
                shutdown_waiter.cancel()

    async def wait_for_shutdown(self) -> None:
        """
        Wait for a shutdown signal or a critical task failure.

        Raises:
            RuntimeError: If signal handlers weren't setup
        """
        if self._shutdown_event is None:
            raise RuntimeError("Call setup_signal_handlers() first")

        while not self._shutdown_event.is_set():
            if self._check_critical_task_failures():
                return

            result = await self._wait_once(self._critical_tasks())
            if result is not None:
                return

    # ------------------------------------------------------------
    # Shutdown sequence
    # ------------------------------------------------------------

    async def shutdown_all(self) -> None:
        """
        Execute graceful shutdown of all handlers in priority order.

        Each handler has its own timeout (timeout_per_handler) and the entire
        sequence has a global timeout (total_timeout). A failing handler never
        stops the ones after it.
        """
        log.info("Initiating graceful shutdown sequence...", reason=self.reason or "UNKNOWN")

        sorted_handlers = sorted(self._handlers, key=lambda h: h.shutdown_priority, reverse=True)
        loop = asyncio.get_running_loop()
        start_time = loop.time()

        for handler in sorted_handlers:
            handler_name = handler.__class__.__name__

            elapsed = loop.time() - start_time
            if elapsed > self._total_timeout:
                log.error(f"Total shutdown timeout exceeded ({elapsed:.1f}s > {self._total_timeout}s)")
                break

            try:
                log.debug(f"Shutting down {handler_name} (priority={handler.shutdown_priority})...")
                await asyncio.wait_for(handler.shutdown(), timeout=self._timeout_per_handler)
                log.debug(f"✓ {handler_name} shutdown complete")

            except asyncio.TimeoutError:
                log.error(f"{handler_name} shutdown timeout ({self._timeout_per_handler}s)")

            except asyncio.CancelledError:
                log.warn("Shutdown sequence was cancelled")
                raise

            except Exception as e:
                log.error(f"Error shutting down {handler_name}: {e}", exc_info=True)

        log.info("✓ Shutdown sequence complete")

    def get_handler(self, handler_type: type):
        """Get a registered handler by type."""
        for handler in self._handlers:
            if isinstance(handler, handler_type):
                return handler
        return None
