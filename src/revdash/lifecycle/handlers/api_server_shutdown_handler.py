from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from revdash.lifecycle.shutdown_protocol import IShutdownHandler
from revdash.utils.logger import get_logger, LogCategory

if TYPE_CHECKING:
    from revdash.engine.render_loop import RenderLoop
    from revdash.lifecycle.api_server_wrapper import APIServerWrapper

log = get_logger().for_category(LogCategory.SHUTDOWN)


class APIServerShutdownHandler(IShutdownHandler):
    """
    Takes the dashboard's HTTP/WebSocket server down.

    Runs after the render loop and the simulation are stopped, so the last
    frame a /ws/dashboard client received is the final state of the session.
    Open dashboard streams are reported before uvicorn drops them.

    Priority: 90
    """

    def __init__(self, api_wrapper: "APIServerWrapper", render_loop: Optional["RenderLoop"] = None):
        self.api_wrapper = api_wrapper
        self.render_loop = render_loop
        self.stopped = False

    @property
    def shutdown_priority(self) -> int:
        return 90

    @property
    def endpoint(self) -> str:
        return f"http://{self.api_wrapper.host}:{self.api_wrapper.port}"

    async def shutdown(self) -> None:
        if not self.api_wrapper.is_running:
            log.debug("Dashboard API not running, nothing to stop", endpoint=self.endpoint)
            return

        streams = self.render_loop.subscriber_count if self.render_loop else 0
        log.info("Stopping dashboard API", endpoint=self.endpoint, open_streams=streams)

        try:
            await self.api_wrapper.stop()
            self.stopped = True
        except Exception as e:
            log.error(f"Dashboard API did not stop cleanly: {e}", exc_info=True)
