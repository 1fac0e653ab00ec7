from __future__ import annotations

from typing import TYPE_CHECKING

from revdash.lifecycle.shutdown_protocol import IShutdownHandler
from revdash.utils.logger import get_logger, LogCategory

if TYPE_CHECKING:
    from revdash.engine.render_loop import RenderLoop

log = get_logger().for_category(LogCategory.SHUTDOWN)


class RenderLoopShutdownHandler(IShutdownHandler):
    """
    Shutdown handler for RenderLoop.

    Stops frame sampling first so websocket clients stop receiving frames
    before the simulation underneath is torn down.
    """

    def __init__(self, render_loop: "RenderLoop"):
        self.render_loop = render_loop

    @property
    def shutdown_priority(self) -> int:
        return 120  # stop rendering early

    async def shutdown(self) -> None:
        log.info("Shutting down RenderLoop...")

        try:
            await self.render_loop.stop()
        except Exception as e:
            log.error(f"Error shutting down RenderLoop: {e}", exc_info=True)
