"""
SimulationController shutdown handler.

Cancels the revenue tick and the transaction schedule so no timer fires
while the rest of the application is torn down.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from revdash.lifecycle.shutdown_protocol import IShutdownHandler
from revdash.utils.logger import get_logger, LogCategory

if TYPE_CHECKING:
    from revdash.services.simulation_controller import SimulationController

log = get_logger().for_category(LogCategory.SHUTDOWN)


class SimulationShutdownHandler(IShutdownHandler):
    """
    Priority: 110 (after the render loop, before the API server)
    """

    def __init__(self, controller: "SimulationController"):
        self.controller = controller

    @property
    def shutdown_priority(self) -> int:
        return 110

    async def shutdown(self) -> None:
        log.info("Stopping simulation...")
        self.controller.shutdown()
