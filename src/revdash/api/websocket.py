"""
WebSocket handler for real-time dashboard streaming.

Each client gets its own RenderLoop subscription: a size-1 queue that
always holds the latest frame, so a slow client skips frames instead of
building a backlog. Frames are the Serializer.snapshot_to_dict payload:

    {
        "displayed_total": 47832.79,
        "total": 47833.02,
        "state": "LIVE",
        "live": true,
        "transactions": [...],
        ...
    }
"""

import asyncio

from fastapi import WebSocket, WebSocketDisconnect

from revdash.api.dependencies import get_optional_service_container
from revdash.utils.logger import get_category_logger, LogCategory
from revdash.utils.serialization import Serializer

log = get_category_logger(LogCategory.WEBSOCKET)


async def _watch_disconnect(websocket: WebSocket) -> None:
    """Drain client messages; returns once the client goes away."""
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        return


async def websocket_dashboard_endpoint(websocket: WebSocket) -> None:
    await websocket.accept()
    client_addr = websocket.client
    log.info(f"WebSocket connection accepted from {client_addr}")

    services = get_optional_service_container()
    if services is None:
        log.error("Service container missing, closing websocket")
        await websocket.close(code=1013, reason="Simulation not ready")
        return

    render_loop = services.render_loop
    queue = render_loop.subscribe()

    # First frame immediately, even if the render task has not ticked yet
    if queue.empty():
        await websocket.send_json(Serializer.snapshot_to_dict(services.controller.snapshot()))

    watcher = asyncio.create_task(_watch_disconnect(websocket))
    try:
        while not watcher.done():
            getter = asyncio.create_task(queue.get())
            done, _ = await asyncio.wait({getter, watcher}, return_when=asyncio.FIRST_COMPLETED)
            if getter not in done:
                getter.cancel()
                break
            await websocket.send_json(Serializer.snapshot_to_dict(getter.result()))

    except WebSocketDisconnect:
        pass

    finally:
        render_loop.unsubscribe(queue)
        if not watcher.done():
            watcher.cancel()
        log.info(f"WebSocket {client_addr} disconnected", subscribers=render_loop.subscriber_count)
