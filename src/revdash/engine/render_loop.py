"""
RenderLoop - host-side sampling loop for the dashboard read model.

Architecture:
  - render_once() is one explicit, synchronous step: sample the snapshot
    provider (which samples the CounterAnimator) and fan the frame out to
    subscribers
  - the asyncio task started by start() only calls render_once() at the
    target FPS; tests call render_once() directly
  - each subscriber gets a size-1 queue holding only the latest frame, so a
    slow consumer never builds a backlog
  - identical consecutive frames are not re-delivered
"""

from __future__ import annotations

import asyncio
import time
from collections import deque
from typing import Callable, Deque, Dict, List, Optional

from revdash.models.dashboard import DashboardSnapshot
from revdash.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.RENDER)

SnapshotProvider = Callable[[], DashboardSnapshot]


class RenderLoop:
    """
    Samples the simulation at a fixed rate and publishes frames.

    Manages:
    - Subscriber queues (websocket clients, tests)
    - Change detection (skip unchanged frames)
    - Performance metrics
    """

    def __init__(self, provider: SnapshotProvider, fps: int = 60):
        self.provider = provider
        self.fps = max(1, min(fps, 240))

        self._subscribers: List[asyncio.Queue] = []

        # Runtime state
        self.running = False
        self.render_task: Optional[asyncio.Task] = None

        # Metrics
        self.frame_times: Deque[float] = deque(maxlen=300)
        self.frames_rendered = 0
        self.frames_skipped = 0
        self.last_frame: Optional[DashboardSnapshot] = None

        log.info("RenderLoop initialized", fps=self.fps)

    # === Subscribers ===

    def subscribe(self) -> asyncio.Queue:
        """Register a consumer; the returned queue always holds the latest frame"""
        queue: asyncio.Queue = asyncio.Queue(maxsize=1)
        self._subscribers.append(queue)
        if self.last_frame is not None:
            queue.put_nowait(self.last_frame)
        log.debug("Render subscriber added", subscribers=len(self._subscribers))
        return queue

    def unsubscribe(self, queue: asyncio.Queue) -> None:
        if queue in self._subscribers:
            self._subscribers.remove(queue)
            log.debug("Render subscriber removed", subscribers=len(self._subscribers))

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    # === Rendering ===

    def render_once(self) -> DashboardSnapshot:
        """Take one sample and deliver it if it differs from the last one"""
        frame = self.provider()

        if frame == self.last_frame:
            self.frames_skipped += 1
            return frame

        self.last_frame = frame
        self.frames_rendered += 1
        self.frame_times.append(time.perf_counter())

        for queue in self._subscribers:
            if queue.full():
                queue.get_nowait()
            queue.put_nowait(frame)

        return frame

    # === Lifecycle ===

    async def start(self) -> None:
        """Start the render loop task."""
        if self.running:
            log.warn("RenderLoop already running")
            return

        self.running = True
        self.render_task = asyncio.create_task(self._render_loop())
        log.info(f"RenderLoop started @ {self.fps} FPS")

    async def stop(self) -> None:
        """Stop the render loop task."""
        if not self.running:
            return
        self.running = False
        if self.render_task:
            self.render_task.cancel()
            try:
                await self.render_task
            except asyncio.CancelledError:
                pass
            self.render_task = None

        log.info(
            "RenderLoop stopped",
            frames_rendered=self.frames_rendered,
            frames_skipped=self.frames_skipped,
        )

    async def _render_loop(self) -> None:
        """Main render loop @ target FPS."""
        while self.running:
            try:
                self.render_once()
            except Exception as e:
                log.error(f"Render error: {e}", exc_info=True)

            await asyncio.sleep(1.0 / self.fps)

    # === Metrics ===

    def get_actual_fps(self) -> float:
        """Measured delivery rate over recent frames."""
        if len(self.frame_times) < 2:
            return 0.0
        duration = self.frame_times[-1] - self.frame_times[0]
        if duration <= 0:
            return 0.0
        return len(self.frame_times) / duration

    def get_metrics(self) -> Dict:
        return {
            "fps_target": self.fps,
            "fps_actual": self.get_actual_fps(),
            "frames_rendered": self.frames_rendered,
            "frames_skipped": self.frames_skipped,
            "subscribers": self.subscriber_count,
        }
