"""
Event Bus - pub-sub routing between the simulation and its observers

The SimulationController publishes from synchronous timer callbacks via
publish_nowait(); observers (log middleware, websocket fan-out, tests)
subscribe per EventType.
"""

import asyncio
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Dict, List, Optional, Set

from revdash.models.events import Event, EventType
from revdash.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.EVENT)

Handler = Callable[[Event], None]
Middleware = Callable[[Event], Optional[Event]]


@dataclass
class EventHandler:
    """Event handler registration"""
    handler: Handler
    priority: int
    filter_fn: Optional[Callable[[Event], bool]]

    @property
    def name(self) -> str:
        return getattr(self.handler, "__name__", repr(self.handler))


class EventBus:
    """
    Central event bus

    - handlers run by priority, highest first; equal priorities keep
      subscription order
    - per-handler filter_fn
    - middleware may rewrite an event or drop it by returning None
    - sync and async handlers are both accepted
    - a raising handler is logged and skipped, the rest still run

    Example:
        bus = EventBus()
        bus.subscribe(
            EventType.TRANSACTION_RECORDED,
            on_transaction,
            filter_fn=lambda e: e.transaction.amount > 100
        )
        await bus.publish(TransactionRecordedEvent(tx, total))
    """

    def __init__(self, history_limit: int = 100):
        self._handlers: Dict[EventType, List[EventHandler]] = {}
        self._middleware: List[Middleware] = []
        self._history: Deque[Event] = deque(maxlen=history_limit)
        # publish_nowait() tasks, kept referenced until they finish
        self._pending: Set[asyncio.Task] = set()

    # === Subscription ===

    def subscribe(
        self,
        event_type: EventType,
        handler: Handler,
        priority: int = 0,
        filter_fn: Optional[Callable[[Event], bool]] = None
    ) -> None:
        entries = self._handlers.setdefault(event_type, [])
        entry = EventHandler(handler, priority, filter_fn)

        # Insert after every entry of equal or higher priority
        index = next((i for i, e in enumerate(entries) if e.priority < priority), len(entries))
        entries.insert(index, entry)

        log.debug("Handler subscribed", event_type=event_type.name, handler=entry.name, priority=priority)

    def unsubscribe(self, event_type: EventType, handler: Handler) -> None:
        """Remove every registration of handler for event_type"""
        entries = self._handlers.get(event_type, [])
        self._handlers[event_type] = [e for e in entries if e.handler != handler]

    def handler_count(self, event_type: EventType) -> int:
        return len(self._handlers.get(event_type, []))

    def add_middleware(self, middleware: Middleware) -> None:
        """Middleware runs in registration order before any handler"""
        self._middleware.append(middleware)
        log.debug("Middleware registered", middleware=middleware.__name__)

    # === Publishing ===

    def _apply_middleware(self, event: Event) -> Optional[Event]:
        for middleware in self._middleware:
            event = middleware(event)
            if event is None:
                return None
        return event

    async def publish(self, event: Event) -> None:
        """Run middleware, record history, then call matching handlers"""
        processed = self._apply_middleware(event)
        if processed is None:
            return
        self._history.append(processed)

        for entry in list(self._handlers.get(processed.type, [])):
            if entry.filter_fn and not entry.filter_fn(processed):
                continue
            try:
                result = entry.handler(processed)
                if asyncio.iscoroutine(result):
                    await result
            except Exception as e:
                log.error(f"Event handler failed: {entry.name} for {processed.type.name}", error=str(e))

    def publish_nowait(self, event: Event) -> Optional[asyncio.Task]:
        """
        Schedule publish() from synchronous code (timer callbacks).

        Returns the scheduled task, or None when no event loop is running;
        the event is then dropped.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            log.debug("No running loop, event dropped", event_type=event.type.name)
            return None

        task = loop.create_task(self.publish(event))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def drain(self) -> None:
        """Wait until every publish_nowait() scheduled so far has finished"""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    # === History ===

    def get_event_history(self, limit: int = 10) -> List[Event]:
        """Recent events, newest last"""
        return list(self._history)[-limit:]

    def clear_history(self) -> None:
        self._history.clear()
