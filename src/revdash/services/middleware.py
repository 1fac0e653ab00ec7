"""
Middleware for EventBus

Middleware = pipeline functions that process events before handlers.
Can modify events, block events, or log/validate events.
"""

from revdash.models.events import Event, EventType
from revdash.utils.logger import get_logger, LogCategory
from revdash.utils.serialization import Serializer

log = get_logger().for_category(LogCategory.EVENT)


def log_middleware(event: Event) -> Event:
    """
    Log all events for debugging

    Ticks are logged at debug level (one per second), everything else at
    info level.

    Usage:
        event_bus.add_middleware(log_middleware)
    """
    source_str = Serializer.enum_to_str(event.source)

    if event.type == EventType.REVENUE_TICKED:
        log.debug(f"Event: {event.type.name} from {source_str} | total={event.data['total']:.2f}")
        return event

    if event.type == EventType.TRANSACTION_RECORDED:
        tx = event.data["transaction"]
        data_str = f"{tx.category.value} {tx.amount:.2f} ({tx.description})"
    else:
        data_str = ", ".join(f"{k}={Serializer.to_str(v)}" for k, v in event.data.items())

    log.info(f"Event: {event.type.name} from {source_str} | {data_str}")
    return event
