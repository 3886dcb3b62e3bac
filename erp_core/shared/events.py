"""
Event Bus
=========
Publish/subscribe channel for document lifecycle events.

The bus is an ordinary object: engines receive it through their
constructor, so tests and tenants can each own an independent instance.
"""

import inspect
from dataclasses import dataclass, field
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Awaitable, Callable, Dict, List, Optional, Protocol, Union

from pydantic import BaseModel, ConfigDict, Field
import structlog

from .config import get_settings

logger = structlog.get_logger(__name__)

WILDCARD = "*"


# Event type constants
class EventTypes:
    """Standard event types."""
    # Document lifecycle
    DOCUMENT_CREATED = "document.created"
    DOCUMENT_UPDATED = "document.updated"
    DOCUMENT_DELETED = "document.deleted"
    DOCUMENT_STATUS_CHANGED = "document.status_changed"


class StatusChangedPayload(BaseModel):
    """Payload announced after every successful workflow transition."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    document_type: str
    id: Union[int, str] = 0
    from_state: str = Field(alias="from")
    to_state: str = Field(alias="to")


@dataclass(frozen=True)
class EventMeta:
    """Optional tracing metadata attached to an event."""
    user_id: Optional[int] = None
    correlation_id: Optional[str] = None
    source: Optional[str] = None


@dataclass(frozen=True)
class AppEvent:
    """An emitted event as seen by handlers and the history log."""
    type: str
    data: Any = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    meta: Optional[EventMeta] = None

    def to_dict(self) -> Dict[str, Any]:
        data = self.data.model_dump(by_alias=True) if isinstance(self.data, BaseModel) else self.data
        return {
            "type": self.type,
            "data": data,
            "timestamp": self.timestamp.isoformat(),
        }


EventHandler = Callable[[AppEvent], Union[None, Awaitable[None]]]
Unsubscribe = Callable[[], None]


class EventPublisher(Protocol):
    """What the workflow engine needs from an event channel."""

    async def emit(
        self, event_type: str, data: Any = None, meta: Optional[EventMeta] = None
    ) -> None:
        ...


class EventBus:
    """
    Async event bus.

    Handlers may be plain functions or coroutine functions. A failing
    handler is logged and never prevents the remaining handlers from
    running, nor does it propagate to the emitter.
    """

    def __init__(self, history_size: int = 100):
        self._handlers: Dict[str, List[EventHandler]] = {}
        self._history: List[AppEvent] = []
        self._history_size = history_size
        self._enabled = True

    def subscribe(self, event_type: str, handler: EventHandler) -> Unsubscribe:
        """Subscribe a handler to an event type."""
        self._handlers.setdefault(event_type, []).append(handler)
        logger.debug("Handler subscribed", event_type=event_type)

        def unsubscribe() -> None:
            self.unsubscribe(event_type, handler)

        return unsubscribe

    def subscribe_many(self, event_types: List[str], handler: EventHandler) -> Unsubscribe:
        """Subscribe one handler to several event types."""
        unsubscribes = [self.subscribe(event_type, handler) for event_type in event_types]

        def unsubscribe() -> None:
            for unsub in unsubscribes:
                unsub()

        return unsubscribe

    def subscribe_all(self, handler: EventHandler) -> Unsubscribe:
        """Subscribe to every event (wildcard)."""
        return self.subscribe(WILDCARD, handler)

    def once(self, event_type: str, handler: EventHandler) -> Unsubscribe:
        """Subscribe a handler that is removed after its first call."""

        def wrapper(event: AppEvent):
            unsubscribe()
            return handler(event)

        wrapper.__name__ = getattr(handler, "__name__", "once_handler")
        unsubscribe = self.subscribe(event_type, wrapper)
        return unsubscribe

    def unsubscribe(self, event_type: str, handler: EventHandler) -> None:
        """Unsubscribe a handler from an event type."""
        handlers = self._handlers.get(event_type)
        if not handlers or handler not in handlers:
            return
        handlers.remove(handler)
        if not handlers:
            del self._handlers[event_type]

    async def emit(
        self, event_type: str, data: Any = None, meta: Optional[EventMeta] = None
    ) -> None:
        """Emit an event to all subscribed handlers, then wildcard handlers."""
        if not self._enabled:
            return

        event = AppEvent(type=event_type, data=data, meta=meta)

        if self._history_size > 0:
            self._history.insert(0, event)
            del self._history[self._history_size:]

        logger.info("Event emitted", event_type=event_type)

        # Copy so handlers may unsubscribe while being dispatched
        handlers = list(self._handlers.get(event_type, []))
        handlers += self._handlers.get(WILDCARD, [])
        for handler in handlers:
            await self._safe_call(handler, event)

    async def _safe_call(self, handler: EventHandler, event: AppEvent) -> None:
        try:
            result = handler(event)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.error(
                "Event handler error",
                event_type=event.type,
                handler=getattr(handler, "__name__", repr(handler)),
                error=str(e),
            )

    @property
    def history(self) -> List[AppEvent]:
        """Recorded events, most recent first."""
        return list(self._history)

    def get_event_log(self, limit: int = 100) -> List[dict]:
        """Get recent events for debugging."""
        return [event.to_dict() for event in self._history[:limit]]

    @property
    def enabled(self) -> bool:
        return self._enabled

    def enable(self) -> None:
        self._enabled = True

    def disable(self) -> None:
        """Drop events silently until re-enabled."""
        self._enabled = False

    def clear(self) -> None:
        """Remove all handlers."""
        self._handlers.clear()

    def clear_history(self) -> None:
        self._history.clear()

    def listener_count(self, event_type: str) -> int:
        return len(self._handlers.get(event_type, []))

    def event_types(self) -> List[str]:
        """Event types with at least one subscriber."""
        return list(self._handlers.keys())


@lru_cache()
def get_event_bus() -> EventBus:
    """Application-wide bus for callers that want a shared channel."""
    return EventBus(history_size=get_settings().event_history_size)
