"""
Shared Infrastructure
=====================
Configuration, logging and the event channel used by the engines.
"""

from .config import Settings, get_settings
from .events import (
    AppEvent,
    EventBus,
    EventMeta,
    EventPublisher,
    EventTypes,
    StatusChangedPayload,
    get_event_bus,
)
from .logging_config import configure_logging

__all__ = [
    "Settings",
    "get_settings",
    "AppEvent",
    "EventBus",
    "EventMeta",
    "EventPublisher",
    "EventTypes",
    "StatusChangedPayload",
    "get_event_bus",
    "configure_logging",
]
