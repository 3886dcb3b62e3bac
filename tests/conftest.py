"""Shared fixtures for the core test suite."""

import os

import pytest

from erp_core.calculation import CalculationService
from erp_core.shared.config import get_settings
from erp_core.shared.events import EventBus, EventTypes
from erp_core.workflow_engine import MachineConfig, StateConfig, StateMachine, Transition


@pytest.fixture(autouse=True)
def clear_settings_cache(monkeypatch):
    """Isolate tests from the developer's environment and cached settings."""
    for key in list(os.environ):
        if key.startswith("ERP_CORE_"):
            monkeypatch.delenv(key)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def event_bus():
    return EventBus(history_size=10)


@pytest.fixture
def status_events(event_bus):
    """Every ``document.status_changed`` payload emitted on ``event_bus``."""
    received = []
    event_bus.subscribe(EventTypes.DOCUMENT_STATUS_CHANGED, lambda event: received.append(event.data))
    return received


@pytest.fixture
def service():
    return CalculationService()


@pytest.fixture
def door_config():
    """Small open/closed/locked machine used to exercise the engine itself."""
    return MachineConfig(
        id="door",
        initial="closed",
        context={"id": 7, "opens": 0, "locked_by": None},
        states={
            "closed": StateConfig(
                label="Closed",
                on={
                    "OPEN": Transition(
                        target="open",
                        actions=(lambda ctx, event: ctx.__setitem__("opens", ctx["opens"] + 1),),
                    ),
                    "LOCK": Transition(
                        target="locked",
                        guard=lambda ctx, event: bool(event.get("key")),
                        guard_message="A key is required",
                        actions=(lambda ctx, event: ctx.__setitem__("locked_by", event.get("key")),),
                    ),
                    "BREAK": "broken",
                },
            ),
            "open": StateConfig(label="Open", on={"CLOSE": "closed"}),
            "locked": StateConfig(label="Locked", on={"UNLOCK": "closed"}),
            "broken": StateConfig(label="Broken", description="Beyond repair", final=True),
        },
    )


@pytest.fixture
def door(door_config, event_bus):
    return StateMachine(door_config, publisher=event_bus)
