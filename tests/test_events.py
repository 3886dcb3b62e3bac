"""
Unit tests for the event bus
"""
import asyncio

import pytest
from pydantic import ValidationError

from erp_core.shared.events import (
    AppEvent,
    EventBus,
    EventMeta,
    EventTypes,
    StatusChangedPayload,
    get_event_bus,
)


class TestSubscriptions:
    """Tests for subscribe, unsubscribe and dispatch."""

    @pytest.mark.asyncio
    async def test_emit_reaches_subscribers(self, event_bus):
        received = []
        event_bus.subscribe("document.created", received.append)

        await event_bus.emit("document.created", {"id": 1})

        assert len(received) == 1
        assert isinstance(received[0], AppEvent)
        assert received[0].type == "document.created"
        assert received[0].data == {"id": 1}

    @pytest.mark.asyncio
    async def test_async_handlers_are_awaited(self, event_bus):
        received = []

        async def handler(event):
            await asyncio.sleep(0)
            received.append(event.type)

        event_bus.subscribe("document.updated", handler)
        await event_bus.emit("document.updated")

        assert received == ["document.updated"]

    @pytest.mark.asyncio
    async def test_unsubscribe(self, event_bus):
        received = []
        unsubscribe = event_bus.subscribe("document.created", received.append)

        unsubscribe()
        await event_bus.emit("document.created")

        assert received == []
        assert event_bus.listener_count("document.created") == 0

    @pytest.mark.asyncio
    async def test_wildcard_runs_after_type_handlers(self, event_bus):
        order = []
        event_bus.subscribe_all(lambda event: order.append("all"))
        event_bus.subscribe("document.deleted", lambda event: order.append("typed"))

        await event_bus.emit("document.deleted")
        await event_bus.emit("document.created")

        assert order == ["typed", "all", "all"]

    @pytest.mark.asyncio
    async def test_subscribe_many(self, event_bus):
        received = []
        unsubscribe = event_bus.subscribe_many(["a", "b"], lambda event: received.append(event.type))

        await event_bus.emit("a")
        await event_bus.emit("b")
        unsubscribe()
        await event_bus.emit("a")

        assert received == ["a", "b"]

    @pytest.mark.asyncio
    async def test_once(self, event_bus):
        received = []
        event_bus.once("document.created", received.append)

        await event_bus.emit("document.created")
        await event_bus.emit("document.created")

        assert len(received) == 1

    @pytest.mark.asyncio
    async def test_failing_handler_does_not_stop_others(self, event_bus):
        """Test one broken subscriber cannot starve the rest or the emitter."""
        received = []

        def broken(event):
            raise RuntimeError("boom")

        event_bus.subscribe("document.created", broken)
        event_bus.subscribe("document.created", received.append)

        await event_bus.emit("document.created")

        assert len(received) == 1

    @pytest.mark.asyncio
    async def test_disabled_bus_drops_events(self, event_bus):
        received = []
        event_bus.subscribe("document.created", received.append)

        event_bus.disable()
        await event_bus.emit("document.created")
        assert event_bus.enabled is False

        event_bus.enable()
        await event_bus.emit("document.created")

        assert len(received) == 1
        assert len(event_bus.history) == 1

    def test_clear_and_event_types(self, event_bus):
        event_bus.subscribe("a", print)
        event_bus.subscribe("b", print)

        assert sorted(event_bus.event_types()) == ["a", "b"]

        event_bus.clear()
        assert event_bus.event_types() == []


class TestHistory:
    """Tests for the bounded event history."""

    @pytest.mark.asyncio
    async def test_history_newest_first_and_bounded(self):
        bus = EventBus(history_size=2)

        for name in ("one", "two", "three"):
            await bus.emit(name)

        assert [event.type for event in bus.history] == ["three", "two"]

    @pytest.mark.asyncio
    async def test_zero_history(self):
        bus = EventBus(history_size=0)
        await bus.emit("one")
        assert bus.history == []

    @pytest.mark.asyncio
    async def test_event_log_serializes_payload_models(self, event_bus):
        payload = StatusChangedPayload(document_type="invoice", id=5, from_state="draft", to_state="sent")

        await event_bus.emit(EventTypes.DOCUMENT_STATUS_CHANGED, payload, EventMeta(user_id=3))

        log = event_bus.get_event_log()
        assert log[0]["type"] == "document.status_changed"
        assert log[0]["data"] == {"document_type": "invoice", "id": 5, "from": "draft", "to": "sent"}
        assert event_bus.history[0].meta.user_id == 3

    @pytest.mark.asyncio
    async def test_clear_history(self, event_bus):
        await event_bus.emit("one")
        event_bus.clear_history()
        assert event_bus.history == []


class TestStatusChangedPayload:
    """Tests for the lifecycle payload model."""

    def test_accepts_aliases(self):
        payload = StatusChangedPayload.model_validate(
            {"document_type": "bill", "id": "B-1", "from": "draft", "to": "pending"}
        )

        assert payload.from_state == "draft"
        assert payload.to_state == "pending"
        assert payload.id == "B-1"

    def test_is_frozen(self):
        payload = StatusChangedPayload(document_type="bill", from_state="draft", to_state="pending")
        with pytest.raises(ValidationError):
            payload.to_state = "paid"


def test_shared_bus_is_cached():
    get_event_bus.cache_clear()
    try:
        assert get_event_bus() is get_event_bus()
    finally:
        get_event_bus.cache_clear()
