"""
Workflow State Machine
======================
Document lifecycle interpreter.

A ``StateMachine`` runs one ``MachineConfig`` against a private context.
Transitions are guarded, run exit/transition/enter hooks in order, and
announce the status change on the injected event publisher.
"""

import asyncio
import copy
import inspect
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, List, Mapping, Optional, Union

import structlog

from ..shared.events import EventPublisher, EventTypes, StatusChangedPayload
from .errors import (
    GuardRejectedError,
    InvalidMachineConfigError,
    InvalidTargetError,
    NoTransitionError,
    TransitionErrorKind,
    WorkflowError,
)
from .types import (
    Context,
    Event,
    MachineConfig,
    MachineState,
    MachineVisualization,
    StateConfig,
    Transition,
    TransitionResult,
    VisualState,
    VisualTransition,
    resolve_target,
)

logger = structlog.get_logger(__name__)

EventLike = Union[str, Mapping[str, Any], Event]


@dataclass(frozen=True)
class TransitionRecord:
    """A completed transition."""
    from_state: str
    to_state: str
    event: str
    timestamp: datetime


async def _invoke(fn: Optional[Callable], *args: Any) -> None:
    if fn is None:
        return
    result = fn(*args)
    if inspect.isawaitable(result):
        await result


class StateMachine:
    """
    Runtime automaton for a single document.

    The context is owned by the machine: it is deep-copied from the
    blueprint, handed live only to hooks and actions, and exposed to
    callers as copies. A failed transition restores the context captured
    before the exit hook ran. Concurrent ``transition`` calls on one
    instance are serialized.
    """

    def __init__(
        self,
        config: MachineConfig,
        publisher: Optional[EventPublisher] = None,
    ):
        if config.initial not in config.states:
            raise InvalidMachineConfigError(f"Invalid initial state: {config.initial}")

        self._config = config
        self._publisher = publisher
        self._value = config.initial
        self._context: Context = copy.deepcopy(dict(config.context))
        self._history: List[TransitionRecord] = []
        self._is_transitioning = False
        self._lock = asyncio.Lock()
        self.logger = logger.bind(machine=config.id)

        for state, event_type, target in config.undefined_targets():
            self.logger.warning(
                "Transition points at undefined state",
                state=state,
                event_type=event_type,
                target=target,
            )

        self.logger.debug("State machine initialized", initial=config.initial)

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def id(self) -> str:
        return self._config.id

    @property
    def config(self) -> MachineConfig:
        return self._config

    @property
    def value(self) -> str:
        return self._value

    @property
    def state_config(self) -> StateConfig:
        return self._config.states[self._value]

    @property
    def state(self) -> MachineState:
        return MachineState(
            value=self._value,
            context=copy.deepcopy(self._context),
            config=self.state_config,
        )

    @property
    def context(self) -> Context:
        return copy.deepcopy(self._context)

    @property
    def done(self) -> bool:
        return self.state_config.final

    @property
    def label(self) -> str:
        return self.state_config.label

    @property
    def description(self) -> str:
        return self.state_config.description

    @property
    def is_transitioning(self) -> bool:
        return self._is_transitioning

    @property
    def history(self) -> List[TransitionRecord]:
        return list(self._history)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_available_transitions(self) -> List[str]:
        """Events declared by the current state, regardless of guards."""
        return list(self.state_config.on.keys())

    def can_transition(self, event: EventLike, **payload: Any) -> bool:
        """Whether ``event`` is declared here and its guard passes. No side effects."""
        try:
            event = Event.coerce(event, **payload)
            transition = self._lookup(event.type)
            self._check_guard(transition, event)
        except (WorkflowError, TypeError, ValueError):
            return False
        return True

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    async def transition(self, event: EventLike, **payload: Any) -> TransitionResult:
        """
        Attempt a transition.

        Never raises: every failure is reported through
        ``TransitionResult.success`` and ``TransitionResult.error``.
        """
        try:
            event = Event.coerce(event, **payload)
        except (TypeError, ValueError) as e:
            self.logger.warning("Malformed event", error=str(e))
            return self._failure(str(e), TransitionErrorKind.NO_TRANSITION)

        async with self._lock:
            return await self._run(event)

    async def _run(self, event: Event) -> TransitionResult:
        from_state = self._value
        self.logger.debug("Transition requested", from_state=from_state, event_type=event.type)

        try:
            transition = self._lookup(event.type)
            self._check_guard(transition, event)
            target = resolve_target(transition)
            if target not in self._config.states:
                raise InvalidTargetError(target)
        except InvalidTargetError as e:
            self.logger.error(
                "Malformed workflow definition",
                from_state=from_state,
                event_type=event.type,
                error=str(e),
            )
            return self._failure(str(e), e.kind)
        except WorkflowError as e:
            self.logger.warning(
                "Transition rejected",
                from_state=from_state,
                event_type=event.type,
                reason=str(e),
            )
            return self._failure(str(e), e.kind)

        source_config = self._config.states[from_state]
        target_config = self._config.states[target]
        actions = () if isinstance(transition, str) else transition.actions
        snapshot = copy.deepcopy(self._context)

        self._is_transitioning = True
        try:
            await _invoke(source_config.on_exit, self._context)
            for action in actions:
                await _invoke(action, self._context, event)

            self._value = target
            await _invoke(target_config.on_enter, self._context)
            await self._publish(from_state, target)
        except Exception as e:
            self._value = from_state
            self._context.clear()
            self._context.update(snapshot)
            self.logger.error(
                "Transition failed",
                from_state=from_state,
                event_type=event.type,
                error=str(e),
                exc_info=True,
            )
            return self._failure(str(e), TransitionErrorKind.ACTION_FAILED)
        finally:
            self._is_transitioning = False

        self._history.append(
            TransitionRecord(
                from_state=from_state,
                to_state=target,
                event=event.type,
                timestamp=datetime.now(timezone.utc),
            )
        )
        self.logger.info(
            "Transition completed",
            from_state=from_state,
            to_state=target,
            event_type=event.type,
        )
        return TransitionResult(success=True, state=self.state)

    def _lookup(self, event_type: str) -> Union[Transition, str]:
        transition = self.state_config.on.get(event_type)
        if transition is None:
            raise NoTransitionError(event_type, self._value)
        return transition

    def _check_guard(self, transition: Union[Transition, str], event: Event) -> None:
        if isinstance(transition, str) or transition.guard is None:
            return
        try:
            allowed = transition.guard(copy.deepcopy(self._context), event)
        except Exception as e:
            raise GuardRejectedError(event.type, f"Guard failed for '{event.type}': {e}") from e
        if inspect.isawaitable(allowed):
            if hasattr(allowed, "close"):
                allowed.close()
            raise GuardRejectedError(event.type, f"Guard for '{event.type}' must be synchronous")
        if not allowed:
            raise GuardRejectedError(event.type, transition.guard_message)

    async def _publish(self, from_state: str, to_state: str) -> None:
        if self._publisher is None:
            return
        document_id = self._context.get("id")
        if not isinstance(document_id, (int, str)) or isinstance(document_id, bool):
            document_id = 0
        payload = StatusChangedPayload(
            document_type=self._config.id,
            id=document_id,
            from_state=from_state,
            to_state=to_state,
        )
        await self._publisher.emit(EventTypes.DOCUMENT_STATUS_CHANGED, payload)

    def _failure(self, error: str, kind: TransitionErrorKind) -> TransitionResult:
        return TransitionResult(success=False, state=self.state, error=error, error_kind=kind)

    # ------------------------------------------------------------------
    # Context management
    # ------------------------------------------------------------------

    def update_context(self, updates: Optional[Mapping[str, Any]] = None, **fields: Any) -> None:
        """Merge fields into the context without transitioning or emitting."""
        merged = dict(updates or {})
        merged.update(fields)
        self._context.update(copy.deepcopy(merged))

    def reset(self, context: Optional[Mapping[str, Any]] = None, **fields: Any) -> None:
        """Return to the initial state, re-seeding the context from the blueprint."""
        seed = copy.deepcopy(dict(self._config.context))
        seed.update(copy.deepcopy(dict(context or {})))
        seed.update(copy.deepcopy(fields))
        self._value = self._config.initial
        self._context = seed
        self._history.clear()
        self.logger.debug("State machine reset", initial=self._config.initial)

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def to_visualization(self) -> MachineVisualization:
        """Project the state chart as a graph; no side effects."""
        states = tuple(
            VisualState(name=name, label=config.label, final=config.final)
            for name, config in self._config.states.items()
        )
        transitions = tuple(
            VisualTransition(source=name, target=resolve_target(transition), event=event_type)
            for name, config in self._config.states.items()
            for event_type, transition in config.on.items()
        )
        return MachineVisualization(
            id=self._config.id,
            states=states,
            transitions=transitions,
            current_state=self._value,
            initial=self._config.initial,
        )
