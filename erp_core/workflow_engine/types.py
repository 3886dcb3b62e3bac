"""
State Machine Types
===================
Declarative building blocks for document workflows.
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Tuple, Union

from .errors import TransitionErrorKind

Context = Dict[str, Any]

Guard = Callable[[Context, "Event"], bool]
Action = Callable[[Context, "Event"], Union[None, Awaitable[None]]]
Hook = Callable[[Context], Union[None, Awaitable[None]]]


@dataclass(frozen=True)
class Event:
    """A workflow event: its type plus any domain payload."""
    type: str
    payload: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def coerce(cls, event: Union[str, Mapping[str, Any], "Event"], **payload: Any) -> "Event":
        """Normalize a bare type, a ``{"type": ...}`` mapping or an Event."""
        if isinstance(event, Event):
            if not payload:
                return event
            return cls(event.type, {**event.payload, **payload})
        if isinstance(event, str):
            return cls(event, dict(payload))
        if isinstance(event, Mapping):
            data = dict(event)
            event_type = data.pop("type", None)
            if not event_type:
                raise ValueError("Event mapping requires a 'type' key")
            data.update(payload)
            return cls(event_type, data)
        raise TypeError(f"Unsupported event: {event!r}")

    def get(self, key: str, default: Any = None) -> Any:
        return self.payload.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self.payload[key]


@dataclass(frozen=True)
class Transition:
    """A guarded transition with optional actions."""
    target: str
    guard: Optional[Guard] = None
    guard_message: Optional[str] = None
    actions: Tuple[Action, ...] = ()


@dataclass(frozen=True)
class StateConfig:
    """One state of a workflow and the events it accepts."""
    label: str
    description: str = ""
    final: bool = False
    on_enter: Optional[Hook] = None
    on_exit: Optional[Hook] = None
    on: Mapping[str, Union[Transition, str]] = field(default_factory=dict)


@dataclass(frozen=True)
class MachineConfig:
    """
    Immutable workflow blueprint.

    One instance per document type; ``with_context`` derives a per-document
    blueprint by merging a seed context over the defaults.
    """
    id: str
    initial: str
    context: Mapping[str, Any]
    states: Mapping[str, StateConfig]

    def with_context(self, overrides: Optional[Mapping[str, Any]] = None, **fields: Any) -> "MachineConfig":
        context = copy.deepcopy(dict(self.context))
        context.update(overrides or {})
        context.update(fields)
        return MachineConfig(id=self.id, initial=self.initial, context=context, states=self.states)

    def undefined_targets(self) -> List[Tuple[str, str, str]]:
        """``(state, event, target)`` for every transition to an unknown state."""
        missing = []
        for state_name, state in self.states.items():
            for event_type, transition in state.on.items():
                target = resolve_target(transition)
                if target not in self.states:
                    missing.append((state_name, event_type, target))
        return missing


@dataclass(frozen=True)
class MachineState:
    """Runtime snapshot of a machine."""
    value: str
    context: Context
    config: StateConfig

    @property
    def done(self) -> bool:
        return self.config.final


@dataclass(frozen=True)
class TransitionResult:
    """Outcome of ``StateMachine.transition``."""
    success: bool
    state: MachineState
    error: Optional[str] = None
    error_kind: Optional[TransitionErrorKind] = None


@dataclass(frozen=True)
class VisualState:
    name: str
    label: str
    final: bool


@dataclass(frozen=True)
class VisualTransition:
    source: str
    target: str
    event: str


@dataclass(frozen=True)
class MachineVisualization:
    """State/transition graph of a machine for diagnostic tooling."""
    id: str
    states: Tuple[VisualState, ...]
    transitions: Tuple[VisualTransition, ...]
    current_state: str
    initial: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "states": [
                {"name": s.name, "label": s.label, "final": s.final} for s in self.states
            ],
            "transitions": [
                {"from": t.source, "to": t.target, "event": t.event} for t in self.transitions
            ],
            "current_state": self.current_state,
            "initial": self.initial,
        }


def resolve_target(transition: Union[Transition, str]) -> str:
    return transition if isinstance(transition, str) else transition.target
