"""Workflow engine package."""

from .errors import (
    GuardRejectedError,
    InvalidMachineConfigError,
    InvalidTargetError,
    NoTransitionError,
    TransitionErrorKind,
    WorkflowError,
)
from .state_machine import StateMachine, TransitionRecord
from .types import (
    Event,
    MachineConfig,
    MachineState,
    MachineVisualization,
    StateConfig,
    Transition,
    TransitionResult,
)
from .visualization import to_ascii, to_graph, to_mermaid

__all__ = [
    "StateMachine",
    "TransitionRecord",
    "Event",
    "MachineConfig",
    "MachineState",
    "MachineVisualization",
    "StateConfig",
    "Transition",
    "TransitionResult",
    "TransitionErrorKind",
    "WorkflowError",
    "NoTransitionError",
    "GuardRejectedError",
    "InvalidTargetError",
    "InvalidMachineConfigError",
    "to_ascii",
    "to_graph",
    "to_mermaid",
]
