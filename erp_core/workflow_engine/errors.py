"""
Workflow Errors
===============
Failure taxonomy for state machine transitions.

The engine raises these internally and converts them into a failed
``TransitionResult``; only ``InvalidMachineConfigError`` escapes, from the
constructor, because it signals a malformed workflow definition.
"""

from enum import Enum
from typing import Optional


class TransitionErrorKind(str, Enum):
    """Why a transition did not complete."""
    NO_TRANSITION = "no_transition"
    GUARD_REJECTED = "guard_rejected"
    INVALID_TARGET = "invalid_target"
    ACTION_FAILED = "action_failed"


class WorkflowError(Exception):
    """Base class for workflow failures."""
    kind = TransitionErrorKind.ACTION_FAILED


class NoTransitionError(WorkflowError):
    """The current state does not declare the requested event."""
    kind = TransitionErrorKind.NO_TRANSITION

    def __init__(self, event_type: str, state: str):
        self.event_type = event_type
        self.state = state
        super().__init__(f"No transition '{event_type}' from state '{state}'")


class GuardRejectedError(WorkflowError):
    """The transition is declared but its guard returned false."""
    kind = TransitionErrorKind.GUARD_REJECTED

    def __init__(self, event_type: str, message: Optional[str] = None):
        self.event_type = event_type
        super().__init__(message or f"Guard blocked transition '{event_type}'")


class InvalidTargetError(WorkflowError):
    """A transition points at a state the machine does not define."""
    kind = TransitionErrorKind.INVALID_TARGET

    def __init__(self, target: str):
        self.target = target
        super().__init__(f"Invalid target state: {target}")


class InvalidMachineConfigError(WorkflowError, ValueError):
    """The machine blueprint itself is malformed."""
