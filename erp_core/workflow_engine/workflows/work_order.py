"""
Work Order Workflow
===================
draft -> in_progress <-> on_hold -> completed
"""

import structlog

from ..types import MachineConfig, StateConfig, Transition
from .base import amount

logger = structlog.get_logger(__name__)


def _log_started(ctx, event):
    logger.info("Work order started", id=ctx["id"], assigned_to=ctx["assigned_to"])


def _hold(ctx, event):
    ctx["hold_reason"] = event.get("reason")
    logger.info("Work order on hold", id=ctx["id"], reason=ctx["hold_reason"])


def _resume(ctx, event):
    ctx["hold_reason"] = None


def _log_time(ctx, event):
    ctx["logged_hours"] = amount(ctx["logged_hours"]) + amount(event.get("hours"))


def _log_completed(ctx, event):
    logger.info("Work order completed", id=ctx["id"], logged_hours=ctx["logged_hours"])


WORK_ORDER_MACHINE_CONFIG = MachineConfig(
    id="work_order",
    initial="draft",
    context={
        "id": 0,
        "project_id": None,
        "assigned_to": None,
        "pending_materials": 0,
        "logged_hours": 0,
        "hold_reason": None,
    },
    states={
        "draft": StateConfig(
            label="Draft",
            description="Work order is being planned",
            on={
                "START": Transition(
                    target="in_progress",
                    guard=lambda ctx, event: bool(ctx["assigned_to"]),
                    guard_message="Assign the work order before starting it",
                    actions=(_log_started,),
                ),
                "CANCEL": "cancelled",
            },
        ),
        "in_progress": StateConfig(
            label="In Progress",
            description="Work is under way",
            on={
                "PAUSE": Transition(target="on_hold", actions=(_hold,)),
                "LOG_TIME": Transition(
                    target="in_progress",
                    guard=lambda ctx, event: amount(event.get("hours")) > 0,
                    guard_message="Logged hours must be positive",
                    actions=(_log_time,),
                ),
                "COMPLETE": Transition(
                    target="completed",
                    guard=lambda ctx, event: not ctx["pending_materials"],
                    guard_message="Materials are still pending for this work order",
                    actions=(_log_completed,),
                ),
                "CANCEL": "cancelled",
            },
        ),
        "on_hold": StateConfig(
            label="On Hold",
            description="Work is paused",
            on={
                "RESUME": Transition(target="in_progress", actions=(_resume,)),
                "CANCEL": "cancelled",
            },
        ),
        "completed": StateConfig(label="Completed", description="Work finished", final=True),
        "cancelled": StateConfig(label="Cancelled", description="Work order cancelled", final=True),
    },
)


def create_work_order_machine(**context) -> MachineConfig:
    """Work order blueprint seeded with a document's fields."""
    return WORK_ORDER_MACHINE_CONFIG.with_context(context)
