"""
Vendor Bill Workflow
====================
draft -> pending -> approved -> partial -> paid

A rejected bill goes back to draft carrying the reviewer's reason.
"""

import structlog

from ..types import MachineConfig, StateConfig, Transition
from .base import amount

logger = structlog.get_logger(__name__)


def _leaves_balance(ctx, event):
    paid = amount(event.get("amount"))
    return paid > 0 and amount(ctx["paid_amount"]) + paid < amount(ctx["total_amount"])


def _submit(ctx, event):
    ctx["rejection_reason"] = None
    logger.info("Bill submitted", id=ctx["id"])


def _reject(ctx, event):
    ctx["rejection_reason"] = event.get("reason")
    logger.info("Bill rejected", id=ctx["id"], reason=ctx["rejection_reason"])


def _record_payment(ctx, event):
    ctx["paid_amount"] = amount(ctx["paid_amount"]) + amount(event.get("amount"))


def _mark_paid(ctx, event):
    ctx["paid_amount"] = ctx["total_amount"]
    logger.info("Bill paid", id=ctx["id"])


_RECORD_PAYMENT = Transition(
    target="partial",
    guard=_leaves_balance,
    guard_message="Payment must be positive and leave a balance; use MARK_PAID to close the bill",
    actions=(_record_payment,),
)


BILL_MACHINE_CONFIG = MachineConfig(
    id="bill",
    initial="draft",
    context={
        "id": 0,
        "vendor_id": 0,
        "total_amount": 0,
        "paid_amount": 0,
        "rejection_reason": None,
    },
    states={
        "draft": StateConfig(
            label="Draft",
            description="Bill is being entered",
            on={
                "SUBMIT": Transition(
                    target="pending",
                    guard=lambda ctx, event: amount(ctx["total_amount"]) > 0 and bool(ctx["vendor_id"]),
                    guard_message="Bill must have a vendor and amount",
                    actions=(_submit,),
                ),
                "CANCEL": "cancelled",
            },
        ),
        "pending": StateConfig(
            label="Pending",
            description="Awaiting approval",
            on={
                "APPROVE": "approved",
                "REJECT": Transition(target="draft", actions=(_reject,)),
                "CANCEL": "cancelled",
            },
        ),
        "approved": StateConfig(
            label="Approved",
            description="Approved for payment",
            on={
                "RECORD_PAYMENT": _RECORD_PAYMENT,
                "MARK_PAID": Transition(target="paid", actions=(_mark_paid,)),
                "CANCEL": "cancelled",
            },
        ),
        "partial": StateConfig(
            label="Partial",
            description="Partially paid",
            on={
                "RECORD_PAYMENT": _RECORD_PAYMENT,
                "MARK_PAID": Transition(target="paid", actions=(_mark_paid,)),
            },
        ),
        "paid": StateConfig(label="Paid", description="Fully paid", final=True),
        "cancelled": StateConfig(label="Cancelled", description="Bill cancelled", final=True),
    },
)


def create_bill_machine(**context) -> MachineConfig:
    """Bill blueprint seeded with a document's fields."""
    return BILL_MACHINE_CONFIG.with_context(context)
