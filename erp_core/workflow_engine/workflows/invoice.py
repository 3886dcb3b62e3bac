"""
Invoice Workflow
================
draft -> sent -> partial / overdue -> paid

``RECORD_PAYMENT`` books an instalment that leaves a balance outstanding;
``SETTLE`` books the remaining balance and closes the invoice.
"""

from typing import Literal

import structlog

from ..types import MachineConfig, StateConfig, Transition
from .base import amount, is_past

logger = structlog.get_logger(__name__)


def payment_target_state(paid_amount: float, total_amount: float) -> Literal["paid", "partial"]:
    """State an invoice belongs in once ``paid_amount`` has been received."""
    return "paid" if paid_amount >= total_amount else "partial"


def _leaves_balance(ctx, event):
    paid = amount(event.get("amount"))
    after = amount(ctx["paid_amount"]) + paid
    return paid > 0 and payment_target_state(after, amount(ctx["total_amount"])) == "partial"


def _is_overdue(ctx, event):
    return is_past(ctx["due_date"])


def _log_sent(ctx, event):
    logger.info("Invoice sent", id=ctx["id"])


def _record_payment(ctx, event):
    ctx["paid_amount"] = amount(ctx["paid_amount"]) + amount(event.get("amount"))
    logger.info(
        "Payment recorded",
        id=ctx["id"],
        amount=event.get("amount"),
        total=ctx["paid_amount"],
    )


def _settle(ctx, event):
    balance = amount(ctx["total_amount"]) - amount(ctx["paid_amount"])
    ctx["paid_amount"] = ctx["total_amount"]
    logger.info("Final payment recorded", id=ctx["id"], amount=balance)


def _log_paid(ctx):
    logger.info("Invoice fully paid", id=ctx["id"], total=ctx["total_amount"])


_RECORD_PAYMENT = Transition(
    target="partial",
    guard=_leaves_balance,
    guard_message="Payment must be positive and leave a balance; use SETTLE to close the invoice",
    actions=(_record_payment,),
)

_SETTLE = Transition(target="paid", actions=(_settle,))

_MARK_OVERDUE = Transition(
    target="overdue",
    guard=_is_overdue,
    guard_message="Invoice is not yet overdue",
)


INVOICE_MACHINE_CONFIG = MachineConfig(
    id="invoice",
    initial="draft",
    context={
        "id": 0,
        "contact_id": 0,
        "total_amount": 0,
        "paid_amount": 0,
        "due_date": None,
    },
    states={
        "draft": StateConfig(
            label="Draft",
            description="Invoice is being prepared",
            on={
                "SEND": Transition(
                    target="sent",
                    guard=lambda ctx, event: amount(ctx["total_amount"]) > 0,
                    guard_message="Cannot send invoice with zero amount",
                    actions=(_log_sent,),
                ),
                "CANCEL": "cancelled",
            },
        ),
        "sent": StateConfig(
            label="Sent",
            description="Invoice sent to customer",
            on={
                "RECORD_PAYMENT": _RECORD_PAYMENT,
                "SETTLE": _SETTLE,
                "MARK_OVERDUE": _MARK_OVERDUE,
                "VOID": "void",
            },
        ),
        "partial": StateConfig(
            label="Partial",
            description="Partially paid",
            on={
                "RECORD_PAYMENT": _RECORD_PAYMENT,
                "SETTLE": _SETTLE,
                "MARK_OVERDUE": _MARK_OVERDUE,
                "VOID": "void",
            },
        ),
        "overdue": StateConfig(
            label="Overdue",
            description="Payment is past due",
            on={
                "RECORD_PAYMENT": Transition(
                    target="overdue",
                    guard=_leaves_balance,
                    guard_message=_RECORD_PAYMENT.guard_message,
                    actions=(_record_payment,),
                ),
                "SETTLE": _SETTLE,
                "VOID": "void",
            },
        ),
        "paid": StateConfig(label="Paid", description="Fully paid", final=True, on_enter=_log_paid),
        "void": StateConfig(label="Void", description="Invoice voided", final=True),
        "cancelled": StateConfig(label="Cancelled", description="Invoice cancelled", final=True),
    },
)


def create_invoice_machine(**context) -> MachineConfig:
    """Invoice blueprint seeded with a document's fields."""
    return INVOICE_MACHINE_CONFIG.with_context(context)
