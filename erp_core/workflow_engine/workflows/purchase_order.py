"""
Purchase Order Workflow
=======================
draft -> submitted -> approved -> ordered -> partial_received -> received

Partial receipts accumulate ``received_amount`` and must stay strictly
below ``total_amount``; reaching the total always goes through
``RECEIVE_FULL``.
"""

import structlog

from ..types import MachineConfig, StateConfig, Transition
from .base import amount

logger = structlog.get_logger(__name__)


def _can_submit(ctx, event):
    return amount(ctx["total_amount"]) > 0 and bool(ctx["vendor_id"])


def _stays_partial(ctx, event):
    received = amount(event.get("amount"))
    return received > 0 and amount(ctx["received_amount"]) + received < amount(ctx["total_amount"])


def _log_submitted(ctx, event):
    logger.info("PO submitted", id=ctx["id"])


def _resubmit(ctx, event):
    ctx["rejection_reason"] = None
    logger.info("PO resubmitted", id=ctx["id"])


def _log_approved(ctx, event):
    logger.info("PO approved", id=ctx["id"])


def _store_rejection(ctx, event):
    ctx["rejection_reason"] = event.get("reason")
    logger.info("PO rejected", id=ctx["id"], reason=ctx["rejection_reason"])


def _log_sent(ctx, event):
    logger.info("PO sent to vendor", id=ctx["id"])


def _receive_partial(ctx, event):
    ctx["received_amount"] = amount(ctx["received_amount"]) + amount(event.get("amount"))
    logger.info("Partial goods received", id=ctx["id"], amount=event.get("amount"))


def _receive_full(ctx, event):
    ctx["received_amount"] = ctx["total_amount"]
    logger.info("Full order received", id=ctx["id"])


_RECEIVE_PARTIAL = Transition(
    target="partial_received",
    guard=_stays_partial,
    guard_message="Partial receipt must be positive and stay below the order total",
    actions=(_receive_partial,),
)

_RECEIVE_FULL = Transition(target="received", actions=(_receive_full,))


PURCHASE_ORDER_MACHINE_CONFIG = MachineConfig(
    id="purchase_order",
    initial="draft",
    context={
        "id": 0,
        "vendor_id": 0,
        "total_amount": 0,
        "received_amount": 0,
        "expected_date": None,
        "rejection_reason": None,
    },
    states={
        "draft": StateConfig(
            label="Draft",
            description="Purchase order is being prepared",
            on={
                "SUBMIT": Transition(
                    target="submitted",
                    guard=_can_submit,
                    guard_message="PO must have a vendor and amount",
                    actions=(_log_submitted,),
                ),
                "CANCEL": "cancelled",
            },
        ),
        "submitted": StateConfig(
            label="Submitted",
            description="Awaiting approval",
            on={
                "APPROVE": Transition(target="approved", actions=(_log_approved,)),
                "REJECT": Transition(target="rejected", actions=(_store_rejection,)),
                "CANCEL": "cancelled",
            },
        ),
        "approved": StateConfig(
            label="Approved",
            description="Ready to send to vendor",
            on={
                "SEND_TO_VENDOR": Transition(target="ordered", actions=(_log_sent,)),
                "CANCEL": "cancelled",
            },
        ),
        "rejected": StateConfig(
            label="Rejected",
            description="PO was rejected",
            on={
                "SUBMIT": Transition(target="submitted", actions=(_resubmit,)),
                "CANCEL": "cancelled",
            },
        ),
        "ordered": StateConfig(
            label="Ordered",
            description="Order placed with vendor",
            on={
                "RECEIVE_PARTIAL": _RECEIVE_PARTIAL,
                "RECEIVE_FULL": _RECEIVE_FULL,
                "CANCEL": "cancelled",
            },
        ),
        "partial_received": StateConfig(
            label="Partial",
            description="Partially received",
            on={
                "RECEIVE_PARTIAL": _RECEIVE_PARTIAL,
                "RECEIVE_FULL": _RECEIVE_FULL,
            },
        ),
        "received": StateConfig(label="Received", description="All goods received", final=True),
        "cancelled": StateConfig(label="Cancelled", description="PO was cancelled", final=True),
    },
)


def create_purchase_order_machine(**context) -> MachineConfig:
    """Purchase order blueprint seeded with a document's fields."""
    return PURCHASE_ORDER_MACHINE_CONFIG.with_context(context)
