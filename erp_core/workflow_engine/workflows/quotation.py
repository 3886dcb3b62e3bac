"""
Quotation Workflow
==================
draft -> submitted -> approved -> converted

A submitted quotation may be rejected (and revised back to draft); an
approved one may expire once past ``valid_until``. Any open quotation can
be cancelled.
"""

import structlog

from ..types import MachineConfig, StateConfig, Transition
from .base import amount, is_past

logger = structlog.get_logger(__name__)


def _log_submitted(ctx, event):
    logger.info("Quotation submitted", id=ctx["id"])


def _log_approved(ctx, event):
    logger.info("Quotation approved", id=ctx["id"])


def _store_rejection(ctx, event):
    ctx["rejection_reason"] = event.get("reason")
    logger.info("Quotation rejected", id=ctx["id"], reason=ctx["rejection_reason"])


def _clear_rejection(ctx, event):
    ctx["rejection_reason"] = None
    logger.info("Quotation revised", id=ctx["id"])


def _store_conversion(ctx, event):
    invoice_id = event.get("invoice_id")
    if invoice_id:
        ctx["converted_invoice_id"] = invoice_id
    logger.info("Quotation converted", id=ctx["id"], invoice_id=ctx.get("converted_invoice_id"))


def _log_entered_submitted(ctx):
    logger.debug("Entered submitted state", id=ctx["id"])


QUOTATION_MACHINE_CONFIG = MachineConfig(
    id="quotation",
    initial="draft",
    context={
        "id": 0,
        "contact_id": 0,
        "total_amount": 0,
        "valid_until": None,
        "rejection_reason": None,
        "converted_invoice_id": None,
    },
    states={
        "draft": StateConfig(
            label="Draft",
            description="Quotation is being prepared",
            on={
                "SUBMIT": Transition(
                    target="submitted",
                    guard=lambda ctx, event: amount(ctx["total_amount"]) > 0,
                    guard_message="Cannot submit quotation with zero amount",
                    actions=(_log_submitted,),
                ),
                "CANCEL": "cancelled",
            },
        ),
        "submitted": StateConfig(
            label="Submitted",
            description="Awaiting approval",
            on_enter=_log_entered_submitted,
            on={
                "APPROVE": Transition(target="approved", actions=(_log_approved,)),
                "REJECT": Transition(target="rejected", actions=(_store_rejection,)),
                "CANCEL": "cancelled",
            },
        ),
        "approved": StateConfig(
            label="Approved",
            description="Ready for conversion to invoice",
            on={
                "CONVERT": Transition(
                    target="converted",
                    guard=lambda ctx, event: not is_past(ctx["valid_until"]),
                    guard_message="Cannot convert expired quotation",
                    actions=(_store_conversion,),
                ),
                "EXPIRE": Transition(
                    target="expired",
                    guard=lambda ctx, event: is_past(ctx["valid_until"]),
                    guard_message="Quotation has not expired yet",
                ),
                "CANCEL": "cancelled",
            },
        ),
        "rejected": StateConfig(
            label="Rejected",
            description="Quotation was rejected",
            on={
                "REVISE": Transition(target="draft", actions=(_clear_rejection,)),
                "CANCEL": "cancelled",
            },
        ),
        "converted": StateConfig(label="Converted", description="Converted to invoice", final=True),
        "expired": StateConfig(label="Expired", description="Past validity date", final=True),
        "cancelled": StateConfig(label="Cancelled", description="Quotation was cancelled", final=True),
    },
)


def create_quotation_machine(**context) -> MachineConfig:
    """Quotation blueprint seeded with a document's fields."""
    return QUOTATION_MACHINE_CONFIG.with_context(context)
