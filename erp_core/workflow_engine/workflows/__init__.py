"""
Document Workflows
==================
One state chart per document type, plus a registry keyed by document type.
"""

from typing import Any, Dict, Optional

from ...shared.events import EventPublisher
from ..state_machine import StateMachine
from ..types import MachineConfig
from .bill import BILL_MACHINE_CONFIG, create_bill_machine
from .invoice import INVOICE_MACHINE_CONFIG, create_invoice_machine, payment_target_state
from .purchase_order import PURCHASE_ORDER_MACHINE_CONFIG, create_purchase_order_machine
from .quotation import QUOTATION_MACHINE_CONFIG, create_quotation_machine
from .work_order import WORK_ORDER_MACHINE_CONFIG, create_work_order_machine

WORKFLOW_CONFIGS: Dict[str, MachineConfig] = {
    config.id: config
    for config in (
        QUOTATION_MACHINE_CONFIG,
        PURCHASE_ORDER_MACHINE_CONFIG,
        INVOICE_MACHINE_CONFIG,
        WORK_ORDER_MACHINE_CONFIG,
        BILL_MACHINE_CONFIG,
    )
}


def create_machine(
    document_type: str,
    publisher: Optional[EventPublisher] = None,
    **context: Any,
) -> StateMachine:
    """
    Build a running machine for one document.

    Raises:
        KeyError: If no workflow is registered for ``document_type``
    """
    try:
        config = WORKFLOW_CONFIGS[document_type]
    except KeyError:
        raise KeyError(
            f"No workflow for document type '{document_type}'. "
            f"Known types: {sorted(WORKFLOW_CONFIGS)}"
        ) from None
    return StateMachine(config.with_context(context), publisher=publisher)


__all__ = [
    "WORKFLOW_CONFIGS",
    "create_machine",
    "QUOTATION_MACHINE_CONFIG",
    "create_quotation_machine",
    "PURCHASE_ORDER_MACHINE_CONFIG",
    "create_purchase_order_machine",
    "INVOICE_MACHINE_CONFIG",
    "create_invoice_machine",
    "payment_target_state",
    "WORK_ORDER_MACHINE_CONFIG",
    "create_work_order_machine",
    "BILL_MACHINE_CONFIG",
    "create_bill_machine",
]
