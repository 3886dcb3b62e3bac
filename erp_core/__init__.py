"""
ERP Document Core
=================
Workflow state machines for financial documents and the line item
calculations behind their totals.
"""

from .calculation import CalculationService
from .line_items import DocumentLines, LineItemStore
from .shared import EventBus, Settings, configure_logging, get_settings
from .workflow_engine import StateMachine
from .workflow_engine.workflows import WORKFLOW_CONFIGS, create_machine

__version__ = "0.1.0"

__all__ = [
    "CalculationService",
    "DocumentLines",
    "LineItemStore",
    "EventBus",
    "Settings",
    "configure_logging",
    "get_settings",
    "StateMachine",
    "WORKFLOW_CONFIGS",
    "create_machine",
]
