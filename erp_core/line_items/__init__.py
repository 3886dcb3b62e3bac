"""
Line Items
==========
Ordered, bounded line item storage and its calculated view.
"""

from .document_lines import DocumentLines
from .store import DEFAULT_LINE_ITEM, LineItem, LineItemStore, ValidationResult

__all__ = [
    "DocumentLines",
    "LineItem",
    "LineItemStore",
    "ValidationResult",
    "DEFAULT_LINE_ITEM",
]
