"""Helpers shared by the document workflow definitions."""

from datetime import date, datetime
from typing import Any, Optional, Union

Deadline = Optional[Union[date, datetime]]


def is_past(deadline: Deadline, now: Optional[datetime] = None) -> bool:
    """True once ``deadline`` lies strictly in the past. ``None`` never expires."""
    if deadline is None:
        return False
    if isinstance(deadline, datetime):
        if now is None:
            now = datetime.now(deadline.tzinfo)
        return now > deadline
    today = (now or datetime.now()).date()
    return today > deadline


def amount(value: Any) -> float:
    """Read a monetary context/payload field, treating missing values as zero."""
    if value is None:
        return 0.0
    return float(value)
