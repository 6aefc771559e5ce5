# sales_tracker/core/months.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

from sales_tracker.errors import InvalidMonth

# Fixed English names; calendar.month_name follows the process locale.
MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


def resolve_month(name: str) -> int:
    """Return the 1-based ordinal of a full, case-sensitive English month name.

    Raises :class:`InvalidMonth` for anything else ("march", "Mar", "").
    """
    if not isinstance(name, str) or name not in MONTH_NAMES:
        raise InvalidMonth(name)
    return MONTH_NAMES.index(name) + 1


def month_name_of(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return MONTH_NAMES[value.month - 1]
