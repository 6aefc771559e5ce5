# sales_tracker/selection.py
from __future__ import annotations

import math
from typing import List, Optional

from sales_tracker.core.models import LabeledRecord
from sales_tracker.core.months import resolve_month
from sales_tracker.core.store import TransactionStore


def _parse_price(query: str) -> Optional[float]:
    # float() accepts digit separators; "1_000" is text, not a price
    if "_" in query:
        return None
    try:
        value = float(query)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def select_month(store: TransactionStore, month: int) -> List[LabeledRecord]:
    """Return every transaction sold in calendar ``month`` of any year.

    ``monthName`` comes from each record's own sale date, not from ``month``.
    """
    return [LabeledRecord.label(tx) for tx in store.query_by_month(month)]


def search_month(
    store: TransactionStore, month_name: str, query: Optional[str] = None
) -> List[LabeledRecord]:
    """Narrow one month's transactions by a free-text or price query.

    An empty query returns the whole month. Otherwise a record matches when
    its title or description contains ``query`` (case-insensitive), or when
    ``query`` parses as a number equal to its price.
    """
    month = resolve_month(month_name)
    if not query:
        return select_month(store, month)
    matches = store.query_by_month_and_text(month, query, _parse_price(query))
    return [LabeledRecord.label(tx) for tx in matches]
