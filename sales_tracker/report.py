# sales_tracker/report.py
from __future__ import annotations

from typing import Dict, List

from sales_tracker.aggregates import category_distribution, price_histogram, sales_totals
from sales_tracker.core.models import LabeledRecord
from sales_tracker.core.months import resolve_month
from sales_tracker.core.store import TransactionStore
from sales_tracker.selection import select_month


def _select(store: TransactionStore, month_name: str) -> List[LabeledRecord]:
    # Resolve before touching the store so bad input never issues a query.
    return select_month(store, resolve_month(month_name))


def _base(records: List[LabeledRecord]) -> Dict[str, object]:
    return {"records": [r.summary() for r in records], "count": len(records)}


def sales_summary(store: TransactionStore, month_name: str) -> Dict[str, object]:
    records = _select(store, month_name)
    return {**_base(records), **sales_totals(records)}


def price_range_summary(store: TransactionStore, month_name: str) -> Dict[str, object]:
    records = _select(store, month_name)
    return {**_base(records), "priceRanges": price_histogram(records)}


def category_summary(store: TransactionStore, month_name: str) -> Dict[str, object]:
    records = _select(store, month_name)
    return {**_base(records), "categoryCounts": category_distribution(records)}


def combined_report(store: TransactionStore, month_name: str) -> Dict[str, object]:
    """Totals, price ranges and category counts for one month.

    All three views are derived from a single selection, so ``records`` and
    ``count`` always agree with every statistic in the payload.
    """
    records = _select(store, month_name)
    return {
        **_base(records),
        **sales_totals(records),
        "priceRanges": price_histogram(records),
        "categoryCounts": category_distribution(records),
    }
