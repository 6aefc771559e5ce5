"""Pure reductions over a month's labeled records."""

from collections import Counter
from typing import Dict, Iterable, Optional, Sequence, Tuple

# (label, inclusive upper bound); the last bucket is open-ended.
PRICE_BUCKETS: Tuple[Tuple[str, Optional[float]], ...] = (
    ("0-100", 100),
    ("101-200", 200),
    ("201-300", 300),
    ("301-400", 400),
    ("401-500", 500),
    ("501-600", 600),
    ("601-700", 700),
    ("701-800", 800),
    ("801-900", 900),
    ("901-above", None),
)


def price_bucket(price: float) -> str:
    """Return the histogram label for ``price``; prices <= 0 go to "0-100"."""
    for label, upper in PRICE_BUCKETS:
        if upper is None or price <= upper:
            return label
    raise AssertionError("PRICE_BUCKETS must end with an open-ended bucket")


def sales_totals(records: Sequence) -> Dict[str, object]:
    """Sale amount and sold/unsold counts.

    Only sold records add to ``totalSaleAmount``; every record is counted in
    exactly one of ``totalSoldItems`` and ``totalNotSoldItems``.
    """
    sold = [r for r in records if r.sold]
    return {
        "totalSaleAmount": sum(r.price for r in sold),
        "totalSoldItems": len(sold),
        "totalNotSoldItems": len(records) - len(sold),
    }


def price_histogram(records: Iterable) -> Dict[str, int]:
    histogram = {label: 0 for label, _ in PRICE_BUCKETS}
    for record in records:
        histogram[price_bucket(record.price)] += 1
    return histogram


def category_distribution(records: Iterable) -> Dict[str, int]:
    return dict(Counter(r.category for r in records))
