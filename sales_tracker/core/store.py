# sales_tracker/core/store.py
from __future__ import annotations

from typing import Iterable, List, Optional, Protocol

from sales_tracker.core.models import Transaction


class TransactionStore(Protocol):
    """Storage capabilities the month engine relies on.

    Month matching uses the calendar month of ``date_of_sale`` in any year;
    records without a sale date never match. Text matching is a
    case-insensitive substring test against title and description.
    """

    def find_all(self) -> List[Transaction]:
        ...

    def count(self) -> int:
        ...

    def insert_many(self, transactions: Iterable[Transaction]) -> int:
        ...

    def insert_if_empty(self, transactions: Iterable[Transaction]) -> int:
        """Insert only when the store holds no rows; return rows inserted."""

    def query_by_month(self, month: int) -> List[Transaction]:
        ...

    def query_by_month_and_text(
        self, month: int, text: str, price: Optional[float] = None
    ) -> List[Transaction]:
        """Month rows whose title or description contains ``text``, or whose
        price equals ``price`` when one is given."""
