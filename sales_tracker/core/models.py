# sales_tracker/core/models.py
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sales_tracker.core.months import month_name_of

TEXT_FIELDS = ("title", "description", "category", "image")


def parse_timestamp(value) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp into an aware UTC datetime.

    Naive values are taken to already be in UTC. ``None`` and ``""`` mean the
    timestamp is unknown.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    else:
        raise ValueError(f"Unrecognized timestamp: {value!r}")
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds")


@dataclass
class Transaction:
    id: int
    title: str
    price: float
    description: str
    category: str
    image: str
    sold: bool = False
    date_of_sale: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> Transaction:
        """Build a transaction from a seed-source object.

        Raises ``ValueError`` when a required field is missing or malformed.
        """
        if not isinstance(payload, dict):
            raise ValueError(f"Transaction payload must be an object: {payload!r}")

        raw_id = payload.get("id")
        if isinstance(raw_id, bool) or raw_id is None:
            raise ValueError(f"Missing or invalid 'id' in transaction: {payload}")
        if isinstance(raw_id, float) and not raw_id.is_integer():
            raise ValueError(f"'id' must be a whole number in transaction: {payload}")
        tx_id = int(raw_id)

        texts = {}
        for field in TEXT_FIELDS:
            value = payload.get(field)
            if not isinstance(value, str) or not value:
                raise ValueError(f"Missing '{field}' in transaction {tx_id}")
            texts[field] = value

        raw_price = payload.get("price")
        if isinstance(raw_price, bool) or raw_price is None:
            raise ValueError(f"Missing 'price' in transaction {tx_id}")
        price = float(raw_price)
        if not math.isfinite(price) or price < 0:
            raise ValueError(f"Price must be a non-negative number in transaction {tx_id}")

        sold = payload.get("sold", False)
        if not isinstance(sold, bool):
            raise ValueError(f"'sold' must be a boolean in transaction {tx_id}")

        return cls(
            id=tx_id,
            price=price,
            sold=sold,
            date_of_sale=parse_timestamp(payload.get("dateOfSale")),
            **texts,
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "price": self.price,
            "description": self.description,
            "category": self.category,
            "image": self.image,
            "sold": self.sold,
            "dateOfSale": format_timestamp(self.date_of_sale),
            "createdAt": format_timestamp(self.created_at),
            "updatedAt": format_timestamp(self.updated_at),
        }


@dataclass(frozen=True)
class LabeledRecord:
    """A transaction decorated with the name of its own sale month."""

    transaction: Transaction
    month_name: Optional[str]

    @classmethod
    def label(cls, transaction: Transaction) -> LabeledRecord:
        return cls(transaction, month_name_of(transaction.date_of_sale))

    @property
    def price(self) -> float:
        return self.transaction.price

    @property
    def sold(self) -> bool:
        return self.transaction.sold

    @property
    def category(self) -> str:
        return self.transaction.category

    def summary(self) -> Dict[str, Any]:
        tx = self.transaction
        return {
            "id": tx.id,
            "category": tx.category,
            "price": tx.price,
            "sold": tx.sold,
            "dateOfSale": format_timestamp(tx.date_of_sale),
            "monthName": self.month_name,
        }

    def detail(self) -> Dict[str, Any]:
        tx = self.transaction
        return {
            "id": tx.id,
            "title": tx.title,
            "price": tx.price,
            "description": tx.description,
            "category": tx.category,
            "image": tx.image,
            "sold": tx.sold,
            "dateOfSale": format_timestamp(tx.date_of_sale),
            "monthName": self.month_name,
        }
