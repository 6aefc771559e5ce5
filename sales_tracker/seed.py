# sales_tracker/seed.py
from __future__ import annotations

import json
import logging
import urllib.request
from typing import List

from sales_tracker.core.models import Transaction
from sales_tracker.core.store import TransactionStore
from sales_tracker.errors import UpstreamSeedFailure

logger = logging.getLogger(__name__)

DEFAULT_SEED_URL = "https://s3.amazonaws.com/roxiler.com/product_transaction.json"


def parse_seed_payload(payload) -> List[Transaction]:
    """Validate the whole remote payload before anything is stored."""
    if not isinstance(payload, list):
        raise UpstreamSeedFailure(
            f"Seed payload must be a list of transactions, got {type(payload).__name__}"
        )
    transactions = []
    for index, entry in enumerate(payload):
        try:
            transactions.append(Transaction.from_payload(entry))
        except (TypeError, ValueError) as exc:
            raise UpstreamSeedFailure(f"Invalid seed entry #{index}: {exc}") from exc
    return transactions


def fetch_seed_transactions(url: str, timeout: float = 30.0) -> List[Transaction]:
    logger.info("Fetching seed transactions from %s", url)
    req = urllib.request.Request(url, method="GET")
    req.add_header("Accept", "application/json")
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            payload = json.load(resp)
    except (OSError, ValueError) as exc:
        # OSError covers URLError/HTTPError and socket timeouts; ValueError bad JSON.
        raise UpstreamSeedFailure(f"Cannot fetch seed data from {url}: {exc}") from exc
    return parse_seed_payload(payload)


def seed_if_empty(store: TransactionStore, url: str = DEFAULT_SEED_URL, timeout: float = 30.0) -> int:
    """Load the remote catalog into an empty store; return rows inserted.

    A populated store is left untouched and nothing is fetched.
    """
    existing = store.count()
    if existing:
        logger.debug("Store already holds %d transaction(s); skipping seed", existing)
        return 0
    transactions = fetch_seed_transactions(url, timeout)
    if not transactions:
        logger.warning("Seed source %s returned no transactions", url)
        return 0
    inserted = store.insert_if_empty(transactions)
    if inserted:
        logger.info("Seeded %d transaction(s) from %s", inserted, url)
    else:
        logger.info("Store was seeded concurrently; discarded fetched payload")
    return inserted
