import logging
import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Iterator, List, Optional

from sales_tracker.core.models import Transaction, format_timestamp, parse_timestamp
from sales_tracker.errors import StoreUnavailable

logger = logging.getLogger(__name__)

_SALE_MONTH = "CAST(strftime('%m', date_of_sale) AS INTEGER)"

_COLUMNS = (
    "id, title, price, description, category, image, sold, "
    "date_of_sale, created_at, updated_at"
)


def _init_db(conn: sqlite3.Connection) -> None:
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS transactions (
            pk INTEGER PRIMARY KEY,
            id INTEGER NOT NULL,
            title TEXT NOT NULL,
            price REAL NOT NULL CHECK (price >= 0),
            description TEXT NOT NULL,
            category TEXT NOT NULL,
            image TEXT NOT NULL,
            sold INTEGER NOT NULL DEFAULT 0,
            date_of_sale TEXT,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        )
        """
    )
    conn.execute(
        "CREATE INDEX IF NOT EXISTS idx_transactions_date_of_sale "
        "ON transactions (date_of_sale)"
    )
    conn.execute(
        "CREATE INDEX IF NOT EXISTS idx_transactions_sale_month "
        f"ON transactions ({_SALE_MONTH})"
    )


def _contains_ci(haystack: Optional[str], needle: Optional[str]) -> int:
    if haystack is None or needle is None:
        return 0
    return int(needle.casefold() in haystack.casefold())


def _row_to_transaction(row: sqlite3.Row) -> Transaction:
    return Transaction(
        id=int(row["id"]),
        title=row["title"],
        price=float(row["price"]),
        description=row["description"],
        category=row["category"],
        image=row["image"],
        sold=bool(row["sold"]),
        date_of_sale=parse_timestamp(row["date_of_sale"]),
        created_at=parse_timestamp(row["created_at"]),
        updated_at=parse_timestamp(row["updated_at"]),
    )


class SQLiteTransactionStore:
    """Transaction store backed by a single shared SQLite connection.

    The handle is opened once and closed on shutdown; calls from worker
    threads are serialised on an internal lock. Every ``sqlite3.Error`` is
    surfaced as :class:`StoreUnavailable`.
    """

    def __init__(self, db_path: str) -> None:
        self.db_path = str(db_path)
        self._conn: Optional[sqlite3.Connection] = None
        self._lock = threading.Lock()

    def __enter__(self) -> "SQLiteTransactionStore":
        self.open()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def open(self) -> None:
        with self._lock:
            if self._conn is not None:
                return
            if self.db_path != ":memory:":
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            try:
                conn = sqlite3.connect(
                    self.db_path, check_same_thread=False, isolation_level=None
                )
                conn.row_factory = sqlite3.Row
                conn.create_function("contains_ci", 2, _contains_ci, deterministic=True)
                _init_db(conn)
            except sqlite3.Error as exc:
                raise StoreUnavailable(f"Cannot open {self.db_path}: {exc}") from exc
            self._conn = conn
        logger.info("Opened transaction store at %s", self.db_path)

    def close(self) -> None:
        with self._lock:
            if self._conn is None:
                return
            self._conn.close()
            self._conn = None
        logger.info("Closed transaction store at %s", self.db_path)

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        with self._lock:
            if self._conn is None:
                raise StoreUnavailable("Transaction store is not open")
            try:
                yield self._conn
            except sqlite3.Error as exc:
                raise StoreUnavailable(str(exc)) from exc

    def _select(self, where: str = "", params: Iterable = ()) -> List[Transaction]:
        with self._connection() as conn:
            rows = conn.execute(
                f"SELECT {_COLUMNS} FROM transactions {where} ORDER BY pk",
                list(params),
            ).fetchall()
        return [_row_to_transaction(r) for r in rows]

    def find_all(self) -> List[Transaction]:
        return self._select()

    def count(self) -> int:
        with self._connection() as conn:
            return int(conn.execute("SELECT COUNT(*) FROM transactions").fetchone()[0])

    def _insert_rows(self, conn: sqlite3.Connection, transactions: List[Transaction]) -> int:
        now = format_timestamp(datetime.now(timezone.utc))
        rows = [
            (
                tx.id,
                tx.title,
                float(tx.price),
                tx.description,
                tx.category,
                tx.image,
                int(bool(tx.sold)),
                format_timestamp(tx.date_of_sale),
                now,
                now,
            )
            for tx in transactions
        ]
        conn.executemany(
            f"INSERT INTO transactions ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            rows,
        )
        return len(rows)

    def insert_many(self, transactions: Iterable[Transaction]) -> int:
        """Insert all transactions in one database transaction, or none."""
        txs = list(transactions)
        if not txs:
            return 0
        with self._connection() as conn:
            conn.execute("BEGIN")
            try:
                inserted = self._insert_rows(conn, txs)
            except BaseException:
                conn.execute("ROLLBACK")
                raise
            conn.execute("COMMIT")
        return inserted

    def insert_if_empty(self, transactions: Iterable[Transaction]) -> int:
        """Insert only into an empty table.

        The emptiness check and the insert share one ``BEGIN IMMEDIATE``
        transaction, so concurrent seeders (even from other processes)
        cannot both insert.
        """
        txs = list(transactions)
        with self._connection() as conn:
            conn.execute("BEGIN IMMEDIATE")
            try:
                existing = conn.execute("SELECT COUNT(*) FROM transactions").fetchone()[0]
                inserted = 0 if existing else self._insert_rows(conn, txs)
            except BaseException:
                conn.execute("ROLLBACK")
                raise
            conn.execute("COMMIT")
        return inserted

    def query_by_month(self, month: int) -> List[Transaction]:
        return self._select(f"WHERE {_SALE_MONTH} = ?", [month])

    def query_by_month_and_text(
        self, month: int, text: str, price: Optional[float] = None
    ) -> List[Transaction]:
        conditions = ["contains_ci(title, ?)", "contains_ci(description, ?)"]
        params: list = [month, text, text]
        if price is not None:
            conditions.append("price = ?")
            params.append(price)
        return self._select(
            f"WHERE {_SALE_MONTH} = ? AND ({' OR '.join(conditions)})", params
        )
