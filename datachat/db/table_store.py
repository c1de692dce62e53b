"""
Table Store
Process-wide rows per table name, with placeholder data for unknown tables
"""

import random
import threading
import zlib
from datetime import date, timedelta
from typing import Dict, Iterable, List, Tuple

from datachat.core.logger import get_logger
from datachat.models.value import Row, Value

logger = get_logger(__name__)


class TableStore:
    """
    In-memory table storage

    `put` replaces a whole table at once. Readers get copies of the rows,
    so they always see either the old or the new table.
    Unknown table names are answered with deterministic synthetic rows.
    """

    def __init__(self, synthetic_row_count: int = 50):
        self._tables: Dict[str, Tuple[Row, ...]] = {}
        self._synthetic: Dict[str, Tuple[Row, ...]] = {}
        self._lock = threading.Lock()
        self.synthetic_row_count = synthetic_row_count

    # ==========================================
    # WRITE
    # ==========================================

    def put(self, table_name: str, rows: Iterable[Row]) -> None:
        """Store rows under table_name, replacing anything stored before"""
        snapshot = tuple(dict(row) for row in rows)

        with self._lock:
            replaced = table_name in self._tables
            self._tables[table_name] = snapshot

        logger.info(
            f"✅ Stored {len(snapshot)} rows for table {table_name}"
            + (" (replaced existing table)" if replaced else "")
        )

    # ==========================================
    # READ
    # ==========================================

    def has_table(self, table_name: str) -> bool:
        with self._lock:
            return table_name in self._tables

    def table_names(self) -> List[str]:
        with self._lock:
            return sorted(self._tables)

    def rows(self, table_name: str) -> List[Row]:
        """All rows of a table, or the synthetic rows if it was never stored"""
        with self._lock:
            stored = self._tables.get(table_name)

        if stored is None:
            stored = self._synthetic_rows(table_name)

        return [dict(row) for row in stored]

    def preview(self, table_name: str, limit: int = 10) -> List[Row]:
        """First `limit` rows of a table (synthetic rows for unknown tables)"""
        limit = max(int(limit), 0)

        with self._lock:
            stored = self._tables.get(table_name)

        if stored is None:
            stored = self._synthetic_rows(table_name)

        return [dict(row) for row in stored[:limit]]

    # ==========================================
    # SYNTHETIC DATA
    # ==========================================

    def _synthetic_rows(self, table_name: str) -> Tuple[Row, ...]:
        """Generate once per table name, then serve from cache"""
        with self._lock:
            cached = self._synthetic.get(table_name)
            if cached is None:
                logger.warning(f"⚠️ Table '{table_name}' not found, serving placeholder data")
                cached = tuple(generate_synthetic_rows(table_name, self.synthetic_row_count))
                self._synthetic[table_name] = cached
            return cached


# ==========================================
# PLACEHOLDER GENERATORS
# ==========================================

PRODUCT_CATEGORIES = ["Electronics", "Clothing", "Books", "Food"]
ORDER_STATUSES = ["Pending", "Shipped", "Delivered", "Cancelled"]


def _random_date(rng: random.Random) -> Value:
    day = date(2023, 1, 1) + timedelta(days=rng.randrange(365))
    return Value.date(day.isoformat())


def _user_row(i: int, rng: random.Random) -> Row:
    return {
        "id": Value.integer(i),
        "name": Value.text(f"User {i}"),
        "email": Value.text(f"user{i}@example.com"),
        "age": Value.integer(20 + rng.randrange(40)),
        "signup_date": _random_date(rng),
    }


def _product_row(i: int, rng: random.Random) -> Row:
    return {
        "id": Value.integer(i),
        "name": Value.text(f"Product {i}"),
        "price": Value.float(rng.randrange(100) + 0.99),
        "category": Value.text(rng.choice(PRODUCT_CATEGORIES)),
        "in_stock": Value.boolean(rng.random() > 0.2),
    }


def _order_row(i: int, rng: random.Random) -> Row:
    return {
        "id": Value.integer(i),
        "user_id": Value.integer(rng.randrange(50) + 1),
        "total": Value.float(rng.randrange(200) + 10.99),
        "status": Value.text(rng.choice(ORDER_STATUSES)),
        "order_date": _random_date(rng),
    }


def _generic_row(i: int, rng: random.Random) -> Row:
    return {
        "id": Value.integer(i),
        "name": Value.text(f"Item {i}"),
        "value": Value.integer(rng.randrange(100)),
        "created_at": _random_date(rng),
    }


def generate_synthetic_rows(table_name: str, count: int = 50) -> List[Row]:
    """
    Placeholder rows shaped by hints in the table name

    Seeded from a stable checksum of the name, so the same name always
    produces the same rows.
    """
    rng = random.Random(zlib.crc32(table_name.encode("utf-8")))
    lowered = table_name.lower()

    if "user" in lowered:
        make_row = _user_row
    elif "product" in lowered:
        make_row = _product_row
    elif "order" in lowered:
        make_row = _order_row
    else:
        make_row = _generic_row

    return [make_row(i, rng) for i in range(1, count + 1)]
