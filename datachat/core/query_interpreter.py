"""
Query Interpreter
Approximate evaluation of model-generated queries against the table store

Recognises three shapes only:
    SELECT COUNT(...) FROM t   -> [{count: n}]
    SELECT ... FROM t LIMIT n  -> first n rows
    anything else              -> all rows of t
"""

import re
from typing import List, Optional

from datachat.core.logger import get_logger
from datachat.db.table_store import TableStore
from datachat.models.value import Row, Value

logger = get_logger(__name__)

DEFAULT_TABLE = "default_table"

FROM_RE = re.compile(r"\bFROM\s+[\"'`\[]?([A-Za-z0-9_.]+)", re.IGNORECASE)
COUNT_RE = re.compile(r"\bcount\s*\(", re.IGNORECASE)
LIMIT_RE = re.compile(r"\bLIMIT\s+(\d+)", re.IGNORECASE)


class QueryInterpreter:
    """Runs query text against a TableStore. Never raises."""

    def __init__(self, tables: TableStore, default_limit: int = 10):
        self.tables = tables
        self.default_limit = default_limit

    def extract_table_name(self, query_text: str) -> str:
        """Table of the first FROM clause, resolved against stored tables"""
        match = FROM_RE.search(query_text or "")
        if not match:
            return DEFAULT_TABLE

        # schema.table -> table
        name = match.group(1).strip(".").split(".")[-1] or DEFAULT_TABLE

        if not self.tables.has_table(name) and self.tables.has_table(name.lower()):
            return name.lower()
        return name

    def _limit(self, query_text: str) -> Optional[int]:
        if "limit" not in query_text.lower():
            return None
        match = LIMIT_RE.search(query_text)
        return int(match.group(1)) if match else self.default_limit

    def execute(self, query_text: str) -> List[Row]:
        """
        Evaluate query text

        Args:
            query_text: Query string produced by the language model

        Returns:
            Result rows (empty list if something unexpected went wrong)
        """
        logger.info(f"Executing query: {query_text}")

        try:
            query_text = query_text or ""
            table_name = self.extract_table_name(query_text)
            rows = self.tables.rows(table_name)

            if COUNT_RE.search(query_text):
                return [{"count": Value.integer(len(rows))}]

            limit = self._limit(query_text)
            if limit is not None:
                return rows[:limit]

            return rows

        except Exception:
            logger.exception(f"❌ Query execution error: {query_text}")
            return []
