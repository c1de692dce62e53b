"""
Tests for the pattern-based query interpreter.
"""
import pytest

from datachat.core.query_interpreter import DEFAULT_TABLE, QueryInterpreter
from datachat.db.table_store import TableStore
from datachat.models.value import Value


@pytest.fixture
def interpreter():
    tables = TableStore()
    tables.put("sales", [{"id": Value.integer(i)} for i in range(30)])
    return QueryInterpreter(tables)


class TestExtractTableName:

    @pytest.mark.parametrize("query, expected", [
        ("SELECT * FROM sales", "sales"),
        ("select id from `sales` where id > 1", "sales"),
        ("SELECT * FROM public.sales LIMIT 5", "sales"),
        ("SELECT * FROM SALES", "sales"),
        ("SELECT 1", DEFAULT_TABLE),
    ])
    def test_table_names(self, interpreter, query, expected):
        assert interpreter.extract_table_name(query) == expected


class TestExecute:
    """Tests for QueryInterpreter.execute."""

    @pytest.mark.parametrize("query", [
        "SELECT COUNT(*) FROM sales",
        "select count(id) as n from sales where id > 3",
        "SELECT COUNT (*) FROM sales LIMIT 1",
    ])
    def test_count(self, interpreter, query):
        """Count queries return one row with the full row count."""
        assert interpreter.execute(query) == [{"count": Value.integer(30)}]

    def test_limit(self, interpreter):
        assert len(interpreter.execute("SELECT * FROM sales LIMIT 5")) == 5

    def test_limit_without_number_uses_default(self, interpreter):
        assert len(interpreter.execute("SELECT * FROM sales LIMIT")) == 10

    def test_everything_else_returns_all_rows(self, interpreter):
        """Filters and projections are not evaluated."""
        assert len(interpreter.execute("SELECT id FROM sales WHERE id = 1")) == 30

    def test_unknown_table_gets_synthetic_rows(self, interpreter):
        assert len(interpreter.execute("SELECT * FROM users LIMIT 3")) == 3

    def test_empty_query(self, interpreter):
        assert len(interpreter.execute("")) == 50

    def test_never_raises(self):
        """Store failures are logged and give an empty result."""
        class BrokenStore:
            def has_table(self, name):
                return True

            def rows(self, name):
                raise RuntimeError("boom")

        assert QueryInterpreter(BrokenStore()).execute("SELECT * FROM t") == []
