"""
Tests for turning questions into queries.
"""
import pytest

from datachat.core.exceptions import ExternalModelUnavailable, ModelResponseUnparseable
from datachat.core.prompt_builder import build_query_prompt
from datachat.core.query_bridge import (
    GENERIC_EXPLANATION,
    QueryBridge,
    extract_translation,
    parse_model_response,
)
from datachat.models.value import ColumnType, Value

from conftest import FakeClaude

SCHEMA = {"name": ColumnType.TEXT, "age": ColumnType.INTEGER}
SAMPLE = [{"name": Value.text("Alice"), "age": Value.integer(30)}]


class TestExtractionStrategies:
    """Each response shape the model is known to produce."""

    def test_json_fence(self):
        text = 'Sure!\n```json\n{"query": "SELECT COUNT(*) FROM t", "explanation": "Counts rows."}\n```'
        translation = extract_translation(text)

        assert translation.query == "SELECT COUNT(*) FROM t"
        assert translation.explanation == "Counts rows."
        assert translation.source == "json_fence"

    def test_unlabeled_fence_with_json(self):
        text = '```\n{"sql": "SELECT * FROM t LIMIT 3", "explanation": "First rows."}\n```'
        translation = extract_translation(text)

        assert translation.query == "SELECT * FROM t LIMIT 3"
        assert translation.source == "fence"

    def test_sql_fence(self):
        translation = extract_translation("Try this:\n```sql\nSELECT name FROM t\n```")
        assert translation.query == "SELECT name FROM t"

    def test_brace_fragment(self):
        text = 'Here you go: {"query": "SELECT * FROM t", "explanation": "All rows."} Hope it helps.'
        translation = extract_translation(text)

        assert translation.query == "SELECT * FROM t"
        assert translation.source == "brace_fragment"

    def test_brace_fragment_skips_other_objects(self):
        text = 'Schema {"a": 1} then {"query": "SELECT 1 FROM t"}'
        assert extract_translation(text).query == "SELECT 1 FROM t"

    def test_key_values_in_broken_json(self):
        text = '{"query": "SELECT * FROM t WHERE name = \\"Bob\\"", "explanation": "Finds Bob.",}'
        translation = extract_translation(text)

        assert translation.query == 'SELECT * FROM t WHERE name = "Bob"'
        assert translation.explanation == "Finds Bob."
        assert translation.source == "key_values"

    def test_bare_select(self):
        translation = extract_translation("You could run SELECT * FROM t LIMIT 2; to see data.")

        assert translation.query == "SELECT * FROM t LIMIT 2;"
        assert translation.source == "select_statement"

    def test_missing_explanation_gets_default(self):
        translation = extract_translation('```json\n{"query": "SELECT * FROM t"}\n```')
        assert translation.explanation

    def test_key_values_blank_explanation_gets_default(self):
        translation = extract_translation('query: "SELECT * FROM t", explanation: "   "')

        assert translation.query == "SELECT * FROM t"
        assert translation.explanation == GENERIC_EXPLANATION

    def test_key_values_blank_query_is_skipped(self):
        with pytest.raises(ModelResponseUnparseable):
            extract_translation('"query": "  ", "explanation": "x"')

    def test_nothing_found(self):
        with pytest.raises(ModelResponseUnparseable):
            extract_translation("I have no idea.")

    def test_parse_model_response_falls_back(self):
        translation = parse_model_response("I have no idea.", "people")

        assert translation.query == "SELECT * FROM people LIMIT 10"
        assert translation.explanation == GENERIC_EXPLANATION


class TestPrompt:

    def test_prompt_contents(self):
        prompt = build_query_prompt("How many people?", SCHEMA, SAMPLE, "people")

        assert '"people"' in prompt
        assert "name (text)" in prompt
        assert "age (integer)" in prompt
        assert '"Alice"' in prompt
        assert "How many people?" in prompt
        assert "```json" in prompt


class TestQueryBridge:
    """Tests for QueryBridge.translate."""

    def test_uses_model_answer(self, fake_claude):
        translation = QueryBridge(claude=fake_claude).translate("How many?", SCHEMA, SAMPLE, "table_name")

        assert translation.query == "SELECT COUNT(*) FROM table_name"
        assert len(fake_claude.prompts) == 1

    def test_without_model(self, offline_bridge):
        translation = offline_bridge.translate("How many?", SCHEMA, SAMPLE, "people")

        assert translation.query == "SELECT * FROM people LIMIT 10"
        assert "ANTHROPIC_API_KEY" in translation.explanation

    def test_model_unavailable(self):
        bridge = QueryBridge(claude=FakeClaude(error=ExternalModelUnavailable("Claude request timed out")))
        translation = bridge.translate("How many?", SCHEMA, SAMPLE, "people")

        assert translation.query == "SELECT * FROM people LIMIT 10"
        assert "timed out" in translation.explanation

    def test_unexpected_error_is_absorbed(self):
        bridge = QueryBridge(claude=FakeClaude(error=RuntimeError("socket closed")))
        translation = bridge.translate("How many?", SCHEMA, SAMPLE, "people")

        assert translation.source == "fallback"

    def test_unparseable_answer(self):
        bridge = QueryBridge(claude=FakeClaude("Sorry, I can't help with that."))
        translation = bridge.translate("How many?", SCHEMA, SAMPLE, "people")

        assert translation.query == "SELECT * FROM people LIMIT 10"
        assert translation.explanation == GENERIC_EXPLANATION

    def test_from_settings_without_key(self, monkeypatch):
        from datachat.core.config import settings

        monkeypatch.setattr(settings, "ANTHROPIC_API_KEY", "")
        bridge = QueryBridge.from_settings()

        assert bridge.claude is None
        assert bridge.translate("q", SCHEMA, SAMPLE, "people").source == "fallback"

    def test_blank_query_uses_default(self):
        bridge = QueryBridge(claude=FakeClaude('"query": "  ", "explanation": "x"'))
        translation = bridge.translate("How many?", SCHEMA, SAMPLE, "people")

        assert translation.query == "SELECT * FROM people LIMIT 10"
        assert translation.explanation == GENERIC_EXPLANATION

    def test_blank_explanation_is_never_returned(self):
        bridge = QueryBridge(claude=FakeClaude('query: "SELECT * FROM people", explanation: "   "'))
        translation = bridge.translate("How many?", SCHEMA, SAMPLE, "people")

        assert translation.query == "SELECT * FROM people"
        assert translation.explanation.strip()
