"""
NL-Query Bridge
Question + schema + sample rows -> (query, explanation) via Claude

Claude's answer is free text. Extraction strategies are tried in order
and the first one that finds a query wins; if none does (or Claude can't
be reached) a safe default query is used. translate() never raises.
"""

import json
import re
from dataclasses import dataclass
from typing import Any, Callable, List, Mapping, Optional

from datachat.core.claude_service import ClaudeService
from datachat.core.exceptions import ExternalModelUnavailable, ModelResponseUnparseable
from datachat.core.logger import get_logger
from datachat.core.prompt_builder import build_query_prompt
from datachat.models.value import ColumnType, Row

logger = get_logger(__name__)


GENERIC_EXPLANATION = (
    "I couldn't generate a good query for your question. "
    "Here's a basic query to show the data."
)
MISSING_EXPLANATION = "Here's a query that answers your question."
UNAVAILABLE_EXPLANATION = (
    "I encountered an error while trying to generate a query for your question ({reason}). "
    "Here's a simple query to show a preview of your data instead."
)


@dataclass(frozen=True)
class Translation:
    query: str
    explanation: str
    source: str


def default_query(table_name: str) -> str:
    return f"SELECT * FROM {table_name} LIMIT 10"


def fallback_translation(table_name: str, reason: Optional[str] = None) -> Translation:
    """Hard default, optionally annotated with what went wrong"""
    explanation = UNAVAILABLE_EXPLANATION.format(reason=reason) if reason else GENERIC_EXPLANATION
    return Translation(query=default_query(table_name), explanation=explanation, source="fallback")


# ==========================================
# EXTRACTION STRATEGIES
# ==========================================

JSON_FENCE_RE = re.compile(r"```json\s*(.*?)\s*```", re.DOTALL | re.IGNORECASE)
ANY_FENCE_RE = re.compile(r"```[\w-]*\s*(.*?)\s*```", re.DOTALL)
SELECT_START_RE = re.compile(r"^\s*(SELECT|WITH)\b", re.IGNORECASE)
SELECT_STATEMENT_RE = re.compile(r"\bSELECT\b[\s\S]*?;", re.IGNORECASE)
QUERY_PAIR_RE = re.compile(
    r"[\"']?(?:query|sql)[\"']?\s*[:=]\s*([\"'])((?:\\.|(?!\1).)+)\1",
    re.DOTALL | re.IGNORECASE
)
EXPLANATION_PAIR_RE = re.compile(
    r"[\"']?explanation[\"']?\s*[:=]\s*([\"'])((?:\\.|(?!\1).)+)\1",
    re.DOTALL | re.IGNORECASE
)


def _from_payload(payload: Any, source: str) -> Optional[Translation]:
    """{"query"|"sql": ..., "explanation": ...} -> Translation"""
    if not isinstance(payload, dict):
        return None

    query = payload.get("query") or payload.get("sql")
    if not isinstance(query, str) or not query.strip():
        return None

    explanation = payload.get("explanation")
    if not isinstance(explanation, str) or not explanation.strip():
        explanation = MISSING_EXPLANATION

    return Translation(query=query.strip(), explanation=explanation.strip(), source=source)


def _loads(text: str) -> Any:
    try:
        return json.loads(text)
    except ValueError:
        return None


def extract_json_fence(text: str) -> Optional[Translation]:
    """1. ```json ... ``` block"""
    for block in JSON_FENCE_RE.findall(text):
        translation = _from_payload(_loads(block), "json_fence")
        if translation:
            return translation
    return None


def extract_any_fence(text: str) -> Optional[Translation]:
    """2. any ``` ... ``` block: JSON payload or a bare SELECT"""
    for block in ANY_FENCE_RE.findall(text):
        translation = _from_payload(_loads(block), "fence")
        if translation:
            return translation
        if SELECT_START_RE.match(block):
            return Translation(query=block.strip(), explanation=MISSING_EXPLANATION, source="fence")
    return None


def extract_brace_fragment(text: str) -> Optional[Translation]:
    """3. first {...} fragment that decodes to a query payload"""
    decoder = json.JSONDecoder()
    start = text.find("{")
    while start != -1:
        try:
            payload, _ = decoder.raw_decode(text, start)
        except ValueError:
            payload = None
        translation = _from_payload(payload, "brace_fragment")
        if translation:
            return translation
        start = text.find("{", start + 1)
    return None


def _unescape(raw: str) -> str:
    decoded = _loads(f'"{raw}"')
    if isinstance(decoded, str):
        return decoded
    return raw.replace("\\'", "'").replace('\\"', '"')


def extract_key_values(text: str) -> Optional[Translation]:
    """4. query: "..." / explanation: "..." pairs in otherwise broken JSON"""
    query_match = QUERY_PAIR_RE.search(text)
    if not query_match:
        return None

    query = _unescape(query_match.group(2)).strip()
    if not query:
        return None

    explanation_match = EXPLANATION_PAIR_RE.search(text)
    explanation = _unescape(explanation_match.group(2)).strip() if explanation_match else ""

    return Translation(
        query=query,
        explanation=explanation or GENERIC_EXPLANATION,
        source="key_values"
    )


def extract_select_statement(text: str) -> Optional[Translation]:
    """5. a plain SELECT ...; somewhere in the text"""
    match = SELECT_STATEMENT_RE.search(text)
    if not match:
        return None
    return Translation(
        query=match.group().strip(),
        explanation=(
            "Here's the data from your table. "
            "I tried to answer your question but couldn't generate a structured response."
        ),
        source="select_statement"
    )


EXTRACTION_STRATEGIES: List[Callable[[str], Optional[Translation]]] = [
    extract_json_fence,
    extract_any_fence,
    extract_brace_fragment,
    extract_key_values,
    extract_select_statement,
]


def extract_translation(text: str) -> Translation:
    """
    Run the extraction strategies, first success wins

    Raises:
        ModelResponseUnparseable: no strategy found a query
    """
    for strategy in EXTRACTION_STRATEGIES:
        translation = strategy(text or "")
        if translation is not None:
            return translation
    raise ModelResponseUnparseable(f"No query found in model response: {(text or '')[:200]!r}")


def parse_model_response(text: str, table_name: str) -> Translation:
    """extract_translation with the hard default instead of an exception"""
    try:
        return extract_translation(text)
    except ModelResponseUnparseable as e:
        logger.warning(f"⚠️ {e}")
        return fallback_translation(table_name)


# ==========================================
# BRIDGE
# ==========================================

class QueryBridge:
    """
    Turns a question into a query with Claude

    Without a configured Claude service every question gets the default query.
    """

    def __init__(self, claude: Optional[ClaudeService] = None, unavailable_reason: Optional[str] = None):
        self.claude = claude
        self.unavailable_reason = unavailable_reason or "language model is not configured"

    @classmethod
    def from_settings(cls) -> "QueryBridge":
        try:
            return cls(claude=ClaudeService.from_settings())
        except ExternalModelUnavailable as e:
            logger.warning(f"⚠️ Claude unavailable, questions will get the default query: {e}")
            return cls(claude=None, unavailable_reason=str(e))

    def translate(
        self,
        question: str,
        schema: Mapping[str, ColumnType],
        sample_rows: List[Row],
        table_name: str
    ) -> Translation:
        """
        Generate a query for the question

        Args:
            question: User question
            schema: Dataset schema
            sample_rows: Small sample of the table
            table_name: Table to query

        Returns:
            Translation (never raises)
        """
        if self.claude is None:
            return fallback_translation(table_name, self.unavailable_reason)

        try:
            prompt = build_query_prompt(question, schema, sample_rows, table_name)
            text = self.claude.complete(prompt)
        except ExternalModelUnavailable as e:
            logger.warning(f"⚠️ {e}")
            return fallback_translation(table_name, str(e))
        except Exception as e:
            logger.exception("❌ Error calling Claude")
            return fallback_translation(table_name, str(e))

        translation = parse_model_response(text, table_name)
        logger.info(f"Generated query ({translation.source}): {translation.query}")
        return translation
