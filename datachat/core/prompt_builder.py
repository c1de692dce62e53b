"""
Prompt Builder
Builds the question -> query prompt for Claude
"""

import json
from typing import List, Mapping

from datachat.models.value import ColumnType, Row, row_to_json


# ==============================================================================
# PROMPT SECTIONS
# ==============================================================================

ROLE_INSTRUCTIONS = """You are an SQL expert working with a database. Here's the structure for a table named "{table_name}":"""

SUPPORTED_QUERIES = """The query engine is simple. Prefer one of these shapes:
- SELECT * FROM {table_name} LIMIT <n>
- SELECT COUNT(*) FROM {table_name}
- SELECT <columns> FROM {table_name}
Always query the table "{table_name}"."""

ANSWER_FORMAT = """Please generate an SQL query to answer this question and provide a brief explanation of what the query does.
Return a valid JSON with the following format:
```json
{
  "query": "YOUR SQL QUERY HERE",
  "explanation": "A clear explanation of what the query does and why it answers the user's question"
}
```"""


# ==============================================================================
# HELPERS
# ==============================================================================

def describe_schema(schema: Mapping[str, ColumnType]) -> str:
    """One `column (type)` line per column"""
    return "\n".join(
        f"{column} ({ColumnType(column_type).value})" for column, column_type in schema.items()
    )


def format_sample_rows(sample_rows: List[Row]) -> str:
    return json.dumps([row_to_json(row) for row in sample_rows], indent=2, default=str)


# ==============================================================================
# PROMPT BUILDER - MAIN FUNCTION
# ==============================================================================

def build_query_prompt(
    question: str,
    schema: Mapping[str, ColumnType],
    sample_rows: List[Row],
    table_name: str
) -> str:
    """
    Build the prompt asking Claude for a query + explanation

    Args:
        question: User question
        schema: Column types of the dataset
        sample_rows: A few rows so Claude sees real values
        table_name: Table the query must read from

    Returns:
        Complete prompt for Claude
    """
    sections = [
        ROLE_INSTRUCTIONS.format(table_name=table_name),
        "Table Schema:\n" + (describe_schema(schema) or "(no columns)"),
        "Here are a few sample rows from the table to help you understand the data types:\n"
        + format_sample_rows(sample_rows),
        f'The user wants to know: "{question}"',
        SUPPORTED_QUERIES.format(table_name=table_name),
        ANSWER_FORMAT,
    ]
    return "\n\n".join(sections)
