"""
File Parser - raw upload bytes -> rows + inferred schema
Supports CSV, JSON and SQL dumps
"""

import io
import json
import os
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping

import pandas as pd

from datachat.core.exceptions import (
    EmptyOrMalformedFile,
    UnsupportedFileType,
    UnsupportedJsonShape,
)
from datachat.core.logger import get_logger
from datachat.core.sql_scanner import SqlDumpScanner
from datachat.models.dataset import FileType
from datachat.models.value import (
    ColumnType,
    Row,
    Value,
    infer_native_type,
    infer_text_type,
    project_row,
)

logger = get_logger(__name__)


# Tried in order; first one giving more than one column wins
CSV_READ_OPTIONS = [
    # Option 1: UTF-8, comma (standard)
    {'encoding': 'utf-8-sig', 'sep': ','},
    # Option 2: UTF-8, semicolon (European exports)
    {'encoding': 'utf-8-sig', 'sep': ';'},
    # Option 3: Windows-1250, comma
    {'encoding': 'windows-1250', 'sep': ','},
    # Option 4: Windows-1250, semicolon
    {'encoding': 'windows-1250', 'sep': ';'},
]

SQL_PLACEHOLDER_TEXT = "SQL file imported without schema detection"


@dataclass
class ParsedTable:
    """Result of parsing one file"""

    table_name: str
    schema: Dict[str, ColumnType]
    rows: List[Row] = field(default_factory=list)

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def column_count(self) -> int:
        return len(self.schema)


# ==========================================
# DISPATCH
# ==========================================

def parse_file(data: bytes, file_type: str, original_filename: str) -> ParsedTable:
    """
    Parse uploaded bytes according to the declared file type

    Args:
        data: Raw file content
        file_type: csv | json | sql (case-insensitive, leading dot allowed)
        original_filename: Uploaded filename, used to name SQL fallback tables

    Returns:
        ParsedTable

    Raises:
        UnsupportedFileType, EmptyOrMalformedFile, UnsupportedJsonShape
    """
    normalized = (file_type or "").lower().lstrip(".")

    try:
        kind = FileType(normalized)
    except ValueError:
        raise UnsupportedFileType(file_type)

    if kind == FileType.CSV:
        parsed = parse_csv(data)
    elif kind == FileType.JSON:
        parsed = parse_json(data)
    else:
        parsed = parse_sql(data, original_filename)

    logger.info(
        f"Parsed {original_filename} as {kind.value}: table={parsed.table_name}, "
        f"rows={parsed.row_count}, columns={parsed.column_count}"
    )
    return parsed


def sanitize_column_name(name: str) -> str:
    """Trim and replace whitespace runs with underscores"""
    return re.sub(r"\s+", "_", str(name).strip())


def table_name_from_column(column: str, default: str) -> str:
    sanitized = sanitize_column_name(column) if column is not None else ""
    return f"table_{sanitized.lower()}" if sanitized else default


# ==========================================
# CSV
# ==========================================

def _read_csv_frame(data: bytes) -> pd.DataFrame:
    """Try CSV_READ_OPTIONS in order, every cell as raw text"""
    first_success = None
    errors = []

    for i, options in enumerate(CSV_READ_OPTIONS, 1):
        try:
            df = pd.read_csv(
                io.BytesIO(data),
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
                index_col=False,
                **options
            )
        except (pd.errors.EmptyDataError, pd.errors.ParserError, UnicodeDecodeError, ValueError) as e:
            errors.append(f"Option {i}: {str(e)[:100]}")
            continue

        if len(df.columns) > 1:
            logger.debug(f"CSV read with option {i}: sep={options['sep']!r}, encoding={options['encoding']}")
            return df.fillna("")

        if first_success is None:
            first_success = df

    if first_success is not None:
        return first_success.fillna("")

    raise EmptyOrMalformedFile(
        "CSV file is empty or has an invalid format (" + "; ".join(errors) + ")"
    )


def parse_csv(data: bytes) -> ParsedTable:
    """Parse CSV; schema comes from the first data row"""
    df = _read_csv_frame(data)

    if len(df) == 0:
        raise EmptyOrMalformedFile("CSV file is empty or has an invalid format")

    columns = [str(column) for column in df.columns]
    records = df.to_dict(orient="records")

    first_row = records[0]
    schema = {column: infer_text_type(first_row[column]) for column in columns}

    rows = [_project_csv_row(record, schema) for record in records]

    return ParsedTable(
        table_name=table_name_from_column(columns[0] if columns else None, "uploaded_data"),
        schema=schema,
        rows=rows
    )


def _project_csv_row(record: Mapping[str, Any], schema: Mapping[str, ColumnType]) -> Row:
    row = {}
    for column, column_type in schema.items():
        raw = record.get(column, "")
        if column_type == ColumnType.TEXT:
            # Text cells stay verbatim, including empty strings
            row[column] = Value.text(raw)
        elif raw == "":
            row[column] = Value.null()
        else:
            row[column] = project_row({column: raw}, {column: column_type})[column]
    return row


# ==========================================
# JSON
# ==========================================

def _infer_object_schema(first: Mapping[str, Any]) -> Dict[str, ColumnType]:
    return {str(key): infer_native_type(value) for key, value in first.items()}


def _is_object_array(value: Any) -> bool:
    return isinstance(value, list) and len(value) > 0 and isinstance(value[0], dict)


def _rows_from_objects(items: List[Any], schema: Dict[str, ColumnType]) -> List[Row]:
    rows = []
    skipped = 0
    for item in items:
        if not isinstance(item, dict):
            skipped += 1
            continue
        rows.append(project_row(item, schema))
    if skipped:
        logger.warning(f"Skipped {skipped} non-object JSON elements")
    return rows


def parse_json(data: bytes) -> ParsedTable:
    """
    Parse JSON

    Accepts an array of objects, or an object with an array-of-objects
    property (the first such property is used).
    """
    try:
        payload = json.loads(data.decode("utf-8-sig"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise EmptyOrMalformedFile(f"Error parsing JSON file: {e}")

    if _is_object_array(payload):
        first = payload[0]
        schema = _infer_object_schema(first)
        first_key = next(iter(schema), None)
        return ParsedTable(
            table_name=table_name_from_column(first_key, "json_data"),
            schema=schema,
            rows=_rows_from_objects(payload, schema)
        )

    if isinstance(payload, dict):
        for prop_name, prop_value in payload.items():
            if not _is_object_array(prop_value):
                continue
            schema = _infer_object_schema(prop_value[0])
            return ParsedTable(
                table_name=table_name_from_column(prop_name, "json_data"),
                schema=schema,
                rows=_rows_from_objects(prop_value, schema)
            )

    raise UnsupportedJsonShape()


# ==========================================
# SQL
# ==========================================

def _sql_placeholder(original_filename: str) -> ParsedTable:
    """Deterministic single-row table for dumps without a usable CREATE TABLE"""
    base = os.path.basename(original_filename or "")
    if base.lower().endswith(".sql"):
        base = base[:-4]
    table_name = re.sub(r"\W+", "_", base).lower() or "sql_data"

    return ParsedTable(
        table_name=table_name,
        schema={"id": ColumnType.INTEGER, "data": ColumnType.TEXT},
        rows=[{"id": Value.integer(1), "data": Value.text(SQL_PLACEHOLDER_TEXT)}]
    )


def parse_sql(data: bytes, original_filename: str) -> ParsedTable:
    """
    Parse an SQL dump

    Only the first CREATE TABLE and the INSERTs into that table are used.
    """
    sql = data.decode("utf-8-sig", errors="replace")
    scanner = SqlDumpScanner(sql)

    table = scanner.first_table()
    if table is None:
        logger.warning(f"⚠️ No CREATE TABLE found in {original_filename}, using placeholder data")
        return _sql_placeholder(original_filename)

    schema = dict(table.columns)
    column_order = list(schema)
    target = table.name.lower()

    rows: List[Row] = []
    ignored_tables = set()

    for statement in scanner.inserts():
        if statement.table.lower() != target:
            ignored_tables.add(statement.table)
            continue

        names = statement.columns or column_order
        for values in statement.rows:
            raw = {}
            for name, value in zip(names, values):
                raw[name] = value
            rows.append(project_row(raw, schema))

    if ignored_tables:
        logger.warning(
            f"Only table '{table.name}' is imported; ignored inserts into: {', '.join(sorted(ignored_tables))}"
        )

    return ParsedTable(table_name=target, schema=schema, rows=rows)


__all__ = [
    "ParsedTable",
    "parse_file",
    "parse_csv",
    "parse_json",
    "parse_sql",
]
