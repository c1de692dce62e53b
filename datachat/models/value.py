"""
Cell values
Column types and the tagged Value stored in every row
"""

import json
import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional


class ColumnType(str, Enum):
    """Inferred type of a column"""
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    DATE = "date"
    TEXT = "text"
    NULL = "null"
    NESTED = "nested"


# YYYY-MM-DD... or MM/DD/YYYY... prefix
DATE_PATTERNS = (
    re.compile(r"^\d{4}-\d{2}-\d{2}"),
    re.compile(r"^\d{2}/\d{2}/\d{4}"),
)

TRUE_LITERALS = {"true", "t", "1", "yes"}
FALSE_LITERALS = {"false", "f", "0", "no"}


@dataclass(frozen=True)
class Value:
    """
    Tagged cell value

    `type` says which variant this is, `data` holds the Python payload:
    int, float, bool, str (TEXT and DATE), None or any JSON structure (NESTED).
    """

    type: ColumnType
    data: Any = None

    # ==========================================
    # CONSTRUCTORS
    # ==========================================

    @classmethod
    def integer(cls, data: int) -> "Value":
        return cls(ColumnType.INTEGER, int(data))

    @classmethod
    def boolean(cls, data: bool) -> "Value":
        return cls(ColumnType.BOOLEAN, bool(data))

    @classmethod
    def text(cls, data: str) -> "Value":
        return cls(ColumnType.TEXT, str(data))

    @classmethod
    def date(cls, data: str) -> "Value":
        return cls(ColumnType.DATE, str(data))

    @classmethod
    def null(cls) -> "Value":
        return cls(ColumnType.NULL, None)

    @classmethod
    def nested(cls, data: Any) -> "Value":
        return cls(ColumnType.NESTED, data)

    # ==========================================
    # HELPERS
    # ==========================================

    @property
    def is_null(self) -> bool:
        return self.type == ColumnType.NULL

    def to_json(self) -> Any:
        """Plain JSON-compatible payload"""
        return self.data

    def __repr__(self):
        return f"{self.type.value.capitalize()}({self.data!r})"

    # Last in the class body: the name shadows the builtin from here on
    @classmethod
    def float(cls, data: float) -> "Value":
        return cls(ColumnType.FLOAT, data + 0.0)


Row = Dict[str, Value]


# ==========================================
# TEXT INFERENCE (CSV)
# ==========================================

def looks_like_date(text: str) -> bool:
    """True if text starts with one of the recognised date layouts"""
    return any(pattern.match(text) for pattern in DATE_PATTERNS)


def _parse_number(text: str) -> Optional[Any]:
    """Parse a finite numeral; int when it has no fractional part"""
    stripped = text.strip()
    if not stripped or "_" in stripped:
        return None

    try:
        return int(stripped)
    except ValueError:
        pass

    try:
        number = float(stripped)
    except ValueError:
        return None

    if not math.isfinite(number):
        return None
    return int(number) if number.is_integer() else number


def infer_text_type(text: str) -> ColumnType:
    """
    Infer a column type from a raw text cell

    Order: numeral (integer / float), boolean literal, date prefix, text.
    """
    number = _parse_number(text)
    if number is not None:
        return ColumnType.INTEGER if isinstance(number, int) else ColumnType.FLOAT

    if text in ("true", "false"):
        return ColumnType.BOOLEAN

    if looks_like_date(text):
        return ColumnType.DATE

    return ColumnType.TEXT


# ==========================================
# NATIVE INFERENCE (JSON)
# ==========================================

def infer_native_type(data: Any) -> ColumnType:
    """Infer a column type from a decoded JSON value"""
    if data is None:
        return ColumnType.NULL
    if isinstance(data, bool):
        return ColumnType.BOOLEAN
    if isinstance(data, int):
        return ColumnType.INTEGER
    if isinstance(data, float):
        return ColumnType.INTEGER if data.is_integer() else ColumnType.FLOAT
    if isinstance(data, str):
        return ColumnType.DATE if looks_like_date(data) else ColumnType.TEXT
    return ColumnType.NESTED


def infer_value(data: Any) -> Value:
    """Wrap a native value using its own kind"""
    return coerce(data, infer_native_type(data))


# ==========================================
# COERCION
# ==========================================

def coerce(data: Any, column_type: ColumnType) -> Value:
    """
    Best-effort conversion of a raw value to the column type

    Anything that can't be converted becomes Null.
    """
    if data is None:
        return Value.null()

    if column_type == ColumnType.NULL:
        return infer_value(data)

    if column_type == ColumnType.NESTED:
        if isinstance(data, (dict, list)):
            return Value.nested(data)
        return infer_value(data)

    if column_type == ColumnType.TEXT:
        if isinstance(data, (dict, list)):
            return Value.text(json.dumps(data))
        if isinstance(data, bool):
            return Value.text("true" if data else "false")
        return Value.text(data)

    if column_type == ColumnType.BOOLEAN:
        if isinstance(data, bool):
            return Value.boolean(data)
        if isinstance(data, (int, float)) and data in (0, 1):
            return Value.boolean(data == 1)
        if isinstance(data, str):
            lowered = data.strip().lower()
            if lowered in TRUE_LITERALS:
                return Value.boolean(True)
            if lowered in FALSE_LITERALS:
                return Value.boolean(False)
        return Value.null()

    if column_type == ColumnType.DATE:
        if isinstance(data, str) and looks_like_date(data.strip()):
            return Value.date(data.strip())
        return Value.null()

    # INTEGER / FLOAT
    if isinstance(data, bool):
        number = int(data)
    elif isinstance(data, (int, float)):
        number = data
    elif isinstance(data, str):
        number = _parse_number(data)
    else:
        number = None

    if number is None or (isinstance(number, float) and not math.isfinite(number)):
        return Value.null()

    if column_type == ColumnType.INTEGER:
        if isinstance(number, float) and not number.is_integer():
            return Value.null()
        return Value.integer(number)

    return Value.float(number)


def project_row(raw: Mapping[str, Any], schema: Mapping[str, ColumnType]) -> Row:
    """Coerce a raw mapping onto the schema's key set (missing keys become Null)"""
    return {column: coerce(raw.get(column), column_type) for column, column_type in schema.items()}


def row_to_json(row: Mapping[str, Value]) -> Dict[str, Any]:
    """Row as a plain dict for JSON responses and prompts"""
    return {column: value.to_json() for column, value in row.items()}
