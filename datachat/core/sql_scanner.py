"""
SQL Dump Scanner
Tokenizer + small recursive-descent scan over CREATE TABLE / INSERT INTO

Not a SQL grammar. Only the two statement shapes an export tool writes
are recognised, everything else is skipped token by token.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from datachat.models.value import ColumnType


# ==========================================
# TOKENS
# ==========================================

WORD = "word"
IDENT = "ident"      # quoted identifier: "x", `x`, [x]
STRING = "string"    # 'x'
NUMBER = "number"
PUNCT = "punct"


@dataclass(frozen=True)
class Token:
    kind: str
    text: str
    pos: int

    def is_word(self, *words: str) -> bool:
        return self.kind == WORD and self.text.upper() in words

    def is_punct(self, char: str) -> bool:
        return self.kind == PUNCT and self.text == char


_NUMBER_RE = re.compile(r"\d+(?:\.\d*)?(?:[eE][+-]?\d+)?|\.\d+(?:[eE][+-]?\d+)?")
_WORD_RE = re.compile(r"[^\W\d][\w$]*")
_CLOSING_QUOTE = {'"': '"', "`": "`", "[": "]"}


def _read_quoted(sql: str, start: int, closing: str) -> Tuple[str, int]:
    """Read a quoted run starting after the opening quote; doubled quote escapes itself"""
    chars = []
    i = start
    while i < len(sql):
        ch = sql[i]
        if ch == "\\" and closing == "'" and i + 1 < len(sql):
            # MySQL style backslash escape
            chars.append(sql[i + 1])
            i += 2
            continue
        if ch == closing:
            if i + 1 < len(sql) and sql[i + 1] == closing:
                chars.append(closing)
                i += 2
                continue
            return "".join(chars), i + 1
        chars.append(ch)
        i += 1
    # Unterminated - take the rest
    return "".join(chars), len(sql)


def tokenize(sql: str) -> List[Token]:
    """Split SQL text into tokens, dropping whitespace and comments"""
    tokens: List[Token] = []
    i = 0
    length = len(sql)

    while i < length:
        ch = sql[i]

        if ch.isspace():
            i += 1
            continue

        if sql.startswith("--", i) or ch == "#":
            end = sql.find("\n", i)
            i = length if end == -1 else end + 1
            continue

        if sql.startswith("/*", i):
            end = sql.find("*/", i + 2)
            i = length if end == -1 else end + 2
            continue

        if ch == "'":
            text, i_next = _read_quoted(sql, i + 1, "'")
            tokens.append(Token(STRING, text, i))
            i = i_next
            continue

        if ch in _CLOSING_QUOTE:
            text, i_next = _read_quoted(sql, i + 1, _CLOSING_QUOTE[ch])
            tokens.append(Token(IDENT, text, i))
            i = i_next
            continue

        match = _NUMBER_RE.match(sql, i)
        if match:
            tokens.append(Token(NUMBER, match.group(), i))
            i = match.end()
            continue

        match = _WORD_RE.match(sql, i)
        if match:
            tokens.append(Token(WORD, match.group(), i))
            i = match.end()
            continue

        tokens.append(Token(PUNCT, ch, i))
        i += 1

    return tokens


# ==========================================
# RESULT TYPES
# ==========================================

CONSTRAINT_KEYWORDS = {
    "CONSTRAINT", "PRIMARY", "FOREIGN", "UNIQUE", "KEY", "INDEX",
    "CHECK", "FULLTEXT", "SPATIAL", "EXCLUDE", "PERIOD", "LIKE",
}


@dataclass
class TableDefinition:
    name: str
    columns: Dict[str, ColumnType] = field(default_factory=dict)


@dataclass
class InsertStatement:
    table: str
    columns: Optional[List[str]]
    rows: List[List[Optional[str]]] = field(default_factory=list)


def map_sql_type(type_name: str) -> ColumnType:
    """Map a declared SQL type to a column type by substring"""
    lowered = type_name.lower()
    if "int" in lowered:
        return ColumnType.INTEGER
    if "float" in lowered or "double" in lowered or "decimal" in lowered:
        return ColumnType.FLOAT
    if "bool" in lowered:
        return ColumnType.BOOLEAN
    if "date" in lowered or "time" in lowered:
        return ColumnType.DATE
    return ColumnType.TEXT


# ==========================================
# SCANNER
# ==========================================

class SqlDumpScanner:
    """
    Walks the token list looking for CREATE TABLE and INSERT INTO statements

    Usage:
        scanner = SqlDumpScanner(sql_text)
        table = scanner.first_table()
        inserts = scanner.inserts()
    """

    def __init__(self, sql: str):
        self.tokens = tokenize(sql)
        self.pos = 0

    # ------------------------------------------
    # cursor helpers
    # ------------------------------------------

    def _peek(self, offset: int = 0) -> Optional[Token]:
        index = self.pos + offset
        return self.tokens[index] if index < len(self.tokens) else None

    def _next(self) -> Optional[Token]:
        token = self._peek()
        if token is not None:
            self.pos += 1
        return token

    def _accept_word(self, *words: str) -> bool:
        token = self._peek()
        if token is not None and token.is_word(*words):
            self.pos += 1
            return True
        return False

    def _accept_punct(self, char: str) -> bool:
        token = self._peek()
        if token is not None and token.is_punct(char):
            self.pos += 1
            return True
        return False

    # ------------------------------------------
    # grammar pieces
    # ------------------------------------------

    def _qualified_name(self) -> Optional[str]:
        """name ( '.' name )* -> last segment"""
        token = self._peek()
        if token is None or token.kind not in (WORD, IDENT):
            return None
        self.pos += 1
        name = token.text
        while self._accept_punct("."):
            token = self._peek()
            if token is None or token.kind not in (WORD, IDENT):
                break
            self.pos += 1
            name = token.text
        return name

    def _group(self) -> Optional[List[List[Token]]]:
        """'(' item (',' item)* ')' -> tokens of each top-level item"""
        if not self._accept_punct("("):
            return None

        items: List[List[Token]] = []
        current: List[Token] = []
        depth = 0

        while self._peek() is not None:
            token = self._next()
            if token.is_punct("("):
                depth += 1
            elif token.is_punct(")"):
                if depth == 0:
                    if current:
                        items.append(current)
                    return items
                depth -= 1
            elif token.is_punct(",") and depth == 0:
                items.append(current)
                current = []
                continue
            current.append(token)

        # Unbalanced parentheses at end of file
        if current:
            items.append(current)
        return items

    def _column_definition(self, tokens: List[Token]) -> Optional[Tuple[str, ColumnType]]:
        if not tokens:
            return None
        head = tokens[0]
        if head.kind == WORD and head.text.upper() in CONSTRAINT_KEYWORDS:
            return None
        if head.kind not in (WORD, IDENT):
            return None

        type_token = tokens[1] if len(tokens) > 1 else None
        if type_token is None or type_token.kind not in (WORD, IDENT):
            return head.text, ColumnType.TEXT
        return head.text, map_sql_type(type_token.text)

    def _create_table(self) -> Optional[TableDefinition]:
        """After CREATE: [TEMP|TEMPORARY] TABLE [IF NOT EXISTS] name ( defs )"""
        self._accept_word("TEMP", "TEMPORARY")
        if not self._accept_word("TABLE"):
            return None
        if self._accept_word("IF"):
            self._accept_word("NOT")
            self._accept_word("EXISTS")

        name = self._qualified_name()
        if name is None:
            return None

        items = self._group()
        if items is None:
            # CREATE TABLE ... AS SELECT and friends
            return None

        table = TableDefinition(name=name)
        for item in items:
            column = self._column_definition(item)
            if column is not None:
                table.columns[column[0]] = column[1]
        return table

    @staticmethod
    def _literal(tokens: List[Token]) -> Optional[str]:
        """Value tokens -> raw text, quotes stripped; None for NULL"""
        if not tokens:
            return ""
        if len(tokens) == 1:
            token = tokens[0]
            if token.is_word("NULL"):
                return None
            return token.text
        if len(tokens) == 2 and tokens[0].kind == PUNCT and tokens[0].text in "+-" and tokens[1].kind == NUMBER:
            return tokens[0].text + tokens[1].text
        # Expressions / function calls are kept as written
        return " ".join(token.text for token in tokens)

    def _insert(self) -> Optional[InsertStatement]:
        """After INSERT: [IGNORE] INTO name [( cols )] VALUES ( ... ) [, ( ... )]*"""
        self._accept_word("IGNORE", "OR")
        self._accept_word("REPLACE", "IGNORE")
        if not self._accept_word("INTO"):
            return None

        name = self._qualified_name()
        if name is None:
            return None

        columns = None
        token = self._peek()
        if token is not None and token.is_punct("("):
            items = self._group() or []
            columns = [item[0].text for item in items if item]

        if not self._accept_word("VALUES", "VALUE"):
            return None

        statement = InsertStatement(table=name, columns=columns)
        while True:
            items = self._group()
            if items is None:
                break
            statement.rows.append([self._literal(item) for item in items])
            if not self._accept_punct(","):
                break
        return statement

    # ------------------------------------------
    # public API
    # ------------------------------------------

    def _statements(self, keyword: str):
        self.pos = 0
        while self._peek() is not None:
            if self._next().is_word(keyword):
                yield

    def first_table(self) -> Optional[TableDefinition]:
        """First CREATE TABLE with at least one column"""
        for _ in self._statements("CREATE"):
            table = self._create_table()
            if table is not None and table.columns:
                return table
        return None

    def inserts(self) -> List[InsertStatement]:
        """All INSERT INTO ... VALUES statements, in file order"""
        statements = []
        for _ in self._statements("INSERT"):
            statement = self._insert()
            if statement is not None:
                statements.append(statement)
        return statements


__all__ = [
    "Token",
    "tokenize",
    "map_sql_type",
    "TableDefinition",
    "InsertStatement",
    "SqlDumpScanner",
]
