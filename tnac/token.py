"""Token kinds, source locations and the token value type."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum, auto
from pathlib import Path


class TokKind(Enum):
    """Every kind of token the lexer can produce."""

    ERROR = auto()
    EOL = auto()

    IDENTIFIER = auto()
    COMMAND = auto()
    STRING = auto()

    INT_DEC = auto()
    INT_OCT = auto()
    INT_BIN = auto()
    INT_HEX = auto()
    FLOAT = auto()

    KW_FUNCTION = auto()
    KW_RESULT = auto()
    KW_COMPLEX = auto()
    KW_FRACTION = auto()
    KW_INT = auto()
    KW_FLOAT = auto()
    KW_BOOL = auto()
    KW_ARRAY = auto()
    KW_UNDEF = auto()
    KW_RET = auto()
    KW_TRUE = auto()
    KW_FALSE = auto()
    KW_I = auto()
    KW_PI = auto()
    KW_E = auto()
    KW_ENTRY = auto()
    KW_IMPORT = auto()
    KW_AS = auto()

    DOT = auto()
    AT = auto()
    EXCLAMATION = auto()
    NOT_EQ = auto()
    QUESTION = auto()
    LESS = auto()
    LESS_EQ = auto()
    GREATER = auto()
    GREATER_EQ = auto()
    PLUS = auto()
    MINUS = auto()
    ARROW = auto()
    TILDE = auto()
    ASTERISK = auto()
    POW = auto()
    SLASH = auto()
    ROOT = auto()
    PERCENT = auto()
    AMP = auto()
    LOG_AND = auto()
    HAT = auto()
    PIPE = auto()
    LOG_OR = auto()
    EQ = auto()
    ASSIGN = auto()

    EXPR_SEP = auto()
    PAREN_OPEN = auto()
    PAREN_CLOSE = auto()
    CURLY_OPEN = auto()
    CURLY_CLOSE = auto()
    BRACKET_OPEN = auto()
    BRACKET_CLOSE = auto()
    COMMA = auto()
    SEMICOLON = auto()


_LITERAL_KINDS = frozenset(
    {
        TokKind.INT_DEC,
        TokKind.INT_OCT,
        TokKind.INT_BIN,
        TokKind.INT_HEX,
        TokKind.FLOAT,
        TokKind.STRING,
        TokKind.KW_TRUE,
        TokKind.KW_FALSE,
        TokKind.KW_I,
        TokKind.KW_PI,
        TokKind.KW_E,
        TokKind.KW_UNDEF,
    }
)


@dataclass
class SourceLocation:
    """A mutable position in a source file; a location without a file is a dummy."""

    file: Path | None = None
    line: int = 0
    column: int = 0

    @classmethod
    def dummy(cls) -> SourceLocation:
        """Return a fresh location that is not tied to any file."""
        return cls()

    @property
    def is_dummy(self) -> bool:
        return self.file is None

    def add_line(self) -> None:
        """Move to the start of the next line."""
        self.line += 1
        self.column = 0

    def add_col(self) -> None:
        """Move one column forward."""
        self.column += 1

    def decr_column_by(self, count: int) -> None:
        """Move back by ``count`` columns, never before the line start."""
        self.column = max(0, self.column - count)

    def record(self) -> SourceLocation:
        """Return an independent snapshot of this location."""
        return replace(self)


@dataclass(frozen=True)
class Token:
    """A lexeme together with its kind and the place it starts at."""

    value: str
    kind: TokKind
    at: SourceLocation | None = None

    def is_any(self, *kinds: TokKind) -> bool:
        return self.kind in kinds

    def is_eol(self) -> bool:
        return self.kind is TokKind.EOL

    def is_literal(self) -> bool:
        return self.kind in _LITERAL_KINDS

    def is_identifier(self) -> bool:
        return self.kind is TokKind.IDENTIFIER

    def get_after(self) -> Token:
        """Return an empty token positioned right after this one."""
        loc = None
        if self.at is not None:
            loc = self.at.record()
            loc.column += len(self.value)
        return Token("", self.kind, loc)