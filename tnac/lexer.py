"""Lexical analyser turning source text into tokens."""

from __future__ import annotations

from collections.abc import Iterator

from tnac.token import SourceLocation, TokKind, Token

_NUL = "\0"
_DIGITS = "0123456789abcdef"
_OPERATOR_CHARS = frozenset("+-~*/%&^|=!?<>.@")
_BLANKS = frozenset(" \n\t\f\v\r\0")
_PUNCT_CHARS = frozenset(":,.;(){}[]")
_COMMENT_CHARS = frozenset("`\\")

_KEYWORDS = {
    "fn": TokKind.KW_FUNCTION,
    "result": TokKind.KW_RESULT,
    "cplx": TokKind.KW_COMPLEX,
    "frac": TokKind.KW_FRACTION,
    "int": TokKind.KW_INT,
    "flt": TokKind.KW_FLOAT,
    "bool": TokKind.KW_BOOL,
    "array": TokKind.KW_ARRAY,
    "undef": TokKind.KW_UNDEF,
    "ret": TokKind.KW_RET,
    "true": TokKind.KW_TRUE,
    "false": TokKind.KW_FALSE,
    "i": TokKind.KW_I,
    "pi": TokKind.KW_PI,
    "e": TokKind.KW_E,
    "entry": TokKind.KW_ENTRY,
    "import": TokKind.KW_IMPORT,
    "as": TokKind.KW_AS,
}

_SINGLE_OPS = {
    ".": TokKind.DOT,
    "@": TokKind.AT,
    "?": TokKind.QUESTION,
    "+": TokKind.PLUS,
    "~": TokKind.TILDE,
    "%": TokKind.PERCENT,
    "^": TokKind.HAT,
}

# first char -> (expected second char, kind if present, kind otherwise)
_PAIRED_OPS = {
    "!": ("=", TokKind.NOT_EQ, TokKind.EXCLAMATION),
    "<": ("=", TokKind.LESS_EQ, TokKind.LESS),
    ">": ("=", TokKind.GREATER_EQ, TokKind.GREATER),
    "-": (">", TokKind.ARROW, TokKind.MINUS),
    "*": ("*", TokKind.POW, TokKind.ASTERISK),
    "/": ("/", TokKind.ROOT, TokKind.SLASH),
    "&": ("&", TokKind.LOG_AND, TokKind.AMP),
    "|": ("|", TokKind.LOG_OR, TokKind.PIPE),
    "=": ("=", TokKind.EQ, TokKind.ASSIGN),
}

_PUNCT = {
    ":": TokKind.EXPR_SEP,
    "(": TokKind.PAREN_OPEN,
    ")": TokKind.PAREN_CLOSE,
    "{": TokKind.CURLY_OPEN,
    "}": TokKind.CURLY_CLOSE,
    "[": TokKind.BRACKET_OPEN,
    "]": TokKind.BRACKET_CLOSE,
    ",": TokKind.COMMA,
    ";": TokKind.SEMICOLON,
}


def _to_lower(c: str) -> str:
    return c.lower() if "A" <= c <= "Z" else c


def _is_digit(c: str, base: int = 10) -> bool:
    if base > len(_DIGITS):
        return False
    return _to_lower(c) in _DIGITS[:base]


def _is_blank(c: str) -> bool:
    return c in _BLANKS


def _is_blank_nonnull(c: str) -> bool:
    return c != _NUL and _is_blank(c)


def _is_comment(c: str) -> bool:
    return c in _COMMENT_CHARS


def _is_comment_terminator(start: str, c: str) -> bool:
    if c == _NUL:
        return True
    if start == "`":
        return c == start
    if start == "\\":
        return c == "\n"
    return False


def _is_operator(c: str) -> bool:
    return c in _OPERATOR_CHARS


def _is_separator(c: str) -> bool:
    return (
        c in _PUNCT_CHARS
        or _is_blank(c)
        or _is_comment(c)
        or _is_operator(c)
    )


def _is_alpha(c: str) -> bool:
    return "a" <= _to_lower(c) <= "z"


def _is_id_char(c: str) -> bool:
    return c == "_" or _is_alpha(c) or _is_digit(c)


def _is_any_name_start(c: str) -> bool:
    return _is_alpha(c) or c == "_" or c == "#"


def lookup_keyword(name: str) -> TokKind:
    """Map an underscore-prefixed name to its keyword kind, or ERROR."""
    if not name.startswith("_"):
        return TokKind.ERROR
    return _KEYWORDS.get(name[1:], TokKind.ERROR)


class Lexer:
    """Produces tokens from a text buffer one at a time, with one token of lookahead."""

    def __init__(self) -> None:
        self._buf = ""
        self._from = 0
        self._to = 0
        self._preview: Token | None = None
        self._loc = SourceLocation.dummy()

    def feed(self, buf: str) -> None:
        """Start lexing a new buffer."""
        self._preview = None
        self._buf = buf
        self._from = 0
        self._to = 0
        self._skip_spaces()

    def next(self) -> Token:
        """Return the next token and consume it."""
        tok = self.peek()
        self._preview = None
        return tok

    def peek(self) -> Token:
        """Return the next token without consuming it."""
        if self._preview is not None:
            return self._preview
        if not self._good():
            return self._consume(TokKind.EOL)
        if not self._skip_comment():
            return self._consume(TokKind.ERROR)
        if not self._good():
            return self._consume(TokKind.EOL)

        c = self._peek_char()
        if c == "'":
            return self._string()
        if _is_any_name_start(c):
            return self._identifier()
        if _is_digit(c):
            return self._number()
        if _is_operator(c):
            return self._op()
        if _is_separator(c):
            return self._punct()
        return self._consume(TokKind.ERROR)

    def attach_loc(self, loc: SourceLocation) -> None:
        """Track positions in ``loc``, which is updated as text is consumed."""
        self._loc = loc

    def detach_loc(self) -> None:
        """Stop updating the previously attached location."""
        self._loc = SourceLocation.dummy()

    def _consume(self, kind: TokKind) -> Token:
        if kind is TokKind.ERROR:
            self._ffwd()
        if kind is TokKind.COMMAND:
            self._from += 1

        value = self._buf[self._from:self._to] if kind is not TokKind.EOL else ""
        if kind is TokKind.STRING:
            value = value[1:-1]

        at = self._loc.record()
        at.decr_column_by(len(value))
        tok = Token(value, kind, at)

        self._skip_spaces()
        self._preview = tok
        return tok

    def _ffwd(self) -> None:
        while self._good() and not _is_separator(self._peek_char()):
            self._advance()

    def _skip_spaces(self) -> None:
        while self._good() and _is_blank(self._peek_char()):
            self._advance()
        self._collapse()

    def _skip_comment(self) -> bool:
        while True:
            start = self._peek_char()
            if not _is_comment(start):
                return True

            self._advance()
            while self._good() and not _is_comment_terminator(start, self._peek_char()):
                self._advance()

            if not _is_comment_terminator(start, self._peek_char()):
                return False

            self._advance()
            while _is_blank_nonnull(self._peek_char()):
                self._advance()
            self._collapse()

    def _string(self) -> Token:
        self._advance()
        while self._good():
            c = self._peek_char()
            self._advance()
            if c == "'":
                return self._consume(TokKind.STRING)
        return self._consume(TokKind.ERROR)

    def _number(self) -> Token:
        leading_zero = self._peek_char() == "0"
        if leading_zero:
            self._advance()
            c = self._peek_char()
            if _is_separator(c) and c != ".":
                return self._consume(TokKind.INT_DEC)
            if _to_lower(c) == "b":
                return self._hex_bin(is_hex=False)
            if _to_lower(c) == "x":
                return self._hex_bin(is_hex=True)
            if _is_digit(c, 8) and self._digit_seq(8):
                c = self._peek_char()
                if _is_separator(c) and c != ".":
                    return self._consume(TokKind.INT_OCT)
        return self._decimal(leading_zero)

    def _hex_bin(self, is_hex: bool) -> Token:
        self._advance()
        base, kind = (16, TokKind.INT_HEX) if is_hex else (2, TokKind.INT_BIN)
        if not self._digit_seq(base):
            return self._consume(TokKind.ERROR)
        if _is_separator(self._peek_char()):
            return self._consume(kind)
        return self._consume(TokKind.ERROR)

    def _decimal(self, leading_zero: bool) -> Token:
        result = TokKind.ERROR
        if not self._digit_seq(10) and self._peek_char() != ".":
            return self._consume(TokKind.ERROR)

        c = self._peek_char()
        if _is_separator(c) and c != ".":
            result = TokKind.ERROR if leading_zero else TokKind.INT_DEC
        elif c == ".":
            self._advance()
            if self._digit_seq(10) and _is_separator(self._peek_char()):
                result = TokKind.FLOAT
        return self._consume(result)

    def _digit_seq(self, base: int) -> bool:
        ok = False
        while self._good():
            c = self._peek_char()
            if _is_digit(c, base):
                ok = True
                self._advance()
                continue
            if not _is_separator(c):
                ok = False
            break
        return ok

    def _identifier(self) -> Token:
        first = self._peek_char()
        if not _is_alpha(first):
            self._advance()

        if not self._id_seq():
            return self._consume(TokKind.ERROR)

        if first == "_":
            return self._consume(lookup_keyword(self._buf[self._from:self._to]))
        if first == "#":
            return self._consume(TokKind.COMMAND)
        return self._consume(TokKind.IDENTIFIER)

    def _id_seq(self) -> bool:
        ok = False
        while self._good():
            c = self._peek_char()
            if _is_id_char(c):
                ok = True
                self._advance()
                continue
            if not _is_separator(c):
                ok = False
            break
        return ok

    def _op(self) -> Token:
        c = self._peek_char()
        self._advance()
        if c in _SINGLE_OPS:
            return self._consume(_SINGLE_OPS[c])
        if c in _PAIRED_OPS:
            expected, paired, fallback = _PAIRED_OPS[c]
            if self._peek_char() == expected:
                self._advance()
                return self._consume(paired)
            return self._consume(fallback)
        return self._consume(TokKind.ERROR)

    def _punct(self) -> Token:
        c = self._peek_char()
        self._advance()
        return self._consume(_PUNCT.get(c, TokKind.ERROR))

    def _peek_char(self) -> str:
        return self._buf[self._to] if self._good() else _NUL

    def _advance(self) -> None:
        if not self._good():
            return
        if self._peek_char() == "\n":
            self._loc.add_line()
        else:
            self._loc.add_col()
        self._to += 1

    def _collapse(self) -> None:
        self._from = self._to

    def _good(self) -> bool:
        return self._to < len(self._buf)


def tokenize(text: str) -> Iterator[Token]:
    """Yield every token of ``text`` up to, but not including, the end of input."""
    lexer = Lexer()
    lexer.feed(text)
    while not (tok := lexer.next()).is_eol():
        yield tok