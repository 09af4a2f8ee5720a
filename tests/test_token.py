from pathlib import Path

import pytest

from tnac.token import SourceLocation, TokKind, Token


def test_dummy_location_has_no_file():
    assert SourceLocation.dummy().is_dummy
    assert not SourceLocation(Path("prog.tnac")).is_dummy


def test_add_line_resets_column():
    loc = SourceLocation(line=3, column=7)
    loc.add_line()
    assert loc.line == 4
    assert loc.column == 0


def test_add_col_advances_one_column():
    loc = SourceLocation(line=2, column=5)
    before = loc.record()
    loc.add_col()
    assert loc.column == before.column + 1
    assert loc.line == before.line


def test_decr_column_never_goes_negative():
    loc = SourceLocation(column=2)
    loc.decr_column_by(10)
    assert loc.column == 0


def test_decr_column_by_subtracts():
    loc = SourceLocation(column=9)
    loc.decr_column_by(4)
    assert loc.column == 5


def test_record_is_independent_snapshot():
    loc = SourceLocation(Path("a.tnac"), 1, 1)
    snap = loc.record()
    loc.add_col()
    loc.add_line()
    assert snap == SourceLocation(Path("a.tnac"), 1, 1)
    assert snap != loc


def test_is_any():
    tok = Token("+", TokKind.PLUS)
    assert tok.is_any(TokKind.MINUS, TokKind.PLUS)
    assert not tok.is_any(TokKind.MINUS, TokKind.TILDE)
    assert not tok.is_any()


def test_is_eol():
    assert Token("", TokKind.EOL).is_eol()
    assert not Token("x", TokKind.IDENTIFIER).is_eol()


@pytest.mark.parametrize(
    "kind",
    [
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
    ],
)
def test_literal_kinds(kind):
    assert Token("v", kind).is_literal()


@pytest.mark.parametrize(
    "kind", [TokKind.IDENTIFIER, TokKind.PLUS, TokKind.KW_FUNCTION, TokKind.EOL]
)
def test_non_literal_kinds(kind):
    assert not Token("v", kind).is_literal()


def test_is_identifier():
    assert Token("abc", TokKind.IDENTIFIER).is_identifier()
    assert not Token("cmd", TokKind.COMMAND).is_identifier()


def test_get_after_moves_past_value():
    tok = Token("name", TokKind.IDENTIFIER, SourceLocation(Path("f.tnac"), 2, 3))
    after = tok.get_after()
    assert after.value == ""
    assert after.kind is TokKind.IDENTIFIER
    assert after.at.line == tok.at.line
    assert after.at.column == tok.at.column + len(tok.value)
    assert tok.at.column == 3


def test_get_after_without_location():
    after = Token("x", TokKind.IDENTIFIER).get_after()
    assert after.at is None
    assert after.value == ""


def test_token_equality():
    loc = SourceLocation(line=1, column=2)
    assert Token("1", TokKind.INT_DEC, loc) == Token("1", TokKind.INT_DEC, loc.record())
    assert Token("1", TokKind.INT_DEC) != Token("2", TokKind.INT_DEC)