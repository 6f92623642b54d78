from __future__ import annotations

from typing import List

import pytest

from monkey_ref.lexer_rd import Lexer
from monkey_ref.parser_rd import ParseError, parse, parse_program
from monkey_ref.tree import LetStatement
from tests.support.harness import parse_error_messages

ERROR_CASES = [
    ("let-missing-name", "let = 5;", ["expected next token to be IDENT, got ASSIGN instead"]),
    ("let-missing-assign", "let x 5;", ["expected next token to be ASSIGN, got INT instead"]),
    ("let-number-name", "let 838383;", ["expected next token to be IDENT, got INT instead"]),
    ("no-prefix-plus", "+ 1", ["no prefix parse function for PLUS found"]),
    ("no-prefix-semi", "1 + ;", ["no prefix parse function for SEMI found"]),
    ("illegal-char", "@", ["illegal token '@'"]),
    ("if-missing-rpar", "if (x { 1 }", ["expected next token to be RPAR, got LBRACE instead"]),
    ("fn-missing-rpar", "fn(x { x }", ["expected next token to be RPAR, got LBRACE instead"]),
    ("fn-bad-param", "fn(1) { 1 }", ["expected next token to be IDENT, got INT instead"]),
    ("block-unclosed", "if (true) { 1", ["expected RBRACE to close block, got EOF"]),
    ("hash-missing-colon", "{ 1 ", ["expected next token to be COLON, got EOF instead"]),
    ("array-unclosed", "[1, 2", ["expected next token to be RSQB, got EOF instead"]),
    ("call-unclosed", "add(1, 2", ["expected next token to be RPAR, got EOF instead"]),
    ("int-too-large", "99999999999999999999",
     ["could not parse 99999999999999999999 as integer"]),
    ("superscript-digit", "let x = \u00b2;", ["illegal token '\u00b2'"]),
    ("float-overflow", "1e999;", ["could not parse 1e999 as float"]),
    ("float-overflow-in-let", "let big = 2.5e400;", ["could not parse 2.5e400 as float"]),
    ("three-bad-lets", "let = 1; let x 2; let 3;", [
        "expected next token to be IDENT, got ASSIGN instead",
        "expected next token to be ASSIGN, got INT instead",
        "expected next token to be IDENT, got INT instead",
    ]),
]


@pytest.mark.parametrize(
    "code, expected",
    [pytest.param(code, expected, id=name) for name, code, expected in ERROR_CASES],
)
def test_error_messages(code: str, expected: List[str]) -> None:
    assert parse_error_messages(code) == expected


def test_error_carries_position() -> None:
    _, errors = parse_program(Lexer("let = 5;"))
    assert len(errors) == 1

    err = errors[0]
    assert isinstance(err, ParseError)
    assert (err.line, err.column) == (1, 5)
    assert str(err) == "expected next token to be IDENT, got ASSIGN instead at line 1, col 5"


def test_parse_returns_string_messages() -> None:
    _, messages = parse("let x 1;\nlet y = 2;")
    assert messages == ["expected next token to be ASSIGN, got INT instead at line 1, col 7"]


def test_parser_recovers_after_error() -> None:
    program, errors = parse_program(Lexer("let = 1; let y = 2; y"))
    assert len(errors) == 1
    assert len(program.statements) == 2
    assert isinstance(program.statements[0], LetStatement)
    assert program.statements[0].name.value == "y"


def test_clean_source_has_no_errors() -> None:
    assert parse_error_messages("let a = fn(x) { x * 2 }; a(3);") == []


def test_integer_past_digit_limit_is_syntax_error() -> None:
    literal = "1" * 5000
    assert parse_error_messages(f"let n = {literal};") == [f"could not parse {literal} as integer"]
