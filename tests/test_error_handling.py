from __future__ import annotations

import pytest

from monkey_ref.evaluator import eval_expr, eval_node
from monkey_ref.runner import run
from monkey_ref.runtime import root_environment
from monkey_ref.types import Environment, MkError, MonkeyInternalError, MonkeyParseError
from tests.support.harness import parse_program_text, run_runtime_case

PROPAGATION_CASES = [
    ("stops-program", "5 + true; 5;", "type mismatch: INTEGER + BOOLEAN"),
    ("nested-prefix", "-(-true)", "unknown operator: -BOOLEAN"),
    ("left-operand", "(-true) + 1", "unknown operator: -BOOLEAN"),
    ("right-operand", "1 + (-true)", "unknown operator: -BOOLEAN"),
    ("in-condition", "if (-true) { 1 } else { 2 }", "unknown operator: -BOOLEAN"),
    ("in-branch", "if (10 > 1) { true + false; }", "unknown operator: BOOLEAN + BOOLEAN"),
    ("nested-branch",
     "if (10 > 1) { if (10 > 1) { return true + false; } return 1; }",
     "unknown operator: BOOLEAN + BOOLEAN"),
    ("in-let", "let x = 1 / 0; x", "division by zero: 1 / 0"),
    ("in-return", "return -true; 1", "unknown operator: -BOOLEAN"),
    ("in-callee", "let f = fn() { 1 + true }; f() + 1", "type mismatch: INTEGER + BOOLEAN"),
    ("first-of-many-args", "let f = fn(a, b) { a }; f(-true, 1 / 0)", "unknown operator: -BOOLEAN"),
    ("hash-key-first", '{-true: 1 / 0}', "unknown operator: -BOOLEAN"),
    ("unbound-in-fn", "let f = fn() { nope }; f()", "identifier not found: nope"),
]


@pytest.mark.parametrize(
    "source, message",
    [pytest.param(src, msg, id=name) for name, src, msg in PROPAGATION_CASES],
)
def test_first_error_propagates(source: str, message: str) -> None:
    run_runtime_case(source, ("error", message), None)


def test_error_inspect() -> None:
    result = run("1 + true")
    assert isinstance(result, MkError)
    assert result.type_name() == "ERROR"
    assert result.inspect() == "ERROR: type mismatch: INTEGER + BOOLEAN"


@pytest.mark.parametrize(
    "source",
    [
        pytest.param("let = 1;", id="let"),
        pytest.param("1 +", id="dangling-op"),
        pytest.param("fn(x {", id="broken-fn"),
    ],
)
def test_syntax_errors_raise_before_evaluation(source: str) -> None:
    run_runtime_case(source, None, MonkeyParseError)


def test_parse_error_reports_every_error(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(MonkeyParseError) as excinfo:
        run('let = 1; puts("side effect"); let 2;')

    err = excinfo.value
    assert len(err.errors) == 2
    assert str(err).startswith("2 syntax error(s):\n  expected next token to be IDENT")
    assert capsys.readouterr().out == ""


def test_unknown_node_is_internal_error() -> None:
    with pytest.raises(MonkeyInternalError, match="no evaluation rule for node type object"):
        eval_node(object(), Environment())


def test_eval_expr_on_single_node() -> None:
    program = parse_program_text("1 + 2")
    result = eval_expr(program.statements[0].expression)
    assert result.value == 3


def test_eval_expr_reports_runaway_recursion() -> None:
    env = root_environment()
    run("let loop = fn(n) { loop(n + 1) };", env)
    call = parse_program_text("loop(0)").statements[0].expression

    result = eval_expr(call, env)
    assert isinstance(result, MkError)
    assert result.message == "maximum recursion depth exceeded"
