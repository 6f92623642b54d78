from __future__ import annotations

import pytest

from monkey_ref.runner import run
from monkey_ref.runtime import root_environment
from monkey_ref.types import Environment, MkInteger
from tests.support.harness import run_runtime_case, verify_result

SCOPE_CASES = [
    ("let-value", "let a = 5; a;", ("int", 5)),
    ("let-expr", "let a = 5 * 5; a;", ("int", 25)),
    ("let-chain", "let a = 5; let b = a; b;", ("int", 5)),
    ("let-chain-sum", "let a = 5; let b = a; let c = a + b + 5; c;", ("int", 15)),
    ("let-shadow", "let a = 1; let a = a + 1; a", ("int", 2)),
    ("let-is-null", "let a = 1;", ("null", None)),
    ("empty-program", "", ("null", None)),
    ("branch-let-local", "let x = 1; if (true) { let x = 2; x }", ("int", 2)),
    ("branch-let-hidden", "let x = 1; if (true) { let x = 2; x }; x", ("int", 1)),
    ("branch-reads-outer", "let x = 1; if (true) { x + 1 }", ("int", 2)),
    ("fn-let-local", "let f = fn() { let y = 3; y }; f()", ("int", 3)),
    ("fn-shadows-global", "let x = 1; let f = fn(x) { let x = x * 10; x }; f(2) + x", ("int", 21)),
    ("closure-keeps-env",
     "let counter = fn(start) { fn() { start } }; let c = counter(4); let start = 99; c()",
     ("int", 4)),
]

ERROR_CASES = [
    ("unbound", "foobar", "identifier not found: foobar"),
    ("branch-let-gone", "if (true) { let hidden = 1; }; hidden", "identifier not found: hidden"),
    ("fn-let-gone", "let f = fn() { let inner = 1; inner }; f(); inner", "identifier not found: inner"),
]


@pytest.mark.parametrize(
    "source, expectation",
    [pytest.param(src, exp, id=name) for name, src, exp in SCOPE_CASES],
)
def test_scoping(source: str, expectation) -> None:
    run_runtime_case(source, expectation, None)


@pytest.mark.parametrize(
    "source, message",
    [pytest.param(src, msg, id=name) for name, src, msg in ERROR_CASES],
)
def test_unbound_names(source: str, message: str) -> None:
    run_runtime_case(source, ("error", message), None)


def test_environment_lookup_walks_outward() -> None:
    outer = Environment()
    outer.define("a", MkInteger(1))
    inner = outer.enclosed()
    inner.define("b", MkInteger(2))

    assert inner.get("a").value == 1
    assert outer.get("b") is None
    assert "a" in inner
    assert "b" not in outer
    assert inner.names() == ["a", "b"]


def test_inner_define_shadows_without_touching_outer() -> None:
    outer = Environment()
    outer.define("a", MkInteger(1))
    inner = outer.enclosed()
    inner.define("a", MkInteger(2))

    assert inner.get("a").value == 2
    assert outer.get("a").value == 1
    assert inner.names() == ["a"]


def test_bindings_persist_across_runs_in_shared_env() -> None:
    env = root_environment()
    run("let total = 10;", env)
    run("let bump = fn(n) { total + n };", env)
    verify_result(run("bump(5)", env), "int", 15)
    assert env.names() == ["bump", "total"]


def test_host_builtins_bound_in_root_environment() -> None:
    env = root_environment({"answer": lambda args: MkInteger(42)})
    verify_result(run("answer() + 1", env), "int", 43)
    verify_result(run("type(answer)", env), "string", "BUILTIN")
