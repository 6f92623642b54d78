from __future__ import annotations

import pytest

from monkey_ref.hashkey import HashKey, hash_key
from monkey_ref.runner import run
from monkey_ref.types import MkBool, MkFloat, MkHash, MkInteger, MkString
from tests.support.harness import run_runtime_case

ARRAY_CASES = [
    ("literal", "[1, 2 * 2, 3 + 3]", ("array", [1, 4, 6])),
    ("empty", "[]", ("array", [])),
    ("mixed-types", '[1, "two", 3.0, true]', ("array", [1, "two", 3.0, True])),
    ("nested", "[[1], [2, 3]]", ("array", [[1], [2, 3]])),
    ("index-0", "[1, 2, 3][0]", ("int", 1)),
    ("index-2", "[1, 2, 3][2]", ("int", 3)),
    ("index-computed", "let i = 0; [1][i]", ("int", 1)),
    ("index-expr", "[1, 2, 3][1 + 1];", ("int", 3)),
    ("index-bound", "let myArray = [1, 2, 3]; myArray[2];", ("int", 3)),
    ("index-sum",
     "let myArray = [1, 2, 3]; myArray[0] + myArray[1] + myArray[2];",
     ("int", 6)),
    ("index-from-binding",
     "let myArray = [1, 2, 3]; let i = myArray[0]; myArray[i]",
     ("int", 2)),
    ("index-out-of-range", "[1, 2, 3][3]", ("null", None)),
    ("index-far-out", "[1, 2, 3][10]", ("null", None)),
    ("index-negative", "[1, 2, 3][-1]", ("null", None)),
    ("index-empty", "[][0]", ("null", None)),
    ("nested-index", "[[1, 2], [3, 4]][1][0]", ("int", 3)),
]

HASH_CASES = [
    ("empty", "{}", ("hash", {})),
    ("string-keys", '{"one": 1, "two": 2}', ("hash", {"one": 1, "two": 2})),
    ("computed",
     'let two = "two"; {"one": 10 - 9, two: 1 + 1, "thr" + "ee": 6 / 2, 4: 4, true: 5, false: 6}',
     ("hash", {"one": 1, "two": 2, "three": 3, 4: 4, True: 5, False: 6})),
    ("lookup-string", '{"foo": 5}["foo"]', ("int", 5)),
    ("lookup-missing", '{"foo": 5}["bar"]', ("null", None)),
    ("lookup-bound-key", 'let key = "foo"; {"foo": 5}[key]', ("int", 5)),
    ("lookup-empty", '{}["foo"]', ("null", None)),
    ("lookup-int", "{5: 5}[5]", ("int", 5)),
    ("lookup-true", "{true: 5}[true]", ("int", 5)),
    ("lookup-false", "{false: 5}[false]", ("int", 5)),
    ("lookup-float", "{2.5: 1}[2.5]", ("int", 1)),
    ("lookup-neg-zero", "{0.0: 1}[-0.0]", ("int", 1)),
    ("lookup-nan", "{0.0 / 0.0: 1}[0.0 / 0.0]", ("int", 1)),
    ("int-vs-float", "{1: 1}[1.0]", ("null", None)),
    ("int-vs-bool", "{1: 1}[true]", ("null", None)),
    ("float-vs-int", "{1.0: 1}[1]", ("null", None)),
    ("last-wins", '{"a": 1, "a": 2}["a"]', ("int", 2)),
    ("values-can-be-fns", '{"f": fn(x) { x * 3 }}["f"](3)', ("int", 9)),
]

ERROR_CASES = [
    ("array-string-index", '[1, 2]["a"]', "index operator not supported: ARRAY[STRING]"),
    ("array-float-index", "[1, 2][1.0]", "index operator not supported: ARRAY[FLOAT]"),
    ("index-int", "5[0]", "index operator not supported: INTEGER"),
    ("index-string", '"abc"[0]', "index operator not supported: STRING"),
    ("fn-key-literal", '{fn(x) { x }: "Monkey"}', "unusable as hash key: FUNCTION"),
    ("array-key-literal", "{[1]: 2}", "unusable as hash key: ARRAY"),
    ("fn-key-lookup", '{"name": "Monkey"}[fn(x) { x }];', "unusable as hash key: FUNCTION"),
    ("hash-key-lookup", "{}[{}]", "unusable as hash key: HASH"),
    ("error-in-element", "[1, -true, 3]", "unknown operator: -BOOLEAN"),
    ("error-in-value", '{"a": 1 + "b"}', "type mismatch: INTEGER + STRING"),
    ("error-in-index", "[1][1 / 0]", "division by zero: 1 / 0"),
]


@pytest.mark.parametrize(
    "source, expectation",
    [pytest.param(src, exp, id=f"array-{name}") for name, src, exp in ARRAY_CASES]
    + [pytest.param(src, exp, id=f"hash-{name}") for name, src, exp in HASH_CASES],
)
def test_collection_results(source: str, expectation) -> None:
    run_runtime_case(source, expectation, None)


@pytest.mark.parametrize(
    "source, message",
    [pytest.param(src, msg, id=name) for name, src, msg in ERROR_CASES],
)
def test_collection_errors(source: str, message: str) -> None:
    run_runtime_case(source, ("error", message), None)


def test_hash_keeps_every_key_kind() -> None:
    result = run('{1: "int", 1.0: "float", true: "bool", "1": "str"}')
    assert isinstance(result, MkHash)
    assert set(result.pairs) == {
        hash_key(MkInteger(1)),
        hash_key(MkFloat(1.0)),
        hash_key(MkBool(True)),
        hash_key(MkString("1")),
    }
    assert len(result.pairs) == 4


def test_colliding_keys_keep_later_original_key() -> None:
    result = run("{0.0: 1, -0.0: 2}")
    assert isinstance(result, MkHash)
    assert len(result.pairs) == 1

    pair = result.pairs[HashKey("float", 0)]
    assert pair.value.value == 2
    assert pair.key.inspect() == "-0.0"


def test_hash_preserves_insertion_order() -> None:
    result = run('{"b": 1, "a": 2, 3: 3}')
    assert result.inspect() == '{"b": 1, "a": 2, 3: 3}'


def test_array_inspect_quotes_nested_strings() -> None:
    result = run('let nothing = if (false) { 1 }; [1, "two", [3.5, nothing]]')
    assert result.inspect() == '[1, "two", [3.5, null]]'


def test_arrays_are_shared_by_reference() -> None:
    result = run("let a = [1]; let b = a; push(b, 2); a")
    assert result.inspect() == "[1, 2]"


def test_inspect_marks_cycles_through_hash() -> None:
    result = run('let a = [1]; push(a, {"self": a}); a')
    assert result.inspect() == '[1, {"self": [...]}]'
