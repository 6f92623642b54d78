from __future__ import annotations

from typing import Callable

from ..hashkey import hash_key
from ..tree import ArrayLiteral, Expression, HashLiteral, IndexExpression
from ..types import (
    Environment,
    HashPair,
    MkArray,
    MkError,
    MkHash,
    MkInteger,
    MkObject,
    NULL,
)
from .fn import eval_expressions
from .helpers import is_abrupt

EvalFunc = Callable[[Expression, Environment], MkObject]

def unusable_key(key: MkObject) -> MkError:
    return MkError(f"unusable as hash key: {key.type_name()}")

def eval_array(node: ArrayLiteral, env: Environment, eval_func: EvalFunc) -> MkObject:
    elements = eval_expressions(node.elements, env, eval_func)
    if not isinstance(elements, list):
        return elements

    return MkArray(elements)

def eval_hash_literal(node: HashLiteral, env: Environment, eval_func: EvalFunc) -> MkObject:
    """Build a hash; pairs whose keys project to the same HashKey overwrite, last one wins."""
    result = MkHash()

    for key_node, value_node in node.pairs:
        key = eval_func(key_node, env)
        if is_abrupt(key):
            return key

        hkey = hash_key(key)
        if hkey is None:
            return unusable_key(key)

        value = eval_func(value_node, env)
        if is_abrupt(value):
            return value

        # Drop any older entry so the stored original key is the later one.
        result.pairs.pop(hkey, None)
        result.pairs[hkey] = HashPair(key=key, value=value)

    return result

def eval_index(node: IndexExpression, env: Environment, eval_func: EvalFunc) -> MkObject:
    left = eval_func(node.left, env)
    if is_abrupt(left):
        return left

    index = eval_func(node.index, env)
    if is_abrupt(index):
        return index

    return apply_index(left, index)

def apply_index(left: MkObject, index: MkObject) -> MkObject:
    match left:
        case MkArray(elements=items):
            if not isinstance(index, MkInteger):
                return MkError(f"index operator not supported: ARRAY[{index.type_name()}]")

            i = index.value
            if i < 0 or i >= len(items):
                return NULL
            return items[i]

        case MkHash(pairs=pairs):
            hkey = hash_key(index)
            if hkey is None:
                return unusable_key(index)

            pair = pairs.get(hkey)
            return NULL if pair is None else pair.value

        case _:
            return MkError(f"index operator not supported: {left.type_name()}")
