from __future__ import annotations

from typing import List

from .runtime import register_builtin
from .types import MkArray, MkError, MkHash, MkInteger, MkObject, MkString, NULL

def _unsupported(name: str, arg: MkObject) -> MkError:
    return MkError(f"argument to `{name}` not supported, got {arg.type_name()}")

@register_builtin("len", arity=1)
def _len(args: List[MkObject]) -> MkObject:
    arg = args[0]

    if isinstance(arg, MkString):
        return MkInteger(len(arg.value))
    if isinstance(arg, MkArray):
        return MkInteger(len(arg.elements))
    if isinstance(arg, MkHash):
        return MkInteger(len(arg.pairs))

    return _unsupported("len", arg)

@register_builtin("print")
def _print(args: List[MkObject]) -> MkObject:
    for arg in args:
        print(arg.inspect())

    return NULL

@register_builtin("puts")
def _puts(args: List[MkObject]) -> MkObject:
    return _print(args)

@register_builtin("first", arity=1)
def _first(args: List[MkObject]) -> MkObject:
    arr = args[0]
    if not isinstance(arr, MkArray):
        return _unsupported("first", arr)

    return arr.elements[0] if arr.elements else NULL

@register_builtin("last", arity=1)
def _last(args: List[MkObject]) -> MkObject:
    arr = args[0]
    if not isinstance(arr, MkArray):
        return _unsupported("last", arr)

    return arr.elements[-1] if arr.elements else NULL

@register_builtin("rest", arity=1)
def _rest(args: List[MkObject]) -> MkObject:
    arr = args[0]
    if not isinstance(arr, MkArray):
        return _unsupported("rest", arr)

    if not arr.elements:
        return NULL

    return MkArray(list(arr.elements[1:]))

@register_builtin("push", arity=2)
def _push(args: List[MkObject]) -> MkObject:
    # Arrays are shared by reference: the append is visible through every binding.
    arr, item = args
    if not isinstance(arr, MkArray):
        return _unsupported("push", arr)

    arr.elements.append(item)
    return arr

@register_builtin("type", arity=1)
def _type(args: List[MkObject]) -> MkObject:
    return MkString(args[0].type_name())
