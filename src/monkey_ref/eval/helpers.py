from __future__ import annotations

from ..types import MkBool, MkError, MkNull, MkObject, MkReturn

def is_truthy(val: MkObject) -> bool:
    """Everything is truthy except `false` and null (0 and "" included)."""
    match val:
        case MkBool(value=b):
            return b
        case MkNull():
            return False
        case _:
            return True

def is_abrupt(val: MkObject) -> bool:
    """True for values that must stop evaluation of the enclosing construct."""
    return isinstance(val, (MkError, MkReturn))
