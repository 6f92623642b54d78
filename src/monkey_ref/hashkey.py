"""Hash-map keys for Monkey values.

Floats have no total equality (NaN != NaN), so hash keys are not derived
from the value classes. Each hashable variant is projected onto a HashKey
instead: a tagged, frozen record whose equality and hash are total.

- INTEGER n   -> HashKey("int", n)
- BOOLEAN b   -> HashKey("bool", b)
- STRING s    -> HashKey("str", utf-8 bytes of s)
- FLOAT f     -> HashKey("float", canonical IEEE-754 bits of f)

Float canonicalization folds -0.0 onto +0.0 and every NaN payload onto a
single quiet NaN. Keys are tagged by variant, so 1 and 1.0 (or 1 and true)
are distinct keys.
"""
from __future__ import annotations

import math
import struct
from dataclasses import dataclass
from typing import Optional, Union

from .types import MkBool, MkFloat, MkInteger, MkObject, MkString

CANONICAL_NAN_BITS = 0x7FF8000000000000

@dataclass(frozen=True)
class HashKey:
    kind: str
    value: Union[int, bool, bytes]

    def __repr__(self) -> str:
        return f"HashKey({self.kind}, {self.value!r})"

def float_bits(value: float) -> int:
    """Canonical bit pattern of a float for keying."""
    if math.isnan(value):
        return CANONICAL_NAN_BITS

    if value == 0.0:
        value = 0.0

    return struct.unpack(">Q", struct.pack(">d", value))[0]

def hash_key(value: MkObject) -> Optional[HashKey]:
    """Project value onto its HashKey, or None when the variant is not hashable."""
    match value:
        case MkBool(value=b):
            return HashKey("bool", b)
        case MkInteger(value=n):
            return HashKey("int", n)
        case MkString(value=s):
            return HashKey("str", s.encode("utf-8"))
        case MkFloat(value=f):
            return HashKey("float", float_bits(f))
        case _:
            return None

def is_hashable(value: MkObject) -> bool:
    return hash_key(value) is not None
