from __future__ import annotations

from dataclasses import dataclass, field
from reprlib import recursive_repr
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Sequence, Tuple
from typing_extensions import TypeAlias

from .tree import BlockStatement, Identifier, quote_string

if TYPE_CHECKING:
    from .hashkey import HashKey
    from .parser_rd import ParseError

# ---------- Value Model (Mk*) ----------
#
# Value classes are declared with eq=False: no variant gets a derived
# equality or hash. Map keys compare through hashkey.HashKey instead.

@dataclass(eq=False)
class MkInteger:
    value: int
    def type_name(self) -> str:
        return "INTEGER"
    def inspect(self) -> str:
        return str(self.value)

@dataclass(eq=False)
class MkFloat:
    value: float
    def type_name(self) -> str:
        return "FLOAT"
    def inspect(self) -> str:
        return repr(self.value)

@dataclass(eq=False)
class MkBool:
    value: bool
    def type_name(self) -> str:
        return "BOOLEAN"
    def inspect(self) -> str:
        return "true" if self.value else "false"

@dataclass(eq=False)
class MkString:
    value: str
    def type_name(self) -> str:
        return "STRING"
    def inspect(self) -> str:
        return self.value

@dataclass(eq=False)
class MkNull:
    def type_name(self) -> str:
        return "NULL"
    def inspect(self) -> str:
        return "null"

@dataclass(eq=False)
class MkReturn:
    """Wraps the operand of `return` until the enclosing call unwraps it."""
    value: 'MkObject'
    def type_name(self) -> str:
        return "RETURN_VALUE"
    def inspect(self) -> str:
        return self.value.inspect()

@dataclass(eq=False)
class MkError:
    """A runtime fault, carried through the same channel as ordinary values."""
    message: str
    def type_name(self) -> str:
        return "ERROR"
    def inspect(self) -> str:
        return f"ERROR: {self.message}"

@dataclass(eq=False)
class MkArray:
    elements: List['MkObject']
    def type_name(self) -> str:
        return "ARRAY"
    # push(a, a) makes an array contain itself
    @recursive_repr("[...]")
    def inspect(self) -> str:
        return "[" + ", ".join(nested_inspect(x) for x in self.elements) + "]"

@dataclass(eq=False)
class HashPair:
    key: 'MkObject'
    value: 'MkObject'

@dataclass(eq=False)
class MkHash:
    pairs: Dict['HashKey', HashPair] = field(default_factory=dict)
    def type_name(self) -> str:
        return "HASH"
    @recursive_repr("{...}")
    def inspect(self) -> str:
        items = []

        for pair in self.pairs.values():
            items.append(f"{nested_inspect(pair.key)}: {nested_inspect(pair.value)}")

        return "{" + ", ".join(items) + "}"

@dataclass(eq=False)
class MkFn:
    parameters: Tuple[Identifier, ...]
    body: BlockStatement
    env: 'Environment'    # Closure environment
    def type_name(self) -> str:
        return "FUNCTION"
    def inspect(self) -> str:
        params = ", ".join(p.value for p in self.parameters)
        return f"fn({params}) {self.body.to_source_string()}"

BuiltinFn = Callable[[List['MkObject']], 'MkObject']

@dataclass(eq=False)
class MkBuiltin:
    name: str
    fn: BuiltinFn
    arity: Optional[int] = None    # None accepts any count
    def type_name(self) -> str:
        return "BUILTIN"
    def inspect(self) -> str:
        return f"builtin {self.name}"

MkObject: TypeAlias = (
    MkInteger
    | MkFloat
    | MkBool
    | MkString
    | MkNull
    | MkReturn
    | MkError
    | MkArray
    | MkHash
    | MkFn
    | MkBuiltin
)

NULL = MkNull()

def nested_inspect(value: MkObject) -> str:
    if isinstance(value, MkString):
        return quote_string(value.value)
    return value.inspect()

# ---------- Environment ----------

class Environment:
    """One lexical scope: bindings plus a link to the enclosing scope.

    Function values hold their defining Environment, so a scope lives as
    long as any closure or call frame still refers to it.
    """

    def __init__(self, outer: Optional['Environment'] = None):
        self.outer = outer
        self.store: Dict[str, MkObject] = {}

    def get(self, name: str) -> Optional[MkObject]:
        env: Optional[Environment] = self

        while env is not None:
            if name in env.store:
                return env.store[name]
            env = env.outer

        return None

    def define(self, name: str, val: MkObject) -> MkObject:
        self.store[name] = val
        return val

    def enclosed(self) -> 'Environment':
        return Environment(outer=self)

    def names(self) -> List[str]:
        seen: Dict[str, None] = {}
        env: Optional[Environment] = self

        while env is not None:
            for name in env.store:
                seen.setdefault(name, None)
            env = env.outer

        return sorted(seen)

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None

# ---------- Exceptions (host level only) ----------

class MonkeyError(Exception):
    pass

class MonkeyInternalError(MonkeyError):
    """The evaluator met something it has no rule for. Always a bug, never a script fault."""

class MonkeyParseError(MonkeyError):
    """Raised by the runner when a program has syntax errors; carries all of them."""

    def __init__(self, errors: Sequence['ParseError']):
        self.errors = list(errors)
        lines = "\n".join(f"  {err}" for err in self.errors)
        super().__init__(f"{len(self.errors)} syntax error(s):\n{lines}")
