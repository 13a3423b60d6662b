"""
Monkey Object Model
===================
Runtime values produced by the interpreter. Each value knows its type
name (used verbatim in error messages) and renders itself canonically
with str().
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from .parser import BlockStatement, Identifier, quote

if TYPE_CHECKING:
    from .environment import Environment


class MonkeyObject:
    """Base class for all runtime values."""
    type_name: ClassVar[str] = ""

    def is_truthy(self) -> bool:
        return True


@dataclass(frozen=True)
class Integer(MonkeyObject):
    value: int
    type_name: ClassVar[str] = "INTEGER"

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Boolean(MonkeyObject):
    value: bool
    type_name: ClassVar[str] = "BOOLEAN"

    def is_truthy(self) -> bool:
        return self.value

    def __str__(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class String(MonkeyObject):
    value: str
    type_name: ClassVar[str] = "STRING"

    def __str__(self) -> str:
        return quote(self.value)


@dataclass(frozen=True)
class Null(MonkeyObject):
    type_name: ClassVar[str] = "NULL"

    def is_truthy(self) -> bool:
        return False

    def __str__(self) -> str:
        return "null"


@dataclass(frozen=True)
class Array(MonkeyObject):
    elements: tuple[MonkeyObject, ...] = ()
    type_name: ClassVar[str] = "ARRAY"

    def __str__(self) -> str:
        return "[" + ", ".join(str(e) for e in self.elements) + "]"


@dataclass(frozen=True)
class ReturnValue(MonkeyObject):
    """Marks that a return statement fired; unwrapped at the call boundary."""
    value: MonkeyObject
    type_name: ClassVar[str] = "RETURN_VALUE"

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True, eq=False)
class Function(MonkeyObject):
    """A closure: parameters and body plus the environment it was defined in.

    The environment is held by reference, so bindings added to it after the
    function was created are visible when the body runs.
    """
    parameters: tuple[Identifier, ...]
    body: BlockStatement
    env: Environment
    type_name: ClassVar[str] = "FUNCTION"

    def __str__(self) -> str:
        params = ", ".join(str(p) for p in self.parameters)
        return f"fn({params}){self.body}"


@dataclass(frozen=True)
class Builtin(MonkeyObject):
    """A native function, referenced by its registry name."""
    name: str
    type_name: ClassVar[str] = "BUILTIN"

    def __str__(self) -> str:
        return f"builtin function {self.name}"


TRUE = Boolean(True)
FALSE = Boolean(False)
NULL = Null()


def native_bool(value: bool) -> Boolean:
    return TRUE if value else FALSE
