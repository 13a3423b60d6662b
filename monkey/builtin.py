"""
Monkey Built-in Registry
========================
The fixed, ordered table of native functions. Values of type Builtin
carry only a name; the interpreter resolves it here at call time.

Every native receives the evaluated argument list plus the output
callback of the calling interpreter, and returns a MonkeyObject or
raises an EvaluationError.
"""
from dataclasses import dataclass
from typing import Callable, Optional

from .errors import ArityError, BuiltinError
from .objects import NULL, Array, Integer, MonkeyObject, String

OutputFn = Callable[[str], None]
NativeFn = Callable[[list[MonkeyObject], OutputFn], MonkeyObject]


@dataclass(frozen=True)
class BuiltinInfo:
    """
    A native function entry.

      - name:        The identifier programs call it by
      - fn:          The implementation
      - arity:       Required argument count, or None for variadic
      - description: One line for REPL help
    """
    name: str
    fn: NativeFn
    arity: Optional[int]
    description: str

    def call(self, args: list[MonkeyObject], output_fn: OutputFn) -> MonkeyObject:
        if self.arity is not None and len(args) != self.arity:
            raise ArityError(got=len(args), want=self.arity)
        return self.fn(args, output_fn)


def _unsupported(name: str, arg: MonkeyObject) -> BuiltinError:
    return BuiltinError(f"arg to `{name}` not supported, got {arg.type_name}")


def _non_empty_array(name: str, arg: MonkeyObject) -> Array:
    if not isinstance(arg, Array):
        raise _unsupported(name, arg)
    if not arg.elements:
        raise BuiltinError("this array is empty")
    return arg


def _len(args, output_fn):
    arg = args[0]
    if isinstance(arg, String):
        return Integer(len(arg.value))
    if isinstance(arg, Array):
        return Integer(len(arg.elements))
    raise _unsupported("len", arg)


def _first(args, output_fn):
    return _non_empty_array("first", args[0]).elements[0]


def _last(args, output_fn):
    return _non_empty_array("last", args[0]).elements[-1]


def _rest(args, output_fn):
    return Array(_non_empty_array("rest", args[0]).elements[1:])


def _push(args, output_fn):
    target, value = args
    if not isinstance(target, Array):
        raise _unsupported("push", target)
    return Array(target.elements + (value,))


def _puts(args, output_fn):
    for arg in args:
        output_fn(str(arg))
    return NULL


# ─────────────────────────────────────────────────────────────
#  THE BUILT-IN REGISTRY
# ─────────────────────────────────────────────────────────────

BUILTINS: dict[str, BuiltinInfo] = {
    "len": BuiltinInfo(
        name="len", fn=_len, arity=1,
        description="Length of a string (characters) or an array (elements).",
    ),
    "first": BuiltinInfo(
        name="first", fn=_first, arity=1,
        description="First element of a non-empty array.",
    ),
    "last": BuiltinInfo(
        name="last", fn=_last, arity=1,
        description="Last element of a non-empty array.",
    ),
    "rest": BuiltinInfo(
        name="rest", fn=_rest, arity=1,
        description="New array holding all but the first element.",
    ),
    "push": BuiltinInfo(
        name="push", fn=_push, arity=2,
        description="New array with the value appended.",
    ),
    "puts": BuiltinInfo(
        name="puts", fn=_puts, arity=None,
        description="Print each argument; returns null.",
    ),
}


def lookup(name: str) -> BuiltinInfo | None:
    """Look up a native function by name."""
    return BUILTINS.get(name)


def describe_all() -> str:
    """Return a formatted table of all built-ins for REPL help."""
    lines = ["  name    arity  description", "  ─────── ────── ─────────────────────────────────────"]
    for info in BUILTINS.values():
        arity = "any" if info.arity is None else str(info.arity)
        lines.append(f"  {info.name.ljust(7)} {arity.ljust(6)} {info.description}")
    return "\n".join(lines)
