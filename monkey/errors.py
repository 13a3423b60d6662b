"""
Monkey Errors
=============
One hierarchy for everything the pipeline can report. Lexical problems
are not errors (they travel as ILLEGAL tokens); syntactic problems raise
ParseError; everything that goes wrong while evaluating raises an
EvaluationError subclass. str(error) is the user-facing message.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .lexer import Token, TokenType


class MonkeyError(Exception):
    """Base class for all Monkey errors."""


# ─────────────────────────────────────────────────────────────
#  Syntactic
# ─────────────────────────────────────────────────────────────

class ParseError(MonkeyError):
    """The token stream does not form a valid program."""


class UnexpectedTokenError(ParseError):
    """A specific token was required and something else was found."""

    def __init__(self, expected: TokenType, actual: Token):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"unexpected token: expected {expected.label}, got {actual.describe()} "
            f"at L{actual.line}:{actual.col}"
        )


# ─────────────────────────────────────────────────────────────
#  Runtime
# ─────────────────────────────────────────────────────────────

class EvaluationError(MonkeyError):
    """Runtime error during evaluation; also the catch-all custom-message error."""


class TypeMismatchError(EvaluationError):
    def __init__(self, left: str, operator: str, right: str):
        super().__init__(f"type mismatch: {left} {operator} {right}")


class UnknownOperatorError(EvaluationError):
    def __init__(self, left: str, operator: str, right: str):
        super().__init__(f"unknown operator: {left} {operator} {right}")


class UnknownPrefixOperatorError(EvaluationError):
    def __init__(self, operator: str, operand: str):
        super().__init__(f"unknown operator: {operator}{operand}")


class UndefinedReferenceError(EvaluationError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Uncaught ReferenceError: {name} is not defined")


class ArityError(EvaluationError):
    def __init__(self, got: int, want: int):
        self.got = got
        self.want = want
        super().__init__(f"wrong number of arguments. got={got}, want={want}")


class BuiltinError(EvaluationError):
    """A native function rejected its arguments."""


class IndexNotSupportedError(EvaluationError):
    def __init__(self, target: str):
        super().__init__(f"index operator not supported: {target}")


class NotCallableError(EvaluationError):
    def __init__(self, type_name: str):
        super().__init__(f"not a function: {type_name}")


class RecursionDepthError(EvaluationError):
    """Interpreted recursion went deeper than the configured limit."""
