"""
Monkey Operator Model
=====================
Prefix and infix operator tags plus the precedence ladder the parser
climbs. Operators carry their source spelling as their value, so
rendering an operator is just ``op.value``.
"""
from enum import Enum, IntEnum

from .lexer import TokenType


class Precedence(IntEnum):
    """Binding power, weakest first."""
    LOWEST      = 1
    EQUALS      = 2   # == !=
    RELATIONAL  = 3   # < >
    SUM         = 4   # + -
    PRODUCT     = 5   # * /
    PREFIX      = 6   # -x !x
    CALL        = 7   # f(x)
    INDEX       = 8   # a[i]


class PrefixOperator(Enum):
    MINUS = "-"
    BANG  = "!"


class InfixOperator(Enum):
    PLUS         = "+"
    MINUS        = "-"
    ASTERISK     = "*"
    SLASH        = "/"
    LESS_THAN    = "<"
    GREATER_THAN = ">"
    EQ           = "=="
    NOT_EQ       = "!="


PREFIX_OPERATORS: dict[TokenType, PrefixOperator] = {
    TokenType.MINUS: PrefixOperator.MINUS,
    TokenType.BANG: PrefixOperator.BANG,
}

INFIX_OPERATORS: dict[TokenType, InfixOperator] = {
    TokenType.PLUS: InfixOperator.PLUS,
    TokenType.MINUS: InfixOperator.MINUS,
    TokenType.ASTERISK: InfixOperator.ASTERISK,
    TokenType.SLASH: InfixOperator.SLASH,
    TokenType.LT: InfixOperator.LESS_THAN,
    TokenType.GT: InfixOperator.GREATER_THAN,
    TokenType.EQ: InfixOperator.EQ,
    TokenType.NOT_EQ: InfixOperator.NOT_EQ,
}

PRECEDENCES: dict[TokenType, Precedence] = {
    TokenType.EQ: Precedence.EQUALS,
    TokenType.NOT_EQ: Precedence.EQUALS,
    TokenType.LT: Precedence.RELATIONAL,
    TokenType.GT: Precedence.RELATIONAL,
    TokenType.PLUS: Precedence.SUM,
    TokenType.MINUS: Precedence.SUM,
    TokenType.ASTERISK: Precedence.PRODUCT,
    TokenType.SLASH: Precedence.PRODUCT,
    TokenType.LPAREN: Precedence.CALL,
    TokenType.LBRACKET: Precedence.INDEX,
}


def precedence_of(token_type: TokenType) -> Precedence:
    """Precedence of a token in infix position; LOWEST if it is not an operator."""
    return PRECEDENCES.get(token_type, Precedence.LOWEST)
