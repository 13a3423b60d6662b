# Monkey: a small expression-oriented language
"""
Monkey: a dynamically-typed, expression-oriented language.
Lexer, Pratt parser and tree-walking interpreter with closures,
strings, arrays and a handful of built-in functions.
"""
from .lexer import Lexer, Token, TokenType
from .operators import Precedence, PrefixOperator, InfixOperator
from .parser import (
    Parser, parse, ASTNode, Program, Statement, Expression,
    LetStatement, ReturnStatement, ExpressionStatement, BlockStatement,
    Identifier, IntegerLiteral, StringLiteral, BooleanLiteral,
    PrefixExpression, InfixExpression, IfExpression, FunctionLiteral,
    CallExpression, ArrayLiteral, IndexExpression, HashLiteral,
)
from .objects import (
    MonkeyObject, Integer, Boolean, String, Null, Array, ReturnValue,
    Function, Builtin, TRUE, FALSE, NULL,
)
from .environment import Environment
from .builtin import BUILTINS, BuiltinInfo
from .interpreter import Interpreter, evaluate, recursion_guard, DEFAULT_MAX_DEPTH
from .errors import (
    MonkeyError, ParseError, UnexpectedTokenError, EvaluationError,
    TypeMismatchError, UnknownOperatorError, UnknownPrefixOperatorError,
    UndefinedReferenceError, ArityError, BuiltinError, IndexNotSupportedError,
    NotCallableError, RecursionDepthError,
)

__version__ = "0.1.0"
__all__ = [
    "Lexer", "Token", "TokenType",
    "Precedence", "PrefixOperator", "InfixOperator",
    "Parser", "parse", "ASTNode", "Program", "Statement", "Expression",
    "LetStatement", "ReturnStatement", "ExpressionStatement", "BlockStatement",
    "Identifier", "IntegerLiteral", "StringLiteral", "BooleanLiteral",
    "PrefixExpression", "InfixExpression", "IfExpression", "FunctionLiteral",
    "CallExpression", "ArrayLiteral", "IndexExpression", "HashLiteral",
    "MonkeyObject", "Integer", "Boolean", "String", "Null", "Array",
    "ReturnValue", "Function", "Builtin", "TRUE", "FALSE", "NULL",
    "Environment",
    "BUILTINS", "BuiltinInfo",
    "Interpreter", "evaluate", "recursion_guard", "DEFAULT_MAX_DEPTH",
    "MonkeyError", "ParseError", "UnexpectedTokenError", "EvaluationError",
    "TypeMismatchError", "UnknownOperatorError", "UnknownPrefixOperatorError",
    "UndefinedReferenceError", "ArityError", "BuiltinError",
    "IndexNotSupportedError", "NotCallableError", "RecursionDepthError",
]
