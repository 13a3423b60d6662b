"""
Monkey Parser
=============
Pratt (precedence-climbing) parser that builds an Abstract Syntax Tree
from the token stream produced by the Lexer.

Statements are parsed by recursive descent; expressions by looking up a
prefix handler for the current token and then folding in infix handlers
for as long as the next token binds tighter than the caller's bound.

Every node renders back to canonical source with str(): infix and
prefix expressions are fully parenthesized, so the rendering doubles as
a readable dump of how the parser grouped things.

The first unmet expectation aborts the whole parse; there is no error
recovery.
"""
from dataclasses import dataclass
from typing import Callable, ClassVar, Optional

from .errors import ParseError, UnexpectedTokenError
from .lexer import ESCAPES, Lexer, Token, TokenType
from .operators import (
    INFIX_OPERATORS, PREFIX_OPERATORS, InfixOperator, Precedence, PrefixOperator,
    precedence_of,
)

_UNESCAPES = {v: "\\" + k for k, v in ESCAPES.items()}


def quote(text: str) -> str:
    """Render text as a double-quoted Monkey string literal."""
    return '"' + "".join(_UNESCAPES.get(ch, ch) for ch in text) + '"'


# ─────────────────────────────────────────────────────────────
#  AST Node Types
# ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ASTNode:
    """Base class for all AST nodes."""
    node_type: ClassVar[str] = ""


@dataclass(frozen=True)
class Statement(ASTNode):
    pass


@dataclass(frozen=True)
class Expression(ASTNode):
    pass


@dataclass(frozen=True)
class Program(ASTNode):
    """Root node containing all top-level statements."""
    statements: tuple[Statement, ...] = ()
    node_type: ClassVar[str] = "Program"

    def __str__(self) -> str:
        return ";\n".join(str(s) for s in self.statements)


@dataclass(frozen=True)
class Identifier(Expression):
    name: str
    node_type: ClassVar[str] = "Identifier"

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class LetStatement(Statement):
    """let <name> = <value>"""
    name: Identifier
    value: Expression
    node_type: ClassVar[str] = "LetStatement"

    def __str__(self) -> str:
        return f"let {self.name} = {self.value}"


@dataclass(frozen=True)
class ReturnStatement(Statement):
    value: Expression
    node_type: ClassVar[str] = "ReturnStatement"

    def __str__(self) -> str:
        return f"return {self.value}"


@dataclass(frozen=True)
class ExpressionStatement(Statement):
    expression: Expression
    node_type: ClassVar[str] = "ExpressionStatement"

    def __str__(self) -> str:
        return str(self.expression)


@dataclass(frozen=True)
class BlockStatement(Statement):
    """A braced statement sequence; body of if/else and function literals."""
    statements: tuple[Statement, ...] = ()
    node_type: ClassVar[str] = "BlockStatement"

    def __str__(self) -> str:
        return "{" + "; ".join(str(s) for s in self.statements) + "}"

    def declares_bindings(self) -> bool:
        return any(isinstance(s, LetStatement) for s in self.statements)


@dataclass(frozen=True)
class IntegerLiteral(Expression):
    value: int
    node_type: ClassVar[str] = "IntegerLiteral"

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class StringLiteral(Expression):
    value: str
    node_type: ClassVar[str] = "StringLiteral"

    def __str__(self) -> str:
        return quote(self.value)


@dataclass(frozen=True)
class BooleanLiteral(Expression):
    value: bool
    node_type: ClassVar[str] = "BooleanLiteral"

    def __str__(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class PrefixExpression(Expression):
    operator: PrefixOperator
    operand: Expression
    node_type: ClassVar[str] = "PrefixExpression"

    def __str__(self) -> str:
        return f"({self.operator.value}{self.operand})"


@dataclass(frozen=True)
class InfixExpression(Expression):
    operator: InfixOperator
    left: Expression
    right: Expression
    node_type: ClassVar[str] = "InfixExpression"

    def __str__(self) -> str:
        return f"({self.left} {self.operator.value} {self.right})"


@dataclass(frozen=True)
class IfExpression(Expression):
    condition: Expression
    consequence: BlockStatement
    alternative: Optional[BlockStatement] = None
    node_type: ClassVar[str] = "IfExpression"

    def __str__(self) -> str:
        text = f"if({self.condition}){self.consequence}"
        if self.alternative is not None:
            text += f"else{self.alternative}"
        return text


@dataclass(frozen=True)
class FunctionLiteral(Expression):
    """fn(<params>) { <body> }"""
    parameters: tuple[Identifier, ...]
    body: BlockStatement
    node_type: ClassVar[str] = "FunctionLiteral"

    def __str__(self) -> str:
        params = ",".join(str(p) for p in self.parameters)
        return f"fn({params}){self.body}"


@dataclass(frozen=True)
class CallExpression(Expression):
    function: Expression
    arguments: tuple[Expression, ...] = ()
    node_type: ClassVar[str] = "CallExpression"

    def __str__(self) -> str:
        args = ", ".join(str(a) for a in self.arguments)
        return f"{self.function}({args})"


@dataclass(frozen=True)
class ArrayLiteral(Expression):
    elements: tuple[Expression, ...] = ()
    node_type: ClassVar[str] = "ArrayLiteral"

    def __str__(self) -> str:
        return "[" + ", ".join(str(e) for e in self.elements) + "]"


@dataclass(frozen=True)
class IndexExpression(Expression):
    target: Expression
    index: Expression
    node_type: ClassVar[str] = "IndexExpression"

    def __str__(self) -> str:
        return f"({self.target}[{self.index}])"


@dataclass(frozen=True)
class HashLiteral(Expression):
    """{<key>: <value>, ...}: parsed and rendered, not evaluated."""
    pairs: tuple[tuple[Expression, Expression], ...] = ()
    node_type: ClassVar[str] = "HashLiteral"

    def __str__(self) -> str:
        return "{" + ", ".join(f"{k}: {v}" for k, v in self.pairs) + "}"


# ─────────────────────────────────────────────────────────────
#  Parser
# ─────────────────────────────────────────────────────────────

class Parser:
    """
    Pratt parser for Monkey source.

    Usage:
        parser = Parser(Lexer(source).tokenize())
        program = parser.parse_program()
    """

    def __init__(self, tokens: list[Token]):
        if not tokens or tokens[-1].type != TokenType.EOF:
            line, col = (tokens[-1].line, tokens[-1].col) if tokens else (1, 1)
            tokens = [*tokens, Token(TokenType.EOF, "", line, col)]
        self.tokens = tokens
        self.pos = 0

        self._prefix_fns: dict[TokenType, Callable[[], Expression]] = {
            TokenType.IDENT: self._parse_identifier,
            TokenType.INT: self._parse_integer_literal,
            TokenType.STRING: self._parse_string_literal,
            TokenType.TRUE: self._parse_boolean_literal,
            TokenType.FALSE: self._parse_boolean_literal,
            TokenType.BANG: self._parse_prefix_expression,
            TokenType.MINUS: self._parse_prefix_expression,
            TokenType.LPAREN: self._parse_grouped_expression,
            TokenType.IF: self._parse_if_expression,
            TokenType.FUNCTION: self._parse_function_literal,
            TokenType.LBRACKET: self._parse_array_literal,
            TokenType.LBRACE: self._parse_hash_literal,
        }
        self._infix_fns: dict[TokenType, Callable[[Expression], Expression]] = {
            token_type: self._parse_infix_expression for token_type in INFIX_OPERATORS
        }
        self._infix_fns[TokenType.LPAREN] = self._parse_call_expression
        self._infix_fns[TokenType.LBRACKET] = self._parse_index_expression

    def _current(self) -> Token:
        return self.tokens[self.pos]

    def _peek(self) -> Token:
        idx = self.pos + 1
        if idx >= len(self.tokens):
            return self.tokens[-1]  # EOF
        return self.tokens[idx]

    def _advance(self) -> Token:
        token = self.tokens[self.pos]
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        return token

    def _expect_peek(self, token_type: TokenType) -> Token:
        """Step onto the next token if it has the required type, else fail."""
        token = self._peek()
        if token.type != token_type:
            raise UnexpectedTokenError(token_type, token)
        self._advance()
        return token

    def _skip_optional_semicolon(self):
        if self._peek().type == TokenType.SEMICOLON:
            self._advance()

    # ─────────────────────────────────────────────────────────
    #  Statements
    # ─────────────────────────────────────────────────────────

    def parse_program(self) -> Program:
        """Parse the token stream into a Program."""
        statements = []
        while self._current().type != TokenType.EOF:
            try:
                statements.append(self._parse_statement())
            except ParseError as err:
                raise ParseError(f"stmt error: {err}") from err
            self._advance()
        return Program(statements=tuple(statements))

    def _parse_statement(self) -> Statement:
        token_type = self._current().type
        if token_type == TokenType.LET:
            return self._parse_let_statement()
        if token_type == TokenType.RETURN:
            return self._parse_return_statement()
        return self._parse_expression_statement()

    def _parse_let_statement(self) -> LetStatement:
        name_token = self._expect_peek(TokenType.IDENT)
        self._expect_peek(TokenType.ASSIGN)
        self._advance()
        value = self._parse_expression(Precedence.LOWEST)
        self._skip_optional_semicolon()
        return LetStatement(name=Identifier(name_token.value), value=value)

    def _parse_return_statement(self) -> ReturnStatement:
        self._advance()  # consume 'return'
        value = self._parse_expression(Precedence.LOWEST)
        self._skip_optional_semicolon()
        return ReturnStatement(value=value)

    def _parse_expression_statement(self) -> ExpressionStatement:
        expression = self._parse_expression(Precedence.LOWEST)
        self._skip_optional_semicolon()
        return ExpressionStatement(expression=expression)

    def _parse_block_statement(self) -> BlockStatement:
        """Parse statements after '{' up to the matching '}' or end of input."""
        self._advance()  # consume {
        statements = []
        while self._current().type not in (TokenType.RBRACE, TokenType.EOF):
            statements.append(self._parse_statement())
            self._advance()
        return BlockStatement(statements=tuple(statements))

    # ─────────────────────────────────────────────────────────
    #  Expressions
    # ─────────────────────────────────────────────────────────

    def _parse_expression(self, precedence: Precedence) -> Expression:
        token = self._current()
        prefix = self._prefix_fns.get(token.type)
        if prefix is None:
            if token.type == TokenType.ILLEGAL:
                raise ParseError(f"illegal token: {token.value} at L{token.line}:{token.col}")
            raise ParseError(
                f"no prefix parse function for {token.describe()} at L{token.line}:{token.col}"
            )
        left = prefix()

        while (self._peek().type != TokenType.SEMICOLON
               and precedence < precedence_of(self._peek().type)):
            infix = self._infix_fns.get(self._peek().type)
            if infix is None:
                return left
            self._advance()
            left = infix(left)

        return left

    def _parse_identifier(self) -> Identifier:
        return Identifier(self._current().value)

    def _parse_integer_literal(self) -> IntegerLiteral:
        return IntegerLiteral(int(self._current().value))

    def _parse_string_literal(self) -> StringLiteral:
        return StringLiteral(self._current().value)

    def _parse_boolean_literal(self) -> BooleanLiteral:
        return BooleanLiteral(self._current().type == TokenType.TRUE)

    def _parse_prefix_expression(self) -> PrefixExpression:
        operator = PREFIX_OPERATORS[self._current().type]
        self._advance()
        operand = self._parse_expression(Precedence.PREFIX)
        return PrefixExpression(operator=operator, operand=operand)

    def _parse_infix_expression(self, left: Expression) -> InfixExpression:
        token = self._current()
        operator = INFIX_OPERATORS[token.type]
        precedence = precedence_of(token.type)
        self._advance()
        right = self._parse_expression(precedence)
        return InfixExpression(operator=operator, left=left, right=right)

    def _parse_grouped_expression(self) -> Expression:
        self._advance()  # consume (
        expression = self._parse_expression(Precedence.LOWEST)
        self._expect_peek(TokenType.RPAREN)
        return expression

    def _parse_if_expression(self) -> IfExpression:
        self._expect_peek(TokenType.LPAREN)
        self._advance()
        condition = self._parse_expression(Precedence.LOWEST)
        self._expect_peek(TokenType.RPAREN)

        self._expect_peek(TokenType.LBRACE)
        consequence = self._parse_block_statement()

        alternative = None
        if self._peek().type == TokenType.ELSE:
            self._advance()
            self._expect_peek(TokenType.LBRACE)
            alternative = self._parse_block_statement()

        return IfExpression(condition=condition, consequence=consequence, alternative=alternative)

    def _parse_function_literal(self) -> FunctionLiteral:
        self._expect_peek(TokenType.LPAREN)
        parameters = self._parse_function_parameters()
        self._expect_peek(TokenType.LBRACE)
        body = self._parse_block_statement()
        return FunctionLiteral(parameters=parameters, body=body)

    def _parse_function_parameters(self) -> tuple[Identifier, ...]:
        if self._peek().type == TokenType.RPAREN:
            self._advance()
            return ()

        params = [Identifier(self._expect_peek(TokenType.IDENT).value)]
        while self._peek().type == TokenType.COMMA:
            self._advance()
            params.append(Identifier(self._expect_peek(TokenType.IDENT).value))

        self._expect_peek(TokenType.RPAREN)
        return tuple(params)

    def _parse_call_expression(self, function: Expression) -> CallExpression:
        arguments = self._parse_expression_list(TokenType.RPAREN)
        return CallExpression(function=function, arguments=arguments)

    def _parse_array_literal(self) -> ArrayLiteral:
        return ArrayLiteral(elements=self._parse_expression_list(TokenType.RBRACKET))

    def _parse_index_expression(self, target: Expression) -> IndexExpression:
        self._advance()  # consume [
        index = self._parse_expression(Precedence.LOWEST)
        self._expect_peek(TokenType.RBRACKET)
        return IndexExpression(target=target, index=index)

    def _parse_expression_list(self, end: TokenType) -> tuple[Expression, ...]:
        """Parse a comma-separated expression list closed by *end*."""
        if self._peek().type == end:
            self._advance()
            return ()

        self._advance()
        items = [self._parse_expression(Precedence.LOWEST)]
        while self._peek().type == TokenType.COMMA:
            self._advance()
            self._advance()
            items.append(self._parse_expression(Precedence.LOWEST))

        self._expect_peek(end)
        return tuple(items)

    def _parse_hash_literal(self) -> HashLiteral:
        pairs = []
        while self._peek().type != TokenType.RBRACE:
            self._advance()
            key = self._parse_expression(Precedence.LOWEST)
            self._expect_peek(TokenType.COLON)
            self._advance()
            value = self._parse_expression(Precedence.LOWEST)
            pairs.append((key, value))
            if self._peek().type != TokenType.RBRACE:
                self._expect_peek(TokenType.COMMA)

        self._expect_peek(TokenType.RBRACE)
        return HashLiteral(pairs=tuple(pairs))


def parse(source: str) -> Program:
    """Lex and parse *source* in one step."""
    return Parser(Lexer(source).tokenize()).parse_program()
