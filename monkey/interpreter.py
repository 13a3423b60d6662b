"""
Monkey Interpreter
==================
Tree-walking interpreter that evaluates the AST produced by the Parser
against a chain of Environments.

  - Closures capture their defining scope by reference
  - `return` travels as a ReturnValue signal and is unwrapped at the
    nearest function call (or at the top of the program)
  - Errors are raised as EvaluationError subclasses and abort the whole
    evaluation; only the top-level surfaces catch them
"""
import sys
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from . import builtin
from .environment import Environment
from .errors import (
    ArityError, EvaluationError, IndexNotSupportedError, MonkeyError, NotCallableError,
    RecursionDepthError, TypeMismatchError, UndefinedReferenceError,
    UnknownOperatorError, UnknownPrefixOperatorError,
)
from .lexer import INT64_MAX, INT64_MIN
from .objects import (
    NULL, Array, Boolean, Builtin, Function, Integer, MonkeyObject, ReturnValue,
    String, native_bool,
)
from .operators import InfixOperator, PrefixOperator
from .parser import (
    ArrayLiteral, ASTNode, BlockStatement, BooleanLiteral, CallExpression, Expression,
    ExpressionStatement, FunctionLiteral, HashLiteral, Identifier, IfExpression,
    IndexExpression, InfixExpression, IntegerLiteral, LetStatement, PrefixExpression,
    Program, ReturnStatement, StringLiteral, parse,
)

DEFAULT_MAX_DEPTH = 300

# Host frames one interpreted call may use; sizes the recursion headroom
_FRAMES_PER_CALL = 50


@contextmanager
def recursion_guard(max_depth: int = DEFAULT_MAX_DEPTH) -> Iterator[None]:
    """
    Run a parse or evaluation with the host recursion limit raised to fit
    *max_depth* interpreted calls. Running out of host stack anyway (deeply
    nested source, for instance) surfaces as RecursionDepthError.
    """
    previous = sys.getrecursionlimit()
    frames = max_depth * _FRAMES_PER_CALL + 1000
    if frames > previous:
        sys.setrecursionlimit(frames)
    try:
        yield
    except RecursionError as err:
        raise RecursionDepthError("maximum recursion depth exceeded") from err
    finally:
        sys.setrecursionlimit(previous)


class Interpreter:
    """
    Tree-walking interpreter for Monkey programs.

    Usage:
        interp = Interpreter()
        result = interp.eval_program(parse(source))

    `interp.env` is the top-level scope and survives across calls, which
    is what the REPL relies on.
    """

    def __init__(self, output_fn: Callable[[str], None] | None = None,
                 max_depth: int = DEFAULT_MAX_DEPTH):
        self.env = Environment()
        self.output_log: list[str] = []
        self.output_fn = output_fn or (lambda s: print(s))
        self.max_depth = max_depth
        self._depth = 0

    def run(self, source: str) -> MonkeyObject:
        """Parse and evaluate *source* in the persistent top-level scope."""
        with recursion_guard(self.max_depth):
            return self.eval_program(parse(source))

    def eval_program(self, program: Program, env: Optional[Environment] = None) -> MonkeyObject:
        """Evaluate a whole program; the result never carries a ReturnValue."""
        self._depth = 0
        with recursion_guard(self.max_depth):
            return self.execute(program, self.env if env is None else env)

    def execute(self, node: ASTNode, env: Environment) -> MonkeyObject:
        """Evaluate an AST node and return the result."""
        method = f"_eval_{node.node_type.lower()}"
        evaluator = getattr(self, method, None)
        if evaluator is None:
            raise EvaluationError(f"unknown node type: {node.node_type}")
        return evaluator(node, env)

    def _emit(self, text: str):
        self.output_log.append(text)
        self.output_fn(text)

    # ─────────────────────────────────────────────────────────
    #  Program & Statements
    # ─────────────────────────────────────────────────────────

    def _eval_program(self, node: Program, env: Environment) -> MonkeyObject:
        result: MonkeyObject = NULL
        for stmt in node.statements:
            result = self.execute(stmt, env)
            if isinstance(result, ReturnValue):
                return result.value
        return result

    def _eval_blockstatement(self, node: BlockStatement, env: Environment) -> MonkeyObject:
        """Like a program, but a ReturnValue is passed up still wrapped."""
        result: MonkeyObject = NULL
        for stmt in node.statements:
            result = self.execute(stmt, env)
            if isinstance(result, ReturnValue):
                return result
        return result

    def _eval_expressionstatement(self, node: ExpressionStatement, env: Environment) -> MonkeyObject:
        return self.execute(node.expression, env)

    def _eval_letstatement(self, node: LetStatement, env: Environment) -> MonkeyObject:
        value = self.execute(node.value, env)
        if isinstance(value, ReturnValue):
            return value
        env.set(node.name.name, value)
        return NULL

    def _eval_returnstatement(self, node: ReturnStatement, env: Environment) -> MonkeyObject:
        value = self.execute(node.value, env)
        if isinstance(value, ReturnValue):
            return value
        return ReturnValue(value)

    # ─────────────────────────────────────────────────────────
    #  Literals & Identifiers
    # ─────────────────────────────────────────────────────────

    def _eval_integerliteral(self, node: IntegerLiteral, env: Environment) -> MonkeyObject:
        return Integer(node.value)

    def _eval_stringliteral(self, node: StringLiteral, env: Environment) -> MonkeyObject:
        return String(node.value)

    def _eval_booleanliteral(self, node: BooleanLiteral, env: Environment) -> MonkeyObject:
        return native_bool(node.value)

    def _eval_identifier(self, node: Identifier, env: Environment) -> MonkeyObject:
        value = env.get(node.name)
        if value is not None:
            return value
        if builtin.lookup(node.name) is not None:
            return Builtin(node.name)
        raise UndefinedReferenceError(node.name)

    def _eval_arrayliteral(self, node: ArrayLiteral, env: Environment) -> MonkeyObject:
        elements = self._eval_expressions(node.elements, env)
        if isinstance(elements, ReturnValue):
            return elements
        return Array(tuple(elements))

    def _eval_hashliteral(self, node: HashLiteral, env: Environment) -> MonkeyObject:
        raise EvaluationError("hash literal not supported")

    def _eval_functionliteral(self, node: FunctionLiteral, env: Environment) -> MonkeyObject:
        return Function(parameters=node.parameters, body=node.body, env=env)

    def _eval_expressions(self, nodes: tuple[Expression, ...],
                          env: Environment) -> list[MonkeyObject] | ReturnValue:
        """Evaluate left to right; a ReturnValue from any of them wins."""
        values = []
        for expr in nodes:
            value = self.execute(expr, env)
            if isinstance(value, ReturnValue):
                return value
            values.append(value)
        return values

    # ─────────────────────────────────────────────────────────
    #  Operators
    # ─────────────────────────────────────────────────────────

    def _eval_prefixexpression(self, node: PrefixExpression, env: Environment) -> MonkeyObject:
        operand = self.execute(node.operand, env)
        if isinstance(operand, ReturnValue):
            return operand

        match node.operator:
            case PrefixOperator.BANG:
                return native_bool(not operand.is_truthy())
            case PrefixOperator.MINUS:
                if not isinstance(operand, Integer):
                    raise UnknownPrefixOperatorError("-", operand.type_name)
                return self._checked_integer(-operand.value, f"-{operand.value}")

    def _eval_infixexpression(self, node: InfixExpression, env: Environment) -> MonkeyObject:
        left = self.execute(node.left, env)
        if isinstance(left, ReturnValue):
            return left
        right = self.execute(node.right, env)
        if isinstance(right, ReturnValue):
            return right

        op = node.operator
        if isinstance(left, Integer) and isinstance(right, Integer):
            return self._eval_integer_infix(op, left.value, right.value)
        if type(left) is not type(right):
            raise TypeMismatchError(left.type_name, op.value, right.type_name)
        if isinstance(left, Boolean):
            if op == InfixOperator.EQ:
                return native_bool(left.value == right.value)
            if op == InfixOperator.NOT_EQ:
                return native_bool(left.value != right.value)
        if isinstance(left, String) and op == InfixOperator.PLUS:
            return String(left.value + right.value)
        raise UnknownOperatorError(left.type_name, op.value, right.type_name)

    def _eval_integer_infix(self, op: InfixOperator, left: int, right: int) -> MonkeyObject:
        match op:
            case InfixOperator.PLUS:
                result = left + right
            case InfixOperator.MINUS:
                result = left - right
            case InfixOperator.ASTERISK:
                result = left * right
            case InfixOperator.SLASH:
                if right == 0:
                    raise EvaluationError("division by zero")
                # Truncate toward zero
                quotient = abs(left) // abs(right)
                result = quotient if (left < 0) == (right < 0) else -quotient
            case InfixOperator.LESS_THAN:
                return native_bool(left < right)
            case InfixOperator.GREATER_THAN:
                return native_bool(left > right)
            case InfixOperator.EQ:
                return native_bool(left == right)
            case InfixOperator.NOT_EQ:
                return native_bool(left != right)
        return self._checked_integer(result, f"{left} {op.value} {right}")

    @staticmethod
    def _checked_integer(value: int, expression: str) -> Integer:
        if not INT64_MIN <= value <= INT64_MAX:
            raise EvaluationError(f"integer overflow: {expression}")
        return Integer(value)

    # ─────────────────────────────────────────────────────────
    #  Control Flow
    # ─────────────────────────────────────────────────────────

    def _eval_ifexpression(self, node: IfExpression, env: Environment) -> MonkeyObject:
        condition = self.execute(node.condition, env)
        if isinstance(condition, ReturnValue):
            return condition

        if condition.is_truthy():
            return self._eval_branch(node.consequence, env)
        if node.alternative is not None:
            return self._eval_branch(node.alternative, env)
        return NULL

    def _eval_branch(self, block: BlockStatement, env: Environment) -> MonkeyObject:
        """Run an if/else block; blocks that bind names get their own scope."""
        scope = env.enclosed() if block.declares_bindings() else env
        return self.execute(block, scope)

    # ─────────────────────────────────────────────────────────
    #  Calls & Indexing
    # ─────────────────────────────────────────────────────────

    def _eval_callexpression(self, node: CallExpression, env: Environment) -> MonkeyObject:
        function = self.execute(node.function, env)
        if isinstance(function, ReturnValue):
            return function
        args = self._eval_expressions(node.arguments, env)
        if isinstance(args, ReturnValue):
            return args
        return self.apply_function(function, args)

    def apply_function(self, function: MonkeyObject, args: list[MonkeyObject]) -> MonkeyObject:
        """Invoke a Builtin or Function with already-evaluated arguments."""
        if isinstance(function, Builtin):
            info = builtin.lookup(function.name)
            if info is None:
                raise EvaluationError(f"unknown builtin: {function.name}")
            return info.call(args, self._emit)

        if not isinstance(function, Function):
            raise NotCallableError(function.type_name)

        if len(args) != len(function.parameters):
            raise ArityError(got=len(args), want=len(function.parameters))
        if self._depth >= self.max_depth:
            raise RecursionDepthError(f"maximum call depth exceeded ({self.max_depth})")

        scope = function.env.enclosed()
        for param, arg in zip(function.parameters, args):
            scope.set(param.name, arg)

        self._depth += 1
        try:
            result = self.execute(function.body, scope)
        finally:
            self._depth -= 1

        if isinstance(result, ReturnValue):
            return result.value
        return result

    def _eval_indexexpression(self, node: IndexExpression, env: Environment) -> MonkeyObject:
        target = self.execute(node.target, env)
        if isinstance(target, ReturnValue):
            return target
        index = self.execute(node.index, env)
        if isinstance(index, ReturnValue):
            return index

        if isinstance(target, Array) and isinstance(index, Integer):
            if 0 <= index.value < len(target.elements):
                return target.elements[index.value]
            return NULL
        raise IndexNotSupportedError(target.type_name)


def evaluate(source: str, env: Optional[Environment] = None, *,
             output_fn: Callable[[str], None] | None = None,
             max_depth: int = DEFAULT_MAX_DEPTH) -> str:
    """
    Lex, parse and evaluate *source*, returning the rendered result or the
    error message. Pass the same *env* across calls to keep bindings.
    """
    interp = Interpreter(output_fn=output_fn, max_depth=max_depth)
    if env is not None:
        interp.env = env
    try:
        return str(interp.run(source))
    except MonkeyError as err:
        return str(err)
