"""
Monkey Test Suite: Interpreter
==============================
End-to-end evaluation through `evaluate()`, which renders the result or
returns the error message, plus a few direct Interpreter checks.

Usage:
    python -m pytest tests/test_interpreter.py -v
"""
import sys
import unittest

from monkey.environment import Environment
from monkey.errors import EvaluationError, RecursionDepthError, UndefinedReferenceError
from monkey.interpreter import DEFAULT_MAX_DEPTH, Interpreter, evaluate, recursion_guard
from monkey.objects import NULL, Array, Function, Integer, String


class EvalCase(unittest.TestCase):

    def assertEvaluates(self, cases: list[tuple[str, str]]):
        for source, expected in cases:
            with self.subTest(source=source):
                self.assertEqual(evaluate(source), expected)


# ─────────────────────────────────────────────
#  Expressions
# ─────────────────────────────────────────────

class TestArithmetic(EvalCase):

    def test_integer_expressions(self):
        self.assertEvaluates([
            ("5", "5"),
            ("10", "10"),
            ("-5", "-5"),
            ("-10", "-10"),
            ("5 + 5 + 5 + 5 - 10", "10"),
            ("2 * 2 * 2 * 2 * 2", "32"),
            ("-50 + 100 + -50", "0"),
            ("5 * 2 + 10", "20"),
            ("5 + 2 * 10", "25"),
            ("20 + 2 * -10", "0"),
            ("50 / 2 * 2 + 10", "60"),
            ("2 * (5 + 10)", "30"),
            ("3 * 3 * 3 + 10", "37"),
            ("3 * (3 * 3) + 10", "37"),
            ("(5 + 10 * 2 + 15 / 3) * 2 + -10", "50"),
        ])

    def test_division_truncates_toward_zero(self):
        self.assertEvaluates([
            ("7 / 2", "3"),
            ("-7 / 2", "-3"),
            ("7 / -2", "-3"),
            ("-7 / -2", "3"),
        ])

    def test_division_by_zero(self):
        self.assertEqual(evaluate("1 / 0"), "division by zero")

    def test_integer_overflow(self):
        self.assertEqual(evaluate("9223372036854775807 + 1"),
                         "integer overflow: 9223372036854775807 + 1")
        self.assertEqual(evaluate("9223372036854775807 * 2"),
                         "integer overflow: 9223372036854775807 * 2")
        self.assertEqual(evaluate("-9223372036854775807 - 1"), "-9223372036854775808")

    def test_very_long_literal_is_reported(self):
        digits = "1" * 5000
        self.assertEqual(evaluate(digits), f"stmt error: illegal token: {digits} at L1:1")
        self.assertEqual(evaluate("0" * 5000 + "7 * 6"), "42")


class TestBooleans(EvalCase):

    def test_boolean_expressions(self):
        self.assertEvaluates([
            ("true", "true"),
            ("false", "false"),
            ("1 < 2", "true"),
            ("1 > 2", "false"),
            ("1 < 1", "false"),
            ("1 == 1", "true"),
            ("1 != 1", "false"),
            ("1 != 2", "true"),
            ("true == true", "true"),
            ("false == false", "true"),
            ("true == false", "false"),
            ("true != false", "true"),
            ("(1 < 2) == true", "true"),
            ("(1 > 2) == true", "false"),
        ])

    def test_bang_operator(self):
        self.assertEvaluates([
            ("!true", "false"),
            ("!false", "true"),
            ("!5", "false"),
            ("!!true", "true"),
            ("!!5", "true"),
            ('!""', "false"),
        ])

    def test_minus_requires_integer(self):
        self.assertEqual(evaluate("-true"), "unknown operator: -BOOLEAN")
        self.assertEqual(evaluate('-"a"'), "unknown operator: -STRING")


class TestStrings(EvalCase):

    def test_string_literal_renders_quoted(self):
        self.assertEqual(evaluate('"Hello World!"'), '"Hello World!"')

    def test_concatenation(self):
        self.assertEqual(evaluate('"Hello" + " " + "World!"'), '"Hello World!"')

    def test_only_plus_is_defined(self):
        self.assertEqual(evaluate('"a" - "b"'), "unknown operator: STRING - STRING")
        self.assertEqual(evaluate('"a" == "a"'), "unknown operator: STRING == STRING")


# ─────────────────────────────────────────────
#  Control flow
# ─────────────────────────────────────────────

class TestConditionals(EvalCase):

    def test_if_else(self):
        self.assertEvaluates([
            ("if (true) { 10 }", "10"),
            ("if (false) { 10 }", "null"),
            ("if (1) { 10 }", "10"),
            ("if (0) { 10 }", "10"),
            ("if (1 < 2) { 10 }", "10"),
            ("if (1 > 2) { 10 }", "null"),
            ("if (1 > 2) { 10 } else { 20 }", "20"),
            ("if (1 < 2) { 10 } else { 20 }", "10"),
        ])

    def test_null_is_falsy(self):
        self.assertEqual(evaluate("if (if (false) { 1 }) { 10 } else { 20 }"), "20")

    def test_empty_block_is_null(self):
        self.assertEqual(evaluate("if (true) { }"), "null")


class TestReturn(EvalCase):

    def test_return_statements(self):
        self.assertEvaluates([
            ("return 10;", "10"),
            ("return 10; 9;", "10"),
            ("return 2 * 5; 9;", "10"),
            ("9; return 2 * 5; 9;", "10"),
        ])

    def test_nested_block_return(self):
        source = """
        if (10 > 1) {
          if (10 > 1) {
            return 10;
          }
          return 1;
        }
        """
        self.assertEqual(evaluate(source), "10")

    def test_return_inside_function_stops_function_only(self):
        source = """
        let f = fn(x) { return x; x + 10; };
        f(10) + 1
        """
        self.assertEqual(evaluate(source), "11")

    def test_return_escapes_enclosing_expression(self):
        self.assertEqual(evaluate("let f = fn() { 1 + if (true) { return 5 } }; f()"), "5")
        self.assertEqual(evaluate("[1, if (true) { return 3 }, 2]"), "3")
        self.assertEqual(evaluate("let f = fn() { let a = if (true) { return 4 }; 9 }; f()"), "4")


# ─────────────────────────────────────────────
#  Bindings, functions, closures
# ─────────────────────────────────────────────

class TestBindings(EvalCase):

    def test_let_statements(self):
        self.assertEvaluates([
            ("let a = 5; a;", "5"),
            ("let a = 5 * 5; a;", "25"),
            ("let a = 5; let b = a; b;", "5"),
            ("let a = 5; let b = a; let c = a + b + 5; c;", "15"),
        ])

    def test_let_evaluates_to_null(self):
        self.assertEqual(evaluate("let a = 5;"), "null")

    def test_rebinding_replaces(self):
        self.assertEqual(evaluate("let a = 1; let a = a + 1; a"), "2")

    def test_undefined_identifier(self):
        self.assertEqual(evaluate("foobar"), "Uncaught ReferenceError: foobar is not defined")

    def test_block_with_let_gets_its_own_scope(self):
        self.assertEqual(evaluate("let x = 1; if (true) { let x = 2; x }"), "2")
        self.assertEqual(evaluate("let x = 1; if (true) { let x = 2; x }; x"), "1")
        self.assertEqual(evaluate("if (true) { let y = 2; }; y"),
                         "Uncaught ReferenceError: y is not defined")

    def test_persistent_environment(self):
        env = Environment()
        self.assertEqual(evaluate("let a = 5;", env), "null")
        self.assertEqual(evaluate("a * 2", env), "10")
        self.assertIsInstance(env.get("a"), Integer)


class TestFunctions(EvalCase):

    def test_function_object(self):
        self.assertEqual(evaluate("fn(x) { x + 2; };"), "fn(x){(x + 2)}")
        self.assertEqual(evaluate("fn(x, y) { x };"), "fn(x, y){x}")

    def test_function_application(self):
        self.assertEvaluates([
            ("let identity = fn(x) { x; }; identity(5);", "5"),
            ("let identity = fn(x) { return x; }; identity(5);", "5"),
            ("let double = fn(x) { x * 2; }; double(5);", "10"),
            ("let add = fn(x, y) { x + y; }; add(5, 5);", "10"),
            ("let add = fn(x, y) { x + y; }; add(5 + 5, add(5, 5));", "20"),
            ("fn(x) { x; }(5)", "5"),
        ])

    def test_empty_body_returns_null(self):
        self.assertEqual(evaluate("fn() {}()"), "null")

    def test_closures(self):
        source = """
        let newAdder = fn(x) { fn(y) { x + y }; };
        let addTwo = newAdder(2);
        addTwo(3);
        """
        self.assertEqual(evaluate(source), "5")

    def test_closure_sees_later_bindings(self):
        self.assertEqual(evaluate("let f = fn() { g() }; let g = fn() { 7 }; f()"), "7")

    def test_recursion(self):
        source = """
        let fact = fn(n) { if (n < 2) { 1 } else { n * fact(n - 1) } };
        fact(10)
        """
        self.assertEqual(evaluate(source), "3628800")

    def test_arity_mismatch(self):
        self.assertEqual(evaluate("fn(x) { x }(1, 2)"), "wrong number of arguments. got=2, want=1")
        self.assertEqual(evaluate("let f = fn(a, b) { a }; f(1)"),
                         "wrong number of arguments. got=1, want=2")

    def test_calling_a_non_function(self):
        self.assertEqual(evaluate("5(1)"), "not a function: INTEGER")
        self.assertEqual(evaluate('let s = "x"; s()'), "not a function: STRING")

    def test_functions_compare_by_identity(self):
        interp = Interpreter(output_fn=lambda s: None)
        f = interp.run("fn(x) { x }")
        g = interp.run("fn(x) { x }")
        self.assertIsInstance(f, Function)
        self.assertNotEqual(f, g)
        self.assertEqual(f, f)


# ─────────────────────────────────────────────
#  Arrays & hashes
# ─────────────────────────────────────────────

class TestArrays(EvalCase):

    def test_array_literal(self):
        self.assertEqual(evaluate("[1, 2 * 2, 3 + 3]"), "[1, 4, 6]")
        self.assertEqual(evaluate('[1, "two", [true]]'), '[1, "two", [true]]')
        self.assertEqual(evaluate("[]"), "[]")

    def test_index_expressions(self):
        self.assertEvaluates([
            ("[1, 2, 3][0]", "1"),
            ("[1, 2, 3][1]", "2"),
            ("[1, 2, 3][2]", "3"),
            ("let i = 0; [1][i];", "1"),
            ("[1, 2, 3][1 + 1];", "3"),
            ("let myArray = [1, 2, 3]; myArray[2];", "3"),
            ("let myArray = [1, 2, 3]; myArray[0] + myArray[1] + myArray[2];", "6"),
            ("let myArray = [1, 2, 3]; let i = myArray[0]; myArray[i]", "2"),
        ])

    def test_out_of_range_index_is_null(self):
        self.assertEqual(evaluate("[1, 2, 3][3]"), "null")
        self.assertEqual(evaluate("[1, 2, 3][-1]"), "null")
        self.assertEqual(evaluate("[][0]"), "null")

    def test_index_not_supported(self):
        self.assertEqual(evaluate("1[0]"), "index operator not supported: INTEGER")
        self.assertEqual(evaluate('"abc"[0]'), "index operator not supported: STRING")
        self.assertEqual(evaluate('[1]["a"]'), "index operator not supported: ARRAY")

    def test_hash_literals_do_not_evaluate(self):
        self.assertEqual(evaluate('{"one": 1}'), "hash literal not supported")
        self.assertEqual(evaluate("{}"), "hash literal not supported")


# ─────────────────────────────────────────────
#  Errors
# ─────────────────────────────────────────────

class TestErrors(EvalCase):

    def test_error_messages(self):
        self.assertEvaluates([
            ("5 + true;", "type mismatch: INTEGER + BOOLEAN"),
            ("5 + true; 5;", "type mismatch: INTEGER + BOOLEAN"),
            ('"a" + 1', "type mismatch: STRING + INTEGER"),
            ("true + false;", "unknown operator: BOOLEAN + BOOLEAN"),
            ("5; true + false; 5", "unknown operator: BOOLEAN + BOOLEAN"),
            ("if (10 > 1) { true + false; }", "unknown operator: BOOLEAN + BOOLEAN"),
            ("true < false", "unknown operator: BOOLEAN < BOOLEAN"),
            ("[1] + [2]", "unknown operator: ARRAY + ARRAY"),
        ])

    def test_nested_error_aborts(self):
        source = """
        if (10 > 1) {
          if (10 > 1) {
            return true + false;
          }
          return 1;
        }
        """
        self.assertEqual(evaluate(source), "unknown operator: BOOLEAN + BOOLEAN")

    def test_error_inside_argument_aborts_call(self):
        self.assertEqual(evaluate("let f = fn(x) { 1 }; f(missing)"),
                         "Uncaught ReferenceError: missing is not defined")

    def test_parse_errors_are_reported(self):
        self.assertTrue(evaluate("let = 1").startswith("stmt error: unexpected token"))

    def test_errors_raise_from_interpreter(self):
        interp = Interpreter(output_fn=lambda s: None)
        with self.assertRaises(UndefinedReferenceError) as ctx:
            interp.run("nope")
        self.assertEqual(ctx.exception.name, "nope")
        with self.assertRaises(EvaluationError):
            interp.run("1 / 0")


class TestCallDepth(EvalCase):

    def test_unbounded_recursion_is_stopped(self):
        self.assertEqual(evaluate("let f = fn(n) { f(n + 1) }; f(0)"),
                         f"maximum call depth exceeded ({DEFAULT_MAX_DEPTH})")

    def test_custom_limit(self):
        source = "let f = fn(n) { if (n == 0) { 0 } else { f(n - 1) } }; f({n})"
        self.assertEqual(evaluate(source.replace("{n}", "5"), max_depth=10), "0")
        self.assertEqual(evaluate(source.replace("{n}", "20"), max_depth=10),
                         "maximum call depth exceeded (10)")

    def test_deep_recursion_within_limit(self):
        source = "let f = fn(n) { if (n == 0) { 0 } else { f(n - 1) } }; f(250)"
        self.assertEqual(evaluate(source), "0")

    def test_interpreter_usable_after_depth_error(self):
        interp = Interpreter(output_fn=lambda s: None, max_depth=5)
        with self.assertRaises(RecursionDepthError):
            interp.run("let f = fn() { f() }; f()")
        self.assertEqual(interp.run("let g = fn(x) { x }; g(3)"), Integer(3))

    def test_nested_source_within_host_headroom(self):
        self.assertEqual(evaluate("-" * 1000 + "1"), "1")
        self.assertEqual(evaluate("!" * 999 + "true"), "false")
        self.assertEqual(evaluate("(" * 600 + "1" + ")" * 600), "1")

    def test_nesting_past_host_stack_is_reported(self):
        deep = "(" * 20000 + "1" + ")" * 20000
        self.assertEqual(evaluate(deep), "maximum recursion depth exceeded")
        self.assertEqual(evaluate("-" * 20000 + "1"), "maximum recursion depth exceeded")

    def test_host_recursion_limit_is_restored(self):
        before = sys.getrecursionlimit()
        evaluate("let f = fn(n) { if (n == 0) { 0 } else { f(n - 1) } }; f(50)")
        evaluate("(" * 20000 + "1" + ")" * 20000)
        self.assertEqual(sys.getrecursionlimit(), before)

    def test_recursion_guard_converts_recursion_error(self):
        def dive(n):
            return dive(n + 1)

        with self.assertRaises(RecursionDepthError) as ctx:
            with recursion_guard(max_depth=1):
                dive(0)
        self.assertEqual(str(ctx.exception), "maximum recursion depth exceeded")


# ─────────────────────────────────────────────
#  Output
# ─────────────────────────────────────────────

class TestOutput(unittest.TestCase):

    def test_puts_goes_to_output_fn_and_log(self):
        lines = []
        interp = Interpreter(output_fn=lines.append)
        result = interp.run('puts("hello", 1 + 1, [1]); 5')
        self.assertEqual(result, Integer(5))
        self.assertEqual(lines, ['"hello"', "2", "[1]"])
        self.assertEqual(interp.output_log, lines)

    def test_evaluate_output_fn(self):
        lines = []
        self.assertEqual(evaluate('puts("x")', output_fn=lines.append), "null")
        self.assertEqual(lines, ['"x"'])

    def test_run_returns_objects(self):
        interp = Interpreter(output_fn=lambda s: None)
        self.assertIs(interp.run("let a = 1;"), NULL)
        self.assertEqual(interp.run('"a" + "b"'), String("ab"))
        self.assertEqual(interp.run("[a, 2]"), Array((Integer(1), Integer(2))))


if __name__ == "__main__":
    unittest.main(verbosity=2)
