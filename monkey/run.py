"""
Monkey File Runner
==================
Execute .monkey source files from the command line, or start the REPL
when no file is given.

Usage:
    python -m monkey                      # REPL
    python -m monkey program.monkey
    python -m monkey program.monkey --ast
    python -m monkey program.monkey --tokens
    python -m monkey program.monkey --max-depth 1000
"""
import argparse
import os
import sys
from typing import Callable

from .errors import MonkeyError, ParseError
from .interpreter import DEFAULT_MAX_DEPTH, Interpreter, recursion_guard
from .lexer import Lexer
from .parser import Parser
from .repl import run_repl

SOURCE_EXTENSION = ".monkey"


def _read_source(filepath: str) -> str:
    ext = os.path.splitext(filepath)[1]
    if ext != SOURCE_EXTENSION:
        raise ValueError(f"unsupported file extension: {ext or '(none)'}")
    with open(filepath, "r", encoding="utf-8") as f:
        return f.read()


def execute_file(filepath: str, max_depth: int = DEFAULT_MAX_DEPTH,
                 output_fn: Callable[[str], None] | None = None) -> str:
    """
    Run a .monkey file in a fresh environment.

    Returns the rendered result, or the error message if lexing, parsing
    or evaluation failed.
    """
    source = _read_source(filepath)
    interp = Interpreter(output_fn=output_fn, max_depth=max_depth)
    try:
        return str(interp.run(source))
    except MonkeyError as e:
        return str(e)


def run_file(filepath: str, show_tokens: bool = False, show_ast: bool = False,
             max_depth: int = DEFAULT_MAX_DEPTH,
             print_fn: Callable[[str], None] = print) -> int:
    """
    Execute a .monkey source file.

    Args:
        filepath: Path to the .monkey file
        show_tokens: Print the token stream instead of evaluating
        show_ast: Print the canonical rendering of the parsed program instead of evaluating
        max_depth: Interpreted call depth limit
        print_fn: Where output goes

    Returns:
        0 on success, 1 on error
    """
    if not os.path.exists(filepath):
        print_fn(f"Error: File not found: {filepath}")
        return 1

    try:
        source = _read_source(filepath)
    except ValueError as e:
        print_fn(f"Error: {e}")
        return 1

    tokens = Lexer(source).tokenize()
    if show_tokens:
        for token in tokens:
            print_fn(repr(token))
        return 0

    try:
        with recursion_guard(max_depth):
            program = Parser(tokens).parse_program()
            if show_ast:
                print_fn(str(program))
                return 0

        interp = Interpreter(output_fn=print_fn, max_depth=max_depth)
        print_fn(str(interp.eval_program(program)))
        return 0

    except ParseError as e:
        print_fn(f"Syntax Error: {e}")
        return 1
    except MonkeyError as e:
        print_fn(str(e))
        return 1


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="monkey",
        description="Run a Monkey program, or start the REPL when no file is given.",
    )
    parser.add_argument("file", nargs="?", help="path to a .monkey source file")
    parser.add_argument("--tokens", action="store_true",
                        help="print the token stream and exit")
    parser.add_argument("--ast", action="store_true",
                        help="print the parsed program in canonical form and exit")
    parser.add_argument("--max-depth", type=int, default=DEFAULT_MAX_DEPTH,
                        help=f"maximum interpreted call depth (default {DEFAULT_MAX_DEPTH})")
    return parser


def main(argv: list[str] | None = None):
    args = build_arg_parser().parse_args(argv)
    if args.file is None:
        run_repl(max_depth=args.max_depth)
        return
    exit_code = run_file(args.file, show_tokens=args.tokens, show_ast=args.ast,
                         max_depth=args.max_depth)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
