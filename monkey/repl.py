"""
Monkey REPL
===========
Interactive Read-Eval-Print Loop. One interpreter lives for the whole
session, so `let` bindings persist from line to line.
"""
from typing import Callable

from .builtin import describe_all
from .errors import MonkeyError
from .interpreter import DEFAULT_MAX_DEPTH, Interpreter

PROMPT = ">> "

BANNER = r"""
  ┌──────────────────────────────────────────────┐
  │  Monkey — tree-walking interpreter           │
  │  Type 'help' for built-ins and commands      │
  │  Type 'exit' or Ctrl+D to quit               │
  └──────────────────────────────────────────────┘
"""

HELP_TEXT = """
  Built-in functions:
{builtins}

  Examples:
    let add = fn(a, b) {{ a + b }}; add(2, 3)
    let xs = push([1, 2], 3); len(xs)
    if (len("four") > 3) {{ "long" }} else {{ "short" }}

  Commands: help, env, log, clear, exit
"""


def run_repl(input_fn: Callable[[str], str] = input,
             print_fn: Callable[[str], None] = print,
             max_depth: int = DEFAULT_MAX_DEPTH) -> Interpreter:
    """Run the interactive Monkey REPL until exit or end of input."""
    print_fn(BANNER)

    interp = Interpreter(output_fn=print_fn, max_depth=max_depth)

    while True:
        try:
            line = input_fn(PROMPT)
        except (EOFError, KeyboardInterrupt):
            print_fn("Bye.")
            break

        line = line.strip()
        if not line:
            continue

        command = line.lower()
        if command in ("exit", "quit"):
            print_fn("Bye.")
            break

        if command == "help":
            print_fn(HELP_TEXT.format(builtins=describe_all()))
            continue

        if command == "env":
            names = interp.env.names()
            if names:
                print_fn("  ─── Bindings ───")
                for name in names:
                    print_fn(f"    {name} = {interp.env.get(name)}")
            else:
                print_fn("  (no bindings)")
            continue

        if command == "log":
            if interp.output_log:
                print_fn("  ─── Output Log ───")
                for entry in interp.output_log:
                    print_fn(f"    {entry}")
            else:
                print_fn("  (no output)")
            continue

        if command == "clear":
            interp.output_log.clear()
            interp.env.clear()
            print_fn("  State cleared.")
            continue

        try:
            result = interp.run(line)
            print_fn(str(result))
        except MonkeyError as e:
            print_fn(str(e))

    return interp
