"""CLI entry point for the Lango interpreter.

Usage:
    python -m lango [-v|-vv|-vvv] [script]
    python -m lango [-v...] --emit-ast <script>

Options:
  -v            Increase debug verbosity (can be repeated)
  --emit-ast    Parse the given script and print its AST as JSON

With a script the program is run once; compile errors exit with status 65
and runtime errors with status 70. Without a script an interactive prompt is
started; errors on one line do not end the session.

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

from .ast_json import program_to_obj
from .interpreter import Interpreter, parse_program, run_source
from .reporter import ErrorReporter

EXIT_COMPILE_ERROR = 65
EXIT_RUNTIME_ERROR = 70
EXIT_NO_INPUT = 66


def read_source(path: str) -> Optional[str]:
    program_file = Path(path)
    if not program_file.exists():
        print(f"Error: file {program_file} not found", file=sys.stderr)
        return None
    with open(program_file, 'r', encoding='utf-8') as f:
        return f.read()


def run_file(path: str, debug_level: int = 0) -> int:
    source = read_source(path)
    if source is None:
        return EXIT_NO_INPUT
    interpreter = Interpreter(debug_level=debug_level)
    try:
        run_source(source, interpreter)
    finally:
        interpreter.close()
    if interpreter.reporter.had_error:
        return EXIT_COMPILE_ERROR
    if interpreter.reporter.had_runtime_error:
        return EXIT_RUNTIME_ERROR
    return 0


def run_prompt(debug_level: int = 0) -> int:
    interpreter = Interpreter(debug_level=debug_level)
    try:
        while True:
            try:
                line = input('> ')
            except EOFError:
                print()
                break
            run_source(line, interpreter)
            # A mistake on one line must not end the session.
            interpreter.reporter.reset()
    finally:
        interpreter.close()
    return 0


def emit_ast(path: str) -> int:
    source = read_source(path)
    if source is None:
        return EXIT_NO_INPUT
    reporter = ErrorReporter()
    statements = parse_program(source, reporter)
    if reporter.had_error:
        return EXIT_COMPILE_ERROR
    json.dump(program_to_obj(statements), sys.stdout, ensure_ascii=False, indent=2)
    print()
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog='lango', description="Lango language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--emit-ast', metavar='LANGO_FILE', help='print the AST of the given file as JSON')
    parser.add_argument('script', nargs='?', help='Lango program file to execute (omit for a prompt)')
    args = parser.parse_args(argv)

    if args.emit_ast:
        return emit_ast(args.emit_ast)
    if args.script:
        return run_file(args.script, debug_level=args.v)
    return run_prompt(debug_level=args.v)


if __name__ == '__main__':
    sys.exit(main())
