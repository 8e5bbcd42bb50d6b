"""Error reporting shared by every stage of the Lango pipeline.

Compile-time problems (scanning, parsing, resolving) are reported through
`ErrorReporter.error` and only set a flag; the caller decides whether to go
on to the next stage. Runtime errors arrive through `runtime_error` once per
`Interpreter.interpret` call.
"""

from __future__ import annotations

import sys
from typing import TextIO, Union

from .tokens import Token, TokenType
from .errors import LangoError


class ErrorReporter:
    """Formats diagnostics and remembers whether any were emitted."""
    def __init__(self, stream: TextIO | None = None):
        self.stream = stream
        self.had_error = False
        self.had_runtime_error = False

    def _write(self, text: str):
        # Resolve stderr lazily so pytest's capture sees the output.
        print(text, file=self.stream if self.stream is not None else sys.stderr)

    def error(self, where: Union[int, Token], message: str):
        if isinstance(where, Token):
            if where.type == TokenType.EOF:
                self.report(where.line, ' at end', message)
            else:
                self.report(where.line, f" at '{where.lexeme}'", message)
        else:
            self.report(where, '', message)

    def report(self, line: int, where: str, message: str):
        self._write(f"[line {line}] Error{where}: {message}")
        self.had_error = True

    def runtime_error(self, err: LangoError):
        self._write(f"{err.message}\n[line {err.token.line}]")
        self.had_runtime_error = True

    def reset(self):
        """Clear the compile-time flag between interactive submissions."""
        self.had_error = False
