from typing import Any

from lango.tokens import Token


class LangoError(Exception):
    """Exception type used to propagate Lango runtime errors."""
    def __init__(self, token: Token, message: str):
        super().__init__(f"LangoError: {message} [line {token.line}]")
        self.token = token
        self.message = message


class ParseError(Exception):
    """Raised inside the parser to unwind to the nearest declaration."""
    pass


class ReturnSignal:
    """Outcome of a `return` statement, carried back to the call boundary."""
    def __init__(self, value: Any):
        self.value = value

    def __repr__(self) -> str:
        return f"ReturnSignal({self.value!r})"


class BreakSignal:
    """Outcome of a `break` statement, carried back to the enclosing loop."""
    def __repr__(self) -> str:
        return 'BreakSignal()'


BREAK = BreakSignal()
