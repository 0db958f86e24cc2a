from typing import Any

from .tokens import Token


class LoxRuntimeError(Exception):
    """Exception type used to propagate Lox runtime errors."""
    def __init__(self, token: Token, message: str):
        super().__init__(message)
        self.token = token
        self.message = message


class ParseError(Exception):
    """Raised by the parser to unwind to the nearest declaration boundary."""
    pass


class ReturnSignal:
    """Result of executing a `return` statement; carries the returned value
    up to the innermost function call."""
    def __init__(self, value: Any):
        self.value = value


class BreakSignal:
    """Result of executing a `break` statement; consumed by the nearest loop."""
    pass


BREAK = BreakSignal()
