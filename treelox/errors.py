from dataclasses import dataclass
from typing import Any, Optional

from treelox.tokens import Token


class LoxError(Exception):
    """Base class for errors reported to the user of a treelox program."""
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ParseError(LoxError):
    """Syntax error raised by the parser front end."""
    def __init__(self, message: str, line: int = 0, column: int = 0):
        super().__init__(message)
        self.line = line
        self.column = column

    def __str__(self) -> str:
        return f"[line {self.line}:{self.column}] Error: {self.message}"


class LoxRuntimeError(LoxError):
    """Exception type used to propagate treelox runtime errors."""
    kind = 'RuntimeError'

    def __init__(self, token: Optional[Token], message: str):
        super().__init__(message)
        self.token = token

    @property
    def line(self) -> int:
        return self.token.line if self.token is not None else 0

    def __str__(self) -> str:
        if self.token is None:
            return f"[line {self.line}] Error: {self.message}"
        return f"[line {self.line}] Error at '{self.token.lexeme}': {self.message}"


class LoxTypeError(LoxRuntimeError):
    """Operand, callee or arity mismatch."""
    kind = 'TypeError'


class UndefinedVariable(LoxRuntimeError):
    kind = 'UndefinedVariable'

    def __init__(self, name: Token):
        super().__init__(name, f"Undefined variable '{name.lexeme}'.")
        self.name = name.lexeme


@dataclass(frozen=True)
class ReturnSignal:
    """Result of executing a ``return`` statement.

    It is handed back through ``Interpreter.execute`` like an ordinary
    statement result rather than raised, so it can never be mistaken for an
    error by the code that catches ``LoxRuntimeError``.
    """
    value: Any
    keyword: Optional[Token] = None
