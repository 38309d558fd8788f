"""Source tokens carried by AST nodes for error attribution."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Token:
    type: str
    lexeme: str
    line: int
    column: int = 0

    def __str__(self) -> str:
        return self.lexeme
