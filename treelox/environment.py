from typing import Any, Dict, Optional

from treelox.errors import UndefinedVariable
from treelox.tokens import Token


class Environment:
    """A scope mapping names to values, linked to its enclosing scope."""
    def __init__(self, enclosing: Optional['Environment'] = None):
        self.enclosing = enclosing
        self.values: Dict[str, Any] = {}

    def define(self, name: str, value: Any):
        # Redefinition in the same scope overwrites; outer bindings are shadowed
        self.values[name] = value

    def get(self, name: Token) -> Any:
        if name.lexeme in self.values:
            return self.values[name.lexeme]
        if self.enclosing is not None:
            return self.enclosing.get(name)
        raise UndefinedVariable(name)

    def assign(self, name: Token, value: Any):
        # Assignment never creates a binding; it updates the nearest existing one
        if name.lexeme in self.values:
            self.values[name.lexeme] = value
        elif self.enclosing is not None:
            self.enclosing.assign(name, value)
        else:
            raise UndefinedVariable(name)

    def depth(self) -> int:
        """Number of scopes between this one and the global scope."""
        count = 0
        env = self.enclosing
        while env is not None:
            count += 1
            env = env.enclosing
        return count

    def __contains__(self, name: str) -> bool:
        return name in self.values

    def __repr__(self) -> str:
        return f"<Environment depth={self.depth()} names={sorted(self.values)}>"
