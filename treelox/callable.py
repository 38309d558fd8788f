from typing import Any, Callable, List, TYPE_CHECKING

from treelox.ast import Function
from treelox.environment import Environment
from treelox.errors import ReturnSignal
from treelox.types import NIL, from_host

if TYPE_CHECKING:
    from treelox.interpreter import Interpreter


class LoxCallable:
    """Invocation contract shared by native and user-defined functions."""

    def arity(self) -> int:
        raise NotImplementedError

    def call(self, interpreter: 'Interpreter', arguments: List[Any]) -> Any:
        raise NotImplementedError


class NativeFunction(LoxCallable):
    """A function implemented by the host, e.g. ``clock``."""
    def __init__(self, name: str, arity: int, fn: Callable[..., Any]):
        self.name = name
        self._arity = arity
        self.fn = fn

    def arity(self) -> int:
        return self._arity

    def call(self, interpreter: 'Interpreter', arguments: List[Any]) -> Any:
        return from_host(self.fn(*arguments))

    def __repr__(self) -> str:
        return f"<native fn {self.name}>"

    __str__ = __repr__


class LoxFunction(LoxCallable):
    """A user-defined function together with the scope it was declared in."""
    def __init__(self, declaration: Function, closure: Environment):
        self.declaration = declaration
        self.closure = closure

    @property
    def name(self) -> str:
        return self.declaration.name.lexeme

    def arity(self) -> int:
        return len(self.declaration.params)

    def call(self, interpreter: 'Interpreter', arguments: List[Any]) -> Any:
        # Parameters live in a child of the closure, not of the caller's scope
        environment = Environment(self.closure)
        for param, argument in zip(self.declaration.params, arguments):
            environment.define(param.lexeme, argument)
        result = interpreter.execute_block(self.declaration.body, environment)
        if isinstance(result, ReturnSignal):
            return result.value
        return NIL

    def __repr__(self) -> str:
        return f"<fn {self.name}>"

    __str__ = __repr__
