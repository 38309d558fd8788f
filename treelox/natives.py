"""Native functions made available in every interpreter's global scope.

Natives are plain Python callables registered with the `native` decorator.
Arguments arrive as treelox values; results are normalised by
`treelox.types.from_host`, so returning an ``int`` or ``None`` is fine.
"""

import time
from typing import Any, Callable, Dict

from treelox.callable import NativeFunction
from treelox.environment import Environment

NATIVES: Dict[str, NativeFunction] = {}


def native(name: str, arity: int) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Register the decorated function as a native called `name`."""
    def register(fn: Callable[..., Any]) -> Callable[..., Any]:
        NATIVES[name] = NativeFunction(name, arity, fn)
        return fn
    return register


@native('clock', 0)
def clock() -> float:
    # seconds since the epoch
    return time.time()


def populate_globals(env: Environment) -> Environment:
    for name, function in NATIVES.items():
        env.define(name, function)
    return env
