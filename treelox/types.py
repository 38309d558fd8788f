"""Runtime value model for treelox.

Every runtime value is one of a closed set of variants:

    Number    Python ``float``
    String    Python ``str``
    Boolean   Python ``bool``
    Nil       the ``NIL`` singleton
    Callable  an instance of ``treelox.callable.LoxCallable``

Python's own ``None`` is deliberately not a value; it means "absent" in the
AST (no initializer, no else branch) and in the interpreter's statement
results. The helpers below implement truthiness, equality and the display
form over this set and refuse anything outside it.
"""

from __future__ import annotations

import math
from typing import Any


class Nil:
    """Marker type for the Lox ``nil`` value."""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return 'nil'


NIL = Nil()


def is_number(value: Any) -> bool:
    # bool is a subclass of int, never of float, so it cannot sneak in here
    return isinstance(value, float)


def is_string(value: Any) -> bool:
    return isinstance(value, str)


def is_callable(value: Any) -> bool:
    from .callable import LoxCallable
    return isinstance(value, LoxCallable)


def type_name(value: Any) -> str:
    """Return the name of the variant a runtime value belongs to.

    Raises TypeError for Python objects that are not treelox values.
    """
    if value is NIL:
        return 'Nil'
    if isinstance(value, bool):
        return 'Boolean'
    if isinstance(value, float):
        return 'Number'
    if isinstance(value, str):
        return 'String'
    if is_callable(value):
        return 'Callable'
    raise TypeError(f"not a treelox value: {value!r} ({type(value).__name__})")


def is_truthy(value: Any) -> bool:
    """Only ``nil`` and ``false`` are falsy."""
    if value is NIL:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(a: Any, b: Any) -> bool:
    """Structural equality for primitives, identity for callables.

    Values of different variants are never equal, so ``true == 1`` and
    ``1 == "1"`` are both false.
    """
    kind = type_name(a)
    if kind != type_name(b):
        return False
    if kind == 'Nil':
        return True
    if kind == 'Callable':
        return a is b
    return a == b


def format_number(value: float) -> str:
    if math.isnan(value):
        return 'NaN'
    if math.isinf(value):
        return '+Inf' if value > 0 else '-Inf'
    if value.is_integer() and abs(value) < 1e21:
        text = str(int(value))
        if value == 0 and math.copysign(1.0, value) < 0:
            return '-0'
        return text
    return repr(value)


def stringify(value: Any) -> str:
    """Convert a value to the form ``print`` writes."""
    kind = type_name(value)
    if kind == 'Nil':
        return 'nil'
    if kind == 'Boolean':
        return 'true' if value else 'false'
    if kind == 'Number':
        return format_number(value)
    if kind == 'String':
        return value
    return str(value)


def from_host(value: Any) -> Any:
    """Normalise a host Python value returned by a native function.

    ``None`` becomes ``NIL`` and integers become floats; values that are
    already treelox values pass through unchanged.
    """
    if value is None:
        return NIL
    if isinstance(value, int) and not isinstance(value, bool):
        return float(value)
    type_name(value)  # raises TypeError for foreign objects
    return value
