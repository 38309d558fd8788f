# treelox package
# A tree-walking interpreter for a small Lox-family scripting language.
from .errors import LoxError, LoxRuntimeError, LoxTypeError, ParseError, UndefinedVariable
from .interpreter import Interpreter, run_program
from .parser import parse_program
from .runtime import Runtime

__all__ = [
    'Interpreter',
    'LoxError',
    'LoxRuntimeError',
    'LoxTypeError',
    'ParseError',
    'Runtime',
    'UndefinedVariable',
    'parse_program',
    'run_program',
]
