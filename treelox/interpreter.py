"""Tree-walking interpreter for treelox.

The interpreter executes statement nodes and evaluates expression nodes
produced by `treelox.parser` (or loaded through `treelox.ast_json`). It
keeps a single *active scope*: blocks and function calls swap in a child
`Environment` for their duration and restore the previous one on every
exit path.

Statement execution returns a tagged result:

* ``None`` for statements that complete normally,
* the computed value for expression statements,
* a `ReturnSignal` when a ``return`` statement is unwinding towards the
  nearest function call.

Runtime errors are raised as `LoxRuntimeError` subclasses and caught by
`Interpreter.interpret`, which reports them to the runtime's error sink and
moves on to the next top-level statement.
"""

from __future__ import annotations

import math
import sys
from contextlib import contextmanager
from typing import Any, Iterator, List, Optional, Sequence, TextIO, Tuple

from .ast import (
    Expr, Stmt, Literal, Grouping, Unary, Binary, Logical, Variable, Assign,
    Call, Expression, Print, Var, Block, If, While, Function, Return,
)
from .callable import LoxCallable, LoxFunction, NativeFunction
from .environment import Environment
from .errors import LoxRuntimeError, LoxTypeError, ReturnSignal
from .natives import populate_globals
from .parser import parse_program
from .runtime import Runtime
from .tokens import Token
from .types import NIL, is_equal, is_number, is_string, is_truthy, stringify

# Each Lox call nests about half a dozen Python frames.
RECURSION_LIMIT = 20000


class Interpreter:
    """Core interpreter that executes treelox ASTs."""
    def __init__(self, runtime: Optional[Runtime] = None, debug_level: int = 0,
                 debug_file: str = 'debug.txt', output: Optional[TextIO] = None):
        self.runtime = runtime if runtime is not None else Runtime()
        self.globals = self.runtime.globals
        self.environment = self.globals
        self.output = output
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w') if debug_level > 0 else None
        if sys.getrecursionlimit() < RECURSION_LIMIT:
            sys.setrecursionlimit(RECURSION_LIMIT)
        populate_globals(self.globals)

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg)

    def close(self):
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    # Public API
    def interpret(self, statements: Sequence[Stmt]) -> Tuple[str, Optional[LoxRuntimeError]]:
        """Execute top-level statements in order.

        Returns the display form of the last statement's result and the
        first runtime error encountered, if any. A failing statement is
        reported and abandoned; the remaining statements still run.
        """
        text = 'nil'
        first_error: Optional[LoxRuntimeError] = None
        for stmt in statements:
            if self.debug_level >= 1:
                self.debug(f"execute {type(stmt).__name__}")
            try:
                result = self.execute(stmt)
                if isinstance(result, ReturnSignal):
                    raise LoxRuntimeError(result.keyword, "Can't return from top-level code.")
            except LoxRuntimeError as err:
                if self.debug_level >= 1:
                    self.debug(f"runtime error: {err.kind}: {err.message} (line {err.line})")
                self.runtime.runtime_error(err)
                if first_error is None:
                    first_error = err
                text = 'nil'
                continue
            text = stringify(result) if result is not None else 'nil'
        return text, first_error

    @contextmanager
    def scope(self, environment: Environment) -> Iterator[Environment]:
        """Make `environment` the active scope until the block exits."""
        previous = self.environment
        self.environment = environment
        if self.debug_level >= 3:
            self.debug(f"enter scope depth {environment.depth()}")
        try:
            yield environment
        finally:
            self.environment = previous
            if self.debug_level >= 3:
                self.debug(f"leave scope depth {environment.depth()}")

    def execute_block(self, statements: Sequence[Stmt], environment: Environment) -> Optional[ReturnSignal]:
        with self.scope(environment):
            for stmt in statements:
                result = self.execute(stmt)
                # propagate return signals
                if isinstance(result, ReturnSignal):
                    return result
        return None

    def execute(self, node: Stmt) -> Any:
        if isinstance(node, Expression):
            return self.evaluate(node.expression)
        if isinstance(node, Print):
            value = self.evaluate(node.expression)
            print(stringify(value), file=self.output)
            return None
        if isinstance(node, Var):
            value = self.evaluate(node.initializer) if node.initializer is not None else NIL
            self.environment.define(node.name.lexeme, value)
            if self.debug_level >= 2:
                self.debug(f"declare {node.name.lexeme} = {stringify(value)}")
            return None
        if isinstance(node, Block):
            return self.execute_block(node.statements, Environment(self.environment))
        if isinstance(node, If):
            cond = self.evaluate(node.condition)
            truthy = is_truthy(cond)
            if self.debug_level >= 3:
                self.debug(f"if condition {stringify(cond)} -> {truthy}")
            if truthy:
                return self.execute(node.then_branch)
            if node.else_branch is not None:
                return self.execute(node.else_branch)
            return None
        if isinstance(node, While):
            while is_truthy(self.evaluate(node.condition)):
                if self.debug_level >= 3:
                    self.debug("while condition true")
                result = self.execute(node.body)
                if isinstance(result, ReturnSignal):
                    return result
            return None
        if isinstance(node, Function):
            function = LoxFunction(node, self.environment)
            self.environment.define(node.name.lexeme, function)
            if self.debug_level >= 2:
                self.debug(f"define function {node.name.lexeme}/{function.arity()}")
            return None
        if isinstance(node, Return):
            value = self.evaluate(node.value) if node.value is not None else NIL
            return ReturnSignal(value, node.keyword)
        raise NotImplementedError(f"execute: unexpected node type {type(node)}")

    def evaluate(self, node: Expr) -> Any:
        if isinstance(node, Literal):
            return node.value
        if isinstance(node, Grouping):
            return self.evaluate(node.expression)
        if isinstance(node, Variable):
            return self.environment.get(node.name)
        if isinstance(node, Assign):
            value = self.evaluate(node.value)
            self.environment.assign(node.name, value)
            return value
        if isinstance(node, Logical):
            left = self.evaluate(node.left)
            if node.operator.type == 'OR':
                if is_truthy(left):
                    return left
            elif not is_truthy(left):
                return left
            return self.evaluate(node.right)
        if isinstance(node, Unary):
            right = self.evaluate(node.right)
            return self.apply_unary_op(node.operator, right)
        if isinstance(node, Binary):
            left = self.evaluate(node.left)
            right = self.evaluate(node.right)
            return self.apply_binary_op(node.operator, left, right)
        if isinstance(node, Call):
            callee = self.evaluate(node.callee)
            arguments = [self.evaluate(arg) for arg in node.arguments]
            return self.call_function(callee, arguments, node.paren)
        raise NotImplementedError(f"evaluate: unexpected node type {type(node)}")

    def call_function(self, callee: Any, arguments: List[Any], paren: Token) -> Any:
        if not isinstance(callee, LoxCallable):
            raise LoxTypeError(paren, "Can only call functions and classes.")
        if len(arguments) != callee.arity():
            raise LoxTypeError(paren, f"Expected {callee.arity()} arguments but got {len(arguments)}.")
        if self.debug_level >= 2:
            self.debug(f"call {callee} with {len(arguments)} argument(s)")
        if isinstance(callee, NativeFunction):
            return self.call_native(callee, arguments, paren)
        return callee.call(self, arguments)

    def call_native(self, callee: NativeFunction, arguments: List[Any], paren: Token) -> Any:
        try:
            return callee.call(self, arguments)
        except (LoxRuntimeError, RecursionError):
            raise
        except TypeError as err:
            raise LoxTypeError(paren, f"Native function '{callee.name}' failed: {err}") from err
        except Exception as err:
            raise LoxRuntimeError(paren, f"Native function '{callee.name}' failed: {err}") from err

    def apply_unary_op(self, operator: Token, right: Any) -> Any:
        if operator.type == 'BANG':
            return not is_truthy(right)
        if operator.type == 'MINUS':
            check_number_operand(operator, right)
            return -right
        raise LoxRuntimeError(operator, f"Unknown unary operator '{operator.lexeme}'.")

    def apply_binary_op(self, operator: Token, left: Any, right: Any) -> Any:
        op = operator.type
        if op == 'PLUS':
            if is_number(left) and is_number(right):
                return left + right
            if is_string(left) and is_string(right):
                return left + right
            raise LoxTypeError(operator, "Operands must be two numbers or two strings.")
        if op == 'EQUAL_EQUAL':
            return is_equal(left, right)
        if op == 'BANG_EQUAL':
            return not is_equal(left, right)
        check_number_operands(operator, left, right)
        if op == 'MINUS':
            return left - right
        if op == 'STAR':
            return left * right
        if op == 'SLASH':
            return divide(left, right)
        if op == 'GREATER':
            return left > right
        if op == 'GREATER_EQUAL':
            return left >= right
        if op == 'LESS':
            return left < right
        if op == 'LESS_EQUAL':
            return left <= right
        raise LoxRuntimeError(operator, f"Unknown binary operator '{operator.lexeme}'.")


def check_number_operand(operator: Token, operand: Any):
    if not is_number(operand):
        raise LoxTypeError(operator, "Operand must be a number.")


def check_number_operands(operator: Token, left: Any, right: Any):
    if not (is_number(left) and is_number(right)):
        raise LoxTypeError(operator, "Operands must be a number.")


def divide(left: float, right: float) -> float:
    """IEEE 754 division; Python raises on a zero divisor instead."""
    if right == 0.0:
        if left == 0.0 or math.isnan(left):
            return float('nan')
        # the sign of a zero divisor matters: 1 / -0 is -inf
        sign = math.copysign(1.0, left) * math.copysign(1.0, right)
        return math.copysign(math.inf, sign)
    return left / right


def run_program(source: str, **kwargs) -> Tuple[str, Optional[LoxRuntimeError]]:
    """Convenience function to parse and run a treelox program from source."""
    statements = parse_program(source)
    interpreter = Interpreter(**kwargs)
    try:
        return interpreter.interpret(statements)
    finally:
        interpreter.close()
