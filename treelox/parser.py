"""Parser for treelox source code.

The grammar below is fed to a Lark LALR parser. The resulting parse tree is
turned into `treelox.ast` nodes by `ASTTransformer`. Operators are named
terminals so that their tokens, with line and column, survive into the AST
for runtime error reporting.

``for`` loops have no node of their own: the transformer desugars

    for (init; cond; incr) body

into

    { init; while (cond) { body; incr; } }

The `parse_program` function is the public entry point and returns the list
of top-level statements.
"""

from __future__ import annotations

from typing import List

from lark import Lark, Token as LarkToken, Transformer, v_args
from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, UnexpectedToken, VisitError

from .ast import (
    Stmt, Literal, Grouping, Unary, Binary, Logical, Variable, Assign,
    Call, Expression, Print, Var, Block, If, While, Function, Return,
)
from .errors import ParseError
from .tokens import Token
from .types import NIL

MAX_ARGUMENTS = 255


LOX_GRAMMAR = r"""
    program: declaration*

    ?declaration: fun_decl
                | var_decl
                | statement

    fun_decl: "fun" IDENTIFIER "(" [parameters] ")" block
    parameters: IDENTIFIER ("," IDENTIFIER)*
    var_decl: "var" IDENTIFIER ["=" expression] ";"

    ?statement: expr_stmt
              | for_stmt
              | if_stmt
              | print_stmt
              | return_stmt
              | while_stmt
              | block

    expr_stmt: expression ";"
    for_stmt: "for" "(" (var_decl | expr_stmt | empty) [expression] ";" [expression] ")" statement
    empty: ";"
    if_stmt: "if" "(" expression ")" statement ["else" statement]
    print_stmt: "print" expression ";"
    return_stmt: RETURN [expression] ";"
    while_stmt: "while" "(" expression ")" statement
    block: "{" declaration* "}"

    // Expressions, lowest precedence first
    ?expression: assignment
    ?assignment: IDENTIFIER "=" assignment -> assign
               | logic_or
    ?logic_or: logic_and (OR logic_and)*
    ?logic_and: equality (AND equality)*
    ?equality: comparison ((BANG_EQUAL | EQUAL_EQUAL) comparison)*
    ?comparison: term ((GREATER | GREATER_EQUAL | LESS | LESS_EQUAL) term)*
    ?term: factor ((MINUS | PLUS) factor)*
    ?factor: unary ((SLASH | STAR) unary)*
    ?unary: (BANG | MINUS) unary
          | call
    ?call: primary
         | call "(" [arguments] ")" -> call_expr
    arguments: expression ("," expression)*
    ?primary: "true" -> true
            | "false" -> false
            | "nil" -> nil
            | NUMBER -> number
            | STRING -> string
            | IDENTIFIER -> variable
            | "(" expression ")" -> grouping

    // Tokens
    RETURN: "return"
    AND: "and"
    OR: "or"
    BANG_EQUAL: "!="
    EQUAL_EQUAL: "=="
    GREATER_EQUAL: ">="
    GREATER: ">"
    LESS_EQUAL: "<="
    LESS: "<"
    MINUS: "-"
    PLUS: "+"
    SLASH: "/"
    STAR: "*"
    BANG: "!"
    IDENTIFIER: /[A-Za-z_][A-Za-z0-9_]*/
    NUMBER: /[0-9]+(\.[0-9]+)?/
    STRING: /"[^"]*"/

    COMMENT: /\/\/[^\n]*/
    %ignore COMMENT
    %import common.WS
    %ignore WS
"""


LOX_PARSER = Lark(
    LOX_GRAMMAR,
    start='program',
    parser='lalr',
    lexer='basic',
    propagate_positions=True,
    maybe_placeholders=True,
)


def to_token(token: LarkToken) -> Token:
    """Convert a Lark token into a treelox Token."""
    return Token(token.type, str(token), token.line or 0, token.column or 0)


def fold_binary(items, node_type):
    # items pattern: expr (op expr)*; rebuilt left-associatively
    left = items[0]
    i = 1
    while i < len(items):
        left = node_type(left, to_token(items[i]), items[i + 1])
        i += 2
    return left


class ASTTransformer(Transformer):
    """Transforms the raw parse tree into treelox AST nodes."""

    def program(self, items) -> List[Stmt]:
        return list(items)

    # Declarations

    def fun_decl(self, items):
        name, params, body = items
        params = params or []
        if len(params) > MAX_ARGUMENTS:
            raise ParseError(f"Can't have more than {MAX_ARGUMENTS} parameters.", name.line, name.column)
        return Function(to_token(name), tuple(to_token(p) for p in params), body.statements)

    def parameters(self, items):
        return list(items)

    def var_decl(self, items):
        name, initializer = items
        return Var(to_token(name), initializer)

    # Statements

    def expr_stmt(self, items):
        return Expression(items[0])

    def empty(self, items):
        return None

    def for_stmt(self, items):
        initializer, condition, increment, body = items
        if increment is not None:
            body = Block((body, Expression(increment)))
        if condition is None:
            condition = Literal(True)
        loop: Stmt = While(condition, body)
        if initializer is not None:
            loop = Block((initializer, loop))
        return loop

    def if_stmt(self, items):
        condition, then_branch, else_branch = items
        return If(condition, then_branch, else_branch)

    def print_stmt(self, items):
        return Print(items[0])

    def return_stmt(self, items):
        keyword, value = items
        return Return(to_token(keyword), value)

    def while_stmt(self, items):
        condition, body = items
        return While(condition, body)

    def block(self, items):
        return Block(tuple(items))

    # Expressions

    def assign(self, items):
        name, value = items
        return Assign(to_token(name), value)

    def logic_or(self, items):
        return fold_binary(items, Logical)

    def logic_and(self, items):
        return fold_binary(items, Logical)

    def equality(self, items):
        return fold_binary(items, Binary)

    def comparison(self, items):
        return fold_binary(items, Binary)

    def term(self, items):
        return fold_binary(items, Binary)

    def factor(self, items):
        return fold_binary(items, Binary)

    def unary(self, items):
        operator, right = items
        return Unary(to_token(operator), right)

    @v_args(meta=True)
    def call_expr(self, meta, items):
        callee, arguments = items
        arguments = arguments or []
        # meta spans the whole call; its end is just past the closing paren
        paren = Token('RIGHT_PAREN', ')', meta.end_line, max(meta.end_column - 1, 0))
        if len(arguments) > MAX_ARGUMENTS:
            raise ParseError(f"Can't have more than {MAX_ARGUMENTS} arguments.", paren.line, paren.column)
        return Call(callee, paren, tuple(arguments))

    def arguments(self, items):
        return list(items)

    def true(self, items):
        return Literal(True)

    def false(self, items):
        return Literal(False)

    def nil(self, items):
        return Literal(NIL)

    def number(self, items):
        return Literal(float(items[0]))

    def string(self, items):
        # strip the quotes; Lox strings have no escape sequences
        return Literal(str(items[0])[1:-1])

    def variable(self, items):
        return Variable(to_token(items[0]))

    def grouping(self, items):
        return Grouping(items[0])


def describe(err: UnexpectedInput) -> str:
    if isinstance(err, UnexpectedCharacters):
        return f"Unexpected character {err.char!r}."
    if isinstance(err, UnexpectedEOF):
        return "Unexpected end of input."
    if isinstance(err, UnexpectedToken):
        if err.token.type == '$END':
            return "Unexpected end of input."
        expected = ', '.join(sorted(err.expected))
        return f"Unexpected '{err.token}'; expected one of: {expected}."
    return str(err)


def parse_program(source: str) -> List[Stmt]:
    """Parse treelox source code into a list of statements.

    Syntax errors are raised as `ParseError` carrying the line and column
    of the offending input.
    """
    try:
        tree = LOX_PARSER.parse(source)
        return ASTTransformer().transform(tree)
    except UnexpectedInput as err:
        raise ParseError(describe(err), err.line, err.column) from err
    except VisitError as err:
        if isinstance(err.orig_exc, ParseError):
            raise err.orig_exc from None
        raise

