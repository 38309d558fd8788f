"""CLI entry point for the treelox interpreter.

Usage:
    python -m treelox [-v|-vv|-vvv] [program_file]
    python -m treelox [-v...] --emit-ast <program_file>
    python -m treelox [-v...] --ast <ast_json_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  --emit-ast    Parse the given .lox file and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file

Without a program file an interactive prompt is started; the value of each
expression statement typed there is echoed back.

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero. Exit status is 65 after a syntax error and
70 after a runtime error.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from .ast import Expression, Stmt
from .ast_json import program_from_obj, program_to_obj
from .errors import ParseError
from .interpreter import Interpreter
from .parser import parse_program
from .runtime import Runtime

EX_DATAERR = 65
EX_SOFTWARE = 70


def read_file(path: Path) -> str:
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        sys.exit(1)
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def execute(statements: List[Stmt], debug_level: int) -> int:
    runtime = Runtime()
    interpreter = Interpreter(runtime, debug_level=debug_level)
    try:
        interpreter.interpret(statements)
    except RecursionError:
        print("Stack overflow.", file=sys.stderr)
        return EX_SOFTWARE
    finally:
        interpreter.close()
    return EX_SOFTWARE if runtime.had_runtime_error else 0


def repl(debug_level: int) -> int:
    runtime = Runtime()
    interpreter = Interpreter(runtime, debug_level=debug_level)
    try:
        while True:
            try:
                line = input('> ')
            except EOFError:
                print()
                return 0
            try:
                statements = parse_program(line)
            except ParseError as err:
                runtime.error(err)
                runtime.reset()
                continue
            try:
                text, error = interpreter.interpret(statements)
            except RecursionError:
                print("Stack overflow.", file=sys.stderr)
                continue
            if error is None and statements and isinstance(statements[-1], Expression):
                print(text)
            runtime.reset()
    finally:
        interpreter.close()


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="treelox interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='LOX_FILE', help='emit AST JSON for the given .lox file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('program', nargs='?', help='program file (.lox) to execute; omit for a prompt')
    args = parser.parse_args(argv)

    # Emit AST mode
    if args.emit_ast:
        program_file = Path(args.emit_ast)
        source = read_file(program_file)
        try:
            statements = parse_program(source)
        except ParseError as err:
            print(str(err), file=sys.stderr)
            sys.exit(EX_DATAERR)
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(program_to_obj(statements), out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    # Execute from AST JSON
    if args.ast:
        ast_path = Path(args.ast)
        try:
            statements = program_from_obj(json.loads(read_file(ast_path)))
        except (ValueError, TypeError, KeyError) as err:
            print(f"Error: invalid AST file {ast_path}: {err}", file=sys.stderr)
            sys.exit(EX_DATAERR)
        status = execute(statements, args.v)
        if status:
            sys.exit(status)
        return

    if not args.program:
        sys.exit(repl(args.v))

    # Default: execute source file
    source = read_file(Path(args.program))
    try:
        statements = parse_program(source)
    except ParseError as err:
        print(str(err), file=sys.stderr)
        sys.exit(EX_DATAERR)
    status = execute(statements, args.v)
    if status:
        sys.exit(status)


if __name__ == '__main__':
    main()
