from pathlib import Path

from treelox.errors import LoxTypeError, UndefinedVariable
from treelox.interpreter import parse_program, Interpreter
from treelox.runtime import Runtime

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_8_errors_do_not_abort(capsys):
    with open(EXAMPLES / 'program_8.lox', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    runtime = Runtime()
    interp = Interpreter(runtime)
    text, error = interp.interpret(ast)
    captured = capsys.readouterr()
    assert captured.out.strip().splitlines() == ['before', 'after', 'still running']
    # the first error is returned, both are reported
    assert isinstance(error, LoxTypeError)
    assert error.line == 2
    assert [type(e) for e in runtime.errors] == [LoxTypeError, UndefinedVariable]
    assert "[line 2] Error at '+': Operands must be two numbers or two strings." in captured.err
    assert "[line 4] Error at 'missing': Undefined variable 'missing'." in captured.err
    assert runtime.had_runtime_error
