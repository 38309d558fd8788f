from pathlib import Path

from treelox.interpreter import parse_program, Interpreter

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_7_strings_and_equality(capsys):
    with open(EXAMPLES / 'program_7.lox', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter()
    interp.interpret(ast)
    out = capsys.readouterr().out.strip().splitlines()
    assert out == [
        'Hello, Lox!',
        'true',
        'true',
        'true',
        'false',
        'false',
        '3.5',
        '-10',
        'true',
    ]
