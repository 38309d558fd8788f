import io
import json

import pytest

from treelox.ast import Literal, Print
from treelox.ast_json import ast_from_obj, ast_to_obj, program_from_obj, program_to_obj
from treelox.interpreter import Interpreter
from treelox.parser import parse_program
from treelox.runtime import Runtime
from treelox.types import NIL

SOURCE = '''
fun makeAdder(n) {
  fun add(x) { return x + n; }
  return add;
}
var add2 = makeAdder(2);
for (var i = 0; i < 3; i = i + 1) {
  if (i == 1 and !nil) print add2(i); else print "skip";
}
print nil;
'''


def run(statements):
    interp = Interpreter(Runtime(stderr=io.StringIO()), output=io.StringIO())
    interp.interpret(statements)
    return interp.output.getvalue()


def test_program_survives_json_encoding():
    statements = parse_program(SOURCE)
    encoded = json.dumps(program_to_obj(statements))
    decoded = program_from_obj(json.loads(encoded))
    assert decoded == statements
    assert run(decoded) == run(statements) == 'skip\n3\nskip\nnil\n'


def test_nil_and_tokens_are_tagged():
    obj = ast_to_obj(Print(Literal(NIL)))
    assert obj == {'type': 'Print', 'expression': {'type': 'Literal', 'value': {'__type__': 'Nil'}}}
    assert ast_from_obj(obj) == Print(Literal(NIL))


def test_integers_from_external_producers_become_numbers():
    node = ast_from_obj({'type': 'Literal', 'value': 3})
    assert node == Literal(3.0)
    assert isinstance(node.value, float)


def test_hand_written_tree_runs():
    obj = {
        'type': 'Program',
        'body': [{
            'type': 'Print',
            'expression': {
                'type': 'Binary',
                'left': {'type': 'Literal', 'value': 1},
                'operator': {'__type__': 'Token', 'type': 'PLUS', 'lexeme': '+', 'line': 1},
                'right': {'type': 'Literal', 'value': 2.5},
            },
        }],
    }
    assert run(program_from_obj(obj)) == '3.5\n'


def test_unknown_node_type():
    with pytest.raises(ValueError):
        ast_from_obj({'type': 'ClassDecl'})
    with pytest.raises(ValueError):
        program_from_obj({'type': 'Print'})


def test_unsupported_python_object():
    with pytest.raises(TypeError):
        ast_to_obj(object())
