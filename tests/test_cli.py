"""Tests for the command line driver in treelox.__main__."""

import json

import pytest

from treelox.__main__ import main


def write(tmp_path, name, text):
    path = tmp_path / name
    path.write_text(text, encoding='utf-8')
    return path


def test_run_file(tmp_path, capsys):
    program = write(tmp_path, 'ok.lox', 'var a = 1; { var a = 2; print a; } print a;')
    main([str(program)])
    assert capsys.readouterr().out.splitlines() == ['2', '1']


def test_runtime_error_exit_status(tmp_path, capsys):
    program = write(tmp_path, 'bad.lox', 'print "a";\nprint -"b";\nprint "c";')
    with pytest.raises(SystemExit) as excinfo:
        main([str(program)])
    assert excinfo.value.code == 70
    captured = capsys.readouterr()
    assert captured.out.splitlines() == ['a', 'c']
    assert "[line 2] Error at '-': Operand must be a number." in captured.err


def test_syntax_error_exit_status(tmp_path, capsys):
    program = write(tmp_path, 'broken.lox', 'print (1;')
    with pytest.raises(SystemExit) as excinfo:
        main([str(program)])
    assert excinfo.value.code == 65
    captured = capsys.readouterr()
    assert captured.out == ''
    assert '[line 1:' in captured.err


def test_missing_file(tmp_path, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main([str(tmp_path / 'nope.lox')])
    assert excinfo.value.code == 1
    assert 'not found' in capsys.readouterr().err


def test_stack_overflow(tmp_path, capsys):
    program = write(tmp_path, 'deep.lox', 'fun f() { f(); } f();')
    with pytest.raises(SystemExit) as excinfo:
        main([str(program)])
    assert excinfo.value.code == 70
    assert 'Stack overflow.' in capsys.readouterr().err


def test_emit_and_run_ast(tmp_path, capsys):
    program = write(tmp_path, 'add.lox', 'fun add(a, b) { return a + b; } print add(2, 3);')
    main(['--emit-ast', str(program)])
    out_path = capsys.readouterr().out.strip()
    assert out_path.endswith('add.lox.ast.json')
    with open(out_path, encoding='utf-8') as f:
        assert json.load(f)['type'] == 'Program'
    main(['--ast', out_path])
    assert capsys.readouterr().out.strip() == '5'


def test_invalid_ast_file(tmp_path, capsys):
    ast_file = write(tmp_path, 'bad.json', '{"type": "Nonsense"}')
    with pytest.raises(SystemExit) as excinfo:
        main(['--ast', str(ast_file)])
    assert excinfo.value.code == 65


def test_debug_output(tmp_path, capsys, monkeypatch):
    monkeypatch.chdir(tmp_path)
    program = write(tmp_path, 'dbg.lox', 'fun f() { return 1; } print f();')
    main(['-vv', str(program)])
    assert capsys.readouterr().out.strip() == '1'
    log = (tmp_path / 'debug.txt').read_text(encoding='utf-8')
    assert 'define function f/0' in log
    assert 'call <fn f> with 0 argument(s)' in log


def test_repl(capsys, monkeypatch):
    lines = iter(['var a = 2;', 'a * 21;', 'print a;', 'nope;', '1 +;', 'a;'])

    def fake_input(prompt):
        try:
            return next(lines)
        except StopIteration:
            raise EOFError

    monkeypatch.setattr('builtins.input', fake_input)
    with pytest.raises(SystemExit) as excinfo:
        main([])
    assert excinfo.value.code == 0
    captured = capsys.readouterr()
    assert captured.out.splitlines() == ['42', '2', '2', '']
    assert "Undefined variable 'nope'." in captured.err
    assert 'Error:' in captured.err
