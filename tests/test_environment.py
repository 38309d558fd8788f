"""Tests for treelox.environment."""

import pytest

from treelox.environment import Environment
from treelox.errors import UndefinedVariable
from treelox.tokens import Token


def name(lexeme):
    return Token('IDENTIFIER', lexeme, 1, 1)


class TestEnvironment:
    def test_define_and_get(self):
        env = Environment()
        env.define('x', 1.0)
        assert env.get(name('x')) == 1.0

    def test_redefine_overwrites(self):
        env = Environment()
        env.define('x', 1.0)
        env.define('x', 'two')
        assert env.get(name('x')) == 'two'

    def test_get_walks_outward(self):
        outer = Environment()
        outer.define('x', 1.0)
        inner = Environment(Environment(outer))
        assert inner.get(name('x')) == 1.0

    def test_define_shadows_without_touching_outer(self):
        outer = Environment()
        outer.define('x', 1.0)
        inner = Environment(outer)
        inner.define('x', 2.0)
        assert inner.get(name('x')) == 2.0
        assert outer.get(name('x')) == 1.0

    def test_assign_updates_nearest_binding(self):
        outer = Environment()
        outer.define('x', 1.0)
        inner = Environment(outer)
        inner.assign(name('x'), 5.0)
        assert outer.get(name('x')) == 5.0
        assert 'x' not in inner

    def test_get_undefined(self):
        env = Environment(Environment())
        with pytest.raises(UndefinedVariable) as excinfo:
            env.get(name('nope'))
        assert excinfo.value.message == "Undefined variable 'nope'."
        assert excinfo.value.line == 1

    def test_assign_never_creates_global(self):
        globals_ = Environment()
        inner = Environment(globals_)
        with pytest.raises(UndefinedVariable):
            inner.assign(name('y'), 1.0)
        assert 'y' not in globals_
        assert 'y' not in inner

    def test_depth(self):
        globals_ = Environment()
        assert globals_.depth() == 0
        assert Environment(Environment(globals_)).depth() == 2
