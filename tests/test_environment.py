import pytest

from pylox.environment import UNINITIALIZED, Environment
from pylox.errors import LoxRuntimeError
from pylox.tokens import Token, TokenType


def name(text):
    return Token(TokenType.IDENTIFIER, text, None, 7)


def test_lookup_walks_enclosing_chain():
    outer = Environment()
    outer.define('a', 1.0)
    inner = Environment(Environment(outer))
    assert inner.get(name('a')) == 1.0
    assert inner.ancestor(2) is outer
    assert inner.get_at(2, name('a')) == 1.0


def test_assign_updates_nearest_definition():
    outer = Environment()
    outer.define('a', 1.0)
    inner = Environment(outer)
    inner.assign(name('a'), 2.0)
    assert outer.values['a'] == 2.0
    assert 'a' not in inner.values


def test_assign_at_targets_exact_scope():
    outer = Environment()
    outer.define('a', 1.0)
    inner = Environment(outer)
    inner.define('a', 'shadow')
    inner.assign_at(1, name('a'), 3.0)
    assert outer.values['a'] == 3.0
    assert inner.values['a'] == 'shadow'


def test_uninitialized_cell():
    env = Environment()
    env.define('a')
    assert env.values['a'] is UNINITIALIZED
    with pytest.raises(LoxRuntimeError) as exc:
        env.get(name('a'))
    assert exc.value.message == "Variable not yet initialized 'a'."
    assert exc.value.token.line == 7
    env.define('a', None)
    assert env.get(name('a')) is None


def test_undefined_variable():
    env = Environment(Environment())
    with pytest.raises(LoxRuntimeError, match="Undefined variable 'nope'."):
        env.get(name('nope'))
    with pytest.raises(LoxRuntimeError, match="Undefined variable 'nope'."):
        env.assign(name('nope'), 1.0)
