"""Runtime values and helpers for Lox.

Lox values map onto Python objects:

    nil      -> None
    boolean  -> bool
    number   -> float
    string   -> str
    callable -> LoxCallable (BuiltinFunction, LoxFunction, LoxClass)
    instance -> LoxInstance

This module holds the class and instance types plus the helpers the
interpreter uses for truthiness, equality and printing.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from .builtin_function import LoxCallable
from .errors import LoxRuntimeError
from .tokens import Token

if TYPE_CHECKING:
    from .interpreter import Interpreter, LoxFunction


class LoxClass(LoxCallable):
    """A class value. Calling it constructs a new instance."""
    def __init__(self, name: str, superclass: Optional['LoxClass'], methods: Dict[str, 'LoxFunction']):
        self.name = name
        self.superclass = superclass
        self.methods = methods

    def find_method(self, name: str) -> Optional['LoxFunction']:
        if name in self.methods:
            return self.methods[name]
        if self.superclass is not None:
            return self.superclass.find_method(name)
        return None

    def arity(self) -> int:
        initializer = self.find_method('init')
        if initializer is None:
            return 0
        return initializer.arity()

    def call(self, interpreter: 'Interpreter', arguments: List[Any]) -> Any:
        instance = LoxInstance(self)
        initializer = self.find_method('init')
        if initializer is not None:
            initializer.bind(instance).call(interpreter, arguments)
        return instance

    def __str__(self) -> str:
        return f"<class {self.name}>"

    __repr__ = __str__


class LoxInstance:
    """An object created by calling a class. Fields shadow methods."""
    def __init__(self, klass: LoxClass):
        self.klass = klass
        self.fields: Dict[str, Any] = {}

    def get(self, name: Token) -> Any:
        if name.lexeme in self.fields:
            return self.fields[name.lexeme]
        method = self.klass.find_method(name.lexeme)
        if method is not None:
            return method.bind(self)
        raise LoxRuntimeError(name, f"Undefined property '{name.lexeme}'.")

    def set(self, name: Token, value: Any) -> None:
        self.fields[name.lexeme] = value

    def __str__(self) -> str:
        return f"<instance {self.klass.name}>"

    __repr__ = __str__


def is_number(value: Any) -> bool:
    # bool is not a float subclass, but be explicit about it anyway
    return isinstance(value, float) and not isinstance(value, bool)


def is_truthy(value: Any) -> bool:
    """Only nil and false are falsy; 0 and "" are truthy."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(a: Any, b: Any) -> bool:
    if a is None and b is None:
        return True
    if a is None or b is None:
        return False
    # Python treats True == 1.0; Lox does not
    if isinstance(a, (bool, float, str)) or isinstance(b, (bool, float, str)):
        return type(a) is type(b) and a == b
    return a is b


def to_string(value: Any) -> str:
    if value is None:
        return 'nil'
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float):
        text = repr(value)
        if 'e' in text:
            # 1e+16 -> 10000000000000000, 1e-05 -> 0.00001
            text = format(Decimal(text), 'f')
        if text.endswith('.0'):
            text = text[:-2]
        return text
    return str(value)


def type_name(value: Any) -> str:
    if value is None:
        return 'nil'
    if isinstance(value, bool):
        return 'boolean'
    if isinstance(value, float):
        return 'number'
    if isinstance(value, str):
        return 'string'
    if isinstance(value, LoxClass):
        return 'class'
    if isinstance(value, LoxInstance):
        return 'instance'
    if isinstance(value, LoxCallable):
        return 'function'
    return type(value).__name__
