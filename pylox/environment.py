from typing import Any, Dict, Optional

from .errors import LoxRuntimeError
from .tokens import Token


class _Uninitialized:
    def __repr__(self) -> str:
        return '<uninitialized>'


# Cell marker for "declared but not yet assigned"; nil is a real value, so
# None can't be used here.
UNINITIALIZED = _Uninitialized()


class Environment:
    """One scope frame mapping names to values, linked to its enclosing frame."""
    def __init__(self, enclosing: Optional['Environment'] = None):
        self.enclosing = enclosing
        self.values: Dict[str, Any] = {}

    def define(self, name: str, value: Any = UNINITIALIZED) -> None:
        self.values[name] = value

    def get(self, name: Token) -> Any:
        if name.lexeme in self.values:
            return self._read(name, self.values[name.lexeme])
        if self.enclosing is not None:
            return self.enclosing.get(name)
        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def assign(self, name: Token, value: Any) -> None:
        if name.lexeme in self.values:
            self.values[name.lexeme] = value
            return
        if self.enclosing is not None:
            self.enclosing.assign(name, value)
            return
        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def ancestor(self, distance: int) -> 'Environment':
        environment = self
        for _ in range(distance):
            environment = environment.enclosing
        return environment

    def get_at(self, distance: int, name: Token) -> Any:
        values = self.ancestor(distance).values
        if name.lexeme not in values:
            raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")
        return self._read(name, values[name.lexeme])

    def get_value_at(self, distance: int, name: str) -> Any:
        """Fetch a hidden binding such as `this` or `super` by plain name."""
        return self.ancestor(distance).values[name]

    def assign_at(self, distance: int, name: Token, value: Any) -> None:
        self.ancestor(distance).values[name.lexeme] = value

    @staticmethod
    def _read(name: Token, value: Any) -> Any:
        if value is UNINITIALIZED:
            raise LoxRuntimeError(name, f"Variable not yet initialized '{name.lexeme}'.")
        return value
