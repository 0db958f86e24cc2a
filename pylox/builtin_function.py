from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, List

if TYPE_CHECKING:
    from .interpreter import Interpreter


class LoxCallable:
    """Anything a Lox call expression can invoke: native functions, user
    functions and classes."""
    def arity(self) -> int:
        raise NotImplementedError

    def call(self, interpreter: 'Interpreter', arguments: List[Any]) -> Any:
        raise NotImplementedError


@dataclass
class BuiltinFunction(LoxCallable):
    name: str
    num_params: int
    fn: Callable[[List[Any]], Any]

    def arity(self) -> int:
        return self.num_params

    def call(self, interpreter: 'Interpreter', arguments: List[Any]) -> Any:
        return self.fn(arguments)

    def __str__(self) -> str:
        return "<native fn>"

    def __repr__(self) -> str:
        return f"<builtin {self.name}>"
