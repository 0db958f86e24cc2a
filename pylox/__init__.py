# Lox language package
# This package provides a scanner, parser, resolver and tree-walking interpreter for Lox.
from .errors import LoxRuntimeError
from .interpreter import Interpreter
from .lox import Lox, parse_program, run_program

__all__ = [
    'run_program',
    'parse_program',
    'Lox',
    'Interpreter',
    'LoxRuntimeError',
]
