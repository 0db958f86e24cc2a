"""Static resolution pass.

Before anything runs, the resolver walks the tree once with a stack of
scopes that mirrors the environments the interpreter will create. For every
local variable reference it tells the interpreter how many scopes separate
the use from the declaration; references it can't find are left for the
global environment. It also reports the errors that can be found without
running the program (duplicate locals, self-referencing initializers,
misplaced `return`, `this` and `super`).
"""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING, Dict, List, Union

from .ast import (
    Expr, Literal, Variable, Assign, Unary, Binary, Logical, Ternary,
    Grouping, Call, Get, Set, This, Super,
    Stmt, Expression, Print, Var, Block, If, While, Break, Return,
    Function, Class,
)
from .tokens import Token

if TYPE_CHECKING:
    from .interpreter import Interpreter
    from .lox import Lox


class FunctionType(enum.Enum):
    NONE = enum.auto()
    FUNCTION = enum.auto()
    INITIALIZER = enum.auto()
    METHOD = enum.auto()


class ClassType(enum.Enum):
    NONE = enum.auto()
    CLASS = enum.auto()
    SUBCLASS = enum.auto()


class Resolver:
    def __init__(self, interpreter: 'Interpreter', host: 'Lox'):
        self.interpreter = interpreter
        self.host = host
        # name -> False while declared, True once defined
        self.scopes: List[Dict[str, bool]] = []
        self.current_function = FunctionType.NONE
        self.current_class = ClassType.NONE

    def resolve(self, node: Union[List[Stmt], Stmt, Expr, None]) -> None:
        if node is None:
            return
        if isinstance(node, list):
            for stmt in node:
                self.resolve(stmt)
        elif isinstance(node, Stmt):
            self.resolve_stmt(node)
        else:
            self.resolve_expr(node)

    def resolve_stmt(self, node: Stmt) -> None:
        if isinstance(node, Block):
            self.begin_scope()
            self.resolve(node.statements)
            self.end_scope()
            return
        if isinstance(node, Var):
            self.declare(node.name)
            self.resolve(node.initializer)
            self.define(node.name)
            return
        if isinstance(node, Function):
            self.declare(node.name)
            self.define(node.name)
            self.resolve_function(node, FunctionType.FUNCTION)
            return
        if isinstance(node, Class):
            self.resolve_class(node)
            return
        if isinstance(node, (Expression, Print)):
            self.resolve(node.expression)
            return
        if isinstance(node, If):
            self.resolve(node.condition)
            self.resolve(node.then_branch)
            self.resolve(node.else_branch)
            return
        if isinstance(node, While):
            self.resolve(node.condition)
            self.resolve(node.body)
            return
        if isinstance(node, Return):
            if self.current_function == FunctionType.NONE:
                self.host.error(node.keyword, "Can't return from top-level code.")
            if node.value is not None:
                if self.current_function == FunctionType.INITIALIZER:
                    self.host.error(node.keyword, "Can't return a value from an initializer.")
                self.resolve(node.value)
            return
        if isinstance(node, Break):
            # loop membership is checked at runtime
            return
        raise NotImplementedError(f"resolve: unexpected statement type {type(node)}")

    def resolve_expr(self, node: Expr) -> None:
        if isinstance(node, Variable):
            if self.scopes and self.scopes[-1].get(node.name.lexeme) is False:
                self.host.error(node.name, "Can't read local variable in its own initializer.")
            self.resolve_local(node, node.name)
            return
        if isinstance(node, Assign):
            self.resolve(node.value)
            self.resolve_local(node, node.name)
            return
        if isinstance(node, (Binary, Logical)):
            self.resolve(node.left)
            self.resolve(node.right)
            return
        if isinstance(node, Ternary):
            self.resolve(node.condition)
            self.resolve(node.then_branch)
            self.resolve(node.else_branch)
            return
        if isinstance(node, Unary):
            self.resolve(node.right)
            return
        if isinstance(node, Grouping):
            self.resolve(node.expression)
            return
        if isinstance(node, Call):
            self.resolve(node.callee)
            for argument in node.arguments:
                self.resolve(argument)
            return
        if isinstance(node, Get):
            self.resolve(node.object)
            return
        if isinstance(node, Set):
            self.resolve(node.value)
            self.resolve(node.object)
            return
        if isinstance(node, This):
            if self.current_class == ClassType.NONE:
                self.host.error(node.keyword, "Can't use 'this' outside of a class.")
                return
            self.resolve_local(node, node.keyword)
            return
        if isinstance(node, Super):
            if self.current_class == ClassType.NONE:
                self.host.error(node.keyword, "Can't use 'super' outside of a class.")
            elif self.current_class != ClassType.SUBCLASS:
                self.host.error(node.keyword, "Can't use 'super' in a class with no superclass.")
            self.resolve_local(node, node.keyword)
            return
        if isinstance(node, Literal):
            return
        raise NotImplementedError(f"resolve: unexpected expression type {type(node)}")

    def resolve_class(self, node: Class) -> None:
        enclosing_class = self.current_class
        self.current_class = ClassType.CLASS
        self.declare(node.name)
        self.define(node.name)

        if node.superclass is not None:
            if node.superclass.name.lexeme == node.name.lexeme:
                self.host.error(node.superclass.name, "A class can't inherit from itself.")
            self.current_class = ClassType.SUBCLASS
            self.resolve(node.superclass)
            self.begin_scope()
            self.scopes[-1]['super'] = True

        self.begin_scope()
        self.scopes[-1]['this'] = True
        for method in node.methods:
            kind = FunctionType.METHOD
            if method.name.lexeme == 'init':
                kind = FunctionType.INITIALIZER
            self.resolve_function(method, kind)
        self.end_scope()

        if node.superclass is not None:
            self.end_scope()
        self.current_class = enclosing_class

    def resolve_function(self, function: Function, kind: FunctionType) -> None:
        enclosing_function = self.current_function
        self.current_function = kind
        self.begin_scope()
        for param in function.params:
            self.declare(param)
            self.define(param)
        self.resolve(function.body)
        self.end_scope()
        self.current_function = enclosing_function

    def resolve_local(self, expr: Expr, name: Token) -> None:
        for index in range(len(self.scopes) - 1, -1, -1):
            if name.lexeme in self.scopes[index]:
                self.interpreter.resolve(expr, len(self.scopes) - 1 - index)
                return
        # not found: assume global

    def begin_scope(self) -> None:
        self.scopes.append({})

    def end_scope(self) -> None:
        self.scopes.pop()

    def declare(self, name: Token) -> None:
        if not self.scopes:
            return
        scope = self.scopes[-1]
        if name.lexeme in scope:
            self.host.error(name, "Already a variable with this name in this scope.")
        scope[name.lexeme] = False

    def define(self, name: Token) -> None:
        if not self.scopes:
            return
        self.scopes[-1][name.lexeme] = True
