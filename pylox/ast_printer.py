"""Render Lox AST nodes as parenthesized prefix text.

Used by the REPL's `-d` prefix to show how a line was parsed, e.g.
`1 + 2 * 3;` prints `(+ 1 (* 2 3))`.
"""

from __future__ import annotations

from typing import Union

from .ast import (
    Expr, Literal, Variable, Assign, Unary, Binary, Logical, Ternary,
    Grouping, Call, Get, Set, This, Super,
    Stmt, Expression, Print, Var, Block, If, While, Break, Return,
    Function, Class,
)
from .types import to_string


class AstPrinter:
    def print(self, node: Union[Stmt, Expr]) -> str:
        if isinstance(node, Stmt):
            return self.print_stmt(node)
        return self.print_expr(node)

    def parenthesize(self, name: str, *parts: Union[Stmt, Expr, str, None]) -> str:
        pieces = [name]
        for part in parts:
            if part is None:
                continue
            pieces.append(part if isinstance(part, str) else self.print(part))
        return '(' + ' '.join(pieces) + ')'

    def print_stmt(self, node: Stmt) -> str:
        if isinstance(node, Expression):
            return self.print_expr(node.expression)
        if isinstance(node, Print):
            return self.parenthesize('print', node.expression)
        if isinstance(node, Var):
            return self.parenthesize('var', node.name.lexeme, node.initializer)
        if isinstance(node, Block):
            return self.parenthesize('block', *node.statements)
        if isinstance(node, If):
            return self.parenthesize('if', node.condition, node.then_branch, node.else_branch)
        if isinstance(node, While):
            return self.parenthesize('while', node.condition, node.body)
        if isinstance(node, Break):
            return '(break)'
        if isinstance(node, Return):
            return self.parenthesize('return', node.value)
        if isinstance(node, Function):
            return self.print_function('fun', node)
        if isinstance(node, Class):
            header = node.name.lexeme
            if node.superclass is not None:
                header += f" < {node.superclass.name.lexeme}"
            methods = [self.print_function('method', m) for m in node.methods]
            return self.parenthesize('class', header, *methods)
        raise NotImplementedError(f"print: unexpected statement type {type(node)}")

    def print_function(self, kind: str, node: Function) -> str:
        params = '(' + ' '.join(p.lexeme for p in node.params) + ')'
        return self.parenthesize(kind, node.name.lexeme, params, *node.body)

    def print_expr(self, node: Expr) -> str:
        if isinstance(node, Literal):
            if isinstance(node.value, str):
                return f'"{node.value}"'
            return to_string(node.value)
        if isinstance(node, Variable):
            return node.name.lexeme
        if isinstance(node, Assign):
            return self.parenthesize('=', node.name.lexeme, node.value)
        if isinstance(node, Unary):
            return self.parenthesize(node.operator.lexeme, node.right)
        if isinstance(node, (Binary, Logical)):
            return self.parenthesize(node.operator.lexeme, node.left, node.right)
        if isinstance(node, Ternary):
            return self.parenthesize('?', node.condition, node.then_branch, node.else_branch)
        if isinstance(node, Grouping):
            return self.parenthesize('group', node.expression)
        if isinstance(node, Call):
            return self.parenthesize('call', node.callee, *node.arguments)
        if isinstance(node, Get):
            return self.parenthesize('.', node.object, node.name.lexeme)
        if isinstance(node, Set):
            return self.parenthesize('=', self.parenthesize('.', node.object, node.name.lexeme), node.value)
        if isinstance(node, This):
            return 'this'
        if isinstance(node, Super):
            return self.parenthesize('super', node.method.lexeme)
        raise NotImplementedError(f"print: unexpected expression type {type(node)}")
