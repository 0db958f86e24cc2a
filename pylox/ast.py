"""Abstract Syntax Tree (AST) definitions for Lox.

The parser produces two families of nodes: expressions (`Expr`) and
statements (`Stmt`). Expression nodes compare and hash by identity
(`eq=False`) because the resolver keys its side table on the node object
itself; two occurrences of the same variable name must stay distinct.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional

from .tokens import Token


@dataclass(eq=False)
class Expr:
    """Base class for all expression nodes."""
    pass


@dataclass(eq=False)
class Literal(Expr):
    value: Any  # None, bool, float or str


@dataclass(eq=False)
class Variable(Expr):
    name: Token


@dataclass(eq=False)
class Assign(Expr):
    name: Token
    value: Expr


@dataclass(eq=False)
class Unary(Expr):
    operator: Token
    right: Expr


@dataclass(eq=False)
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass(eq=False)
class Logical(Expr):
    left: Expr
    operator: Token  # AND or OR
    right: Expr


@dataclass(eq=False)
class Ternary(Expr):
    condition: Expr
    then_branch: Expr
    else_branch: Expr


@dataclass(eq=False)
class Grouping(Expr):
    expression: Expr


@dataclass(eq=False)
class Call(Expr):
    callee: Expr
    paren: Token  # closing paren, used for error lines
    arguments: List[Expr]


@dataclass(eq=False)
class Get(Expr):
    object: Expr
    name: Token


@dataclass(eq=False)
class Set(Expr):
    object: Expr
    name: Token
    value: Expr


@dataclass(eq=False)
class This(Expr):
    keyword: Token


@dataclass(eq=False)
class Super(Expr):
    keyword: Token
    method: Token


@dataclass
class Stmt:
    """Base class for all statement nodes."""
    pass


@dataclass
class Expression(Stmt):
    expression: Expr


@dataclass
class Print(Stmt):
    expression: Expr


@dataclass
class Var(Stmt):
    name: Token
    initializer: Optional[Expr]


@dataclass
class Block(Stmt):
    statements: List[Stmt]


@dataclass
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt]


@dataclass
class While(Stmt):
    condition: Expr
    body: Stmt


@dataclass
class Break(Stmt):
    keyword: Token


@dataclass
class Return(Stmt):
    keyword: Token
    value: Optional[Expr]


@dataclass
class Function(Stmt):
    name: Token
    params: List[Token]
    body: List[Stmt]


@dataclass
class Class(Stmt):
    name: Token
    superclass: Optional[Variable]
    methods: List[Function]
