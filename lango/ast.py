"""Abstract Syntax Tree (AST) definitions for the Lango language.

The AST is split into two closed families, expressions and statements.
Nodes compare and hash by identity (``eq=False``): the resolver keys its
scope-distance table on the node object itself, so two occurrences of the
same name must remain distinct entries.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional

from .tokens import Token


@dataclass(eq=False)
class Node:
    """Base class for all AST nodes."""
    pass


###############################################################################
# Expressions
###############################################################################

@dataclass(eq=False)
class Expr(Node):
    pass


@dataclass(eq=False)
class Literal(Expr):
    value: Any


@dataclass(eq=False)
class Grouping(Expr):
    expression: Expr


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
class Variable(Expr):
    name: Token


@dataclass(eq=False)
class Assign(Expr):
    name: Token
    value: Expr


@dataclass(eq=False)
class Call(Expr):
    callee: Expr
    paren: Token  # closing paren, used for error locations
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


@dataclass(eq=False)
class AnonymousFunction(Expr):
    keyword: Token
    params: List[Token]
    body: List[Stmt]


###############################################################################
# Statements
###############################################################################

@dataclass(eq=False)
class Stmt(Node):
    pass


@dataclass(eq=False)
class Expression(Stmt):
    expression: Expr


@dataclass(eq=False)
class Print(Stmt):
    expression: Expr


@dataclass(eq=False)
class Var(Stmt):
    name: Token
    initializer: Optional[Expr]


@dataclass(eq=False)
class Block(Stmt):
    statements: List[Stmt]


@dataclass(eq=False)
class Elif(Node):
    condition: Expr
    body: Stmt


@dataclass(eq=False)
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    elif_branches: List[Elif] = field(default_factory=list)
    else_branch: Optional[Stmt] = None


@dataclass(eq=False)
class While(Stmt):
    condition: Expr
    body: Stmt


@dataclass(eq=False)
class Function(Stmt):
    name: Optional[Token]  # None for anonymous functions
    params: List[Token]
    body: List[Stmt]


@dataclass(eq=False)
class Return(Stmt):
    keyword: Token
    value: Optional[Expr]


@dataclass(eq=False)
class Break(Stmt):
    keyword: Token


@dataclass(eq=False)
class Class(Stmt):
    name: Token
    superclass: Optional[Variable]
    methods: List[Function]
