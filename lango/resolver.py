"""Static scope resolution for Lango programs.

The resolver walks the statement list once, before anything runs. For every
variable, assignment, `this` and `super` expression that refers to a local
scope it tells the interpreter how many environments lie between the use and
the declaration. Names it cannot find in any local scope are left alone and
looked up in the globals at runtime.

It is also the only place that enforces the static rules of the language:
no duplicate declarations in one local scope, no reading a local in its own
initializer, no `return` outside a function, no value returned from `init`,
and `this` / `super` only where a class (and superclass) encloses them.
"""

from __future__ import annotations

from enum import Enum, auto
from typing import TYPE_CHECKING, Dict, List

from .ast import (
    Node, Expr, Stmt, Literal, Grouping, Unary, Binary, Logical, Variable,
    Assign, Call, Get, Set, This, Super, AnonymousFunction,
    Expression, Print, Var, Block, If, While, Function, Return, Break, Class,
)
from .reporter import ErrorReporter
from .tokens import Token

if TYPE_CHECKING:
    from .interpreter import Interpreter


class FunctionType(Enum):
    NONE = auto()
    FUNCTION = auto()
    INITIALIZER = auto()
    METHOD = auto()


class ClassType(Enum):
    NONE = auto()
    CLASS = auto()
    SUBCLASS = auto()


class Resolver:
    def __init__(self, interpreter: 'Interpreter', reporter: ErrorReporter):
        self.interpreter = interpreter
        self.reporter = reporter
        # name -> True once its initializer has been resolved
        self.scopes: List[Dict[str, bool]] = []
        self.current_function = FunctionType.NONE
        self.current_class = ClassType.NONE

    def resolve(self, statements: List[Stmt]):
        for stmt in statements:
            self.resolve_node(stmt)

    # Scope bookkeeping

    def begin_scope(self):
        self.scopes.append({})

    def end_scope(self):
        self.scopes.pop()

    def declare(self, name: Token):
        if not self.scopes:
            return
        scope = self.scopes[-1]
        if name.lexeme in scope:
            self.reporter.error(name, 'Already a variable with this name in this scope.')
        scope[name.lexeme] = False

    def define(self, name: Token):
        if not self.scopes:
            return
        self.scopes[-1][name.lexeme] = True

    def resolve_local(self, expr: Expr, name: Token):
        for i in range(len(self.scopes) - 1, -1, -1):
            if name.lexeme in self.scopes[i]:
                self.interpreter.resolve(expr, len(self.scopes) - 1 - i)
                return
        # Not found: global, resolved dynamically.

    def resolve_function(self, params: List[Token], body: List[Stmt], type_: FunctionType):
        enclosing_function = self.current_function
        self.current_function = type_
        self.begin_scope()
        for param in params:
            self.declare(param)
            self.define(param)
        self.resolve(body)
        self.end_scope()
        self.current_function = enclosing_function

    # Dispatch

    def resolve_node(self, node: Node):
        if isinstance(node, Stmt):
            self.resolve_stmt(node)
        else:
            self.resolve_expr(node)

    def resolve_stmt(self, node: Stmt):
        if isinstance(node, Block):
            self.begin_scope()
            self.resolve(node.statements)
            self.end_scope()
            return
        if isinstance(node, Var):
            self.declare(node.name)
            if node.initializer is not None:
                self.resolve_expr(node.initializer)
            self.define(node.name)
            return
        if isinstance(node, Function):
            # Defined before the body so the function can call itself.
            self.declare(node.name)
            self.define(node.name)
            self.resolve_function(node.params, node.body, FunctionType.FUNCTION)
            return
        if isinstance(node, Class):
            self.resolve_class(node)
            return
        if isinstance(node, Expression):
            self.resolve_expr(node.expression)
            return
        if isinstance(node, Print):
            self.resolve_expr(node.expression)
            return
        if isinstance(node, If):
            self.resolve_expr(node.condition)
            self.resolve_stmt(node.then_branch)
            for branch in node.elif_branches:
                self.resolve_expr(branch.condition)
                self.resolve_stmt(branch.body)
            if node.else_branch is not None:
                self.resolve_stmt(node.else_branch)
            return
        if isinstance(node, While):
            self.resolve_expr(node.condition)
            self.resolve_stmt(node.body)
            return
        if isinstance(node, Return):
            if self.current_function == FunctionType.NONE:
                self.reporter.error(node.keyword, "Can't return from top-level code.")
            if node.value is not None:
                if self.current_function == FunctionType.INITIALIZER:
                    self.reporter.error(node.keyword, "Can't return a value from an initializer.")
                self.resolve_expr(node.value)
            return
        if isinstance(node, Break):
            # Not checked statically; see Interpreter.execute.
            return
        raise TypeError(f"Unsupported node for resolve: {type(node).__name__}")

    def resolve_class(self, node: Class):
        enclosing_class = self.current_class
        self.current_class = ClassType.CLASS

        self.declare(node.name)
        self.define(node.name)

        if node.superclass is not None:
            if node.superclass.name.lexeme == node.name.lexeme:
                self.reporter.error(node.superclass.name, "A class can't inherit from itself.")
            self.current_class = ClassType.SUBCLASS
            self.resolve_expr(node.superclass)
            self.begin_scope()
            self.scopes[-1]['super'] = True

        self.begin_scope()
        self.scopes[-1]['this'] = True
        for method in node.methods:
            declaration = FunctionType.METHOD
            if method.name.lexeme == 'init':
                declaration = FunctionType.INITIALIZER
            self.resolve_function(method.params, method.body, declaration)
        self.end_scope()

        if node.superclass is not None:
            self.end_scope()

        self.current_class = enclosing_class

    def resolve_expr(self, node: Expr):
        if isinstance(node, Variable):
            if self.scopes and self.scopes[-1].get(node.name.lexeme) is False:
                self.reporter.error(node.name, "Can't read local variable in its own initializer.")
            self.resolve_local(node, node.name)
            return
        if isinstance(node, Assign):
            self.resolve_expr(node.value)
            self.resolve_local(node, node.name)
            return
        if isinstance(node, Binary):
            self.resolve_expr(node.left)
            self.resolve_expr(node.right)
            return
        if isinstance(node, Logical):
            self.resolve_expr(node.left)
            self.resolve_expr(node.right)
            return
        if isinstance(node, Unary):
            self.resolve_expr(node.right)
            return
        if isinstance(node, Grouping):
            self.resolve_expr(node.expression)
            return
        if isinstance(node, Literal):
            return
        if isinstance(node, Call):
            self.resolve_expr(node.callee)
            for argument in node.arguments:
                self.resolve_expr(argument)
            return
        if isinstance(node, Get):
            self.resolve_expr(node.object)
            return
        if isinstance(node, Set):
            self.resolve_expr(node.value)
            self.resolve_expr(node.object)
            return
        if isinstance(node, This):
            if self.current_class == ClassType.NONE:
                self.reporter.error(node.keyword, "Can't use 'this' outside of a class.")
                return
            self.resolve_local(node, node.keyword)
            return
        if isinstance(node, Super):
            if self.current_class == ClassType.NONE:
                self.reporter.error(node.keyword, "Can't use 'super' outside of a class.")
            elif self.current_class != ClassType.SUBCLASS:
                self.reporter.error(node.keyword, "Can't use 'super' in a class with no superclass.")
            self.resolve_local(node, node.keyword)
            return
        if isinstance(node, AnonymousFunction):
            self.resolve_function(node.params, node.body, FunctionType.FUNCTION)
            return
        raise TypeError(f"Unsupported node for resolve: {type(node).__name__}")
