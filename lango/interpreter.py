"""Tree-walking evaluator for the Lango language.

This module ties the pipeline together: `parse_program` scans and parses
source text, `run_source` adds resolution and evaluation, and the
`Interpreter` class walks the resolved AST.

Statements are executed by `Interpreter.execute`, which returns an outcome
rather than raising for control transfer: ``None`` for normal completion,
a `ReturnSignal` for `return` and `BreakSignal` for `break`. Blocks, `if`
and loops pass these outcomes outward until a function call or a `while`
loop consumes them. Runtime errors are `LangoError` exceptions; the first
one aborts the current `interpret` call and is handed to the reporter.
"""

from __future__ import annotations

import sys
from typing import Any, Dict, List, Optional

from .ast import (
    Expr, Stmt, Literal, Grouping, Unary, Binary, Logical, Variable, Assign,
    Call, Get, Set, This, Super, AnonymousFunction,
    Expression, Print, Var, Block, If, While, Function, Return, Break, Class,
)
from .environment import Environment
from .errors import LangoError, ReturnSignal, BreakSignal, BREAK
from .parser import parse_tokens
from .reporter import ErrorReporter
from .resolver import Resolver
from .scanner import tokenize
from .std import populate_std_environment
from .tokens import Token, TokenType
from .types import (
    LangoCallable, LangoFunction, LangoClass, LangoInstance,
    is_truthy, is_equal, to_string, type_name,
)


# Each Lango call costs several Python frames; this allows a few thousand
# nested Lango calls before "Stack overflow."
RECURSION_LIMIT = 20000


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class Interpreter:
    """Core interpreter that executes a resolved Lango AST."""
    def __init__(self, reporter: Optional[ErrorReporter] = None, debug_level: int = 0,
                 debug_file: str = 'debug.txt'):
        self.reporter = reporter if reporter is not None else ErrorReporter()
        self.global_env = populate_std_environment(Environment())
        # Scope distances recorded by the resolver, keyed by node identity.
        self.locals: Dict[Expr, int] = {}
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w', encoding='utf-8') if debug_level > 0 else None
        if sys.getrecursionlimit() < RECURSION_LIMIT:
            sys.setrecursionlimit(RECURSION_LIMIT)

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg)

    def close(self):
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    def resolve(self, expr: Expr, depth: int):
        self.locals[expr] = depth

    def interpret(self, statements: List[Stmt]):
        """Run top-level statements, reporting at most one runtime error."""
        try:
            for stmt in statements:
                # A break or return outcome at top level has nowhere to go.
                self.execute(stmt, self.global_env)
        except LangoError as ex:
            if self.debug_level >= 1:
                self.debug(f"runtime error: {ex.message} [line {ex.token.line}]")
            self.reporter.runtime_error(ex)

    ###########################################################################
    # Statements
    ###########################################################################

    def execute_block(self, statements: List[Stmt], env: Environment) -> Any:
        """Execute statements in `env`, stopping at the first control transfer."""
        for stmt in statements:
            outcome = self.execute(stmt, env)
            if outcome is not None:
                return outcome
        return None

    def execute(self, node: Stmt, env: Environment) -> Any:
        if isinstance(node, Expression):
            self.evaluate(node.expression, env)
            return None
        if isinstance(node, Print):
            value = self.evaluate(node.expression, env)
            print(to_string(value))
            return None
        if isinstance(node, Var):
            value = self.evaluate(node.initializer, env) if node.initializer is not None else None
            env.define(node.name.lexeme, value)
            if self.debug_level >= 2:
                self.debug(f"declare {node.name.lexeme}: {type_name(value)} = {to_string(value)}")
            return None
        if isinstance(node, Block):
            return self.execute_block(node.statements, Environment(parent=env))
        if isinstance(node, If):
            cond = self.evaluate(node.condition, env)
            if self.debug_level >= 3:
                self.debug(f"if condition {to_string(cond)} -> {is_truthy(cond)}")
            if is_truthy(cond):
                return self.execute(node.then_branch, env)
            for branch in node.elif_branches:
                if is_truthy(self.evaluate(branch.condition, env)):
                    return self.execute(branch.body, env)
            if node.else_branch is not None:
                return self.execute(node.else_branch, env)
            return None
        if isinstance(node, While):
            while True:
                cond = self.evaluate(node.condition, env)
                if self.debug_level >= 3:
                    self.debug(f"while condition {to_string(cond)} -> {is_truthy(cond)}")
                if not is_truthy(cond):
                    break
                outcome = self.execute(node.body, env)
                if isinstance(outcome, BreakSignal):
                    break
                if isinstance(outcome, ReturnSignal):
                    return outcome
            return None
        if isinstance(node, Function):
            env.define(node.name.lexeme, LangoFunction(node, env))
            if self.debug_level >= 2:
                self.debug(f"define function {node.name.lexeme}")
            return None
        if isinstance(node, Return):
            value = self.evaluate(node.value, env) if node.value is not None else None
            return ReturnSignal(value)
        if isinstance(node, Break):
            return BREAK
        if isinstance(node, Class):
            self.execute_class(node, env)
            return None
        raise TypeError(f"Unsupported node for execute: {type(node).__name__}")

    def execute_class(self, node: Class, env: Environment):
        superclass: Optional[LangoClass] = None
        if node.superclass is not None:
            value = self.evaluate(node.superclass, env)
            if not isinstance(value, LangoClass):
                raise LangoError(node.superclass.name, 'Superclass must be a class.')
            superclass = value

        # Bound first so methods can refer to the class by name.
        env.define(node.name.lexeme, None)

        method_env = env
        if superclass is not None:
            method_env = Environment(parent=env)
            method_env.define('super', superclass)

        methods: Dict[str, LangoFunction] = {}
        for method in node.methods:
            is_init = method.name.lexeme == 'init'
            methods[method.name.lexeme] = LangoFunction(method, method_env, is_init)

        klass = LangoClass(node.name.lexeme, superclass, methods)
        env.assign(node.name, klass)
        if self.debug_level >= 2:
            parent = f" < {superclass.name}" if superclass is not None else ''
            self.debug(f"define class {klass.name}{parent} methods={sorted(methods)}")

    ###########################################################################
    # Expressions
    ###########################################################################

    def evaluate(self, node: Expr, env: Environment) -> Any:
        if isinstance(node, Literal):
            return node.value
        if isinstance(node, Grouping):
            return self.evaluate(node.expression, env)
        if isinstance(node, Variable):
            return self.look_up_variable(node.name, node, env)
        if isinstance(node, Assign):
            value = self.evaluate(node.value, env)
            distance = self.locals.get(node)
            if distance is not None:
                env.assign_at(distance, node.name, value)
            else:
                self.global_env.assign(node.name, value)
            return value
        if isinstance(node, Logical):
            left = self.evaluate(node.left, env)
            if node.operator.type == TokenType.OR:
                if is_truthy(left):
                    return left
            elif not is_truthy(left):
                return left
            return self.evaluate(node.right, env)
        if isinstance(node, Unary):
            right = self.evaluate(node.right, env)
            if node.operator.type == TokenType.BANG:
                return not is_truthy(right)
            self.check_number_operand(node.operator, right)
            return -right
        if isinstance(node, Binary):
            left = self.evaluate(node.left, env)
            right = self.evaluate(node.right, env)
            return self.apply_binary_op(node.operator, left, right)
        if isinstance(node, Call):
            return self.evaluate_call(node, env)
        if isinstance(node, Get):
            obj = self.evaluate(node.object, env)
            if isinstance(obj, LangoInstance):
                return obj.get(node.name)
            raise LangoError(node.name, 'Only instances have properties.')
        if isinstance(node, Set):
            obj = self.evaluate(node.object, env)
            if not isinstance(obj, LangoInstance):
                raise LangoError(node.name, 'Only instances have fields.')
            value = self.evaluate(node.value, env)
            obj.set(node.name, value)
            return value
        if isinstance(node, This):
            return self.look_up_variable(node.keyword, node, env)
        if isinstance(node, Super):
            distance = self.locals[node]
            superclass: LangoClass = env.get_at(distance, 'super')
            # `this` is bound in the environment just inside the one holding `super`.
            obj: LangoInstance = env.get_at(distance - 1, 'this')
            method = superclass.find_method(node.method.lexeme)
            if method is None:
                raise LangoError(node.method, f"Undefined property '{node.method.lexeme}'.")
            return method.bind(obj)
        if isinstance(node, AnonymousFunction):
            return LangoFunction(Function(None, node.params, node.body), env)
        raise TypeError(f"Unsupported node for evaluate: {type(node).__name__}")

    def look_up_variable(self, name: Token, node: Expr, env: Environment) -> Any:
        distance = self.locals.get(node)
        if distance is not None:
            return env.get_at(distance, name.lexeme)
        return self.global_env.get(name)

    def evaluate_call(self, node: Call, env: Environment) -> Any:
        callee = self.evaluate(node.callee, env)
        arguments = [self.evaluate(arg, env) for arg in node.arguments]
        if not isinstance(callee, LangoCallable):
            raise LangoError(node.paren, 'Can only call functions and classes.')
        if len(arguments) != callee.arity():
            raise LangoError(node.paren, f"Expected {callee.arity()} arguments but got {len(arguments)}.")
        if self.debug_level >= 2:
            self.debug(f"call {to_string(callee)} with {len(arguments)} arguments")
        try:
            return callee.call(self, arguments)
        except RecursionError:
            raise LangoError(node.paren, 'Stack overflow.')

    def check_number_operand(self, operator: Token, operand: Any):
        if is_number(operand):
            return
        raise LangoError(operator, 'Operand must be a number.')

    def check_number_operands(self, operator: Token, left: Any, right: Any):
        if is_number(left) and is_number(right):
            return
        raise LangoError(operator, 'Operands must be numbers.')

    def apply_binary_op(self, operator: Token, left: Any, right: Any) -> Any:
        op = operator.type
        if op == TokenType.PLUS:
            if is_number(left) and is_number(right):
                return left + right
            if isinstance(left, str) or isinstance(right, str):
                return to_string(left) + to_string(right)
            raise LangoError(operator, 'Operands must be two numbers or at least one string.')
        if op == TokenType.EQUAL_EQUAL:
            return is_equal(left, right)
        if op == TokenType.BANG_EQUAL:
            return not is_equal(left, right)

        self.check_number_operands(operator, left, right)
        if op == TokenType.MINUS:
            return left - right
        if op == TokenType.STAR:
            return left * right
        if op == TokenType.SLASH:
            if right == 0:
                raise LangoError(operator, 'Attempted division by zero.')
            return left / right
        if op == TokenType.GREATER:
            return left > right
        if op == TokenType.GREATER_EQUAL:
            return left >= right
        if op == TokenType.LESS:
            return left < right
        if op == TokenType.LESS_EQUAL:
            return left <= right
        raise LangoError(operator, f"Unknown operator '{operator.lexeme}'.")


def parse_program(source: str, reporter: Optional[ErrorReporter] = None) -> List[Stmt]:
    """Scan and parse source code into top-level statements.

    Problems are reported through `reporter`; check its `had_error` flag
    before using the result.
    """
    if reporter is None:
        reporter = ErrorReporter()
    tokens = tokenize(source, reporter)
    return parse_tokens(tokens, reporter)


def run_source(source: str, interpreter: Interpreter) -> None:
    """Scan, parse, resolve and run `source`, stopping at the first failing stage."""
    reporter = interpreter.reporter
    statements = parse_program(source, reporter)
    if reporter.had_error:
        return
    interpreter.debug(f"parsed {len(statements)} statements")
    Resolver(interpreter, reporter).resolve(statements)
    if reporter.had_error:
        return
    interpreter.debug(f"resolved {len(interpreter.locals)} local references")
    interpreter.interpret(statements)


def run_program(source: str, debug_level: int = 0) -> ErrorReporter:
    """Convenience function to run a Lango program from a source string.

    Returns the reporter so callers can inspect the error flags.
    """
    interpreter = Interpreter(debug_level=debug_level)
    try:
        run_source(source, interpreter)
    finally:
        interpreter.close()
    return interpreter.reporter
