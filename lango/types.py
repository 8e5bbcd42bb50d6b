"""Runtime values for Lango.

The value universe is closed:

========================  =============================
Lango value               Python representation
========================  =============================
nil                       ``None``
boolean                   ``bool``
number                    ``float``
string                    ``str``
function / native / class ``LangoCallable`` subclasses
instance                  ``LangoInstance``
========================  =============================

This module also holds the helpers every operator relies on: truthiness,
equality, stringification and a printable type name for diagnostics.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

from .ast import Function
from .environment import Environment
from .errors import LangoError, ReturnSignal
from .tokens import Token

if TYPE_CHECKING:
    from .interpreter import Interpreter


class LangoCallable:
    """Anything that can appear on the left of a call expression."""
    def arity(self) -> int:
        raise NotImplementedError

    def call(self, interpreter: 'Interpreter', arguments: List[Any]) -> Any:
        raise NotImplementedError


class LangoFunction(LangoCallable):
    """A user-defined function or method together with its closure."""
    def __init__(self, declaration: Function, closure: Environment, is_initializer: bool = False):
        self.declaration = declaration
        self.closure = closure
        self.is_initializer = is_initializer

    @property
    def name(self) -> str:
        if self.declaration.name is None:
            return 'anonymous'
        return self.declaration.name.lexeme

    def bind(self, instance: 'LangoInstance') -> 'LangoFunction':
        env = Environment(self.closure)
        env.define('this', instance)
        return LangoFunction(self.declaration, env, self.is_initializer)

    def arity(self) -> int:
        return len(self.declaration.params)

    def call(self, interpreter: 'Interpreter', arguments: List[Any]) -> Any:
        call_env = Environment(self.closure)
        for param, arg in zip(self.declaration.params, arguments):
            call_env.define(param.lexeme, arg)
        outcome = interpreter.execute_block(self.declaration.body, call_env)
        if self.is_initializer:
            return self.closure.get_at(0, 'this')
        if isinstance(outcome, ReturnSignal):
            return outcome.value
        # Falling off the end, or a stray break, yields nil.
        return None

    def __repr__(self) -> str:
        return f"<fn {self.name}>"


class LangoClass(LangoCallable):
    """A class object; calling it constructs an instance."""
    def __init__(self, name: str, superclass: Optional['LangoClass'], methods: Dict[str, LangoFunction]):
        self.name = name
        self.superclass = superclass
        self.methods = methods

    def find_method(self, name: str) -> Optional[LangoFunction]:
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
        instance = LangoInstance(self)
        initializer = self.find_method('init')
        if initializer is not None:
            initializer.bind(instance).call(interpreter, arguments)
        return instance

    def __repr__(self) -> str:
        return self.name


class LangoInstance:
    """An object created by calling a class. Fields are private per instance."""
    def __init__(self, klass: LangoClass):
        self.klass = klass
        self.fields: Dict[str, Any] = {}

    def get(self, name: Token) -> Any:
        if name.lexeme in self.fields:
            return self.fields[name.lexeme]
        method = self.klass.find_method(name.lexeme)
        if method is not None:
            return method.bind(self)
        raise LangoError(name, f"Undefined property '{name.lexeme}'.")

    def set(self, name: Token, value: Any):
        self.fields[name.lexeme] = value

    def __repr__(self) -> str:
        return f"{self.klass.name} instance"


def is_truthy(value: Any) -> bool:
    """Only nil and false are falsy."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(a: Any, b: Any) -> bool:
    if a is None:
        return b is None
    if b is None:
        return False
    # bool is an int subclass in Python; keep true != 1.
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b
    if isinstance(a, (float, str)) and type(a) is type(b):
        return a == b
    return a is b


def to_string(value: Any) -> str:
    """Convert a Lango value to its printed form."""
    if value is None:
        return 'nil'
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float):
        text = repr(value)
        if text.endswith('.0'):
            text = text[:-2]
        return text
    if isinstance(value, str):
        return value
    return repr(value)


def type_name(value: Any) -> str:
    if value is None:
        return 'nil'
    if isinstance(value, bool):
        return 'boolean'
    if isinstance(value, float):
        return 'number'
    if isinstance(value, str):
        return 'string'
    if isinstance(value, LangoClass):
        return 'class'
    if isinstance(value, LangoCallable):
        return 'function'
    if isinstance(value, LangoInstance):
        return 'instance'
    return type(value).__name__
