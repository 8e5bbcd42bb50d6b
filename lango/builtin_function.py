from dataclasses import dataclass
from typing import Any, Callable, List

from lango.types import LangoCallable


@dataclass
class BuiltinFunction(LangoCallable):
    """A host-provided function exposed to Lango programs."""
    name: str
    arity_: int
    fn: Callable[[List[Any]], Any]

    def arity(self) -> int:
        return self.arity_

    def call(self, interpreter, arguments: List[Any]) -> Any:
        return self.fn(arguments)

    def __repr__(self) -> str:
        return "<native fn>"
