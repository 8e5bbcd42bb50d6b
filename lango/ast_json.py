"""JSON serialization for the Lango AST.

This module converts AST dataclasses into plain Python dict/list
structures suitable for JSON encoding. It is used by ``--emit-ast`` to
inspect what the parser produced, including the `for`-loop desugaring.
"""

from __future__ import annotations

from dataclasses import fields
from typing import Any, Dict, List

from .ast import Node
from .tokens import Token


def token_to_obj(token: Token) -> Dict[str, Any]:
    obj: Dict[str, Any] = {"type": token.type.name, "lexeme": token.lexeme, "line": token.line}
    if token.literal is not None:
        obj["literal"] = token.literal
    return obj


def ast_to_obj(node: Any) -> Any:
    # Primitives
    if node is None or isinstance(node, (bool, int, float, str)):
        return node

    if isinstance(node, Token):
        return token_to_obj(node)

    if isinstance(node, list):
        return [ast_to_obj(item) for item in node]

    if isinstance(node, Node):
        obj: Dict[str, Any] = {"__type__": type(node).__name__}
        for f in fields(node):
            obj[f.name] = ast_to_obj(getattr(node, f.name))
        return obj

    raise TypeError(f"Unsupported AST value: {type(node)}")


def program_to_obj(statements: List[Node]) -> Dict[str, Any]:
    return {"__type__": "Program", "body": [ast_to_obj(stmt) for stmt in statements]}
