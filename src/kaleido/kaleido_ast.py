"""
Defines the abstract syntax tree (AST) for the Kaleido expression language.

Expressions form a closed set of node types:
    NumberExpr:   A numeric literal.
    VariableExpr: A reference to a named value (unresolved).
    BinaryExpr:   An operator character applied to two sub-expressions.
    CallExpr:     A call of a named function with ordered arguments.

Top-level constructs:
    Prototype: A function name plus its ordered parameter names. An empty name
        marks the anonymous wrapper built around a bare top-level expression.
    Function:  A prototype together with its body expression.

All nodes are frozen dataclasses: they are built bottom-up by the parser, never
mutated afterwards, and compare structurally. Each node owns its children
outright; the parser never shares a node between two parents.

Example:
    BinaryExpr("+", NumberExpr(1.0), VariableExpr("x"))
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, TypedDict, Union


class ASTDict(TypedDict, total=False):
    """Serialized form of a node, as produced by `to_dict()`."""

    kind: str
    value: float
    name: str
    op: str
    lhs: "ASTDict"
    rhs: "ASTDict"
    callee: str
    args: list["ASTDict"]
    params: list[str]
    proto: "ASTDict"
    body: "ASTDict"


@dataclass(frozen=True)
class NumberExpr:
    value: float

    def to_dict(self) -> ASTDict:
        return {"kind": "number", "value": self.value}


@dataclass(frozen=True)
class VariableExpr:
    name: str

    def to_dict(self) -> ASTDict:
        return {"kind": "variable", "name": self.name}


@dataclass(frozen=True)
class BinaryExpr:
    op: str
    lhs: Expr
    rhs: Expr

    def to_dict(self) -> ASTDict:
        return {
            "kind": "binary",
            "op": self.op,
            "lhs": self.lhs.to_dict(),
            "rhs": self.rhs.to_dict(),
        }


@dataclass(frozen=True)
class CallExpr:
    callee: str
    args: tuple[Expr, ...] = field(default_factory=tuple)

    def to_dict(self) -> ASTDict:
        return {
            "kind": "call",
            "callee": self.callee,
            "args": [arg.to_dict() for arg in self.args],
        }


Expr = Union[NumberExpr, VariableExpr, BinaryExpr, CallExpr]


@dataclass(frozen=True)
class Prototype:
    """A function signature: its name and parameter names.

    Parameter names may repeat; uniqueness is not checked at this stage.
    """

    name: str
    params: tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_anonymous(self) -> bool:
        return self.name == ""

    def to_dict(self) -> ASTDict:
        return {"kind": "prototype", "name": self.name, "params": list(self.params)}


@dataclass(frozen=True)
class Function:
    """A `def` definition, or the anonymous wrapper of a top-level expression."""

    proto: Prototype
    body: Expr

    def to_dict(self) -> ASTDict:
        return {
            "kind": "function",
            "proto": self.proto.to_dict(),
            "body": self.body.to_dict(),
        }


TopLevel = Union[Function, Prototype]


def to_dicts(nodes: list[TopLevel]) -> list[dict[str, Any]]:
    """Serializes a list of top-level nodes, e.g. for JSON output."""
    return [dict(node.to_dict()) for node in nodes]


__all__ = [
    "ASTDict",
    "BinaryExpr",
    "CallExpr",
    "Expr",
    "Function",
    "NumberExpr",
    "Prototype",
    "TopLevel",
    "VariableExpr",
    "to_dicts",
]
