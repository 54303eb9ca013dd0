"""AST node definitions for calclang."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Union


# Base node for location info
@dataclass(kw_only=True)
class Node:
    pos: Optional[int] = None


# Expressions
@dataclass
class Expr(Node):
    pass


@dataclass
class Number(Expr):
    value: float


@dataclass
class Var(Expr):
    name: str


@dataclass
class Binary(Expr):
    left: Expr
    op: str
    right: Expr


@dataclass
class Unary(Expr):
    op: str
    operand: Expr


@dataclass
class Call(Expr):
    name: str
    args: List[Expr] = field(default_factory=list)


# Statements
@dataclass
class Let(Node):
    name: str
    params: List[Expr]
    body: Expr


@dataclass
class Const(Node):
    name: str
    value: Expr


Statement = Union[Let, Const, Expr]


__all__ = [
    "Node",
    "Expr",
    "Number",
    "Var",
    "Binary",
    "Unary",
    "Call",
    "Let",
    "Const",
    "Statement",
]
