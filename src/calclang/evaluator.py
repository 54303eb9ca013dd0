"""Tree-walking evaluator for calclang.

An Evaluator owns one Session. Each ``feed_statement`` call parses one line,
evaluates it against the session and returns either a number or a text
confirmation:

- ``let f(0) = 1``   appends a clause to ``f`` and returns ``<func f(0) = ...>``
- ``const x = 5``    binds ``x`` in the global scope and returns ``<const x = 5>``
- ``1 + x``          returns ``6.0``
- ``""``             returns ``<empty>``

Failures are re-raised as StatementError with the running statement index,
which increments on every call whether or not the statement succeeds.
"""

from __future__ import annotations

import math
import sys
from decimal import Decimal
from typing import Dict, List, Mapping, Optional, Tuple, Union

from . import ast
from .errors import (
    ArityError,
    CalcError,
    MatchError,
    RecursionLimitError,
    StatementError,
    UndefinedNameError,
)
from .parser import parse_one
from .session import CallCache, Clause, Pattern, Session
from .stdlib import DEFAULT_BUILTINS, DEFAULT_CONSTANTS, Builtin

Result = Union[float, str]

EMPTY = "<empty>"

# four interpreter frames per user-level call, so about 2500 levels deep
DEFAULT_RECURSION_LIMIT = 10000


def _divide(a: float, b: float) -> float:
    if b == 0:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


def _power(a: float, b: float) -> float:
    if a == 0 and b < 0:
        return math.inf
    try:
        return math.pow(a, b)
    except ValueError:
        # negative base, fractional exponent
        return math.nan
    except OverflowError:
        if a < 0 and float(b).is_integer() and int(b) % 2 == 1:
            return -math.inf
        return math.inf


BINARY_OPS = {
    "+": lambda a, b: a + b,
    "-": lambda a, b: a - b,
    "*": lambda a, b: a * b,
    "/": _divide,
    "^": _power,
}

UNARY_OPS = {
    "-": lambda a: -a,
}


def format_number(value: float) -> str:
    """Shortest round-trip digits, positional between 1e-7 and 1e21.

    4.0 -> "4", 1e-06 -> "0.000001", 1e21 -> "1e+21", 1e-07 -> "1e-7".
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"
    sign = "-" if value < 0 else ""
    _, digit_tuple, exponent = Decimal(repr(abs(value))).normalize().as_tuple()
    digits = "".join(map(str, digit_tuple))
    k = len(digits)
    # value == 0.<digits> * 10**n
    n = exponent + k
    if k <= n <= 21:
        text = digits + "0" * (n - k)
    elif 0 < n <= 21:
        text = digits[:n] + "." + digits[n:]
    elif -6 < n <= 0:
        text = "0." + "0" * -n + digits
    else:
        e = n - 1
        mantissa = digits if k == 1 else digits[0] + "." + digits[1:]
        text = f"{mantissa}e{'+' if e >= 0 else '-'}{abs(e)}"
    return sign + text


def format_result(result: Result) -> str:
    if isinstance(result, str):
        return result
    return format_number(result)


def format_pattern(pattern: Pattern) -> str:
    return ", ".join(
        slot if isinstance(slot, str) else format_number(slot) for slot in pattern
    )


class Evaluator:
    def __init__(
        self,
        builtins: Optional[Mapping[str, Builtin]] = None,
        constants: Optional[Mapping[str, float]] = None,
        cache_policy: str = "session",
        recursion_limit: int = DEFAULT_RECURSION_LIMIT,
    ):
        self.builtins: Dict[str, Builtin] = dict(
            DEFAULT_BUILTINS if builtins is None else builtins
        )
        self.constants: Dict[str, float] = dict(
            DEFAULT_CONSTANTS if constants is None else constants
        )
        self.recursion_limit = recursion_limit
        self.session = Session(cache=CallCache(cache_policy))
        for name, value in self.constants.items():
            self.session.scopes.set_global(name, float(value))

    @property
    def statement_count(self) -> int:
        return self.session.statements

    def names(self) -> List[str]:
        """Every name a statement could refer to right now."""
        known = set(self.session.scopes.globals)
        known.update(self.builtins)
        known.update(self.session.functions)
        return sorted(known)

    def feed_statement(self, text: str) -> Result:
        self.session.statements += 1
        index = self.session.statements
        previous_limit = sys.getrecursionlimit()
        # only ever raised here, never lowered below the host's setting
        if self.recursion_limit > previous_limit:
            sys.setrecursionlimit(self.recursion_limit)
        try:
            return self.evaluate_statement(parse_one(text))
        except RecursionError:
            raise StatementError(
                index, RecursionLimitError("maximum recursion depth exceeded")
            ) from None
        except CalcError as e:
            raise StatementError(index, e) from e
        finally:
            sys.setrecursionlimit(previous_limit)

    # --- statements ---
    def evaluate_statement(self, stmt: Optional[ast.Statement]) -> Result:
        if stmt is None:
            return EMPTY
        if isinstance(stmt, ast.Let):
            return self._let(stmt)
        if isinstance(stmt, ast.Const):
            return self._const(stmt)
        return self.evaluate(stmt)

    def _let(self, stmt: ast.Let) -> str:
        slots = []
        for param in stmt.params:
            if isinstance(param, ast.Var):
                slots.append(param.name)
            else:
                slots.append(self.evaluate(param))
        # every parameter evaluated before the clause becomes visible
        pattern: Pattern = tuple(slots)
        self.session.add_clause(stmt.name, Clause(pattern, stmt.body))
        return f"<func {stmt.name}({format_pattern(pattern)}) = ...>"

    def _const(self, stmt: ast.Const) -> str:
        value = self.evaluate(stmt.value)
        self.session.scopes.set_global(stmt.name, value)
        return f"<const {stmt.name} = {format_number(value)}>"

    # --- expressions ---
    def evaluate(self, node: ast.Expr) -> float:
        if isinstance(node, ast.Number):
            return node.value
        if isinstance(node, ast.Var):
            return self.session.scopes.lookup(node.name)
        if isinstance(node, ast.Binary):
            left = self.evaluate(node.left)
            right = self.evaluate(node.right)
            return BINARY_OPS[node.op](left, right)
        if isinstance(node, ast.Unary):
            return UNARY_OPS[node.op](self.evaluate(node.operand))
        if isinstance(node, ast.Call):
            return self._call(node)
        raise TypeError(f"unknown expression node {type(node).__name__}")

    def _call(self, node: ast.Call) -> float:
        args = tuple(self.evaluate(arg) for arg in node.args)
        key = (node.name, args)
        cache = self.session.cache
        if key in cache:
            return cache.get(key)

        builtin = self.builtins.get(node.name)
        if builtin is not None:
            if builtin.arity != len(args):
                raise ArityError(
                    f"builtin function {node.name} expected {builtin.arity} "
                    f"arguments, but got {len(args)}"
                )
            return cache.store(key, builtin(*args))

        if node.name in self.session.functions:
            return cache.store(key, self._call_user(node.name, args))

        raise UndefinedNameError(f"undefined function {node.name}")

    def _call_user(self, name: str, args: Tuple[float, ...]) -> float:
        scopes = self.session.scopes
        for clause in self.session.clauses(name):
            local = clause.bind(args)
            if local is None:
                continue
            scopes.push(local)
            try:
                return self.evaluate(clause.body)
            finally:
                scopes.pop()
        signature = ", ".join(format_number(a) for a in args)
        raise MatchError(
            f"no matching clause was found for function call {name}({signature})"
        )


__all__ = [
    "Evaluator",
    "EMPTY",
    "format_number",
    "format_result",
    "format_pattern",
]
