"""Default builtin functions and constants.

The evaluator only enforces arity and dispatch; any mapping of
``name -> Builtin`` can be supplied instead of these.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Callable, Dict


@dataclass(frozen=True)
class Builtin:
    name: str
    arity: int
    func: Callable[..., float]
    doc: str = ""

    def __call__(self, *args: float) -> float:
        try:
            return float(self.func(*args))
        except ValueError:
            # math domain error, e.g. ln(-1)
            return math.nan
        except OverflowError:
            return math.inf


def _randint(low: float, high: float) -> float:
    return low + math.floor(random.random() * (high - low))


def _log(base_log: Callable[[float], float]) -> Callable[[float], float]:
    def wrapped(a: float) -> float:
        if a == 0:
            return -math.inf
        return base_log(a)

    return wrapped


def _round(a: float) -> float:
    # half-up, not banker's rounding
    return math.floor(a + 0.5)


def _integral(func: Callable[[float], float]) -> Callable[[float], float]:
    """Pass inf and nan through instead of letting math.floor & co. raise."""

    def wrapped(a: float) -> float:
        if not math.isfinite(a):
            return a
        return func(a)

    return wrapped


def _builtins(*entries: Builtin) -> Dict[str, Builtin]:
    return {b.name: b for b in entries}


DEFAULT_BUILTINS: Dict[str, Builtin] = _builtins(
    Builtin("rand", 0, random.random, "random number in [0, 1)"),
    Builtin("randint", 2, _randint, "random integer in [min, max)"),
    Builtin("min", 2, min, "smaller of two numbers"),
    Builtin("max", 2, max, "larger of two numbers"),
    Builtin("ln", 1, _log(math.log), "natural logarithm"),
    Builtin("lg", 1, _log(math.log10), "base-10 logarithm"),
    Builtin("round", 1, _integral(_round), "round half up"),
    Builtin("floor", 1, _integral(math.floor), "round down"),
    Builtin("ceil", 1, _integral(math.ceil), "round up"),
    Builtin("trunc", 1, _integral(math.trunc), "drop the fractional part"),
    Builtin("sin", 1, math.sin, "sine (radians)"),
    Builtin("cos", 1, math.cos, "cosine (radians)"),
    Builtin("tg", 1, math.tan, "tangent (radians)"),
    Builtin("deg", 1, lambda a: a * math.pi / 180, "degrees to radians"),
)

DEFAULT_CONSTANTS: Dict[str, float] = {
    "E": math.e,
    "PI": math.pi,
}


def reference() -> str:
    """Builtin help text, one line per function."""
    lines = []
    for b in sorted(DEFAULT_BUILTINS.values(), key=lambda b: b.name):
        params = ", ".join("xyz"[i] for i in range(b.arity))
        lines.append(f"  {b.name}({params}): {b.doc}")
    return "\n".join(lines)


__all__ = ["Builtin", "DEFAULT_BUILTINS", "DEFAULT_CONSTANTS", "reference"]
