"""Mutable session state owned by one Evaluator.

- Scopes: stack of name -> value frames, global frame at index 0
- Clause: one (pattern, body) alternative of a user function
- CallCache: (name, evaluated args) -> result
- Session: bundles the three, plus the statement counter
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple, Union

from . import ast
from .errors import ScopeError, UndefinedNameError

Pattern = Tuple[Union[float, str], ...]
CacheKey = Tuple[str, Tuple[float, ...]]

CACHE_POLICIES = ("session", "redefine")


class Scopes:
    def __init__(self):
        self.stack: List[Dict[str, float]] = [{}]

    def __len__(self) -> int:
        return len(self.stack)

    def push(self, scope: Dict[str, float]) -> None:
        self.stack.append(scope)

    def pop(self) -> Dict[str, float]:
        if len(self.stack) < 2:
            raise ScopeError("failed to leave scope")
        return self.stack.pop()

    def lookup(self, name: str) -> float:
        for scope in reversed(self.stack):
            # membership, not truthiness: 0 is a bound value
            if name in scope:
                return scope[name]
        raise UndefinedNameError(f"undefined {name}")

    def set_global(self, name: str, value: float) -> None:
        self.stack[0][name] = value

    @property
    def globals(self) -> Dict[str, float]:
        return self.stack[0]


@dataclass
class Clause:
    pattern: Pattern
    body: ast.Expr

    def bind(self, args: Tuple[float, ...]) -> Optional[Dict[str, float]]:
        """Return the local scope for args, or None if the clause rejects them."""
        if len(self.pattern) != len(args):
            return None
        scope: Dict[str, float] = {}
        for slot, value in zip(self.pattern, args):
            if isinstance(slot, str):
                scope[slot] = value
            elif slot != value:
                return None
        return scope


class CallCache:
    """Memo of call results.

    Under the "session" policy entries live until the session ends. Under
    "redefine" adding a clause to a function drops that function's entries.
    """

    def __init__(self, policy: str = "session"):
        if policy not in CACHE_POLICIES:
            raise ValueError(f"unknown cache policy '{policy}'")
        self.policy = policy
        self.entries: Dict[CacheKey, float] = {}

    def __contains__(self, key: CacheKey) -> bool:
        return key in self.entries

    def __len__(self) -> int:
        return len(self.entries)

    def get(self, key: CacheKey) -> float:
        return self.entries[key]

    def store(self, key: CacheKey, value: float) -> float:
        self.entries[key] = value
        return value

    def invalidate(self, name: str) -> int:
        stale = [key for key in self.entries if key[0] == name]
        for key in stale:
            del self.entries[key]
        return len(stale)

    def on_redefine(self, name: str) -> None:
        if self.policy == "redefine":
            self.invalidate(name)


@dataclass
class Session:
    scopes: Scopes = field(default_factory=Scopes)
    functions: Dict[str, List[Clause]] = field(default_factory=dict)
    cache: CallCache = field(default_factory=CallCache)
    statements: int = 0

    def add_clause(self, name: str, clause: Clause) -> None:
        self.functions.setdefault(name, []).append(clause)
        self.cache.on_redefine(name)

    def clauses(self, name: str) -> Iterator[Clause]:
        return iter(self.functions.get(name, []))


__all__ = ["Scopes", "Clause", "CallCache", "Session", "CACHE_POLICIES"]
