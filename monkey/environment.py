"""
Monkey Environment
==================
Chained name -> value scopes. A child scope is created for every
function call (and for if/else blocks that declare bindings); lookups
fall through to the enclosing scope. Scopes are shared by reference:
every closure created in a scope sees later bindings added to it.
"""
from __future__ import annotations

from typing import Optional

from .objects import MonkeyObject


class Environment:
    """A single scope, optionally enclosed by an outer one."""

    def __init__(self, outer: Optional[Environment] = None):
        self.store: dict[str, MonkeyObject] = {}
        self.outer = outer

    def get(self, name: str) -> Optional[MonkeyObject]:
        """Innermost binding for *name*, or None if no scope binds it."""
        scope: Optional[Environment] = self
        while scope is not None:
            if name in scope.store:
                return scope.store[name]
            scope = scope.outer
        return None

    def set(self, name: str, value: MonkeyObject) -> MonkeyObject:
        self.store[name] = value
        return value

    def enclosed(self) -> Environment:
        return Environment(outer=self)

    def names(self) -> list[str]:
        return list(self.store)

    def clear(self):
        self.store.clear()

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None

    def __repr__(self) -> str:
        depth, scope = 0, self.outer
        while scope is not None:
            depth, scope = depth + 1, scope.outer
        return f"Environment({len(self.store)} bindings, depth={depth})"
