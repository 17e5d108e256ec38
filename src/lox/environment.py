"""Lexical scope chain."""

from __future__ import annotations

from typing import Iterator

from lox.values import Value


class Environment:
    """One scope of name → value bindings, linked to its enclosing scope.

    Lookup and assignment walk outward to the root; :meth:`define` only
    ever touches this scope.
    """

    def __init__(self, enclosing: Environment | None = None) -> None:
        self.values: dict[str, Value] = {}
        self.enclosing = enclosing

    def define(self, name: str, value: Value) -> None:
        """Declare *name* here, replacing any existing binding in this scope."""
        self.values[name] = value

    def _resolve(self, name: str) -> Environment | None:
        scope: Environment | None = self
        while scope is not None:
            if name in scope.values:
                return scope
            scope = scope.enclosing
        return None

    def is_defined(self, name: str) -> bool:
        return self._resolve(name) is not None

    def get(self, name: str) -> Value:
        """Return the innermost binding of *name*. Raises KeyError."""
        scope = self._resolve(name)
        if scope is None:
            raise KeyError(name)
        return scope.values[name]

    def assign(self, name: str, value: Value) -> None:
        """Overwrite an existing binding of *name*. Raises KeyError."""
        scope = self._resolve(name)
        if scope is None:
            raise KeyError(name)
        scope.values[name] = value

    def depth(self) -> int:
        """Number of scopes from here to the root, inclusive."""
        return sum(1 for _ in self.chain())

    def chain(self) -> Iterator[Environment]:
        scope: Environment | None = self
        while scope is not None:
            yield scope
            scope = scope.enclosing

    def names(self) -> list[str]:
        """All visible names, innermost first, without duplicates."""
        seen: dict[str, None] = {}
        for scope in self.chain():
            for name in scope.values:
                seen.setdefault(name)
        return list(seen)
