"""Dependency filters applied to collected graphs."""
from __future__ import annotations

import re
from typing import FrozenSet, Iterable, Sequence

from constants import Scopes
from common.errors import ConfigurationError
from .service import DependencyNode

_CLASSPATH_SCOPES = {
    Scopes.COMPILE.value: (Scopes.COMPILE, Scopes.PROVIDED, Scopes.SYSTEM),
    Scopes.RUNTIME.value: (Scopes.COMPILE, Scopes.RUNTIME),
    Scopes.TEST.value: (
        Scopes.COMPILE,
        Scopes.PROVIDED,
        Scopes.RUNTIME,
        Scopes.SYSTEM,
        Scopes.TEST,
    ),
}

_KNOWN_SCOPES = {s.value for s in Scopes}


class ScopeDependencyFilter:
    """Accepts nodes whose dependency scope is one of ``included``."""

    def __init__(self, included: Iterable[str]):
        self.included: FrozenSet[str] = frozenset(included)

    def accept(self, node: DependencyNode, parents: Sequence[DependencyNode]) -> bool:
        return node.dependency.scope in self.included

    def __repr__(self) -> str:
        return f"ScopeDependencyFilter({sorted(self.included)})"


class NonOptionalFilter:
    """Rejects optional dependencies."""

    def accept(self, node: DependencyNode, parents: Sequence[DependencyNode]) -> bool:
        return not node.dependency.optional

    def __repr__(self) -> str:
        return "NonOptionalFilter()"


class AndDependencyFilter:
    """Accepts a node only when every wrapped filter accepts it."""

    def __init__(self, *filters):
        self.filters = tuple(f for f in filters if f is not None)

    def accept(self, node: DependencyNode, parents: Sequence[DependencyNode]) -> bool:
        return all(f.accept(node, parents) for f in self.filters)


def classpath_filter(*classpath_types: str) -> ScopeDependencyFilter:
    """Build the scope filter for a classpath type such as "runtime" or "compile+runtime".

    Args:
        classpath_types: Classpath types; tokens may be joined with "+" or ",".

    Returns:
        ScopeDependencyFilter accepting the scopes visible on that classpath.

    Raises:
        ConfigurationError: No type given, or a token is not a known scope.
    """
    tokens = []
    for classpath_type in classpath_types:
        if classpath_type is None:
            continue
        tokens.extend(t.strip() for t in re.split(r"[+,]", classpath_type) if t.strip())
    if not tokens:
        joined = "+".join(t for t in classpath_types if t)
        raise ConfigurationError(f"failed to create a filter for '{joined}'")
    included = set()
    for token in tokens:
        if token in _CLASSPATH_SCOPES:
            included.update(s.value for s in _CLASSPATH_SCOPES[token])
        elif token in _KNOWN_SCOPES:
            included.add(token)
        else:
            raise ConfigurationError(f"failed to create a filter for '{token}'")
    return ScopeDependencyFilter(included)
