"""Generic Maven-style version ordering.

Versions are split into items at ``.``, ``-`` and ``_`` and at every switch
between digits and letters. Numeric items compare numerically, well-known
qualifiers by their release rank, and any other word lexically. A version that
runs out of items is compared against implicit padding, so ``1``, ``1.0`` and
``1-ga`` are equal while ``1.0-SNAPSHOT`` sorts before ``1.0``.
"""
from __future__ import annotations

from functools import total_ordering
from typing import List, Optional, Tuple

# Item kinds; a larger kind sorts after a smaller one at the same position.
KIND_INT = 4
KIND_STRING = 3
KIND_QUALIFIER = 2

QUALIFIER_ALPHA = -5
QUALIFIER_BETA = -4
QUALIFIER_MILESTONE = -3

QUALIFIERS = {
    "alpha": QUALIFIER_ALPHA,
    "beta": QUALIFIER_BETA,
    "milestone": QUALIFIER_MILESTONE,
    "cr": -2,
    "rc": -2,
    "snapshot": -1,
    "ga": 0,
    "final": 0,
    "release": 0,
    "": 0,
    "sp": 1,
}

_SHORT_QUALIFIERS = {
    "a": QUALIFIER_ALPHA,
    "b": QUALIFIER_BETA,
    "m": QUALIFIER_MILESTONE,
}

_SEPARATORS = ".-_"


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


class _Item:
    """One component of a parsed version."""

    __slots__ = ("kind", "value")

    def __init__(self, kind: int, value):
        self.kind = kind
        self.value = value

    def is_number(self) -> bool:
        return self.kind == KIND_INT

    def compare_padding(self) -> int:
        """Compare this item with the implicit padding of a shorter version."""
        if self.kind == KIND_INT:
            return _sign(self.value)
        if self.kind == KIND_QUALIFIER:
            return _sign(self.value)
        return 1

    def compare(self, other: "_Item") -> int:
        rel = self.kind - other.kind
        if rel != 0:
            return rel
        if self.kind == KIND_STRING:
            return (self.value > other.value) - (self.value < other.value)
        return _sign(self.value - other.value)

    def __repr__(self) -> str:
        return f"_Item({self.kind}, {self.value!r})"


def _tokenize(version: str) -> List[Tuple[str, bool, bool]]:
    """Split a version into (token, is_number, terminated_by_number) triples."""
    text = version if version else "0"
    length = len(text)
    tokens: List[Tuple[str, bool, bool]] = []
    index = 0
    while index < length:
        # state: -2 nothing yet, -1 letters, 0 only zeros so far, 1 digits
        state = -2
        start = index
        end = length
        terminated_by_number = False
        while index < length:
            char = text[index]
            if char in _SEPARATORS:
                end = index
                index += 1
                break
            if "0" <= char <= "9":
                if state == -1:
                    end = index
                    terminated_by_number = True
                    break
                if state == 0:
                    start += 1
                state = 1 if (state > 0 or char != "0") else 0
            else:
                if state >= 0:
                    end = index
                    break
                state = -1
            index += 1
        if end - start > 0:
            tokens.append((text[start:end], state >= 0, terminated_by_number))
        else:
            tokens.append(("0", True, False))
    return tokens


def _to_item(token: str, number: bool, terminated_by_number: bool) -> _Item:
    if number:
        return _Item(KIND_INT, int(token))
    lowered = token.lower()
    if len(lowered) == 1 and terminated_by_number and lowered in _SHORT_QUALIFIERS:
        return _Item(KIND_QUALIFIER, _SHORT_QUALIFIERS[lowered])
    if lowered in QUALIFIERS:
        return _Item(KIND_QUALIFIER, QUALIFIERS[lowered])
    return _Item(KIND_STRING, lowered)


def _compare_padding(items: List[_Item], index: int, number: Optional[bool]) -> int:
    rel = 0
    for item in items[index:]:
        if number is not None and number != item.is_number():
            break
        rel = item.compare_padding()
        if rel != 0:
            break
    return rel


@total_ordering
class GenericVersion:
    """A parsed version supporting Maven-style ordering.

    Example:
        >>> GenericVersion("4.8.2") < GenericVersion("4.10")
        True
    """

    def __init__(self, version: str):
        if version is None:
            raise ValueError("version must not be None")
        self._version = version.strip()
        self._items = [_to_item(*token) for token in _tokenize(self._version)]

    def compare(self, other: "GenericVersion") -> int:
        """Return a negative, zero or positive int like a classic comparator."""
        these = self._items
        those = other._items
        number = True
        index = 0
        while True:
            if index >= len(these) and index >= len(those):
                return 0
            if index >= len(these):
                return -_compare_padding(those, index, None)
            if index >= len(those):
                return _compare_padding(these, index, None)
            this_item = these[index]
            that_item = those[index]
            if this_item.is_number() != that_item.is_number():
                if number == this_item.is_number():
                    return _compare_padding(these, index, number)
                return -_compare_padding(those, index, number)
            rel = this_item.compare(that_item)
            if rel != 0:
                return rel
            number = this_item.is_number()
            index += 1

    def __eq__(self, other) -> bool:
        if not isinstance(other, GenericVersion):
            return NotImplemented
        return self.compare(other) == 0

    def __lt__(self, other) -> bool:
        if not isinstance(other, GenericVersion):
            return NotImplemented
        return self.compare(other) < 0

    def __hash__(self) -> int:
        # Equal versions may differ in padding, so only the leading
        # non-padding numbers take part in the hash.
        significant = []
        for item in self._items:
            if not item.is_number():
                break
            significant.append(item.value)
        while significant and significant[-1] == 0:
            significant.pop()
        return hash(tuple(significant))

    def __str__(self) -> str:
        return self._version

    def __repr__(self) -> str:
        return f"GenericVersion({self._version!r})"


def compare_versions(left: str, right: str) -> int:
    """Compare two version strings with the generic ordering."""
    return GenericVersion(left).compare(GenericVersion(right))
