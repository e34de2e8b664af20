"""Word adjacency helpers (Hamming distance over equal-length words)."""

from __future__ import annotations

from ..core.exceptions import LengthMismatchError


def hamming(a: str, b: str) -> int:
    """Count differing positions between ``a`` and ``b``, ignoring case."""

    if len(a) != len(b):
        raise LengthMismatchError(
            f"Cannot compare '{a}' ({len(a)} letters) with '{b}' ({len(b)} letters)"
        )
    return sum(1 for x, y in zip(a.upper(), b.upper()) if x != y)


def is_adjacent(a: str, b: str) -> bool:
    return hamming(a, b) == 1


def matches_pattern(word: str, pattern: str) -> bool:
    """Return True when ``word`` fits ``pattern`` where ``?`` is a wildcard."""

    if not pattern:
        return True
    if len(word) != len(pattern):
        return False
    return all(p == "?" or w.upper() == p.upper() for w, p in zip(word, pattern))


__all__ = ["hamming", "is_adjacent", "matches_pattern"]
