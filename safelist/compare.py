"""Orderings accepted by `SafeList.sort` and `SafeList.binary_search`."""

from __future__ import annotations

from functools import cmp_to_key
from typing import Any, Callable, Optional, Protocol, runtime_checkable

Comparison = Callable[[Any, Any], int]


@runtime_checkable
class Comparer(Protocol):
    def compare(self, x: Any, y: Any) -> int:
        ...


def natural_compare(x: Any, y: Any) -> int:
    return (x > y) - (x < y)


class ReverseComparer:
    """Invert another comparer, or the natural ordering when none is given."""

    def __init__(self, inner: Optional[Comparer] = None) -> None:
        self._inner = inner

    def compare(self, x: Any, y: Any) -> int:
        if self._inner is None:
            return natural_compare(y, x)
        return self._inner.compare(y, x)


def resolve_comparison(
    comparer: Optional[Comparer] = None,
    comparison: Optional[Comparison] = None,
) -> Comparison:
    if comparer is not None and comparison is not None:
        raise ValueError("Specify at most one of `comparer` and `comparison`.")
    if comparer is not None:
        if not isinstance(comparer, Comparer):
            raise TypeError(
                f"comparer must define compare(x, y), got {type(comparer).__name__}"
            )
        return comparer.compare
    if comparison is not None:
        return comparison
    return natural_compare


def resolve_sort_key(
    comparer: Optional[Comparer] = None,
    comparison: Optional[Comparison] = None,
    key: Optional[Callable[[Any], Any]] = None,
) -> Optional[Callable[[Any], Any]]:
    if key is not None:
        if comparer is not None or comparison is not None:
            raise ValueError("`key` cannot be combined with `comparer` or `comparison`.")
        return key
    if comparer is None and comparison is None:
        return None
    return cmp_to_key(resolve_comparison(comparer, comparison))


__all__ = [
    "Comparer",
    "Comparison",
    "ReverseComparer",
    "natural_compare",
    "resolve_comparison",
    "resolve_sort_key",
]
