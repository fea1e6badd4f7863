from __future__ import annotations

from typing import Any, Generic, Iterable, List, TypeVar

T = TypeVar("T")

_DEFAULT_GROWTH = 4
_TRIM_THRESHOLD = 0.9


class BackingStore(Generic[T]):
    """Growable ordered storage with explicit capacity bookkeeping.

    Python lists manage their own allocation, so `capacity` here is a logical
    reservation that grows the way a classic dynamic array does. It is what
    `SafeList.capacity` reports and what `trim_excess` shrinks.
    """

    __slots__ = ("items", "_capacity")

    def __init__(self, items: Iterable[T] | None = None, *, capacity: int = 0) -> None:
        if capacity < 0:
            raise ValueError(f"capacity must be non-negative, got {capacity}")
        self.items: List[T] = [] if items is None else list(items)
        self._capacity = max(capacity, len(self.items))

    def __len__(self) -> int:
        return len(self.items)

    @property
    def capacity(self) -> int:
        return self._capacity

    @capacity.setter
    def capacity(self, value: int) -> None:
        if value < len(self.items):
            raise ValueError(
                f"capacity {value} is smaller than the current length {len(self.items)}"
            )
        self._capacity = value

    def ensure_capacity(self, required: int) -> int:
        if required > self._capacity:
            grown = _DEFAULT_GROWTH if self._capacity == 0 else self._capacity * 2
            self._capacity = max(grown, required)
        return self._capacity

    def trim_excess(self) -> None:
        if len(self.items) < int(self._capacity * _TRIM_THRESHOLD):
            self._capacity = len(self.items)

    def insert(self, index: int, value: T) -> None:
        self.ensure_capacity(len(self.items) + 1)
        self.items.insert(index, value)

    def insert_many(self, index: int, values: List[T]) -> None:
        self.ensure_capacity(len(self.items) + len(values))
        self.items[index:index] = values

    def delete(self, index: int, count: int = 1) -> None:
        del self.items[index : index + count]

    def replace_all(self, values: List[Any]) -> None:
        self.items[:] = values

    def clear(self) -> None:
        self.items.clear()
