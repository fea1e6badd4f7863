"""`SafeList`: an ordered list that can be mutated while it is being iterated.

Every traversal (a ``for`` loop, `SafeList.for_each`, or an explicit
`SafeList.reader`) owns a cursor in the list's `CursorRegistry`. Structural
mutations rewrite those cursors so that each traversal observes:

- elements inserted after its current position, once it reaches them;
- nothing of elements inserted at or before its current position;
- no change from elements removed at or before its current position;
- no trace of elements removed after its current position.

Sorting and reversing leave cursors untouched, so a traversal that spans a sort
continues by index over the reordered contents.
"""

from __future__ import annotations

import operator
from itertools import compress
from typing import (
    Any,
    Callable,
    Iterable,
    Iterator,
    List,
    MutableSequence,
    Optional,
    Sequence,
    TYPE_CHECKING,
    Tuple,
    TypeVar,
    Union,
)

import numpy as np

from safelist.compare import Comparer, Comparison, resolve_comparison, resolve_sort_key
from safelist.core.registry import CursorRegistry
from safelist.core.store import BackingStore
from safelist.errors import ConcurrentModificationError
from safelist.logging import get_logger
from safelist.traversal import Traversal

if TYPE_CHECKING:
    from safelist.views import ReadOnlyView

LOGGER = get_logger("safe_list")

T = TypeVar("T")
U = TypeVar("U")

Predicate = Callable[[T], bool]


class SafeList(MutableSequence[T]):
    """Ordered, index-addressable list that tolerates mutation during traversal.

    Parameters
    ----------
    items:
        Optional initial contents, copied in order.
    capacity:
        Initial capacity reservation. Ignored when smaller than ``len(items)``.
    """

    def __init__(self, items: Optional[Iterable[T]] = None, *, capacity: int = 0) -> None:
        self._store: BackingStore[T] = BackingStore(items, capacity=capacity)
        self._registry = CursorRegistry()
        self._version = 0

    # ------------------------------------------------------------------
    # Validation helpers
    # ------------------------------------------------------------------

    def _check_index(self, index: int, *, allow_end: bool = False) -> int:
        index = operator.index(index)
        limit = len(self._store) if allow_end else len(self._store) - 1
        if index < 0 or index > limit:
            raise IndexError(
                f"index {index} out of range for SafeList of length {len(self._store)}"
            )
        return index

    def _normalise_index(self, index: int) -> int:
        index = operator.index(index)
        if index < 0:
            index += len(self._store)
        return self._check_index(index)

    def _resolve_range(self, index: int, count: Optional[int]) -> Tuple[int, int]:
        length = len(self._store)
        index = operator.index(index)
        if index < 0 or index > length:
            raise IndexError(f"index {index} out of range for SafeList of length {length}")
        count = length - index if count is None else operator.index(count)
        if count < 0 or index + count > length:
            raise IndexError(
                f"range [{index}, {index + count}) exceeds SafeList of length {length}"
            )
        return index, index + count

    def _resolve_backward_range(self, index: Optional[int], count: Optional[int]) -> range:
        length = len(self._store)
        if index is None:
            index = length - 1
        index = operator.index(index)
        if length == 0:
            return range(0)
        if index < 0 or index >= length:
            raise IndexError(f"index {index} out of range for SafeList of length {length}")
        count = index + 1 if count is None else operator.index(count)
        if count < 0 or count > index + 1:
            raise IndexError(f"count {count} reaches before the start of the SafeList")
        return range(index, index - count, -1)

    # ------------------------------------------------------------------
    # Capacity
    # ------------------------------------------------------------------

    @property
    def capacity(self) -> int:
        return self._store.capacity

    @capacity.setter
    def capacity(self, value: int) -> None:
        self._store.capacity = value

    def ensure_capacity(self, capacity: int) -> int:
        return self._store.ensure_capacity(capacity)

    def trim_excess(self) -> None:
        self._store.trim_excess()

    @property
    def cursor_registry(self) -> CursorRegistry:
        return self._registry

    # ------------------------------------------------------------------
    # Sequence protocol
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._store)

    def __getitem__(self, index: Union[int, slice]) -> Any:
        """Return one element, or a plain `list` copy for a slice (as `get_range` does).

        Slices do not build a new `SafeList`; the copy carries no cursor registry.
        """

        if isinstance(index, slice):
            return self._store.items[index]
        return self._store.items[self._normalise_index(index)]

    def __setitem__(self, index: Union[int, slice], value: Any) -> None:
        """Replace elements in place.

        Replacing a contiguous slice with a different number of elements is a
        removal followed by an insertion and adjusts cursors accordingly.
        """

        if not isinstance(index, slice):
            self._store.items[self._normalise_index(index)] = value
            return
        values = list(value)
        start, stop, step = index.indices(len(self._store))
        if step != 1:
            self._store.items[index] = values
            return
        stop = max(start, stop)
        if len(values) == stop - start:
            self._store.items[start:stop] = values
            return
        self.remove_range(start, stop - start)
        self.insert_range(start, values)

    def __delitem__(self, index: Union[int, slice]) -> None:
        if not isinstance(index, slice):
            self.remove_at(self._normalise_index(index))
            return
        start, stop, step = index.indices(len(self._store))
        if step == 1:
            self.remove_range(start, max(0, stop - start))
            return
        self._remove_indices(sorted(range(start, stop, step)))

    def __contains__(self, value: object) -> bool:
        return value in self._store.items

    def __iter__(self) -> Iterator[T]:
        with self.reader() as traversal:
            while traversal.move_next():
                yield traversal.current

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SafeList):
            return self._store.items == other._store.items
        if isinstance(other, list):
            return self._store.items == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._store.items!r})"

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def reader(self) -> Traversal[T]:
        """Return a step-wise traversal driven by `Traversal.move_next`."""

        return Traversal(self._store, self._registry)

    def for_each(self, action: Callable[[T], Any]) -> None:
        with self.reader() as traversal:
            while traversal.move_next():
                action(traversal.current)

    # ------------------------------------------------------------------
    # Structural mutation
    # ------------------------------------------------------------------

    def insert(self, index: int, value: T) -> None:
        index = self._check_index(index, allow_end=True)
        self._store.insert(index, value)
        self._registry.shift_for_insert(index)
        self._version += 1

    def insert_range(self, index: int, values: Iterable[T]) -> None:
        index = self._check_index(index, allow_end=True)
        values = list(values)
        if not values:
            return
        self._store.insert_many(index, values)
        self._registry.shift_for_insert(index, len(values))
        self._version += 1

    def append(self, value: T) -> None:
        self.insert(len(self._store), value)

    def add_range(self, values: Iterable[T]) -> None:
        self.insert_range(len(self._store), values)

    def extend(self, values: Iterable[T]) -> None:
        self.add_range(values)

    def remove(self, value: T) -> bool:
        """Remove the first occurrence of `value`; return whether one was found."""

        index = self.index_of(value)
        if index < 0:
            return False
        self.remove_at(index)
        return True

    def remove_at(self, index: int) -> None:
        index = self._check_index(index)
        self._store.delete(index)
        self._registry.shift_for_remove(index)
        self._version += 1

    def pop(self, index: int = -1) -> T:
        if not self._store.items:
            raise IndexError("pop from empty SafeList")
        index = self._normalise_index(index)
        value = self._store.items[index]
        self.remove_at(index)
        return value

    def remove_range(self, index: int, count: int) -> None:
        start, stop = self._resolve_range(index, count)
        if start == stop:
            return
        self._store.delete(start, stop - start)
        self._registry.shift_for_remove(start, stop - start)
        self._version += 1

    def remove_all(self, match: Predicate[T]) -> int:
        """Remove every element satisfying `match` and return how many went.

        `match` is evaluated once per element, left to right, before anything is
        removed. Structural changes made by `match` itself are rejected.
        """

        version = self._version
        snapshot = list(self._store.items)
        flags = [bool(match(item)) for item in snapshot]
        if self._version != version:
            raise ConcurrentModificationError("SafeList was modified by the remove_all predicate")
        removed = [index for index, flag in enumerate(flags) if flag]
        if removed:
            self._remove_indices(removed)
        return len(removed)

    def _remove_indices(self, removed: Sequence[int]) -> None:
        if not removed:
            return
        drop = set(removed)
        keep = [index not in drop for index in range(len(self._store))]
        self._store.replace_all(list(compress(self._store.items, keep)))
        self._registry.remap_for_removed(removed)
        self._version += 1
        LOGGER.debug("Removed %d elements in bulk.", len(removed))

    def clear(self) -> None:
        self._store.clear()
        self._registry.reset_active()
        self._version += 1

    # ------------------------------------------------------------------
    # Reordering (cursors are positional and stay where they are)
    # ------------------------------------------------------------------

    def sort(
        self,
        comparer: Optional[Comparer] = None,
        *,
        comparison: Optional[Comparison] = None,
        key: Optional[Callable[[T], Any]] = None,
        reverse: bool = False,
        index: int = 0,
        count: Optional[int] = None,
    ) -> None:
        sort_key = resolve_sort_key(comparer, comparison, key)
        start, stop = self._resolve_range(index, count)
        items = self._store.items
        if start == 0 and stop == len(items):
            items.sort(key=sort_key, reverse=reverse)
        else:
            items[start:stop] = sorted(items[start:stop], key=sort_key, reverse=reverse)

    def reverse(self, index: int = 0, count: Optional[int] = None) -> None:
        start, stop = self._resolve_range(index, count)
        items = self._store.items
        items[start:stop] = items[start:stop][::-1]

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def index_of(self, value: T, index: int = 0, count: Optional[int] = None) -> int:
        start, stop = self._resolve_range(index, count)
        try:
            return self._store.items.index(value, start, stop)
        except ValueError:
            return -1

    def last_index_of(
        self, value: T, index: Optional[int] = None, count: Optional[int] = None
    ) -> int:
        items = self._store.items
        for position in self._resolve_backward_range(index, count):
            if items[position] == value:
                return position
        return -1

    def count(self, value: T) -> int:
        return self._store.items.count(value)

    def binary_search(
        self,
        item: T,
        comparer: Optional[Comparer] = None,
        *,
        comparison: Optional[Comparison] = None,
        index: int = 0,
        count: Optional[int] = None,
    ) -> int:
        """Locate `item` in a sorted range.

        Returns the index of a matching element, or the bitwise complement of
        the insertion point (a negative number) when there is none.
        """

        compare = resolve_comparison(comparer, comparison)
        start, stop = self._resolve_range(index, count)
        items = self._store.items
        lo, hi = start, stop - 1
        while lo <= hi:
            mid = lo + (hi - lo) // 2
            order = compare(items[mid], item)
            if order == 0:
                return mid
            if order < 0:
                lo = mid + 1
            else:
                hi = mid - 1
        return ~lo

    def exists(self, match: Predicate[T]) -> bool:
        return any(match(item) for item in self._store.items)

    def true_for_all(self, match: Predicate[T]) -> bool:
        return all(match(item) for item in self._store.items)

    def find(self, match: Predicate[T], default: Optional[T] = None) -> Optional[T]:
        for item in self._store.items:
            if match(item):
                return item
        return default

    def find_last(self, match: Predicate[T], default: Optional[T] = None) -> Optional[T]:
        for item in reversed(self._store.items):
            if match(item):
                return item
        return default

    def find_all(self, match: Predicate[T]) -> List[T]:
        return [item for item in self._store.items if match(item)]

    def find_index(
        self, match: Predicate[T], index: int = 0, count: Optional[int] = None
    ) -> int:
        start, stop = self._resolve_range(index, count)
        items = self._store.items
        for position in range(start, stop):
            if match(items[position]):
                return position
        return -1

    def find_last_index(
        self, match: Predicate[T], index: Optional[int] = None, count: Optional[int] = None
    ) -> int:
        items = self._store.items
        for position in self._resolve_backward_range(index, count):
            if match(items[position]):
                return position
        return -1

    # ------------------------------------------------------------------
    # Copies and conversion
    # ------------------------------------------------------------------

    def get_range(self, index: int, count: int) -> List[T]:
        start, stop = self._resolve_range(index, count)
        return self._store.items[start:stop]

    def copy_to(
        self,
        array: MutableSequence[Any],
        array_index: int = 0,
        *,
        index: int = 0,
        count: Optional[int] = None,
    ) -> None:
        """Copy ``count`` elements starting at ``index`` into ``array[array_index:]``.

        `array` may be a list or a numpy array; it must already be long enough.
        """

        start, stop = self._resolve_range(index, count)
        array_index = operator.index(array_index)
        if array_index < 0:
            raise IndexError(f"array_index must be non-negative, got {array_index}")
        needed = array_index + (stop - start)
        if needed > len(array):
            raise ValueError(
                f"destination of length {len(array)} cannot hold {stop - start} "
                f"elements at offset {array_index}"
            )
        array[array_index:needed] = self._store.items[start:stop]

    def convert_all(self, converter: Callable[[T], U]) -> List[U]:
        return [converter(item) for item in self._store.items]

    def to_array(self, dtype: Any = None) -> np.ndarray:
        """Return a fixed-size numpy copy; elements are kept as objects unless `dtype` is given."""

        items = self._store.items
        return np.fromiter(items, dtype=object if dtype is None else dtype, count=len(items))

    def to_list(self) -> List[T]:
        return list(self._store.items)

    def copy(self) -> "SafeList[T]":
        return type(self)(self._store.items, capacity=self._store.capacity)

    def as_read_only(self) -> "ReadOnlyView[T]":
        from safelist.views import ReadOnlyView

        return ReadOnlyView(self)


__all__ = ["SafeList", "Predicate"]
