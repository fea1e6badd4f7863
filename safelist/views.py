"""Adapters that expose a `SafeList` through narrower or untyped interfaces."""

from __future__ import annotations

from typing import Any, Iterable, Iterator, MutableSequence, Sequence, Tuple, TypeVar, Union

from safelist.errors import ElementTypeError
from safelist.safe_list import SafeList

T = TypeVar("T")

ElementType = Union[type, Tuple[type, ...]]


class ReadOnlyView(Sequence[T]):
    """Live, non-mutating view of a `SafeList`."""

    __slots__ = ("_source",)

    def __init__(self, source: SafeList[T]) -> None:
        self._source = source

    def __len__(self) -> int:
        return len(self._source)

    def __getitem__(self, index):
        return self._source[index]

    def __iter__(self) -> Iterator[T]:
        return iter(self._source)

    def __contains__(self, value: object) -> bool:
        return value in self._source

    def index_of(self, value: T) -> int:
        return self._source.index_of(value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._source.to_list()!r})"


class CheckedListView(MutableSequence[Any]):
    """Object-typed view that validates every incoming value against `element_type`.

    Values are checked before the underlying list is touched, so a rejected call
    leaves both the elements and any in-flight traversals unchanged.
    """

    def __init__(self, source: SafeList[Any], element_type: ElementType) -> None:
        self._source = source
        self._element_type = element_type

    @property
    def element_type(self) -> ElementType:
        return self._element_type

    @property
    def source(self) -> SafeList[Any]:
        return self._source

    def _check(self, value: object) -> Any:
        if not isinstance(value, self._element_type):
            raise ElementTypeError(value, self._element_type)
        return value

    def _check_all(self, values: Iterable[object]) -> list:
        return [self._check(value) for value in values]

    def __len__(self) -> int:
        return len(self._source)

    def __getitem__(self, index):
        return self._source[index]

    def __setitem__(self, index, value) -> None:
        if isinstance(index, slice):
            self._source[index] = self._check_all(value)
        else:
            self._source[index] = self._check(value)

    def __delitem__(self, index) -> None:
        del self._source[index]

    def __iter__(self) -> Iterator[Any]:
        return iter(self._source)

    def __contains__(self, value: object) -> bool:
        return self._check(value) in self._source

    def insert(self, index: int, value: Any) -> None:
        self._source.insert(index, self._check(value))

    def append(self, value: Any) -> int:
        """Append `value` and return the index it landed at."""

        self._check(value)
        index = len(self._source)
        self._source.append(value)
        return index

    def extend(self, values: Iterable[Any]) -> None:
        self._source.add_range(self._check_all(values))

    def remove(self, value: Any) -> bool:
        return self._source.remove(self._check(value))

    def index_of(self, value: Any) -> int:
        return self._source.index_of(self._check(value))

    def clear(self) -> None:
        self._source.clear()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._source.to_list()!r}, {self._element_type!r})"


__all__ = ["CheckedListView", "ElementType", "ReadOnlyView"]
