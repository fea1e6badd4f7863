from __future__ import annotations

import enum
from typing import Generic, Iterator, Optional, TypeVar

from safelist.core.registry import CursorRegistry
from safelist.core.store import BackingStore
from safelist.logging import get_logger

LOGGER = get_logger("traversal")

T = TypeVar("T")


class TraversalState(enum.Enum):
    START = "start"
    RUNNING = "running"
    DONE = "done"


class Traversal(Generic[T]):
    """One restartable pass over a list, driven one element at a time.

    The cursor slot is claimed on the first `move_next` and released as soon
    as the cursor reaches the live length or the traversal is closed. The
    cursor is re-read from the registry on every step, so insertions and
    removals made between steps are reflected in what comes next.
    """

    __slots__ = ("_store", "_registry", "_slot", "_state", "_current")

    def __init__(self, store: BackingStore[T], registry: CursorRegistry) -> None:
        self._store = store
        self._registry = registry
        self._slot: Optional[int] = None
        self._state = TraversalState.START
        self._current: Optional[T] = None

    @property
    def state(self) -> TraversalState:
        return self._state

    @property
    def slot(self) -> Optional[int]:
        return self._slot

    @property
    def position(self) -> Optional[int]:
        """Index of `current` in the live list, or None outside RUNNING."""

        if self._state is not TraversalState.RUNNING:
            return None
        return self._registry.position(self._slot)

    @property
    def current(self) -> T:
        if self._state is not TraversalState.RUNNING:
            raise RuntimeError(
                f"No current element while traversal is {self._state.value}"
            )
        return self._current

    def move_next(self) -> bool:
        if self._state is TraversalState.DONE:
            return False
        if self._state is TraversalState.START:
            self._slot = self._registry.acquire()
            self._state = TraversalState.RUNNING
            position = 0
            LOGGER.debug("Traversal started on cursor slot %d.", self._slot)
        else:
            position = self._registry.advance(self._slot)
        if position < len(self._store):
            self._current = self._store.items[position]
            return True
        self._finish()
        return False

    def close(self) -> None:
        if self._state is TraversalState.RUNNING:
            self._finish()
        self._state = TraversalState.DONE

    def _finish(self) -> None:
        self._registry.release(self._slot)
        LOGGER.debug("Traversal on cursor slot %d finished.", self._slot)
        self._state = TraversalState.DONE
        self._current = None

    def __iter__(self) -> Iterator[T]:
        return self

    def __next__(self) -> T:
        if self.move_next():
            return self._current
        raise StopIteration

    def __enter__(self) -> "Traversal[T]":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


__all__ = ["Traversal", "TraversalState"]
