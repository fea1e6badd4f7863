from __future__ import annotations

from typing import Callable, Sequence

import numpy as np

from safelist import config as sl_config
from safelist.logging import get_logger

LOGGER = get_logger("core.registry")

PositionFn = Callable[[np.ndarray], np.ndarray]


class CursorRegistry:
    """Pool of traversal cursors, each Inactive or holding a position.

    Slot ids are stable for the lifetime of the registry. A released slot is
    recycled by the next `acquire`; new slots are only appended when every
    existing slot is Active.
    """

    def __init__(self, *, reserve: int | None = None, use_numba: bool | None = None) -> None:
        runtime = sl_config.runtime_config()
        reserve = runtime.registry_reserve if reserve is None else reserve
        if reserve < 1:
            raise ValueError(f"reserve must be positive, got {reserve}")
        self._positions = np.zeros(reserve, dtype=np.int64)
        self._active = np.zeros(reserve, dtype=np.bool_)
        self._size = 0
        self._use_numba = runtime.enable_numba if use_numba is None else use_numba
        self._kernels = None
        if self._use_numba:
            from safelist.core import _cursor_numba

            self._kernels = _cursor_numba

    def __len__(self) -> int:
        return self._size

    @property
    def uses_numba(self) -> bool:
        return self._use_numba

    @property
    def active_count(self) -> int:
        return int(np.count_nonzero(self._active[: self._size]))

    def is_active(self, slot: int) -> bool:
        return 0 <= slot < self._size and bool(self._active[slot])

    def active_positions(self) -> dict[int, int]:
        slots = np.flatnonzero(self._active[: self._size])
        return {int(slot): int(self._positions[slot]) for slot in slots}

    def _grow(self) -> None:
        capacity = self._positions.shape[0] * 2
        positions = np.zeros(capacity, dtype=np.int64)
        active = np.zeros(capacity, dtype=np.bool_)
        positions[: self._size] = self._positions[: self._size]
        active[: self._size] = self._active[: self._size]
        self._positions = positions
        self._active = active
        LOGGER.debug("Cursor registry storage grew to %d slots.", capacity)

    def acquire(self) -> int:
        idle = np.flatnonzero(~self._active[: self._size])
        if idle.size:
            slot = int(idle[0])
        else:
            if self._size == self._positions.shape[0]:
                self._grow()
            slot = self._size
            self._size += 1
            LOGGER.debug("Cursor registry now holds %d slots.", self._size)
        self._positions[slot] = 0
        self._active[slot] = True
        return slot

    def release(self, slot: int) -> None:
        if not self.is_active(slot):
            raise ValueError(f"Cursor slot {slot} is not active")
        self._active[slot] = False

    def position(self, slot: int) -> int:
        if not self.is_active(slot):
            raise ValueError(f"Cursor slot {slot} is not active")
        return int(self._positions[slot])

    def advance(self, slot: int) -> int:
        if not self.is_active(slot):
            raise ValueError(f"Cursor slot {slot} is not active")
        self._positions[slot] += 1
        return int(self._positions[slot])

    def for_each_active(self, fn: PositionFn) -> None:
        """Replace every Active position `p` with `fn(p)`, vectorised over slots."""

        positions = self._positions[: self._size]
        mask = self._active[: self._size]
        if not mask.any():
            return
        positions[mask] = np.asarray(fn(positions[mask]), dtype=np.int64)

    def shift_for_insert(self, index: int, count: int = 1) -> None:
        """Account for `count` elements inserted at `index`."""

        if count <= 0:
            return
        if self._kernels is not None:
            self._kernels.shift_for_insert_numba(
                self._positions, self._active, self._size, index, count
            )
            return
        self.for_each_active(lambda p: np.where(p >= index, p + count, p))

    def shift_for_remove(self, index: int, count: int = 1) -> None:
        """Account for `count` elements removed starting at `index`.

        Matches `count` successive single removals at `index`: a cursor at or
        past `index` moves back by one per removal but never below `index - 1`.
        """

        if count <= 0:
            return
        if self._kernels is not None:
            self._kernels.shift_for_remove_numba(
                self._positions, self._active, self._size, index, count
            )
            return
        self.for_each_active(
            lambda p: np.where(p >= index, np.maximum(p - count, index - 1), p)
        )

    def remap_for_removed(self, removed: Sequence[int]) -> None:
        """Account for removal of the elements at sorted original indices `removed`."""

        if len(removed) == 0:
            return
        removed_arr = np.asarray(removed, dtype=np.int64)
        if self._kernels is not None:
            self._kernels.remap_for_removed_numba(
                self._positions, self._active, self._size, removed_arr
            )
            return
        self.for_each_active(
            lambda p: p - np.searchsorted(removed_arr, p, side="right")
        )

    def reset_active(self) -> None:
        if self._kernels is not None:
            self._kernels.reset_active_numba(self._positions, self._active, self._size)
            return
        self.for_each_active(np.zeros_like)


__all__ = ["CursorRegistry", "PositionFn"]
