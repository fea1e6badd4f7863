from __future__ import annotations

import numpy as np
from numba import njit


@njit(cache=True)
def shift_for_insert_numba(
    positions: np.ndarray, active: np.ndarray, size: int, index: int, count: int
) -> None:
    for slot in range(size):
        if active[slot] and index <= positions[slot]:
            positions[slot] += count


@njit(cache=True)
def shift_for_remove_numba(
    positions: np.ndarray, active: np.ndarray, size: int, index: int, count: int
) -> None:
    floor = index - 1
    for slot in range(size):
        if active[slot] and positions[slot] >= index:
            shifted = positions[slot] - count
            positions[slot] = shifted if shifted > floor else floor


@njit(cache=True)
def remap_for_removed_numba(
    positions: np.ndarray, active: np.ndarray, size: int, removed: np.ndarray
) -> None:
    total = removed.shape[0]
    for slot in range(size):
        if not active[slot]:
            continue
        pos = positions[slot]
        lo = 0
        hi = total
        while lo < hi:
            mid = (lo + hi) // 2
            if removed[mid] <= pos:
                lo = mid + 1
            else:
                hi = mid
        positions[slot] = pos - lo


@njit(cache=True)
def reset_active_numba(positions: np.ndarray, active: np.ndarray, size: int) -> None:
    for slot in range(size):
        if active[slot]:
            positions[slot] = 0


__all__ = [
    "shift_for_insert_numba",
    "shift_for_remove_numba",
    "remap_for_removed_numba",
    "reset_active_numba",
]
