from __future__ import annotations

import logging

import numpy as np
import pytest

from safelist.core.registry import CursorRegistry


@pytest.fixture(params=[False, True], ids=["numpy", "numba"])
def use_numba(request) -> bool:
    if request.param:
        pytest.importorskip("numba")
    return request.param


def _registry_at(positions, *, use_numba: bool, inactive=()) -> CursorRegistry:
    registry = CursorRegistry(reserve=2, use_numba=use_numba)
    for target in positions:
        slot = registry.acquire()
        for _ in range(target):
            registry.advance(slot)
    for slot in inactive:
        registry.release(slot)
    return registry


def test_acquire_reuses_released_slots():
    registry = CursorRegistry(reserve=1, use_numba=False)
    first = registry.acquire()
    second = registry.acquire()
    assert (first, second) == (0, 1)

    registry.release(first)
    assert registry.acquire() == 0
    assert len(registry) == 2
    assert registry.active_count == 2


def test_acquire_resets_recycled_position():
    registry = CursorRegistry(use_numba=False)
    slot = registry.acquire()
    registry.advance(slot)
    registry.advance(slot)
    registry.release(slot)

    assert registry.acquire() == slot
    assert registry.position(slot) == 0


def test_growth_preserves_existing_positions():
    registry = _registry_at([3, 1, 4, 1, 5], use_numba=False)
    assert len(registry) == 5
    assert registry.active_positions() == {0: 3, 1: 1, 2: 4, 3: 1, 4: 5}


def test_release_requires_active_slot():
    registry = CursorRegistry(use_numba=False)
    slot = registry.acquire()
    registry.release(slot)
    with pytest.raises(ValueError):
        registry.release(slot)
    with pytest.raises(ValueError):
        registry.release(7)
    with pytest.raises(ValueError):
        registry.position(slot)


def test_reserve_must_be_positive():
    with pytest.raises(ValueError):
        CursorRegistry(reserve=0)


def test_for_each_active_skips_inactive_slots():
    registry = _registry_at([1, 2, 3], use_numba=False, inactive=(1,))
    registry.for_each_active(lambda p: p * 10)
    assert registry.active_positions() == {0: 10, 2: 30}

    registry.acquire()
    assert registry.active_positions() == {0: 10, 1: 0, 2: 30}


def test_for_each_active_with_no_active_slots():
    registry = CursorRegistry(use_numba=False)
    calls = []
    registry.for_each_active(lambda p: calls.append(p) or p)
    assert calls == []


def test_shift_for_insert(use_numba):
    registry = _registry_at([0, 2, 5], use_numba=use_numba)
    registry.shift_for_insert(2)
    assert registry.active_positions() == {0: 0, 1: 3, 2: 6}

    registry.shift_for_insert(4, count=3)
    assert registry.active_positions() == {0: 0, 1: 3, 2: 9}


def test_shift_for_remove(use_numba):
    registry = _registry_at([0, 2, 5], use_numba=use_numba)
    registry.shift_for_remove(2)
    assert registry.active_positions() == {0: 0, 1: 1, 2: 4}


def test_shift_for_remove_range_never_passes_range_start(use_numba):
    registry = _registry_at([0, 1, 2, 5], use_numba=use_numba)
    registry.shift_for_remove(1, count=3)
    assert registry.active_positions() == {0: 0, 1: 0, 2: 0, 3: 2}


def test_shift_for_remove_at_zero_goes_negative(use_numba):
    registry = _registry_at([0], use_numba=use_numba)
    registry.shift_for_remove(0)
    assert registry.active_positions() == {0: -1}
    assert registry.advance(0) == 0


def test_remap_for_removed(use_numba):
    registry = _registry_at([0, 1, 2, 3, 4], use_numba=use_numba)
    registry.remap_for_removed([1, 3])
    assert registry.active_positions() == {0: 0, 1: 0, 2: 1, 3: 1, 4: 2}


def test_reset_active_leaves_inactive_slots_alone(use_numba):
    registry = _registry_at([2, 4, 6], use_numba=use_numba, inactive=(1,))
    registry.reset_active()
    assert registry.active_positions() == {0: 0, 2: 0}
    assert registry.active_count == 2


@pytest.mark.parametrize(
    "operation",
    [
        lambda r: r.shift_for_insert(3, count=2),
        lambda r: r.shift_for_remove(2, count=4),
        lambda r: r.remap_for_removed([0, 2, 3, 7]),
        lambda r: r.reset_active(),
    ],
    ids=["insert", "remove", "remap", "reset"],
)
def test_numba_kernels_match_numpy(operation):
    pytest.importorskip("numba")
    rng = np.random.default_rng(5)
    positions = rng.integers(0, 12, size=16).tolist()
    inactive = (1, 6, 11)

    baseline = _registry_at(positions, use_numba=False, inactive=inactive)
    accelerated = _registry_at(positions, use_numba=True, inactive=inactive)
    operation(baseline)
    operation(accelerated)

    assert accelerated.uses_numba and not baseline.uses_numba
    assert accelerated.active_positions() == baseline.active_positions()


def test_growth_is_logged(caplog: pytest.LogCaptureFixture):
    registry = CursorRegistry(reserve=1, use_numba=False)
    with caplog.at_level(logging.DEBUG, logger="safelist.core.registry"):
        registry.acquire()
        registry.acquire()
    assert "grew to 2 slots" in caplog.text
