"""Storage and cursor bookkeeping primitives behind `SafeList`."""

from .registry import CursorRegistry, PositionFn
from .store import BackingStore

__all__ = [
    "BackingStore",
    "CursorRegistry",
    "PositionFn",
]
