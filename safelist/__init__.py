"""safelist: an ordered list that stays safe to iterate while it is mutated.

Quick Start
-----------
>>> from safelist import SafeList
>>>
>>> items = SafeList(["zero", "one", "two", "three", "four"])
>>> seen = []
>>> for item in items:
...     seen.append(item)
...     if item == "two":
...         items.remove("three")
...         items.append("five")
>>> seen
['zero', 'one', 'two', 'four', 'five']

Classes
-------
SafeList : The list itself, with iteration, `for_each` and `reader` traversals.
Traversal : Explicitly driven traversal returned by `SafeList.reader`.
CheckedListView : Untyped view enforcing an element type at the boundary.
ReadOnlyView : Live read-only view returned by `SafeList.as_read_only`.
"""

from importlib.metadata import version as _pkg_version

try:
    __version__ = _pkg_version("safelist")
except Exception:  # pragma: no cover - best effort during local development
    __version__ = "0.0.1"

from .compare import Comparer, ReverseComparer, natural_compare
from .core import BackingStore, CursorRegistry
from .errors import ConcurrentModificationError, ElementTypeError
from .safe_list import SafeList
from .traversal import Traversal, TraversalState
from .views import CheckedListView, ReadOnlyView

__all__ = [
    "__version__",
    "SafeList",
    "Traversal",
    "TraversalState",
    "CheckedListView",
    "ReadOnlyView",
    "Comparer",
    "ReverseComparer",
    "natural_compare",
    "BackingStore",
    "CursorRegistry",
    "ConcurrentModificationError",
    "ElementTypeError",
]
