"""Exception types raised by safelist beyond the built-in ones."""

from __future__ import annotations

from typing import Tuple, Union


def _type_label(expected: Union[type, Tuple[type, ...]]) -> str:
    if isinstance(expected, tuple):
        return " | ".join(kind.__name__ for kind in expected)
    return expected.__name__


class ElementTypeError(TypeError):
    """Raised by checked views when a value does not match the element type."""

    def __init__(self, value: object, expected: Union[type, Tuple[type, ...]]) -> None:
        self.value = value
        self.expected = expected
        super().__init__(
            f"Expected element of type {_type_label(expected)}, got {type(value).__name__}"
        )


class ConcurrentModificationError(RuntimeError):
    """Raised when a bulk operation's callback mutates the list it is scanning."""
