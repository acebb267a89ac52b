"""Utility functions for fault reporting."""

from collections.abc import Mapping, Sequence
from numbers import Number
from typing import Any, Iterable

from .constants import MAX_RECURSIVE_ITEMS


def _is_sequential(value: Any) -> bool:
    """
    Whether a collection is keyed by exactly 0..n-1.

    Non-string sequences always are; non-empty mappings are when their keys
    are the integers 0..n-1 in order.
    """
    if isinstance(value, Mapping):
        # An empty mapping has no 0..n-1 keys, so it counts as keyed
        return bool(value) and list(value.keys()) == list(range(len(value)))
    return True


def _format_argument(value: Any, allow_recursion: bool) -> str:
    """Format a single call argument for display in a trace."""
    if isinstance(value, str):
        return f'"{value}"'

    if value is None or isinstance(value, (bytes, bytearray, bool, Number)):
        try:
            return str(value)
        except Exception:
            return f"Object({type(value).__name__})"

    if isinstance(value, (Mapping, Sequence)):
        # Only small keyed collections are expanded, and only one level deep
        if (
            allow_recursion
            and not _is_sequential(value)
            and len(value) <= MAX_RECURSIVE_ITEMS
        ):
            return f"[{format_arguments(value.values())}]"
        return ""

    # Never look inside other objects, just show their type
    return f"Object({type(value).__name__})"


def format_arguments(values: Iterable[Any], allow_recursion: bool = False) -> str:
    """
    Format call arguments so they can be displayed in a stack trace.

    Parameters:
        values: the arguments to format, in call order
        allow_recursion: whether small keyed collections may be expanded
            one level deep

    Returns:
        The formatted values separated by commas. Collections that are not
        expanded leave an empty entry in their place.
    """
    return ", ".join(_format_argument(value, allow_recursion) for value in values)
