from __future__ import annotations

from collections import abc
from typing import Any, Optional

from keypage import exc

from .base import Cursor, CursorType


def cursor_from_input(*, after: Optional[abc.Sequence] = None, before: Optional[abc.Sequence] = None) -> Optional[Cursor]:
    """ Parse pagination input into a Cursor

    Args:
        after: Values of the last row of the previous page: go forward
        before: Values of the first row of the next page: go backward

    Returns:
        The cursor, or None for the first page

    Raises:
        exc.InvalidCursorInput: both are given, or the given one is not a list
    """
    if after is not None and before is not None:
        raise exc.InvalidCursorInput("Choose a pagination direction and use either 'after' or 'before', not both.")

    if after is not None:
        return Cursor(CursorType.AFTER, ensure_values_sequence('after', after))
    elif before is not None:
        return Cursor(CursorType.BEFORE, ensure_values_sequence('before', before))
    else:
        return None


def ensure_values_sequence(name: str, value: Any) -> tuple:
    """ Make sure the value is an ordered sequence of values; convert it into a tuple """
    # Strings are sequences too, but a string is not a list of column values
    if isinstance(value, (str, bytes, bytearray)) or not isinstance(value, abc.Sequence):
        raise exc.InvalidCursorInput(f'"{name}" must be an array, got {value!r}')

    return tuple(value)
