from __future__ import annotations

from enum import Enum
from typing import Any, NamedTuple, Optional


class CursorType(Enum):
    """ Which way to go from the cursor """
    # Rows that precede the cursor row
    BEFORE = 'before'

    # Rows that follow the cursor row
    AFTER = 'after'


class Cursor(NamedTuple):
    """ Decoded cursor: a page boundary """
    # Which way to go
    type: CursorType

    # Values of the sort columns, in the order of sorting
    column_values: tuple[Any, ...]


class PageCursors(NamedTuple):
    """ Cursors of a fetched page: values of its first and last rows """
    # Values of the first row. Feed it to `before` to get the previous page
    before: Optional[list]

    # Values of the last row. Feed it to `after` to get the next page
    after: Optional[list]


class PageLinks(NamedTuple):
    """ Links to the prev/next pages: opaque cursor strings """
    # Link to the previous page, if available
    prev: Optional[str]

    # Link to the next page, if available
    next: Optional[str]
