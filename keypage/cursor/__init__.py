""" Cursors for keyset pagination

A cursor is the boundary of a page: values of the sort columns taken from the first or the last row of the page.
Give it back as `after` to get the next page, or as `before` to get the previous page.
"""

from .base import Cursor, CursorType, PageCursors, PageLinks
from .input import cursor_from_input
from .rows import cursors_from_rows, read_column_value
from .encode import encode_opaque_cursor, decode_opaque_cursor
