__version__ = __import__('importlib.metadata').metadata.version('keypage')

from .engine import CursorPage, PageContext, PageSettings, Page, PageInfo
from .engine import fetch_cursor_page, fetch_cursor_page_async
from .cursor import Cursor, CursorType, PageCursors, PageLinks
from .cursor import encode_opaque_cursor, decode_opaque_cursor
from .operations import SortColumn, SortingDirection, NullsPosition
from .mixin import CursorPaginationMixin

from . import exc
