""" Fetch pages: everything needed to paginate a statement

Overview:

* PageContext: what to paginate
* CursorPage: prepares and executes the page statement and the count statement
"""

from .context import PageContext
from .settings import PageSettings
from .page import CursorPage, Page, PageInfo
from .page import page_count, fetch_cursor_page, fetch_cursor_page_async
from .loader import QueryLoaderBase, RowDictLoader, EntityLoader
