""" CursorPage: fetch one page of a query, with cursors and pagination info

Overview:

* `PageContext` tells what to paginate: a statement over a table
* `CursorPage` validates the input and prepares statements: the page statement and the count statement
* `CursorPage.fetch()` runs both and gives a `Page`
"""

from __future__ import annotations

import asyncio
import logging
import math
from collections import abc
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, Optional, Union

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncEngine

from keypage.cursor import (
    Cursor, CursorType, PageCursors, PageLinks,
    cursor_from_input, cursors_from_rows, read_column_value, encode_opaque_cursor,
)
from keypage.operations import (
    SortColumn, get_sort_columns,
    SortOperation, KeysetOperation, LimitOperation, CountOperation,
    read_count,
)
from keypage.typing import AsyncBindFactory, Record, RecordAccessor, SAInstance, SAModelOrTable, SyncBind

from .context import PageContext
from .loader import get_loader
from .settings import PageSettings


logger = logging.getLogger(__name__)


@dataclass
class PageInfo:
    """ Pagination info for a fetched page """
    # Total number of rows found for the query before pagination
    row_count: int

    # The number of rows per page
    limit: int

    # The number of pages
    page_count: int

    # Cursors to the previous and the next page
    cursors: PageCursors


@dataclass
class Page:
    """ A fetched page: rows, and pagination info """
    # Records, in sort order: dicts, or ORM instances
    rows: list[Record]

    # Pagination info
    pagination: PageInfo

    def __iter__(self) -> abc.Iterator[Record]:
        return iter(self.rows)

    def __len__(self) -> int:
        return len(self.rows)

    def page_links(self) -> PageLinks:
        """ Get links to the previous and next page

        These values are opaque cursors. Decode them with `decode_opaque_cursor()` and feed to "before" or "after"
        to get to the corresponding page.
        """
        cursors = self.pagination.cursors
        return PageLinks(
            prev=encode_opaque_cursor(cursors.before) if cursors.before is not None else None,
            next=encode_opaque_cursor(cursors.after) if cursors.after is not None else None,
        )


class CursorPage:
    """ Cursor page: fetches one page of a statement with keyset pagination

    All the input is validated in the constructor: nothing is executed if it's invalid.

    Example:
        page = CursorPage.for_model(models.User, limit=15).fetch(connection)
        next_page = CursorPage.for_model(models.User, limit=15, after=page.pagination.cursors.after).fetch(connection)
    """
    # What to paginate
    context: PageContext

    # Page settings
    settings: PageSettings

    # The final page size
    limit: int

    # The decoded cursor, if any
    cursor: Optional[Cursor]

    # The columns the statement is sorted by
    sort_columns: tuple[SortColumn, ...]

    # Function to read column values off fetched records
    accessor: RecordAccessor

    def __init__(self,
                 context: PageContext,
                 *,
                 limit: Any = None,
                 after: Optional[abc.Sequence] = None,
                 before: Optional[abc.Sequence] = None,
                 settings: Optional[PageSettings] = None,
                 accessor: Optional[RecordAccessor] = None):
        """ Prepare to fetch a page

        Args:
            context: What to paginate
            limit: Page size. Anything but a positive integer becomes the default limit
            after: Cursor: values of the last row of the previous page
            before: Cursor: values of the first row of the next page
            settings: Page settings
            accessor: Function to read column values off fetched records. Default: by key or by attribute

        Raises:
            exc.InvalidCursorInput: both `after` and `before`, or not a list
            exc.UnsupportedSortTarget: sorted by a joined table, or by an expression
            exc.CursorSortMismatch: the cursor does not match the sort columns
        """
        self.context = context
        self.settings = settings or self.DEFAULT_SETTINGS
        self.accessor = accessor or read_column_value
        self.limit = self.settings.get_final_limit(limit)

        # Resolve every input
        self.cursor = cursor_from_input(after=after, before=before)
        self.sort_columns = get_sort_columns(context.base_statement, context.table, context.identity_column)

        # Init operations
        # When going backward, rows are fetched in reverse order, and reversed back when loaded
        self.sort_op = self.SortOperation(self.sort_columns, reverse=self.is_backward)
        self.keyset_op = self.KeysetOperation(self.sort_columns, self.cursor)
        self.limit_op = self.LimitOperation(self.limit)
        self.count_op = self.CountOperation(context.identity)

    __slots__ = (
        'context', 'settings', 'accessor', 'limit', 'cursor', 'sort_columns',
        'sort_op', 'keyset_op', 'limit_op', 'count_op',
    )

    @classmethod
    def for_model(cls, Model: SAModelOrTable, stmt: Optional[sa.sql.Select] = None, *, identity_column: Optional[str] = None, **kwargs) -> CursorPage:
        """ Paginate a whole table. See `PageContext.for_model()` """
        return cls(PageContext.for_model(Model, stmt, identity_column=identity_column), **kwargs)

    @classmethod
    def for_relation(cls, instance: SAInstance, relation_name: str, stmt: Optional[sa.sql.Select] = None, *, identity_column: Optional[str] = None, **kwargs) -> CursorPage:
        """ Paginate a collection of related objects. See `PageContext.for_relation()` """
        return cls(PageContext.for_relation(instance, relation_name, stmt, identity_column=identity_column), **kwargs)

    # Default settings object
    DEFAULT_SETTINGS = PageSettings()

    # Overridable classes: operations
    SortOperation = SortOperation
    KeysetOperation = KeysetOperation
    LimitOperation = LimitOperation
    CountOperation = CountOperation

    @property
    def is_backward(self) -> bool:
        """ Are we fetching rows that precede the cursor? """
        return self.cursor is not None and self.cursor.type == CursorType.BEFORE

    def statement(self) -> sa.sql.Select:
        """ Build the SQL SELECT statement that fetches the page """
        stmt = self.context.base_statement
        stmt = self.sort_op.apply_to_statement(stmt)
        stmt = self.keyset_op.apply_to_statement(stmt)
        stmt = self.limit_op.apply_to_statement(stmt)
        return stmt

    def count_statement(self) -> sa.sql.Select:
        """ Build the SQL SELECT statement that counts all rows of the base statement """
        return self.count_op.apply_to_statement(self.context.base_statement)

    def fetch(self, bind: SyncBind, *, options: abc.Iterable = (), execution_options: Optional[dict] = None) -> Page:
        """ Fetch the page and count the rows

        Both statements are executed on the same connection, one after another.

        Args:
            bind: Connection (rows come as dicts) or Session (rows come as ORM instances)
            options: ORM loader options for the page statement, e.g. `selectinload(...)`
            execution_options: Execution options for the page statement
        """
        loader = get_loader(bind)
        stmt = loader.prepare_statement(self.statement(), options=options)
        rows = loader.load_results(stmt, bind.execute(stmt, execution_options=execution_options or {}))
        row_count = read_count(bind.execute(self.count_statement()))
        return self._make_page(rows, row_count)

    async def fetch_async(self, bind: AsyncBindFactory, *, options: abc.Iterable = (), execution_options: Optional[dict] = None) -> Page:
        """ Fetch the page and count the rows concurrently

        Each statement gets its own connection. If either fails, its error propagates; the other one is not cancelled.

        Args:
            bind: AsyncEngine (rows come as dicts) or async_sessionmaker (rows come as ORM instances)
            options: ORM loader options for the page statement, e.g. `selectinload(...)`
            execution_options: Execution options for the page statement
        """
        async def load_page() -> list[Record]:
            async with open_async_bind(bind) as conn:
                loader = get_loader(conn)
                stmt = loader.prepare_statement(self.statement(), options=options)
                return loader.load_results(stmt, await conn.execute(stmt, execution_options=execution_options or {}))

        async def load_count() -> int:
            async with open_async_bind(bind) as conn:
                return read_count(await conn.execute(self.count_statement()))

        rows, row_count = await asyncio.gather(load_page(), load_count())
        return self._make_page(rows, row_count)

    def _make_page(self, rows: list[Record], row_count: int) -> Page:
        """ Put the page together: rows in sort order, cursors, pagination info """
        # Rows preceding the cursor were fetched in reverse order
        if self.is_backward:
            rows.reverse()

        cursors = cursors_from_rows(rows, self.sort_columns, self.accessor)
        logger.debug('Fetched %d of %d rows from %s', len(rows), row_count, self.context.table_name)

        return Page(
            rows=rows,
            pagination=PageInfo(
                row_count=row_count,
                limit=self.limit,
                page_count=page_count(row_count, self.limit),
                cursors=cursors,
            ),
        )


def page_count(row_count: int, limit: int) -> int:
    """ Get the number of pages

    Example:
        page_count(53, 15) -> 4
    """
    return math.ceil(row_count / limit)


@asynccontextmanager
async def open_async_bind(bind: AsyncBindFactory):
    """ Open a new connection: from an AsyncEngine, or a new session from an async_sessionmaker """
    if isinstance(bind, AsyncEngine):
        async with bind.connect() as conn:
            yield conn
    else:
        async with bind() as ssn:
            yield ssn


def fetch_cursor_page(bind: SyncBind, target: Union[PageContext, SAModelOrTable], **options) -> Page:
    """ Fetch a page of a model or a context

    Example:
        page = fetch_cursor_page(connection, models.User, limit=15, after=[3])

    Args:
        bind: Connection or Session
        target: What to paginate: a model, a table, or a PageContext
        **options: `limit`, `after`, `before`, `settings`, `accessor`: go to CursorPage;
                   `options`, `execution_options`: go to `CursorPage.fetch()`
    """
    page_kwargs, fetch_kwargs = _split_options(options)
    return CursorPage(_ensure_context(target), **page_kwargs).fetch(bind, **fetch_kwargs)


async def fetch_cursor_page_async(bind: AsyncBindFactory, target: Union[PageContext, SAModelOrTable], **options) -> Page:
    """ Fetch a page of a model or a context, asynchronously. See `fetch_cursor_page()` """
    page_kwargs, fetch_kwargs = _split_options(options)
    return await CursorPage(_ensure_context(target), **page_kwargs).fetch_async(bind, **fetch_kwargs)


def _ensure_context(target: Union[PageContext, SAModelOrTable]) -> PageContext:
    if isinstance(target, PageContext):
        return target
    else:
        return PageContext.for_model(target)


def _split_options(options: dict) -> tuple[dict, dict]:
    """ Split options into (CursorPage kwargs, fetch kwargs). Fetch kwargs are passed through as is """
    page_kwargs = {k: v for k, v in options.items() if k in PAGE_OPTIONS}
    fetch_kwargs = {k: v for k, v in options.items() if k not in PAGE_OPTIONS}
    return page_kwargs, fetch_kwargs


# Options that CursorPage takes. Everything else goes to the fetch
PAGE_OPTIONS = frozenset(('limit', 'after', 'before', 'settings', 'accessor'))
