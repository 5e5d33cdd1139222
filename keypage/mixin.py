""" Model mixin: paginate a model, or an object's related collection """

from __future__ import annotations

from typing import Optional

import sqlalchemy as sa

from keypage.engine import PageContext, Page, fetch_cursor_page, fetch_cursor_page_async
from keypage.typing import AsyncBindFactory, SyncBind


class CursorPaginationMixin:
    """ A mixin for SqlAlchemy models: adds methods to fetch pages

    Example:
        class User(CursorPaginationMixin, Base):
            ...

        # Type-level: paginate all users
        page = User.fetch_cursor_page(connection, limit=15)

        # Instance-level: paginate the user's articles
        page = user.fetch_related_page(ssn, 'articles', limit=15, after=[3])

    Options: `limit`, `after`, `before`, plus anything that `fetch_cursor_page()` accepts.
    """

    @classmethod
    def fetch_cursor_page(cls, bind: SyncBind, stmt: Optional[sa.sql.Select] = None, **options) -> Page:
        """ Fetch a page of this model """
        return fetch_cursor_page(bind, PageContext.for_model(cls, stmt), **options)

    @classmethod
    async def fetch_cursor_page_async(cls, bind: AsyncBindFactory, stmt: Optional[sa.sql.Select] = None, **options) -> Page:
        """ Fetch a page of this model, asynchronously """
        return await fetch_cursor_page_async(bind, PageContext.for_model(cls, stmt), **options)

    def fetch_related_page(self, bind: SyncBind, relation_name: str, stmt: Optional[sa.sql.Select] = None, **options) -> Page:
        """ Fetch a page of objects related to this one """
        return fetch_cursor_page(bind, PageContext.for_relation(self, relation_name, stmt), **options)

    async def fetch_related_page_async(self, bind: AsyncBindFactory, relation_name: str, stmt: Optional[sa.sql.Select] = None, **options) -> Page:
        """ Fetch a page of objects related to this one, asynchronously """
        return await fetch_cursor_page_async(bind, PageContext.for_relation(self, relation_name, stmt), **options)
