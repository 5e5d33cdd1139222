""" Loaders: turn result sets into records

* `RowDictLoader`: rows as dicts. Used with Core connections
* `EntityLoader`: ORM instances. Used with ORM sessions
"""

from __future__ import annotations

from collections import abc
from typing import Union

import sqlalchemy as sa
import sqlalchemy.orm
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncSession

from keypage.typing import Record


class QueryLoaderBase:
    """ Loader base

    Base for classes that:
    * Prepare an SQL statement for loading records
    * Convert result rows into records

    Operations, such as sort, keyset, limit, are out of scope here.
    """
    __slots__ = ()

    def prepare_statement(self, stmt: sa.sql.Select, *, options: abc.Iterable = ()) -> sa.sql.Select:
        """ Hook: prepare the SELECT statement before it's executed

        Args:
            stmt: The page statement, with all operations applied
            options: ORM loader options, e.g. `selectinload(...)`
        """
        options = tuple(options)
        if options:
            stmt = stmt.options(*options)
        return stmt

    def load_results(self, stmt: sa.sql.Select, result: sa.engine.Result) -> list[Record]:
        """ Convert the result of the executed statement into a list of records """
        raise NotImplementedError


class RowDictLoader(QueryLoaderBase):
    """ Loads rows as dicts """
    __slots__ = ()

    def load_results(self, stmt: sa.sql.Select, result: sa.engine.Result) -> list[Record]:
        # We use `.mappings()` to convert a list of rows `list[RowMapping]` into a list of dicts `list[dict]`
        return [dict(row) for row in result.mappings()]


class EntityLoader(RowDictLoader):
    """ Loads ORM instances when the statement selects an entity; rows as dicts otherwise """
    __slots__ = ()

    def load_results(self, stmt: sa.sql.Select, result: sa.engine.Result) -> list[Record]:
        if selects_single_entity(stmt):
            # Joined eager loads of collections repeat the entity once per related row
            return list(result.unique().scalars().all())
        else:
            return super().load_results(stmt, result)


def selects_single_entity(stmt: sa.sql.Select) -> bool:
    """ Check whether the statement selects exactly one ORM entity, e.g. `select(User)` """
    descriptions = stmt.column_descriptions
    return len(descriptions) == 1 and isinstance(descriptions[0]['type'], type)


def get_loader(bind: Union[sa.engine.Connection, sa.orm.Session, AsyncConnection, AsyncSession]) -> QueryLoaderBase:
    """ Pick a loader for the connection: sessions load ORM instances """
    if isinstance(bind, (sa.orm.Session, AsyncSession)):
        return EntityLoader()
    else:
        return RowDictLoader()
