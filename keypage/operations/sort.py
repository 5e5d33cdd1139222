""" Sort normalization: find out which columns the query is sorted by """

from __future__ import annotations

import logging
from collections import abc
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.sql import operators
from sqlalchemy.sql.elements import ColumnClause, UnaryExpression, _textual_label_reference

from keypage import exc

from .base import Operation


logger = logging.getLogger(__name__)


class SortingDirection(Enum):
    ASC = '+'
    DESC = '-'

    def reversed(self) -> SortingDirection:
        return SortingDirection.DESC if self is SortingDirection.ASC else SortingDirection.ASC


class NullsPosition(Enum):
    """ Where NULLs go: NULLS FIRST, NULLS LAST """
    FIRST = 'first'
    LAST = 'last'

    def reversed(self) -> NullsPosition:
        return NullsPosition.LAST if self is NullsPosition.FIRST else NullsPosition.FIRST


@dataclass(frozen=True)
class SortColumn:
    """ A column the query is sorted by """
    # Column name. Also used to read values off fetched rows
    name: str

    # Sorting direction
    direction: SortingDirection

    # The column expression to compare against cursor values
    column: sa.sql.ColumnElement

    # NULLS FIRST/LAST, if the query specified it. None: database default
    nulls: Optional[NullsPosition] = None

    def order_by(self, reverse: bool = False) -> sa.sql.ColumnElement:
        """ Get a sorting expression for this column

        Args:
            reverse: Sort the other way around. NULLS FIRST/LAST is swapped as well
        """
        direction = self.direction.reversed() if reverse else self.direction
        if direction == SortingDirection.DESC:
            expr = self.column.desc()
        else:
            expr = self.column.asc()

        nulls = self.nulls.reversed() if reverse and self.nulls is not None else self.nulls
        if nulls == NullsPosition.FIRST:
            return expr.nulls_first()
        elif nulls == NullsPosition.LAST:
            return expr.nulls_last()
        else:
            return expr


class SortOperation(Operation):
    """ Sort operation: re-apply ORDER BY with the resolved sort columns

    When applied to a statement:
    * Replaces ORDER BY with the sort columns, or with the identity column if the query had no sorting
    * Optionally, reverses all directions: used when fetching rows that precede the cursor
    """
    sort_columns: tuple[SortColumn, ...]
    reverse: bool

    def __init__(self, sort_columns: abc.Sequence[SortColumn], *, reverse: bool = False):
        self.sort_columns = tuple(sort_columns)
        self.reverse = reverse

    __slots__ = 'sort_columns', 'reverse'

    def apply_to_statement(self, stmt: sa.sql.Select) -> sa.sql.Select:
        return stmt.order_by(None).order_by(*(
            sort_column.order_by(self.reverse)
            for sort_column in self.sort_columns
        ))


def get_sort_columns(stmt: sa.sql.Select, table: sa.sql.FromClause, identity_column: str) -> tuple[SortColumn, ...]:
    """ Get the list of columns the statement is sorted by

    If the statement is not sorted, it is implicitly sorted by the identity column, ascending.

    Args:
        stmt: The statement to inspect
        table: The primary table being paginated
        identity_column: The name of the column to sort by when there's no sorting

    Raises:
        exc.UnsupportedSortTarget: sorting by a joined table, or by an expression
    """
    # SqlAlchemy has no public accessor for the ORDER BY list
    clauses = stmt._order_by_clauses

    # We implicitly sort by ID asc
    if not clauses:
        sort_columns: tuple[SortColumn, ...] = (
            SortColumn(name=identity_column, direction=SortingDirection.ASC, column=table.c[identity_column]),
        )
    else:
        sort_columns = tuple(resolve_sort_clause(clause, table) for clause in clauses)

    logger.debug('Sort columns for %s: %s', table.name, [
        f'{sort_column.name}{sort_column.direction.value}'
        for sort_column in sort_columns
    ])
    return sort_columns


def resolve_sort_clause(clause: sa.sql.ClauseElement, table: sa.sql.FromClause) -> SortColumn:
    """ Convert one ORDER BY clause into a SortColumn

    Accepts columns, and column names given as strings: `order_by('rating')`, `order_by(sa.desc('id'))`.

    Raises:
        exc.UnsupportedSortTarget: sorting by a joined table, by an unknown column, or by an expression
    """
    # Unwrap: ASC, DESC, NULLS FIRST, NULLS LAST
    direction = SortingDirection.ASC
    nulls = None
    while isinstance(clause, UnaryExpression) and clause.modifier in SORTING_MODIFIERS:
        if clause.modifier is operators.desc_op:
            direction = SortingDirection.DESC
        elif clause.modifier is operators.nulls_first_op:
            nulls = NullsPosition.FIRST
        elif clause.modifier is operators.nulls_last_op:
            nulls = NullsPosition.LAST
        clause = clause.element

    # A column name given as a string
    if isinstance(clause, _textual_label_reference):
        clause = resolve_column_name(clause.element, table)

    # Keyset pagination needs a column value on every row
    if not isinstance(clause, ColumnClause):
        raise exc.UnsupportedSortTarget(table.name, str(clause), 'only columns are supported')

    # Not prefixed by a table name: belongs to the primary table
    # Prefixed by another table: not supported
    if clause.table is not None and clause.table.name != table.name:
        raise exc.UnsupportedSortTarget(
            table.name, f'{clause.table.name}.{clause.name}',
            'sorting by a joined table is not supported by cursor pagination'
        )

    return SortColumn(name=clause.key, direction=direction, column=clause, nulls=nulls)


def resolve_column_name(name: str, table: sa.sql.FromClause) -> sa.sql.ColumnElement:
    """ Find a column of the primary table by name: 'rating', or 'a.rating'

    Raises:
        exc.UnsupportedSortTarget: another table, or no such column
    """
    table_name, _, column_name = name.rpartition('.')
    if table_name and table_name != table.name:
        raise exc.UnsupportedSortTarget(table.name, name, 'sorting by a joined table is not supported by cursor pagination')

    try:
        return table.c[column_name]
    except KeyError as e:
        raise exc.UnsupportedSortTarget(table.name, name, 'no such column') from e


# Unary modifiers that only affect sorting
SORTING_MODIFIERS = frozenset((
    operators.asc_op,
    operators.desc_op,
    operators.nulls_first_op,
    operators.nulls_last_op,
))
