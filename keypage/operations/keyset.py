""" Keyset predicate: select rows that come after (or before) the cursor row """

from __future__ import annotations

import logging
import operator
from collections import abc
from typing import Optional

import sqlalchemy as sa

from keypage import exc
from keypage.cursor import Cursor, CursorType

from .base import Operation
from .sort import SortColumn, SortingDirection


logger = logging.getLogger(__name__)


class KeysetOperation(Operation):
    """ Keyset operation: filter rows by cursor

    When applied to a statement:
    * Adds a WHERE condition that only lets through rows beyond the cursor row

    The condition is built immediately, so a mismatching cursor fails before any query is made.
    """
    cursor: Optional[Cursor]
    predicate: Optional[sa.sql.ColumnElement]

    def __init__(self, sort_columns: abc.Sequence[SortColumn], cursor: Optional[Cursor]):
        self.cursor = cursor

        # No cursor: first page. No filtering.
        if cursor is None:
            self.predicate = None
        else:
            self.predicate = build_keyset_predicate(sort_columns, cursor)

    __slots__ = 'cursor', 'predicate'

    def apply_to_statement(self, stmt: sa.sql.Select) -> sa.sql.Select:
        if self.predicate is None:
            return stmt
        else:
            return stmt.where(self.predicate)


def build_keyset_predicate(sort_columns: abc.Sequence[SortColumn], cursor: Cursor) -> sa.sql.ColumnElement:
    """ Build a condition: the row is lexicographically greater (or less) than the cursor tuple

    For sort columns (a, b, c) and cursor (A, B, C), that's:

        a > A OR
        a = A AND b > B OR
        a = A AND b = B AND c > C

    The comparison is flipped for `before` cursors, and flipped for DESC columns.
    A plain tuple comparison can't do that: it only works when all columns go in the same direction.

    Raises:
        exc.CursorSortMismatch: the number of values does not match the number of columns
    """
    if len(cursor.column_values) != len(sort_columns):
        raise exc.CursorSortMismatch(expected=len(sort_columns), actual=len(cursor.column_values))

    terms = []
    equal_so_far: list[sa.sql.ColumnElement] = []
    for sort_column, value in zip(sort_columns, cursor.column_values):
        compare = get_comparison_operator(cursor.type, sort_column.direction)
        terms.append(sa.and_(*equal_so_far, compare(sort_column.column, value)))
        equal_so_far.append(sort_column.column == value)

    logger.debug('Keyset predicate: %s %s', cursor.type.value, dict(zip((c.name for c in sort_columns), cursor.column_values)))
    return sa.or_(*terms)


def get_comparison_operator(cursor_type: CursorType, direction: SortingDirection) -> abc.Callable:
    """ Pick the operator: `>` to go forward; flipped when going backward; flipped again for DESC columns """
    go_forward = (cursor_type == CursorType.AFTER) == (direction == SortingDirection.ASC)
    return operator.gt if go_forward else operator.lt
