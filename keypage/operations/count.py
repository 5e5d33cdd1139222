""" Row counter: the total number of rows the base query matches """

from __future__ import annotations

import sqlalchemy as sa

from keypage import exc

from .base import Operation


class CountOperation(Operation):
    """ Count operation: turn the base statement into COUNT(DISTINCT identity)

    When applied to a statement:
    * Removes ORDER BY: unnecessary for a count
    * Removes GROUP BY: grouping would make COUNT() return one row per group
    * Selects COUNT(DISTINCT identity) instead of the columns; keeps FROM, JOINs and WHERE

    DISTINCT is what gives the number of entities when the base query JOINs other tables and groups the result.

    NOTE: HAVING is kept as is. Without GROUP BY it applies to the whole result set, not to groups:
    a query that filters groups with HAVING gets a count over all its rows, or no count at all.
    """
    identity: sa.sql.ColumnElement

    def __init__(self, identity: sa.sql.ColumnElement):
        self.identity = identity

    __slots__ = 'identity',

    def apply_to_statement(self, stmt: sa.sql.Select) -> sa.sql.Select:
        return (
            stmt
            .order_by(None)
            .group_by(None)
            .with_only_columns(
                sa.func.count(sa.distinct(self.identity)),
                # Keep FROM: otherwise it's inferred from the new columns list
                maintain_column_froms=True,
            )
        )


def read_count(result: sa.engine.Result) -> int:
    """ Get the count from the result of a count statement

    Raises:
        exc.CountUnavailable: the result is not a single scalar value
    """
    rows = result.all()
    if len(rows) != 1 or len(rows[0]) != 1:
        raise exc.CountUnavailable(n_rows=len(rows), n_columns=len(rows[0]) if rows else 0)

    return int(rows[0][0])
