import sqlalchemy as sa

from .base import Operation


class LimitOperation(Operation):
    """ Limit operation: the page size

    When applied to a statement:
    * Adds LIMIT
    """
    limit: int

    def __init__(self, limit: int):
        self.limit = limit

    __slots__ = 'limit',

    def apply_to_statement(self, stmt: sa.sql.Select) -> sa.sql.Select:
        return stmt.limit(self.limit)
