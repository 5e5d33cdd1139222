from __future__ import annotations

import sqlalchemy as sa


class Operation:
    """ Base for all operations. Defines the interface

    An operation takes a statement and gives a modified copy.
    SqlAlchemy statements are generative: the input statement is never changed.
    """

    def apply_to_statement(self, stmt: sa.sql.Select) -> sa.sql.Select:
        """ Modify the SQL Select statement """
        raise NotImplementedError

    __slots__ = ()
