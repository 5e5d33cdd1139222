""" Page context: what to paginate

There are two ways to paginate:
* Type-level: paginate a whole table (`PageContext.for_model()`)
* Instance-level: paginate a collection of related objects (`PageContext.for_relation()`)

Both produce the same thing: a base statement, a table, and the identity column.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import sqlalchemy as sa
import sqlalchemy.orm

from keypage import exc
from keypage.sainfo.names import model_name, model_table
from keypage.sainfo.primary_key import identity_column_name
from keypage.typing import SAInstance, SAModelOrTable


@dataclass(frozen=True)
class PageContext:
    """ What to paginate: a base statement over a table """
    # The statement to paginate. It may have its own JOINs, WHERE, GROUP BY and ORDER BY
    base_statement: sa.sql.Select

    # The primary table: the one whose rows are paginated
    table: sa.Table

    # The column that identifies rows: used for the default sorting, and for counting
    identity_column: str

    @property
    def table_name(self) -> str:
        return self.table.name

    @property
    def identity(self) -> sa.Column:
        return self.table.c[self.identity_column]

    @classmethod
    def for_model(cls, Model: SAModelOrTable, stmt: Optional[sa.sql.Select] = None, *, identity_column: Optional[str] = None) -> PageContext:
        """ Paginate over a whole table

        Example:
            PageContext.for_model(models.User)
            PageContext.for_model(models.User, sa.select(models.User).where(models.User.active))

        Args:
            Model: The model or table to paginate
            stmt: The statement to paginate. Default: select everything
            identity_column: Name of the identity column. Default: the primary key, or "id"
        """
        return cls(
            base_statement=stmt if stmt is not None else sa.select(Model),
            table=model_table(Model),
            identity_column=identity_column or identity_column_name(Model),
        )

    @classmethod
    def for_relation(cls, instance: SAInstance, relation_name: str, stmt: Optional[sa.sql.Select] = None, *, identity_column: Optional[str] = None) -> PageContext:
        """ Paginate over a one-to-many collection of an object

        Example:
            PageContext.for_relation(user, 'articles')

        Args:
            instance: The object whose related objects are paginated
            relation_name: The name of the relationship
            stmt: The statement to paginate. Default: select everything from the related model.
                  It gets limited to objects related to `instance`.
            identity_column: Name of the identity column. Default: the primary key, or "id"

        Raises:
            exc.InvalidRelationError: no such relationship
        """
        Model = type(instance)
        mapper = sa.orm.object_mapper(instance)
        try:
            relationship = mapper.relationships[relation_name]
        except KeyError as e:
            raise exc.InvalidRelationError(model_name(Model), relation_name) from e

        target_Model = relationship.mapper.class_
        base_statement = stmt if stmt is not None else sa.select(target_Model)
        return cls.for_model(
            target_Model,
            base_statement.where(sa.orm.with_parent(instance, getattr(Model, relation_name))),
            identity_column=identity_column,
        )
