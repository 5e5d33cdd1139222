from functools import cache

import sqlalchemy as sa
import sqlalchemy.orm

from keypage.typing import SAModelOrTable


# Identity column name when the table has no single-column primary key
DEFAULT_IDENTITY_COLUMN = 'id'


@cache
def primary_key_names(Model: SAModelOrTable) -> tuple[str, ...]:
    """ Get the list of primary key column names """
    return tuple(c.key for c in primary_key_columns(Model))


@cache
def primary_key_columns(Model: SAModelOrTable) -> tuple[sa.Column, ...]:
    """ Get the list of primary key columns """
    if isinstance(Model, sa.Table):
        return tuple(Model.primary_key.columns)
    else:
        return tuple(sa.orm.class_mapper(Model).primary_key)


def identity_column_name(Model: SAModelOrTable) -> str:
    """ Get the name of the column that identifies rows: the primary key, if it's a single column """
    names = primary_key_names(Model)
    if len(names) == 1:
        return names[0]
    else:
        return DEFAULT_IDENTITY_COLUMN
