import sqlalchemy as sa
import sqlalchemy.orm

from keypage.typing import SAModelOrTable


def model_name(Model: SAModelOrTable) -> str:
    """ Get the name of the Model for this class, or the name of the table """
    if isinstance(Model, sa.Table):
        return Model.name
    else:
        return sa.orm.class_mapper(Model).class_.__name__


def model_table(Model: SAModelOrTable) -> sa.Table:
    """ Get the primary table of a model """
    if isinstance(Model, sa.Table):
        return Model
    else:
        return sa.orm.class_mapper(Model).local_table  # type: ignore[return-value]
