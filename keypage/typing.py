from collections import abc
from typing import Any, Union

import sqlalchemy as sa
import sqlalchemy.orm
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker


# Annotation for SqlAlchemy models
SAModel = type

# Annotation for SqlAlchemy models or plain tables: something to paginate over
SAModelOrTable = Union[SAModel, sa.Table]

# Annotation for SqlAlchemy instances (objects)
SAInstance = object

# Annotation for dict rows (result rows returned as dicts)
SARowDict = dict

# A fetched record: a row dict, or an ORM instance
Record = Union[SARowDict, SAInstance]

# A function that reads a column value off a fetched record: (record, column name) -> value
RecordAccessor = abc.Callable[[Record, str], Any]

# Something that executes statements synchronously
SyncBind = Union[sa.engine.Connection, sa.orm.Session]

# Something that opens async connections: one per concurrent statement
AsyncBindFactory = Union[AsyncEngine, async_sessionmaker]
