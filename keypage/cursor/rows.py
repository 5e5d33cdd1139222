from __future__ import annotations

from collections import abc
from typing import Any, TYPE_CHECKING

from keypage.typing import Record, RecordAccessor

from .base import PageCursors


if TYPE_CHECKING:
    from keypage.operations.sort import SortColumn


def read_column_value(record: Record, column_name: str) -> Any:
    """ Default accessor: read a column value off a fetched record

    Row dicts are read by key; ORM instances are read by attribute.
    NOTE: this only works if the column name equals the attribute name.
    Pass your own accessor if it doesn't.
    """
    if isinstance(record, abc.Mapping):
        return record[column_name]
    else:
        return getattr(record, column_name)


def cursors_from_rows(rows: abc.Sequence[Record], sort_columns: abc.Sequence[SortColumn], accessor: RecordAccessor = read_column_value) -> PageCursors:
    """ Get cursors from a fetched page: values of the first and the last rows

    Args:
        rows: The page, in its sort order
        sort_columns: Columns the page is sorted by
        accessor: Function to read column values off rows
    """
    # Empty page: no cursors
    if not rows:
        return PageCursors(before=None, after=None)

    def row_values(row: Record) -> list:
        return [accessor(row, sort_column.name) for sort_column in sort_columns]

    return PageCursors(
        before=row_values(rows[0]),
        after=row_values(rows[-1]),
    )
