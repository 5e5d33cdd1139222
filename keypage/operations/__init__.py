from .base import Operation
from .sort import SortOperation, SortColumn, SortingDirection, NullsPosition, get_sort_columns
from .keyset import KeysetOperation, build_keyset_predicate
from .limit import LimitOperation
from .count import CountOperation, read_count
