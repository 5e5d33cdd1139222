class BaseKeypageException(Exception):
    pass


class InvalidCursorInput(BaseKeypageException):
    """ Invalid cursor provided by the User

    Reported when `after` or `before` is not a list of values, or when both are given at once
    """

    def __init__(self, err: str):
        super().__init__(f'Cursor error: {err}')


class UnsupportedSortTarget(BaseKeypageException):
    """ The query is sorted by something keyset pagination can't handle

    Reported when an ORDER BY column belongs to a table other than the one being paginated,
    or when the ORDER BY expression is not a column at all.
    """

    def __init__(self, table: str, target: str, reason: str):
        self.table = table
        self.target = target
        self.reason = reason

        super().__init__(f'Cannot paginate "{table}" sorted by "{target}": {reason}')


class CursorSortMismatch(BaseKeypageException):
    """ Cursor values don't match the sort columns

    Reported when the number of values in the cursor differs from the number of columns the query is sorted by.
    Typically, the query sorting has changed since the cursor was generated.
    """

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual

        super().__init__(f'Sort/cursor mismatch: the query is sorted by {expected} column(s), the cursor has {actual} value(s)')


class CountUnavailable(BaseKeypageException):
    """ The count query did not return a single scalar value

    Indicates a broken assumption about the database: COUNT() is expected to give exactly one row with one column
    """

    def __init__(self, n_rows: int, n_columns: int):
        self.n_rows = n_rows
        self.n_columns = n_columns

        super().__init__(f'Count query returned {n_rows} row(s) with {n_columns} column(s); expected a single value')


class InvalidRelationError(BaseKeypageException):
    """ Pagination requested over an invalid relationship name

    Reported when a relation mentioned by name is not found on the SqlAlchemy model
    """

    def __init__(self, model: str, relation_name: str):
        self.model = model
        self.relation_name = relation_name

        super().__init__(f'Invalid relation "{relation_name}" for "{model}"')
