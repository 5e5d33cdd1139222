from __future__ import annotations

import dataclasses
from typing import Any, Optional


@dataclasses.dataclass
class PageSettings:
    """ Settings for CursorPage

    This object defines how pages are limited: the default page size, and the max page size.
    """
    # The `limit` you get by default, if not specified, or if the input is not a positive integer
    default_limit: int = 10

    # The max number of items you get, regardless of the limit
    max_limit: Optional[int] = None

    def get_final_limit(self, limit: Any) -> int:
        """ Callback that fine-tunes the `limit` of a page by applying default and max limits

        Input is parsed leniently: anything that's not a positive integer silently becomes `default_limit`.
        """
        # Apply default limit
        limit = parse_positive_int(limit, self.default_limit)

        # Apply max limit
        if self.max_limit:
            limit = min(limit, self.max_limit)

        # Done
        return limit


def parse_positive_int(value: Any, default: int) -> int:
    """ Parse a value as a positive integer. Fall back to the default if it isn't one

    Example:
        parse_positive_int(15, 10) -> 15
        parse_positive_int('15', 10) -> 15
        parse_positive_int('2.5', 10) -> 2
        parse_positive_int('abc', 10) -> 10
        parse_positive_int(None, 10) -> 10
    """
    # `True` is an int, but not a page size
    if isinstance(value, bool) or not value:
        return default

    try:
        parsed = int(value)
    except (TypeError, ValueError, OverflowError):
        # Fractional strings are truncated: '2.5' -> 2
        try:
            parsed = int(float(value))
        except (TypeError, ValueError, OverflowError):
            return default

    if parsed <= 0:
        return default

    return parsed
