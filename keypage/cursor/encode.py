from __future__ import annotations

import base64
import binascii
import json

from keypage import exc


# Prefix that marks opaque keyset cursors
CURSOR_PREFIX = 'keys'


def encode_opaque_cursor(column_values: list) -> str:
    """ Encode cursor values as an opaque string. Give it a nice prefix so that the user sees what's up

    Values have to be JSON-serializable.
    """
    return CURSOR_PREFIX + ':' + base64.b85encode(json.dumps(list(column_values)).encode()).decode()


def decode_opaque_cursor(cursor: str) -> list:
    """ Decode an opaque cursor into the list of values

    Raises:
        exc.InvalidCursorInput: the string is not a cursor
    """
    try:
        prefix, data_encoded = cursor.split(':', 1)
        data = json.loads(base64.b85decode(data_encoded))
    except (AttributeError, ValueError, binascii.Error) as e:
        raise exc.InvalidCursorInput('The provided cursor is invalid') from e

    if prefix != CURSOR_PREFIX or not isinstance(data, list):
        raise exc.InvalidCursorInput('The provided cursor is invalid')

    return data
