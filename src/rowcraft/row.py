"""
Row cursor used by decoding. A `Row` walks the fields of one result row from left to right;
every SQL type takes the fields it needs and leaves the cursor on the next unread field.
"""

from .errors import DataError


class Row:
    """
    Cursor over the fields of one result row. Any sequence works as a source,
    e.g. tuples returned by a DB-API cursor.
    """

    def __init__(self, values):
        self._values = tuple(values)
        self._position = 0

    @property
    def position(self) -> int:
        """Index of the next unread field."""
        return self._position

    @property
    def remaining(self) -> int:
        """Number of unread fields."""
        return len(self._values) - self._position

    def take(self):
        """Return the next field and move past it."""
        self._check_available(1)
        value = self._values[self._position]
        self._position += 1
        return value

    def next_is_null(self, count) -> bool:
        """Whether the next `count` fields are all NULL. The cursor does not move."""
        self._check_available(count)
        return all(
            value is None
            for value in self._values[self._position:self._position + count]
        )

    def advance(self, count):
        """Skip `count` fields."""
        self._check_available(count)
        self._position += count

    def _check_available(self, count):
        if count > self.remaining:
            raise DataError('Row has {} unread fields, {} requested'.format(
                self.remaining, count))

    def __repr__(self):
        return 'Row({!r}, position={})'.format(self._values, self._position)


def decode_row(sql_type, values):
    """
    Decode a whole row as a value of `sql_type`.
    Every field of the row must be consumed, otherwise the row does not match the type.
    """
    row = Row(values)
    result = sql_type.build_from_row(row)
    if row.remaining:
        raise DataError('Row has {} fields, type {} consumes {}'.format(
            row.position + row.remaining, sql_type.name, row.position))
    return result


def load_rows(sql_type, rows):
    """
    Return a generator decoding every row of `rows` as `sql_type`.
    Usage example:
        cursor.execute(built.query, built.params)
        for user_id, name in load_rows(users.all_columns.sql_type, cursor):
            ...
    """
    for values in rows:
        yield decode_row(sql_type, values)
