"""
SQL types. A SQL type describes how a value crosses the wire: how many row fields it
consumes, how a raw driver value is decoded (`from_sql`) and encoded (`to_sql`), and which
metadata a backend reports for it.

Scalar types consume exactly one field. `Nullable` wraps any type, including the composite
`rowcraft.tuples.Record`, and makes the whole wrapped group optional.
"""

import json
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from .errors import DataError, UnreachableError


class SqlType:
    """
    Base class of SQL types.
    """
    name = None
    is_nullable = False

    def fields_needed(self) -> int:
        """Return the number of row fields a value of this type consumes."""
        return 1

    def metadata(self, backend):
        """Resolve the backend metadata of this type."""
        return backend.lookup_type(self)

    def row_metadata(self, backend, out):
        """Append the metadata of every field this type consumes to `out`."""
        out.append(self.metadata(backend))

    def from_sql(self, raw):
        """Decode a single non-null raw value."""
        raise NotImplementedError

    def to_sql(self, value):
        """Encode a single non-null value for the driver."""
        return value

    def build_from_row(self, row):
        """Decode a value of this type from the row cursor."""
        raw = row.take()
        if raw is None:
            raise DataError('Unexpected null for non-null column of type {}'.format(self.name))
        return self.from_sql(raw)

    def to_sql_row(self, value, out):
        """Append the raw fields of `value` to `out`."""
        if value is None:
            raise DataError('Unexpected null for non-null column of type {}'.format(self.name))
        out.append(self.to_sql(value))

    def _key(self):
        return ()

    def __eq__(self, other):
        return type(self) is type(other) and self._key() == other._key()

    def __hash__(self):
        return hash((type(self), self._key()))

    def __repr__(self):
        return '{}()'.format(type(self).__name__)


def as_sql_type(value):
    """Accept either a SQL type instance or a SQL type class. Return an instance."""
    if isinstance(value, type) and issubclass(value, SqlType):
        return value()
    if isinstance(value, SqlType):
        return value
    raise TypeError('{!r} is not a SQL type'.format(value))


def _mismatch(sql_type, raw):
    return DataError('Cannot decode {!r} ({}) as {}'.format(
        raw, type(raw).__name__, sql_type.name))


class _BaseInteger(SqlType):
    min_value = None
    max_value = None

    def from_sql(self, raw):
        if isinstance(raw, bool) or not isinstance(raw, int):
            raise _mismatch(self, raw)
        if not self.min_value <= raw <= self.max_value:
            raise DataError('Value {} is out of range for {}'.format(raw, self.name))
        return raw

    def to_sql(self, value):
        return self.from_sql(value)


class SmallInt(_BaseInteger):
    """2-byte signed integer."""
    name = 'SmallInt'
    min_value = -2 ** 15
    max_value = 2 ** 15 - 1


class Integer(_BaseInteger):
    """4-byte signed integer."""
    name = 'Integer'
    min_value = -2 ** 31
    max_value = 2 ** 31 - 1


class BigInt(_BaseInteger):
    """8-byte signed integer."""
    name = 'BigInt'
    min_value = -2 ** 63
    max_value = 2 ** 63 - 1


class Float(SqlType):
    """4-byte floating point number."""
    name = 'Float'

    def from_sql(self, raw):
        if isinstance(raw, bool) or not isinstance(raw, (int, float)):
            raise _mismatch(self, raw)
        return float(raw)


class Double(Float):
    """8-byte floating point number."""
    name = 'Double'


class Numeric(SqlType):
    """Arbitrary precision number, decoded as `Decimal`."""
    name = 'Numeric'

    def from_sql(self, raw):
        if isinstance(raw, Decimal):
            return raw
        if isinstance(raw, bool) or not isinstance(raw, (int, float, str)):
            raise _mismatch(self, raw)
        try:
            return Decimal(str(raw))
        except InvalidOperation:
            raise _mismatch(self, raw) from None


class Text(SqlType):
    name = 'Text'

    def from_sql(self, raw):
        if not isinstance(raw, str):
            raise _mismatch(self, raw)
        return raw


class Binary(SqlType):
    name = 'Binary'

    def from_sql(self, raw):
        if not isinstance(raw, (bytes, bytearray, memoryview)):
            raise _mismatch(self, raw)
        return bytes(raw)


class Bool(SqlType):
    """
    Boolean. Backends without a native boolean return 0 or 1, both are accepted.
    """
    name = 'Bool'

    def from_sql(self, raw):
        if isinstance(raw, bool):
            return raw
        if isinstance(raw, int) and raw in (0, 1):
            return bool(raw)
        raise _mismatch(self, raw)


class Date(SqlType):
    """Calendar date. ISO formatted text is accepted for backends storing dates as text."""
    name = 'Date'

    def from_sql(self, raw):
        if isinstance(raw, datetime):
            raise _mismatch(self, raw)
        if isinstance(raw, date):
            return raw
        if isinstance(raw, str):
            try:
                return date.fromisoformat(raw)
            except ValueError:
                raise _mismatch(self, raw) from None
        raise _mismatch(self, raw)


class Timestamp(SqlType):
    """Date and time. ISO formatted text is accepted for backends storing dates as text."""
    name = 'Timestamp'

    def from_sql(self, raw):
        if isinstance(raw, datetime):
            return raw
        if isinstance(raw, str):
            try:
                return datetime.fromisoformat(raw)
            except ValueError:
                raise _mismatch(self, raw) from None
        raise _mismatch(self, raw)


class Json(SqlType):
    """
    JSON document.
    By default the driver hands over JSON text which is parsed here. Drivers which decode
    JSON columns themselves (psycopg2 does) hand over the document already parsed, use
    `Json(decoded=True)` for them: any decoded value is kept as is, and since such a driver
    reports the JSON `null` document as `None`, a NULL field decodes to `None` too.
    """
    name = 'Json'

    def __init__(self, json_dump_fn=json.dumps, json_load_fn=json.loads, decoded=False):
        self.json_dump_fn = json_dump_fn
        self.json_load_fn = json_load_fn
        self.decoded = decoded

    def from_sql(self, raw):
        if self.decoded:
            if isinstance(raw, (dict, list, str, int, float, bool)):
                return raw
            raise _mismatch(self, raw)
        if isinstance(raw, (bytes, bytearray)):
            raw = raw.decode()
        if isinstance(raw, str):
            try:
                return self.json_load_fn(raw)
            except ValueError:
                raise _mismatch(self, raw) from None
        raise _mismatch(self, raw)

    def to_sql(self, value):
        return self.json_dump_fn(value)

    def build_from_row(self, row):
        if self.decoded and row.next_is_null(1):
            row.advance(1)
            return None
        return super().build_from_row(row)

    def _key(self):
        return (self.decoded,)


class Nullable(SqlType):
    """
    Makes a SQL type optional. For a scalar the field may be NULL. For a composite type the
    whole group is absent when every field it consumes is NULL; a group with at least one
    non-null field is decoded element by element, so its elements keep their own nullability.
    In both cases an absent value decodes to `None`.
    """
    is_nullable = True

    def __init__(self, inner):
        inner = as_sql_type(inner)
        if isinstance(inner, Nullable):
            raise TypeError('Nullable types cannot be nested: {!r}'.format(inner))
        self.inner = inner

    @property
    def name(self):
        return 'Nullable<{}>'.format(self.inner.name)

    def fields_needed(self):
        return self.inner.fields_needed()

    def metadata(self, backend):
        return self.inner.metadata(backend)

    def row_metadata(self, backend, out):
        self.inner.row_metadata(backend, out)

    def from_sql(self, raw):
        if raw is None:
            return None
        return self.inner.from_sql(raw)

    def to_sql(self, value):
        if value is None:
            return None
        return self.inner.to_sql(value)

    def build_from_row(self, row):
        fields_needed = self.fields_needed()
        if row.next_is_null(fields_needed):
            row.advance(fields_needed)
            return None
        return self.inner.build_from_row(row)

    def to_sql_row(self, value, out):
        if value is None:
            out.extend([None] * self.fields_needed())
        else:
            self.inner.to_sql_row(value, out)

    def _key(self):
        return (self.inner,)

    def __repr__(self):
        return 'Nullable({!r})'.format(self.inner)


def unreachable(message):
    """Fail loudly on a violated invariant."""
    raise UnreachableError(message)
