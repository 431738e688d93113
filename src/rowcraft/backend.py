"""
Backends. A backend knows how its SQL dialect quotes identifiers and binds parameters,
which metadata its driver reports for every SQL type and which optional SQL features it
supports. Capability flags are class attributes, so the choice between rendering policies
depends on what a backend can do, never on its name.
"""

from .base import QueryBuilder
from .errors import NotSupportedError
from .misc import PgTypeMetadata, MysqlTypeMetadata
from .types import (
    SmallInt, Integer, BigInt, Float, Double, Numeric, Text, Binary, Bool, Date, Timestamp, Json,
)


class Backend:
    """Base backend that defines SQL quoting, placeholders and the type metadata registry."""

    name = 'generic'
    paramstyle = 'pyformat'
    quote_char = '"'
    # Whether `DEFAULT` may appear in the VALUES list of an INSERT with explicit columns
    supports_default_keyword = True
    supports_returning = False
    type_metadata = {}

    def quote_identifier(self, name: str) -> str:
        """
        Quote an identifier. Dots separate the parts of a qualified name:
            quote_identifier('auth.users') => "auth"."users"
        """
        quote = self.quote_char
        return '.'.join(
            quote + part.replace(quote, quote * 2) + quote
            for part in name.split('.')
        )

    def lookup_type(self, sql_type):
        """Return the metadata registered for a scalar SQL type."""
        try:
            return self.type_metadata[type(sql_type)]
        except KeyError:
            raise NotSupportedError('Backend "{}" does not support SQL type {}'.format(
                self.name, sql_type.name)) from None

    def metadata(self, sql_type):
        """Return the metadata of a SQL type which is sent as a single value."""
        return sql_type.metadata(self)

    def row_metadata(self, sql_type):
        """Return the metadata of every field a value of `sql_type` occupies in a row."""
        out = []
        sql_type.row_metadata(self, out)
        return out

    def query_builder(self):
        """Return a fresh AST output for this backend."""
        return QueryBuilder(self)

    def __repr__(self):
        return '{}()'.format(type(self).__name__)


class Pg(Backend):
    """PostgreSQL (`%(name)s` parameters, supports `DEFAULT` and `RETURNING`)."""

    name = 'pg'
    paramstyle = 'pyformat'
    quote_char = '"'
    supports_default_keyword = True
    supports_returning = True
    type_metadata = {
        SmallInt: PgTypeMetadata(21, 1005),
        Integer: PgTypeMetadata(23, 1007),
        BigInt: PgTypeMetadata(20, 1016),
        Float: PgTypeMetadata(700, 1021),
        Double: PgTypeMetadata(701, 1022),
        Numeric: PgTypeMetadata(1700, 1231),
        Text: PgTypeMetadata(25, 1009),
        Binary: PgTypeMetadata(17, 1001),
        Bool: PgTypeMetadata(16, 1000),
        Date: PgTypeMetadata(1082, 1182),
        Timestamp: PgTypeMetadata(1114, 1115),
        Json: PgTypeMetadata(114, 199),
    }


class Mysql(Backend):
    """MySQL (`%s` positional parameters, no `RETURNING`)."""

    name = 'mysql'
    paramstyle = 'format'
    quote_char = '`'
    supports_default_keyword = True
    supports_returning = False
    type_metadata = {
        SmallInt: MysqlTypeMetadata(2, False),
        Integer: MysqlTypeMetadata(3, False),
        BigInt: MysqlTypeMetadata(8, False),
        Float: MysqlTypeMetadata(4, False),
        Double: MysqlTypeMetadata(5, False),
        Numeric: MysqlTypeMetadata(246, False),
        Text: MysqlTypeMetadata(254, False),
        Binary: MysqlTypeMetadata(252, False),
        Bool: MysqlTypeMetadata(1, False),
        Date: MysqlTypeMetadata(10, False),
        Timestamp: MysqlTypeMetadata(12, False),
        Json: MysqlTypeMetadata(245, False),
    }


class Sqlite(Backend):
    """
    SQLite (`?` parameters). SQLite has no `DEFAULT` keyword in VALUES lists, so columns
    left to their default are omitted from INSERT statements instead.
    """

    name = 'sqlite'
    paramstyle = 'qmark'
    quote_char = '"'
    supports_default_keyword = False
    supports_returning = True
    type_metadata = {
        SmallInt: 'SmallInt',
        Integer: 'Integer',
        BigInt: 'Long',
        Float: 'Float',
        Double: 'Double',
        Numeric: 'Double',
        Text: 'Text',
        Binary: 'Binary',
        Bool: 'Integer',
        Date: 'Text',
        Timestamp: 'Text',
        Json: 'Text',
    }
