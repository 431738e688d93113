import pytest

from rowcraft import Integer, Json, Mysql, Nullable, Pg, Record, Sqlite, SqlType, Text
from rowcraft.errors import NotSupportedError, UnreachableError
from rowcraft.misc import MysqlTypeMetadata, PgTypeMetadata


class Interval(SqlType):
    name = 'Interval'

    def from_sql(self, raw):
        return raw


def test_quote_identifier():
    assert Pg().quote_identifier('users') == '"users"'
    assert Pg().quote_identifier('auth.users') == '"auth"."users"'
    assert Pg().quote_identifier('we"ird') == '"we""ird"'
    assert Mysql().quote_identifier('users') == '`users`'
    assert Mysql().quote_identifier('we`ird') == '`we``ird`'
    assert Sqlite().quote_identifier('users') == '"users"'


def test_capabilities():
    assert Pg().supports_default_keyword
    assert Pg().supports_returning
    assert Mysql().supports_default_keyword
    assert not Mysql().supports_returning
    assert not Sqlite().supports_default_keyword
    assert Sqlite().supports_returning


def test_scalar_metadata():
    assert Pg().metadata(Integer()) == PgTypeMetadata(23, 1007)
    assert Pg().metadata(Nullable(Text)) == PgTypeMetadata(25, 1009)
    assert Mysql().metadata(Json()) == MysqlTypeMetadata(245, False)
    assert Sqlite().metadata(Integer()) == 'Integer'


def test_unsupported_type():
    with pytest.raises(NotSupportedError) as ei:
        Pg().metadata(Interval())
    assert ei.value.args[0] == 'Backend "pg" does not support SQL type Interval'


def test_tuple_metadata():
    record = Record(Integer, Nullable(Text))
    with pytest.raises(UnreachableError):
        Pg().metadata(record)
    with pytest.raises(UnreachableError):
        Pg().metadata(Nullable(record))
    with pytest.raises(UnreachableError):
        record.from_sql((1, 'a'))
    with pytest.raises(UnreachableError):
        record.to_sql((1, 'a'))


def test_row_metadata():
    record = Record(Integer, Nullable(Text), Record(Integer, Integer))
    assert Pg().row_metadata(record) == [
        PgTypeMetadata(23, 1007),
        PgTypeMetadata(25, 1009),
        PgTypeMetadata(23, 1007),
        PgTypeMetadata(23, 1007),
    ]
    assert Sqlite().row_metadata(Nullable(record)) == ['Integer', 'Text', 'Integer', 'Integer']
    assert Pg().row_metadata(Text()) == [PgTypeMetadata(25, 1009)]
    assert len(Pg().row_metadata(record)) == record.fields_needed()
