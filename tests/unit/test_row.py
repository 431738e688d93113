import pytest

from rowcraft import MAX_ARITY, Bool, Integer, Nullable, Record, Row, Text, decode_row, \
    load_rows, make_tuple, tuple_class
from rowcraft.errors import DataError
from tests.funcs import users


def encode(sql_type, value):
    out = []
    sql_type.to_sql_row(value, out)
    return out


def test_row_cursor():
    row = Row((1, None, 'a'))
    assert row.position == 0
    assert row.remaining == 3
    assert row.take() == 1
    assert row.next_is_null(1)
    assert not row.next_is_null(2)
    assert row.position == 1
    row.advance(2)
    assert row.remaining == 0
    with pytest.raises(DataError):
        row.take()
    with pytest.raises(DataError):
        Row((None,)).next_is_null(2)


def test_decode_tuple():
    record = Record(Integer, Text, Nullable(Text))
    value = decode_row(record, (1, 'Jane', None))
    assert type(value) is tuple_class(3)
    assert value == (1, 'Jane', None)


def test_decode_smallest_and_largest_tuples():
    record = Record(Text)
    assert decode_row(record, encode(record, make_tuple('a'))) == ('a',)

    record = Record(*([Integer] * MAX_ARITY))
    value = make_tuple(*range(MAX_ARITY))
    decoded = decode_row(record, encode(record, value))
    assert decoded == value
    assert type(decoded) is tuple_class(MAX_ARITY)


def test_decode_nested():
    record = Record(Integer, Record(Text, Record(Bool, Integer)), Text)
    value = make_tuple(1, make_tuple('a', make_tuple(True, 2)), 'b')
    raw = encode(record, value)
    assert raw == [1, 'a', True, 2, 'b']
    decoded = decode_row(record, raw)
    assert decoded == value
    assert type(decoded[1][1]) is tuple_class(2)


def test_null_group():
    group = Nullable(Record(Integer, Text, Bool))
    row = Row((None, None, None, 'x'))
    assert group.build_from_row(row) is None
    assert row.position == 3
    assert row.take() == 'x'


def test_null_group_partially_filled():
    group = Nullable(Record(Integer, Nullable(Text)))
    assert decode_row(group, (None, None)) is None
    assert decode_row(group, (1, None)) == (1, None)
    # every element keeps its own nullability once the group is present
    with pytest.raises(DataError):
        decode_row(group, (None, 'a'))


def test_null_group_in_tuple():
    record = Record(Text, Nullable(Record(Integer, Integer)), Text)
    assert decode_row(record, ('a', None, None, 'b')) == ('a', None, 'b')
    assert decode_row(record, ('a', 1, 2, 'b')) == ('a', (1, 2), 'b')


def test_null_for_non_null_element():
    with pytest.raises(DataError) as ei:
        decode_row(Record(Integer, Text), (1, None))
    assert ei.value.args[0] == 'Unexpected null for non-null column of type Text'


def test_decode_error_stops_decoding():
    decoded = []

    class Tracked(Integer):
        def from_sql(self, raw):
            value = super().from_sql(raw)
            decoded.append(value)
            return value

    record = Record(Tracked, Tracked, Tracked)
    row = Row((1, 'x', 3))
    with pytest.raises(DataError):
        record.build_from_row(row)
    assert decoded == [1]
    assert row.position == 2


def test_row_length_mismatch():
    with pytest.raises(DataError):
        decode_row(Record(Integer, Integer), (1,))
    with pytest.raises(DataError) as ei:
        decode_row(Record(Integer, Integer), (1, 2, 3))
    assert ei.value.args[0] == 'Row has 3 fields, type (Integer, Integer) consumes 2'


def test_load_rows():
    rows = [(1, 'Jane', None), (2, 'John', 'john@example.com')]
    loaded = list(load_rows(users.all_columns.sql_type, rows))
    assert loaded == [(1, 'Jane', None), (2, 'John', 'john@example.com')]
    assert all(type(value) is tuple_class(3) for value in loaded)
