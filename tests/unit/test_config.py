import pytest

from rowcraft import MAX_ARITY
from rowcraft.config import TABLE_SIZE_ENV, max_arity, table_size


def test_default_table_size():
    assert table_size({}) == 'standard'
    assert max_arity({}) == 16


def test_table_sizes():
    assert max_arity({TABLE_SIZE_ENV: 'standard'}) == 16
    assert max_arity({TABLE_SIZE_ENV: 'large'}) == 26
    assert max_arity({TABLE_SIZE_ENV: 'huge'}) == 52
    assert table_size({TABLE_SIZE_ENV: ' Huge '}) == 'huge'


def test_unknown_table_size():
    with pytest.raises(ValueError) as ei:
        table_size({TABLE_SIZE_ENV: 'enormous'})
    assert ei.value.args[0] == 'Unknown table size "enormous". Expected one of: standard, large, huge'


def test_configured_table_size():
    assert MAX_ARITY == max_arity()
    assert MAX_ARITY in (16, 26, 52)
