"""
Build settings of the package. They are read from the environment once, after loading
a `.env` file from the working directory (if there is one).

 * `ROWCRAFT_TABLE_SIZE` - arity tier of the generated tuple classes:
   `standard` (up to 16 elements), `large` (up to 26) or `huge` (up to 52).
"""

import os

from dotenv import load_dotenv

load_dotenv()

TABLE_SIZE_STANDARD = 'standard'
TABLE_SIZE_LARGE = 'large'
TABLE_SIZE_HUGE = 'huge'

TABLE_SIZES = {
    TABLE_SIZE_STANDARD: 16,
    TABLE_SIZE_LARGE: 26,
    TABLE_SIZE_HUGE: 52,
}

DEFAULT_TABLE_SIZE = TABLE_SIZE_STANDARD
TABLE_SIZE_ENV = 'ROWCRAFT_TABLE_SIZE'


def table_size(environ=None):
    """
    Return the name of the configured arity tier.
    :param environ: mapping to read the setting from, `os.environ` by default
    :return: str
    """
    if environ is None:
        environ = os.environ
    name = environ.get(TABLE_SIZE_ENV, DEFAULT_TABLE_SIZE).strip().lower()
    if name not in TABLE_SIZES:
        raise ValueError('Unknown table size "{}". Expected one of: {}'.format(
            name, ', '.join(TABLE_SIZES)))
    return name


def max_arity(environ=None) -> int:
    """Return the largest tuple arity of the configured tier."""
    return TABLE_SIZES[table_size(environ)]
