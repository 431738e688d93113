"""
rowcraft - heterogeneous tuples for composing SQL and decoding result rows.

Tuples of columns and expressions render as comma-separated SQL, decode result rows
(including all-NULL groups of outer joins), work as UPDATE changesets and INSERT records,
and report query ids usable as prepared statement cache keys.
"""

from .associations import BelongsTo, grouped_by
from .backend import Backend, Mysql, Pg, Sqlite
from .base import BaseCommand, BuildContext, BuiltQuery, QueryBuilder
from .expression import (
    Bound, Column, Count, Eq, Expression, NullableExpression, SqlLiteral, Table, as_expression,
    nullable,
)
from .insert import Insert
from .misc import Assign, DefaultValue, InsertValue
from .query import Query, Select
from .row import Row, decode_row, load_rows
from .tuples import MAX_ARITY, BaseTuple, Record, make_tuple, tuple_class
from .types import (
    BigInt, Binary, Bool, Date, Double, Float, Integer, Json, Nullable, Numeric, SmallInt,
    SqlType, Text, Timestamp,
)
from .update import Update
