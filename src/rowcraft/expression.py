"""
Expressions the tuple layer is composed from:
 * `Table` and `Column` - schema objects
 * `Bound` - a value sent as a query parameter
 * `SqlLiteral` - raw SQL text with a declared type
 * `Eq` - `left = right`, also usable as an UPDATE assignment
 * `NullableExpression` - an expression whose SQL type is made nullable (outer joins)
 * `Count` - an aggregate, mainly to tell aggregates and plain expressions apart

Every expression renders itself into a `QueryBuilder` with `walk_ast` and reports a query id:
a token which is equal for expressions rendering the same SQL text.
"""

from .base import BaseCommand
from .misc import Assign, DefaultValue, InsertValue
from .tuples import BaseTuple, make_tuple
from .types import Bool, BigInt, Nullable, as_sql_type


class Expression:
    """
    Base class of expressions.
    """
    sql_type = None

    def walk_ast(self, out):
        raise NotImplementedError

    def query_id(self):
        return (type(self),)

    def has_static_query_id(self):
        return True

    def is_non_aggregate(self):
        return True

    def appears_on(self, sources):
        """Whether the expression only references tables from `sources`."""
        return True

    def eq(self, other):
        """
        Return `self = other` expression. Plain values are bound as parameters:
            users.name.eq('Jane') => "users"."name" = %(p0)s
        """
        return Eq(self, as_expression(other, self.sql_type))

    def nullable(self):
        return nullable(self)


def as_expression(value, sql_type):
    """Return `value` if it is an expression already, otherwise bind it as `sql_type`."""
    if isinstance(value, (Expression, BaseTuple, BaseCommand)):
        return value
    return Bound(value, sql_type)


def nullable(expr):
    """
    Make an expression (or a tuple of expressions) nullable. A nullable tuple decodes as one
    group which is `None` when all its fields are NULL, e.g. the right side of a LEFT JOIN.
    """
    return NullableExpression(expr)


def _source_tables(sources):
    if isinstance(sources, Table):
        return (sources,)
    return tuple(sources)


# instance attributes, columns with these names would be shadowed
_TABLE_ATTRIBUTES = ('table_name', 'columns')


class Table:
    """
    Table schema.
    Usage example:
        users = Table('users', id=Integer, name=Text, email=Nullable(Text))
        users.id => Column(users, 'id', Integer())
        users.all_columns => Tuple3(users.id, users.name, users.email)
    """

    def __init__(self, table_name, /, **columns):
        if not columns:
            raise ValueError('Table "{}" must have at least one column'.format(table_name))
        hidden = sorted(
            name for name in columns if name in _TABLE_ATTRIBUTES or hasattr(Table, name))
        if hidden:
            raise ValueError('Table "{}" cannot have columns named after its attributes: {}'.format(
                table_name, ', '.join(hidden)))
        self.table_name = table_name
        self.columns = {
            column_name: Column(self, column_name, sql_type)
            for column_name, sql_type in columns.items()
        }

    def __getattr__(self, item):
        columns = self.__dict__.get('columns', {})
        if item in columns:
            return columns[item]
        raise AttributeError('Table "{}" has no column "{}"'.format(
            self.__dict__.get('table_name'), item))

    @property
    def all_columns(self):
        """Tuple of every column, in declaration order."""
        return make_tuple(*self.columns.values())

    def insert_values(self, **values):
        """
        Return an insert record with one element per column. Columns missing from
        `values` are left to their default.
        Usage example:
            users.insert_values(name='Jane')
                => Tuple3(DefaultValue(users.id), InsertValue(users.name, Bound('Jane')), ...)
        """
        unknown = set(values) - set(self.columns)
        if unknown:
            raise AttributeError('Table "{}" has no columns: {}'.format(
                self.table_name, ', '.join(sorted(unknown))))
        return make_tuple(*(
            InsertValue(column, as_expression(values[name], column.sql_type))
            if name in values else DefaultValue(column)
            for name, column in self.columns.items()
        ))

    def walk_ast(self, out):
        out.push_identifier(self.table_name)

    def query_id(self):
        return (Table, self.table_name)

    def has_static_query_id(self):
        return True

    def __repr__(self):
        return 'Table({!r})'.format(self.table_name)


class Column(Expression):
    """Column of a table. Renders as a qualified name: "users"."id"."""

    def __init__(self, table, name, sql_type):
        self.table = table
        self.name = name
        self.sql_type = as_sql_type(sql_type)

    def walk_ast(self, out):
        out.push_identifier(self.table.table_name)
        out.push_sql('.')
        out.push_identifier(self.name)

    def query_id(self):
        return (Column, self.table.table_name, self.name)

    def appears_on(self, sources):
        return self.table in _source_tables(sources)

    def __repr__(self):
        return 'Column({}.{})'.format(self.table.table_name, self.name)


class Bound(Expression):
    """A value bound as a query parameter. Its value is not part of the query id."""

    def __init__(self, value, sql_type):
        self.value = value
        self.sql_type = as_sql_type(sql_type)

    def walk_ast(self, out):
        out.push_bind_param(None if self.value is None else self.sql_type.to_sql(self.value))

    def query_id(self):
        return (Bound, self.sql_type)

    def __repr__(self):
        return 'Bound({!r})'.format(self.value)


class SqlLiteral(Expression):
    """
    Raw SQL text. Its query id is not static: the text may differ between two
    otherwise identical queries.
    """

    def __init__(self, text, sql_type):
        self.text = text
        self.sql_type = as_sql_type(sql_type)

    def walk_ast(self, out):
        out.push_sql(self.text)

    def query_id(self):
        return (SqlLiteral, self.text)

    def has_static_query_id(self):
        return False

    def __repr__(self):
        return 'SqlLiteral({!r})'.format(self.text)


class Eq(Expression):
    """`left = right`. Used as an UPDATE assignment when `left` is a column."""
    sql_type = Bool()

    def __init__(self, left, right):
        self.left = left
        self.right = right

    def walk_ast(self, out):
        self.left.walk_ast(out)
        out.push_sql(' = ')
        self.right.walk_ast(out)

    def query_id(self):
        return (Eq, self.left.query_id(), self.right.query_id())

    def has_static_query_id(self):
        return self.left.has_static_query_id() and self.right.has_static_query_id()

    def is_non_aggregate(self):
        return self.left.is_non_aggregate() and self.right.is_non_aggregate()

    def appears_on(self, sources):
        return self.left.appears_on(sources) and self.right.appears_on(sources)

    def as_changeset(self):
        if not isinstance(self.left, Column):
            raise TypeError('Only a column can be assigned, got {!r}'.format(self.left))
        return Assign(self.left, self.right)


class NullableExpression(Expression):
    """Renders the wrapped expression as is, only its SQL type becomes nullable."""

    def __init__(self, expr):
        self.expr = expr

    @property
    def sql_type(self):
        sql_type = self.expr.sql_type
        return sql_type if sql_type.is_nullable else Nullable(sql_type)

    def walk_ast(self, out):
        self.expr.walk_ast(out)

    def query_id(self):
        return (NullableExpression, self.expr.query_id())

    def has_static_query_id(self):
        return self.expr.has_static_query_id()

    def is_non_aggregate(self):
        return self.expr.is_non_aggregate()

    def appears_on(self, sources):
        return self.expr.appears_on(sources)


class Count(Expression):
    """`COUNT(expr)` aggregate."""
    sql_type = BigInt()

    def __init__(self, expr):
        self.expr = expr

    def walk_ast(self, out):
        out.push_sql('COUNT(')
        self.expr.walk_ast(out)
        out.push_sql(')')

    def query_id(self):
        return (Count, self.expr.query_id())

    def has_static_query_id(self):
        return self.expr.has_static_query_id()

    def is_non_aggregate(self):
        return False

    def appears_on(self, sources):
        return self.expr.appears_on(sources)
