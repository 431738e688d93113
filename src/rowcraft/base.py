"""
Defines the AST output used by every renderable object and `BaseCommand`, the base type
for every SQL builder class.

Rendering is push based: expressions, tuples and statements receive a `QueryBuilder` and
append their SQL to it. The builder collects `psycopg2.sql` composables, so the built query
can be passed to `cursor.execute()` as is.
"""

from contextlib import contextmanager

from psycopg2 import sql


class BuildContext:
    """
    Class for containing all the context during building queries.
    Bound values are registered here and get a placeholder in the backend's paramstyle.
    """

    def __init__(self, paramstyle, param_name_prefix=None):
        self.paramstyle = paramstyle
        self.param_name_prefix = param_name_prefix if param_name_prefix is not None else 'p'
        self.params = {} if paramstyle == 'pyformat' else []
        self._params_next_idx = 0

    def set_param(self, value):
        """Register a new query parameter. Return the placeholder to render."""
        if self.paramstyle == 'pyformat':
            while True:
                param_name = '{}{}'.format(self.param_name_prefix, self._params_next_idx)
                if param_name not in self.params:
                    break
                self._params_next_idx += 1
            self.params[param_name] = value
            return sql.Placeholder(param_name)
        self.params.append(value)
        if self.paramstyle == 'qmark':
            return sql.SQL('?')
        if self.paramstyle == 'format':
            return sql.Placeholder()
        raise ValueError('Unsupported paramstyle: {}'.format(self.paramstyle))


class BuiltQuery:
    """
    Built query created after `QueryBuilder.finish` method invoke.
    """

    def __init__(self, query, params):
        self.query = query
        self.params = params

    def as_string(self):
        """
        Return the query as raw sql statement
        :return: str
        """
        return self.query.as_string(None)

    def __repr__(self):
        return 'BuiltQuery({!r}, {!r})'.format(self.as_string(), self.params)


class QueryBuilder:
    """
    Collects SQL fragments for one statement.
    Usage example:
        out = Pg().query_builder()
        out.push_sql('SELECT ')
        out.push_identifier('users.id')
        out.finish().as_string() => 'SELECT "users"."id"'
    """

    def __init__(self, backend, ctx=None):
        self.backend = backend
        self.ctx = ctx if ctx is not None else BuildContext(backend.paramstyle)
        self._parts = []

    def push_sql(self, text):
        """Append literal SQL text."""
        self._parts.append(sql.SQL(text))

    def push_identifier(self, name):
        """Append an identifier quoted for the current backend."""
        self._parts.append(sql.SQL(self.backend.quote_identifier(name)))

    def push_bind_param(self, value):
        """Append a placeholder for `value`, which is sent to the driver as a query parameter."""
        self._parts.append(self.ctx.set_param(value))

    @contextmanager
    def nested(self):
        """
        Begin a nested fragment. The fragment shares the build context with its parent
        and is appended to the parent as a whole once the block completes.
        Nested fragments may open nested fragments of their own.
        """
        child = QueryBuilder(self.backend, self.ctx)
        yield child
        self._parts.append(child.composed())

    def composed(self):
        """Return what has been pushed so far as a single composable."""
        return sql.Composed(self._parts)

    def is_empty(self):
        """Whether nothing has been pushed yet."""
        return not self._parts

    def finish(self):
        """
        Return the built query.
        :return: BuiltQuery
        """
        return BuiltQuery(self.composed(), self.ctx.params)


class BaseCommand:
    """
    The base class for all command builders.
    """

    def __init__(self, backend):
        """Create a new object."""
        self.backend = backend

    def as_string(self):
        """
        Return the query as raw sql statement
        :return: str
        """
        return self.build_query().as_string()

    def get_params(self):
        """
        Return the parameters to be passed to the query execution.
        :return: dict or list, depending on the backend's paramstyle
        """
        return self.build_query().params

    def build_query(self):
        """
        Build a query. Return an object whose `query` and `params` are passed
        to `cursor.execute()` function.
        :return: BuiltQuery
        """
        out = self.backend.query_builder()
        self._on_build_query(out)
        return out.finish()

    def walk_ast(self, out):
        """Render the statement into another builder as a parenthesized subquery."""
        out.push_sql('(')
        with out.nested() as subquery:
            self._on_build_query(subquery)
        out.push_sql(')')

    def query_id(self):
        """
        Return a token describing the shape of the statement. Two statements with equal
        tokens render the same SQL text and may share a prepared statement.
        """
        return (type(self), id(self))

    def has_static_query_id(self):
        """Whether `query_id` can be used as a prepared statement cache key."""
        return False

    # Argument `out` is unused here, but it is useful in derived classes.
    # pylint: disable=W0613
    def _on_build_query(self, out):
        return None
