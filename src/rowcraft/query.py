"""
Define `Query` class for building SELECT queries. Also it includes `Select` class.
`Select` is only a alias to `Query`.
"""

from .base import BaseCommand
from .behaviours import FromBehaviour, WhereBehaviour
from .errors import ProgrammingError
from .expression import NullableExpression
from .row import decode_row, load_rows
from .tuples import BaseTuple, make_tuple


class Query(BaseCommand, WhereBehaviour, FromBehaviour):
    """
    Builder for SELECT query.
    Usage example:
        q = Query(Pg(), users.all_columns).from_(users).where(users.id.eq(7))
            => SELECT "users"."id", "users"."name" FROM "users" WHERE "users"."id" = %(p0)s
        cursor.execute(q.build_query().query, q.get_params())
        for user_id, name in q.load(cursor):
            ...
    """
    def __init__(self, backend, selection=None):
        super().__init__(backend)
        WhereBehaviour.__init__(self, self)
        FromBehaviour.__init__(self, self)
        self._distinct = False
        self._select = None
        if selection is not None:
            self.select(selection)

    def distinct(self, _distinct=True):
        """
        Set DISTINCT mode (see SQL specification for more info).
        :param _distinct: a boolean. If True distinct mode will be on, otherwise off
        :return: self
        """
        self._distinct = _distinct
        return self

    def select(self, selection):
        """
        Sets SELECT query block. `selection` is an expression or a tuple of expressions.
        Rows are decoded as the selection's SQL type.
            select(make_tuple(users.id, users.name)) => SELECT "users"."id", "users"."name"
            select(users.name) => SELECT "users"."name"
        :param selection: the expressions to select
        :return: self
        """
        self._select = selection
        return self

    def add_select(self, expr):
        """
        Appends a new expression to the SELECT block. A single selected expression becomes
        a tuple:
            select(users.id).add_select(users.name) => SELECT "users"."id", "users"."name"
        :param expr: the expression to add
        :return: self
        """
        if self._select is None:
            return self.select(expr)
        if isinstance(self._select, BaseTuple):
            self._select = self._select.append(expr)
        else:
            self._select = make_tuple(self._select, expr)
        return self

    @property
    def sql_type(self):
        """SQL type of the rows returned by the query."""
        return self._require_selection().sql_type

    def load(self, rows):
        """Return a generator decoding every row returned by the query."""
        return load_rows(self.sql_type, rows)

    def load_one(self, values):
        """Decode a single row returned by the query."""
        return decode_row(self.sql_type, values)

    def is_non_aggregate(self):
        return True

    def appears_on(self, sources):
        return True

    def query_id(self):
        parts = [
            ('select', self._distinct, self._require_selection().query_id()),
        ]
        if self._from is not None:
            parts.append(('from', self._from.query_id()))
        for join in self._join:
            parts.append(('join', join.join_type, join.source.query_id(), join.on.query_id()))
        if self._where is not None:
            parts.append(('where', self._where.query_id()))
        return (Query,) + tuple(parts)

    def has_static_query_id(self):
        return all(part.has_static_query_id() for part in self._query_id_sources())

    def _query_id_sources(self):
        sources = [self._require_selection()]
        if self._from is not None:
            sources.append(self._from)
        for join in self._join:
            sources.extend([join.source, join.on])
        if self._where is not None:
            sources.append(self._where)
        return sources

    def _require_selection(self):
        if self._select is None:
            raise ProgrammingError('Please specify what to select')
        return self._select

    def _validate_selection(self):
        selection = self._require_selection()
        sources = self.sources()
        if sources and not selection.appears_on(sources):
            raise TypeError('The selection references a table which is not in the FROM clause')
        aggregates = {expr.is_non_aggregate() for expr in _selected_expressions(selection)}
        if len(aggregates) > 1:
            raise TypeError('Aggregate and non-aggregate expressions cannot be selected together')

    def _on_build_query(self, out):
        self._validate_selection()
        out.push_sql('SELECT ')
        if self._distinct:
            out.push_sql('DISTINCT ')
        self._select.walk_ast(out)
        self._build_query_from(out)
        self._build_query_where(out)


def _selected_expressions(selection):
    # nested and nullable tuples are flattened
    if isinstance(selection, NullableExpression):
        yield from _selected_expressions(selection.expr)
    elif isinstance(selection, BaseTuple):
        for element in selection:
            yield from _selected_expressions(element)
    else:
        yield selection


Select = Query
