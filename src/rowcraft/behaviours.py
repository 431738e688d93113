"""
The module provides different behaviours to be used in query builder classes:
 * `FromBehaviour` - for FROM query block (with joins)
 * `TableBehaviour` - for specifying the target table of INSERT and UPDATE commands
 * `ReturningBehaviour` - for RETURNING query block
 * `WhereBehaviour` - for WHERE query block
"""

from .base import BaseCommand
from .errors import NotSupportedError, ProgrammingError
from .misc import Join, JOIN_INNER, JOIN_LEFT
from .tuples import BaseTuple, make_tuple


class FromBehaviour:
    """
    Implements FROM query block.
    """

    def __init__(self, cmd: BaseCommand):
        self._from = None
        self._join = []
        self._o = cmd

    def from_(self, table):
        """
        Sets FROM query block
        Usage example:
            from_(users) => FROM "users"
        :param table: Table
        :return: self
        """
        self._from = table
        self._join = []
        return self

    def join(self, table, on):
        """
        Adds INNER JOIN to the FROM query block
            join(posts, posts.user_id.eq(users.id))
                => FROM "users" INNER JOIN "posts" ON "posts"."user_id" = "users"."id"
        """
        self._join.append(Join(JOIN_INNER, table, on))
        return self

    def left_join(self, table, on):
        """
        Adds LEFT OUTER JOIN to the FROM query block. Columns of `table` should be selected
        through `nullable()`: they are all NULL when there is no matching row.
        """
        self._join.append(Join(JOIN_LEFT, table, on))
        return self

    def sources(self):
        """Return every table of the FROM query block."""
        if self._from is None:
            return ()
        return (self._from,) + tuple(join.source for join in self._join)

    def _build_query_from(self, out):
        if self._from is None:
            return
        out.push_sql(' FROM ')
        self._from.walk_ast(out)
        for join in self._join:
            out.push_sql(' {} '.format(join.join_type))
            join.source.walk_ast(out)
            out.push_sql(' ON ')
            join.on.walk_ast(out)


class TableBehaviour:
    """
    Implementation for table naming. It is used in builder classes for INSERT and UPDATE commands.
    """

    def __init__(self, cmd: BaseCommand, table=None):
        self._o = cmd
        self._table = table

    def table(self, table):
        """
        Sets the table into the query.
        :param table: Table
        :return: self
        """
        self._table = table
        return self

    def _require_table(self):
        if self._table is None:
            raise ProgrammingError('Please specify the table of the {} command'.format(
                type(self._o).__name__.upper()))
        return self._table


class ReturningBehaviour:
    """
    Implementation of the RETURNING query block.
    """

    def __init__(self, cmd: BaseCommand):
        self._o = cmd
        self._returning = None

    def returning(self, exprs):
        """
        Sets RETURNING query block. `exprs` is an expression or a tuple of expressions:
            returning(make_tuple(users.id, users.name)) => RETURNING "users"."id", "users"."name"
        :param exprs: the expressions to return
        :return: self
        """
        if not isinstance(exprs, BaseTuple):
            exprs = make_tuple(exprs)
        self._returning = exprs
        return self

    def returning_sql_type(self):
        """SQL type of the returned rows (`None` without RETURNING block)."""
        if self._returning is None:
            return None
        return self._returning.sql_type

    def _build_query_returning(self, out):
        if self._returning is None:
            return
        if not out.backend.supports_returning:
            raise NotSupportedError('Backend "{}" does not support RETURNING'.format(
                out.backend.name))
        out.push_sql(' RETURNING ')
        self._returning.walk_ast(out)


class WhereBehaviour:
    """
    Implementation of WHERE query block.
    """
    def __init__(self, cmd: BaseCommand):
        self._where = None
        self._o = cmd

    def where(self, cond):
        """
        Sets WHERE query block.
        Usage example:
            where(users.id.eq(7)) => WHERE "users"."id" = %(p0)s
        :param cond: the condition for the WHERE block
        :return: self
        """
        self._where = cond
        return self

    def _build_query_where(self, out):
        if self._where is None:
            return
        out.push_sql(' WHERE ')
        self._where.walk_ast(out)
