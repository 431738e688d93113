"""
Implementation for UPDATE query.
"""

from .base import BaseCommand
from .behaviours import WhereBehaviour, ReturningBehaviour, TableBehaviour
from .errors import ProgrammingError
from .tuples import BaseTuple, make_tuple


class Update(BaseCommand, WhereBehaviour, ReturningBehaviour, TableBehaviour):
    """
    Builder for UPDATE commands. The SET block is a changeset: a tuple whose elements are
    assignments (`users.name.eq('Jane')`), nested changesets, or `None` for columns which
    are left unchanged. Unchanged columns are not rendered.
    Examples:
        1) q = Update(Pg(), users,
                changeset=make_tuple(users.name.eq('Jane'), None, users.active.eq(True)),
                where=users.id.eq(7),
            )
            That code constructs this query:
                UPDATE "users" SET "name" = %(p0)s, "active" = %(p1)s
                WHERE "users"."id" = %(p2)s

        2) The 2nd approach in query constructing is with methods:
            q = Update(Pg()) \\
                .set(users.name.eq('Jane')) \\
                .add_set(users.active.eq(True)) \\
                .where(users.id.eq(7))

    A changeset which changes nothing cannot be rendered (an UPDATE needs at least one
    assignment). Check `is_noop()` before building the query.
    """
    def __init__(self, backend, table=None, changeset=None, where=None):
        super().__init__(backend)
        WhereBehaviour.__init__(self, self)
        ReturningBehaviour.__init__(self, self)
        TableBehaviour.__init__(self, self, table)
        self._changeset = None
        if changeset is not None:
            self.set(changeset)
        if where is not None:
            self.where(where)

    def set(self, changeset):
        """
        Sets the SET query block.
        :param changeset: a tuple of changes or a single change
        :return: self
        """
        if not isinstance(changeset, BaseTuple):
            changeset = make_tuple(changeset)
        changeset = changeset.as_changeset()
        self._check_target(changeset.changeset_target())
        self._changeset = changeset
        return self

    def add_set(self, change):
        """
        Adds a single change into the SET query block.
            add_set(users.gender.eq('male')) => SET ..., "gender" = %(p3)s
        :param change: the change to add
        :return: self
        """
        if self._changeset is None:
            return self.set(change)
        change = None if change is None else change.as_changeset()
        if change is not None:
            self._check_target(change.changeset_target())
        self._changeset = self._changeset.append(change)
        return self

    def is_noop(self):
        """Whether the update changes nothing. Such an update must not be executed."""
        return self._changeset is None or self._changeset.is_noop()

    def _check_target(self, target):
        if target is None:
            return
        if self._table is None:
            self._table = target
        elif target is not self._table:
            raise TypeError('Cannot apply changes of "{}" to "{}"'.format(
                target.table_name, self._table.table_name))

    def _on_build_query(self, out):
        table = self._require_table()
        if self.is_noop():
            raise ProgrammingError('There are no changes to save. This query cannot be built')
        out.push_sql('UPDATE ')
        table.walk_ast(out)
        out.push_sql(' SET ')
        self._changeset.walk_changeset(out)
        self._build_query_where(out)
        self._build_query_returning(out)
