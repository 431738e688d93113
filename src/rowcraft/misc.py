"""
The module declares useful types here:
 * `PgTypeMetadata` - type OIDs the PostgreSQL backend reports for a SQL type
 * `MysqlTypeMetadata` - field type code (and signedness) of the MySQL backend
 * `Join` - a joined source of a SELECT query
 * `InsertValue`, `DefaultValue` - elements of an INSERT record
 * `Assign` - an element of an UPDATE changeset
"""

from collections import namedtuple

PgTypeMetadata = namedtuple('PgTypeMetadata', ['oid', 'array_oid'])
MysqlTypeMetadata = namedtuple('MysqlTypeMetadata', ['type_code', 'is_unsigned'])

Join = namedtuple('Join', ['join_type', 'source', 'on'])

JOIN_INNER = 'INNER JOIN'
JOIN_LEFT = 'LEFT OUTER JOIN'


class InsertValue(namedtuple('InsertValue', ['column', 'value'])):
    """An explicit value for a column of an INSERT record."""
    __slots__ = ()
    is_default = False


class DefaultValue(namedtuple('DefaultValue', ['column'])):
    """A column of an INSERT record left to its default value."""
    __slots__ = ()
    is_default = True


class Assign(namedtuple('Assign', ['column', 'expr'])):
    """
    A single assignment of the SET block of an UPDATE command:
        Assign(users.name, Bound('Jane', Text)) => "name" = %(p0)s
    """
    __slots__ = ()

    def is_noop(self):
        return False

    def as_changeset(self):
        return self

    def changeset_target(self):
        return self.column.table

    def walk_changeset(self, out):
        out.push_identifier(self.column.name)
        out.push_sql(' = ')
        self.expr.walk_ast(out)
