"""
class `Insert` for building an INSERT command.
"""

import logging
from itertools import groupby

from .base import BaseCommand
from .behaviours import ReturningBehaviour, TableBehaviour
from .errors import ProgrammingError
from .tuples import BaseTuple, StandardInsertPolicy, insert_policy_for

logger = logging.getLogger(__name__)


class Insert(BaseCommand, ReturningBehaviour, TableBehaviour):
    """
    Builder for INSERT command. Records are tuples of `InsertValue` and `DefaultValue`
    elements, usually made with `Table.insert_values`.
    Usage examples:
    * Single record:
        Insert(Pg(), users, users.insert_values(id=1, name='John'))
            => INSERT INTO "users" ("id", "name", "email") VALUES (%(p0)s, %(p1)s, DEFAULT)
    * Multiple records:
        Insert(Pg(), users, [
            users.insert_values(id=1, name='John'),
            users.insert_values(id=2, name='James', email='james@example.com'),
        ])
            => INSERT INTO "users" ("id", "name", "email")
                VALUES (%(p0)s, %(p1)s, DEFAULT), (%(p2)s, %(p3)s, %(p4)s)
    * Backends without `DEFAULT` keyword (SQLite) omit defaulted columns:
        Insert(Sqlite(), users, users.insert_values(id=1, name='John'))
            => INSERT INTO "users" ("id", "name") VALUES (?, ?)
      Records which leave different columns to their default cannot share one statement
      there, use `build_queries` to get one statement per group of alike records.
    """
    def __init__(self, backend, table=None, values=None):
        super().__init__(backend)
        ReturningBehaviour.__init__(self, self)
        TableBehaviour.__init__(self, self, table)
        self._records = []
        if values is not None:
            self.values(values)

    def values(self, values):
        """
        Sets the records to insert: a single record or an iterable of records.
        :param values: the records to insert
        :return: self
        """
        self._records = []
        if isinstance(values, BaseTuple):
            return self.add_values(values)
        for record in values:
            self.add_values(record)
        return self

    def add_values(self, record):
        """
        Adds a record to the VALUES query block.
        :param record: the record to insert
        :return: self
        """
        if not isinstance(record, BaseTuple):
            raise TypeError('A record must be a tuple of column values, got {!r}'.format(record))
        target = record.insert_target()
        if self._table is None:
            self._table = target
        elif target is not self._table:
            raise TypeError('Cannot insert a record of "{}" into "{}"'.format(
                target.table_name, self._table.table_name))
        if self._records:
            expected = _column_layout(self._records[0])
            if _column_layout(record) != expected:
                raise TypeError('All records must have the same columns: ({}) != ({})'.format(
                    ', '.join(_column_layout(record)), ', '.join(expected)))
        self._records.append(record)
        return self

    def build_queries(self):
        """
        Build the statements inserting every record. Backends supporting `DEFAULT` get a
        single statement; the others get one statement per run of records leaving the same
        columns to their default.
        :return: list of BuiltQuery
        """
        batches = self._batches()
        if len(batches) > 1:
            logger.debug('Splitting insert of %d records into %d statements for backend "%s"',
                         len(self._records), len(batches), self.backend.name)
        result = []
        for batch in batches:
            out = self.backend.query_builder()
            self._build_records(out, batch)
            result.append(out.finish())
        return result

    def _batches(self):
        records = self._require_records()
        policy = insert_policy_for(self.backend)
        if policy is StandardInsertPolicy:
            return [records]
        batches = []
        for _, group in groupby(records, key=lambda r: r.default_mask()):
            group = list(group)
            if _has_columns(group[0], policy):
                batches.append(group)
            else:
                # DEFAULT VALUES inserts a single row
                batches.extend([record] for record in group)
        return batches

    def _require_records(self):
        if not self._records:
            raise ProgrammingError('Please specify values to insert')
        return self._records

    def _on_build_query(self, out):
        batches = self._batches()
        if len(batches) > 1:
            raise ProgrammingError(
                'Backend "{}" cannot insert these records with a single statement because '
                'they leave different columns to their default. Please call build_queries() instead'.format(
                    self.backend.name))
        self._build_records(out, batches[0])

    def _build_records(self, out, records):
        table = self._require_table()
        policy = insert_policy_for(out.backend)
        out.push_sql('INSERT INTO ')
        table.walk_ast(out)
        if _has_columns(records[0], policy):
            out.push_sql(' (')
            records[0].column_names(out)
            out.push_sql(') VALUES ')
            for index, record in enumerate(records):
                if index != 0:
                    out.push_sql(', ')
                record.walk_insert_values(out)
        else:
            out.push_sql(' DEFAULT VALUES')
        self._build_query_returning(out)


def _column_layout(record):
    return tuple(element.column.name for element in record)


def _has_columns(record, policy):
    return any(policy.includes(element) for element in record)

