"""
Heterogeneous tuples: fixed-size ordered sequences of differently typed elements.

One tuple class is generated per supported arity (`Tuple1`, `Tuple2`, ...) from a single
template. All of them share the capabilities of `BaseTuple`, each of which is the same
operation repeated over positions 0..N-1:
 * expression list: `sql_type`, `walk_ast`, `query_id`, `appears_on`, `is_non_aggregate`
 * changeset for UPDATE statements: `as_changeset`, `is_noop`, `walk_changeset`
 * record for INSERT statements: `column_names`, `walk_insert_values`
 * association key: `foreign_key`, `foreign_key_column` (delegated to the first element)
 * result row: `Record` is the composite SQL type a tuple decodes from, `build` maps a
   decoded tuple into application objects
 * `append`

The number of generated classes is chosen by the `ROWCRAFT_TABLE_SIZE` setting when this
module is imported. Requesting a larger tuple raises `ArityError` right away, i.e. when a
query, a record or a composite type is declared, never while rows are processed.
"""

import logging
from operator import itemgetter

from .config import max_arity, table_size
from .errors import ArityError, DataError
from .types import SqlType, as_sql_type, unreachable

logger = logging.getLogger(__name__)

TABLE_SIZE = table_size()
MAX_ARITY = max_arity()

_TUPLE_CLASSES = {}


def tuple_class(arity):
    """
    Return the tuple class of the given arity.
    :param arity: number of elements, from 1 to `MAX_ARITY`
    :return: subclass of `BaseTuple`
    """
    try:
        return _TUPLE_CLASSES[arity]
    except KeyError:
        pass
    if isinstance(arity, int) and arity > MAX_ARITY:
        raise ArityError(
            'Tuples of {} elements are not available with the "{}" table size '
            '(at most {} elements). Set ROWCRAFT_TABLE_SIZE to a larger size.'.format(
                arity, TABLE_SIZE, MAX_ARITY))
    raise ArityError('Invalid tuple arity: {!r}'.format(arity))


def make_tuple(*values):
    """
    Create a tuple of the arity matching the number of values.
    Usage example:
        make_tuple(users.id, users.name) => Tuple2(users.id, users.name)
    """
    return tuple_class(len(values))._make(values)


def _is_noop(element):
    # `None` stands for "leave this column unchanged"
    return element is None or element.is_noop()


def _build_element(target, value):
    if target is None:
        return value
    if isinstance(target, type) and issubclass(target, BaseTuple):
        # nested tuples keep their decoded elements as is
        return target.build(value, *(None,) * target.arity)
    build = getattr(target, 'build', None)
    if build is not None:
        return build(value)
    return target(value)


class _Separator:
    """
    Render state shared by the steps of one render call: emits ", " before every item
    except the first one actually written.
    """

    def __init__(self, out):
        self.out = out
        self.written = False

    def next_item(self):
        """Call before writing an item."""
        if self.written:
            self.out.push_sql(', ')
        self.written = True


class StandardInsertPolicy:
    """
    Every column of a record is named, columns left to their default get the `DEFAULT`
    keyword in the VALUES list. Both lists always have one entry per element.
    """

    @staticmethod
    def includes(element):
        return True


class OmitDefaultsInsertPolicy:
    """
    Columns left to their default are omitted from both the column list and the VALUES list.
    For backends which do not support `DEFAULT` inside VALUES.
    """

    @staticmethod
    def includes(element):
        return not element.is_default


def insert_policy_for(backend):
    """Return the INSERT rendering policy matching the backend's capabilities."""
    if backend.supports_default_keyword:
        return StandardInsertPolicy
    return OmitDefaultsInsertPolicy


class BaseTuple(tuple):
    """
    Base class of the generated tuple classes. Do not instantiate it directly,
    use `make_tuple` or `tuple_class(n)`.
    """
    __slots__ = ()
    arity = 0
    _fields = ()

    def __new__(cls, *values):
        return cls._make(values)

    @classmethod
    def _make(cls, iterable):
        """Make a new tuple from an iterable of elements."""
        result = tuple.__new__(cls, iterable)
        if len(result) != cls.arity or cls.arity == 0:
            raise ArityError('{} takes {} elements, got {}'.format(
                cls.__name__, cls.arity, len(result)))
        return result

    def __getnewargs__(self):
        return tuple(self)

    def __repr__(self):
        return '{}({})'.format(type(self).__name__, ', '.join(repr(x) for x in self))

    def append(self, value):
        """
        Return a new tuple with `value` added after the last element.
        Usage example:
            make_tuple(users.id).append(users.name) => Tuple2(users.id, users.name)
        """
        return tuple_class(self.arity + 1)(*self, value)

    # Expression list

    @property
    def sql_type(self):
        """Composite SQL type of an expression tuple."""
        return Record(*(element.sql_type for element in self))

    def walk_ast(self, out):
        """Render the elements separated by commas."""
        for index, element in enumerate(self):
            if index != 0:
                out.push_sql(', ')
            element.walk_ast(out)

    def query_id(self):
        """Return the composite of the elements' query ids."""
        return (type(self),) + tuple(element.query_id() for element in self)

    def has_static_query_id(self):
        return all(element.has_static_query_id() for element in self)

    def is_non_aggregate(self):
        return all(element.is_non_aggregate() for element in self)

    def appears_on(self, sources):
        """Whether every element can be selected from `sources`."""
        return all(element.appears_on(sources) for element in self)

    # Changeset

    def as_changeset(self):
        """
        Convert every element into a changeset entry:
            make_tuple(users.name.eq('Jane'), None) => Tuple2(Assign(...), None)
        """
        return self._make(
            None if element is None else element.as_changeset()
            for element in self
        )

    def changeset_target(self):
        """Return the table the changeset updates (`None` if every element is `None`)."""
        targets = []
        for element in self:
            if element is None:
                continue
            target = element.as_changeset().changeset_target()
            if target is not None and target not in targets:
                targets.append(target)
        if len(targets) > 1:
            raise TypeError('A changeset must update a single table, got: {}'.format(
                ', '.join(t.table_name for t in targets)))
        return targets[0] if targets else None

    def is_noop(self):
        """Whether no element changes anything."""
        return all(_is_noop(element) for element in self)

    def walk_changeset(self, out):
        """Render the SET assignments, skipping elements which change nothing."""
        separator = _Separator(out)
        for element in self:
            if _is_noop(element):
                continue
            separator.next_item()
            element.walk_changeset(out)

    # Insert record

    def insert_target(self):
        """Return the table the record is inserted into."""
        tables = []
        for element in self:
            table = element.column.table
            if table not in tables:
                tables.append(table)
        if len(tables) > 1:
            raise TypeError('All columns of a record must belong to one table, got: {}'.format(
                ', '.join(t.table_name for t in tables)))
        return tables[0]

    def default_mask(self):
        """Return which elements are left to the column default."""
        return tuple(element.is_default for element in self)

    def column_names(self, out):
        """Render the column list of the record."""
        policy = insert_policy_for(out.backend)
        separator = _Separator(out)
        for element in self:
            if not policy.includes(element):
                continue
            separator.next_item()
            out.push_identifier(element.column.name)

    def walk_insert_values(self, out):
        """Render the parenthesized VALUES entry of the record."""
        policy = insert_policy_for(out.backend)
        out.push_sql('(')
        separator = _Separator(out)
        for element in self:
            if not policy.includes(element):
                continue
            separator.next_item()
            if element.is_default:
                out.push_sql('DEFAULT')
            else:
                element.value.walk_ast(out)
        out.push_sql(')')

    # Association key

    def foreign_key(self):
        """Return the foreign key of the first element."""
        return self[0].foreign_key()

    def foreign_key_column(self):
        """Return the foreign key column of the first element."""
        return self[0].foreign_key_column()

    # Queryable

    @classmethod
    def build(cls, row, *targets):
        """
        Map a decoded row into application objects, one target per element.
        A target is a class with a `build(value)` classmethod, another tuple class (whose
        elements are kept as decoded), any callable, or `None` to keep the decoded value as is.
        """
        if len(targets) != cls.arity:
            raise ArityError('{} takes {} targets, got {}'.format(
                cls.__name__, cls.arity, len(targets)))
        return cls._make(
            _build_element(target, value)
            for target, value in zip(targets, row)
        )


class Record(SqlType):
    """
    Composite SQL type of a tuple: the ordered list of its elements' SQL types.
    A record is decoded field by field into the tuple class of its arity. It is never sent
    or received as a single value.
    Usage example:
        Record(Integer, Text, Nullable(Text))
    """

    def __init__(self, *elements):
        self.value_class = tuple_class(len(elements))
        self.elements = tuple(as_sql_type(element) for element in elements)

    @property
    def name(self):
        return '({})'.format(', '.join(element.name for element in self.elements))

    @property
    def arity(self):
        return len(self.elements)

    def fields_needed(self):
        return sum(element.fields_needed() for element in self.elements)

    def metadata(self, backend):
        unreachable('Tuples should never be resolved as a single SQL value')

    def row_metadata(self, backend, out):
        for element in self.elements:
            element.row_metadata(backend, out)

    def from_sql(self, raw):
        unreachable('Tuples should never be decoded from a single SQL value')

    def to_sql(self, value):
        unreachable('Tuples should never be encoded as a single SQL value')

    def build_from_row(self, row):
        return self.value_class._make(
            element.build_from_row(row) for element in self.elements
        )

    def to_sql_row(self, value, out):
        if value is None:
            raise DataError('Unexpected null for non-null composite {}'.format(self.name))
        if len(value) != self.arity:
            raise ArityError('{} takes {} elements, got {}'.format(
                self.name, self.arity, len(value)))
        for element, element_value in zip(self.elements, value):
            element.to_sql_row(element_value, out)

    def _key(self):
        return self.elements

    def __repr__(self):
        return 'Record({})'.format(', '.join(repr(element) for element in self.elements))


def _make_tuple_class(arity):
    namespace = {
        '__slots__': (),
        '__doc__': 'Heterogeneous tuple of {} elements.'.format(arity),
        '__module__': __name__,
        'arity': arity,
        '_fields': tuple('_{}'.format(index) for index in range(arity)),
    }
    for index in range(arity):
        namespace['_{}'.format(index)] = property(
            itemgetter(index), doc='Element {}'.format(index))
    return type('Tuple{}'.format(arity), (BaseTuple,), namespace)


def _generate_tuple_classes(ceiling):
    for arity in range(1, ceiling + 1):
        cls = _make_tuple_class(arity)
        _TUPLE_CLASSES[arity] = cls
        globals()[cls.__name__] = cls
    logger.debug('Generated tuple classes Tuple1..Tuple%d (table size "%s")',
                 ceiling, TABLE_SIZE)


_generate_tuple_classes(MAX_ARITY)
