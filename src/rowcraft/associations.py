"""
Belongs-to associations between loaded rows.

A child model references its parent through a foreign key column:

    class Post(BelongsTo):
        __foreign_key__ = posts.user_id

        def __init__(self, id, user_id, title):
            ...

Tuples whose first element is a child (e.g. `(Post, Comment)` rows loaded by a join)
report the foreign key of that first element, so they can be grouped the same way.
"""

from collections import defaultdict


class BelongsTo:
    """
    Mixin for objects referencing a parent row. The foreign key value is read from the
    attribute named after `__foreign_key__` column.
    """
    __foreign_key__ = None

    def foreign_key(self):
        """Return the foreign key value (`None` if the parent is not set)."""
        return getattr(self, self.foreign_key_column().name)

    @classmethod
    def foreign_key_column(cls):
        """Return the column holding the foreign key."""
        if cls.__foreign_key__ is None:
            raise TypeError('{} does not declare __foreign_key__'.format(cls.__name__))
        return cls.__foreign_key__


def grouped_by(children, parents, parent_key='id'):
    """
    Group children under their parents.
    Return a list with one list of children per parent, in the order of `parents`.
    Children without a parent in `parents` are dropped.
    :param children: objects (or tuples) implementing `foreign_key()`
    :param parents: parent objects
    :param parent_key: name of the parent attribute the foreign key refers to
    :return: list of lists
    """
    by_key = defaultdict(list)
    for child in children:
        key = child.foreign_key()
        if key is not None:
            by_key[key].append(child)
    return [by_key.get(getattr(parent, parent_key), []) for parent in parents]
