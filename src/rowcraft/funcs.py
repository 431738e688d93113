"""SQL function shortcuts."""

from .expression import Count, SqlLiteral
from .types import Timestamp


def now():
    """Shortcut for `now` SQL function. Return an expression calling it."""
    return SqlLiteral('now()', Timestamp)


def count(expr):
    """Shortcut for `COUNT` aggregate."""
    return Count(expr)

