"""
psycopg2 errors redeclares here. The module serves as a facade so that every backend reports
failures through the same DB-API exception hierarchy, whatever driver executes the queries.
For docs of the DB-API errors please refer to the psycopg2 documentation.

Two extra errors are programming faults raised by the tuple layer itself:
 * `ArityError` - a tuple or composite type was used with the wrong number of elements,
   or beyond the configured arity ceiling
 * `UnreachableError` - an invariant of the tuple layer was violated
"""

import psycopg2

Error = psycopg2.Error
InterfaceError = psycopg2.InterfaceError
DatabaseError = psycopg2.DatabaseError
DataError = psycopg2.DataError
OperationalError = psycopg2.OperationalError
IntegrityError = psycopg2.IntegrityError
InternalError = psycopg2.InternalError
ProgrammingError = psycopg2.ProgrammingError
NotSupportedError = psycopg2.NotSupportedError


class ArityError(TypeError):
    """Raised when a tuple does not have the arity its type declares."""


class UnreachableError(AssertionError):
    """Raised when code that must never run is reached. Never catch it."""
