"""Errors raised by the record repository."""


class DatabaseError(Exception):
    """Any failure talking to the records table."""


class ConnectionError(DatabaseError):
    """The database could not be reached."""


class DuplicateRecordError(DatabaseError):
    """A record with the requested ID already exists."""


class ConstraintViolationError(DatabaseError):
    """A write would break the folder tree.

    Raised when ``parent_id`` does not name an existing folder, or when a
    folder would become its own ancestor.
    """
