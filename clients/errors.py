"""Errors shared by the key-value storage clients."""


class StorageError(Exception):
    """
    Key-value store read or write failed.

    Wraps backend-specific errors (OSError, redis errors, corrupt JSON) so
    callers only need to handle one type.
    """
