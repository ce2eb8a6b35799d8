"""
Session manager exceptions.
"""


class DatabaseNotInitialized(RuntimeError):
    """Raised when a session is requested before Database.init()."""


class DatabaseTransactionError(Exception):
    """Raised when a session cannot be rolled back cleanly."""
