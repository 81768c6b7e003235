"""
utils/errors.py
---------------
Exception types shared by the repository, service and handler layers.
Handlers translate these into HTTP status codes; nothing below the
handler layer knows about HTTP.
"""


class AppError(Exception):
    """Base class for all SubTrack errors."""


class ValidationError(AppError):
    """A request carried a missing/blank field, a non-positive cost or a bad id."""


class NotFoundError(AppError):
    """No subscription row matched the requested identifier."""


class StorageError(AppError):
    """The database failed: connectivity, constraint, query or encoding error."""


class StartupError(AppError):
    """The initial connection or schema creation failed. Fatal to the process."""
