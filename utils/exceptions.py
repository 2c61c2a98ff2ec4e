"""Application error types.

Every error carries the HTTP status it maps to. The handlers registered in
``api.main`` turn them into the ``{"status": "error", "message": ...}``
envelope.
"""


class AppError(Exception):
    """Base class for errors that are reported to API clients."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    """A required field is missing or malformed."""

    status_code = 400


class DuplicateError(AppError):
    """A unique constraint would be violated (e.g. email already registered)."""

    status_code = 400


class AuthenticationError(AppError):
    """Bad credentials, or a missing/invalid/expired token."""

    status_code = 401


class NotFoundError(AppError):
    """The referenced document does not exist or is not owned by the caller."""

    status_code = 404


class PersistenceError(AppError):
    """The database could not be reached or the operation failed."""

    status_code = 500


class SeedingError(AppError):
    """Template data needed for seeding is missing. Treated as an operator error."""

    status_code = 500
