"""
Error taxonomy. Every application error carries the HTTP status it surfaces with.

Both NotFoundError and ConflictError map to 403 for compatibility with existing
clients, even though they describe different conditions.
"""


class ErrorWithStatus(Exception):
    """Base application error: human-readable message plus HTTP status."""

    status: int = 500

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status is not None:
            self.status = status


class NotFoundError(ErrorWithStatus):
    """No user row matches the requested id."""

    status = 403

    def __init__(self, message: str = "Invalid ID") -> None:
        super().__init__(message)


class ConflictError(ErrorWithStatus):
    """Create attempted for an existing username with different credentials or admin flag."""

    status = 403

    def __init__(self, message: str = "To modify the user, try the PUT /users/{userId} endpoint") -> None:
        super().__init__(message)


class DatabaseUnavailableError(ErrorWithStatus):
    """Connection pool used before open() or after close()."""

    status = 503

    def __init__(self, message: str = "Database unavailable. Set DB_* in .env and ensure MySQL is running.") -> None:
        super().__init__(message)
