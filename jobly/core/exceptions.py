"""
Errors raised by the data-access layer.

Managers in ``jobly.crud`` raise these; the API layer decides which HTTP
status each one becomes.
"""


class JoblyError(Exception):
    """Base class for recoverable Jobly errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequestError(JoblyError):
    """Input is malformed or can never be satisfied."""
    pass


class NotFoundError(JoblyError):
    """The targeted company or job does not exist."""
    pass


class ConflictError(BadRequestError):
    """A write collided with a uniqueness constraint enforced by the store."""
    pass
