from __future__ import annotations


class StorefrontError(Exception):
    """Base class for errors raised by the service layer."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class PersistenceError(StorefrontError):
    """The data store rejected a write. The session has been rolled back."""

    status_code = 500


class ValidationError(StorefrontError):
    """A local precondition failed before anything was written."""

    status_code = 422


class InvalidTransitionError(ValidationError):
    status_code = 409


class ConfirmationRequiredError(ValidationError):
    status_code = 400


class NotFoundError(StorefrontError):
    status_code = 404
