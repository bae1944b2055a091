"""Error taxonomy shared by the auth, todo and HTTP layers.

Every client-facing failure is a `ServiceError` carrying the HTTP status and
the short machine-readable `message` rendered as `{"message": ...}`.
"""

from __future__ import annotations


class ServiceError(Exception):
    status_code: int = 500
    message: str = "server-error"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationError(ServiceError):
    status_code = 400
    message = "validation-error"


class EmailInUse(ServiceError):
    status_code = 409
    message = "email-in-use"


class InvalidCredentials(ServiceError):
    # Same error for unknown email and wrong password.
    status_code = 401
    message = "invalid-credentials"


class MissingToken(ServiceError):
    status_code = 401
    message = "missing-token"


class InvalidToken(ServiceError):
    status_code = 401
    message = "invalid-token"


class Forbidden(ServiceError):
    status_code = 403
    message = "forbidden"


class NotFound(ServiceError):
    status_code = 404
    message = "not-found"


class InternalError(ServiceError):
    status_code = 500
    message = "server-error"


class StoreError(RuntimeError):
    """Reading or writing a partition failed."""


class StoreCorruptError(StoreError):
    """A partition file exists but does not hold a JSON array of accounts."""
