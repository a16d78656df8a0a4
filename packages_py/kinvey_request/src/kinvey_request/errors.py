"""
Error types for kinvey_request.

All errors are raised synchronously at the call that triggered them.
"""


class KinveyRequestError(Exception):
    """Base error for the request configuration layer."""

    code = "KINVEY_REQUEST_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.name = type(self).__name__


class ValidationError(KinveyRequestError):
    """Raised when a config or header mutation receives invalid input."""

    code = "VALIDATION_ERROR"


class PropertiesTooLargeError(ValidationError):
    """Raised when the serialized custom properties reach the byte cap."""

    code = "PROPERTIES_TOO_LARGE"

    def __init__(self, byte_count: int, limit: int) -> None:
        super().__init__(
            f"The custom properties are {byte_count} bytes. "
            f"It must be less than {limit} bytes. "
            "Please remove some custom properties."
        )
        self.byte_count = byte_count
        self.limit = limit


class AuthResolutionError(KinveyRequestError):
    """Credential-class failure. Only these trigger auth fallback."""

    code = "AUTH_RESOLUTION_ERROR"


class CredentialsMissingError(AuthResolutionError):
    """Raised when a strategy's required credential fields are absent."""

    code = "CREDENTIALS_MISSING"


class NoActiveSessionError(AuthResolutionError):
    """Raised when the session strategy finds no logged-in user."""

    code = "NO_ACTIVE_USER"


class ReentrancyError(KinveyRequestError):
    """Raised when execute() is called on a request that is already executing."""

    code = "REQUEST_ALREADY_EXECUTING"
