"""
Error types surfaced to GraphQL clients
"""

from typing import Any


class CourierError(Exception):
    """Base error carrying a client-facing message and a GraphQL error code."""

    code = "INTERNAL_SERVER_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def extensions(self) -> dict[str, Any]:
        return {"code": self.code}


class AuthenticationError(CourierError):
    """Raised when a credential is invalid or expired, or a sign-in fails."""

    code = "UNAUTHENTICATED"


class ForbiddenError(CourierError):
    """Raised when the caller is not allowed to perform an action."""

    code = "FORBIDDEN"


class UserInputError(CourierError):
    """Raised when mutation arguments do not match any stored entity."""

    code = "BAD_USER_INPUT"


class ModelValidationError(CourierError):
    """Raised by model validators; the message carries the internal prefix."""

    code = "VALIDATION_ERROR"

    PREFIX = "Validation error: "

    def __init__(self, message: str):
        super().__init__(f"{self.PREFIX}{message}")
