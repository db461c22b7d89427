"""
Errors raised by the credential operations.

Every error carries a numeric status and a caller-safe message; the HTTP layer
renders them as ``{"status": ..., "message": ...}``.
"""
from typing import Optional


class CredentialServiceError(Exception):
    """Raised when a credential operation fails. Defaults to a bad request."""

    status_code = 400
    default_message = "Bad request"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"status": self.status_code, "message": self.message}


class AlreadyExists(CredentialServiceError):
    default_message = "User already exists"


class InvalidCredentials(CredentialServiceError):
    default_message = "Invalid credentials"


class InvalidToken(CredentialServiceError):
    status_code = 401
    default_message = "Invalid token"
