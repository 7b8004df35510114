"""Error types shared by the API layer, state holders and widgets."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from pydantic import ValidationError


class ApiError(RuntimeError):
    """Error raised when the FieldPilot API rejects or cannot serve a request."""

    def __init__(self, message: str, *, status: int = 0, details: Optional[Mapping[str, Any]] = None,
                 code: Optional[str] = None, response: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.details = dict(details or {})
        self.code = code
        self.response = response


class AuthenticationError(ApiError):
    """The session is missing, expired or was rejected (HTTP 401)."""


def field_errors(exc: ValidationError) -> dict[str, str]:
    """Flatten a pydantic validation error into one message per field."""

    errors: dict[str, str] = {}
    for error in exc.errors():
        location = error.get("loc") or ()
        field = ".".join(str(part) for part in location) or "__all__"
        message = error.get("msg", "Invalid value")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.setdefault(field, message)
    return errors


__all__ = ["ApiError", "AuthenticationError", "field_errors"]
