"""Field-level form validation.

Each ``validate_*`` helper returns an error message for display next to the
field, or ``None`` when the value is acceptable. Forms run them when a field
loses focus; the pydantic request schemas reuse them before submission.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Type

from pydantic import BaseModel, ValidationError

from .errors import ApiError, field_errors

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_RE = re.compile(r"^\+?[1-9]\d{1,14}$")
OTP_RE = re.compile(r"^\d{6}$")
ZIP_RE = re.compile(r"^[A-Z0-9\s-]{3,10}$", re.IGNORECASE)

MIN_PASSWORD_LENGTH = 8


def validate_required(value: Optional[str], field_name: str) -> Optional[str]:
    if value is None or not str(value).strip():
        return f"{field_name} is required"
    return None


def validate_email(email: Optional[str]) -> Optional[str]:
    if not email:
        return "Email is required"
    if not EMAIL_RE.match(email.strip()):
        return "Please enter a valid email address"
    return None


def validate_password(password: Optional[str]) -> Optional[str]:
    if not password:
        return "Password is required"
    if len(password) < MIN_PASSWORD_LENGTH:
        return f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
    if not re.search(r"[A-Z]", password):
        return "Password must contain at least one uppercase letter"
    if not re.search(r"[a-z]", password):
        return "Password must contain at least one lowercase letter"
    if not re.search(r"[0-9]", password):
        return "Password must contain at least one number"
    return None


def validate_password_confirm(password: Optional[str], password_confirm: Optional[str]) -> Optional[str]:
    if not password_confirm:
        return "Please confirm your password"
    if password != password_confirm:
        return "Passwords do not match"
    return None


@dataclass(slots=True, frozen=True)
class PasswordStrength:
    """Password strength score with the label and color shown under the field."""

    score: int
    label: str
    color: str


def password_strength(password: str) -> PasswordStrength:
    score = 0
    if len(password) >= 8:
        score += 1
    if len(password) >= 12:
        score += 1
    if re.search(r"[A-Z]", password):
        score += 1
    if re.search(r"[a-z]", password):
        score += 1
    if re.search(r"[0-9]", password):
        score += 1
    if re.search(r"[^A-Za-z0-9]", password):
        score += 1

    if score <= 2:
        return PasswordStrength(score, "Weak", "red")
    if score <= 4:
        return PasswordStrength(score, "Medium", "yellow")
    return PasswordStrength(score, "Strong", "green")


def validate_phone(phone: Optional[str]) -> Optional[str]:
    # optional
    if not phone:
        return None
    cleaned = re.sub(r"[\s-]", "", phone)
    if not PHONE_RE.match(cleaned):
        return "Please enter a valid phone number with country code (e.g., +1234567890)"
    return None


def validate_otp(otp: Optional[str]) -> Optional[str]:
    if not otp:
        return "Verification code is required"
    if not OTP_RE.match(otp):
        return "Verification code must be 6 digits"
    return None


def validate_zip_code(zip_code: Optional[str]) -> Optional[str]:
    if not zip_code:
        return None
    if not ZIP_RE.match(zip_code):
        return "Please enter a valid zip/postal code"
    return None


def field_error(request_cls: Type[BaseModel], values: Mapping[str, Any], field_name: str) -> Optional[str]:
    """Message for ``field_name`` alone when ``values`` fail ``request_cls``.

    Used when a form field loses focus: problems with other fields, which the
    user may not have reached yet, are ignored.
    """

    try:
        request_cls(**values)
    except ValidationError as exc:
        return field_errors(exc).get(field_name)
    return None


def map_api_errors_to_fields(error: ApiError) -> dict[str, str]:
    """First server-side message per field, for inline display."""

    fields: dict[str, str] = {}
    for field_name, messages in error.details.items():
        if isinstance(messages, (list, tuple)):
            if messages:
                fields[field_name] = str(messages[0])
        elif messages:
            fields[field_name] = str(messages)
    return fields


def error_message(error: ApiError) -> str:
    if error.code == "EMAIL_NOT_VERIFIED":
        return "Please verify your email before logging in."
    if error.code == "INVALID_CREDENTIALS":
        return "Invalid email or password. Please try again."
    if error.code == "INVALID_OTP":
        return "Invalid or expired verification code. Please request a new one."
    return error.message or "An unexpected error occurred. Please try again."


__all__ = [
    "PasswordStrength",
    "error_message",
    "field_error",
    "map_api_errors_to_fields",
    "password_strength",
    "validate_email",
    "validate_otp",
    "validate_password",
    "validate_password_confirm",
    "validate_phone",
    "validate_required",
    "validate_zip_code",
]
