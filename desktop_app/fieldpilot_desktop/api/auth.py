"""Authentication endpoints."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..errors import ApiError
from ..models import User
from ..schemas import LoginRequest, RegisterRequest, VerifyEmailRequest
from .client import ApiClient

logger = logging.getLogger(__name__)

OTP_PURPOSES = ("email_verification", "password_reset")


@dataclass(slots=True)
class LoginResult:
    """Tokens and user returned by a successful login."""

    user: User
    access_token: str
    refresh_token: str
    expires_in: int = 0


@dataclass(slots=True)
class TokenPair:
    """Access and refresh token returned by ``/auth/token/refresh/``."""

    access: str
    refresh: Optional[str] = None


class AuthApi:
    """Account endpoints; they never use the tenant host."""

    def __init__(self, client: ApiClient) -> None:
        self.client = client

    def register(self, request: RegisterRequest) -> User:
        body = self.client.post("/auth/register/", json=request.payload(), tenant=False)
        data = self.client.unwrap(body) or {}
        return User.from_api(data.get("user") or {})

    def login(self, request: LoginRequest) -> LoginResult:
        body = self.client.post("/auth/login/", json=request.payload(), tenant=False)
        data = self.client.unwrap(body) or {}
        tokens = data.get("tokens") or {}
        return LoginResult(
            user=User.from_api(data.get("user") or {}),
            access_token=tokens.get("access", ""),
            refresh_token=tokens.get("refresh", ""),
            expires_in=int(data.get("expires_in") or 0),
        )

    def verify_email(self, request: VerifyEmailRequest) -> User:
        body = self.client.post("/auth/verify-email/", json=request.payload(), tenant=False)
        data = self.client.unwrap(body) or {}
        return User.from_api(data.get("user") or {})

    def resend_otp(self, email: str, purpose: str = "email_verification") -> None:
        if purpose not in OTP_PURPOSES:
            raise ValueError(f"Unknown OTP purpose: {purpose}")
        self.client.post("/auth/resend-otp/", json={"email": email, "purpose": purpose}, tenant=False)

    def refresh(self, refresh_token: str) -> TokenPair:
        body = self.client.post("/auth/token/refresh/", json={"refresh": refresh_token}, tenant=False) or {}
        data = body.get("data") if isinstance(body.get("data"), dict) else body
        return TokenPair(access=data.get("access", ""), refresh=data.get("refresh"))

    def logout(self, refresh_token: str) -> None:
        """Blacklist the refresh token; local logout proceeds regardless."""

        try:
            self.client.post("/auth/logout/", json={"refresh_token": refresh_token}, tenant=False)
        except ApiError as exc:
            logger.warning("Logout API error: %s", exc)

    def profile(self, access_token: Optional[str] = None) -> User:
        body = self.client.get("/auth/profile/", tenant=False, token=access_token)
        data = self.client.unwrap(body) or {}
        return User.from_api(data.get("user") or data)


__all__ = ["AuthApi", "LoginResult", "TokenPair"]
