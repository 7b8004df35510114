"""Signed-in user and token lifecycle."""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional

from ..api.auth import AuthApi
from ..errors import ApiError
from ..models import User
from ..schemas import LoginRequest, RegisterRequest, VerifyEmailRequest
from ..token_store import TokenStore, is_token_expired, seconds_until_expiry

logger = logging.getLogger(__name__)


class AuthState:
    """Holds the current user and keeps the stored tokens fresh.

    ``on_logout`` is called after the session was cleared; the main window
    uses it to show the login dialog again.
    """

    def __init__(self, auth_api: AuthApi, token_store: TokenStore,
                 on_logout: Optional[Callable[[], None]] = None) -> None:
        self.auth_api = auth_api
        self.token_store = token_store
        self.on_logout = on_logout
        self.user: Optional[User] = None
        self.is_loading = True

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    # ------------------------------------------------------------------
    def initialize(self) -> Optional[User]:
        """Restore the previous session from the token store."""

        try:
            stored_user = self.token_store.user_data
            if stored_user and self.token_store.has_valid_tokens():
                self.user = User.from_api(stored_user)
                logger.info("Restored session of %s; access token valid for %d s", self.user.email,
                            seconds_until_expiry(self.token_store.access_token))
            elif stored_user and self.token_store.access_token:
                self.refresh_token()
        except ApiError as exc:
            logger.error("Error initializing auth: %s", exc)
            self.token_store.clear()
            self.user = None
        finally:
            self.is_loading = False
        return self.user

    def login(self, email: str, password: str, remember_me: bool = False) -> User:
        """Sign in and persist the tokens; ``remember_me`` keeps the e-mail for the next login."""

        request = LoginRequest(email=email, password=password, remember_me=remember_me)
        result = self.auth_api.login(request)
        self.token_store.store_tokens(result.access_token, result.refresh_token)
        self.token_store.store_user_data(result.user.to_storage())
        self.token_store.remember_email(request.email if remember_me else None)
        self.user = result.user
        logger.info("Signed in as %s", result.user.email)
        return result.user

    def logout(self) -> None:
        """Revoke the refresh token on the server, then forget the session."""

        refresh_token = self.token_store.refresh_token
        if refresh_token and self.token_store.access_token:
            self.auth_api.logout(refresh_token)
        self.token_store.clear()
        self.user = None
        logger.info("Signed out")
        if self.on_logout is not None:
            self.on_logout()

    def register(self, data: RegisterRequest | Mapping[str, Any]) -> User:
        """Create the account; the user still has to verify the e-mail before signing in."""

        request = data if isinstance(data, RegisterRequest) else RegisterRequest(**dict(data))
        return self.auth_api.register(request)

    def verify_email(self, email: str, otp_code: str) -> User:
        return self.auth_api.verify_email(VerifyEmailRequest(email=email, otp_code=otp_code))

    def resend_otp(self, email: str, purpose: str = "email_verification") -> None:
        self.auth_api.resend_otp(email, purpose)

    # ------------------------------------------------------------------
    def refresh_token(self) -> bool:
        """Exchange the refresh token; any failure ends the session."""

        try:
            refresh_token = self.token_store.refresh_token
            if not refresh_token:
                raise ApiError("No refresh token available")
            tokens = self.auth_api.refresh(refresh_token)
            self.token_store.store_tokens(tokens.access, tokens.refresh or refresh_token)
            user = self.auth_api.profile(tokens.access)
        except ApiError as exc:
            logger.error("Token refresh failed: %s", exc)
            self.logout()
            return False
        # The profile endpoint does not know the tenant host; keep the stored slug.
        if not user.tenant_slug:
            user.tenant_slug = self.token_store.tenant_slug
        self.user = user
        self.token_store.store_user_data(user.to_storage())
        return True

    def ensure_fresh_token(self) -> None:
        """Periodic check run while signed in."""

        if self.user is None:
            return
        access_token = self.token_store.access_token
        if access_token and is_token_expired(access_token):
            self.refresh_token()

    def update_user(self, **changes: Any) -> None:
        """Apply local changes to the signed-in user and persist them."""

        if self.user is None:
            return
        for key, value in changes.items():
            setattr(self.user, key, value)
        self.token_store.store_user_data(self.user.to_storage())


__all__ = ["AuthState"]
