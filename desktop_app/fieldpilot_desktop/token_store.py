"""Persistent session storage for access/refresh tokens and the signed-in user."""

from __future__ import annotations

import base64
import json
import logging
import time
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

EXPIRY_BUFFER_SECONDS = 60

ACCESS_TOKEN = "access_token"
REFRESH_TOKEN = "refresh_token"
USER_DATA = "user_data"
TOKEN_EXPIRY = "token_expiry"
REMEMBERED_EMAIL = "remembered_email"
PREFERENCES = "preferences"


def decode_token(token: Optional[str]) -> Optional[Dict[str, Any]]:
    """Return the (unverified) JWT payload or ``None`` if it cannot be read."""

    if not token:
        return None
    parts = token.split(".")
    if len(parts) < 2 or not parts[1]:
        return None
    segment = parts[1]
    segment += "=" * (-len(segment) % 4)
    try:
        raw = base64.urlsafe_b64decode(segment.encode("ascii"))
        payload = json.loads(raw.decode("utf-8"))
    except (ValueError, UnicodeError) as exc:
        logger.warning("Could not decode token payload: %s", exc)
        return None
    return payload if isinstance(payload, dict) else None


def token_expiry(token: Optional[str]) -> Optional[float]:
    """The ``exp`` claim as a timestamp, or ``None`` when missing or malformed."""

    payload = decode_token(token)
    if not payload or not payload.get("exp"):
        return None
    try:
        return float(payload["exp"])
    except (TypeError, ValueError):
        logger.warning("Token carries a malformed exp claim: %r", payload["exp"])
        return None


def is_token_expired(token: Optional[str], *, now: Optional[float] = None) -> bool:
    """A token counts as expired once it is within one minute of ``exp``."""

    expires = token_expiry(token)
    if expires is None:
        return True
    current = time.time() if now is None else now
    return expires < current + EXPIRY_BUFFER_SECONDS


def seconds_until_expiry(token: Optional[str], *, now: Optional[float] = None) -> int:
    expires = token_expiry(token)
    if expires is None:
        return 0
    current = time.time() if now is None else now
    return max(0, int(expires - current))


class TokenStore:
    """JSON file holding the session between application starts."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._data: Dict[str, Any] = self._read()

    # ------------------------------------------------------------------
    # Tokens
    # ------------------------------------------------------------------
    def store_tokens(self, access_token: str, refresh_token: str) -> None:
        """Persist both tokens and cache the expiry of the access token."""

        self._data[ACCESS_TOKEN] = access_token
        self._data[REFRESH_TOKEN] = refresh_token
        payload = decode_token(access_token)
        if payload and payload.get("exp"):
            self._data[TOKEN_EXPIRY] = payload["exp"]
        else:
            self._data.pop(TOKEN_EXPIRY, None)
        self._write()

    @property
    def access_token(self) -> Optional[str]:
        return self._data.get(ACCESS_TOKEN)

    @property
    def refresh_token(self) -> Optional[str]:
        return self._data.get(REFRESH_TOKEN)

    def has_valid_tokens(self, *, now: Optional[float] = None) -> bool:
        """Both tokens are present and the access token has not expired."""

        if not self.access_token or not self.refresh_token:
            return False
        return not is_token_expired(self.access_token, now=now)

    # ------------------------------------------------------------------
    # User data
    # ------------------------------------------------------------------
    def store_user_data(self, user_data: Dict[str, Any]) -> None:
        self._data[USER_DATA] = dict(user_data)
        self._write()

    @property
    def user_data(self) -> Optional[Dict[str, Any]]:
        data = self._data.get(USER_DATA)
        return dict(data) if isinstance(data, dict) else None

    @property
    def tenant_slug(self) -> Optional[str]:
        user_data = self.user_data or {}
        return user_data.get("tenant_slug") or None

    def remember_email(self, email: Optional[str]) -> None:
        if email:
            self._data[REMEMBERED_EMAIL] = email
        else:
            self._data.pop(REMEMBERED_EMAIL, None)
        self._write()

    @property
    def remembered_email(self) -> Optional[str]:
        return self._data.get(REMEMBERED_EMAIL)

    def store_preference(self, key: str, value: Any) -> None:
        preferences = dict(self._data.get(PREFERENCES) or {})
        preferences[key] = value
        self._data[PREFERENCES] = preferences
        self._write()

    def preference(self, key: str, default: Any = None) -> Any:
        """Stored preference value, or ``default`` when unset."""

        return (self._data.get(PREFERENCES) or {}).get(key, default)

    def clear(self) -> None:
        """Forget the session but keep a remembered login e-mail."""

        remembered = self._data.get(REMEMBERED_EMAIL)
        self._data = {REMEMBERED_EMAIL: remembered} if remembered else {}
        self._write()

    # ------------------------------------------------------------------
    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.error("Error reading session store %s: %s", self.path, exc)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(self._data, indent=2), encoding="utf-8")
        except OSError as exc:
            logger.error("Error writing session store %s: %s", self.path, exc)


__all__ = [
    "TokenStore",
    "decode_token",
    "is_token_expired",
    "seconds_until_expiry",
    "token_expiry",
]
