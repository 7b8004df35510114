"""HTTP client for the FieldPilot API."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping, Optional, TypeVar
from urllib.parse import urlsplit, urlunsplit

import requests

from ..errors import ApiError, AuthenticationError
from ..models import Page
from ..token_store import TokenStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

API_PREFIX = "/api/v1"
NETWORK_ERROR_MESSAGE = "Network error. Please check your connection and try again."


def format_error_details(details: Mapping[str, Any]) -> str:
    """Render ``{"name": ["required"], ...}`` as ``name: required; ...``."""

    parts = []
    for field_name, messages in details.items():
        if isinstance(messages, (list, tuple)):
            text = ", ".join(str(message) for message in messages)
        else:
            text = str(messages)
        parts.append(f"{field_name}: {text}")
    return "; ".join(parts)


def clean_params(params: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Drop empty filter values; booleans are sent as ``true``/``false``."""

    cleaned: Dict[str, Any] = {}
    for key, value in (params or {}).items():
        if isinstance(value, bool):
            cleaned[key] = "true" if value else "false"
        elif value not in (None, "", 0, [], {}):
            cleaned[key] = value
    return cleaned


class ApiClient:
    """Wraps HTTP calls to the FieldPilot API."""

    def __init__(self, base_url: str, token_store: Optional[TokenStore] = None, timeout: int = 15,
                 session: Optional[requests.Session] = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.token_store = token_store
        self.timeout = timeout
        self.session = session or requests.Session()
        # Called when a non-auth endpoint answers 401, i.e. the session is gone.
        self.on_unauthorized: Optional[Callable[[], None]] = None

    # ------------------------------------------------------------------
    # URLs and headers
    # ------------------------------------------------------------------
    def api_url(self, tenant: bool = True) -> str:
        """Base URL of the API, routed to the tenant host when one is known."""

        slug = self.token_store.tenant_slug if (tenant and self.token_store) else None
        if not slug:
            return f"{self.base_url}{API_PREFIX}"
        parts = urlsplit(self.base_url)
        host = parts.netloc
        if "localhost" in host:
            host = host.replace("localhost", f"{slug}.localhost", 1)
        return urlunsplit((parts.scheme, host, parts.path, "", "")).rstrip("/") + API_PREFIX

    def _headers(self, token: Optional[str] = None) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        access_token = token or (self.token_store.access_token if self.token_store else None)
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        return headers

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------
    def request(self, method: str, path: str, *, tenant: bool = True, token: Optional[str] = None,
                raw: bool = False, **kwargs):
        """Send a request and decode the answer.

        Error statuses raise ``ApiError`` (``AuthenticationError`` for 401);
        ``raw`` returns the body bytes, e.g. for file downloads.
        """

        url = self.api_url(tenant) + "/" + path.lstrip("/")
        kwargs.setdefault("timeout", self.timeout)
        headers = kwargs.setdefault("headers", {})
        headers.update(self._headers(token))
        if "params" in kwargs:
            kwargs["params"] = clean_params(kwargs["params"])

        logger.debug("%s %s params=%s", method, url, kwargs.get("params"))
        try:
            response = self.session.request(method, url, **kwargs)
        except requests.RequestException as exc:
            logger.warning("Request %s %s failed: %s", method, url, exc)
            raise ApiError(NETWORK_ERROR_MESSAGE, status=0) from exc

        if response.status_code >= 400:
            error = self._error_from_response(response)
            auth_endpoint = path.lstrip("/").startswith("auth/")
            if isinstance(error, AuthenticationError) and self.on_unauthorized and not auth_endpoint:
                self.on_unauthorized()
            raise error

        if raw:
            return response.content
        if response.status_code == 204 or not response.content:
            return None
        if response.headers.get("Content-Type", "").startswith("application/json"):
            return response.json()
        return response.content

    def get(self, path: str, **kwargs):
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs):
        return self.request("POST", path, **kwargs)

    def put(self, path: str, **kwargs):
        return self.request("PUT", path, **kwargs)

    def patch(self, path: str, **kwargs):
        return self.request("PATCH", path, **kwargs)

    def delete(self, path: str, **kwargs):
        return self.request("DELETE", path, **kwargs)

    # ------------------------------------------------------------------
    # Envelopes
    # ------------------------------------------------------------------
    @staticmethod
    def unwrap(body: Any) -> Any:
        """Return ``data`` from a ``{success, data, message}`` envelope."""

        if isinstance(body, dict) and "data" in body:
            return body["data"]
        return body

    @staticmethod
    def unwrap_page(body: Any, factory: Callable[[Dict[str, Any]], T]) -> Page[T]:
        """Turn any list envelope the API produces into a :class:`Page`."""

        if isinstance(body, list):
            items = body
            return Page(items=[factory(item) for item in items], count=len(items))
        if not isinstance(body, dict):
            return Page()

        results = body.get("results")
        if isinstance(results, dict) and "data" in results:
            items = results.get("data") or []
        elif isinstance(results, list):
            items = results
        else:
            items = body.get("data") or []
        if isinstance(items, dict) and "data" in items:
            items = items.get("data") or []
        count = body.get("count")
        return Page(
            items=[factory(item) for item in items],
            count=int(count) if count is not None else len(items),
            next=body.get("next"),
            previous=body.get("previous"),
        )

    # ------------------------------------------------------------------
    @staticmethod
    def _error_from_response(response: requests.Response) -> ApiError:
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        nested = body.get("error") if isinstance(body.get("error"), dict) else {}

        message = (
            body.get("message")
            or nested.get("message")
            or body.get("detail")
            or f"HTTP error! status: {response.status_code}"
        )
        details = body.get("details") or nested.get("details")
        if isinstance(details, dict) and details:
            message = format_error_details(details) or message
        else:
            details = None
        code = body.get("code") or nested.get("code")

        error_cls = AuthenticationError if response.status_code == 401 else ApiError
        logger.info("API error %s: %s", response.status_code, message)
        return error_cls(message, status=response.status_code, details=details, code=code, response=response)


__all__ = ["ApiClient", "clean_params", "format_error_details"]
