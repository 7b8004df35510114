from __future__ import annotations

import base64
import json
import time
from typing import Any, Callable
from urllib.parse import urlsplit

import pytest

from fieldpilot_desktop.api import ApiClient, FieldPilotApi
from fieldpilot_desktop.api.client import API_PREFIX
from fieldpilot_desktop.controllers.notifications import Notifier
from fieldpilot_desktop.token_store import TokenStore

BASE_URL = "http://localhost:8000"


def make_token(exp: float | None = None, **claims: Any) -> str:
    """Unsigned JWT carrying ``exp``; good enough for client-side expiry checks."""

    def segment(data: dict) -> str:
        raw = json.dumps(data).encode("utf-8")
        return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")

    payload = dict(claims)
    if exp is not None:
        payload["exp"] = int(exp)
    return f"{segment({'alg': 'HS256', 'typ': 'JWT'})}.{segment(payload)}.signature"


def fresh_token() -> str:
    return make_token(time.time() + 3600)


def expired_token() -> str:
    return make_token(time.time() - 10)


class FakeResponse:
    def __init__(self, status_code: int = 200, body: Any = None, content: bytes | None = None,
                 content_type: str = "application/json"):
        self.status_code = status_code
        self._body = body
        self.headers = {"Content-Type": content_type}
        if content is not None:
            self.content = content
        elif body is not None:
            self.content = json.dumps(body).encode("utf-8")
        else:
            self.content = b""

    def json(self):
        if self._body is None:
            raise ValueError("No JSON body")
        return self._body


class FakeCall:
    def __init__(self, method: str, url: str, kwargs: dict[str, Any]):
        self.method = method
        self.url = url
        self.kwargs = kwargs

    @property
    def path(self) -> str:
        return urlsplit(self.url).path[len(API_PREFIX):]

    @property
    def host(self) -> str:
        return urlsplit(self.url).netloc

    @property
    def json(self) -> Any:
        return self.kwargs.get("json")

    @property
    def params(self) -> dict[str, Any]:
        return self.kwargs.get("params") or {}

    @property
    def headers(self) -> dict[str, str]:
        return self.kwargs.get("headers") or {}


class FakeSession:
    """Stands in for ``requests.Session``; answers from queued routes."""

    def __init__(self):
        self.routes: dict[tuple[str, str], list[FakeResponse]] = {}
        self.calls: list[FakeCall] = []
        self.error: Exception | None = None

    def add(self, method: str, path: str, body: Any = None, status: int = 200, **kwargs: Any) -> None:
        """Queue a response; the last one queued for a route keeps answering."""

        self.routes.setdefault((method.upper(), path), []).append(FakeResponse(status, body, **kwargs))

    def request(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        call = FakeCall(method, url, kwargs)
        self.calls.append(call)
        if self.error is not None:
            raise self.error
        queue = self.routes.get((method.upper(), call.path))
        if not queue:
            raise AssertionError(f"Unexpected request {method} {call.path}")
        return queue.pop(0) if len(queue) > 1 else queue[0]

    def calls_to(self, method: str, path: str) -> list[FakeCall]:
        return [call for call in self.calls if call.method == method and call.path == path]

    @property
    def last(self) -> FakeCall:
        return self.calls[-1]


class ManualTimer:
    def __init__(self, delay: float, callback: Callable[[], None]):
        self.delay = delay
        self.callback = callback
        self.started = False
        self.cancelled = False

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        self.callback()


class ManualTimerFactory:
    """Timer factory whose timers only fire when a test says so."""

    def __init__(self):
        self.timers: list[ManualTimer] = []

    def __call__(self, delay: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(delay, callback)
        self.timers.append(timer)
        return timer

    @property
    def active(self) -> list[ManualTimer]:
        return [timer for timer in self.timers if timer.started and not timer.cancelled]

    def fire_pending(self) -> None:
        for timer in self.active:
            timer.fire()


@pytest.fixture()
def token_store(tmp_path) -> TokenStore:
    return TokenStore(tmp_path / "session.json")


@pytest.fixture()
def signed_in(token_store: TokenStore) -> TokenStore:
    token_store.store_tokens(fresh_token(), "refresh-token")
    token_store.store_user_data({"id": "u1", "email": "owner@acme.test", "role": "owner",
                                 "tenant_slug": "acme"})
    return token_store


@pytest.fixture()
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture()
def client(session: FakeSession, token_store: TokenStore) -> ApiClient:
    return ApiClient(BASE_URL, token_store, timeout=5, session=session)


@pytest.fixture()
def api(client: ApiClient) -> FieldPilotApi:
    return FieldPilotApi(client)


@pytest.fixture()
def notifier() -> Notifier:
    return Notifier()


@pytest.fixture()
def timers() -> ManualTimerFactory:
    return ManualTimerFactory()
