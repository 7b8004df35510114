from __future__ import annotations

import pytest
from pydantic import ValidationError

from conftest import expired_token, fresh_token
from fieldpilot_desktop.errors import ApiError
from fieldpilot_desktop.state.auth import AuthState

USER = {"id": "u1", "email": "owner@acme.test", "first_name": "Olive", "last_name": "Owner", "role": "owner",
        "is_verified": True}


@pytest.fixture()
def logouts():
    return []


@pytest.fixture()
def auth(api, token_store, logouts):
    return AuthState(api.auth, token_store, on_logout=lambda: logouts.append(True))


def _login_response(access: str, refresh: str = "refresh-1") -> dict:
    return {"success": True, "data": {"user": USER, "tokens": {"access": access, "refresh": refresh},
                                      "expires_in": 3600}}


def test_login_stores_tokens_and_user(auth, session, token_store):
    access = fresh_token()
    session.add("POST", "/auth/login/", _login_response(access))

    user = auth.login("Owner@Acme.test", "Secret123", remember_me=True)

    assert user.full_name == "Olive Owner"
    assert auth.is_authenticated
    assert token_store.access_token == access
    assert token_store.refresh_token == "refresh-1"
    assert token_store.user_data["email"] == "owner@acme.test"
    assert token_store.remembered_email == "owner@acme.test"
    assert session.last.json == {"email": "owner@acme.test", "password": "Secret123", "remember_me": True}


def test_login_without_remember_me_forgets_email(auth, session, token_store):
    token_store.remember_email("someone@acme.test")
    session.add("POST", "/auth/login/", _login_response(fresh_token()))

    auth.login("owner@acme.test", "Secret123")

    assert token_store.remembered_email is None


def test_failed_login_raises_with_code(auth, session, token_store):
    session.add("POST", "/auth/login/", {"error": {"code": "EMAIL_NOT_VERIFIED", "message": "Verify first"}},
                status=403)

    with pytest.raises(ApiError) as excinfo:
        auth.login("owner@acme.test", "Secret123")

    assert excinfo.value.code == "EMAIL_NOT_VERIFIED"
    assert token_store.access_token is None
    assert not auth.is_authenticated


def test_invalid_email_never_reaches_the_server(auth, session):
    with pytest.raises(ValidationError):
        auth.login("not-an-email", "Secret123")

    assert session.calls == []


def test_initialize_restores_unexpired_session(auth, session, token_store):
    token_store.store_tokens(fresh_token(), "refresh-1")
    token_store.store_user_data(USER)

    user = auth.initialize()

    assert user.email == "owner@acme.test"
    assert auth.is_loading is False
    assert session.calls == []


def test_initialize_without_refresh_token_ends_session(auth, session, token_store, logouts):
    token_store.store_tokens(fresh_token(), "")
    token_store.store_user_data(USER)

    assert auth.initialize() is None

    assert token_store.access_token is None
    assert logouts == [True]
    assert session.calls == []


def test_initialize_refreshes_expired_token(auth, session, token_store):
    new_access = fresh_token()
    token_store.store_tokens(expired_token(), "refresh-1")
    token_store.store_user_data(dict(USER, tenant_slug="acme"))
    session.add("POST", "/auth/token/refresh/", {"access": new_access, "refresh": "refresh-2"})
    session.add("GET", "/auth/profile/", {"success": True, "data": {"user": USER}})

    user = auth.initialize()

    assert user is not None
    assert token_store.access_token == new_access
    assert token_store.refresh_token == "refresh-2"
    assert session.calls_to("GET", "/auth/profile/")[0].headers["Authorization"] == f"Bearer {new_access}"
    # the profile does not carry the tenant; the stored slug survives
    assert token_store.tenant_slug == "acme"


def test_refresh_keeps_old_refresh_token_when_not_rotated(auth, session, token_store):
    token_store.store_tokens(expired_token(), "refresh-1")
    token_store.store_user_data(USER)
    session.add("POST", "/auth/token/refresh/", {"data": {"access": fresh_token()}})
    session.add("GET", "/auth/profile/", {"data": USER})

    assert auth.refresh_token() is True

    assert token_store.refresh_token == "refresh-1"


def test_failed_refresh_logs_out(auth, session, token_store, logouts):
    token_store.store_tokens(expired_token(), "refresh-1")
    token_store.store_user_data(USER)
    session.add("POST", "/auth/token/refresh/", {"detail": "Token is blacklisted"}, status=401)
    session.add("POST", "/auth/logout/", {"success": True})

    assert auth.initialize() is None

    assert token_store.access_token is None
    assert token_store.user_data is None
    assert logouts == [True]


def test_refresh_without_refresh_token_logs_out(auth, token_store, logouts):
    assert auth.refresh_token() is False

    assert logouts == [True]


def test_logout_clears_session_even_if_server_fails(auth, session, token_store, logouts):
    token_store.store_tokens(fresh_token(), "refresh-1")
    token_store.store_user_data(USER)
    token_store.remember_email("owner@acme.test")
    auth.initialize()
    session.add("POST", "/auth/logout/", {"message": "Server error"}, status=500)

    auth.logout()

    assert session.last.json == {"refresh_token": "refresh-1"}
    assert not auth.is_authenticated
    assert token_store.access_token is None
    assert token_store.remembered_email == "owner@acme.test"
    assert logouts == [True]


def test_ensure_fresh_token_only_refreshes_when_expired(auth, session, token_store):
    token_store.store_tokens(fresh_token(), "refresh-1")
    token_store.store_user_data(USER)
    auth.initialize()

    auth.ensure_fresh_token()

    assert session.calls == []


def test_register_returns_unverified_user(auth, session):
    session.add("POST", "/auth/register/",
                {"success": True, "data": {"user": dict(USER, is_verified=False)}}, status=201)

    user = auth.register({
        "email": "owner@acme.test",
        "password": "Secret123",
        "password_confirm": "Secret123",
        "first_name": "Olive",
        "last_name": "Owner",
    })

    assert user.is_verified is False
    assert session.last.json["role"] == "owner"
    assert "phone" not in session.last.json


def test_verify_email_rejects_short_code(auth, session):
    with pytest.raises(ValidationError):
        auth.verify_email("owner@acme.test", "123")

    assert session.calls == []


def test_resend_otp_posts_purpose(auth, session):
    session.add("POST", "/auth/resend-otp/", {"success": True})

    auth.resend_otp("owner@acme.test")

    assert session.last.json == {"email": "owner@acme.test", "purpose": "email_verification"}


def test_update_user_persists_changes(auth, token_store):
    token_store.store_tokens(fresh_token(), "refresh-1")
    token_store.store_user_data(USER)
    auth.initialize()

    auth.update_user(tenant_slug="acme")

    assert token_store.tenant_slug == "acme"
