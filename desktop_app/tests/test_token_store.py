from __future__ import annotations

import base64
import json
import time

from conftest import make_token
from fieldpilot_desktop.token_store import TokenStore, decode_token, is_token_expired, seconds_until_expiry


def test_decode_token_reads_payload():
    token = make_token(1_700_000_000, user_id="u1")

    assert decode_token(token) == {"user_id": "u1", "exp": 1_700_000_000}


def test_decode_token_rejects_garbage():
    assert decode_token(None) is None
    assert decode_token("not-a-jwt") is None
    assert decode_token("a.!!!.c") is None


def test_token_expires_one_minute_early():
    now = 1_700_000_000
    assert is_token_expired(make_token(now + 59), now=now)
    assert not is_token_expired(make_token(now + 61), now=now)


def test_token_without_exp_counts_as_expired():
    assert is_token_expired(make_token(None, user_id="u1"))


def test_seconds_until_expiry():
    now = 1_700_000_000
    assert seconds_until_expiry(make_token(now + 300), now=now) == 300
    assert seconds_until_expiry(make_token(now - 300), now=now) == 0


def test_session_survives_restart(tmp_path):
    path = tmp_path / "nested" / "session.json"
    store = TokenStore(path)
    access = make_token(time.time() + 3600)
    store.store_tokens(access, "refresh-1")
    store.store_user_data({"id": "u1", "tenant_slug": "acme"})

    reopened = TokenStore(path)

    assert reopened.access_token == access
    assert reopened.refresh_token == "refresh-1"
    assert reopened.tenant_slug == "acme"
    assert reopened.has_valid_tokens()


def test_user_data_is_a_copy(token_store):
    token_store.store_user_data({"id": "u1"})

    token_store.user_data["id"] = "changed"

    assert token_store.user_data == {"id": "u1"}


def test_clear_keeps_only_remembered_email(token_store):
    token_store.store_tokens("a.b.c", "refresh")
    token_store.remember_email("owner@acme.test")
    token_store.store_preference("preferred_billing_cycle", "yearly")

    token_store.clear()

    assert token_store.access_token is None
    assert token_store.remembered_email == "owner@acme.test"
    assert token_store.preference("preferred_billing_cycle", "monthly") == "monthly"


def test_corrupt_file_starts_empty(tmp_path):
    path = tmp_path / "session.json"
    path.write_text("{not json", encoding="utf-8")

    assert TokenStore(path).access_token is None


def test_has_valid_tokens_needs_both_tokens(token_store):
    token_store.store_tokens(make_token(time.time() + 3600), "")

    assert not token_store.has_valid_tokens()


def test_malformed_exp_claim_is_treated_as_expired():
    payload = base64.urlsafe_b64encode(json.dumps({"exp": "soon"}).encode("utf-8")).decode("ascii").rstrip("=")
    token = f"header.{payload}.signature"

    assert is_token_expired(token)
    assert seconds_until_expiry(token) == 0
