from __future__ import annotations

import pytest
import requests

from fieldpilot_desktop.api.client import NETWORK_ERROR_MESSAGE, ApiClient, clean_params, format_error_details
from fieldpilot_desktop.errors import ApiError, AuthenticationError
from fieldpilot_desktop.models import Facility
from fieldpilot_desktop.schemas import FacilityRequest


def test_requests_go_to_tenant_host_with_bearer_token(client, session, signed_in):
    session.add("GET", "/facilities/", {"count": 0, "results": []})

    client.get("/facilities/")

    call = session.last
    assert call.host == "acme.localhost:8000"
    assert call.headers["Authorization"] == f"Bearer {signed_in.access_token}"
    assert call.kwargs["timeout"] == 5


def test_account_endpoints_skip_tenant_host(client, session, signed_in):
    session.add("GET", "/auth/profile/", {"data": {"user": {"id": "u1"}}})

    client.get("/auth/profile/", tenant=False, token="other-token")

    assert session.last.host == "localhost:8000"
    assert session.last.headers["Authorization"] == "Bearer other-token"


def test_no_authorization_header_without_session(client, session):
    session.add("GET", "/billing/plans/", {"data": []})

    client.get("/billing/plans/", tenant=False)

    assert "Authorization" not in session.last.headers


def test_clean_params_drops_empty_values():
    params = clean_params({"search": "", "status": None, "page": 2, "is_active": False, "type": "office"})

    assert params == {"page": 2, "is_active": "false", "type": "office"}


def test_error_details_are_folded_into_the_message(client, session):
    session.add(
        "POST",
        "/facilities/",
        {"success": False, "message": "Validation failed",
         "details": {"name": ["This field is required."], "code": ["Already used.", "Too long."]}},
        status=400,
    )

    with pytest.raises(ApiError) as excinfo:
        client.post("/facilities/", json={})

    error = excinfo.value
    assert error.status == 400
    assert error.message == "name: This field is required.; code: Already used., Too long."
    assert error.details["name"] == ["This field is required."]


def test_nested_error_envelope_keeps_code(client, session):
    session.add("POST", "/auth/login/", {"error": {"message": "Bad credentials", "code": "INVALID_CREDENTIALS"}},
                status=400)

    with pytest.raises(ApiError) as excinfo:
        client.post("/auth/login/", json={}, tenant=False)

    assert excinfo.value.message == "Bad credentials"
    assert excinfo.value.code == "INVALID_CREDENTIALS"


def test_non_json_error_falls_back_to_status_message(client, session):
    session.add("GET", "/tasks/", None, status=502, content=b"<html>Bad gateway</html>", content_type="text/html")

    with pytest.raises(ApiError) as excinfo:
        client.get("/tasks/")

    assert excinfo.value.message == "HTTP error! status: 502"
    assert excinfo.value.details == {}


def test_unauthorized_response_triggers_session_expiry(client, session, signed_in):
    expired = []
    client.on_unauthorized = lambda: expired.append(True)
    session.add("GET", "/tasks/", {"detail": "Token is invalid or expired"}, status=401)

    with pytest.raises(AuthenticationError):
        client.get("/tasks/")

    assert expired == [True]


def test_unauthorized_auth_endpoint_does_not_trigger_session_expiry(client, session):
    expired = []
    client.on_unauthorized = lambda: expired.append(True)
    session.add("POST", "/auth/login/", {"message": "Invalid credentials"}, status=401)

    with pytest.raises(AuthenticationError):
        client.post("/auth/login/", json={}, tenant=False)

    assert expired == []


def test_network_failure_becomes_api_error(client, session):
    session.error = requests.ConnectionError("connection refused")

    with pytest.raises(ApiError) as excinfo:
        client.get("/facilities/")

    assert excinfo.value.message == NETWORK_ERROR_MESSAGE
    assert excinfo.value.status == 0


def test_empty_response_returns_none(client, session):
    session.add("DELETE", "/facilities/f1/", None, status=204)

    assert client.delete("/facilities/f1/") is None


def test_raw_download_returns_bytes(client, session):
    session.add("GET", "/tasks/attachments/a1/download/", None, content=b"%PDF", content_type="application/pdf")

    assert client.get("/tasks/attachments/a1/download/", raw=True) == b"%PDF"


@pytest.mark.parametrize(
    "body, expected_count",
    [
        ([{"id": "f1", "name": "North"}], 1),
        ({"count": 12, "next": "http://x/?page=2", "results": [{"id": "f1", "name": "North"}]}, 12),
        ({"count": 3, "results": {"success": True, "data": [{"id": "f1", "name": "North"}]}}, 3),
        ({"success": True, "data": [{"id": "f1", "name": "North"}]}, 1),
    ],
)
def test_unwrap_page_accepts_every_list_envelope(body, expected_count):
    page = ApiClient.unwrap_page(body, Facility.from_api)

    assert [item.name for item in page.items] == ["North"]
    assert page.count == expected_count


def test_format_error_details_handles_plain_strings():
    assert format_error_details({"email": "Invalid"}) == "email: Invalid"


def test_resource_list_only_forwards_known_filters(api, session):
    session.add("GET", "/facilities/", {"count": 0, "results": []})

    api.facilities.list(search="north", status="operational", bogus="x", page=1, page_size=20)

    assert session.last.params == {"search": "north", "status": "operational", "page": 1, "page_size": 20}


def test_resource_update_uses_patch_with_partial_payload(api, session):
    session.add("PATCH", "/facilities/f1/", {"data": {"id": "f1", "name": "North Plant"}})

    facility = api.facilities.update("f1", FacilityRequest(name="North Plant"))

    assert session.last.json == {"name": "North Plant"}
    assert facility.name == "North Plant"
