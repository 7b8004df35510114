from __future__ import annotations

import pytest

from fieldpilot_desktop.errors import ApiError
from fieldpilot_desktop.state.onboarding import LAST_STEP, OnboardingState, next_step

TENANT = {"id": "tn1", "name": "Acme Field Services", "slug": "acme-field", "company_email": "ops@acme.test",
          "onboarding_step": 2, "onboarding_completed": False}


@pytest.fixture()
def onboarding(api, token_store):
    return OnboardingState(api.onboarding, token_store)


@pytest.mark.parametrize(
    "completed, server_step, expected",
    [(1, 2, 2), (2, 2, 3), (2, 4, 4), (4, 1, 5), (5, 5, 5)],
)
def test_next_step(completed, server_step, expected):
    assert next_step(completed, server_step) == expected


def test_load_tenant_without_session_returns_none(onboarding, session):
    assert onboarding.load_tenant() is None

    assert session.calls == []


def test_load_tenant_sets_step_and_remembers_slug(onboarding, session, signed_in):
    session.add("GET", "/onboarding/current/", {"success": True, "data": TENANT})

    tenant = onboarding.load_tenant()

    assert tenant.slug == "acme-field"
    assert onboarding.current_step == 2
    assert signed_in.tenant_slug == "acme-field"


def test_missing_tenant_starts_at_company_step(onboarding, session, signed_in):
    session.add("GET", "/onboarding/current/", {"success": True, "data": None})

    assert onboarding.load_tenant() is None

    assert onboarding.current_step == 1


def test_load_tenant_error_is_swallowed(onboarding, session, signed_in):
    session.add("GET", "/onboarding/current/", {"message": "boom"}, status=500)

    assert onboarding.load_tenant() is None
    assert onboarding.is_loading is False


def test_create_company_requires_session(onboarding, session):
    with pytest.raises(ApiError) as excinfo:
        onboarding.create_company({"name": "Acme", "company_email": "ops@acme.test"})

    assert excinfo.value.status == 401
    assert session.calls == []


def test_create_company_posts_and_routes_future_calls(onboarding, session, signed_in, client):
    session.add("POST", "/onboarding/create/", {"data": dict(TENANT, onboarding_step=1)}, status=201)

    tenant = onboarding.create_company({"name": " Acme Field Services ", "company_email": "OPS@acme.test",
                                        "company_size": "11-50"})

    assert session.last.json == {"name": "Acme Field Services", "company_email": "ops@acme.test",
                                 "company_size": "11-50"}
    assert tenant.id == "tn1"
    assert onboarding.current_step == 1
    assert client.api_url() == "http://acme-field.localhost:8000/api/v1"


def test_complete_step_advances_when_server_did_not(onboarding, session, signed_in):
    session.add("POST", "/onboarding/onboarding/step/", {"data": dict(TENANT, onboarding_step=2)})

    assert onboarding.complete_step(2, {"plan_id": "p1", "billing_cycle": "monthly"}) == 3

    assert session.last.json == {"step": 2, "data": {"plan_id": "p1", "billing_cycle": "monthly"}}
    assert onboarding.tenant.onboarding_step == 3
    assert onboarding.current_step == 3


def test_complete_step_follows_server_step(onboarding, session, signed_in):
    session.add("POST", "/onboarding/onboarding/step/", {"data": dict(TENANT, onboarding_step=4)})

    assert onboarding.complete_step(3, {"skipped": True}) == 4


def test_last_step_is_terminal(onboarding, session, signed_in):
    session.add("POST", "/onboarding/onboarding/step/",
                {"data": dict(TENANT, onboarding_step=5, onboarding_completed=True)})

    assert onboarding.complete_step(5) == LAST_STEP

    assert onboarding.tenant.onboarding_completed


def test_go_to_step_ignores_out_of_range(onboarding):
    onboarding.go_to_step(3)
    onboarding.go_to_step(9)

    assert onboarding.current_step == 3


def test_members_are_cached_until_forced(onboarding, session, signed_in):
    session.add("GET", "/onboarding/members/",
                {"data": [{"id": "m1", "role": "owner", "user": {"email": "owner@acme.test", "full_name": "Olive"}}]})

    onboarding.load_members()
    members = onboarding.load_members()

    assert [member.email for member in members] == ["owner@acme.test"]
    assert len(session.calls_to("GET", "/onboarding/members/")) == 1

    onboarding.load_members(force=True)
    assert len(session.calls_to("GET", "/onboarding/members/")) == 2


def test_invite_member_refreshes_members_and_invitations(onboarding, session, signed_in):
    session.add("POST", "/onboarding/members/invite/",
                {"data": {"id": "i1", "email": "tech@acme.test", "role": "technician"}}, status=201)
    session.add("GET", "/onboarding/members/", {"data": []})
    session.add("GET", "/onboarding/invitations/pending/",
                {"data": [{"id": "i1", "email": "tech@acme.test", "role": "technician"}]})

    invitation = onboarding.invite_member({"email": "tech@acme.test", "role": "technician"})

    assert invitation.role == "technician"
    assert [item.email for item in onboarding.pending_invitations] == ["tech@acme.test"]
    assert len(session.calls_to("GET", "/onboarding/members/")) == 1


def test_update_member_role_patches_and_reloads(onboarding, session, signed_in):
    session.add("PATCH", "/onboarding/members/m2/role/", {"data": {"id": "m2", "role": "manager"}})
    session.add("GET", "/onboarding/members/", {"data": [{"id": "m2", "email": "a@acme.test", "role": "manager"}]})

    onboarding.update_member_role("m2", "manager")

    assert session.calls_to("PATCH", "/onboarding/members/m2/role/")[0].json == {"role": "manager"}
    assert onboarding.members[0].role == "manager"


def test_revoke_invitation_reloads_pending(onboarding, session, signed_in):
    session.add("DELETE", "/onboarding/invitations/i1/revoke/", None, status=204)
    session.add("GET", "/onboarding/invitations/pending/", {"data": []})

    onboarding.revoke_invitation("i1")

    assert onboarding.pending_invitations == []


def test_accept_invitation_switches_tenant(onboarding, session, signed_in):
    session.add("POST", "/onboarding/invitations/i9/accept/", {"data": {"tenant": TENANT}})
    session.add("GET", "/onboarding/current/", {"data": TENANT})
    session.add("GET", "/onboarding/invitations/check/", {"data": []})

    tenant = onboarding.accept_invitation("i9")

    assert tenant.slug == "acme-field"
    assert signed_in.tenant_slug == "acme-field"
    assert onboarding.user_invitations == []


def test_reset_forgets_everything(onboarding, session, signed_in):
    session.add("GET", "/onboarding/current/", {"data": TENANT})
    onboarding.load_tenant()

    onboarding.reset()

    assert onboarding.tenant is None
    assert onboarding.current_step == 1
