"""Company onboarding, membership and invitation endpoints."""

from __future__ import annotations

from typing import Any, Dict, Optional

from ..models import Invitation, Tenant, TenantMember
from ..schemas import CompleteStepRequest, CreateCompanyRequest, InviteMemberRequest, UpdateCompanyRequest
from .client import ApiClient


class OnboardingApi:
    """Onboarding progress, company creation and member invitations."""

    def __init__(self, client: ApiClient) -> None:
        self.client = client

    # ------------------------------------------------------------------
    # Company
    # ------------------------------------------------------------------
    def create_company(self, request: CreateCompanyRequest) -> Tenant:
        body = self.client.post("/onboarding/create/", json=request.payload(), tenant=False)
        return Tenant.from_api(self.client.unwrap(body) or {})

    def current_tenant(self) -> Optional[Tenant]:
        """The signed-in user's company, or ``None`` before one was created."""

        body = self.client.get("/onboarding/current/", tenant=False)
        data = self.client.unwrap(body)
        return Tenant.from_api(data) if isinstance(data, dict) and data else None

    def update_company(self, request: UpdateCompanyRequest) -> Tenant:
        body = self.client.put("/onboarding/update/", json=request.payload(), tenant=False)
        return Tenant.from_api(self.client.unwrap(body) or {})

    def complete_step(self, step: int, data: Optional[Dict[str, Any]] = None) -> Tenant:
        request = CompleteStepRequest(step=step, data=data)
        body = self.client.post("/onboarding/onboarding/step/", json=request.payload(), tenant=False)
        return Tenant.from_api(self.client.unwrap(body) or {})

    # ------------------------------------------------------------------
    # Members
    # ------------------------------------------------------------------
    def list_members(self) -> list[TenantMember]:
        body = self.client.get("/onboarding/members/", tenant=False)
        return [TenantMember.from_api(item) for item in self.client.unwrap(body) or []]

    def invite_member(self, request: InviteMemberRequest) -> Invitation:
        body = self.client.post("/onboarding/members/invite/", json=request.payload(), tenant=False)
        return Invitation.from_api(self.client.unwrap(body) or {})

    def update_member_role(self, member_id: str, role: str) -> TenantMember:
        body = self.client.patch(f"/onboarding/members/{member_id}/role/", json={"role": role}, tenant=False)
        return TenantMember.from_api(self.client.unwrap(body) or {})

    def remove_member(self, member_id: str) -> None:
        self.client.delete(f"/onboarding/members/{member_id}/", tenant=False)

    # ------------------------------------------------------------------
    # Invitations
    # ------------------------------------------------------------------
    def pending_invitations(self) -> list[Invitation]:
        body = self.client.get("/onboarding/invitations/pending/", tenant=False)
        return [Invitation.from_api(item) for item in self.client.unwrap(body) or []]

    def check_invitations(self) -> list[Invitation]:
        body = self.client.get("/onboarding/invitations/check/", tenant=False)
        return [Invitation.from_api(item) for item in self.client.unwrap(body) or []]

    def accept_invitation(self, invitation_id: str) -> Tenant:
        body = self.client.post(f"/onboarding/invitations/{invitation_id}/accept/", json={}, tenant=False)
        data = self.client.unwrap(body) or {}
        tenant = data.get("tenant") if isinstance(data.get("tenant"), dict) else data
        return Tenant.from_api(tenant)

    def resend_invitation(self, invitation_id: str) -> None:
        self.client.post(f"/onboarding/invitations/{invitation_id}/resend/", json={}, tenant=False)

    def revoke_invitation(self, invitation_id: str) -> None:
        self.client.delete(f"/onboarding/invitations/{invitation_id}/revoke/", tenant=False)


__all__ = ["OnboardingApi"]
