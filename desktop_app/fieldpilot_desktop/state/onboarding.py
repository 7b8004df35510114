"""Company onboarding wizard, members and invitations."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from ..api.onboarding import OnboardingApi
from ..errors import ApiError
from ..models import Invitation, Tenant, TenantMember
from ..schemas import CreateCompanyRequest, InviteMemberRequest, UpdateCompanyRequest
from ..token_store import TokenStore

logger = logging.getLogger(__name__)

FIRST_STEP = 1
LAST_STEP = 5


def next_step(completed_step: int, server_step: int) -> int:
    """Step shown after ``completed_step`` was submitted.

    The server normally advances ``onboarding_step`` itself; when it did not,
    move on by one. Never past the completion step.
    """

    step = server_step if server_step > completed_step else completed_step + 1
    return min(step, LAST_STEP)


class OnboardingState:
    """Progress through the onboarding wizard."""

    def __init__(self, onboarding_api: OnboardingApi, token_store: TokenStore) -> None:
        self.onboarding_api = onboarding_api
        self.token_store = token_store
        self.tenant: Optional[Tenant] = None
        self.members: List[TenantMember] = []
        self.pending_invitations: List[Invitation] = []
        self.user_invitations: List[Invitation] = []
        self.current_step = FIRST_STEP
        self.is_loading = False
        self._members_loaded = False
        self._invitations_loaded = False

    def reset(self) -> None:
        self.tenant = None
        self.members = []
        self.pending_invitations = []
        self.user_invitations = []
        self.current_step = FIRST_STEP
        self._members_loaded = False
        self._invitations_loaded = False

    def _require_session(self) -> None:
        if not self.token_store.access_token:
            raise ApiError("No access token available", status=401)

    def _set_tenant(self, tenant: Optional[Tenant]) -> None:
        self.tenant = tenant
        self.current_step = tenant.onboarding_step if tenant else FIRST_STEP

    def _remember_tenant_slug(self, tenant: Tenant) -> None:
        # Later tenant-scoped calls are routed to {slug}.<host>.
        user_data = self.token_store.user_data
        if user_data is not None and tenant.slug:
            user_data["tenant_slug"] = tenant.slug
            self.token_store.store_user_data(user_data)

    # ------------------------------------------------------------------
    # Company
    # ------------------------------------------------------------------
    def load_tenant(self) -> Optional[Tenant]:
        """Fetch the company; ``None`` sends the user to company creation."""

        if not self.token_store.access_token:
            return None
        self.is_loading = True
        try:
            tenant = self.onboarding_api.current_tenant()
        except ApiError as exc:
            logger.error("Error loading tenant data: %s", exc)
            tenant = None
        finally:
            self.is_loading = False
        self._set_tenant(tenant)
        if tenant is not None:
            self._remember_tenant_slug(tenant)
        return tenant

    def refresh_tenant(self) -> Optional[Tenant]:
        if not self.token_store.access_token:
            return None
        self._set_tenant(self.onboarding_api.current_tenant())
        return self.tenant

    def create_company(self, data: CreateCompanyRequest | Mapping[str, Any]) -> Tenant:
        request = data if isinstance(data, CreateCompanyRequest) else CreateCompanyRequest(**dict(data))
        self._require_session()
        self.is_loading = True
        try:
            tenant = self.onboarding_api.create_company(request)
        except ApiError as exc:
            logger.error("Error creating company: %s", exc)
            raise
        finally:
            self.is_loading = False
        self._set_tenant(tenant)
        self._remember_tenant_slug(tenant)
        return tenant

    def update_company(self, data: UpdateCompanyRequest | Mapping[str, Any]) -> Tenant:
        request = data if isinstance(data, UpdateCompanyRequest) else UpdateCompanyRequest(**dict(data))
        self._require_session()
        self.is_loading = True
        try:
            tenant = self.onboarding_api.update_company(request)
        except ApiError as exc:
            logger.error("Error updating company: %s", exc)
            raise
        finally:
            self.is_loading = False
        self.tenant = tenant
        return tenant

    # ------------------------------------------------------------------
    # Wizard
    # ------------------------------------------------------------------
    def complete_step(self, step: int, data: Optional[Dict[str, Any]] = None) -> int:
        """Mark ``step`` done and return the step the wizard moves to."""

        self._require_session()
        self.is_loading = True
        try:
            tenant = self.onboarding_api.complete_step(step, data)
        except ApiError as exc:
            logger.error("Error completing step %s: %s", step, exc)
            raise
        finally:
            self.is_loading = False
        step_after = next_step(step, tenant.onboarding_step)
        if tenant.onboarding_step == step:
            tenant.onboarding_step = step_after
        self.tenant = tenant
        self.current_step = step_after
        logger.info("Onboarding step %s completed, now at %s", step, step_after)
        return step_after

    def go_to_step(self, step: int) -> None:
        if FIRST_STEP <= step <= LAST_STEP:
            self.current_step = step

    # ------------------------------------------------------------------
    # Members
    # ------------------------------------------------------------------
    def load_members(self, force: bool = False) -> List[TenantMember]:
        """Members of the tenant; cached until ``force`` is set."""

        if self._members_loaded and not force:
            return self.members
        self._require_session()
        self.is_loading = True
        try:
            self.members = self.onboarding_api.list_members()
        except ApiError as exc:
            logger.error("Error loading members: %s", exc)
            raise
        finally:
            self.is_loading = False
        self._members_loaded = True
        return self.members

    def invite_member(self, data: InviteMemberRequest | Mapping[str, Any]) -> Invitation:
        """Send an invitation, then reload members and pending invitations."""

        request = data if isinstance(data, InviteMemberRequest) else InviteMemberRequest(**dict(data))
        self._require_session()
        try:
            invitation = self.onboarding_api.invite_member(request)
        except ApiError as exc:
            logger.error("Error inviting team member: %s", exc)
            raise
        self.load_members(force=True)
        self.load_pending_invitations(force=True)
        return invitation

    def update_member_role(self, member_id: str, role: str) -> None:
        self._require_session()
        try:
            self.onboarding_api.update_member_role(member_id, role)
        except ApiError as exc:
            logger.error("Error updating member role: %s", exc)
            raise
        self.load_members(force=True)

    def remove_member(self, member_id: str) -> None:
        self._require_session()
        try:
            self.onboarding_api.remove_member(member_id)
        except ApiError as exc:
            logger.error("Error removing member: %s", exc)
            raise
        self.load_members(force=True)

    # ------------------------------------------------------------------
    # Invitations
    # ------------------------------------------------------------------
    def load_pending_invitations(self, force: bool = False) -> List[Invitation]:
        if self._invitations_loaded and not force:
            return self.pending_invitations
        self._require_session()
        try:
            self.pending_invitations = self.onboarding_api.pending_invitations()
        except ApiError as exc:
            logger.error("Error loading pending invitations: %s", exc)
            raise
        self._invitations_loaded = True
        return self.pending_invitations

    def resend_invitation(self, invitation_id: str) -> None:
        self._require_session()
        try:
            self.onboarding_api.resend_invitation(invitation_id)
        except ApiError as exc:
            logger.error("Error resending invitation: %s", exc)
            raise
        self.load_pending_invitations(force=True)

    def revoke_invitation(self, invitation_id: str) -> None:
        self._require_session()
        try:
            self.onboarding_api.revoke_invitation(invitation_id)
        except ApiError as exc:
            logger.error("Error revoking invitation: %s", exc)
            raise
        self.load_pending_invitations(force=True)

    def check_invitations(self) -> List[Invitation]:
        """Invitations addressed to the signed-in user."""

        self._require_session()
        self.user_invitations = self.onboarding_api.check_invitations()
        return self.user_invitations

    def accept_invitation(self, invitation_id: str) -> Optional[Tenant]:
        """Join the inviting tenant and return it."""

        self._require_session()
        self.is_loading = True
        try:
            self.onboarding_api.accept_invitation(invitation_id)
        except ApiError as exc:
            logger.error("Error accepting invitation: %s", exc)
            raise
        finally:
            self.is_loading = False
        tenant = self.refresh_tenant()
        if tenant is not None:
            self._remember_tenant_slug(tenant)
        self.check_invitations()
        return tenant


__all__ = ["FIRST_STEP", "LAST_STEP", "OnboardingState", "next_step"]
