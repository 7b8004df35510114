"""Member roles and the coarse permissions attached to them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

ALL = "all"


@dataclass(slots=True, frozen=True)
class RoleOption:
    """Role offered in the invite form."""

    value: str
    label: str
    description: str


ROLE_OPTIONS = (
    RoleOption("owner", "Owner", "Full access, can manage billing and delete company"),
    RoleOption("admin", "Admin", "Can manage members, settings, and all operations except billing"),
    RoleOption("manager", "Manager", "Can manage team members and projects"),
    RoleOption("employee", "Employee", "Basic access to assigned features"),
    RoleOption("technician", "Technician", "Field technician with access to tasks and time tracking"),
    RoleOption("customer", "Customer", "External customer with limited access to their data"),
)

ROLE_PERMISSIONS = {
    "owner": (ALL,),
    "admin": ("manage_members", "manage_settings", "view_all"),
    "manager": ("manage_team", "manage_projects", "view_assigned"),
    "employee": ("view_assigned",),
    "technician": ("view_tasks", "log_time", "update_status"),
    "customer": ("view_own_data",),
}


def role_label(role: str) -> str:
    option = next((option for option in ROLE_OPTIONS if option.value == role), None)
    return option.label if option else role


def role_description(role: str) -> str:
    option = next((option for option in ROLE_OPTIONS if option.value == role), None)
    return option.description if option else ""


def has_permission(role: Optional[str], permission: str) -> bool:
    permissions = ROLE_PERMISSIONS.get(role or "", ())
    return ALL in permissions or permission in permissions


def has_role(role: Optional[str], allowed: Iterable[str]) -> bool:
    return bool(role) and role in tuple(allowed)


def is_admin_role(role: Optional[str]) -> bool:
    return has_role(role, ("owner", "admin"))


def is_manager_role(role: Optional[str]) -> bool:
    return has_role(role, ("owner", "admin", "manager"))


def can_modify_member(actor_role: Optional[str], member_role: str, *, is_self: bool) -> bool:
    """Managers and above may change other members, but never an owner or themselves."""

    return is_manager_role(actor_role) and not is_self and member_role != "owner"


def assignable_roles(actor_role: Optional[str]) -> tuple[str, ...]:
    """Roles offered when inviting or re-assigning; only owners may hand out ``owner``."""

    roles = tuple(option.value for option in ROLE_OPTIONS)
    if actor_role == "owner":
        return roles
    return tuple(role for role in roles if role != "owner")


__all__ = [
    "ROLE_OPTIONS",
    "ROLE_PERMISSIONS",
    "RoleOption",
    "assignable_roles",
    "can_modify_member",
    "has_permission",
    "has_role",
    "is_admin_role",
    "is_manager_role",
    "role_description",
    "role_label",
]
