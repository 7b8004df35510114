"""Request payloads sent to the FieldPilot API.

Forms build one of these models before calling the API. Validation errors are
turned into per-field messages with :func:`fieldpilot_desktop.errors.field_errors`.
"""

from __future__ import annotations

import datetime as dt
from typing import Any, Dict, List, Optional

from typing_extensions import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .validation import (
    validate_email,
    validate_otp,
    validate_password,
    validate_password_confirm,
    validate_phone,
    validate_zip_code,
)

MemberRole = Literal["owner", "admin", "manager", "employee", "technician", "customer"]
BillingCycle = Literal["monthly", "yearly"]
TaskStatus = Literal["new", "closed", "reopened", "pending", "rejected"]
WorkStatus = Literal["open", "hold", "in_progress", "done"]
TaskPriority = Literal["low", "medium", "high", "critical"]
EquipmentStatusAtDeparture = Literal["functional", "shutdown"]
MaterialLogType = Literal["needed", "received"]
OperationalStatus = Literal["operational", "under_construction", "maintenance", "closed"]


def _check(message: Optional[str], value: Any) -> Any:
    if message:
        raise ValueError(message)
    return value


def _strip_required(value: str, label: str) -> str:
    text = (value or "").strip()
    if not text:
        raise ValueError(f"{label} is required")
    return text


class RequestModel(BaseModel):
    """Base for request bodies; surrounding whitespace is stripped from strings."""

    model_config = ConfigDict(str_strip_whitespace=True)

    def payload(self) -> Dict[str, Any]:
        """JSON body without unset optional fields."""

        return self.model_dump(mode="json", exclude_none=True)


class PartialRequestModel(RequestModel):
    """Update body that sends only the fields that were set."""

    def payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_unset=True)


# ----------------------------------------------------------------------
# Auth
# ----------------------------------------------------------------------
class LoginRequest(RequestModel):
    """Credentials for ``/auth/login/``."""

    email: str
    password: str
    remember_me: bool = False

    @field_validator("email")
    @classmethod
    def _validate_email(cls, value: str) -> str:
        return _check(validate_email(value), value.lower())

    @field_validator("password")
    @classmethod
    def _password_present(cls, value: str) -> str:
        if not value:
            raise ValueError("Password is required")
        return value


class RegisterRequest(RequestModel):
    """Sign-up form, including the password confirmation."""

    email: str
    password: str
    password_confirm: str
    first_name: str
    last_name: str
    phone: Optional[str] = None
    role: MemberRole = "owner"

    @field_validator("email")
    @classmethod
    def _validate_email(cls, value: str) -> str:
        return _check(validate_email(value), value.lower())

    @field_validator("password")
    @classmethod
    def _validate_password(cls, value: str) -> str:
        return _check(validate_password(value), value)

    @field_validator("first_name")
    @classmethod
    def _first_name(cls, value: str) -> str:
        return _strip_required(value, "First name")

    @field_validator("last_name")
    @classmethod
    def _last_name(cls, value: str) -> str:
        return _strip_required(value, "Last name")

    @field_validator("phone")
    @classmethod
    def _validate_phone(cls, value: Optional[str]) -> Optional[str]:
        return _check(validate_phone(value), value or None)

    @model_validator(mode="after")
    def _passwords_match(self) -> "RegisterRequest":
        message = validate_password_confirm(self.password, self.password_confirm)
        if message:
            raise ValueError(message)
        return self


class VerifyEmailRequest(RequestModel):
    """Six-digit code sent to the new account's e-mail address."""

    email: str
    otp_code: str

    @field_validator("otp_code")
    @classmethod
    def _validate_otp(cls, value: str) -> str:
        return _check(validate_otp(value), value)


# ----------------------------------------------------------------------
# Onboarding
# ----------------------------------------------------------------------
class CompanyFields(RequestModel):
    """Company fields shared by the create and update forms."""

    company_phone: Optional[str] = None
    company_size: Optional[Literal["1-10", "11-50", "51-200", "201-500", "500+"]] = None
    industry: Optional[str] = None
    website: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None

    @field_validator("company_phone")
    @classmethod
    def _validate_phone(cls, value: Optional[str]) -> Optional[str]:
        return _check(validate_phone(value), value or None)

    @field_validator("zip_code")
    @classmethod
    def _validate_zip(cls, value: Optional[str]) -> Optional[str]:
        return _check(validate_zip_code(value), value or None)


class CreateCompanyRequest(CompanyFields):
    """Company created during onboarding."""

    name: str
    company_email: str

    @field_validator("name")
    @classmethod
    def _name(cls, value: str) -> str:
        return _strip_required(value, "Company name")

    @field_validator("company_email")
    @classmethod
    def _validate_email(cls, value: str) -> str:
        return _check(validate_email(value), value.lower())


class UpdateCompanyRequest(CompanyFields):
    """Edits to the current company."""

    name: Optional[str] = None
    company_email: Optional[str] = None

    @field_validator("company_email")
    @classmethod
    def _validate_email(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return _check(validate_email(value), value.lower())


class InviteMemberRequest(RequestModel):
    """Invitation of a new member with one of the assignable roles."""

    email: str
    role: MemberRole = "employee"
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    @field_validator("email")
    @classmethod
    def _validate_email(cls, value: str) -> str:
        return _check(validate_email(value), value.lower())


class CompleteStepRequest(RequestModel):
    """Marks one onboarding step as done."""

    step: int = Field(ge=1, le=5)
    data: Optional[Dict[str, Any]] = None


# ----------------------------------------------------------------------
# Billing
# ----------------------------------------------------------------------
class CreateSubscriptionRequest(RequestModel):
    """Plan chosen at checkout."""

    plan_slug: str
    billing_cycle: BillingCycle = "monthly"
    payment_method_id: Optional[str] = None


class UpdateSubscriptionRequest(RequestModel):
    """Plan or billing-cycle change of an existing subscription."""

    plan_slug: Optional[str] = None
    billing_cycle: Optional[BillingCycle] = None
    cancel_at_period_end: Optional[bool] = None


class CancelSubscriptionRequest(RequestModel):
    """Cancellation, either immediately or at the end of the period."""

    cancel_immediately: bool = False
    reason: Optional[str] = None


# ----------------------------------------------------------------------
# Sites and assets
# ----------------------------------------------------------------------
class FacilityRequest(PartialRequestModel):
    """Facility fields; all optional for partial updates."""

    name: Optional[str] = None
    facility_type: Optional[Literal["warehouse", "office", "factory", "retail", "datacenter", "other"]] = None
    description: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    contact_name: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    operational_status: Optional[OperationalStatus] = None
    square_footage: Optional[int] = Field(default=None, ge=0)
    year_built: Optional[int] = Field(default=None, ge=1800, le=2100)
    customer_id: Optional[str] = None
    notes: Optional[str] = None
    custom_fields: Optional[Dict[str, Any]] = None

    @field_validator("contact_email")
    @classmethod
    def _contact_email(cls, value: Optional[str]) -> Optional[str]:
        if not value:
            return value
        return _check(validate_email(value), value)


class CreateFacilityRequest(FacilityRequest):
    """New facility; a name is required."""

    payload = RequestModel.payload

    name: str
    facility_type: Literal["warehouse", "office", "factory", "retail", "datacenter", "other"] = "other"

    @field_validator("name")
    @classmethod
    def _name(cls, value: str) -> str:
        return _strip_required(value, "Facility name")


class BuildingRequest(PartialRequestModel):
    """Building fields; all optional for partial updates."""

    facility_id: Optional[str] = None
    name: Optional[str] = None
    building_type: Optional[Literal["office", "warehouse", "production", "storage", "laboratory", "other"]] = None
    description: Optional[str] = None
    floor_count: Optional[int] = Field(default=None, ge=0)
    square_footage: Optional[int] = Field(default=None, ge=0)
    construction_year: Optional[int] = Field(default=None, ge=1800, le=2100)
    address: Optional[str] = None
    contact_name: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    operational_status: Optional[OperationalStatus] = None
    customer_id: Optional[str] = None
    notes: Optional[str] = None
    custom_fields: Optional[Dict[str, Any]] = None


class CreateBuildingRequest(BuildingRequest):
    """New building; facility and name are required."""

    payload = RequestModel.payload

    facility_id: str
    name: str
    building_type: Literal["office", "warehouse", "production", "storage", "laboratory", "other"] = "other"

    @field_validator("facility_id")
    @classmethod
    def _facility(cls, value: str) -> str:
        return _strip_required(value, "Facility")

    @field_validator("name")
    @classmethod
    def _name(cls, value: str) -> str:
        return _strip_required(value, "Building name")


class EquipmentRequest(PartialRequestModel):
    """Equipment fields; all optional for partial updates."""

    building_id: Optional[str] = None
    name: Optional[str] = None
    equipment_type: Optional[Literal["hvac", "electrical", "plumbing", "machinery", "it", "safety", "other"]] = None
    manufacturer: Optional[str] = None
    model: Optional[str] = None
    serial_number: Optional[str] = None
    description: Optional[str] = None
    purchase_date: Optional[dt.date] = None
    purchase_price: Optional[str] = None
    warranty_expiration: Optional[dt.date] = None
    installation_date: Optional[dt.date] = None
    operational_status: Optional[Literal["operational", "maintenance", "broken", "retired"]] = None
    condition: Optional[Literal["excellent", "good", "fair", "poor"]] = None
    specifications: Optional[Dict[str, Any]] = None
    customer_id: Optional[str] = None
    notes: Optional[str] = None
    custom_fields: Optional[Dict[str, Any]] = None


class CreateEquipmentRequest(EquipmentRequest):
    """New equipment; building and name are required."""

    payload = RequestModel.payload

    building_id: str
    name: str
    equipment_type: Literal["hvac", "electrical", "plumbing", "machinery", "it", "safety", "other"] = "other"

    @field_validator("building_id")
    @classmethod
    def _building(cls, value: str) -> str:
        return _strip_required(value, "Building")

    @field_validator("name")
    @classmethod
    def _name(cls, value: str) -> str:
        return _strip_required(value, "Equipment name")


class LocationRequest(PartialRequestModel):
    """Location fields; all optional for partial updates."""

    name: Optional[str] = None
    description: Optional[str] = None
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    address: Optional[str] = None
    floor: Optional[str] = None
    room: Optional[str] = None
    zone: Optional[str] = None
    additional_info: Optional[Dict[str, Any]] = None


class CreateLocationRequest(LocationRequest):
    """New location attached to a facility, building or piece of equipment."""

    payload = RequestModel.payload

    entity_type: Literal["facility", "building", "equipment"]
    entity_id: str
    name: str

    @field_validator("entity_id")
    @classmethod
    def _entity(cls, value: str) -> str:
        return _strip_required(value, "Entity")

    @field_validator("name")
    @classmethod
    def _name(cls, value: str) -> str:
        return _strip_required(value, "Location name")


# ----------------------------------------------------------------------
# Teams
# ----------------------------------------------------------------------
class TeamRequest(PartialRequestModel):
    """Team fields; all optional for partial updates."""

    name: Optional[str] = None
    description: Optional[str] = None
    is_active: Optional[bool] = None


class CreateTeamRequest(TeamRequest):
    """New team with its initial members."""

    payload = RequestModel.payload

    name: str
    member_ids: List[str] = Field(default_factory=list)
    is_active: bool = True

    @field_validator("name")
    @classmethod
    def _name(cls, value: str) -> str:
        return _strip_required(value, "Team name")


# ----------------------------------------------------------------------
# Tasks
# ----------------------------------------------------------------------
class TaskRequest(PartialRequestModel):
    """Task fields; a schedule must end after it starts."""

    equipment_id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[TaskPriority] = None
    status: Optional[TaskStatus] = None
    assignee_ids: Optional[List[str]] = None
    team_ids: Optional[List[str]] = None
    scheduled_start: Optional[dt.datetime] = None
    scheduled_end: Optional[dt.datetime] = None
    materials_needed: Optional[List[str]] = None
    notes: Optional[str] = None
    section_id: Optional[str] = None

    @model_validator(mode="after")
    def _schedule_order(self) -> "TaskRequest":
        if self.scheduled_start and self.scheduled_end and self.scheduled_end < self.scheduled_start:
            raise ValueError("Scheduled end must be after scheduled start")
        return self


class CreateTaskRequest(TaskRequest):
    """New task for one piece of equipment."""

    payload = RequestModel.payload

    equipment_id: str
    title: str
    description: str = ""
    priority: TaskPriority = "medium"

    @field_validator("equipment_id")
    @classmethod
    def _equipment(cls, value: str) -> str:
        return _strip_required(value, "Equipment")

    @field_validator("title")
    @classmethod
    def _title(cls, value: str) -> str:
        return _strip_required(value, "Title")


class AssignTaskRequest(RequestModel):
    """Technicians and teams to put on a task."""

    assignee_ids: List[str] = Field(default_factory=list)
    team_ids: List[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _someone_assigned(self) -> "AssignTaskRequest":
        if not self.assignee_ids and not self.team_ids:
            raise ValueError("Select at least one technician or team")
        return self


class CommentRequest(RequestModel):
    """Comment text; blank comments are rejected."""

    comment: str

    @field_validator("comment")
    @classmethod
    def _comment(cls, value: str) -> str:
        return _strip_required(value, "Comment")


class LogMaterialRequest(RequestModel):
    """Material needed for or received at a task."""

    material_name: str
    quantity: float = Field(gt=0)
    unit: str
    notes: Optional[str] = None

    @field_validator("material_name")
    @classmethod
    def _material(cls, value: str) -> str:
        return _strip_required(value, "Material name")

    @field_validator("unit")
    @classmethod
    def _unit(cls, value: str) -> str:
        return _strip_required(value, "Unit")


__all__ = [
    "AssignTaskRequest",
    "BuildingRequest",
    "CancelSubscriptionRequest",
    "CommentRequest",
    "CompleteStepRequest",
    "CreateBuildingRequest",
    "CreateCompanyRequest",
    "CreateEquipmentRequest",
    "CreateFacilityRequest",
    "CreateLocationRequest",
    "CreateSubscriptionRequest",
    "CreateTaskRequest",
    "CreateTeamRequest",
    "EquipmentRequest",
    "FacilityRequest",
    "InviteMemberRequest",
    "LocationRequest",
    "LogMaterialRequest",
    "LoginRequest",
    "RegisterRequest",
    "TaskRequest",
    "TeamRequest",
    "UpdateCompanyRequest",
    "UpdateSubscriptionRequest",
    "VerifyEmailRequest",
]
