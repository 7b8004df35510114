"""Data models for the desktop client."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, Generic, List, Optional, TypeVar

T = TypeVar("T")


def parse_datetime(value: Any) -> Optional[datetime]:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def parse_date(value: Any) -> Optional[date]:
    if not value:
        return None
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    parsed = parse_datetime(value)
    if parsed is not None:
        return parsed.date()
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def _float(value: Any, default: float = 0.0) -> float:
    if value in (None, ""):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _optional_float(value: Any) -> Optional[float]:
    if value in (None, ""):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _int(value: Any, default: int = 0) -> int:
    if value in (None, ""):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _optional_int(value: Any) -> Optional[int]:
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _identifier(value: Any) -> str:
    if isinstance(value, dict):
        value = value.get("id")
    return "" if value is None else str(value)


# ----------------------------------------------------------------------
# Paging
# ----------------------------------------------------------------------
@dataclass(slots=True)
class Page(Generic[T]):
    """One page of a list endpoint."""

    items: List[T] = field(default_factory=list)
    count: int = 0
    next: Optional[str] = None
    previous: Optional[str] = None


# ----------------------------------------------------------------------
# Accounts and tenants
# ----------------------------------------------------------------------
@dataclass(slots=True)
class User:
    """Signed-in user profile."""

    id: str
    email: str
    first_name: str = ""
    last_name: str = ""
    full_name: str = ""
    role: str = "employee"
    phone: Optional[str] = None
    job_title: Optional[str] = None
    is_active: bool = True
    is_verified: bool = False
    tenant_slug: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "User":
        first_name = _text(data.get("first_name"))
        last_name = _text(data.get("last_name"))
        full_name = data.get("full_name") or " ".join(part for part in (first_name, last_name) if part)
        return cls(
            id=_identifier(data.get("id")),
            email=_text(data.get("email")),
            first_name=first_name,
            last_name=last_name,
            full_name=full_name,
            role=data.get("role") or "employee",
            phone=data.get("phone"),
            job_title=data.get("job_title"),
            is_active=bool(data.get("is_active", True)),
            is_verified=bool(data.get("is_verified", False)),
            tenant_slug=data.get("tenant_slug"),
        )

    def to_storage(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "full_name": self.full_name,
            "role": self.role,
            "phone": self.phone,
            "job_title": self.job_title,
            "is_active": self.is_active,
            "is_verified": self.is_verified,
            "tenant_slug": self.tenant_slug,
        }


@dataclass(slots=True)
class Tenant:
    """Company account (isolation boundary)."""

    id: str
    name: str
    slug: str
    company_email: str = ""
    company_phone: Optional[str] = None
    website: Optional[str] = None
    industry: Optional[str] = None
    company_size: Optional[str] = None
    is_active: bool = True
    is_trial_active: bool = False
    trial_ends_at: Optional[datetime] = None
    onboarding_completed: bool = False
    onboarding_step: int = 1
    member_count: int = 0
    step_data: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Tenant":
        return cls(
            id=_identifier(data.get("id")),
            name=_text(data.get("name")),
            slug=_text(data.get("slug")),
            company_email=_text(data.get("company_email")),
            company_phone=data.get("company_phone"),
            website=data.get("website"),
            industry=data.get("industry"),
            company_size=data.get("company_size"),
            is_active=bool(data.get("is_active", True)),
            is_trial_active=bool(data.get("is_trial_active", False)),
            trial_ends_at=parse_datetime(data.get("trial_ends_at")),
            onboarding_completed=bool(data.get("onboarding_completed", False)),
            onboarding_step=_int(data.get("onboarding_step"), 1),
            member_count=_int(data.get("member_count")),
            step_data=dict(data.get("step_data") or {}),
        )


@dataclass(slots=True)
class TenantMember:
    """Member of the current tenant."""

    id: str
    email: str
    full_name: str = ""
    role: str = "employee"
    is_active: bool = True
    joined_at: Optional[datetime] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "TenantMember":
        user = data.get("user") if isinstance(data.get("user"), dict) else {}
        return cls(
            id=_identifier(data.get("id")),
            email=_text(data.get("email") or user.get("email")),
            full_name=_text(data.get("full_name") or user.get("full_name")),
            role=data.get("role") or "employee",
            is_active=bool(data.get("is_active", True)),
            joined_at=parse_datetime(data.get("joined_at")),
        )


@dataclass(slots=True)
class Invitation:
    """Pending invitation to join the tenant."""

    id: str
    email: str
    role: str = "employee"
    status: str = "pending"
    tenant_name: Optional[str] = None
    invited_by: Optional[str] = None
    expires_at: Optional[datetime] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Invitation":
        tenant = data.get("tenant") if isinstance(data.get("tenant"), dict) else {}
        return cls(
            id=_identifier(data.get("id")),
            email=_text(data.get("email")),
            role=data.get("role") or "employee",
            status=data.get("status") or "pending",
            tenant_name=data.get("tenant_name") or tenant.get("name"),
            invited_by=data.get("invited_by_name") or data.get("invited_by"),
            expires_at=parse_datetime(data.get("expires_at")),
        )


# ----------------------------------------------------------------------
# Billing
# ----------------------------------------------------------------------
@dataclass(slots=True)
class SubscriptionPlan:
    """Plan offered on the pricing page."""

    id: str
    name: str
    slug: str
    description: str = ""
    price_monthly: float = 0.0
    price_yearly: float = 0.0
    yearly_discount_percentage: float = 0.0
    max_users: Optional[int] = None
    max_equipment: Optional[int] = None
    max_storage_gb: Optional[int] = None
    features: Dict[str, bool] = field(default_factory=dict)
    is_active: bool = True

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "SubscriptionPlan":
        return cls(
            id=_identifier(data.get("id")),
            name=_text(data.get("name")),
            slug=_text(data.get("slug")),
            description=_text(data.get("description")),
            price_monthly=_float(data.get("price_monthly")),
            price_yearly=_float(data.get("price_yearly")),
            yearly_discount_percentage=_float(data.get("yearly_discount_percentage")),
            max_users=_optional_int(data.get("max_users")),
            max_equipment=_optional_int(data.get("max_equipment")),
            max_storage_gb=_optional_int(data.get("max_storage_gb")),
            features=dict(data.get("features") or {}),
            is_active=bool(data.get("is_active", True)),
        )

    def price_for(self, billing_cycle: str) -> float:
        return self.price_yearly if billing_cycle == "yearly" else self.price_monthly


@dataclass(slots=True)
class Subscription:
    """Current subscription of the tenant."""

    id: str
    plan: Optional[SubscriptionPlan]
    status: str
    billing_cycle: str = "monthly"
    current_period_start: Optional[datetime] = None
    current_period_end: Optional[datetime] = None
    cancel_at_period_end: bool = False
    canceled_at: Optional[datetime] = None
    trial_end: Optional[datetime] = None
    is_active: bool = False
    is_trial: bool = False
    days_until_renewal: int = 0
    next_renewal_date: Optional[datetime] = None
    usage_limits_exceeded: List[str] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Subscription":
        plan = data.get("plan")
        return cls(
            id=_identifier(data.get("id")),
            plan=SubscriptionPlan.from_api(plan) if isinstance(plan, dict) else None,
            status=data.get("status") or "incomplete",
            billing_cycle=data.get("billing_cycle") or "monthly",
            current_period_start=parse_datetime(data.get("current_period_start")),
            current_period_end=parse_datetime(data.get("current_period_end")),
            cancel_at_period_end=bool(data.get("cancel_at_period_end", False)),
            canceled_at=parse_datetime(data.get("canceled_at")),
            trial_end=parse_datetime(data.get("trial_end")),
            is_active=bool(data.get("is_active", False)),
            is_trial=bool(data.get("is_trial", False)),
            days_until_renewal=_int(data.get("days_until_renewal")),
            next_renewal_date=parse_datetime(data.get("next_renewal_date")),
            usage_limits_exceeded=list(data.get("usage_limits_exceeded") or []),
        )


@dataclass(slots=True)
class Invoice:
    """Invoice issued for the subscription."""

    id: str
    invoice_number: str
    total: float
    currency: str = "usd"
    status: str = "draft"
    issue_date: Optional[date] = None
    due_date: Optional[date] = None
    paid_at: Optional[datetime] = None
    invoice_pdf_url: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Invoice":
        return cls(
            id=_identifier(data.get("id")),
            invoice_number=_text(data.get("invoice_number")),
            total=_float(data.get("total")),
            currency=data.get("currency") or "usd",
            status=data.get("status") or "draft",
            issue_date=parse_date(data.get("issue_date")),
            due_date=parse_date(data.get("due_date")),
            paid_at=parse_datetime(data.get("paid_at")),
            invoice_pdf_url=data.get("invoice_pdf_url"),
        )


@dataclass(slots=True)
class Payment:
    """Payment attempt for an invoice."""

    id: str
    amount: float
    currency: str = "usd"
    payment_method: str = "card"
    status: str = "pending"
    failure_message: str = ""
    processed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Payment":
        return cls(
            id=_identifier(data.get("id")),
            amount=_float(data.get("amount")),
            currency=data.get("currency") or "usd",
            payment_method=data.get("payment_method") or "card",
            status=data.get("status") or "pending",
            failure_message=_text(data.get("failure_message")),
            processed_at=parse_datetime(data.get("processed_at")),
            created_at=parse_datetime(data.get("created_at")),
        )


@dataclass(slots=True)
class UsageMetric:
    """Usage of one plan limit, such as users or equipment."""

    current: float = 0.0
    limit: Optional[float] = None
    percentage: float = 0.0

    @classmethod
    def from_api(cls, data: Optional[Dict[str, Any]]) -> "UsageMetric":
        data = data or {}
        return cls(
            current=_float(data.get("current")),
            limit=_optional_float(data.get("limit")),
            percentage=_float(data.get("percentage")),
        )


@dataclass(slots=True)
class BillingOverview:
    """Summary shown at the top of the billing dashboard."""

    subscription: Optional[Subscription] = None
    current_invoice: Optional[Invoice] = None
    recent_payments: List[Payment] = field(default_factory=list)
    usage: Dict[str, UsageMetric] = field(default_factory=dict)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "BillingOverview":
        subscription = data.get("subscription")
        invoice = data.get("current_invoice")
        usage = data.get("usage_summary") or {}
        return cls(
            subscription=Subscription.from_api(subscription) if isinstance(subscription, dict) else None,
            current_invoice=Invoice.from_api(invoice) if isinstance(invoice, dict) else None,
            recent_payments=[Payment.from_api(item) for item in data.get("recent_payments") or []],
            usage={key: UsageMetric.from_api(value) for key, value in usage.items()},
        )


@dataclass(slots=True)
class SetupIntent:
    """Client secret for entering a card on the hosted form."""

    client_secret: str
    customer_id: str = ""

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "SetupIntent":
        return cls(client_secret=_text(data.get("client_secret")), customer_id=_text(data.get("customer_id")))


# ----------------------------------------------------------------------
# Sites and assets
# ----------------------------------------------------------------------
@dataclass(slots=True)
class Facility:
    """Site that holds buildings."""

    id: str
    name: str
    code: str = ""
    facility_type: str = "other"
    description: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    country: str = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    contact_name: str = ""
    contact_email: str = ""
    contact_phone: str = ""
    operational_status: str = "operational"
    customer_name: Optional[str] = None
    notes: str = ""
    custom_fields: Dict[str, Any] = field(default_factory=dict)
    buildings_count: int = 0
    equipment_count: int = 0
    created_at: Optional[datetime] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Facility":
        return cls(
            id=_identifier(data.get("id")),
            name=_text(data.get("name")),
            code=_text(data.get("code")),
            facility_type=data.get("facility_type") or "other",
            description=_text(data.get("description")),
            address=_text(data.get("address")),
            city=_text(data.get("city")),
            state=_text(data.get("state")),
            zip_code=_text(data.get("zip_code")),
            country=_text(data.get("country")),
            latitude=_optional_float(data.get("latitude")),
            longitude=_optional_float(data.get("longitude")),
            contact_name=_text(data.get("contact_name")),
            contact_email=_text(data.get("contact_email")),
            contact_phone=_text(data.get("contact_phone")),
            operational_status=data.get("operational_status") or "operational",
            customer_name=data.get("customer_name"),
            notes=_text(data.get("notes")),
            custom_fields=dict(data.get("custom_fields") or {}),
            buildings_count=_int(data.get("buildings_count")),
            equipment_count=_int(data.get("equipment_count")),
            created_at=parse_datetime(data.get("created_at")),
        )


@dataclass(slots=True)
class Building:
    """Building inside a facility."""

    id: str
    name: str
    facility_id: str = ""
    facility_name: str = ""
    code: str = ""
    building_type: str = "other"
    description: str = ""
    floor_count: Optional[int] = None
    square_footage: Optional[int] = None
    construction_year: Optional[int] = None
    address: str = ""
    operational_status: str = "operational"
    customer_name: Optional[str] = None
    notes: str = ""
    custom_fields: Dict[str, Any] = field(default_factory=dict)
    equipment_count: int = 0

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Building":
        facility = data.get("facility")
        facility_name = data.get("facility_name")
        if isinstance(facility, dict):
            facility_name = facility_name or facility.get("name")
        return cls(
            id=_identifier(data.get("id")),
            name=_text(data.get("name")),
            facility_id=_identifier(facility if facility is not None else data.get("facility_id")),
            facility_name=_text(facility_name),
            code=_text(data.get("code")),
            building_type=data.get("building_type") or "other",
            description=_text(data.get("description")),
            floor_count=_optional_int(data.get("floor_count")),
            square_footage=_optional_int(data.get("square_footage")),
            construction_year=_optional_int(data.get("construction_year")),
            address=_text(data.get("address")),
            operational_status=data.get("operational_status") or "operational",
            customer_name=data.get("customer_name"),
            notes=_text(data.get("notes")),
            custom_fields=dict(data.get("custom_fields") or {}),
            equipment_count=_int(data.get("equipment_count")),
        )


@dataclass(slots=True)
class Equipment:
    """Piece of equipment inside a building."""

    id: str
    name: str
    equipment_number: str = ""
    building_id: str = ""
    facility_name: str = ""
    equipment_type: str = "other"
    manufacturer: str = ""
    model: str = ""
    serial_number: str = ""
    description: str = ""
    purchase_date: Optional[date] = None
    warranty_expiration: Optional[date] = None
    installation_date: Optional[date] = None
    operational_status: str = "operational"
    condition: str = "good"
    specifications: Dict[str, Any] = field(default_factory=dict)
    customer_id: Optional[str] = None
    notes: str = ""
    custom_fields: Dict[str, Any] = field(default_factory=dict)
    is_under_warranty: bool = False

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Equipment":
        building = data.get("building_id", data.get("building"))
        return cls(
            id=_identifier(data.get("id")),
            name=_text(data.get("name")),
            equipment_number=_text(data.get("equipment_number")),
            building_id=_identifier(building),
            facility_name=_text(data.get("facility_name")),
            equipment_type=data.get("equipment_type") or "other",
            manufacturer=_text(data.get("manufacturer")),
            model=_text(data.get("model")),
            serial_number=_text(data.get("serial_number")),
            description=_text(data.get("description")),
            purchase_date=parse_date(data.get("purchase_date")),
            warranty_expiration=parse_date(data.get("warranty_expiration")),
            installation_date=parse_date(data.get("installation_date")),
            operational_status=data.get("operational_status") or "operational",
            condition=data.get("condition") or "good",
            specifications=dict(data.get("specifications") or {}),
            customer_id=data.get("customer_id"),
            notes=_text(data.get("notes")),
            custom_fields=dict(data.get("custom_fields") or {}),
            is_under_warranty=bool(data.get("is_under_warranty", False)),
        )


@dataclass(slots=True)
class Location:
    """Named location attached to a facility, building or piece of equipment."""

    id: str
    name: str
    entity_type: str
    entity_id: str
    description: str = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    address: str = ""
    floor: str = ""
    room: str = ""
    zone: str = ""
    additional_info: Dict[str, Any] = field(default_factory=dict)
    full_location: str = ""

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Location":
        return cls(
            id=_identifier(data.get("id")),
            name=_text(data.get("name")),
            entity_type=_text(data.get("entity_type")),
            entity_id=_identifier(data.get("entity_id")),
            description=_text(data.get("description")),
            latitude=_optional_float(data.get("latitude")),
            longitude=_optional_float(data.get("longitude")),
            address=_text(data.get("address")),
            floor=_text(data.get("floor")),
            room=_text(data.get("room")),
            zone=_text(data.get("zone")),
            additional_info=dict(data.get("additional_info") or {}),
            full_location=_text(data.get("full_location")),
        )


# ----------------------------------------------------------------------
# Teams
# ----------------------------------------------------------------------
@dataclass(slots=True)
class TeamMember:
    """Technician or other user as listed in a team."""

    id: str
    email: str
    full_name: str = ""
    role: str = "employee"
    is_active: bool = True

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "TeamMember":
        return cls(
            id=_identifier(data.get("id")),
            email=_text(data.get("email")),
            full_name=_text(data.get("full_name") or data.get("name")),
            role=data.get("role") or "employee",
            is_active=bool(data.get("is_active", True)),
        )


@dataclass(slots=True)
class Team:
    """Group of technicians that tasks can be assigned to."""

    id: str
    name: str
    description: str = ""
    members: List[TeamMember] = field(default_factory=list)
    is_active: bool = True
    member_count: int = 0
    active_member_count: int = 0
    created_by_name: str = ""

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Team":
        members = [TeamMember.from_api(item) for item in data.get("members") or [] if isinstance(item, dict)]
        return cls(
            id=_identifier(data.get("id")),
            name=_text(data.get("name")),
            description=_text(data.get("description")),
            members=members,
            is_active=bool(data.get("is_active", True)),
            member_count=_int(data.get("member_count"), len(members)),
            active_member_count=_int(data.get("active_member_count")),
            created_by_name=_text(data.get("created_by_name")),
        )


# ----------------------------------------------------------------------
# Tasks
# ----------------------------------------------------------------------
@dataclass(slots=True)
class TaskAssignment:
    """Link between a task and a technician or a team."""

    id: str
    name: str
    kind: str = "technician"
    work_status: str = "open"
    target_id: str = ""

    @classmethod
    def from_api(cls, data: Dict[str, Any], kind: str = "technician") -> "TaskAssignment":
        assignee = data.get("assignee") if isinstance(data.get("assignee"), dict) else None
        team = data.get("team") if isinstance(data.get("team"), dict) else None
        if team and not assignee:
            kind = "team"
        name = (
            data.get("name")
            or data.get("full_name")
            or data.get("assignee_name")
            or data.get("team_name")
            or (assignee or {}).get("full_name")
            or (team or {}).get("name")
            or ""
        )
        # List views send the technician or team itself; detail views wrap it.
        target = assignee or team
        target_id = _identifier(target.get("id")) if target else _identifier(data.get("id"))
        return cls(
            id=_identifier(data.get("id")),
            name=_text(name),
            kind=kind,
            work_status=data.get("work_status") or "open",
            target_id=target_id,
        )


@dataclass(slots=True)
class Task:
    """Work order."""

    id: str
    task_number: str
    title: str
    description: str = ""
    equipment_id: str = ""
    equipment_name: str = ""
    status: str = "new"
    priority: str = "medium"
    scheduled_start: Optional[datetime] = None
    scheduled_end: Optional[datetime] = None
    section_id: Optional[str] = None
    assignments: List[TaskAssignment] = field(default_factory=list)
    comments_count: int = 0
    attachments_count: int = 0
    materials_needed: List[str] = field(default_factory=list)
    materials_received: List[str] = field(default_factory=list)
    notes: str = ""
    custom_fields: Dict[str, Any] = field(default_factory=dict)
    is_active: bool = True
    created_by_name: str = ""
    created_at: Optional[datetime] = None

    @property
    def is_scheduled(self) -> bool:
        return self.scheduled_start is not None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Task":
        equipment = data.get("equipment") if isinstance(data.get("equipment"), dict) else {}
        section = data.get("section") if isinstance(data.get("section"), dict) else {}
        assignments: List[TaskAssignment] = []
        if data.get("assignments"):
            assignments = [TaskAssignment.from_api(item) for item in data["assignments"]]
        else:
            assignments.extend(TaskAssignment.from_api(item) for item in data.get("assignees") or [])
            assignments.extend(TaskAssignment.from_api(item, kind="team") for item in data.get("teams") or [])
        return cls(
            id=_identifier(data.get("id")),
            task_number=_text(data.get("task_number")),
            title=_text(data.get("title")),
            description=_text(data.get("description")),
            equipment_id=_text(data.get("equipment_id") or equipment.get("id")),
            equipment_name=_text(data.get("equipment_name") or equipment.get("name")),
            status=data.get("status") or "new",
            priority=data.get("priority") or "medium",
            scheduled_start=parse_datetime(data.get("scheduled_start")),
            scheduled_end=parse_datetime(data.get("scheduled_end")),
            section_id=data.get("section_id") or section.get("id"),
            assignments=assignments,
            comments_count=_int(data.get("comments_count")),
            attachments_count=_int(data.get("attachments_count")),
            materials_needed=list(data.get("materials_needed") or []),
            materials_received=list(data.get("materials_received") or []),
            notes=_text(data.get("notes")),
            custom_fields=dict(data.get("custom_fields") or {}),
            is_active=bool(data.get("is_active", True)),
            created_by_name=_text(data.get("created_by_name")),
            created_at=parse_datetime(data.get("created_at")),
        )


@dataclass(slots=True)
class TaskComment:
    """Comment on a task."""

    id: str
    task_id: str
    comment: str
    author_name: str = ""
    author_role: str = ""
    is_system_generated: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "TaskComment":
        return cls(
            id=_identifier(data.get("id")),
            task_id=_identifier(data.get("task")),
            comment=_text(data.get("comment")),
            author_name=_text(data.get("author_name")),
            author_role=_text(data.get("author_role")),
            is_system_generated=bool(data.get("is_system_generated", False)),
            created_at=parse_datetime(data.get("created_at")),
            updated_at=parse_datetime(data.get("updated_at")),
        )


@dataclass(slots=True)
class TaskAttachment:
    """File attached to a task."""

    id: str
    task_id: str
    filename: str
    file_url: str = ""
    file_size: int = 0
    file_type: str = ""
    is_image: bool = False
    uploaded_by_name: str = ""
    created_at: Optional[datetime] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "TaskAttachment":
        return cls(
            id=_identifier(data.get("id")),
            task_id=_identifier(data.get("task")),
            filename=_text(data.get("filename")),
            file_url=_text(data.get("file_url") or data.get("file")),
            file_size=_int(data.get("file_size")),
            file_type=_text(data.get("file_type")),
            is_image=bool(data.get("is_image", False)),
            uploaded_by_name=_text(data.get("uploaded_by_name")),
            created_at=parse_datetime(data.get("created_at")),
        )


@dataclass(slots=True)
class TimeLog:
    """One technician visit for a task: travel, arrival, lunch and departure."""

    id: str
    task_id: str = ""
    technician_name: str = ""
    travel_started_at: Optional[datetime] = None
    arrived_at: Optional[datetime] = None
    departed_at: Optional[datetime] = None
    lunch_started_at: Optional[datetime] = None
    lunch_ended_at: Optional[datetime] = None
    equipment_status_at_departure: Optional[str] = None
    is_on_lunch: bool = False
    is_on_site: bool = False
    is_traveling: bool = False
    total_work_hours: float = 0.0
    normal_hours: float = 0.0
    overtime_hours: float = 0.0
    created_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.travel_started_at is not None and self.departed_at is None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "TimeLog":
        travel_started_at = parse_datetime(data.get("travel_started_at"))
        arrived_at = parse_datetime(data.get("arrived_at"))
        departed_at = parse_datetime(data.get("departed_at"))
        lunch_started_at = parse_datetime(data.get("lunch_started_at"))
        lunch_ended_at = parse_datetime(data.get("lunch_ended_at"))

        # Servers that omit the flags get them inferred from the timestamps.
        is_on_lunch = data.get("is_on_lunch")
        if is_on_lunch is None:
            is_on_lunch = lunch_started_at is not None and lunch_ended_at is None and departed_at is None
        is_on_site = data.get("is_on_site")
        if is_on_site is None:
            is_on_site = arrived_at is not None and departed_at is None
        is_traveling = data.get("is_traveling")
        if is_traveling is None:
            is_traveling = travel_started_at is not None and arrived_at is None and departed_at is None

        return cls(
            id=_identifier(data.get("id")),
            task_id=_identifier(data.get("task")),
            technician_name=_text(data.get("technician_name")),
            travel_started_at=travel_started_at,
            arrived_at=arrived_at,
            departed_at=departed_at,
            lunch_started_at=lunch_started_at,
            lunch_ended_at=lunch_ended_at,
            equipment_status_at_departure=data.get("equipment_status_at_departure"),
            is_on_lunch=bool(is_on_lunch),
            is_on_site=bool(is_on_site),
            is_traveling=bool(is_traveling),
            total_work_hours=_float(data.get("total_work_hours")),
            normal_hours=_float(data.get("normal_hours")),
            overtime_hours=_float(data.get("overtime_hours")),
            created_at=parse_datetime(data.get("created_at")),
        )


@dataclass(slots=True)
class MaterialLog:
    """Material needed for or received at a task."""

    id: str
    task_id: str
    log_type: str
    material_name: str
    quantity: float
    unit: str
    notes: str = ""
    logged_by_name: str = ""
    logged_at: Optional[datetime] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "MaterialLog":
        return cls(
            id=_identifier(data.get("id")),
            task_id=_identifier(data.get("task")),
            log_type=data.get("log_type") or "needed",
            material_name=_text(data.get("material_name")),
            quantity=_float(data.get("quantity")),
            unit=_text(data.get("unit")),
            notes=_text(data.get("notes")),
            logged_by_name=_text(data.get("logged_by_name")),
            logged_at=parse_datetime(data.get("logged_at")),
        )


@dataclass(slots=True)
class TaskHistoryEntry:
    """One entry in the change history of a task."""

    id: str
    action: str
    user_name: str = ""
    field_name: Optional[str] = None
    old_value: Optional[str] = None
    new_value: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)
    created_at: Optional[datetime] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "TaskHistoryEntry":
        return cls(
            id=_identifier(data.get("id")),
            action=_text(data.get("action")),
            user_name=_text(data.get("user_name")),
            field_name=data.get("field_name"),
            old_value=data.get("old_value"),
            new_value=data.get("new_value"),
            details=dict(data.get("details") or {}),
            created_at=parse_datetime(data.get("created_at")),
        )


@dataclass(slots=True)
class WorkHoursReport:
    """Work hours of one technician over a date range."""

    technician_id: str
    technician_name: str
    technician_email: str = ""
    total_work_hours: float = 0.0
    normal_hours: float = 0.0
    overtime_hours: float = 0.0
    total_tasks: int = 0
    time_logs: List[TimeLog] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "WorkHoursReport":
        technician = data.get("technician") or {}
        summary = data.get("summary") or {}
        return cls(
            technician_id=_identifier(technician.get("id")),
            technician_name=_text(technician.get("name")),
            technician_email=_text(technician.get("email")),
            total_work_hours=_float(summary.get("total_work_hours")),
            normal_hours=_float(summary.get("normal_hours")),
            overtime_hours=_float(summary.get("overtime_hours")),
            total_tasks=_int(summary.get("total_tasks")),
            time_logs=[TimeLog.from_api(item) for item in data.get("time_logs") or []],
        )


__all__ = [
    "BillingOverview",
    "Building",
    "Equipment",
    "Facility",
    "Invitation",
    "Invoice",
    "Location",
    "MaterialLog",
    "Page",
    "Payment",
    "SetupIntent",
    "Subscription",
    "SubscriptionPlan",
    "Task",
    "TaskAssignment",
    "TaskAttachment",
    "TaskComment",
    "TaskHistoryEntry",
    "Team",
    "TeamMember",
    "Tenant",
    "TenantMember",
    "TimeLog",
    "UsageMetric",
    "User",
    "WorkHoursReport",
    "parse_date",
    "parse_datetime",
]
