"""Column, filter and form definitions of the CRUD screens."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence, Tuple, Type

from ..schemas import (BuildingRequest, CreateBuildingRequest, CreateEquipmentRequest,
                       CreateFacilityRequest, CreateLocationRequest, CreateTaskRequest,
                       CreateTeamRequest, EquipmentRequest, FacilityRequest,
                       LocationRequest, RequestModel, TaskRequest, TeamRequest)
from .forms import CHOICE, DATE, MULTILINE, NUMBER, FormField

OPERATIONAL_STATUSES = ("operational", "under_construction", "maintenance", "closed")
EQUIPMENT_OPERATIONAL_STATUSES = ("operational", "maintenance", "broken", "retired")
TASK_PRIORITIES = ("low", "medium", "high", "critical")
TASK_STATUS_CHOICES = ("new", "closed", "reopened", "pending", "rejected")


@dataclass(slots=True, frozen=True)
class ListFilter:
    """Drop-down filter shown above an entity list."""

    key: str
    label: str
    choices: Sequence[str]


@dataclass(slots=True, frozen=True)
class EntityView:
    """How one entity type is listed, created and edited."""

    route: str
    title: str
    entity_name: str
    resource: str
    columns: Sequence[Tuple[str, str]]
    create_request: Type[RequestModel]
    update_request: Type[RequestModel]
    fields: Sequence[FormField]
    filters: Sequence[ListFilter] = field(default_factory=tuple)
    opens_detail: bool = False
    secondary_action: str = ""


FACILITIES = EntityView(
    route="/organization/facilities",
    title="Facilities",
    entity_name="Facility",
    resource="facilities",
    columns=(("Name", "name"), ("Code", "code"), ("Type", "facility_type"), ("City", "city"),
             ("Status", "operational_status"), ("Buildings", "buildings_count"),
             ("Equipment", "equipment_count")),
    create_request=CreateFacilityRequest,
    update_request=FacilityRequest,
    fields=(
        FormField("name", "Name"),
        FormField("facility_type", "Type", CHOICE,
                  ("warehouse", "office", "factory", "retail", "datacenter", "other")),
        FormField("description", "Description", MULTILINE),
        FormField("address", "Address"),
        FormField("city", "City"),
        FormField("state", "State"),
        FormField("zip_code", "Zip code"),
        FormField("country", "Country"),
        FormField("contact_name", "Contact name"),
        FormField("contact_email", "Contact e-mail"),
        FormField("contact_phone", "Contact phone"),
        FormField("operational_status", "Status", CHOICE, OPERATIONAL_STATUSES),
        FormField("notes", "Notes", MULTILINE),
    ),
    filters=(ListFilter("status", "Status", OPERATIONAL_STATUSES),),
    secondary_action="Buildings and equipment...",
)

BUILDINGS = EntityView(
    route="/organization/buildings",
    title="Buildings",
    entity_name="Building",
    resource="buildings",
    columns=(("Name", "name"), ("Code", "code"), ("Facility", "facility_name"),
             ("Type", "building_type"), ("Floors", "floor_count"), ("Status", "operational_status")),
    create_request=CreateBuildingRequest,
    update_request=BuildingRequest,
    fields=(
        FormField("facility_id", "Facility ID"),
        FormField("name", "Name"),
        FormField("building_type", "Type", CHOICE,
                  ("office", "warehouse", "production", "storage", "laboratory", "other")),
        FormField("description", "Description", MULTILINE),
        FormField("floor_count", "Floors", NUMBER),
        FormField("square_footage", "Square footage", NUMBER),
        FormField("construction_year", "Construction year", NUMBER),
        FormField("address", "Address"),
        FormField("operational_status", "Status", CHOICE, OPERATIONAL_STATUSES),
        FormField("notes", "Notes", MULTILINE),
    ),
    filters=(ListFilter("status", "Status", OPERATIONAL_STATUSES),),
)

EQUIPMENT = EntityView(
    route="/organization/equipment",
    title="Equipment",
    entity_name="Equipment",
    resource="equipment",
    columns=(("Number", "equipment_number"), ("Name", "name"), ("Type", "equipment_type"),
             ("Manufacturer", "manufacturer"), ("Model", "model"), ("Status", "operational_status"),
             ("Condition", "condition")),
    create_request=CreateEquipmentRequest,
    update_request=EquipmentRequest,
    fields=(
        FormField("building_id", "Building ID"),
        FormField("name", "Name"),
        FormField("equipment_type", "Type", CHOICE,
                  ("hvac", "electrical", "plumbing", "machinery", "it", "safety", "other")),
        FormField("manufacturer", "Manufacturer"),
        FormField("model", "Model"),
        FormField("serial_number", "Serial number"),
        FormField("purchase_date", "Purchase date", DATE),
        FormField("warranty_expiration", "Warranty expiration", DATE),
        FormField("installation_date", "Installation date", DATE),
        FormField("operational_status", "Status", CHOICE, EQUIPMENT_OPERATIONAL_STATUSES),
        FormField("condition", "Condition", CHOICE, ("excellent", "good", "fair", "poor")),
        FormField("notes", "Notes", MULTILINE),
    ),
    filters=(ListFilter("status", "Status", EQUIPMENT_OPERATIONAL_STATUSES),),
)

LOCATIONS = EntityView(
    route="/organization/locations",
    title="Locations",
    entity_name="Location",
    resource="locations",
    columns=(("Name", "name"), ("Entity type", "entity_type"), ("Address", "address"),
             ("Floor", "floor"), ("Room", "room"), ("Zone", "zone")),
    create_request=CreateLocationRequest,
    update_request=LocationRequest,
    fields=(
        FormField("entity_type", "Entity type", CHOICE, ("facility", "building", "equipment")),
        FormField("entity_id", "Entity ID"),
        FormField("name", "Name"),
        FormField("description", "Description", MULTILINE),
        FormField("latitude", "Latitude", NUMBER),
        FormField("longitude", "Longitude", NUMBER),
        FormField("address", "Address"),
        FormField("floor", "Floor"),
        FormField("room", "Room"),
        FormField("zone", "Zone"),
    ),
    filters=(ListFilter("entity_type", "Entity type", ("facility", "building", "equipment")),),
)

TEAMS = EntityView(
    route="/organization/teams",
    title="Teams",
    entity_name="Team",
    resource="teams",
    columns=(("Name", "name"), ("Description", "description"), ("Members", "member_count"),
             ("Active members", "active_member_count"), ("Created by", "created_by_name")),
    create_request=CreateTeamRequest,
    update_request=TeamRequest,
    fields=(
        FormField("name", "Name"),
        FormField("description", "Description", MULTILINE),
    ),
    secondary_action="Members...",
)

TASKS = EntityView(
    route="/organization/tasks",
    title="Tasks",
    entity_name="Task",
    resource="tasks",
    columns=(("Number", "task_number"), ("Title", "title"), ("Equipment", "equipment_name"),
             ("Status", "status"), ("Priority", "priority"), ("Comments", "comments_count"),
             ("Attachments", "attachments_count")),
    create_request=CreateTaskRequest,
    update_request=TaskRequest,
    fields=(
        FormField("equipment_id", "Equipment ID"),
        FormField("title", "Title"),
        FormField("description", "Description", MULTILINE),
        FormField("priority", "Priority", CHOICE, TASK_PRIORITIES),
        FormField("status", "Status", CHOICE, TASK_STATUS_CHOICES),
        FormField("notes", "Notes", MULTILINE),
    ),
    filters=(
        ListFilter("status", "Status", TASK_STATUS_CHOICES),
        ListFilter("priority", "Priority", TASK_PRIORITIES),
    ),
    opens_detail=True,
)

ENTITY_VIEWS = (TASKS, FACILITIES, BUILDINGS, EQUIPMENT, LOCATIONS, TEAMS)


__all__ = ["ENTITY_VIEWS", "EntityView", "ListFilter"]
