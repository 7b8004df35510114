from __future__ import annotations

import datetime as dt

from fieldpilot_desktop.models import (
    Building,
    Equipment,
    Location,
    Task,
    Team,
    Tenant,
    User,
    WorkHoursReport,
    parse_date,
    parse_datetime,
)


def test_parse_datetime_handles_zulu_and_junk():
    parsed = parse_datetime("2024-05-01T08:00:00Z")

    assert parsed == dt.datetime(2024, 5, 1, 8, 0, tzinfo=dt.timezone.utc)
    assert parse_datetime("yesterday") is None
    assert parse_datetime(None) is None


def test_parse_date_accepts_datetimes():
    assert parse_date("2024-05-01T08:00:00Z") == dt.date(2024, 5, 1)
    assert parse_date("2024-05-01") == dt.date(2024, 5, 1)


def test_user_full_name_falls_back_to_parts():
    user = User.from_api({"id": 7, "email": "a@acme.test", "first_name": "Ada", "last_name": "Lane"})

    assert user.id == "7"
    assert user.full_name == "Ada Lane"
    assert user.role == "employee"
    assert User.from_api(user.to_storage()) == user


def test_tenant_defaults_to_first_onboarding_step():
    tenant = Tenant.from_api({"id": "tn1", "name": "Acme", "slug": "acme"})

    assert tenant.onboarding_step == 1
    assert not tenant.onboarding_completed


def test_building_accepts_nested_facility():
    building = Building.from_api({"id": "b1", "name": "Hall A", "facility": {"id": "f1", "name": "North"}})

    assert building.facility_id == "f1"
    assert building.facility_name == "North"


def test_equipment_parses_dates_and_building():
    equipment = Equipment.from_api({"id": "e1", "name": "Chiller", "building": "b1",
                                    "warranty_expiration": "2026-01-31", "is_under_warranty": True})

    assert equipment.building_id == "b1"
    assert equipment.warranty_expiration == dt.date(2026, 1, 31)


def test_location_coordinates():
    location = Location.from_api({"id": "l1", "name": "Roof", "entity_type": "building", "entity_id": "b1",
                                  "latitude": "52.52", "longitude": "13.40"})

    assert location.has_coordinates
    assert not Location.from_api({"id": "l2", "name": "Basement", "entity_type": "building",
                                  "entity_id": "b1"}).has_coordinates


def test_team_counts_members_when_count_missing():
    team = Team.from_api({"id": "tm1", "name": "HVAC Crew", "members": [
        {"id": "u1", "email": "a@acme.test", "full_name": "A"},
        {"id": "u2", "email": "b@acme.test", "name": "B"},
    ]})

    assert team.member_count == 2
    assert [member.full_name for member in team.members] == ["A", "B"]


def test_task_list_view_assignees_and_teams():
    task = Task.from_api({
        "id": "t1",
        "task_number": "TASK-1",
        "title": "Inspect",
        "assignees": [{"id": "u7", "full_name": "Sam Tech"}],
        "teams": [{"id": "team-1", "name": "HVAC Crew"}],
        "scheduled_start": "2024-05-01T09:00:00Z",
    })

    assert [(item.kind, item.target_id) for item in task.assignments] == [("technician", "u7"), ("team", "team-1")]
    assert [item.name for item in task.assignments] == ["Sam Tech", "HVAC Crew"]
    assert task.is_scheduled
    assert task.priority == "medium"


def test_work_hours_report():
    report = WorkHoursReport.from_api({
        "technician": {"id": "u7", "name": "Sam Tech", "email": "sam@acme.test"},
        "summary": {"total_work_hours": "41.5", "normal_hours": "40", "overtime_hours": "1.5", "total_tasks": 6},
        "time_logs": [{"id": "log-1", "arrived_at": "2024-05-01T08:00:00Z"}],
    })

    assert report.overtime_hours == 1.5
    assert report.total_tasks == 6
    assert report.time_logs[0].is_on_site
