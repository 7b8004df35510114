from __future__ import annotations

import datetime as dt

import pytest

from fieldpilot_desktop.schemas import CreateTeamRequest


def test_task_list_filters(api, session, signed_in):
    session.add("GET", "/tasks/", {"count": 1, "results": [{"id": "t1", "title": "Inspect", "status": "pending"}]})

    page = api.tasks.list(status="pending", priority="high", assignee="u7", page=1, page_size=10)

    assert page.items[0].status == "pending"
    assert session.last.params == {"status": "pending", "priority": "high", "assignee": "u7", "page": 1,
                                   "page_size": 10}


def test_history_filters_are_optional(api, session):
    session.add("GET", "/tasks/t1/history/", {"data": [{"id": "h1", "action": "status_changed",
                                                        "field_name": "status", "old_value": "new",
                                                        "new_value": "closed"}]})

    entries = api.tasks.history("t1", action="status_changed")

    assert entries[0].new_value == "closed"
    assert session.last.params == {"action": "status_changed"}


def test_unknown_material_type_is_rejected(api):
    with pytest.raises(ValueError):
        api.tasks.log_material("t1", "returned", {"material_name": "Filter", "quantity": 1, "unit": "pcs"})


def test_work_hours_report_date_range(api, session):
    session.add("GET", "/tasks/reports/work-hours/", {"data": {
        "technician": {"id": "u7", "name": "Sam Tech"},
        "summary": {"total_work_hours": 8, "normal_hours": 8, "overtime_hours": 0, "total_tasks": 1},
        "time_logs": [],
    }})

    report = api.tasks.work_hours_report("u7", dt.date(2024, 5, 1), dt.date(2024, 5, 31))

    assert report.technician_name == "Sam Tech"
    assert session.last.params == {"technician": "u7", "start_date": "2024-05-01", "end_date": "2024-05-31"}


def test_list_technicians(api, session):
    session.add("GET", "/tasks/teams/technicians/", {"count": 1, "results": [
        {"id": "u7", "email": "sam@acme.test", "full_name": "Sam Tech", "role": "technician"}]})

    page = api.teams.list_technicians(search="sam")

    assert page.items[0].full_name == "Sam Tech"
    assert session.last.params == {"search": "sam"}


def test_create_team_with_members(api, session):
    session.add("POST", "/tasks/teams/", {"data": {"id": "tm1", "name": "HVAC Crew",
                                                  "members": [{"id": "u7", "email": "sam@acme.test"}]}},
                status=201)

    team = api.teams.create(CreateTeamRequest(name="HVAC Crew", member_ids=["u7"]))

    assert session.last.json == {"name": "HVAC Crew", "member_ids": ["u7"], "is_active": True}
    assert team.member_count == 1


def test_onboarding_and_billing_calls_avoid_tenant_host(api, session, signed_in):
    session.add("GET", "/onboarding/members/", {"data": []})
    session.add("GET", "/billing/payment-methods/", {"data": [{"id": "pm_1", "brand": "visa"}]})

    api.onboarding.list_members()
    methods = api.billing.list_payment_methods()

    assert {call.host for call in session.calls} == {"localhost:8000"}
    assert methods == [{"id": "pm_1", "brand": "visa"}]
