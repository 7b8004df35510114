from __future__ import annotations

import pytest

from fieldpilot_desktop.controllers.notifications import ERROR, SUCCESS
from fieldpilot_desktop.controllers.team_members import TeamMembersController

TEAM_PATH = "/tasks/teams/tm1/"
TECHNICIANS_PATH = "/tasks/teams/technicians/"

SAM = {"id": "u7", "email": "sam@acme.test", "full_name": "Sam Tech", "role": "technician"}
RIA = {"id": "u8", "email": "ria@acme.test", "full_name": "Ria Volt", "role": "technician"}


def _team(*members: dict) -> dict:
    return {"data": {"id": "tm1", "name": "HVAC Crew", "members": list(members)}}


@pytest.fixture()
def controller(api, notifier):
    return TeamMembersController(api.teams, "tm1", notifier)


def test_available_excludes_current_members(controller, session):
    session.add("GET", TEAM_PATH, _team(SAM))
    session.add("GET", TECHNICIANS_PATH, {"count": 2, "results": [SAM, RIA]})

    controller.load()

    assert [member.full_name for member in controller.members] == ["Sam Tech"]
    assert [technician.id for technician in controller.available] == ["u8"]
    assert session.last.params == {"page_size": 100}


def test_technician_search_is_sent(controller, session):
    session.add("GET", TECHNICIANS_PATH, {"count": 1, "results": [RIA]})

    controller.load_technicians("  ria ")

    assert session.last.params == {"search": "ria", "page_size": 100}


def test_add_members_requires_a_selection(controller, session, notifier):
    assert controller.add_members([]) is False

    assert session.calls == []
    assert notifier.last.message == "Please select at least one technician"


def test_add_members_reloads_both_lists(controller, session, notifier):
    session.add("GET", TEAM_PATH, _team(SAM))
    session.add("GET", TEAM_PATH, _team(SAM, RIA))
    session.add("GET", TECHNICIANS_PATH, {"count": 2, "results": [SAM, RIA]})
    session.add("POST", "/tasks/teams/tm1/members/", _team(SAM, RIA))
    controller.load()

    assert controller.add_members(["u8"]) is True

    assert session.calls_to("POST", "/tasks/teams/tm1/members/")[0].json == {"member_ids": ["u8"]}
    assert notifier.last.level == SUCCESS
    assert notifier.last.message == "Added 1 member(s) to team"
    assert controller.available == []


def test_remove_member_names_the_member(controller, session, notifier):
    session.add("GET", TEAM_PATH, _team(SAM, RIA))
    session.add("GET", TEAM_PATH, _team(RIA))
    session.add("GET", TECHNICIANS_PATH, {"count": 2, "results": [SAM, RIA]})
    session.add("DELETE", "/tasks/teams/tm1/members/u7/", None, status=204)
    controller.load()

    assert controller.remove_member("u7") is True

    assert notifier.last.message == "Removed Sam Tech from team"
    assert [technician.id for technician in controller.available] == ["u7"]


def test_failed_removal_keeps_members(controller, session, notifier):
    session.add("GET", TEAM_PATH, _team(SAM))
    session.add("GET", TECHNICIANS_PATH, {"count": 1, "results": [SAM]})
    session.add("DELETE", "/tasks/teams/tm1/members/u7/", {"message": "Team needs a member"}, status=400)
    controller.load()

    assert controller.remove_member("u7") is False

    assert notifier.last.level == ERROR
    assert notifier.last.message == "Team needs a member"
    assert [member.id for member in controller.members] == ["u7"]


def test_load_failure_reports_team_error(controller, session, notifier):
    session.add("GET", TEAM_PATH, {"message": "Not found"}, status=404)
    session.add("GET", TECHNICIANS_PATH, {"count": 0, "results": []})

    assert controller.load() is None

    assert notifier.messages(ERROR) == ["Failed to load team details"]
