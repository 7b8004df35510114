from __future__ import annotations

import pytest

from fieldpilot_desktop.controllers.listing import EntityListController
from fieldpilot_desktop.controllers.notifications import ERROR, SUCCESS
from fieldpilot_desktop.schemas import CreateFacilityRequest, FacilityRequest


def _facility(identifier: str, name: str) -> dict:
    return {"id": identifier, "name": name, "facility_type": "office"}


def _page(count: int, *items: dict) -> dict:
    return {"count": count, "next": None, "previous": None, "results": list(items)}


@pytest.fixture()
def controller(api, notifier, timers):
    return EntityListController(api.facilities, notifier, entity_name="Facility", page_size=10,
                                timer_factory=timers)


def test_load_fills_items_and_count(controller, session):
    session.add("GET", "/facilities/", _page(23, _facility("f1", "North"), _facility("f2", "South")))

    controller.load()

    assert [item.name for item in controller.items] == ["North", "South"]
    assert controller.count == 23
    assert controller.pagination.total_pages == 3
    assert session.last.params == {"page": 1, "page_size": 10}
    assert controller.loading is False


def test_load_failure_clears_list_and_shows_error(controller, session, notifier):
    session.add("GET", "/facilities/", {"message": "Service unavailable"}, status=503)

    controller.load()

    assert controller.items == []
    assert controller.count == 0
    assert notifier.last.level == ERROR
    assert notifier.last.message == "Service unavailable"


def test_search_is_debounced_and_resets_page(controller, session, timers):
    session.add("GET", "/facilities/", _page(30, _facility("f1", "North")))
    controller.load()
    controller.go_to_page(3)
    requests_before = len(session.calls)

    controller.set_search("no")
    controller.set_search("nor")
    controller.set_search("north ")

    assert len(session.calls) == requests_before
    timers.fire_pending()

    assert len(session.calls) == requests_before + 1
    assert session.last.params == {"page": 1, "page_size": 10, "search": "north"}


def test_blank_search_is_not_sent(controller, session, timers):
    session.add("GET", "/facilities/", _page(0))

    controller.set_search("   ")
    timers.fire_pending()

    assert "search" not in session.last.params


def test_filter_change_reloads_from_first_page(controller, session):
    session.add("GET", "/facilities/", _page(30, _facility("f1", "North")))
    controller.load()
    controller.go_to_page(2)

    controller.set_filter("status", "operational")
    assert session.last.params == {"status": "operational", "page": 1, "page_size": 10}

    controller.set_filter("status", "")
    assert session.last.params == {"page": 1, "page_size": 10}


def test_going_to_current_page_does_not_refetch(controller, session):
    session.add("GET", "/facilities/", _page(30, _facility("f1", "North")))
    controller.load()

    controller.go_to_page(1)
    controller.go_to_page(0)

    assert len(session.calls) == 1


def test_page_size_change_reloads_first_page(controller, session):
    session.add("GET", "/facilities/", _page(30, _facility("f1", "North")))
    controller.load()
    controller.go_to_page(3)

    controller.set_page_size(50)

    assert session.last.params == {"page": 1, "page_size": 50}


def test_create_prepends_and_counts(controller, session, notifier):
    session.add("GET", "/facilities/", _page(1, _facility("f1", "North")))
    session.add("POST", "/facilities/", {"success": True, "data": _facility("f2", "South")}, status=201)
    controller.load()

    created = controller.create(CreateFacilityRequest(name="South", facility_type="office"))

    assert created.id == "f2"
    assert [item.id for item in controller.items] == ["f2", "f1"]
    assert controller.count == 2
    assert notifier.last.message == "Facility created successfully"
    assert session.last.json == {"name": "South", "facility_type": "office"}


def test_update_replaces_item_in_place(controller, session, notifier):
    session.add("GET", "/facilities/", _page(2, _facility("f1", "North"), _facility("f2", "South")))
    session.add("PATCH", "/facilities/f2/", {"data": _facility("f2", "South Yard")})
    controller.load()

    controller.update("f2", FacilityRequest(name="South Yard"))

    assert [item.name for item in controller.items] == ["North", "South Yard"]
    assert notifier.last.level == SUCCESS


def test_delete_removes_item_and_decrements_count(controller, session, notifier):
    session.add("GET", "/facilities/", _page(2, _facility("f1", "North"), _facility("f2", "South")))
    session.add("DELETE", "/facilities/f1/", None, status=204)
    controller.load()

    assert controller.delete("f1") is True

    assert [item.id for item in controller.items] == ["f2"]
    assert controller.count == 1
    assert notifier.last.message == "Facility deleted successfully"


def test_deleting_last_row_of_last_page_reloads_previous_page(controller, session, notifier):
    first_page = [_facility(f"f{index}", f"Site {index}") for index in range(1, 11)]
    session.add("GET", "/facilities/", _page(11, *first_page))
    session.add("GET", "/facilities/", _page(11, _facility("f11", "Site 11")))
    session.add("GET", "/facilities/", _page(10, *first_page))
    session.add("DELETE", "/facilities/f11/", None, status=204)
    controller.load()
    controller.go_to_page(2)

    assert controller.delete("f11") is True

    assert controller.pagination.current_page == 1
    assert len(controller.items) == 10
    assert controller.count == 10
    assert session.last.params == {"page": 1, "page_size": 10}
    assert notifier.last.message == "Facility deleted successfully"


def test_failed_delete_keeps_item(controller, session, notifier):
    session.add("GET", "/facilities/", _page(1, _facility("f1", "North")))
    session.add("DELETE", "/facilities/f1/", {"message": "Facility has buildings"}, status=400)
    controller.load()

    assert controller.delete("f1") is False

    assert controller.count == 1
    assert notifier.last.message == "Facility has buildings"


def test_close_cancels_pending_search(controller, timers):
    controller.set_search("north")

    controller.close()

    assert timers.active == []
