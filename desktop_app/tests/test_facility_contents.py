from __future__ import annotations

from fieldpilot_desktop.controllers.facility_contents import FacilityContentsController
from fieldpilot_desktop.controllers.notifications import ERROR


def test_loads_buildings_and_equipment(api, session, notifier):
    session.add("GET", "/facilities/f1/buildings/", {"data": [{"id": "b1", "name": "Hall A", "facility": "f1"}]})
    session.add("GET", "/facilities/f1/equipment/", {"data": [{"id": "e1", "name": "Chiller", "building": "b1"}]})
    controller = FacilityContentsController(api.facilities, "f1", notifier)

    controller.load()

    assert [building.name for building in controller.buildings] == ["Hall A"]
    assert [item.building_id for item in controller.equipment] == ["b1"]
    assert notifier.history == []


def test_one_failed_list_is_reported_once(api, session, notifier):
    session.add("GET", "/facilities/f1/buildings/", {"data": [{"id": "b1", "name": "Hall A"}]})
    session.add("GET", "/facilities/f1/equipment/", {"message": "Server error"}, status=500)
    controller = FacilityContentsController(api.facilities, "f1", notifier)

    controller.load()

    assert len(controller.buildings) == 1
    assert controller.equipment == []
    assert notifier.messages(ERROR) == ["Failed to load facility details"]
