"""Typed access to the FieldPilot REST services."""

from __future__ import annotations

from .auth import AuthApi
from .billing import BillingApi
from .buildings import BuildingsApi
from .client import ApiClient
from .equipment import EquipmentApi
from .facilities import FacilitiesApi
from .locations import LocationsApi
from .onboarding import OnboardingApi
from .tasks import TasksApi
from .teams import TeamsApi


class FieldPilotApi:
    """One resource object per backend service, sharing a transport."""

    def __init__(self, client: ApiClient) -> None:
        self.client = client
        self.auth = AuthApi(client)
        self.billing = BillingApi(client)
        self.onboarding = OnboardingApi(client)
        self.facilities = FacilitiesApi(client)
        self.buildings = BuildingsApi(client)
        self.equipment = EquipmentApi(client)
        self.locations = LocationsApi(client)
        self.teams = TeamsApi(client)
        self.tasks = TasksApi(client)


__all__ = [
    "ApiClient",
    "AuthApi",
    "BillingApi",
    "BuildingsApi",
    "EquipmentApi",
    "FacilitiesApi",
    "FieldPilotApi",
    "LocationsApi",
    "OnboardingApi",
    "TasksApi",
    "TeamsApi",
]
