"""Technician team endpoints."""

from __future__ import annotations

from typing import Iterable, Optional

from ..models import Page, Team, TeamMember
from .resources import ResourceApi


class TeamsApi(ResourceApi[Team]):
    """Teams, their members and the technician directory."""

    path = "/tasks/teams/"
    factory = staticmethod(Team.from_api)
    filter_keys = ("search", "is_active", "page", "page_size")

    def add_members(self, team_id: str, member_ids: Iterable[str]) -> Team:
        body = self.client.post(f"{self.path}{team_id}/members/", json={"member_ids": list(member_ids)})
        return Team.from_api(self.client.unwrap(body) or {})

    def remove_member(self, team_id: str, member_id: str) -> Team:
        body = self.client.delete(f"{self.path}{team_id}/members/{member_id}/")
        return Team.from_api(self.client.unwrap(body) or {})

    def list_technicians(self, search: Optional[str] = None, page: Optional[int] = None,
                         page_size: Optional[int] = None) -> Page[TeamMember]:
        params = {"search": search, "page": page, "page_size": page_size}
        body = self.client.get(f"{self.path}technicians/", params=params)
        return self.client.unwrap_page(body, TeamMember.from_api)


__all__ = ["TeamsApi"]
