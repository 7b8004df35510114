"""Adding technicians to a team and removing them again."""

from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional

from ..api.teams import TeamsApi
from ..errors import ApiError
from ..models import Team, TeamMember
from .notifications import Notifier

logger = logging.getLogger(__name__)

TECHNICIAN_PAGE_SIZE = 100


class TeamMembersController:
    """Members of one team plus the technicians that could still join it.

    Both lists are re-fetched after every change so the available list never
    offers someone who is already a member.
    """

    def __init__(self, teams_api: TeamsApi, team_id: str, notifier: Notifier,
                 on_change: Optional[Callable[[], None]] = None) -> None:
        self.teams_api = teams_api
        self.team_id = team_id
        self.notifier = notifier
        self.on_change = on_change
        self.team: Optional[Team] = None
        self.technicians: List[TeamMember] = []
        self.search = ""

    @property
    def members(self) -> List[TeamMember]:
        return self.team.members if self.team else []

    @property
    def available(self) -> List[TeamMember]:
        """Technicians that are not yet members of the team."""

        member_ids = {member.id for member in self.members}
        return [technician for technician in self.technicians if technician.id not in member_ids]

    # ------------------------------------------------------------------
    def load(self) -> Optional[Team]:
        try:
            self.team = self.teams_api.get(self.team_id)
        except ApiError as exc:
            logger.error("Failed to load team %s: %s", self.team_id, exc)
            self.notifier.error("Failed to load team details")
        self.load_technicians()
        return self.team

    def load_technicians(self, search: Optional[str] = None) -> List[TeamMember]:
        if search is not None:
            self.search = search.strip()
        try:
            page = self.teams_api.list_technicians(search=self.search or None, page_size=TECHNICIAN_PAGE_SIZE)
        except ApiError as exc:
            logger.error("Failed to load technicians: %s", exc)
            self.notifier.error("Failed to load technicians")
            self.technicians = []
        else:
            self.technicians = list(page.items)
        self._changed()
        return self.technicians

    # ------------------------------------------------------------------
    def add_members(self, member_ids: Iterable[str]) -> bool:
        """Add the selected technicians; at least one id is required."""

        member_ids = [member_id for member_id in member_ids if member_id]
        if not member_ids:
            self.notifier.error("Please select at least one technician")
            return False
        try:
            self.teams_api.add_members(self.team_id, member_ids)
        except ApiError as exc:
            self.notifier.error(exc.message or "Failed to add members")
            return False
        self.notifier.success(f"Added {len(member_ids)} member(s) to team")
        self.load()
        return True

    def remove_member(self, member_id: str) -> bool:
        member = next((item for item in self.members if item.id == member_id), None)
        name = (member.full_name or member.email) if member else "member"
        try:
            self.teams_api.remove_member(self.team_id, member_id)
        except ApiError as exc:
            self.notifier.error(exc.message or "Failed to remove member")
            return False
        self.notifier.success(f"Removed {name} from team")
        self.load()
        return True

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change()


__all__ = ["TeamMembersController"]
