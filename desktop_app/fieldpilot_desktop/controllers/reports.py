"""Work-hours report of one technician over a date range."""

from __future__ import annotations

import datetime as dt
import logging
from typing import Callable, List, Optional

from ..api.tasks import TasksApi
from ..api.teams import TeamsApi
from ..errors import ApiError
from ..models import TeamMember, WorkHoursReport
from .notifications import Notifier

logger = logging.getLogger(__name__)

DEFAULT_RANGE_DAYS = 30
TECHNICIAN_PAGE_SIZE = 100


class WorkHoursReportController:
    """Technician picker, date range and the fetched report.

    The range defaults to the last 30 days; either end may be cleared to
    leave it open.
    """

    def __init__(self, tasks_api: TasksApi, teams_api: TeamsApi, notifier: Notifier,
                 on_change: Optional[Callable[[], None]] = None, *, today: Optional[dt.date] = None) -> None:
        self.tasks_api = tasks_api
        self.teams_api = teams_api
        self.notifier = notifier
        self.on_change = on_change
        today = today or dt.date.today()
        self.start_date: Optional[dt.date] = today - dt.timedelta(days=DEFAULT_RANGE_DAYS)
        self.end_date: Optional[dt.date] = today
        self.technician_id: Optional[str] = None
        self.technicians: List[TeamMember] = []
        self.report: Optional[WorkHoursReport] = None
        self.loading = False

    def load_technicians(self) -> List[TeamMember]:
        try:
            page = self.teams_api.list_technicians(page_size=TECHNICIAN_PAGE_SIZE)
        except ApiError as exc:
            logger.error("Failed to load technicians: %s", exc)
            self.notifier.error("Failed to load technicians")
            self.technicians = []
        else:
            self.technicians = list(page.items)
        self._changed()
        return self.technicians

    def set_range(self, start_date: Optional[dt.date], end_date: Optional[dt.date]) -> None:
        self.start_date = start_date
        self.end_date = end_date

    def generate(self) -> Optional[WorkHoursReport]:
        """Fetch the report for the selected technician and range."""

        if not self.technician_id:
            self.notifier.error("Please select a technician")
            return None
        if self.start_date and self.end_date and self.start_date > self.end_date:
            self.notifier.error("Start date must be on or before the end date")
            return None
        self.loading = True
        try:
            self.report = self.tasks_api.work_hours_report(self.technician_id, self.start_date, self.end_date)
        except ApiError as exc:
            logger.error("Failed to load work-hours report: %s", exc)
            self.notifier.error(exc.message or "Failed to load report")
            return None
        finally:
            self.loading = False
            self._changed()
        return self.report

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change()


__all__ = ["DEFAULT_RANGE_DAYS", "WorkHoursReportController"]
