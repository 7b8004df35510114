"""Technician time tracking for one task: travel, arrival, lunch, departure."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, FrozenSet, Iterable, List, Optional

from ..api.tasks import EQUIPMENT_STATUSES, TasksApi
from ..errors import ApiError
from ..models import TimeLog
from .notifications import Notifier

logger = logging.getLogger(__name__)

NOT_STARTED = "not_started"
TRAVELING = "traveling"
ON_SITE = "on_site"
ON_LUNCH = "on_lunch"

TRAVEL = "travel"
ARRIVAL = "arrival"
LUNCH_START = "lunch_start"
LUNCH_END = "lunch_end"
DEPARTURE = "departure"

# Checked in order; the first flag set on the active log decides the status.
STATUS_PRIORITY = (
    (ON_LUNCH, "is_on_lunch"),
    (ON_SITE, "is_on_site"),
    (TRAVELING, "is_traveling"),
)

ALLOWED_ACTIONS: Dict[str, FrozenSet[str]] = {
    NOT_STARTED: frozenset({TRAVEL}),
    TRAVELING: frozenset({ARRIVAL}),
    ON_SITE: frozenset({LUNCH_START, DEPARTURE}),
    ON_LUNCH: frozenset({LUNCH_END}),
}

STATUS_LABELS = {
    NOT_STARTED: "Not Started",
    TRAVELING: "Traveling",
    ON_SITE: "On Site",
    ON_LUNCH: "On Lunch",
}


@dataclass(slots=True, frozen=True)
class _Transition:
    success: str
    failure: str


TRANSITIONS = {
    TRAVEL: _Transition("Travel started", "Failed to log travel"),
    ARRIVAL: _Transition("Arrival logged", "Failed to log arrival"),
    LUNCH_START: _Transition("Lunch break started", "Failed to start lunch"),
    LUNCH_END: _Transition("Lunch break ended", "Failed to end lunch"),
    DEPARTURE: _Transition("Departure logged", "Failed to log departure"),
}


@dataclass(slots=True, frozen=True)
class HoursTotals:
    """Work hours of a set of logs, split into normal time and overtime."""

    total_work_hours: float = 0.0
    normal_hours: float = 0.0
    overtime_hours: float = 0.0


def find_active_log(logs: Iterable[TimeLog]) -> Optional[TimeLog]:
    return next((log for log in logs if log.is_active), None)


def derive_status(active_log: Optional[TimeLog]) -> str:
    """Status shown for the active log; no active log means not started."""

    if active_log is None:
        return NOT_STARTED
    for status, flag in STATUS_PRIORITY:
        if getattr(active_log, flag):
            return status
    return NOT_STARTED


def allowed_actions(status: str) -> FrozenSet[str]:
    return ALLOWED_ACTIONS.get(status, frozenset())


def sum_hours(logs: Iterable[TimeLog]) -> HoursTotals:
    """Totals over ``logs``."""

    logs = list(logs)
    return HoursTotals(
        total_work_hours=sum(log.total_work_hours for log in logs),
        normal_hours=sum(log.normal_hours for log in logs),
        overtime_hours=sum(log.overtime_hours for log in logs),
    )


def format_hours(hours: float) -> str:
    return f"{hours:.2f}h"


class TimeTrackingController:
    """Drives the time-tracking panel of a task.

    The status is never stored; it is recomputed from the fetched logs. Every
    transition re-fetches the logs afterwards, whether it succeeded or not.
    """

    def __init__(self, tasks_api: TasksApi, task_id: str, notifier: Notifier,
                 on_change: Optional[Callable[[], None]] = None) -> None:
        self.tasks_api = tasks_api
        self.task_id = task_id
        self.notifier = notifier
        self.on_change = on_change
        self.logs: List[TimeLog] = []
        self.loading = False
        self.busy_action: Optional[str] = None

    # ------------------------------------------------------------------
    @property
    def active_log(self) -> Optional[TimeLog]:
        return find_active_log(self.logs)

    @property
    def status(self) -> str:
        return derive_status(self.active_log)

    @property
    def status_label(self) -> str:
        return STATUS_LABELS[self.status]

    @property
    def allowed_actions(self) -> FrozenSet[str]:
        return allowed_actions(self.status)

    def can(self, action: str) -> bool:
        return self.busy_action is None and action in self.allowed_actions

    @property
    def totals(self) -> HoursTotals:
        return sum_hours(self.logs)

    # ------------------------------------------------------------------
    def load(self) -> List[TimeLog]:
        """Re-fetch the logs. On failure the previously fetched logs are kept."""

        self.loading = True
        try:
            self.logs = self.tasks_api.list_time_logs(self.task_id)
        except ApiError as exc:
            logger.error("Failed to load time logs for task %s: %s", self.task_id, exc)
        finally:
            self.loading = False
        self._changed()
        return self.logs

    # ------------------------------------------------------------------
    def start_travel(self) -> bool:
        return self._run(TRAVEL, lambda: self.tasks_api.log_travel(self.task_id))

    def log_arrival(self) -> bool:
        return self._run(ARRIVAL, lambda: self.tasks_api.log_arrival(self.task_id))

    def start_lunch(self) -> bool:
        return self._run(LUNCH_START, lambda: self.tasks_api.log_lunch_start(self.task_id))

    def end_lunch(self) -> bool:
        return self._run(LUNCH_END, lambda: self.tasks_api.log_lunch_end(self.task_id))

    def log_departure(self, equipment_status: str) -> bool:
        """Log departure together with the state the equipment was left in."""

        if equipment_status not in EQUIPMENT_STATUSES:
            raise ValueError(f"Equipment status must be one of {', '.join(EQUIPMENT_STATUSES)}")
        return self._run(DEPARTURE, lambda: self.tasks_api.log_departure(self.task_id, equipment_status))

    def _run(self, action: str, call: Callable[[], None]) -> bool:
        if not self.can(action):
            logger.debug("Ignoring %s while %s", action, self.status)
            return False

        transition = TRANSITIONS[action]
        self.busy_action = action
        self._changed()
        try:
            call()
        except ApiError as exc:
            self.notifier.error(exc.message or transition.failure)
            succeeded = False
        else:
            self.notifier.success(transition.success)
            succeeded = True
        finally:
            self.busy_action = None
        self.load()
        return succeeded

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change()


__all__ = [
    "ALLOWED_ACTIONS",
    "ARRIVAL",
    "DEPARTURE",
    "HoursTotals",
    "LUNCH_END",
    "LUNCH_START",
    "NOT_STARTED",
    "ON_LUNCH",
    "ON_SITE",
    "STATUS_LABELS",
    "STATUS_PRIORITY",
    "TRAVEL",
    "TRAVELING",
    "TimeTrackingController",
    "allowed_actions",
    "derive_status",
    "find_active_log",
    "format_hours",
    "sum_hours",
]
