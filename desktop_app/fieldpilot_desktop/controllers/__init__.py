"""UI-independent screen logic bound by the Qt widgets."""

from .debounce import Debouncer
from .facility_contents import FacilityContentsController
from .listing import EntityListController
from .notifications import Notification, Notifier
from .pagination import Pagination
from .reports import WorkHoursReportController
from .task_detail import TaskDetailController
from .team_members import TeamMembersController
from .time_tracking import TimeTrackingController

__all__ = [
    "Debouncer",
    "EntityListController",
    "FacilityContentsController",
    "Notification",
    "Notifier",
    "Pagination",
    "TaskDetailController",
    "TeamMembersController",
    "TimeTrackingController",
    "WorkHoursReportController",
]
