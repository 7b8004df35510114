"""Task detail screen: comments, attachments, materials, status and assignment."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from pydantic import ValidationError

from ..api.tasks import TASK_STATUSES, WORK_STATUSES, TasksApi
from ..errors import ApiError, field_errors
from ..models import MaterialLog, Task, TaskAttachment, TaskComment, TaskHistoryEntry
from ..schemas import LogMaterialRequest
from .notifications import Notifier

logger = logging.getLogger(__name__)


def _first_message(exc: ValidationError) -> str:
    return next(iter(field_errors(exc).values()), "Invalid input")


class TaskDetailController:
    """Everything the task detail screen shows about one task.

    The task itself plus its comments, attachments, material logs and
    history. Each section is fetched separately so one failing endpoint
    leaves the others usable. Mutations update the cached lists in place
    and show a toast; status and assignment changes re-fetch the history.
    """

    def __init__(self, tasks_api: TasksApi, task_id: str, notifier: Notifier,
                 on_change: Optional[Callable[[], None]] = None) -> None:
        self.tasks_api = tasks_api
        self.task_id = task_id
        self.notifier = notifier
        self.on_change = on_change
        self.task: Optional[Task] = None
        self.comments: List[TaskComment] = []
        self.attachments: List[TaskAttachment] = []
        self.materials: List[MaterialLog] = []
        self.history: List[TaskHistoryEntry] = []
        self.material_filter: Optional[str] = None

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    def load(self) -> Optional[Task]:
        """Fetch the task, then every section; ``None`` when the task is unavailable."""

        try:
            self.task = self.tasks_api.get(self.task_id)
        except ApiError as exc:
            logger.error("Failed to load task %s: %s", self.task_id, exc)
            self.notifier.error(exc.message or "Failed to load task")
            self.task = None
            self._changed()
            return None
        self.load_comments()
        self.load_attachments()
        self.load_materials()
        self.load_history()
        return self.task

    def load_comments(self) -> None:
        self.comments = self._fetch(self.tasks_api.list_comments, "comments")
        self._changed()

    def load_attachments(self) -> None:
        self.attachments = self._fetch(self.tasks_api.list_attachments, "attachments")
        self._changed()

    def load_materials(self, log_type: Optional[str] = None) -> None:
        """Re-fetch material logs, optionally only the ``needed`` or ``received`` ones."""

        self.material_filter = log_type
        self.materials = self._fetch(
            lambda task_id: self.tasks_api.list_materials(task_id, log_type=log_type), "materials")
        self._changed()

    def load_history(self) -> None:
        self.history = self._fetch(self.tasks_api.history, "history")
        self._changed()

    def _fetch(self, call: Callable[[str], list], label: str) -> list:
        try:
            return call(self.task_id)
        except ApiError as exc:
            logger.error("Failed to load %s for task %s: %s", label, self.task_id, exc)
            return []

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------
    def add_comment(self, text: str) -> Optional[TaskComment]:
        """Append a comment; blank text is rejected before any request."""

        try:
            comment = self.tasks_api.add_comment(self.task_id, text)
        except ValidationError as exc:
            self.notifier.error(_first_message(exc))
            return None
        except ApiError as exc:
            self.notifier.error(exc.message or "Failed to add comment")
            return None
        self.comments.append(comment)
        self._adjust_count("comments_count", 1)
        self.notifier.success("Comment added")
        self._changed()
        return comment

    def edit_comment(self, comment_id: str, text: str) -> Optional[TaskComment]:
        try:
            comment = self.tasks_api.update_comment(comment_id, text)
        except ValidationError as exc:
            self.notifier.error(_first_message(exc))
            return None
        except ApiError as exc:
            self.notifier.error(exc.message or "Failed to update comment")
            return None
        self.comments = [comment if item.id == comment_id else item for item in self.comments]
        self.notifier.success("Comment updated")
        self._changed()
        return comment

    def delete_comment(self, comment_id: str) -> bool:
        try:
            self.tasks_api.delete_comment(comment_id)
        except ApiError as exc:
            self.notifier.error(exc.message or "Failed to delete comment")
            return False
        self.comments = [item for item in self.comments if item.id != comment_id]
        self._adjust_count("comments_count", -1)
        self.notifier.success("Comment deleted")
        self._changed()
        return True

    # ------------------------------------------------------------------
    # Attachments
    # ------------------------------------------------------------------
    def upload_attachment(self, file_path: Path) -> Optional[TaskAttachment]:
        """Upload a local file as an attachment of the task."""

        try:
            attachment = self.tasks_api.upload_attachment(self.task_id, Path(file_path))
        except OSError as exc:
            self.notifier.error(f"Could not read {Path(file_path).name}: {exc.strerror or exc}")
            return None
        except ApiError as exc:
            self.notifier.error(exc.message or "Failed to upload file")
            return None
        self.attachments.insert(0, attachment)
        self._adjust_count("attachments_count", 1)
        self.notifier.success("File uploaded successfully")
        self._changed()
        return attachment

    def delete_attachment(self, attachment_id: str) -> bool:
        """Remove an attachment; the task's attachment count never drops below zero."""

        try:
            self.tasks_api.delete_attachment(attachment_id)
        except ApiError as exc:
            self.notifier.error(exc.message or "Failed to delete attachment")
            return False
        self.attachments = [item for item in self.attachments if item.id != attachment_id]
        self._adjust_count("attachments_count", -1)
        self.notifier.success("Attachment deleted")
        self._changed()
        return True

    def download_attachment(self, attachment_id: str, destination: Path) -> Optional[Path]:
        """Save the attachment under ``destination`` and return the written path."""

        try:
            path = self.tasks_api.download_attachment(attachment_id, destination)
        except OSError as exc:
            self.notifier.error(f"Could not save file: {exc.strerror or exc}")
            return None
        except ApiError as exc:
            self.notifier.error(exc.message or "Failed to download attachment")
            return None
        self.notifier.success(f"Saved {path.name}")
        return path

    # ------------------------------------------------------------------
    # Materials
    # ------------------------------------------------------------------
    def log_material(self, log_type: str, material_name: str, quantity: float, unit: str,
                     notes: Optional[str] = None) -> Optional[MaterialLog]:
        """Record a material as needed or received."""

        try:
            request = LogMaterialRequest(material_name=material_name, quantity=quantity, unit=unit,
                                         notes=notes or None)
            material = self.tasks_api.log_material(self.task_id, log_type, request)
        except ValidationError as exc:
            self.notifier.error(_first_message(exc))
            return None
        except ApiError as exc:
            self.notifier.error(exc.message or "Failed to log material")
            return None
        if self.material_filter in (None, log_type):
            self.materials.insert(0, material)
        self.notifier.success("Material logged successfully")
        self._changed()
        return material

    # ------------------------------------------------------------------
    # Status and assignment
    # ------------------------------------------------------------------
    def set_status(self, status: str) -> bool:
        if status not in TASK_STATUSES:
            raise ValueError(f"Unknown task status: {status}")
        return self._replace_task(lambda: self.tasks_api.update_status(self.task_id, status),
                                  "Task status updated", "Failed to update status")

    def set_work_status(self, work_status: str) -> bool:
        if work_status not in WORK_STATUSES:
            raise ValueError(f"Unknown work status: {work_status}")
        return self._replace_task(lambda: self.tasks_api.update_work_status(self.task_id, work_status),
                                  "Work status updated", "Failed to update work status")

    def assign(self, assignee_ids: Iterable[str] = (), team_ids: Iterable[str] = ()) -> bool:
        """Assign technicians and/or teams; at least one of them is required."""

        assignee_ids, team_ids = list(assignee_ids), list(team_ids)
        try:
            return self._replace_task(lambda: self.tasks_api.assign(self.task_id, assignee_ids, team_ids),
                                      "Task assigned successfully", "Failed to assign task")
        except ValidationError as exc:
            self.notifier.error(_first_message(exc))
            return False

    def _replace_task(self, call: Callable[[], Task], success: str, failure: str) -> bool:
        try:
            task = call()
        except ApiError as exc:
            self.notifier.error(exc.message or failure)
            return False
        # Endpoints answering with a bare message leave the cached task as is.
        if task.id:
            self.task = task
        self.notifier.success(success)
        self.load_history()
        return True

    # ------------------------------------------------------------------
    def _adjust_count(self, attribute: str, delta: int) -> None:
        if self.task is None:
            return
        setattr(self.task, attribute, max(0, getattr(self.task, attribute) + delta))

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change()


__all__ = ["TaskDetailController"]
