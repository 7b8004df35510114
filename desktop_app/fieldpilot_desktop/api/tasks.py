"""Task endpoints: CRUD, assignments, comments, attachments, time tracking and materials."""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Iterable, Optional

from ..models import (MaterialLog, Task, TaskAttachment, TaskComment,
                      TaskHistoryEntry, TimeLog, WorkHoursReport)
from ..schemas import AssignTaskRequest, CommentRequest, LogMaterialRequest
from .resources import Payload, ResourceApi, to_payload

TASK_STATUSES = ("new", "closed", "reopened", "pending", "rejected")
WORK_STATUSES = ("open", "hold", "in_progress", "done")
EQUIPMENT_STATUSES = ("functional", "shutdown")
MATERIAL_LOG_TYPES = ("needed", "received")


class TasksApi(ResourceApi[Task]):
    """Tasks with their comments, attachments, materials, history and reports."""

    path = "/tasks/"
    factory = staticmethod(Task.from_api)
    filter_keys = ("page", "page_size", "search", "status", "priority", "assignee", "equipment", "section")

    # ------------------------------------------------------------------
    # Assignment and status
    # ------------------------------------------------------------------
    def assign(self, task_id: str, assignee_ids: Iterable[str] = (), team_ids: Iterable[str] = ()) -> Task:
        request = AssignTaskRequest(assignee_ids=list(assignee_ids), team_ids=list(team_ids))
        body = self.client.post(f"{self.path}{task_id}/assign/", json=request.payload())
        return Task.from_api(self.client.unwrap(body) or {})

    def update_status(self, task_id: str, status: str) -> Task:
        if status not in TASK_STATUSES:
            raise ValueError(f"Unknown task status: {status}")
        body = self.client.patch(f"{self.path}{task_id}/status/", json={"status": status})
        return Task.from_api(self.client.unwrap(body) or {})

    def update_work_status(self, task_id: str, work_status: str) -> Task:
        if work_status not in WORK_STATUSES:
            raise ValueError(f"Unknown work status: {work_status}")
        body = self.client.patch(f"{self.path}{task_id}/work-status/", json={"work_status": work_status})
        return Task.from_api(self.client.unwrap(body) or {})

    def history(self, task_id: str, action: Optional[str] = None,
                user: Optional[str] = None) -> list[TaskHistoryEntry]:
        body = self.client.get(f"{self.path}{task_id}/history/", params={"action": action, "user": user})
        return [TaskHistoryEntry.from_api(item) for item in self._items(body)]

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------
    def list_comments(self, task_id: str) -> list[TaskComment]:
        body = self.client.get(f"{self.path}{task_id}/comments/")
        return [TaskComment.from_api(item) for item in self._items(body)]

    def add_comment(self, task_id: str, comment: str) -> TaskComment:
        request = CommentRequest(comment=comment)
        body = self.client.post(f"{self.path}{task_id}/comments/", json=request.payload())
        return TaskComment.from_api(self.client.unwrap(body) or {})

    def update_comment(self, comment_id: str, comment: str) -> TaskComment:
        request = CommentRequest(comment=comment)
        body = self.client.patch(f"{self.path}comments/{comment_id}/", json=request.payload())
        return TaskComment.from_api(self.client.unwrap(body) or {})

    def delete_comment(self, comment_id: str) -> None:
        self.client.delete(f"{self.path}comments/{comment_id}/")

    # ------------------------------------------------------------------
    # Attachments
    # ------------------------------------------------------------------
    def list_attachments(self, task_id: str) -> list[TaskAttachment]:
        body = self.client.get(f"{self.path}{task_id}/attachments/")
        return [TaskAttachment.from_api(item) for item in self._items(body)]

    def upload_attachment(self, task_id: str, file_path: Path) -> TaskAttachment:
        file_path = Path(file_path)
        with file_path.open("rb") as file_handle:
            files = {"file": (file_path.name, file_handle)}
            body = self.client.post(f"{self.path}{task_id}/attachments/", files=files)
        return TaskAttachment.from_api(self.client.unwrap(body) or {})

    def delete_attachment(self, attachment_id: str) -> None:
        self.client.delete(f"{self.path}attachments/{attachment_id}/")

    def download_attachment(self, attachment_id: str, destination: Path) -> Path:
        content = self.client.get(f"{self.path}attachments/{attachment_id}/download/", raw=True)
        destination = Path(destination)
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(content or b"")
        return destination

    # ------------------------------------------------------------------
    # Time tracking
    # ------------------------------------------------------------------
    def log_travel(self, task_id: str) -> None:
        self.client.post(f"{self.path}{task_id}/travel/", json={})

    def log_arrival(self, task_id: str) -> None:
        self.client.post(f"{self.path}{task_id}/arrive/", json={})

    def log_departure(self, task_id: str, equipment_status: str) -> None:
        if equipment_status not in EQUIPMENT_STATUSES:
            raise ValueError(f"Equipment status must be one of {', '.join(EQUIPMENT_STATUSES)}")
        self.client.post(f"{self.path}{task_id}/depart/", json={"equipment_status": equipment_status})

    def log_lunch_start(self, task_id: str) -> None:
        self.client.post(f"{self.path}{task_id}/lunch-start/", json={})

    def log_lunch_end(self, task_id: str) -> None:
        self.client.post(f"{self.path}{task_id}/lunch-end/", json={})

    def list_time_logs(self, task_id: str) -> list[TimeLog]:
        body = self.client.get(f"{self.path}{task_id}/time-logs/")
        return [TimeLog.from_api(item) for item in self._items(body)]

    # ------------------------------------------------------------------
    # Materials
    # ------------------------------------------------------------------
    def log_material(self, task_id: str, log_type: str, data: Payload) -> MaterialLog:
        if log_type not in MATERIAL_LOG_TYPES:
            raise ValueError(f"Unknown material log type: {log_type}")
        request = data if isinstance(data, LogMaterialRequest) else LogMaterialRequest(**to_payload(data))
        payload = request.payload()
        payload["log_type"] = log_type
        body = self.client.post(f"{self.path}{task_id}/materials/{log_type}/", json=payload)
        return MaterialLog.from_api(self.client.unwrap(body) or {})

    def list_materials(self, task_id: str, log_type: Optional[str] = None) -> list[MaterialLog]:
        body = self.client.get(f"{self.path}{task_id}/materials/", params={"log_type": log_type})
        return [MaterialLog.from_api(item) for item in self._items(body)]

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------
    def work_hours_report(self, technician_id: str, start_date: Optional[date] = None,
                          end_date: Optional[date] = None) -> WorkHoursReport:
        params = {
            "technician": technician_id,
            "start_date": start_date.isoformat() if start_date else None,
            "end_date": end_date.isoformat() if end_date else None,
        }
        body = self.client.get(f"{self.path}reports/work-hours/", params=params)
        return WorkHoursReport.from_api(self.client.unwrap(body) or {})

    # ------------------------------------------------------------------
    def _items(self, body) -> list:
        return self.client.unwrap_page(body, lambda item: item).items


__all__ = ["EQUIPMENT_STATUSES", "MATERIAL_LOG_TYPES", "TASK_STATUSES", "TasksApi", "WORK_STATUSES"]
