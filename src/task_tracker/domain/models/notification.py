from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field


class NotificationSeverity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class Notification(BaseModel):
    """User-facing message emitted by the controller."""

    severity: NotificationSeverity = Field(description="How the sink should present the message.")
    message: str = Field(description="Human-readable message.")
    task_id: int | None = Field(default=None, description="Task the message refers to, if any.")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC), description="When the message was emitted."
    )

    @classmethod
    def info(cls, message: str, task_id: int | None = None) -> "Notification":
        return cls(severity=NotificationSeverity.INFO, message=message, task_id=task_id)

    @classmethod
    def warning(cls, message: str, task_id: int | None = None) -> "Notification":
        return cls(severity=NotificationSeverity.WARNING, message=message, task_id=task_id)

    @classmethod
    def error(cls, message: str, task_id: int | None = None) -> "Notification":
        return cls(severity=NotificationSeverity.ERROR, message=message, task_id=task_id)
