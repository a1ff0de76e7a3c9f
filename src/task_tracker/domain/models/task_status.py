from __future__ import annotations

from enum import IntEnum

from src.task_tracker.domain.exceptions import DecodeError


class TaskStatus(IntEnum):
    """Task lifecycle states, numbered as the ledger's status enum."""

    CREATED = 0
    IN_PROGRESS = 1
    IN_REVIEW = 2
    COMPLETED = 3
    CANCELED = 4

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def is_terminal(self) -> bool:
        return self in (TaskStatus.COMPLETED, TaskStatus.CANCELED)

    @classmethod
    def decode(cls, code: int) -> TaskStatus:
        """Map a raw ledger status code to a status, rejecting unknown codes."""
        if isinstance(code, bool):
            raise DecodeError(code)
        try:
            return cls(int(code))
        except (TypeError, ValueError) as exc:
            raise DecodeError(code) from exc


_LABELS: dict[TaskStatus, str] = {
    TaskStatus.CREATED: "Created",
    TaskStatus.IN_PROGRESS: "In Progress",
    TaskStatus.IN_REVIEW: "In Review",
    TaskStatus.COMPLETED: "Completed",
    TaskStatus.CANCELED: "Canceled",
}
