from enum import Enum


class TaskAction(str, Enum):
    """Ledger calls a caller can trigger on a task."""

    START = "start_task"
    REVIEW = "review_task"
    COMPLETE = "complete_task"
    CANCEL = "cancel_task"
    NONE = "none"

    @property
    def label(self) -> str | None:
        return _LABELS[self]

    @property
    def ledger_call(self) -> str | None:
        """Name of the gateway coroutine that performs the action."""
        return None if self is TaskAction.NONE else self.value


_LABELS: dict[TaskAction, str | None] = {
    TaskAction.START: "Start Task",
    TaskAction.REVIEW: "Review Task",
    TaskAction.COMPLETE: "Complete Task",
    TaskAction.CANCEL: "Cancel Task",
    TaskAction.NONE: None,
}
