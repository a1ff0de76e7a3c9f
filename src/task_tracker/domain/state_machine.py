"""Legal task statuses, transitions and the action offered for each status."""

from __future__ import annotations

from src.task_tracker.domain.models.task_action import TaskAction
from src.task_tracker.domain.models.task_status import TaskStatus

# status -> (action offered, status the ledger moves the task to)
_TRANSITIONS: dict[TaskStatus, tuple[TaskAction, TaskStatus | None]] = {
    TaskStatus.CREATED: (TaskAction.START, TaskStatus.IN_PROGRESS),
    TaskStatus.IN_PROGRESS: (TaskAction.REVIEW, TaskStatus.IN_REVIEW),
    TaskStatus.IN_REVIEW: (TaskAction.COMPLETE, TaskStatus.COMPLETED),
    TaskStatus.COMPLETED: (TaskAction.NONE, None),
    TaskStatus.CANCELED: (TaskAction.NONE, None),
}


def resolve_action(status: TaskStatus) -> TaskAction:
    """Return the action offered for ``status``; terminal statuses give ``TaskAction.NONE``."""
    action, _ = _TRANSITIONS[TaskStatus(status)]
    return action


def next_status(status: TaskStatus) -> TaskStatus | None:
    _, target = _TRANSITIONS[TaskStatus(status)]
    return target


def can_cancel(status: TaskStatus) -> bool:
    return not TaskStatus(status).is_terminal


def is_legal_transition(current: TaskStatus, target: TaskStatus) -> bool:
    if target is TaskStatus.CANCELED:
        return can_cancel(current)
    return next_status(current) is target


def action_target(current: TaskStatus, action: TaskAction) -> TaskStatus:
    """Status the ledger should move a task to when ``action`` is applied.

    Raises ``ValueError`` if ``action`` is not legal from ``current``.
    """
    if action is TaskAction.CANCEL:
        if can_cancel(current):
            return TaskStatus.CANCELED
    elif action is not TaskAction.NONE and resolve_action(current) is action:
        target = next_status(current)
        if target is not None:
            return target
    raise ValueError(f"Action {action.value!r} is not legal from status {current.label!r}")
