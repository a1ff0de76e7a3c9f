import pytest

from src.task_tracker.domain.models import TaskAction, TaskStatus
from src.task_tracker.domain.state_machine import (
    action_target,
    can_cancel,
    is_legal_transition,
    next_status,
    resolve_action,
)


@pytest.mark.parametrize(
    ("status", "label", "ledger_call", "target"),
    [
        (TaskStatus.CREATED, "Start Task", "start_task", TaskStatus.IN_PROGRESS),
        (TaskStatus.IN_PROGRESS, "Review Task", "review_task", TaskStatus.IN_REVIEW),
        (TaskStatus.IN_REVIEW, "Complete Task", "complete_task", TaskStatus.COMPLETED),
    ],
)
def test_linear_chain_actions(
    status: TaskStatus, label: str, ledger_call: str, target: TaskStatus
) -> None:
    action = resolve_action(status)

    assert action.label == label
    assert action.ledger_call == ledger_call
    assert next_status(status) is target


@pytest.mark.parametrize("status", [TaskStatus.COMPLETED, TaskStatus.CANCELED])
def test_terminal_statuses_offer_no_action(status: TaskStatus) -> None:
    action = resolve_action(status)

    assert action is TaskAction.NONE
    assert action.label is None
    assert action.ledger_call is None
    assert next_status(status) is None
    assert not can_cancel(status)


def test_every_status_resolves_to_an_action() -> None:
    for status in TaskStatus:
        assert isinstance(resolve_action(status), TaskAction)


@pytest.mark.parametrize(
    "status", [TaskStatus.CREATED, TaskStatus.IN_PROGRESS, TaskStatus.IN_REVIEW]
)
def test_cancel_is_available_from_non_terminal_statuses(status: TaskStatus) -> None:
    assert can_cancel(status)
    assert is_legal_transition(status, TaskStatus.CANCELED)
    assert action_target(status, TaskAction.CANCEL) is TaskStatus.CANCELED


def test_illegal_transitions() -> None:
    assert not is_legal_transition(TaskStatus.CREATED, TaskStatus.COMPLETED)
    assert not is_legal_transition(TaskStatus.IN_REVIEW, TaskStatus.IN_PROGRESS)
    assert not is_legal_transition(TaskStatus.COMPLETED, TaskStatus.CANCELED)


def test_action_target_rejects_out_of_order_action() -> None:
    with pytest.raises(ValueError):
        action_target(TaskStatus.CREATED, TaskAction.COMPLETE)
    with pytest.raises(ValueError):
        action_target(TaskStatus.CANCELED, TaskAction.CANCEL)
