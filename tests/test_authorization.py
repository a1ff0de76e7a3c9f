import pytest

from src.task_tracker.application.authorization import AuthorizationResolver, permitted_actions
from src.task_tracker.application.normalizer import TaskRecordNormalizer
from src.task_tracker.domain.exceptions import LedgerTransportError
from src.task_tracker.domain.models import Capabilities, TaskAction, TaskStatus
from tests.conftest import ALICE, StubLedgerGateway, make_record


@pytest.mark.asyncio
async def test_explicit_negative_answers_give_no_capability(gateway: StubLedgerGateway) -> None:
    capabilities = await AuthorizationResolver(gateway).resolve_capabilities(ALICE)

    assert capabilities == Capabilities(is_member=False, is_leader=False)


@pytest.mark.asyncio
async def test_roles_are_resolved_independently(gateway: StubLedgerGateway) -> None:
    gateway.leader = True

    capabilities = await AuthorizationResolver(gateway).resolve_capabilities(ALICE)

    assert capabilities == Capabilities(is_member=False, is_leader=True)


@pytest.mark.asyncio
async def test_leader_check_runs_before_member_check(gateway: StubLedgerGateway) -> None:
    await AuthorizationResolver(gateway).resolve_capabilities(ALICE)

    assert gateway.calls == [("has_leader_role", ALICE), ("has_member_role", ALICE)]


@pytest.mark.asyncio
@pytest.mark.parametrize("operation", ["has_leader_role", "has_member_role"])
async def test_transport_failure_is_not_a_negative_answer(
    gateway: StubLedgerGateway, operation: str
) -> None:
    gateway.errors[operation] = LedgerTransportError(operation, "connection refused")

    with pytest.raises(LedgerTransportError):
        await AuthorizationResolver(gateway).resolve_capabilities(ALICE)


@pytest.mark.parametrize(
    ("status", "capabilities", "expected"),
    [
        (TaskStatus.CREATED, Capabilities(), []),
        (TaskStatus.CREATED, Capabilities(is_member=True), [TaskAction.START]),
        (
            TaskStatus.IN_PROGRESS,
            Capabilities(is_leader=True),
            [TaskAction.REVIEW, TaskAction.CANCEL],
        ),
        (
            TaskStatus.IN_REVIEW,
            Capabilities(is_member=True, is_leader=True),
            [TaskAction.COMPLETE, TaskAction.CANCEL],
        ),
        (TaskStatus.COMPLETED, Capabilities(is_member=True, is_leader=True), []),
        (TaskStatus.CANCELED, Capabilities(is_leader=True), []),
    ],
)
def test_permitted_actions(
    normalizer: TaskRecordNormalizer,
    status: TaskStatus,
    capabilities: Capabilities,
    expected: list[TaskAction],
) -> None:
    view = normalizer.normalize(make_record(status=int(status)), 1)

    assert permitted_actions(view, capabilities) == expected
