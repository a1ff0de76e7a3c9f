from __future__ import annotations

import asyncio
from collections import defaultdict, deque
from datetime import UTC
from typing import Any, Sequence

import pytest

from src.task_tracker.application.controller import TaskStateController
from src.task_tracker.application.normalizer import TaskRecordNormalizer
from src.task_tracker.domain.models import (
    Identity,
    InterfaceId,
    Notification,
    QuorumAmount,
    RoleId,
    TaskRecord,
    TaskStatus,
    TokenAmount,
)
from src.task_tracker.domain.repositories import LedgerGateway, NotificationSink
from src.task_tracker.domain.state_machine import next_status
from src.task_tracker.infrastructure.identity import ShortIdentityFormatter

ALICE = "0x1111111111111111111111111111111111111111"
BOB = "0x2222222222222222222222222222222222222222"


def make_record(**overrides: Any) -> TaskRecord:
    data: dict[str, Any] = {
        "status": int(TaskStatus.CREATED),
        "title": "Write docs",
        "description": "Document the API",
        "reward": 250,
        "end_date": 1700000000,
        "authorized_roles": (1, 2),
        "creator_role": 2,
        "assignee": ALICE,
        "metadata": "ipfs://bafy-task",
    }
    data.update(overrides)
    return TaskRecord(**data)


async def settle() -> None:
    """Let pending tasks run until they block."""
    for _ in range(10):
        await asyncio.sleep(0)


class StubLedgerGateway(LedgerGateway):
    """In-memory ledger replacement with per-call holds and injected failures."""

    def __init__(self) -> None:
        self.records: dict[int, TaskRecord] = {}
        self.batch: list[TaskRecord] = []
        self.leader = False
        self.member = False
        self.calls: list[tuple[Any, ...]] = []
        self.errors: dict[str, Exception] = {}
        self.notifications_seen: list[int] = []
        self.sink: RecordingNotificationSink | None = None
        self._holds: dict[str, deque[asyncio.Event]] = defaultdict(deque)

    def hold(self, operation: str) -> asyncio.Event:
        """Make the next call of ``operation`` wait until the returned event is set."""
        event = asyncio.Event()
        self._holds[operation].append(event)
        return event

    async def _enter(self, operation: str, *args: Any) -> None:
        self.calls.append((operation, *args))
        if self.sink is not None:
            self.notifications_seen.append(len(self.sink.notifications))
        if self._holds[operation]:
            await self._holds[operation].popleft().wait()
        error = self.errors.get(operation)
        if error is not None:
            raise error

    def operations(self) -> list[str]:
        return [call[0] for call in self.calls]

    async def get_task(self, task_id: int) -> TaskRecord:
        await self._enter("get_task", task_id)
        return self.records[task_id]

    async def get_multi_tasks(
        self, start: int, end: int, scope_to_caller: bool
    ) -> Sequence[TaskRecord]:
        await self._enter("get_multi_tasks", start, end, scope_to_caller)
        return list(self.batch)

    async def _advance(self, operation: str, task_id: int, target: TaskStatus | None = None) -> str:
        await self._enter(operation, task_id)
        record = self.records[task_id]
        new_status = target or next_status(TaskStatus(record.status))
        self.records[task_id] = record.model_copy(update={"status": int(new_status)})
        return f"tx-{operation}-{task_id}"

    async def start_task(self, task_id: int) -> Any:
        return await self._advance("start_task", task_id)

    async def review_task(self, task_id: int) -> Any:
        return await self._advance("review_task", task_id)

    async def complete_task(self, task_id: int) -> Any:
        return await self._advance("complete_task", task_id)

    async def cancel_task(self, task_id: int) -> Any:
        return await self._advance("cancel_task", task_id, TaskStatus.CANCELED)

    async def has_member_role(self, identity: str) -> bool:
        await self._enter("has_member_role", identity)
        return self.member

    async def has_leader_role(self, identity: str) -> bool:
        await self._enter("has_leader_role", identity)
        return self.leader

    async def set_role(self, role_id: RoleId, identity: Identity, authorized: bool) -> Any:
        await self._enter("set_role", role_id, identity, authorized)
        return "tx-set-role"

    async def set_operator(
        self, interface_id: InterfaceId, role_id: RoleId, authorized: bool
    ) -> Any:
        await self._enter("set_operator", interface_id, role_id, authorized)
        return "tx-set-operator"

    async def set_min_quorum(self, quorum: QuorumAmount) -> Any:
        await self._enter("set_min_quorum", quorum)
        return "tx-set-quorum"

    async def deposit(self, role_id: RoleId, amount: TokenAmount) -> Any:
        await self._enter("deposit", role_id, amount)
        return "tx-deposit"


class RecordingNotificationSink(NotificationSink):
    def __init__(self) -> None:
        self.notifications: list[Notification] = []

    async def notify(self, notification: Notification) -> None:
        self.notifications.append(notification)

    def messages(self) -> list[tuple[str, str]]:
        return [(n.severity.value, n.message) for n in self.notifications]


@pytest.fixture
def gateway() -> StubLedgerGateway:
    return StubLedgerGateway()


@pytest.fixture
def sink(gateway: StubLedgerGateway) -> RecordingNotificationSink:
    recording = RecordingNotificationSink()
    gateway.sink = recording
    return recording


@pytest.fixture
def normalizer() -> TaskRecordNormalizer:
    return TaskRecordNormalizer(ShortIdentityFormatter(), UTC)


@pytest.fixture
def controller(
    gateway: StubLedgerGateway,
    sink: RecordingNotificationSink,
    normalizer: TaskRecordNormalizer,
) -> TaskStateController:
    return TaskStateController(gateway=gateway, sink=sink, normalizer=normalizer)
