from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from typing import Any, Sequence

from src.task_tracker.domain.exceptions import LedgerTransportError
from src.task_tracker.domain.models import (
    Identity,
    InterfaceId,
    QuorumAmount,
    RoleId,
    TaskAction,
    TaskRecord,
    TaskStatus,
    TokenAmount,
)
from src.task_tracker.domain.repositories import LedgerGateway
from src.task_tracker.domain.state_machine import action_target

logger = logging.getLogger(__name__)

DEFAULT_MEMBER_ROLE = 1
DEFAULT_LEADER_ROLE = 2


class InMemoryLedgerGateway(LedgerGateway):
    """
    Task registry kept in process memory.

    Mirrors how the contract behaves: unknown task ids read back as empty
    records, scoped range reads blank out tasks not assigned to the caller,
    and rejected calls raise ``LedgerTransportError`` like a reverted
    transaction. Calls are made on behalf of ``caller``.
    """

    def __init__(
        self,
        caller: str,
        *,
        member_role: int = DEFAULT_MEMBER_ROLE,
        leader_role: int = DEFAULT_LEADER_ROLE,
        leaders: Iterable[str] = (),
        members: Iterable[str] = (),
        latency: float = 0.0,
    ) -> None:
        self.caller = caller
        self._member_role = member_role
        self._leader_role = leader_role
        self._latency = latency
        self._tasks: dict[int, TaskRecord] = {}
        self._role_holders: dict[int, set[str]] = {
            member_role: {identity.lower() for identity in members},
            leader_role: {identity.lower() for identity in leaders},
        }
        self._operators: dict[tuple[str, int], bool] = {}
        self._treasury: dict[int, int] = {}
        self.min_quorum = 1
        self.offline = False

    # Seeding and inspection

    def add_task(self, task_id: int, record: TaskRecord) -> None:
        self._tasks[task_id] = record.model_copy(update={"task_id": task_id})

    def operator_allowed(self, interface_id: str, role_id: int) -> bool:
        return self._operators.get((interface_id.lower(), role_id), False)

    def treasury(self, role_id: int) -> int:
        return self._treasury.get(role_id, 0)

    # Reads

    async def get_task(self, task_id: int) -> TaskRecord:
        await self._round_trip("getTask")
        return self._tasks.get(task_id) or TaskRecord(task_id=task_id, status=0)

    async def get_multi_tasks(
        self, start: int, end: int, scope_to_caller: bool
    ) -> Sequence[TaskRecord]:
        """Read task ids ``start`` up to, not including, ``end``."""
        await self._round_trip("getMultiTasks")
        records: list[TaskRecord] = []
        for task_id in range(start, end):
            record = self._tasks.get(task_id)
            if record is None or (scope_to_caller and not self._is_caller(record.assignee)):
                record = TaskRecord(task_id=task_id, status=0)
            records.append(record)
        return records

    async def has_member_role(self, identity: str) -> bool:
        await self._round_trip("hasMemberRole")
        return identity.lower() in self._role_holders.get(self._member_role, set())

    async def has_leader_role(self, identity: str) -> bool:
        await self._round_trip("hasLeaderRole")
        return identity.lower() in self._role_holders.get(self._leader_role, set())

    # Transitions

    async def start_task(self, task_id: int) -> Any:
        return await self._transition("startTask", task_id, TaskAction.START)

    async def review_task(self, task_id: int) -> Any:
        return await self._transition("reviewTask", task_id, TaskAction.REVIEW)

    async def complete_task(self, task_id: int) -> Any:
        return await self._transition("completeTask", task_id, TaskAction.COMPLETE)

    async def cancel_task(self, task_id: int) -> Any:
        return await self._transition("cancelTask", task_id, TaskAction.CANCEL)

    async def _transition(self, operation: str, task_id: int, action: TaskAction) -> str:
        await self._round_trip(operation)
        record = self._tasks.get(task_id)
        if record is None:
            raise LedgerTransportError(operation, f"task {task_id} does not exist")
        if action is TaskAction.CANCEL:
            self._require_role(operation, self._leader_role)
        else:
            self._require_any_role(operation)
        current = TaskStatus(record.status)
        try:
            target = action_target(current, action)
        except ValueError as exc:
            raise LedgerTransportError(operation, f"reverted: {exc}") from exc
        update: dict[str, Any] = {"status": int(target)}
        if action is TaskAction.START:
            update["assignee"] = self.caller
        self._tasks[task_id] = record.model_copy(update=update)
        logger.info(
            "Ledger task transition",
            extra={"task_id": task_id, "from": current.label, "to": target.label},
        )
        return self._receipt(operation, task_id)

    # Administration

    async def set_role(self, role_id: RoleId, identity: Identity, authorized: bool) -> Any:
        await self._round_trip("setRole")
        self._require_role("setRole", self._leader_role)
        holders = self._role_holders.setdefault(role_id.value, set())
        if authorized:
            holders.add(identity.value.lower())
        else:
            holders.discard(identity.value.lower())
        return self._receipt("setRole", role_id.value)

    async def set_operator(
        self, interface_id: InterfaceId, role_id: RoleId, authorized: bool
    ) -> Any:
        await self._round_trip("setOperator")
        self._require_role("setOperator", self._leader_role)
        self._operators[(interface_id.value.lower(), role_id.value)] = authorized
        return self._receipt("setOperator", role_id.value)

    async def set_min_quorum(self, quorum: QuorumAmount) -> Any:
        await self._round_trip("setMinQuorum")
        self._require_role("setMinQuorum", self._leader_role)
        self.min_quorum = quorum.value
        return self._receipt("setMinQuorum", quorum.value)

    async def deposit(self, role_id: RoleId, amount: TokenAmount) -> Any:
        await self._round_trip("deposit")
        self._require_any_role("deposit")
        self._treasury[role_id.value] = self.treasury(role_id.value) + amount.value
        return self._receipt("deposit", role_id.value)

    # Helpers

    async def _round_trip(self, operation: str) -> None:
        await asyncio.sleep(self._latency)
        if self.offline:
            raise LedgerTransportError(operation, "ledger is unreachable")

    def _is_caller(self, identity: str) -> bool:
        return identity.lower() == self.caller.lower()

    def _holds(self, role_id: int) -> bool:
        return self.caller.lower() in self._role_holders.get(role_id, set())

    def _require_role(self, operation: str, role_id: int) -> None:
        if not self._holds(role_id):
            raise LedgerTransportError(operation, f"reverted: caller lacks role {role_id}")

    def _require_any_role(self, operation: str) -> None:
        if not (self._holds(self._member_role) or self._holds(self._leader_role)):
            raise LedgerTransportError(operation, "reverted: caller is not a member")

    @staticmethod
    def _receipt(operation: str, subject: int) -> str:
        return f"{operation}:{subject}"
