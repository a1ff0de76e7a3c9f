from __future__ import annotations

from typing import Any, Protocol, Sequence

from src.task_tracker.domain.models.identifiers import (
    Identity,
    InterfaceId,
    QuorumAmount,
    RoleId,
    TokenAmount,
)
from src.task_tracker.domain.models.notification import Notification
from src.task_tracker.domain.models.task_record import TaskRecord


class LedgerGateway(Protocol):
    """Contract for the remote task registry.

    Every coroutine may raise ``LedgerTransportError`` when the ledger cannot
    be reached or the call is reverted.
    """

    async def get_task(self, task_id: int) -> TaskRecord:
        """Read a single task record."""

    async def get_multi_tasks(
        self, start: int, end: int, scope_to_caller: bool
    ) -> Sequence[TaskRecord]:
        """Read a range of task records in one batched call."""

    async def start_task(self, task_id: int) -> Any:
        """Move a created task into progress."""

    async def review_task(self, task_id: int) -> Any:
        """Submit an in-progress task for review."""

    async def complete_task(self, task_id: int) -> Any:
        """Complete a reviewed task."""

    async def cancel_task(self, task_id: int) -> Any:
        """Cancel a task that has not reached a terminal status."""

    async def has_member_role(self, identity: str) -> bool:
        """Return whether ``identity`` holds the member role."""

    async def has_leader_role(self, identity: str) -> bool:
        """Return whether ``identity`` holds the leader role."""

    async def set_role(self, role_id: RoleId, identity: Identity, authorized: bool) -> Any:
        """Grant or revoke ``role_id`` for ``identity``."""

    async def set_operator(
        self, interface_id: InterfaceId, role_id: RoleId, authorized: bool
    ) -> Any:
        """Allow or deny ``role_id`` to operate ``interface_id``."""

    async def set_min_quorum(self, quorum: QuorumAmount) -> Any:
        """Set the minimum approval quorum."""

    async def deposit(self, role_id: RoleId, amount: TokenAmount) -> Any:
        """Deposit ``amount`` into the treasury of ``role_id``."""


class IdentityFormatter(Protocol):
    def shorten(self, identity: str) -> str:
        """Return a short display form of ``identity``."""


class NotificationSink(Protocol):
    async def notify(self, notification: Notification) -> None:
        """Deliver a notification to whoever presents them."""
