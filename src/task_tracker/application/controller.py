from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Any

import inject

from src.task_tracker.application.authorization import AuthorizationResolver, permitted_actions
from src.task_tracker.application.batch import BatchRetrievalEngine
from src.task_tracker.application.dtos import ControllerStateDTO, TaskCardDTO
from src.task_tracker.application.normalizer import TaskRecordNormalizer
from src.task_tracker.domain.exceptions import ActionNotPermittedError
from src.task_tracker.domain.models import (
    Capabilities,
    Identity,
    InterfaceId,
    Notification,
    QuorumAmount,
    RejectedRecord,
    RoleId,
    TaskAction,
    TaskView,
    TokenAmount,
)
from src.task_tracker.domain.repositories import LedgerGateway, NotificationSink
from src.task_tracker.domain.state_machine import resolve_action

logger = logging.getLogger(__name__)

_SUBMITTED_MESSAGES: dict[TaskAction, str] = {
    TaskAction.START: "Task Start process initiated with success!",
    TaskAction.REVIEW: "Review Task process initiated with success!",
    TaskAction.COMPLETE: "Complete Task process initiated with success!",
    TaskAction.CANCEL: "Cancel Task process initiated with success!",
}


class TaskStateController:
    """
    Owns the task state shown to the user and the requests that change it.

    Two slots are kept: the current single task and the current batch. Each
    slot has a generation counter; a response is applied only when its
    generation is still the latest one and the controller is not disposed.
    Task statuses are never changed locally: a submitted transition only
    shows up after the next successful read.
    """

    def __init__(
        self,
        gateway: LedgerGateway | None = None,
        sink: NotificationSink | None = None,
        normalizer: TaskRecordNormalizer | None = None,
        batch_engine: BatchRetrievalEngine | None = None,
        resolver: AuthorizationResolver | None = None,
    ) -> None:
        self._gateway = gateway or inject.instance(LedgerGateway)
        self._sink = sink or inject.instance(NotificationSink)
        self._normalizer = normalizer or TaskRecordNormalizer()
        self._batch_engine = batch_engine or BatchRetrievalEngine(self._gateway, self._normalizer)
        self._resolver = resolver or AuthorizationResolver(self._gateway)

        self._task: TaskView | None = None
        self._tasks: tuple[TaskView, ...] = ()
        self._rejected: tuple[RejectedRecord, ...] = ()
        self._capabilities = Capabilities()
        self._identity: str | None = None
        self._error: str | None = None

        self._in_flight = 0
        self._single_generation = 0
        self._batch_generation = 0
        self._disposed = False
        self._last_task_id: int | None = None
        self._last_range: tuple[int, int, bool] | None = None

    # State surface

    @property
    def loading(self) -> bool:
        return self._in_flight > 0

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def task(self) -> TaskView | None:
        return self._task

    @property
    def tasks(self) -> list[TaskView]:
        return list(self._tasks)

    @property
    def rejected(self) -> list[RejectedRecord]:
        return list(self._rejected)

    @property
    def capabilities(self) -> Capabilities:
        return self._capabilities

    @property
    def identity(self) -> str | None:
        return self._identity

    @property
    def disposed(self) -> bool:
        return self._disposed

    def snapshot(self) -> ControllerStateDTO:
        return ControllerStateDTO(
            loading=self.loading,
            error=self._error,
            identity=self._identity,
            capabilities=self._capabilities,
            task=self.card(self._task) if self._task is not None else None,
            tasks=[self.card(view) for view in self._tasks],
            rejected=list(self._rejected),
        )

    def card(self, view: TaskView) -> TaskCardDTO:
        return TaskCardDTO(
            task=view,
            status_label=view.status_label,
            action_label=resolve_action(view.status).label,
            permitted_actions=permitted_actions(view, self._capabilities),
        )

    # Lifecycle

    async def initialize(self, identity: str) -> Capabilities | None:
        """Bind the controller to a caller and resolve the caller's roles."""
        if self._disposed:
            raise RuntimeError("Controller has been disposed")
        self._identity = identity
        async with self._busy():
            try:
                capabilities = await self._resolver.resolve_capabilities(identity)
            except Exception as exc:
                await self._fail(f"Error resolving roles for {identity}: {exc}")
                return None
            if self._disposed:
                return None
            self._capabilities = capabilities
            return capabilities

    async def refresh(self) -> None:
        """Repeat the last single and ranged reads."""
        pending: list[Awaitable[Any]] = []
        if self._last_task_id is not None:
            pending.append(self.fetch_one(self._last_task_id))
        if self._last_range is not None:
            pending.append(self.fetch_range(*self._last_range))
        await asyncio.gather(*pending)

    def dispose(self) -> None:
        """Release state; responses still in flight are discarded when they land."""
        self._disposed = True
        self._single_generation += 1
        self._batch_generation += 1
        self._task = None
        self._tasks = ()
        self._rejected = ()
        self._capabilities = Capabilities()
        logger.debug("Task state controller disposed", extra={"identity": self._identity})

    # Reads

    async def fetch_one(self, task_id: int) -> TaskView | None:
        self._single_generation += 1
        generation = self._single_generation
        self._last_task_id = task_id
        async with self._busy():
            try:
                record = await self._gateway.get_task(task_id)
                view = self._normalizer.normalize(record, task_id)
            except Exception as exc:
                if self._is_current_single(generation):
                    await self._fail(f"Error searching task {task_id}: {exc}", task_id)
                else:
                    logger.debug("Discarding stale task read failure", extra={"task_id": task_id})
                return None
            if not self._is_current_single(generation):
                logger.debug("Discarding stale task read", extra={"task_id": task_id})
                return None
            self._task = view
            return view

    async def fetch_range(
        self, start: int, end: int, scope_to_caller: bool = False
    ) -> list[TaskView] | None:
        self._batch_generation += 1
        generation = self._batch_generation
        self._last_range = (start, end, scope_to_caller)
        # Partial results are published as they arrive and rolled back if the read fails.
        previous = (self._tasks, self._rejected)
        accumulated: list[TaskView] = []

        def publish(view: TaskView) -> None:
            if self._is_current_batch(generation):
                accumulated.append(view)
                self._tasks = tuple(accumulated)

        async with self._busy():
            try:
                result = await self._batch_engine.fetch_range(
                    start, end, scope_to_caller, on_accept=publish
                )
            except Exception as exc:
                if self._is_current_batch(generation):
                    self._tasks, self._rejected = previous
                    await self._fail(f"Error searching tasks {start}-{end}: {exc}")
                else:
                    logger.debug(
                        "Discarding stale task range failure",
                        extra={"start": start, "end": end},
                    )
                return None
            if not self._is_current_batch(generation):
                logger.debug("Discarding stale task range", extra={"start": start, "end": end})
                return None
            self._tasks = tuple(result.tasks)
            self._rejected = tuple(result.rejected)
            return list(result.tasks)

    # Transitions

    async def submit_action(self, task_id: int) -> bool:
        """Invoke the status action of ``task_id`` on the ledger."""
        return await self._submit(task_id, cancel=False)

    async def submit_cancel(self, task_id: int) -> bool:
        """Cancel ``task_id`` on the ledger; needs leader capability."""
        return await self._submit(task_id, cancel=True)

    async def _submit(self, task_id: int, cancel: bool) -> bool:
        async with self._busy():
            try:
                view = await self._view_for(task_id)
                action = TaskAction.CANCEL if cancel else resolve_action(view.status)
                self._ensure_permitted(view, action)
                await self._ledger_call(action)(task_id)
            except Exception as exc:
                if not self._disposed:
                    await self._fail(f"Error submitting task {task_id}: {exc}", task_id)
                return False
        logger.info(
            "Task transition submitted",
            extra={"task_id": task_id, "action": action.value, "identity": self._identity},
        )
        message = _SUBMITTED_MESSAGES[action]
        if cancel:
            await self._notify(Notification.warning(message, task_id))
        else:
            await self._notify(Notification.info(message, task_id))
        return True

    async def _view_for(self, task_id: int) -> TaskView:
        if self._task is not None and self._task.task_id == task_id:
            return self._task
        for view in self._tasks:
            if view.task_id == task_id:
                return view
        record = await self._gateway.get_task(task_id)
        return self._normalizer.normalize(record, task_id)

    def _ensure_permitted(self, view: TaskView, action: TaskAction) -> None:
        if action in permitted_actions(view, self._capabilities):
            return
        if action is TaskAction.NONE or view.status.is_terminal:
            reason = f"task is {view.status_label}"
        elif action is TaskAction.CANCEL:
            reason = "leader role required"
        else:
            reason = "member or leader role required"
        raise ActionNotPermittedError(view.task_id, action.value, reason)

    def _ledger_call(self, action: TaskAction) -> Callable[[int], Awaitable[Any]]:
        calls: dict[TaskAction, Callable[[int], Awaitable[Any]]] = {
            TaskAction.START: self._gateway.start_task,
            TaskAction.REVIEW: self._gateway.review_task,
            TaskAction.COMPLETE: self._gateway.complete_task,
            TaskAction.CANCEL: self._gateway.cancel_task,
        }
        return calls[action]

    # Administration: optimistic and detached from the task slots

    async def set_role(
        self, role_id: RoleId | int, identity: Identity | str, authorized: bool
    ) -> Any:
        role_id, identity = RoleId.of(role_id), Identity.of(identity)
        return await self._administer(
            "Set Role", self._gateway.set_role, role_id, identity, authorized
        )

    async def set_operator(
        self, interface_id: InterfaceId | str, role_id: RoleId | int, authorized: bool
    ) -> Any:
        interface_id, role_id = InterfaceId.of(interface_id), RoleId.of(role_id)
        return await self._administer(
            "Set Operator", self._gateway.set_operator, interface_id, role_id, authorized
        )

    async def set_min_quorum(self, quorum: QuorumAmount | int) -> Any:
        return await self._administer(
            "Set Quorum", self._gateway.set_min_quorum, QuorumAmount.of(quorum)
        )

    async def deposit(self, role_id: RoleId | int, amount: TokenAmount | int) -> Any:
        role_id, amount = RoleId.of(role_id), TokenAmount.of(amount)
        return await self._administer("Set Deposit", self._gateway.deposit, role_id, amount)

    async def _administer(self, name: str, call: Callable[..., Awaitable[Any]], *args: Any) -> Any:
        # Announced before the ledger confirms; the task slots only change on the next read.
        await self._notify(Notification.info(f"{name} process initiated with success!"))
        try:
            return await call(*args)
        except Exception:
            logger.warning(
                "Administrative ledger call failed", extra={"operation": name}, exc_info=True
            )
            await self._notify(Notification.error(f"Error {name}!"))
            return None

    # Helpers

    @asynccontextmanager
    async def _busy(self) -> AsyncIterator[None]:
        self._in_flight += 1
        self._error = None
        try:
            yield
        finally:
            self._in_flight -= 1

    def _is_current_single(self, generation: int) -> bool:
        return not self._disposed and generation == self._single_generation

    def _is_current_batch(self, generation: int) -> bool:
        return not self._disposed and generation == self._batch_generation

    async def _fail(self, message: str, task_id: int | None = None) -> None:
        self._error = message
        logger.warning(message, extra={"task_id": task_id})
        await self._notify(Notification.error(message, task_id))

    async def _notify(self, notification: Notification) -> None:
        try:
            await self._sink.notify(notification)
        except Exception:
            logger.exception(
                "Failed to deliver notification",
                extra={"severity": notification.severity.value},
            )
