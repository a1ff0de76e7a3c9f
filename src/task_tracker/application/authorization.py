from __future__ import annotations

import logging

import inject

from src.task_tracker.domain.models.capabilities import Capabilities
from src.task_tracker.domain.models.task_action import TaskAction
from src.task_tracker.domain.models.task_view import TaskView
from src.task_tracker.domain.repositories import LedgerGateway
from src.task_tracker.domain.state_machine import can_cancel, resolve_action

logger = logging.getLogger(__name__)


class AuthorizationResolver:
    """Asks the ledger which roles a caller holds."""

    def __init__(self, gateway: LedgerGateway | None = None) -> None:
        self._gateway = gateway or inject.instance(LedgerGateway)

    async def resolve_capabilities(self, identity: str) -> Capabilities:
        """
        Resolve member and leader capability for ``identity``.

        The leader check runs first and the member check only after it
        answers. Gateway failures propagate; only explicit ``False`` answers
        produce a negative capability.
        """
        is_leader = await self._gateway.has_leader_role(identity)
        is_member = await self._gateway.has_member_role(identity)
        capabilities = Capabilities(is_member=bool(is_member), is_leader=bool(is_leader))
        logger.debug(
            "Resolved caller capabilities",
            extra={"identity": identity, **capabilities.model_dump()},
        )
        return capabilities


def permitted_actions(view: TaskView, capabilities: Capabilities) -> list[TaskAction]:
    """Actions ``capabilities`` allow on ``view``, status action first."""
    actions: list[TaskAction] = []
    action = resolve_action(view.status)
    if action is not TaskAction.NONE and (capabilities.is_member or capabilities.is_leader):
        actions.append(action)
    if capabilities.is_leader and can_cancel(view.status):
        actions.append(TaskAction.CANCEL)
    return actions
