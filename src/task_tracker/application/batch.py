from __future__ import annotations

import logging
from collections.abc import Callable

import inject

from src.task_tracker.application.normalizer import TaskRecordNormalizer
from src.task_tracker.domain.exceptions import InvalidValueError, RecordNormalizationError
from src.task_tracker.domain.models.batch_result import BatchResult, RejectedRecord
from src.task_tracker.domain.models.task_record import TaskRecord
from src.task_tracker.domain.models.task_view import TaskView
from src.task_tracker.domain.repositories import LedgerGateway

logger = logging.getLogger(__name__)

# Creator role 0 marks an empty ledger slot. Whether 0 could also be a real,
# assignable role is not settled; such tasks would be hidden as well.
PLACEHOLDER_CREATOR_ROLE = 0

AcceptCallback = Callable[[TaskView], None]


def is_placeholder(record: TaskRecord) -> bool:
    return record.creator_role == PLACEHOLDER_CREATOR_ROLE


class BatchRetrievalEngine:
    """Reads a range of tasks in one ledger call and filters out empty slots."""

    def __init__(
        self,
        gateway: LedgerGateway | None = None,
        normalizer: TaskRecordNormalizer | None = None,
    ) -> None:
        self._gateway = gateway or inject.instance(LedgerGateway)
        self._normalizer = normalizer or TaskRecordNormalizer()

    async def fetch_range(
        self,
        start: int,
        end: int,
        scope_to_caller: bool,
        on_accept: AcceptCallback | None = None,
    ) -> BatchResult:
        """
        Fetch tasks ``start``..``end`` and return the surviving views in ledger order.

        ``on_accept`` is called with each view as soon as it passes the filter,
        so callers can show a growing list while the batch is processed.
        """
        if start < 0:
            raise InvalidValueError("range start", start, "must not be negative")
        if end < start:
            raise InvalidValueError("range end", end, f"must not be lower than start {start}")

        records = await self._gateway.get_multi_tasks(start, end, scope_to_caller)
        result = BatchResult()
        for index, record in enumerate(records):
            task_id = record.task_id if record.task_id is not None else start + index
            if is_placeholder(record):
                result.placeholders += 1
                continue
            try:
                view = self._normalizer.normalize(record, task_id)
            except RecordNormalizationError as exc:
                logger.warning(
                    "Dropping task record that cannot be normalized",
                    extra={"task_id": task_id, "reason": str(exc)},
                )
                result.rejected.append(RejectedRecord(task_id=task_id, reason=str(exc)))
                continue
            result.tasks.append(view)
            if on_accept is not None:
                on_accept(view)

        logger.debug(
            "Fetched task range",
            extra={
                "start": start,
                "end": end,
                "scope_to_caller": scope_to_caller,
                "accepted": len(result.tasks),
                "placeholders": result.placeholders,
                "rejected": len(result.rejected),
            },
        )
        return result
