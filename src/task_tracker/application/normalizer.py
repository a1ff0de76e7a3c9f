from __future__ import annotations

from datetime import UTC, datetime, timedelta, tzinfo
from zoneinfo import ZoneInfo

import inject

from src.task_tracker.domain.exceptions import EndDateOutOfRangeError
from src.task_tracker.domain.models.task_record import TaskRecord
from src.task_tracker.domain.models.task_status import TaskStatus
from src.task_tracker.domain.models.task_view import TaskView
from src.task_tracker.domain.repositories import IdentityFormatter

# The ledger stores deadlines in epoch seconds.
_MS_PER_SECOND = 1000
_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def format_end_date(epoch_seconds: int, tz: tzinfo) -> str:
    """
    Format a ledger deadline as ``DD/MM/YYYY`` in ``tz``.

    Raises ``EndDateOutOfRangeError`` for deadlines outside years 1 to 9999,
    such as a uint256 maximum used as "no deadline".
    """
    epoch_ms = int(epoch_seconds) * _MS_PER_SECOND
    try:
        moment = (_EPOCH + timedelta(milliseconds=epoch_ms)).astimezone(tz)
    except (OverflowError, ValueError) as exc:
        raise EndDateOutOfRangeError(epoch_seconds) from exc
    return f"{moment.day:02d}/{moment.month:02d}/{moment.year}"


def _resolve_timezone(timezone: str | tzinfo) -> tzinfo:
    if not isinstance(timezone, str):
        return timezone
    if timezone.upper() == "UTC":
        return UTC
    return ZoneInfo(timezone)


class TaskRecordNormalizer:
    """Turns raw ledger records into display-ready task views."""

    def __init__(
        self,
        identity_formatter: IdentityFormatter | None = None,
        timezone: str | tzinfo = "UTC",
    ) -> None:
        self._identity_formatter = identity_formatter or inject.instance(IdentityFormatter)
        self._tz = _resolve_timezone(timezone)

    def normalize(self, raw: TaskRecord, task_id: int) -> TaskView:
        """
        Build a ``TaskView`` for ``raw``.

        Raises ``DecodeError`` if the status code is not a known status and
        ``EndDateOutOfRangeError`` if the deadline cannot be shown as a date.
        """
        status = TaskStatus.decode(raw.status)
        return TaskView(
            task_id=task_id,
            status=status,
            title=raw.title,
            description=raw.description,
            reward=str(raw.reward),
            end_date=format_end_date(raw.end_date, self._tz),
            authorized_roles=[str(role) for role in raw.authorized_roles],
            creator_role=str(raw.creator_role),
            assignee=self._identity_formatter.shorten(raw.assignee),
            assignee_identity=raw.assignee,
            metadata=raw.metadata,
        )
