from __future__ import annotations

import logging

from src.task_tracker.domain.models.notification import Notification, NotificationSeverity
from src.task_tracker.domain.repositories import NotificationSink

logger = logging.getLogger(__name__)

_LEVELS = {
    NotificationSeverity.INFO: logging.INFO,
    NotificationSeverity.WARNING: logging.WARNING,
    NotificationSeverity.ERROR: logging.ERROR,
}


class LoggingNotificationSink(NotificationSink):
    """Writes notifications to the log when no UI transport is configured."""

    async def notify(self, notification: Notification) -> None:
        logger.log(
            _LEVELS[notification.severity],
            notification.message,
            extra={"task_id": notification.task_id, "severity": notification.severity.value},
        )
