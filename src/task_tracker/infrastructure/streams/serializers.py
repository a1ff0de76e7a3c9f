from src.task_tracker.domain.models.notification import Notification


def encode_notification(notification: Notification) -> dict[str, str]:
    """Flatten a notification into the string fields a stream entry holds."""
    return {
        "severity": notification.severity.value,
        "message": notification.message,
        "task_id": "" if notification.task_id is None else str(notification.task_id),
        "ts": notification.created_at.isoformat(),
    }
