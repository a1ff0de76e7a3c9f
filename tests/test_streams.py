from datetime import UTC, datetime
from typing import Any

import pytest

from src.task_tracker.domain.models import Notification, NotificationSeverity
from src.task_tracker.infrastructure.streams import StreamsNotificationSink, encode_notification


class FakeRedis:
    def __init__(self) -> None:
        self.entries: list[tuple[str, dict[str, str], dict[str, Any]]] = []

    async def xadd(self, stream: str, fields: dict[str, str], **kwargs: Any) -> str:
        self.entries.append((stream, fields, kwargs))
        return f"{len(self.entries)}-0"


class FakeStreamsClient:
    def __init__(self) -> None:
        self.redis = FakeRedis()
        self.closed = False

    async def close(self) -> None:
        self.closed = True


def test_encode_notification_flattens_to_strings() -> None:
    notification = Notification(
        severity=NotificationSeverity.WARNING,
        message="Cancel Task process initiated with success!",
        task_id=7,
        created_at=datetime(2024, 5, 1, 12, 30, tzinfo=UTC),
    )

    assert encode_notification(notification) == {
        "severity": "warning",
        "message": "Cancel Task process initiated with success!",
        "task_id": "7",
        "ts": "2024-05-01T12:30:00+00:00",
    }


def test_encode_notification_without_task_id() -> None:
    fields = encode_notification(Notification.info("Set Quorum process initiated with success!"))

    assert fields["task_id"] == ""
    assert fields["severity"] == "info"


@pytest.mark.asyncio
async def test_stream_sink_appends_with_trimming() -> None:
    client = FakeStreamsClient()
    sink = StreamsNotificationSink(client, "task-tracker:notifications", maxlen=100)

    await sink.notify(Notification.error("Error Set Role!"))

    stream, fields, options = client.redis.entries[0]
    assert stream == "task-tracker:notifications"
    assert fields["severity"] == "error"
    assert fields["message"] == "Error Set Role!"
    assert options == {"maxlen": 100, "approximate": True}


@pytest.mark.asyncio
async def test_stream_sink_close_closes_client() -> None:
    client = FakeStreamsClient()
    sink = StreamsNotificationSink(client, "task-tracker:notifications")

    await sink.close()

    assert client.closed is True
