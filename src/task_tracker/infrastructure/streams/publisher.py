from __future__ import annotations

from src.task_tracker.domain.models.notification import Notification
from src.task_tracker.domain.repositories import NotificationSink
from src.task_tracker.infrastructure.streams.client import StreamsClient
from src.task_tracker.infrastructure.streams.serializers import encode_notification


class StreamsNotificationSink(NotificationSink):
    """Appends notifications to a Redis stream read by the UI."""

    def __init__(
        self,
        client: StreamsClient,
        stream: str,
        *,
        maxlen: int | None = None,
        approximate: bool = True,
    ) -> None:
        self._client = client
        self._stream = stream
        self._maxlen = maxlen
        self._approximate = approximate

    async def notify(self, notification: Notification) -> None:
        await self._client.redis.xadd(
            self._stream,
            encode_notification(notification),
            maxlen=self._maxlen,
            approximate=self._approximate,
        )

    async def close(self) -> None:
        await self._client.close()
