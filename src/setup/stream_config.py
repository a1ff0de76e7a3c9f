from pydantic import ConfigDict
from pydantic_settings import BaseSettings

from src.task_tracker.infrastructure.streams import StreamsClient, StreamsNotificationSink

STREAM_NOTIFICATIONS = "task-tracker:notifications"


class StreamSettings(BaseSettings):
    """Configuration for the Redis stream notifications are published to."""
    REDIS_URL: str = "redis://redis:6379/0"
    NOTIFICATION_STREAM: str = STREAM_NOTIFICATIONS
    STREAM_MAXLEN: int | None = 10000

    model_config = ConfigDict(env_file=".env", extra="ignore")


def build_notification_sink(settings: StreamSettings | None = None) -> StreamsNotificationSink:
    """Create a sink appending notifications to the configured stream."""
    if settings is None:
        settings = StreamSettings()
    client = StreamsClient(settings.REDIS_URL)
    return StreamsNotificationSink(
        client,
        settings.NOTIFICATION_STREAM,
        maxlen=settings.STREAM_MAXLEN,
    )
