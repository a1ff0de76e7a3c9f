from src.task_tracker.infrastructure.streams.client import StreamsClient
from src.task_tracker.infrastructure.streams.publisher import StreamsNotificationSink
from src.task_tracker.infrastructure.streams.serializers import encode_notification

__all__ = [
    "StreamsClient",
    "StreamsNotificationSink",
    "encode_notification",
]
