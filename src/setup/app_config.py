import inject

from src.setup.stream_config import build_notification_sink
from src.setup.tracker_config import TrackerSettings, get_tracker_settings
from src.task_tracker.application.controller import TaskStateController
from src.task_tracker.application.normalizer import TaskRecordNormalizer
from src.task_tracker.domain.repositories import IdentityFormatter, LedgerGateway, NotificationSink
from src.task_tracker.infrastructure.identity import ShortIdentityFormatter
from src.task_tracker.infrastructure.logging_sink import LoggingNotificationSink
from src.task_tracker.infrastructure.memory.ledger import InMemoryLedgerGateway
from src.task_tracker.infrastructure.streams import StreamsNotificationSink


def _build_sink(settings: TrackerSettings) -> NotificationSink:
    if settings.NOTIFICATION_SINK == "stream":
        return build_notification_sink()
    # The API process passes its websocket sink in explicitly.
    return LoggingNotificationSink()


def configure_di(
    settings: TrackerSettings | None = None,
    sink: NotificationSink | None = None,
) -> None:
    """Bind the ledger gateway, formatter, sink and controller into the injector."""
    if settings is None:
        settings = get_tracker_settings()

    gateway = InMemoryLedgerGateway(
        settings.CALLER_IDENTITY,
        member_role=settings.MEMBER_ROLE_ID,
        leader_role=settings.LEADER_ROLE_ID,
    )
    formatter = ShortIdentityFormatter()
    if sink is None:
        sink = _build_sink(settings)

    def _config(binder: inject.Binder) -> None:
        binder.bind(TrackerSettings, settings)
        binder.bind(LedgerGateway, gateway)
        binder.bind(IdentityFormatter, formatter)
        binder.bind(NotificationSink, sink)
        binder.bind_to_constructor(
            TaskStateController,
            lambda: TaskStateController(
                gateway=gateway,
                sink=sink,
                normalizer=TaskRecordNormalizer(formatter, settings.DATE_TIMEZONE),
            ),
        )

    inject.clear_and_configure(_config)


async def close_resources() -> None:
    """Release connections held by the bound notification sink."""
    sink = inject.instance(NotificationSink)
    if isinstance(sink, StreamsNotificationSink):
        await sink.close()
