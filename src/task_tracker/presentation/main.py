from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import inject
from fastapi import FastAPI

from src.setup.app_config import close_resources, configure_di
from src.setup.logging_config import configure_logging
from src.setup.tracker_config import TrackerSettings
from src.task_tracker.application.controller import TaskStateController
from src.task_tracker.presentation.routes import router as api_router
from src.task_tracker.presentation.websockets import (
    WebSocketNotificationSink,
    connection_manager,
    router as ws_router,
)

settings = TrackerSettings()
configure_logging(settings.LOG_LEVEL, settings.LOG_JSON)

websocket_sink = (
    WebSocketNotificationSink(connection_manager)
    if settings.NOTIFICATION_SINK == "websocket"
    else None
)
configure_di(settings, sink=websocket_sink)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    controller = inject.instance(TaskStateController)
    await controller.initialize(settings.CALLER_IDENTITY)
    yield
    controller.dispose()
    await close_resources()


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Mirrors ledger task state and submits task transitions",
    lifespan=lifespan,
)

app.include_router(api_router, prefix="")
app.include_router(ws_router, prefix="")
