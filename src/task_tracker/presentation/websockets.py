from __future__ import annotations

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from src.task_tracker.domain.models.notification import Notification
from src.task_tracker.domain.repositories import NotificationSink

router = APIRouter(tags=["ws"])


class NotificationConnectionManager:
    def __init__(self) -> None:
        self._connections: set[WebSocket] = set()

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self._connections.add(websocket)

    def disconnect(self, websocket: WebSocket) -> None:
        self._connections.discard(websocket)

    async def broadcast(self, payload: dict[str, object]) -> None:
        for websocket in list(self._connections):
            try:
                await websocket.send_json(payload)
            except RuntimeError:
                self.disconnect(websocket)


class WebSocketNotificationSink(NotificationSink):
    def __init__(self, manager: NotificationConnectionManager) -> None:
        self._manager = manager

    async def notify(self, notification: Notification) -> None:
        await self._manager.broadcast(notification.model_dump(mode="json"))


connection_manager = NotificationConnectionManager()


@router.websocket("/ws/notifications")
async def notification_updates(websocket: WebSocket) -> None:
    await connection_manager.connect(websocket)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        connection_manager.disconnect(websocket)
