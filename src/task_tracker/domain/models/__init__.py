from src.task_tracker.domain.models.batch_result import BatchResult, RejectedRecord
from src.task_tracker.domain.models.capabilities import Capabilities
from src.task_tracker.domain.models.identifiers import (
    Identity,
    InterfaceId,
    QuorumAmount,
    RoleId,
    TokenAmount,
)
from src.task_tracker.domain.models.notification import Notification, NotificationSeverity
from src.task_tracker.domain.models.task_action import TaskAction
from src.task_tracker.domain.models.task_record import TaskRecord
from src.task_tracker.domain.models.task_status import TaskStatus
from src.task_tracker.domain.models.task_view import TaskView

__all__ = [
    "BatchResult",
    "RejectedRecord",
    "Capabilities",
    "Identity",
    "InterfaceId",
    "QuorumAmount",
    "RoleId",
    "TokenAmount",
    "Notification",
    "NotificationSeverity",
    "TaskAction",
    "TaskRecord",
    "TaskStatus",
    "TaskView",
]
