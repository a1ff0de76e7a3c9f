from pydantic import BaseModel, Field

from src.task_tracker.domain.models.batch_result import RejectedRecord
from src.task_tracker.domain.models.capabilities import Capabilities
from src.task_tracker.domain.models.task_action import TaskAction
from src.task_tracker.domain.models.task_view import TaskView


class TaskCardDTO(BaseModel):
    """A task view together with what the current caller can do with it."""

    task: TaskView = Field(description="Display-ready task.")
    status_label: str = Field(description="Human-readable status.")
    action_label: str | None = Field(description="Label of the status action, None when terminal.")
    permitted_actions: list[TaskAction] = Field(
        description="Actions the caller's roles allow right now."
    )


class ControllerStateDTO(BaseModel):
    loading: bool = Field(description="At least one primary request is in flight.")
    error: str | None = Field(default=None, description="Message of the last failed request.")
    identity: str | None = Field(default=None, description="Caller identity, once initialized.")
    capabilities: Capabilities = Field(description="Caller roles on the ledger.")
    task: TaskCardDTO | None = Field(default=None, description="Current single task.")
    tasks: list[TaskCardDTO] = Field(default_factory=list, description="Current batch of tasks.")
    rejected: list[RejectedRecord] = Field(
        default_factory=list, description="Records of the last batch that failed to decode."
    )
