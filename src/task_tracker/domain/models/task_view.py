from pydantic import BaseModel, ConfigDict, Field

from src.task_tracker.domain.models.task_status import TaskStatus


class TaskView(BaseModel):
    """Display-ready projection of a ledger task record."""

    model_config = ConfigDict(frozen=True)

    task_id: int = Field(description="Unique task identifier.")
    status: TaskStatus = Field(description="Decoded lifecycle status.")
    title: str = Field(description="Task title.")
    description: str = Field(description="Task description.")
    reward: str = Field(description="Exact reward amount as decimal text.")
    end_date: str = Field(description="Deadline formatted as DD/MM/YYYY.")
    authorized_roles: list[str] = Field(description="Authorized role ids, in ledger order.")
    creator_role: str = Field(description="Creator role id.")
    assignee: str = Field(description="Shortened assignee for display.")
    assignee_identity: str = Field(description="Canonical assignee identity.")
    metadata: str = Field(description="Image or document reference.")

    @property
    def status_label(self) -> str:
        return self.status.label
