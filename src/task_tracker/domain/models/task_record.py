from pydantic import BaseModel, ConfigDict, Field


class TaskRecord(BaseModel):
    """Raw task snapshot exactly as the ledger returns it."""

    model_config = ConfigDict(frozen=True)

    task_id: int | None = Field(
        default=None, description="Task id stored with the record, when the read carries it."
    )
    status: int = Field(description="Numeric status code from the ledger enum.")
    title: str = Field(default="", description="Task title.")
    description: str = Field(default="", description="Task description.")
    reward: int = Field(default=0, description="Reward in ledger units.")
    end_date: int = Field(default=0, description="Deadline as epoch seconds.")
    authorized_roles: tuple[int, ...] = Field(
        default=(), description="Role ids allowed to work on the task."
    )
    creator_role: int = Field(default=0, description="Role id of the creator; 0 means empty slot.")
    assignee: str = Field(default="", description="Identity the task is assigned to.")
    metadata: str = Field(default="", description="Image or document reference.")
