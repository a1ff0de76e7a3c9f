from pydantic import BaseModel, Field

from src.task_tracker.domain.models.task_view import TaskView


class RejectedRecord(BaseModel):
    task_id: int = Field(description="Id of the record that failed to decode.")
    reason: str = Field(description="Why the record was dropped.")


class BatchResult(BaseModel):
    """Outcome of one ranged read."""

    tasks: list[TaskView] = Field(default_factory=list, description="Accepted views in ledger order.")
    rejected: list[RejectedRecord] = Field(
        default_factory=list, description="Records dropped because they could not be decoded."
    )
    placeholders: int = Field(default=0, description="Number of empty ledger slots skipped.")
