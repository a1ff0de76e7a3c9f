from pydantic import BaseModel, ConfigDict, Field


class Capabilities(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_member: bool = Field(default=False, description="Caller holds the member role.")
    is_leader: bool = Field(default=False, description="Caller holds the leader role.")
