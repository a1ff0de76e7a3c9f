from typing import Literal

from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class TrackerSettings(BaseSettings):
    APP_NAME: str = "ledger-task-tracker"
    APP_VERSION: str = "0.1.0"
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False
    DATE_TIMEZONE: str = "UTC"
    CALLER_IDENTITY: str = "0x0000000000000000000000000000000000000000"
    NOTIFICATION_SINK: Literal["log", "stream", "websocket"] = "log"
    MEMBER_ROLE_ID: int = 1
    LEADER_ROLE_ID: int = 2

    model_config = ConfigDict(env_file=".env", extra="ignore")


def get_tracker_settings() -> TrackerSettings:
    return TrackerSettings()
