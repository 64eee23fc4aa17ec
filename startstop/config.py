from pathlib import Path
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .schemas.service import MockServiceSpec

# Resolve .env relative to the project root (one level up from this file)
_ENV_FILE = Path(__file__).resolve().parent.parent / ".env"


class Settings(BaseSettings):
    """
    Application Configuration.
    Reads from environment variables and .env file.
    """
    model_config = SettingsConfigDict(env_file=str(_ENV_FILE), env_file_encoding="utf-8", case_sensitive=False, extra="ignore")

    # Functionality
    ENVIRONMENT: str = "development"  # "production" switches logs to JSON
    LOG_LEVEL: str = "INFO"
    SHOW_BANNER: bool = True

    # Per-call deadlines, in seconds
    START_TIMEOUT: float = Field(default=5.0, gt=0)
    STOP_TIMEOUT: float = Field(default=5.0, gt=0)
    # Also cancel an operation that missed its deadline, not just abandon it
    CANCEL_ON_TIMEOUT: bool = False

    # Managed services, in start order. JSON list when set from the environment.
    SERVICES: List[MockServiceSpec] = Field(
        default_factory=lambda: [
            MockServiceSpec(name="A", duration=1),
            MockServiceSpec(name="B", duration=2),
            MockServiceSpec(name="C", duration=1),
        ]
    )


settings = Settings()
