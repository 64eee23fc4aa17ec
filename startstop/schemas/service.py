from pydantic import BaseModel, Field


class MockServiceSpec(BaseModel):
    """Declarative description of a demo service, as read from settings."""
    name: str = Field(min_length=1)
    duration: float = Field(default=1.0, ge=0)
    stop_delay: float = Field(default=1.0, ge=0)  # extra time stop takes over start
    fail_start: bool = False
    fail_stop: bool = False
