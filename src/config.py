"""Configuration for commit-status-webhooks."""

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///./webhooks.db"
    api_prefix: str = "/api/v1"
    debug: bool = False

    # Prefix for the "key"/"name" fields reported to webhook targets
    status_key_prefix: str = "SHUTTLE"

    # Canonical web URLs for commits
    default_url_host: str = "localhost"
    default_url_port: int | None = None
    default_url_protocol: str = "http"

    # Delivery protocol
    stash_repeat_count: int = 10
    github_repeat_count: int = 1
    webhook_retry_delay_seconds: float = 5.0
    webhook_timeout_seconds: float = 10.0

    model_config = {"env_prefix": "WEBHOOKS_"}

    @field_validator("stash_repeat_count", "github_repeat_count")
    @classmethod
    def _positive_repeat_count(cls, value: int) -> int:
        if value < 1:
            raise ValueError("repeat count must be at least 1")
        return value

    @field_validator("webhook_retry_delay_seconds")
    @classmethod
    def _non_negative_delay(cls, value: float) -> float:
        if value < 0:
            raise ValueError("retry delay cannot be negative")
        return value

    @field_validator("default_url_port", mode="before")
    @classmethod
    def _parse_port(cls, value: object) -> object:
        if value in (None, ""):
            return None
        return value


settings = Settings()
