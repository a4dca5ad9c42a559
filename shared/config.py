"""
Shared configuration management for the REST dispatcher.
"""

from typing import Any, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="REST_",
        case_sensitive=False,
        extra="allow"
    )

    log_level: str = Field(default="info")


class RestClientConfig(BaseConfig):
    """Settings consumed by the dispatcher and the API facade."""

    # Credential, sent verbatim as the Authorization header
    token: Optional[str] = Field(default=None)

    # Remote API
    api_base: str = Field(default="https://discord.com/api")
    api_version: int = Field(default=10, ge=1)
    homepage: str = Field(default="https://github.com/rest-client/rest-client")
    version: str = Field(default="1.0.0")
    request_timeout: float = Field(default=30.0, gt=0)

    # Retry behaviour (milliseconds)
    max_retries: int = Field(default=5, ge=0)
    route_delay_ms: int = Field(default=250, ge=0)
    network_jitter_ms: int = Field(default=2000, ge=0)
    server_jitter_ms: int = Field(default=1000, ge=0)

    # Bucket registry housekeeping, in dispatches; 0 disables pruning
    bucket_prune_interval: int = Field(default=1000, ge=0)

    @property
    def base_url(self) -> str:
        return f"{self.api_base.rstrip('/')}/v{self.api_version}"

    @property
    def user_agent(self) -> str:
        return f"DiscordBot ({self.homepage}, {self.version})"


def get_config(**overrides: Any) -> RestClientConfig:
    """Get dispatcher configuration, environment first, then overrides."""
    return RestClientConfig(**overrides)
