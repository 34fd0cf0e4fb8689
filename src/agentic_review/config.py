"""Agentic Review configuration with Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AgentSettings(BaseSettings):
    """LLM and credential configuration."""

    model_config = SettingsConfigDict(env_prefix="", populate_by_name=True, extra="ignore")

    gemini_model: str = Field(
        default="gemini-2.5-flash",
        min_length=1,
        description="Gemini model used for every generation call",
    )
    google_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("GOOGLE_API_KEY", "google_api_key"),
    )
    gemini_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("GEMINI_API_KEY", "API_KEY", "gemini_api_key"),
    )
    github_token: str | None = Field(
        default=None,
        validation_alias=AliasChoices("GITHUB_TOKEN", "github_token"),
        description="GitHub token for private repositories and higher rate limits",
    )

    @property
    def effective_google_key(self) -> str | None:
        """Get effective Google API key (prefers GOOGLE_API_KEY)."""
        return self.google_api_key or self.gemini_api_key

    @property
    def has_gemini(self) -> bool:
        """Check if Gemini is configured."""
        return self.effective_google_key is not None


class GitHubSettings(BaseSettings):
    """GitHub content fetching configuration."""

    model_config = SettingsConfigDict(env_prefix="AGENTIC_REVIEW_GITHUB_")

    api_base: str = Field(default="https://api.github.com", description="GitHub REST API base")
    max_files: int = Field(default=50, ge=1, le=500, description="Max files sent to the model")
    batch_size: int = Field(default=10, ge=1, le=50, description="Concurrent content requests")
    timeout_seconds: float = Field(default=30.0, gt=0, le=300, description="HTTP timeout")

    @field_validator("api_base")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize API base URL."""
        return v.rstrip("/")


class WorkflowSettings(BaseSettings):
    """Review workflow pacing configuration."""

    model_config = SettingsConfigDict(env_prefix="AGENTIC_REVIEW_WORKFLOW_")

    short_delay: float = Field(default=0.5, ge=0, le=30, description="Short pacing delay (s)")
    medium_delay: float = Field(default=1.5, ge=0, le=30, description="Medium pacing delay (s)")
    long_delay: float = Field(default=2.0, ge=0, le=30, description="Long pacing delay (s)")
    enable_cicd: bool = Field(default=True, description="Simulate CI/CD steps by default")


class ServerSettings(BaseSettings):
    """API Server configuration."""

    model_config = SettingsConfigDict(env_prefix="AGENTIC_REVIEW_SERVER_")

    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, ge=1, le=65535, description="Server port")
    cors_origins: list[str] = Field(default=["*"], description="CORS allowed origins")


class Settings(BaseSettings):
    """Main Agentic Review settings."""

    model_config = SettingsConfigDict(
        env_prefix="AGENTIC_REVIEW_", env_nested_delimiter="__", extra="ignore"
    )

    # Sub-settings
    agents: AgentSettings = Field(default_factory=AgentSettings)
    github: GitHubSettings = Field(default_factory=GitHubSettings)
    workflow: WorkflowSettings = Field(default_factory=WorkflowSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Logging level"
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached global settings instance.

    Returns:
        Settings instance (cached).
    """
    return Settings()


def reset_settings() -> None:
    """Reset cached settings (useful for testing)."""
    get_settings.cache_clear()
