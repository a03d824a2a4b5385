"""Application configuration using pydantic-settings."""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="forbid",
    )

    # Application Configuration
    environment: Literal["development", "staging", "production"] = "development"
    log_level: str = "INFO"
    debug: bool = True

    # Storage
    data_dir: Path = Field(
        default=Path("./data"),
        description="Directory holding the audit log and approval queue",
    )
    approval_backend: Literal["sqlite", "markdown"] = Field(
        default="sqlite",
        description="Storage backend for the approval queue",
    )

    @property
    def audit_log_path(self) -> Path:
        """Append-only audit log file."""
        return self.data_dir / "run_log.md"

    @property
    def approvals_db_path(self) -> Path:
        """SQLite approval table."""
        return self.data_dir / "approvals.db"

    @property
    def approvals_markdown_path(self) -> Path:
        """Legacy Markdown approval queue."""
        return self.data_dir / "approvals.md"

    # Local model (free tier)
    ollama_host: str = Field(
        default="http://localhost:11434",
        description="Ollama server URL",
    )
    ollama_model: str = "qwen3:8b"

    # Cheap paid model (planner, default workers)
    openai_api_key: str = Field(
        default="",
        description="OpenAI API key for the cheap model tier",
    )
    openai_model: str = "gpt-4o-mini"

    # High-capability model (classifier escalation, synthesis)
    anthropic_api_key: str = Field(
        default="",
        description="Anthropic API key for the high-capability tier",
    )
    anthropic_model: str = "claude-sonnet-4-6"

    llm_timeout_seconds: float = Field(
        default=30.0,
        description="Per-request timeout for model calls",
    )

    # Classifier
    classifier_confidence_floor: int = Field(
        default=80,
        description="Minimum confidence accepted from the local model",
    )
    classifier_local_attempts: int = Field(
        default=2,
        description="Local model attempts before escalating",
    )

    # Orchestrator
    worker_timeout_seconds: float = Field(
        default=60.0,
        description="Hard wall-clock timeout per worker call",
    )
    max_subtasks: int = Field(
        default=6,
        description="Upper bound on sub-tasks per orchestrated job",
    )
    worker_endpoints: dict[str, str] = Field(
        default_factory=dict,
        description="Worker name to HTTP endpoint; unlisted workers use the cheap model",
    )

    # Notifications
    notify_webhook_url: str = Field(
        default="",
        description="Webhook notified when an approval is queued",
    )

    # FastAPI Configuration
    fastapi_host: str = "0.0.0.0"
    fastapi_port: int = 8000
    fastapi_reload: bool = False

    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"

    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"


# Global settings instance
settings = Settings()
