"""Configuration management using Pydantic settings."""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from pr_tracker.errors import StartupConfigError

PUBLIC_API_URL = "https://api.github.com"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Required settings
    app_id: str = Field(
        ...,
        description="GitHub App ID",
    )
    private_key_path: Path = Field(
        ...,
        description="Path to the GitHub App private key (PEM)",
    )
    webhook_secret: str = Field(
        ...,
        description="Secret for validating GitHub webhook signatures",
    )

    # Optional settings
    enterprise_hostname: str | None = Field(
        default=None,
        description="GitHub Enterprise Server hostname. Unset means github.com.",
    )
    message_path: Path = Field(
        default=Path("message.md"),
        description="Markdown file posted as the comment on new pull requests",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    ack_before_handling: bool = Field(
        default=False,
        description="Respond to GitHub before the event handler has finished",
    )

    # Server settings
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=3000, description="Server port")
    webhook_path: str = Field(default="/api/webhook", description="Webhook route")


@dataclass(frozen=True)
class AppConfig:
    """Resolved, read-only configuration shared by every request."""

    app_id: str
    private_key: str
    webhook_secret: str
    pr_comment_template: str
    enterprise_hostname: str | None = None
    host: str = "0.0.0.0"
    port: int = 3000
    webhook_path: str = "/api/webhook"
    log_level: str = "INFO"
    ack_before_handling: bool = False

    @property
    def api_base_url(self) -> str:
        """Base URL for REST calls, honouring GitHub Enterprise Server."""
        if self.enterprise_hostname:
            return f"https://{self.enterprise_hostname}/api/v3"
        return PUBLIC_API_URL

    @property
    def local_webhook_url(self) -> str:
        return f"http://localhost:{self.port}{self.webhook_path}"


def _read_file(path: Path, what: str) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise StartupConfigError(f"Cannot read {what} at {path}: {e}") from e


def load_config(settings: Settings | None = None) -> AppConfig:
    """
    Build the immutable application config.

    Reads the private key and the comment template from disk once.

    Raises:
        StartupConfigError: If a required setting is missing or a file is unreadable
    """
    if settings is None:
        try:
            settings = get_settings()
        except ValidationError as e:
            missing = ", ".join(str(err["loc"][0]).upper() for err in e.errors())
            raise StartupConfigError(f"Invalid or missing configuration: {missing}") from e

    if not settings.webhook_secret:
        raise StartupConfigError("WEBHOOK_SECRET must not be empty")

    private_key = _read_file(settings.private_key_path, "private key")
    if "PRIVATE KEY" not in private_key:
        raise StartupConfigError(f"{settings.private_key_path} is not a PEM private key")

    return AppConfig(
        app_id=settings.app_id,
        private_key=private_key,
        webhook_secret=settings.webhook_secret,
        pr_comment_template=_read_file(settings.message_path, "message template"),
        enterprise_hostname=settings.enterprise_hostname or None,
        host=settings.host,
        port=settings.port,
        webhook_path=settings.webhook_path,
        log_level=settings.log_level,
        ack_before_handling=settings.ack_before_handling,
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()  # type: ignore[call-arg]
