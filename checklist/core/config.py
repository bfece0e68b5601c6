"""Configuration management for the checklist service."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEV_SECRET_KEY = "dev-insecure-secret-key"  # noqa: S105


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # SQLite Configuration
    sqlite_db_path: str = Field(default="./data/checklist.db", description="Path to the SQLite database file")

    # Session Configuration
    secret_key: str = Field(default=DEV_SECRET_KEY, description="Key used to sign session tokens")
    session_max_age_seconds: int = Field(default=86400, description="Maximum age of a session token (in seconds)")

    # Environment
    environment: str = Field(default="development", description="Deployment environment (development|production)")

    # Pydantic Logfire Configuration (optional)
    logfire_token: str | None = Field(default=None, description="Pydantic Logfire token for observability")

    # Checklist Configuration
    grace_period_minutes: int = Field(
        default=30, description="Minutes after a task's scheduled time during which completion still counts as on time"
    )

    @property
    def is_production(self) -> bool:
        """Whether the service runs in production."""
        return self.environment.lower() == "production"

    def require_credential(self, field_name: str, service_name: str) -> str:
        """Validate that a required credential is set, raising a clear error if missing.

        Args:
            field_name: Name of the field to check
            service_name: Human-readable service name for error message

        Returns:
            The credential value

        Raises:
            ValueError: If the credential is None or empty
        """
        value = getattr(self, field_name)
        if not value:
            raise ValueError(
                f"{service_name} credential not configured. "
                f"Set {field_name.upper()} environment variable or add to .env file."
            )
        return value


# Application Constants
class Constants:
    """Application-wide constants."""

    # HTTP Status Codes
    HTTP_OK: int = 200
    HTTP_BAD_REQUEST: int = 400
    HTTP_UNAUTHORIZED: int = 401
    HTTP_FORBIDDEN: int = 403
    HTTP_NOT_FOUND: int = 404
    HTTP_SERVER_ERROR: int = 500

    # Pagination Defaults
    DEFAULT_PER_PAGE_LIMIT: int = 100  # Default pagination limit for list queries
    MAX_PER_PAGE_LIMIT: int = 500  # Page size used when draining a whole collection

    # Chunk size for "(id = a || id = b ...)" batch queries
    ID_CHUNK_SIZE: int = 50

    # Template detail view
    RECENT_COMPLETIONS_LIMIT: int = 10

    # Priority ordering (lower sorts first)
    PRIORITY_RANK: dict[str, int] = {"high": 0, "medium": 1, "low": 2}  # noqa: RUF012

    # Weeks start on Monday (datetime.weekday numbering)
    WEEK_START: int = 0

    # Scheduled day ranges per frequency
    WEEKLY_DAY_RANGE: tuple[int, int] = (0, 6)  # 0=Sunday
    MONTHLY_DAY_RANGE: tuple[int, int] = (1, 31)

    # Paths
    PROJECT_ROOT: Path = Path(__file__).parent.parent.parent


def get_settings() -> Settings:
    """Get application settings (singleton pattern)."""
    return Settings()


# Global settings instance
settings = get_settings()
constants = Constants()
