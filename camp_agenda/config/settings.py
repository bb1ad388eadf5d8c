import os
from pathlib import Path

from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_database_url() -> str:
    """Get database URL, using absolute path for SQLite to avoid path resolution issues.

    ⚠️ SQLite is fine for a single operator running the agenda service locally.
    Set DATABASE_URL to a PostgreSQL connection string for shared deployments.
    """
    db_url = os.getenv("DATABASE_URL", "")
    if db_url:
        logger.info(f"Using DATABASE_URL from environment: {db_url}")
        return db_url

    db_path = Path(__file__).parent.parent.parent / "camp_agenda.db"
    abs_path = db_path.resolve()
    db_url = f"sqlite:///{abs_path}"
    logger.warning(f"⚠️ Using SQLite database (LOCAL DEV ONLY): {db_url}")
    return db_url


class Settings(BaseSettings):
    database_url: str = Field(
        default_factory=get_database_url,
        validation_alias="DATABASE_URL",
    )
    environment: str = Field(
        default="development",
        validation_alias="ENVIRONMENT",
        description="development | staging | production; error details are only exposed in development",
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_file: str | None = Field(
        default=None,
        validation_alias="LOG_FILE",
        description="Optional log file written alongside the console sink",
    )
    api_base_url: str = Field(
        default="http://localhost:8000",
        validation_alias="API_BASE_URL",
        description="Base URL of the agenda service used by the agenda client",
    )
    request_timeout_seconds: float = Field(
        default=15.0,
        validation_alias="REQUEST_TIMEOUT_SECONDS",
        description="Timeout applied to every agenda client request",
    )
    ui_settle_delay_seconds: float = Field(
        default=0.1,
        validation_alias="UI_SETTLE_DELAY_SECONDS",
        description="Delay before the add-session dialog closes after a successful add",
    )
    export_dir: str = Field(
        default=".",
        validation_alias="EXPORT_DIR",
        description="Directory where agenda CSV exports are written",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate that log level is one of the standard logging levels."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in valid_levels:
            logger.warning(f"Invalid LOG_LEVEL '{value}'. Valid levels are: {', '.join(valid_levels)}. Defaulting to INFO.")
            return "INFO"
        return upper_value

    @field_validator("request_timeout_seconds", "ui_settle_delay_seconds")
    @classmethod
    def validate_non_negative(cls, value: float) -> float:
        """Reject negative durations."""
        if value < 0:
            raise ValueError("must be >= 0")
        return value

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"


settings = Settings()
