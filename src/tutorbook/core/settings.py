"""Application settings and configuration.

This module defines all configuration options for Tutorbook. Settings are
loaded from environment variables (or a ``.env`` file) with defaults that match
the practice's usual operating hours.
"""

from datetime import date, datetime, time, timedelta
from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application metadata
    app_name: str = Field(default="Tutorbook", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Database configuration
    database_url: str = Field(default="sqlite:///./tutorbook.db", alias="DATABASE_URL")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Operating window and slot capacity (local wall-clock times)
    opening_time: time = Field(default=time(16, 0), alias="OPENING_TIME")
    closing_time: time = Field(default=time(22, 0), alias="CLOSING_TIME")
    slot_minutes: int = Field(default=60, gt=0, alias="SLOT_MINUTES")
    max_per_slot: int = Field(default=10, ge=1, alias="MAX_PER_SLOT")
    # ISO weekday the calendar week starts on (1 = Monday)
    week_starts_on: int = Field(default=1, ge=1, le=7, alias="WEEK_STARTS_ON")

    # Recurrence defaults
    recurrence_default_weeks: int = Field(default=8, ge=1, alias="RECURRENCE_DEFAULT_WEEKS")
    default_session_title: str = Field(default="Class", alias="DEFAULT_SESSION_TITLE")

    # Monthly rollover
    rollover_on_startup: bool = Field(default=True, alias="ROLLOVER_ON_STARTUP")
    rollover_marker_path: Path = Field(
        default=Path(".tutorbook/local_state.json"),
        alias="ROLLOVER_MARKER_PATH",
    )
    rollover_marker_key: str = Field(default="rollover.doneFor", alias="ROLLOVER_MARKER_KEY")
    rollover_note: str = Field(default="Carried over from previous month", alias="ROLLOVER_NOTE")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(default=["*"], alias="CORS_ALLOW_HEADERS")

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
        populate_by_name=True,
    )

    @model_validator(mode="after")
    def _check_operating_window(self) -> "Settings":
        """Reject windows that are empty or not a whole number of slots."""
        window = self.window_length
        if window <= timedelta(0):
            raise ValueError("CLOSING_TIME must be after OPENING_TIME")
        if window % self.slot_width:
            raise ValueError("operating window must be a whole number of slots")
        return self

    @property
    def slot_width(self) -> timedelta:
        """Return the width of a single time bucket."""
        return timedelta(minutes=self.slot_minutes)

    @property
    def window_length(self) -> timedelta:
        """Return the length of the daily operating window."""
        anchor = date(2000, 1, 1)
        return datetime.combine(anchor, self.closing_time) - datetime.combine(
            anchor, self.opening_time
        )


settings = Settings()
