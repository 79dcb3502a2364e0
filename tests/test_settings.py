"""Tests for configuration loading and the error-to-status mapping."""

from datetime import datetime, time, timedelta

import pytest
from pydantic import ValidationError as PydanticValidationError

from tutorbook.core.errors import (
    CapacityExceededError,
    NotFoundError,
    StoreError,
    TutorbookError,
    ValidationError,
    status_code_for,
)
from tutorbook.core.settings import Settings


def test_defaults_match_operating_hours() -> None:
    settings = Settings()
    assert settings.opening_time == time(16)
    assert settings.closing_time == time(22)
    assert settings.max_per_slot == 10
    assert settings.slot_width == timedelta(hours=1)
    assert settings.window_length == timedelta(hours=6)


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MAX_PER_SLOT", "4")
    monkeypatch.setenv("OPENING_TIME", "15:00")
    settings = Settings()
    assert settings.max_per_slot == 4
    assert settings.opening_time == time(15)


@pytest.mark.parametrize(
    "overrides",
    [
        {"OPENING_TIME": "22:00", "CLOSING_TIME": "16:00"},
        {"SLOT_MINUTES": "50"},
        {"MAX_PER_SLOT": "0"},
    ],
)
def test_invalid_window_is_rejected(monkeypatch: pytest.MonkeyPatch, overrides: dict) -> None:
    for key, value in overrides.items():
        monkeypatch.setenv(key, value)
    with pytest.raises(PydanticValidationError):
        Settings()


@pytest.mark.parametrize(
    ("error", "expected"),
    [
        (ValidationError("bad"), 422),
        (CapacityExceededError(datetime(2025, 1, 6, 16), 10), 409),
        (NotFoundError("Session", 1), 404),
        (StoreError("down"), 503),
        (TutorbookError("other"), 500),
    ],
)
def test_status_codes(error: TutorbookError, expected: int) -> None:
    assert status_code_for(error) == expected
