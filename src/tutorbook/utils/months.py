"""Month key helpers.

A month key is a ``YYYY-MM`` string identifying a calendar month. Date ranges
are inclusive of both ends, matching how the ledger filters movements.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import date, datetime, timedelta

MONTH_KEY_PATTERN = re.compile(r"^(\d{4})-(0[1-9]|1[0-2])$")


def month_key(value: date | datetime) -> str:
    """Return the ``YYYY-MM`` key of a date or datetime."""
    return f"{value.year:04d}-{value.month:02d}"


def parse_month_key(key: str) -> tuple[int, int]:
    """Split a month key into ``(year, month)``.

    Raises:
        ValueError: If ``key`` is not a well-formed ``YYYY-MM`` string.
    """
    match = MONTH_KEY_PATTERN.match(key or "")
    if match is None:
        raise ValueError(f"Invalid month key: {key!r}")
    return int(match.group(1)), int(match.group(2))


def first_day(key: str) -> date:
    """Return the first day of the month identified by ``key``."""
    year, month = parse_month_key(key)
    return date(year, month, 1)


def last_day(key: str) -> date:
    """Return the last day of the month identified by ``key``."""
    return first_day(next_month_key(key)) - timedelta(days=1)


def next_month_key(key: str) -> str:
    year, month = parse_month_key(key)
    if month == 12:
        return f"{year + 1:04d}-01"
    return f"{year:04d}-{month + 1:02d}"


def previous_month_key(key: str) -> str:
    year, month = parse_month_key(key)
    if month == 1:
        return f"{year - 1:04d}-12"
    return f"{year:04d}-{month - 1:02d}"


def is_month_key(key: str) -> bool:
    return MONTH_KEY_PATTERN.match(key or "") is not None


@dataclass(frozen=True)
class MonthRange:
    """Inclusive range of calendar days spanning one or more whole months."""

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError("MonthRange start must not be after its end")

    @classmethod
    def for_month(cls, key: str) -> "MonthRange":
        return cls(first_day(key), last_day(key))

    @classmethod
    def between(cls, from_key: str, to_key: str) -> "MonthRange":
        """Return the range from the first day of ``from_key`` to the end of ``to_key``."""
        return cls(first_day(from_key), last_day(to_key))

    @classmethod
    def for_year(cls, year: int) -> "MonthRange":
        return cls(date(year, 1, 1), date(year, 12, 31))

    def contains(self, value: date | datetime) -> bool:
        day = value.date() if isinstance(value, datetime) else value
        return self.start <= day <= self.end

    def days(self) -> Iterator[date]:
        """Yield every calendar day in the range."""
        cursor = self.start
        while cursor <= self.end:
            yield cursor
            cursor += timedelta(days=1)

    def month_keys(self) -> list[str]:
        keys = [month_key(self.start)]
        last = month_key(self.end)
        while keys[-1] != last:
            keys.append(next_month_key(keys[-1]))
        return keys
