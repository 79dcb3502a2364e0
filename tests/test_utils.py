"""Tests for month, money and collation helpers."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from tutorbook.utils.collation import name_sort_key
from tutorbook.utils.money import from_cents, to_cents, to_money
from tutorbook.utils.months import (
    MonthRange,
    first_day,
    is_month_key,
    last_day,
    month_key,
    next_month_key,
    parse_month_key,
    previous_month_key,
)


def test_month_key_of_date_and_datetime() -> None:
    assert month_key(date(2025, 3, 9)) == "2025-03"
    assert month_key(datetime(2024, 12, 31, 23, 59)) == "2024-12"


@pytest.mark.parametrize("key", ["2025-1", "2025-00", "2025-13", "25-01", "", "2025/01"])
def test_malformed_month_keys(key: str) -> None:
    assert not is_month_key(key)
    with pytest.raises(ValueError):
        parse_month_key(key)


def test_month_boundaries() -> None:
    assert first_day("2024-02") == date(2024, 2, 1)
    assert last_day("2024-02") == date(2024, 2, 29)
    assert last_day("2025-12") == date(2025, 12, 31)
    assert next_month_key("2025-12") == "2026-01"
    assert previous_month_key("2025-01") == "2024-12"


def test_month_range_is_inclusive() -> None:
    january = MonthRange.for_month("2025-01")
    assert january.contains(datetime(2025, 1, 31, 21, 59))
    assert january.contains(date(2025, 1, 1))
    assert not january.contains(datetime(2025, 2, 1, 0, 0))
    assert len(list(january.days())) == 31


def test_month_range_between_and_year() -> None:
    spring = MonthRange.between("2025-03", "2025-05")
    assert spring.month_keys() == ["2025-03", "2025-04", "2025-05"]
    assert len(MonthRange.for_year(2025).month_keys()) == 12
    with pytest.raises(ValueError):
        MonthRange(date(2025, 2, 1), date(2025, 1, 1))


def test_money_rounding_and_cents() -> None:
    assert to_money("10.005") == Decimal("10.01")
    assert to_money(3) == Decimal("3.00")
    assert to_cents(Decimal("12.34")) == 1234
    assert from_cents(1234) == Decimal("12.34")


@pytest.mark.parametrize("value", [True, "ten", float("inf"), None, "1e30"])
def test_money_rejects_non_numbers(value: object) -> None:
    with pytest.raises(ValueError):
        to_money(value)


def test_name_sort_key_ignores_case_and_accents() -> None:
    names = ["beatriz", "Álvaro", "Ana", "Ñandú", "Nora", "Oscar"]
    assert sorted(names, key=name_sort_key) == ["Álvaro", "Ana", "beatriz", "Nora", "Ñandú", "Oscar"]
