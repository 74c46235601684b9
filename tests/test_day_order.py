"""Tests for day order normalization and resolution."""

from __future__ import annotations

import datetime as dt

import pytest

from acadcal.modules.calendar.day_order import (
    DEFAULT_DAY_ORDER,
    HOLIDAY,
    parse_day_order,
    resolve_day_order,
)
from acadcal.modules.calendar.models import CalendarMonth, CalendarResponse, Day


class TestParseDayOrder:
    """Tests for parse_day_order."""

    @pytest.mark.parametrize("raw,expected", [
        (None, "1"),
        ("", "1"),
        ("   ", "1"),
        ("3", "3"),
        (" 4 ", "4"),
        ("Day-2", "2"),
        ("DO-5", "5"),
        ("Order 2", "2"),
        ("holiday", HOLIDAY),
        ("Holiday", HOLIDAY),
        ("-", HOLIDAY),
        ("---", HOLIDAY),
        ("null", HOLIDAY),
        ("undefined", HOLIDAY),
        ("Exam", "1"),
    ])
    def test_normalization(self, raw, expected) -> None:
        assert parse_day_order(raw) == expected


def _response(calendar_order: str | None = None, today_order: str | None = None) -> CalendarResponse:
    days = [Day(date="31", day="Thu", day_order=calendar_order)] if calendar_order is not None else []
    return CalendarResponse(
        calendar=[CalendarMonth(month="Jul '25", days=days)],
        today=Day(date="31", day="Thu", day_order=today_order) if today_order is not None else None,
    )


TODAY = dt.date(2025, 7, 31)


class TestResolveDayOrder:
    """Tests for resolve_day_order."""

    def test_from_planner(self) -> None:
        assert resolve_day_order(_response("3"), TODAY) == "3"

    def test_planner_wins_over_today_when_specific(self) -> None:
        assert resolve_day_order(_response("3", "4"), TODAY) == "3"

    def test_today_fills_missing_planner_entry(self) -> None:
        assert resolve_day_order(_response(None, "4"), TODAY) == "4"

    def test_today_overrides_default(self) -> None:
        assert resolve_day_order(_response("", "2"), TODAY) == "2"

    def test_today_overrides_holiday_with_number(self) -> None:
        assert resolve_day_order(_response("-", "5"), TODAY) == "5"

    def test_holiday_kept_when_today_unspecific(self) -> None:
        assert resolve_day_order(_response("-", "1"), TODAY) == HOLIDAY

    def test_default_replaced_by_today_holiday(self) -> None:
        assert resolve_day_order(_response("", "Holiday"), TODAY) == HOLIDAY

    def test_nothing_known(self) -> None:
        assert resolve_day_order(CalendarResponse(), TODAY) == DEFAULT_DAY_ORDER

    def test_other_month_ignored(self) -> None:
        assert resolve_day_order(_response("3"), dt.date(2025, 8, 31)) == DEFAULT_DAY_ORDER
