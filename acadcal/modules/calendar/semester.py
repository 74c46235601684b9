"""Semester timings derived from the academic planner."""

from __future__ import annotations

import datetime as dt
from typing import Optional

from acadcal.logging_config import get_logger
from acadcal.modules.calendar.models import CalendarMonth, Day, WrappedAvailability
from acadcal.modules.calendar.parsing import parse_month_label

logger = get_logger(__name__)

# Days after the last working day during which the semester summary is offered.
AVAILABILITY_WINDOW_DAYS = 30

LAST_DAY_EVENTS = ("Last Working Day", "End of Semester", "Last Day of Classes")
EXAM_START_EVENTS = ("Examination Begins", "Final Exams Begin", "End of Teaching Period")


def _mentions(day: Day, phrases: tuple[str, ...]) -> bool:
    return bool(day.event) and any(phrase in day.event for phrase in phrases)


def find_last_working_day(calendar: list[CalendarMonth]) -> Optional[tuple[Day, str]]:
    """Locate the semester's last working day.

    Looks for an explicit last-day event first, then for the day before
    the examinations start, and finally falls back to the last planner day.

    Returns:
        Tuple of (day, month label), or None for an empty planner.
    """
    for month in calendar:
        for day in month.days:
            if _mentions(day, LAST_DAY_EVENTS):
                return day, month.month

    for month in calendar:
        for position, day in enumerate(month.days):
            if _mentions(day, EXAM_START_EVENTS):
                if position > 0:
                    return month.days[position - 1], month.month
                return day, month.month

    if calendar and calendar[-1].days:
        return calendar[-1].days[-1], calendar[-1].month
    return None


def parse_calendar_date(
    value: str,
    month: Optional[str] = None,
    today: Optional[dt.date] = None,
) -> Optional[dt.date]:
    """Parse a planner date, either ``DD-MM-YYYY`` or a day number plus month label."""
    text = (value or "").strip()
    try:
        if "-" in text:
            day_number, month_number, year = (int(part) for part in text.split("-"))
            return dt.date(year, month_number, day_number)

        if month:
            parsed = parse_month_label(month)
            if not parsed:
                logger.warning("unknown_month_label", month=month)
                return None
            month_number, year = parsed
            if year is None:
                year = (today or dt.date.today()).year
            return dt.date(year, month_number, int(text))
    except ValueError as exc:
        logger.warning("calendar_date_unparseable", value=text, month=month, error=str(exc))
        return None

    logger.warning("calendar_date_insufficient", value=text, month=month)
    return None


def semester_id(
    day: Optional[Day] = None,
    month: Optional[str] = None,
    today: Optional[dt.date] = None,
) -> str:
    """Identifier of the semester a day belongs to: ``"2025-1"`` (Jan-Jun) or ``"2025-2"``."""
    reference = today or dt.date.today()
    year, month_number = reference.year, reference.month

    if day is not None:
        parts = day.date.strip().split("-")
        if len(parts) == 3 and all(p.isdigit() for p in parts):
            year, month_number = int(parts[2]), int(parts[1])
        elif month:
            parsed = parse_month_label(month)
            if parsed:
                month_number = parsed[0]
                year = parsed[1] or reference.year

    half = "1" if month_number <= 6 else "2"
    return f"{year}-{half}"


def wrapped_availability(
    calendar: list[CalendarMonth],
    today: dt.date,
) -> WrappedAvailability:
    """Whether ``today`` falls inside the window after the last working day."""
    found = find_last_working_day(calendar)
    if not found:
        return WrappedAvailability(semester_id=semester_id(today=today))

    last_day, month = found
    ident = semester_id(last_day, month, today)
    last_date = parse_calendar_date(last_day.date, month, today)
    if last_date is None:
        return WrappedAvailability(last_working_day=last_day, semester_id=ident)

    window_end = last_date + dt.timedelta(days=AVAILABILITY_WINDOW_DAYS)
    if today < last_date:
        return WrappedAvailability(
            days_until_last_working_day=(last_date - today).days,
            last_working_day=last_day,
            semester_id=ident,
        )
    if today <= window_end:
        return WrappedAvailability(
            is_available=True,
            days_remaining=(window_end - today).days,
            days_until_last_working_day=0,
            last_working_day=last_day,
            semester_id=ident,
        )
    return WrappedAvailability(last_working_day=last_day, semester_id=ident)
