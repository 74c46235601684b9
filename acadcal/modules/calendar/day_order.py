"""Day order normalization.

The portal publishes the rotating timetable day as free text ("3",
"Day-2", "-", "Holiday", sometimes "null"). These helpers reduce it to
either a day-order number string or ``HOLIDAY``.
"""

from __future__ import annotations

import datetime as dt
import re
from typing import Optional

from acadcal.logging_config import get_logger
from acadcal.modules.calendar.models import CalendarResponse
from acadcal.modules.calendar.parsing import find_day

logger = get_logger(__name__)

HOLIDAY = "Holiday"
DEFAULT_DAY_ORDER = "1"

_TRAILING_DIGITS_RE = re.compile(r"(\d+)$")
_NON_WORKING_MARKERS = ("---", "null", "undefined")


def parse_day_order(value: Optional[str]) -> str:
    """Normalize a raw day-order cell."""
    if not value or not value.strip():
        return DEFAULT_DAY_ORDER

    text = value.strip()
    if text.lower() == "holiday" or text == "-":
        return HOLIDAY
    if any(marker in text for marker in _NON_WORKING_MARKERS):
        return HOLIDAY

    match = _TRAILING_DIGITS_RE.search(text)
    if match:
        return match.group(1)

    logger.debug("unparseable_day_order", value=text)
    return DEFAULT_DAY_ORDER


def is_specific(day_order: str) -> bool:
    """True for a day order other than the holiday marker and the default."""
    return day_order not in (HOLIDAY, DEFAULT_DAY_ORDER)


def resolve_day_order(response: CalendarResponse, today: dt.date) -> str:
    """Today's day order, preferring the planner row and then ``response.today``.

    A specific number from ``response.today`` overrides a planner lookup
    that was missing, the default, or a holiday. A holiday from the planner
    is kept when ``response.today`` has nothing more specific.
    """
    determined: Optional[str] = None

    entry = find_day(response.calendar, today)
    if entry is not None:
        determined = parse_day_order(entry.day_order)

    if response.today is not None and response.today.day_order and not (
        determined and is_specific(determined)
    ):
        from_today = parse_day_order(response.today.day_order)
        if is_specific(from_today):
            determined = from_today
        elif determined is None or determined == DEFAULT_DAY_ORDER:
            determined = from_today

    return determined or DEFAULT_DAY_ORDER
