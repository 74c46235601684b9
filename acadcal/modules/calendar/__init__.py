"""Academic calendar retrieval anchored on the institution's local date."""

from acadcal.modules.calendar.models import (
    CalendarFetchError,
    CalendarMonth,
    CalendarParseError,
    CalendarResponse,
    Day,
    PortalUnavailableError,
    SessionExpiredError,
)
from acadcal.modules.calendar.service import CalendarService, get_calendar

__all__ = [
    "CalendarService",
    "get_calendar",
    "CalendarResponse",
    "CalendarMonth",
    "Day",
    "CalendarFetchError",
    "SessionExpiredError",
    "PortalUnavailableError",
    "CalendarParseError",
]
