"""Calendar service: resolves the institution's "now" and delegates to a fetcher.

A fresh fetcher is built for every call from the localized instant and the
caller's session token. Whatever the fetcher returns or raises reaches the
caller untouched. Nothing here retries or translates errors.
"""

from __future__ import annotations

import datetime as dt
from typing import Callable, Optional, Protocol

from acadcal.config import get_settings
from acadcal.logging_config import get_logger
from acadcal.modules.calendar.clock import Clock, localized_now
from acadcal.modules.calendar.day_order import resolve_day_order
from acadcal.modules.calendar.fetcher import CalendarFetcher
from acadcal.modules.calendar.models import CalendarResponse, WrappedAvailability
from acadcal.modules.calendar.semester import wrapped_availability

logger = get_logger(__name__)


class Fetcher(Protocol):
    """Retrieval side of a session-scoped calendar fetcher."""

    async def get_calendar(self) -> CalendarResponse: ...


FetcherFactory = Callable[[dt.datetime, str], Fetcher]


class CalendarService:
    """Academic calendar retrieval for portal sessions."""

    def __init__(
        self,
        fetcher_factory: Optional[FetcherFactory] = None,
        timezone_name: Optional[str] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self._fetcher_factory = fetcher_factory or CalendarFetcher
        self._timezone_name = timezone_name or get_settings().institution_timezone
        self._clock = clock

    def now(self) -> dt.datetime:
        """Current instant in the institution's zone."""
        return localized_now(self._timezone_name, self._clock)

    async def get_calendar(self, token: str) -> CalendarResponse:
        """Fetch the calendar for ``token``, anchored on the institution's today."""
        response, _ = await self._get_anchored(token)
        return response

    async def _get_anchored(self, token: str) -> tuple[CalendarResponse, dt.date]:
        instant = self.now()
        fetcher = self._fetcher_factory(instant, token)
        return await fetcher.get_calendar(), instant.date()

    async def today_day_order(self, token: str) -> str:
        """Today's day order, or ``"Holiday"``."""
        response, today = await self._get_anchored(token)
        day_order = resolve_day_order(response, today)
        logger.debug("day_order_resolved", date=today.isoformat(), day_order=day_order)
        return day_order

    async def semester_status(self, token: str) -> WrappedAvailability:
        """Semester summary availability as of the institution's today."""
        response, today = await self._get_anchored(token)
        return wrapped_availability(response.calendar, today)


async def get_calendar(token: str) -> CalendarResponse:
    """Fetch the academic calendar for a portal session token."""
    return await CalendarService().get_calendar(token)
