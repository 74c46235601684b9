"""Institution-local "now" with a UTC fallback.

Day-boundary sensitive lookups (today's schedule, today's day order) have
to use the institution's civil date rather than the host's. When the host
has no usable tz data the lookup degrades to UTC instead of failing.
"""

from __future__ import annotations

import datetime as dt
from typing import Callable, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from acadcal.logging_config import get_logger

logger = get_logger(__name__)

INSTITUTION_TIMEZONE = "Asia/Kolkata"

Clock = Callable[[dt.tzinfo], dt.datetime]


def resolve_timezone(name: str = INSTITUTION_TIMEZONE) -> tuple[dt.tzinfo, bool]:
    """Load ``name`` from the tz database.

    Returns:
        Tuple of (zone, preferred) where ``preferred`` is False when the
        lookup failed and UTC was substituted.
    """
    try:
        return ZoneInfo(name), True
    except (ZoneInfoNotFoundError, ValueError, OSError) as exc:
        logger.warning(
            "timezone_fallback",
            timezone=name,
            fallback="UTC",
            error=f"{type(exc).__name__}: {exc}",
        )
        return dt.UTC, False


def localized_now(
    name: str = INSTITUTION_TIMEZONE,
    now: Optional[Clock] = None,
) -> dt.datetime:
    """Current instant in the institution's zone (or UTC on fallback)."""
    zone, _ = resolve_timezone(name)
    clock = now or dt.datetime.now
    return clock(zone)
