"""Shared test fixtures and configuration."""

from __future__ import annotations

import datetime as dt
import os
from unittest.mock import AsyncMock, MagicMock
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import pytest
import structlog

os.environ.setdefault("ACADCAL_ENV", "test")
os.environ.setdefault("ACADCAL_LOG_LEVEL", "WARNING")
os.environ.setdefault("PORTAL_BASE_URL", "https://portal.example.edu")
os.environ.setdefault("PORTAL_CALENDAR_PATH", "/academic/planner")
os.environ.setdefault("PORTAL_RETRY_BACKOFF_SECONDS", "0")

from acadcal.config import Settings
from acadcal.modules.calendar.models import CalendarMonth, CalendarResponse, Day


def _ist_available() -> bool:
    try:
        ZoneInfo("Asia/Kolkata")
    except (ZoneInfoNotFoundError, ValueError, OSError):
        return False
    return True


IST_AVAILABLE = _ist_available()


PLANNER_HTML = """
<html><body>
<div class="planner">
<table>
  <tr>
    <th>Dt</th><th>Day</th><th><strong>Jul '25</strong></th><th>DO</th><th></th>
    <th>Dt</th><th>Day</th><th><strong>Aug '25</strong></th><th>DO</th><th></th>
  </tr>
  <tr>
    <td>1</td><td>Tue</td><td>Enrichment Day</td><td>1</td><td></td>
    <td>1</td><td>Fri</td><td></td><td>5</td><td></td>
  </tr>
  <tr>
    <td>2</td><td>Wed</td><td></td><td>2</td><td></td>
    <td>2</td><td>Sat</td><td></td><td>-</td><td></td>
  </tr>
  <tr>
    <td>3</td><td>Thu</td><td></td><td>3</td><td></td>
    <td>3</td><td>Sun</td><td></td><td>-</td><td></td>
  </tr>
  <tr>
    <td>31</td><td>Thu</td><td></td><td>4</td><td></td>
    <td>31</td><td>Sun</td><td></td><td>-</td><td></td>
  </tr>
</table>
</div>
</body></html>
"""


def sanitize(html: str) -> str:
    """Wrap HTML the way the portal embeds page bodies in a script."""
    escaped = "".join(
        f"\\x{ord(c):02x}" if c in "<>'\"" else ("\\-" if c == "-" else c)
        for c in html
    )
    return f"<html><script>pageSanitizer.sanitize('{escaped}');</script></html>"


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Drop logging config bound to a per-test stderr so later tests don't write to a closed stream."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def settings() -> Settings:
    """Return test settings."""
    return Settings(
        acadcal_env="test",
        acadcal_log_level="WARNING",
        portal_base_url="https://portal.example.edu",
        portal_calendar_path="/academic/planner",
        portal_max_attempts=3,
        portal_retry_backoff_seconds=0,
        _env_file=None,
    )


@pytest.fixture
def planner_html() -> str:
    return PLANNER_HTML


@pytest.fixture
def sanitized_planner_html() -> str:
    return sanitize(PLANNER_HTML)


@pytest.fixture
def ist_zone() -> ZoneInfo:
    """The institution zone; skips when the host has no tz data for it."""
    if not IST_AVAILABLE:
        pytest.skip("Asia/Kolkata tz data not installed")
    return ZoneInfo("Asia/Kolkata")


@pytest.fixture
def sample_calendar() -> list[CalendarMonth]:
    """Two planner months ending with an explicit last working day."""
    return [
        CalendarMonth(month="Jul '25", days=[
            Day(date="30", day="Wed", day_order="2"),
            Day(date="31", day="Thu", day_order="3"),
        ]),
        CalendarMonth(month="Aug '25", days=[
            Day(date="1", day="Fri", day_order="4"),
            Day(date="2", day="Sat", day_order="-"),
            Day(date="14", day="Thu", event="Last Working Day", day_order="5"),
            Day(date="15", day="Fri", event="Independence Day - Holiday", day_order="-"),
        ]),
    ]


@pytest.fixture
def sample_response(sample_calendar) -> CalendarResponse:
    return CalendarResponse(
        calendar=sample_calendar,
        today=sample_calendar[0].days[1],
        tomorrow=sample_calendar[1].days[0],
        day_after_tomorrow=sample_calendar[1].days[1],
        index=0,
    )


@pytest.fixture
def fixed_clock():
    """Clock pinned to 2025-07-31 04:30 UTC (10:00 IST), rendered in the zone asked for."""
    def _clock(tz: dt.tzinfo) -> dt.datetime:
        return dt.datetime(2025, 7, 31, 4, 30, tzinfo=dt.UTC).astimezone(tz)
    return _clock


@pytest.fixture
def mock_fetcher(sample_response):
    """A fetcher double returning the sample response."""
    fetcher = MagicMock()
    fetcher.get_calendar = AsyncMock(return_value=sample_response)
    return fetcher


@pytest.fixture
def fetcher_factory(mock_fetcher):
    """A factory double recording every (instant, token) construction."""
    return MagicMock(return_value=mock_fetcher)
