"""Session-scoped retrieval of the academic planner from the portal."""

from __future__ import annotations

import datetime as dt
import time
from typing import Optional

import httpx
from tenacity import AsyncRetrying, retry_if_exception, stop_after_attempt, wait_exponential

from acadcal.config import Settings, get_settings
from acadcal.logging_config import get_logger
from acadcal.modules.calendar.models import (
    CalendarMonth,
    CalendarResponse,
    PortalUnavailableError,
    SessionExpiredError,
)
from acadcal.modules.calendar.parsing import extract_page_html, find_day, find_month, parse_calendar

logger = get_logger(__name__)

_SIGN_IN_MARKERS = ("/accounts/signin", "signinFrame", "/accounts/p/", "login_id")


def _is_transient(exc: BaseException) -> bool:
    if isinstance(exc, httpx.TransportError):
        return True
    return isinstance(exc, PortalUnavailableError) and (exc.status_code or 0) >= 500


def _looks_like_sign_in(text: str) -> bool:
    return "pageSanitizer" not in text and any(marker in text for marker in _SIGN_IN_MARKERS)


class CalendarFetcher:
    """Fetches and parses the planner for one session token at one instant.

    The instant anchors ``today``/``tomorrow``/``dayAfterTomorrow`` and the
    current-month ``index`` of the response. Instances are meant to be used
    for a single retrieval and then discarded.
    """

    def __init__(
        self,
        now: dt.datetime,
        token: str,
        *,
        settings: Optional[Settings] = None,
    ) -> None:
        self._now = now
        self._token = token
        self._settings = settings or get_settings()

    @property
    def now(self) -> dt.datetime:
        return self._now

    @property
    def token(self) -> str:
        return self._token

    async def get_calendar(self) -> CalendarResponse:
        """Retrieve the planner and anchor it on the fetcher's instant.

        Raises:
            SessionExpiredError: the token is empty or rejected by the portal.
            PortalUnavailableError: the portal is unreachable or failing.
            CalendarParseError: the page holds no recognizable planner.
        """
        if not self._token.strip():
            raise SessionExpiredError("No session token supplied")

        started = time.monotonic()
        page = await self._fetch_page()
        calendar = parse_calendar(extract_page_html(page))
        response = self._anchor(calendar)

        logger.info(
            "calendar_fetched",
            months=len(calendar),
            index=response.index,
            anchored_on=self._now.date().isoformat(),
            duration_ms=int((time.monotonic() - started) * 1000),
        )
        return response

    def _headers(self) -> dict[str, str]:
        return {
            "Accept": "text/html,application/xhtml+xml,*/*;q=0.8",
            "Cookie": self._token,
            "X-CSRF-Token": self._token,
            "Connection": "keep-alive",
        }

    async def _fetch_page(self) -> str:
        settings = self._settings
        url = settings.calendar_url
        try:
            async with httpx.AsyncClient(
                timeout=settings.portal_timeout_seconds,
                follow_redirects=False,
            ) as client:
                async for attempt in AsyncRetrying(
                    stop=stop_after_attempt(settings.portal_max_attempts),
                    wait=wait_exponential(
                        multiplier=settings.portal_retry_backoff_seconds, max=10,
                    ),
                    retry=retry_if_exception(_is_transient),
                    reraise=True,
                ):
                    with attempt:
                        if attempt.retry_state.attempt_number > 1:
                            logger.warning(
                                "portal_retry",
                                attempt=attempt.retry_state.attempt_number,
                            )
                        response = await client.get(url, headers=self._headers())
                        if response.status_code >= 500:
                            raise PortalUnavailableError(
                                f"Portal returned HTTP {response.status_code}",
                                status_code=response.status_code,
                            )
        except httpx.TransportError as exc:
            logger.error("portal_unreachable", url=url, error=f"{type(exc).__name__}: {exc}")
            raise PortalUnavailableError(f"Portal unreachable: {exc}") from exc

        return self._check_response(response)

    def _check_response(self, response: httpx.Response) -> str:
        status = response.status_code
        if status in (401, 403):
            raise SessionExpiredError(f"Portal rejected the session (HTTP {status})")
        if 300 <= status < 400:
            location = response.headers.get("location", "")
            if any(marker in location for marker in _SIGN_IN_MARKERS) or "signin" in location.lower():
                raise SessionExpiredError("Portal redirected to sign-in")
            raise PortalUnavailableError(
                f"Unexpected redirect to {location or '<none>'}", status_code=status,
            )
        if status >= 400:
            raise PortalUnavailableError(f"Portal returned HTTP {status}", status_code=status)

        text = response.text
        if _looks_like_sign_in(text):
            raise SessionExpiredError("Portal served the sign-in page")
        return text

    def _anchor(self, calendar: list[CalendarMonth]) -> CalendarResponse:
        today = self._now.date()
        index = find_month(calendar, today)
        return CalendarResponse(
            calendar=calendar,
            today=find_day(calendar, today),
            tomorrow=find_day(calendar, today + dt.timedelta(days=1)),
            day_after_tomorrow=find_day(calendar, today + dt.timedelta(days=2)),
            index=index if index is not None else 0,
        )
