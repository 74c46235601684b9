"""API route definitions for acadcal."""

from __future__ import annotations

from typing import Any, NoReturn, Optional
from urllib.parse import unquote

from fastapi import APIRouter, Cookie, Header, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from acadcal import __version__
from acadcal.logging_config import get_logger
from acadcal.modules.calendar.day_order import HOLIDAY
from acadcal.modules.calendar.models import (
    CalendarFetchError,
    CalendarParseError,
    PortalUnavailableError,
    SessionExpiredError,
)
from acadcal.modules.calendar.service import CalendarService

logger = get_logger(__name__)

router = APIRouter()

_service: Optional[CalendarService] = None

MISSING_SESSION_MESSAGE = (
    "Cannot find a session cookie, you might have blocked cookies or you are not logged in."
)


def set_calendar_service(service: Optional[CalendarService]) -> None:
    """Install the calendar service used by the routes."""
    global _service
    _service = service


def get_calendar_service() -> CalendarService:
    """Return the installed calendar service, creating a default one if needed."""
    global _service
    if _service is None:
        _service = CalendarService()
    return _service


# ── Request / Response Models ────────────────────────────────────────

class DayOrderResponse(BaseModel):
    """Today's day order."""

    model_config = ConfigDict(populate_by_name=True)

    day_order: str = Field(alias="dayOrder")
    holiday: bool = False


# ── Helpers ──────────────────────────────────────────────────────────

def session_token(header: Optional[str], cookie: Optional[str]) -> str:
    """Pick the portal session from the ``X-CSRF-Token`` header or ``token`` cookie."""
    value = header or (unquote(cookie) if cookie else None)
    if not value:
        raise HTTPException(status_code=401, detail=MISSING_SESSION_MESSAGE)
    return value


def _raise_http(exc: CalendarFetchError) -> NoReturn:
    """Translate a fetch failure into an HTTP error for the client."""
    if isinstance(exc, SessionExpiredError):
        raise HTTPException(status_code=401, detail=str(exc)) from exc
    if isinstance(exc, (PortalUnavailableError, CalendarParseError)):
        logger.warning("calendar_upstream_failed", error=f"{type(exc).__name__}: {exc}")
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    raise HTTPException(status_code=500, detail=str(exc)) from exc


# ── Health ───────────────────────────────────────────────────────────

@router.get("/health")
async def health() -> dict[str, Any]:
    """Liveness probe."""
    service = get_calendar_service()
    now = service.now()
    return {
        "status": "healthy",
        "version": __version__,
        "timezone": str(now.tzinfo),
        "institution_time": now.isoformat(),
    }


# ── Calendar ─────────────────────────────────────────────────────────

@router.get("/calendar")
async def calendar(
    x_csrf_token: Optional[str] = Header(None),
    token: Optional[str] = Cookie(None),
) -> dict[str, Any]:
    """Academic calendar for the caller's portal session."""
    session = session_token(x_csrf_token, token)
    try:
        response = await get_calendar_service().get_calendar(session)
    except CalendarFetchError as exc:
        _raise_http(exc)
    return response.model_dump(by_alias=True)


@router.get("/calendar/day-order")
async def day_order(
    x_csrf_token: Optional[str] = Header(None),
    token: Optional[str] = Cookie(None),
) -> dict[str, Any]:
    """Today's day order for the caller's institution."""
    session = session_token(x_csrf_token, token)
    try:
        value = await get_calendar_service().today_day_order(session)
    except CalendarFetchError as exc:
        _raise_http(exc)
    return DayOrderResponse(day_order=value, holiday=value == HOLIDAY).model_dump(by_alias=True)


@router.get("/calendar/semester")
async def semester(
    x_csrf_token: Optional[str] = Header(None),
    token: Optional[str] = Cookie(None),
) -> dict[str, Any]:
    """End-of-semester window status for the caller's calendar."""
    session = session_token(x_csrf_token, token)
    try:
        status = await get_calendar_service().semester_status(session)
    except CalendarFetchError as exc:
        _raise_http(exc)
    return status.model_dump(by_alias=True)
