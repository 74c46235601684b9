"""Data models and errors for academic calendar retrieval."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Day(BaseModel):
    """A single day row of the academic planner."""

    model_config = ConfigDict(populate_by_name=True)

    date: str
    day: str = ""
    event: str = ""
    day_order: str = Field(default="", alias="dayOrder")

    @property
    def day_of_month(self) -> Optional[int]:
        """Day-of-month number, for both ``"5"`` and ``"05-07-2025"`` forms."""
        head = self.date.strip().split("-", 1)[0]
        return int(head) if head.isdigit() else None


class CalendarMonth(BaseModel):
    """One month column of the planner, e.g. ``"Jul '25"``."""

    month: str
    days: list[Day] = Field(default_factory=list)


class CalendarResponse(BaseModel):
    """Calendar data for a session, anchored on the instant it was fetched for."""

    model_config = ConfigDict(populate_by_name=True)

    calendar: list[CalendarMonth] = Field(default_factory=list)
    today: Optional[Day] = None
    tomorrow: Optional[Day] = None
    day_after_tomorrow: Optional[Day] = Field(default=None, alias="dayAfterTomorrow")
    index: int = 0


class WrappedAvailability(BaseModel):
    """Whether the end-of-semester summary window is open."""

    model_config = ConfigDict(populate_by_name=True)

    is_available: bool = Field(default=False, alias="isAvailable")
    days_remaining: Optional[int] = Field(default=None, alias="daysRemaining")
    days_until_last_working_day: Optional[int] = Field(
        default=None, alias="daysUntilLastWorkingDay",
    )
    last_working_day: Optional[Day] = Field(default=None, alias="lastWorkingDay")
    semester_id: str = Field(default="", alias="semesterId")


class CalendarFetchError(Exception):
    """Base class for failures retrieving the calendar from the portal."""


class SessionExpiredError(CalendarFetchError):
    """The portal rejected the session token."""


class PortalUnavailableError(CalendarFetchError):
    """The portal could not be reached or answered with an error status."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class CalendarParseError(CalendarFetchError):
    """The portal page did not contain a recognizable calendar."""
