"""Parsing of the academic planner page served by the portal.

The planner is a single wide table. Each month occupies a group of columns
in the order date, weekday, event, day order (followed by an optional spacer
column), and the month label ("Jul '25") sits in the event column of the
header row.
"""

from __future__ import annotations

import datetime as dt
import re
from typing import Optional

from bs4 import BeautifulSoup, Tag

from acadcal.logging_config import get_logger
from acadcal.modules.calendar.models import CalendarMonth, CalendarParseError, Day

logger = get_logger(__name__)

_MONTH_NAMES = (
    "january", "february", "march", "april", "may", "june",
    "july", "august", "september", "october", "november", "december",
)
_MONTHS: dict[str, int] = {}
for _number, _name in enumerate(_MONTH_NAMES, start=1):
    _MONTHS[_name] = _number
    _MONTHS[_name[:3]] = _number
_MONTHS["sept"] = 9

_MONTH_LABEL_RE = re.compile(r"^\s*([A-Za-z]{3,9})\.?\s*[’']?\s*(\d{4}|\d{2})?\s*$")
_SANITIZE_RE = re.compile(r"pageSanitizer\.sanitize\('(?P<body>.*?)'\)\s*;", re.DOTALL)
_ESCAPE_RE = re.compile(r"\\(?:x([0-9a-fA-F]{2})|(.))", re.DOTALL)

# Position of each field inside a month's column group.
_DATE, _WEEKDAY, _EVENT, _DAY_ORDER = range(4)


def _unescape(match: re.Match[str]) -> str:
    if match.group(1):
        return chr(int(match.group(1), 16))
    return match.group(2)


def extract_page_html(text: str) -> str:
    """Return the HTML of a portal page, unwrapping the sanitizer payload if present."""
    match = _SANITIZE_RE.search(text)
    if not match:
        return text
    return _ESCAPE_RE.sub(_unescape, match.group("body"))


def parse_month_label(label: str) -> Optional[tuple[int, Optional[int]]]:
    """Parse ``"Jul '25"``, ``"May'25"`` or ``"August 2025"``.

    Returns:
        Tuple of (month number, four-digit year or None), or None when the
        label is not a month.
    """
    match = _MONTH_LABEL_RE.match(label or "")
    if not match:
        return None
    month = _MONTHS.get(match.group(1).lower())
    if month is None:
        return None
    year_text = match.group(2)
    if not year_text:
        return month, None
    year = int(year_text)
    return month, (2000 + year if year < 100 else year)


def _cell_text(cell: Tag) -> str:
    return cell.get_text(" ", strip=True)


def _colspan(cell: Tag) -> int:
    span = str(cell.get("colspan", "1")).strip()
    return int(span) if span.isdigit() and int(span) > 0 else 1


def _cells(row: Tag, names: list[str]) -> list[Tag]:
    return row.find_all(names, recursive=False)


def _rows(table: Tag) -> list[Tag]:
    """Rows of ``table`` itself, leaving out those of nested tables."""
    rows: list[Tag] = []
    for child in table.find_all(["thead", "tbody", "tfoot", "tr"], recursive=False):
        if child.name == "tr":
            rows.append(child)
        else:
            rows.extend(child.find_all("tr", recursive=False))
    return rows


def _month_columns(row: Tag) -> list[tuple[int, str]]:
    """Month labels in a row, paired with the first column of their group."""
    labels: list[tuple[int, str]] = []
    column = 0
    for cell in _cells(row, ["th", "td"]):
        span = _colspan(cell)
        text = _cell_text(cell)
        if parse_month_label(text):
            start = column if span > 1 else max(column - _EVENT, 0)
            labels.append((start, text))
        column += span
    return labels


def parse_calendar(html: str) -> list[CalendarMonth]:
    """Extract the planner months from portal HTML.

    Raises:
        CalendarParseError: if no table with month headers is present.
    """
    soup = BeautifulSoup(html, "html.parser")

    for table in soup.find_all("table"):
        rows = _rows(table)
        for header_index, row in enumerate(rows):
            labels = _month_columns(row)
            if labels:
                return _read_months(rows[header_index + 1:], labels)

    raise CalendarParseError("No academic planner table found in portal page")


def _read_months(rows: list[Tag], labels: list[tuple[int, str]]) -> list[CalendarMonth]:
    months = [CalendarMonth(month=label) for _, label in labels]

    for row in rows:
        cells = _cells(row, ["td"])
        if not cells:
            continue
        for (start, _), month in zip(labels, months):
            group = [_cell_text(c) for c in cells[start:start + 4]]
            if not group or not group[_DATE][:1].isdigit():
                continue
            group += [""] * (4 - len(group))
            month.days.append(Day(
                date=group[_DATE],
                day=group[_WEEKDAY],
                event=group[_EVENT],
                day_order=group[_DAY_ORDER],
            ))

    logger.debug(
        "planner_parsed",
        months=len(months),
        days=sum(len(m.days) for m in months),
    )
    return months


def find_month(calendar: list[CalendarMonth], when: dt.date) -> Optional[int]:
    """Index of the month in ``calendar`` that contains ``when``."""
    for index, month in enumerate(calendar):
        parsed = parse_month_label(month.month)
        if not parsed:
            continue
        number, year = parsed
        if number == when.month and (year is None or year == when.year):
            return index
    return None


def find_day(calendar: list[CalendarMonth], when: dt.date) -> Optional[Day]:
    """The planner entry for ``when``, if the calendar covers it."""
    index = find_month(calendar, when)
    if index is None:
        return None
    for day in calendar[index].days:
        if day.day_of_month == when.day:
            return day
    return None
