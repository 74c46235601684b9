"""acadcal CLI commands for inspecting a portal session's calendar."""

from __future__ import annotations

import asyncio
import json
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from acadcal.logging_config import setup_logging
from acadcal.modules.calendar.day_order import HOLIDAY, parse_day_order
from acadcal.modules.calendar.models import (
    CalendarFetchError,
    CalendarResponse,
    SessionExpiredError,
)
from acadcal.modules.calendar.service import CalendarService

app = typer.Typer(help="Academic calendar for portal sessions", no_args_is_help=True)
console = Console()

TokenOption = typer.Option(
    ..., "--token", "-t", envvar="ACADCAL_TOKEN", help="Portal session token",
)


@app.callback()
def main() -> None:
    """Academic calendar for portal sessions."""
    setup_logging()


def _async_run(coro):
    """Run an async coroutine."""
    return asyncio.run(coro)


def _service() -> CalendarService:
    return CalendarService()


def _fail(exc: CalendarFetchError) -> None:
    """Report a fetch failure and exit non-zero."""
    console.print(f"[red]✗[/red] {exc}")
    raise typer.Exit(code=2 if isinstance(exc, SessionExpiredError) else 1)


def _render(response: CalendarResponse, month: Optional[str]) -> None:
    months = response.calendar
    if month:
        months = [m for m in months if m.month.lower().startswith(month.lower())]
    elif months:
        months = [months[response.index]]

    today = response.today
    for entry in months:
        table = Table(title=entry.month)
        table.add_column("Date", style="cyan")
        table.add_column("Day")
        table.add_column("Event")
        table.add_column("Day Order", justify="center")
        for day in entry.days:
            order = parse_day_order(day.day_order) if day.day_order else ""
            style = "bold green" if today is not None and day == today else None
            table.add_row(day.date, day.day, day.event, order, style=style)
        console.print(table)


@app.command()
def calendar(
    token: str = TokenOption,
    month: Optional[str] = typer.Option(None, "--month", "-m", help="Month label prefix, e.g. 'Aug'"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw response as JSON"),
) -> None:
    """Show the academic calendar (current month by default)."""
    try:
        response = _async_run(_service().get_calendar(token))
    except CalendarFetchError as exc:
        _fail(exc)
        return

    if as_json:
        typer.echo(json.dumps(response.model_dump(by_alias=True), indent=2))
        return
    _render(response, month)


@app.command("day-order")
def day_order(token: str = TokenOption) -> None:
    """Show today's day order."""
    try:
        value = _async_run(_service().today_day_order(token))
    except CalendarFetchError as exc:
        _fail(exc)
        return

    if value == HOLIDAY:
        console.print("[bold red]Holiday[/bold red]")
    else:
        console.print(f"Day: [bold]{value}[/bold]")


@app.command()
def semester(token: str = TokenOption) -> None:
    """Show the end-of-semester window."""
    try:
        status = _async_run(_service().semester_status(token))
    except CalendarFetchError as exc:
        _fail(exc)
        return

    console.print(f"Semester: [bold]{status.semester_id}[/bold]")
    if status.last_working_day is not None:
        last = status.last_working_day
        console.print(f"Last working day: {last.date} ({last.day}) {last.event}".rstrip())
    if status.is_available:
        console.print(f"[green]Summary available[/green], {status.days_remaining} day(s) left")
    elif status.days_until_last_working_day is not None:
        console.print(f"{status.days_until_last_working_day} day(s) until the last working day")
    else:
        console.print("[dim]Summary window closed[/dim]")


@app.command()
def serve() -> None:
    """Start the API server."""
    from acadcal.main import run

    run()


if __name__ == "__main__":
    app()
