"""acadcal application entry point.

Quick Start:
    $ acadcal serve               # Start the API server
    $ acadcal calendar -t TOKEN   # Print the academic calendar

Environment:
    ACADCAL_ENV                   # development/production (default: development)
    ACADCAL_LOG_LEVEL             # DEBUG/INFO/WARNING/ERROR (default: INFO)
    PORTAL_BASE_URL               # Academic portal origin
    INSTITUTION_TIMEZONE          # IANA zone for "today" (default: Asia/Kolkata)
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from acadcal import __version__
from acadcal.api.routes import router, set_calendar_service
from acadcal.config import get_settings
from acadcal.logging_config import get_logger, setup_logging
from acadcal.modules.calendar.clock import resolve_timezone
from acadcal.modules.calendar.service import CalendarService

setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application startup and shutdown lifecycle."""
    settings = get_settings()
    logger.info("acadcal_starting", version=__version__, env=settings.acadcal_env)

    _, preferred = resolve_timezone(settings.institution_timezone)
    if not preferred:
        logger.warning(
            "institution_timezone_unavailable",
            timezone=settings.institution_timezone,
            hint="install tz data on the host (e.g. the tzdata package)",
        )

    set_calendar_service(CalendarService(timezone_name=settings.institution_timezone))
    logger.info("acadcal_ready", portal=settings.portal_base_url)

    yield

    logger.info("acadcal_shutting_down")
    set_calendar_service(None)


app = FastAPI(
    title="acadcal",
    description="Academic calendar retrieval for institutional portal sessions",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router, prefix="/api")


def run() -> None:
    """Run the application with uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "acadcal.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.acadcal_env == "development",
        log_level=settings.acadcal_log_level.lower(),
    )


if __name__ == "__main__":
    run()
