"""Surveillance Pseudonym API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map PseudonymServiceError → structured JSON responses
    - Database initialized on startup via lifespan context manager
    - Pepper validated on startup when individual pseudonyms are enabled (fail fast)

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Three error handler layers: PseudonymServiceError (domain), RequestValidationError
      (Pydantic), Exception (catch-all) — never leaks internal details
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from surveillance_pseudonym.api.error_handlers import register_error_handlers
from surveillance_pseudonym.api.routes import health, pseudonym
from surveillance_pseudonym.config import get_settings
from surveillance_pseudonym.infrastructure import database
from surveillance_pseudonym.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    if settings.individual_pseudonym:
        pseudonym.get_token_hasher()
    database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info(
        "Surveillance pseudonym API started "
        f"(max_lifetime_in_years={settings.period_max_lifetime_in_years}, "
        f"adjust_reference_day={settings.period_adjust_reference_day})",
    )
    yield
    if database.db_manager:
        await database.db_manager.dispose()
    logger.info("Surveillance pseudonym API shutting down")


app = FastAPI(
    title="Surveillance Pseudonym API", version="1.0.0", lifespan=lifespan,
)

# Routes — explicit registration
app.include_router(health.router)
app.include_router(pseudonym.router)

register_error_handlers(app)
