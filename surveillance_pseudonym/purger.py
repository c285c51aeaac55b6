"""Purger Entry Point — runs one retention purge against the configured database and exits.

Invariants:
    - Uses its own engine (no FastAPI lifespan); engine disposed on exit
    - Exit code 0 on success, non-zero when the purge raised

Design Decisions:
    - Console script (sps-purger) scheduled externally (cron job / k8s CronJob)
"""

import asyncio
import logging
import sys

from surveillance_pseudonym.config import Settings, get_settings
from surveillance_pseudonym.db.session import create_session_factory
from surveillance_pseudonym.infrastructure.observability import setup_logging
from surveillance_pseudonym.services.purge_processor import PurgeProcessor

logger = logging.getLogger(__name__)


async def run_purge(settings: Settings) -> dict[str, int]:
    engine, session_factory = create_session_factory(settings.database_url)
    try:
        processor = PurgeProcessor.from_settings(session_factory, settings)
        return await processor.purge_database()
    finally:
        await engine.dispose()


def main() -> int:
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    logger.info(
        f"Purger started (batch_size={settings.purger_batch_size}, "
        f"retention_years={settings.purger_retention_years})",
    )
    try:
        asyncio.run(run_purge(settings))
    except Exception:
        logger.exception("Purge failed")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
