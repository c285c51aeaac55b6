"""API Server Entry Point — runs the FastAPI app under uvicorn (console script sps-api).

Invariants:
    - Single process; host/port from settings (SPS_API_HOST, SPS_API_PORT)
    - Logging is configured by the app lifespan, uvicorn's own log config is left off

Design Decisions:
    - App passed as import string: uvicorn imports it itself, same as `uvicorn <module>:app`
"""

import uvicorn

from surveillance_pseudonym.config import get_settings

APP = "surveillance_pseudonym.main:app"


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        APP,
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
