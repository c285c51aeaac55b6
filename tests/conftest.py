"""Root conftest — shared test configuration."""

import os

# Settings are cached on first use, so the environment must be in place at import time
os.environ.setdefault(
    "SPS_DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
os.environ.setdefault(
    "SPS_HASH_PEPPER", "MmbSvONGwV4J3WkG2Io5CrYTpSl2whWw9gjOodfVw2w=",
)
os.environ.setdefault("SPS_PERIOD_MAX_LIFETIME_IN_YEARS", "3")
os.environ.setdefault("SPS_PERIOD_ADJUST_REFERENCE_DAY", "--07-01")
os.environ.setdefault("SPS_LOG_FORMAT", "text")
