"""
Application Configuration
=========================
Environment-driven settings for the allocation service
"""

import os
from dotenv import load_dotenv

load_dotenv()


def _as_bool(value, default=False):
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """Application Settings"""

    API_TITLE = "SmartKollect Allocation API"
    API_VERSION = "1.0.0"

    # ---------- Database ----------
    # No fallback: without a URL the service answers "Server configuration error"
    DATABASE_URL = os.getenv("DATABASE_URL") or None
    SQL_ECHO = _as_bool(os.getenv("SQL_ECHO"))

    # ---------- Logging ----------
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # ---------- Allocation ----------
    # Upper bound on ids per IN (...) clause when loading account details
    ALLOCATION_FETCH_BATCH_SIZE = int(os.getenv("ALLOCATION_FETCH_BATCH_SIZE", "100"))

    # ---------- Startup ----------
    SEED_SAMPLE_DATA = _as_bool(os.getenv("SEED_SAMPLE_DATA"))

    # ---------- CORS ----------
    CORS_ALLOW_ORIGINS = [
        origin.strip()
        for origin in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",")
        if origin.strip()
    ]

    @property
    def database_configured(self):
        return bool(self.DATABASE_URL)


settings = Settings()
