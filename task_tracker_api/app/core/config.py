"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
service starts without any environment at all, which is convenient for
local development and tests.  In a production deployment you should
override at least ``SECRET_KEY`` and ``DATABASE_URL``.
"""

import os
from dataclasses import dataclass
from typing import Optional


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Task Tracker API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: Optional[str] = os.getenv("LOG_FILE") or None
    # Level of uvicorn's per-request access log.
    access_log_level: str = os.getenv("ACCESS_LOG_LEVEL", "WARNING")

    # Shared with the identity provider.  Bearer tokens presented to the
    # API must be signed with this key (see ``core.security``).
    secret_key: str = os.getenv("SECRET_KEY", "change_me")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))
    # JWT "alg": HS256, HS384 or HS512
    algorithm: str = os.getenv("ALGORITHM", "HS256")

    # Path to the SQLite database file.  If a relative path is provided,
    # it will be resolved relative to the package root by the ``db``
    # module.
    database_url: str = os.getenv("DATABASE_URL", "task_tracker.db")

    # Offset pagination defaults for the "assigned to" and "reported by"
    # task listings.
    default_page_size: int = int(os.getenv("DEFAULT_PAGE_SIZE", "10"))
    max_page_size: int = int(os.getenv("MAX_PAGE_SIZE", "100"))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables must
# be set before importing this module.
settings = Settings()
