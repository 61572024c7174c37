"""
Logging setup for the Task Tracker API.

Services, repositories and ``core.db`` log through
``logging.getLogger(__name__)``, so records are named after the module
that emitted them (``task_tracker_api.app.services.task_service`` and so
on).  ``setup_logging`` is called once from ``main.create_app``: it
attaches the console and optional file handlers to the root logger and
sets per-logger levels for noisy third-party loggers.
"""

import logging
from pathlib import Path
from typing import Mapping, Optional


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _level(name: str, default: int = logging.INFO) -> int:
    return getattr(logging, str(name).upper(), default)


def setup_logging(
    level: str = "INFO",
    logfile: Optional[str] = None,
    logger_levels: Optional[Mapping[str, str]] = None,
) -> None:
    """Configure the root logger and the per-logger overrides.

    ``logger_levels`` maps logger names to level names, e.g.
    ``{"uvicorn.access": "WARNING"}``; unknown level names fall back to
    INFO.  The overrides are applied on every call.  Handlers are only
    attached when the root logger has none yet, so a host that already
    configured logging (uvicorn's ``--log-config``, pytest) keeps its
    own.
    """
    for name, logger_level in (logger_levels or {}).items():
        logging.getLogger(name).setLevel(_level(logger_level))

    root = logging.getLogger()
    if root.handlers:
        return

    root.setLevel(_level(level))
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if logfile:
        file_handler = logging.FileHandler(Path(logfile).resolve(), encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
