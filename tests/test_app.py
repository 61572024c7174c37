import logging

import pytest

from task_tracker_api.app import main
from task_tracker_api.app.core.logging_config import setup_logging


@pytest.fixture
def quiet_logger():
    logger = logging.getLogger("tracker.test.access")
    yield logger
    logger.setLevel(logging.NOTSET)


@pytest.mark.parametrize("debug", [True, False])
def test_debug_setting_reaches_the_app(monkeypatch, debug):
    monkeypatch.setattr(main.settings, "debug", debug)

    assert main.create_app().debug is debug


def test_logger_levels_are_applied(quiet_logger):
    setup_logging("INFO", logger_levels={quiet_logger.name: "warning"})

    assert quiet_logger.level == logging.WARNING


def test_unknown_logger_level_falls_back_to_info(quiet_logger):
    setup_logging("INFO", logger_levels={quiet_logger.name: "chatty"})

    assert quiet_logger.level == logging.INFO


def test_create_app_quiets_the_access_log(monkeypatch):
    access = logging.getLogger("uvicorn.access")
    monkeypatch.setattr(access, "level", access.level)
    monkeypatch.setattr(main.settings, "access_log_level", "ERROR")

    main.create_app()

    assert access.level == logging.ERROR
