import logging

from npr_scraper.logging_setup import LOGGER_NAME, setup_logging


def test_level_comes_from_log_level_env(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "debug")
    logger = setup_logging()
    assert logger.level == logging.DEBUG


def test_explicit_level_wins_and_handler_is_not_duplicated(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    setup_logging("warning")
    logger = setup_logging("warning")
    assert logger.level == logging.WARNING
    ours = [h for h in logging.getLogger(LOGGER_NAME).handlers if getattr(h, "_npr_scraper", False)]
    assert len(ours) == 1
