import logging

import pytest

from kino_client.logger import logger, setup_logging


@pytest.fixture
def log_dir(tmp_path):
    yield tmp_path / "logs"
    setup_logging()


def test_setup_writes_client_log(log_dir):
    setup_logging(str(log_dir), "debug")
    logger.debug("GET /movies")
    for handler in logger.handlers:
        handler.flush()

    text = (log_dir / "kino-client.log").read_text(encoding="utf-8")
    assert "| DEBUG | GET /movies" in text
    assert logger.level == logging.DEBUG


def test_repeated_setup_keeps_two_handlers(log_dir):
    setup_logging(str(log_dir), "warning")
    setup_logging(str(log_dir), "warning")
    assert len(logger.handlers) == 2
    assert logger.level == logging.WARNING
