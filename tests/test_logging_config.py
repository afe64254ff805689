"""Tests for per-run logging setup."""

import logging

import pytest

from product_board.logging_config import setup_logging


@pytest.fixture
def clean_logger():
    """Detach handlers so each test starts from scratch."""
    logger = logging.getLogger("product_board")
    saved = logger.handlers[:]
    logger.handlers.clear()
    yield logger
    for handler in logger.handlers:
        handler.close()
    logger.handlers[:] = saved


def test_setup_creates_log_file(tmp_path, clean_logger):
    log_file = setup_logging(logs_dir=tmp_path, console_level="ERROR")

    assert log_file.parent == tmp_path
    assert log_file.name.startswith("run_")
    assert log_file.exists()
    assert len(clean_logger.handlers) == 2


def test_child_loggers_reach_file(tmp_path, clean_logger):
    log_file = setup_logging(logs_dir=tmp_path, console_level="ERROR")

    logging.getLogger("product_board.dashboard").warning("rolled back p1")
    for handler in clean_logger.handlers:
        handler.flush()

    assert "rolled back p1" in log_file.read_text(encoding="utf-8")


def test_setup_is_idempotent(tmp_path, clean_logger):
    first = setup_logging(logs_dir=tmp_path, console_level="ERROR")
    second = setup_logging(logs_dir=tmp_path / "other", console_level="ERROR")

    assert second == first
    assert second.exists()
    assert not (tmp_path / "other").exists()
    assert len(clean_logger.handlers) == 2
