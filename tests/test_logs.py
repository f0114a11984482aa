"""Tests for logging setup."""

from __future__ import annotations

import logging

from repodrift.logs import configure_logging


def test_handlers_not_stacked() -> None:
    configure_logging()
    logger = configure_logging()
    assert len(logger.handlers) == 1
    assert logger.handlers[0].level == logging.WARNING
    assert not logger.propagate


def test_module_loggers_write_to_log_file(tmp_path) -> None:
    log_file = tmp_path / "repodrift.log"
    logger = configure_logging(verbose=True, log_file=log_file)

    logging.getLogger("repodrift.scorers.scoring").debug("scored alpha")
    for handler in logger.handlers:
        handler.flush()

    assert logger.level == logging.DEBUG
    assert "scored alpha" in log_file.read_text(encoding="utf-8")
    for handler in logger.handlers:
        handler.close()
