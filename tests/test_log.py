"""Tests for the loguru setup."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest
from loguru import logger

from projectdash.dashboard.log import setup_logging


@pytest.fixture(autouse=True)
def _restore_loguru() -> Iterator[None]:
    yield
    logger.remove()
    logging.basicConfig(handlers=[], force=True)


def test_file_sink_records_debug(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "projectdash.log"
    setup_logging("ERROR", log_file)

    logger.debug("store write")
    logger.complete()

    text = log_file.read_text(encoding="utf-8")
    assert "store write" in text
    assert "DEBUG" in text


def test_stdlib_logging_is_intercepted(tmp_path: Path) -> None:
    log_file = tmp_path / "projectdash.log"
    setup_logging("ERROR", log_file)

    logging.getLogger("some.library").warning("from stdlib")
    logger.complete()

    assert "from stdlib" in log_file.read_text(encoding="utf-8")
