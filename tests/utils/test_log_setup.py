"""Tests for logging setup."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest
from rich.logging import RichHandler

from tix.utils.log_setup import setup_logging, verbosity_to_level

if TYPE_CHECKING:
	from pathlib import Path


@pytest.mark.unit
@pytest.mark.parametrize(("verbosity", "level"), [(0, logging.WARNING), (1, logging.INFO), (2, logging.DEBUG), (5, logging.DEBUG)])
def test_verbosity_to_level(verbosity: int, level: int) -> None:
	"""Each -v lowers the console log level."""
	assert verbosity_to_level(verbosity) == level


@pytest.mark.unit
def test_setup_logging_replaces_handlers() -> None:
	"""Repeated setup leaves a single console handler."""
	setup_logging(verbosity=1)
	setup_logging(verbosity=1)

	handlers = logging.getLogger().handlers
	assert len(handlers) == 1
	assert isinstance(handlers[0], RichHandler)
	assert handlers[0].level == logging.INFO
	assert logging.getLogger("urllib3").level == logging.WARNING


@pytest.mark.unit
def test_setup_logging_to_file(tmp_path: Path) -> None:
	"""With a log file everything down to DEBUG is written there."""
	log_file = tmp_path / "logs" / "tix.log"

	setup_logging(verbosity=0, log_file_path=log_file)
	logging.getLogger("tix.test").debug("hello from the test")
	for handler in logging.getLogger().handlers:
		handler.flush()

	assert "hello from the test" in log_file.read_text()
	setup_logging(verbosity=0)
