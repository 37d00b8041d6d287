"""Utility functions for CLI operations in tix."""

from __future__ import annotations

import contextlib
import logging
import os
from typing import TYPE_CHECKING, NoReturn

import questionary
import typer
from rich.console import Console

from tix.utils.log_setup import display_error_summary, display_warning_summary

if TYPE_CHECKING:
	from collections.abc import Iterator, Sequence

console = Console()
logger = logging.getLogger(__name__)


@contextlib.contextmanager
def progress_indicator(message: str) -> Iterator[None]:
	"""
	Show a spinner while a blocking call runs.

	Args:
	    message: Message to display alongside the spinner

	Yields:
	    None

	"""
	# No spinner in tests or CI
	if os.environ.get("PYTEST_CURRENT_TEST") or os.environ.get("CI"):
		yield
		return

	with console.status(message):
		yield


def show_error(message: str, exception: Exception | None = None) -> None:
	"""
	Display an error summary with standardized formatting.

	Args:
	        message: The error message to display
	        exception: Optional exception that caused the error

	"""
	error_text = message
	if exception:
		error_text += f"\n\nDetails: {exception!s}"
		logger.debug("Error occurred", exc_info=exception)

	display_error_summary(error_text)


def show_warning(message: str) -> None:
	"""
	Display a warning summary with standardized formatting.

	Args:
	        message: The warning message to display

	"""
	display_warning_summary(message)


def exit_with_error(message: str, exit_code: int = 1, exception: Exception | None = None) -> NoReturn:
	"""
	Display an error message and exit.

	Args:
	        message: Error message to display
	        exit_code: Exit code to use
	        exception: Optional exception that caused the error

	"""
	show_error(message, exception)
	raise typer.Exit(exit_code) from exception


def handle_keyboard_interrupt() -> NoReturn:
	"""Handles KeyboardInterrupt by printing a message and exiting cleanly."""
	console.print("\n[yellow]Operation cancelled by user.[/yellow]")
	raise typer.Exit(130)


def _answer(value: object) -> object:
	# questionary returns None when the prompt is interrupted
	if value is None:
		raise KeyboardInterrupt
	return value


def ask_text(message: str, default: str = "", validate: object = None) -> str:
	"""Prompt for free text."""
	kwargs: dict[str, object] = {"default": default}
	if validate is not None:
		kwargs["validate"] = validate
	return str(_answer(questionary.text(message, **kwargs).ask()))


def ask_select(message: str, choices: Sequence[str], default: str | None = None) -> str:
	"""Prompt for one of ``choices``."""
	default = default if default in choices else None
	return str(_answer(questionary.select(message, choices=list(choices), default=default).ask()))


def ask_confirm(message: str, default: bool = True) -> bool:
	"""Ask a yes/no question."""
	return bool(_answer(questionary.confirm(message, default=default).ask()))
