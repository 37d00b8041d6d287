"""
Logging setup for tix.

Console logging goes through rich; an optional log file receives every
debug message regardless of the console verbosity.

"""

from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.rule import Rule
from rich.text import Text

console = Console()

NOISY_LOGGERS = ("urllib3", "requests", "httpx", "httpcore", "openai", "github")


def verbosity_to_level(verbosity: int) -> int:
	"""
	Map a ``-v`` count to a log level.

	Args:
	    verbosity: Number of ``-v`` flags given

	Returns:
	    WARNING for 0, INFO for 1, DEBUG for 2 or more

	"""
	if verbosity >= 2:
		return logging.DEBUG
	if verbosity == 1:
		return logging.INFO
	return logging.WARNING


def setup_logging(
	verbosity: int = 0,
	log_to_console: bool = True,
	log_file_path: Path | str | None = None,
) -> None:
	"""
	Set up logging configuration.

	Args:
	    verbosity: Number of ``-v`` flags given
	    log_to_console: Whether to log to the console
	    log_file_path: Optional path to a file for logging. If None, no file logging.

	"""
	log_level = verbosity_to_level(verbosity)

	root_logger = logging.getLogger()
	root_logger.setLevel(logging.DEBUG if log_file_path else log_level)

	# Clear existing handlers to avoid duplicate logs if called multiple times
	for handler in root_logger.handlers[:]:
		root_logger.removeHandler(handler)

	if log_to_console:
		console_handler = RichHandler(
			level=log_level,
			console=Console(stderr=True),
			rich_tracebacks=True,
			show_time=True,
			show_path=log_level == logging.DEBUG,
		)
		root_logger.addHandler(console_handler)

	if log_file_path:
		try:
			file_handler_path = Path(log_file_path)
			file_handler_path.parent.mkdir(parents=True, exist_ok=True)

			file_handler = logging.FileHandler(file_handler_path, mode="a", encoding="utf-8")
			file_handler.setLevel(logging.DEBUG)
			file_handler.setFormatter(
				logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(lineno)d - %(message)s")
			)
			root_logger.addHandler(file_handler)
			root_logger.debug("Logging to file: %s", file_handler_path)
		except OSError as e:
			crit_logger = logging.getLogger("tix.cli.critical_setup")
			crit_logger.handlers.clear()
			console_err_handler = logging.StreamHandler()
			console_err_handler.setFormatter(logging.Formatter("%(message)s"))
			crit_logger.addHandler(console_err_handler)
			crit_logger.propagate = False
			crit_logger.critical("[TIX CLI CRITICAL] Failed to set up file logging to %s: %s", log_file_path, e)

	# Third party HTTP chatter only shows at -vv
	for name in NOISY_LOGGERS:
		logging.getLogger(name).setLevel(logging.DEBUG if log_level == logging.DEBUG else logging.WARNING)


def log_environment_info() -> None:
	"""Log information about the execution environment."""
	logger = logging.getLogger(__name__)

	import platform

	from tix import __version__

	logger.info("tix version: %s", __version__)
	logger.info("Python version: %s", platform.python_version())
	logger.info("Platform: %s", platform.platform())


def display_error_summary(error_message: str) -> None:
	"""
	Display an error summary with a divider and a title.

	Args:
	        error_message: The error message to display

	"""
	title = Text("Error Summary", style="bold red")

	console.print()
	console.print(Rule(title, style="red"))
	console.print(f"\n{escape(error_message)}\n")
	console.print(Rule(style="red"))
	console.print()


def display_warning_summary(warning_message: str) -> None:
	"""
	Display a warning summary with a divider and a title.

	Args:
	        warning_message: The warning message to display

	"""
	title = Text("Warning Summary", style="bold yellow")

	console.print()
	console.print(Rule(title, style="yellow"))
	console.print(f"\n{escape(warning_message)}\n")
	console.print(Rule(style="yellow"))
	console.print()
