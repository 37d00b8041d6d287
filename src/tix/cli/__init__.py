"""Command-line interface package for tix."""

from __future__ import annotations

import datetime
import logging
import sys
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv

from tix import __version__
from tix.utils.log_setup import log_environment_info, setup_logging

from .create_cmd import register_command as register_create_command
from .mr_cmd import register_command as register_mr_command
from .ready_cmd import register_command as register_ready_command
from .setdesc_cmd import register_command as register_setdesc_command
from .start_cmd import register_command as register_start_command
from .version_cmd import register_command as register_version_command

logger = logging.getLogger(__name__)

# Load environment variables, .env.local wins over .env
for env_file in (Path(".env.local"), Path(".env")):
	if env_file.exists():
		load_dotenv(dotenv_path=env_file)
		logger.debug("Loaded environment variables from %s", env_file)
		break

app = typer.Typer(
	help=f"tix - issue-driven git workflow for GitHub and GitLab\n\nVersion: {__version__}",
	no_args_is_help=True,
	context_settings={"help_option_names": ["-h", "--help"]},
)


def _version_callback(value: bool) -> None:
	"""Callback for --version option."""
	if value:
		typer.echo(f"tix version {__version__}")
		raise typer.Exit


@app.callback()
def global_options(
	ctx: typer.Context,
	verbosity: Annotated[
		int,
		typer.Option("--verbose", "-v", count=True, help="Increase verbosity (-v info, -vv debug)."),
	] = 0,
	is_output_log: Annotated[
		bool,
		typer.Option("--save-log", help="Also write a debug log to logs/tix_{datetime}.log."),
	] = False,
	config_file: Annotated[
		Path | None,
		typer.Option("--config", "-c", help="Path to the configuration file.", dir_okay=False),
	] = None,
	_version: Annotated[
		bool | None,
		typer.Option("--version", help="Show version and exit.", callback=_version_callback, is_eager=True),
	] = None,
) -> None:
	"""Global CLI options and logging setup."""
	ctx.meta["verbosity"] = verbosity
	ctx.meta["config_file"] = config_file

	log_file_path: Path | None = None
	if is_output_log:
		current_time = datetime.datetime.now(tz=datetime.UTC).strftime("%Y-%m-%d_%H-%M-%S")
		log_file_path = Path("logs") / f"tix_{current_time}.log"

	setup_logging(verbosity=verbosity, log_file_path=log_file_path)
	log_environment_info()


register_create_command(app)
register_start_command(app)
register_mr_command(app)
register_ready_command(app)
register_setdesc_command(app)
register_version_command(app)


def main() -> int:
	"""Run the CLI application."""
	return app()


if __name__ == "__main__":
	sys.exit(main())
