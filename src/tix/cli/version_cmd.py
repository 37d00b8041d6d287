"""Command for printing the tix version."""

from __future__ import annotations

import platform
import sys

import typer

from tix import __version__


def register_command(app: typer.Typer) -> None:
	"""Register the version command with the CLI app."""

	@app.command(name="version")
	def version_command(ctx: typer.Context) -> None:
		"""Show version information (build details with --verbose)."""
		typer.echo(f"tix version {__version__}")
		if ctx.meta.get("verbosity", 0) > 0:
			typer.echo(f"Python: {sys.version.split()[0]} ({platform.python_implementation()})")
			typer.echo(f"Platform: {platform.platform()}")
			typer.echo(f"Executable: {sys.executable}")
