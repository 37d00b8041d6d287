"""Commands for marking the current issue ready or not ready for review."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Annotated

import typer

if TYPE_CHECKING:
	from tix.utils.labels import LabelOutcome

logger = logging.getLogger(__name__)

LabelOption = Annotated[
	str | None,
	typer.Option("--label", "-l", help="Ready label, overriding the configured one."),
]

StatusOption = Annotated[
	str | None,
	typer.Option("--status", "-s", help="Issue status, overriding the configured one."),
]

UnreadyLabelOption = Annotated[
	str | None,
	typer.Option("--unready-label", "-u", help="Unready label, overriding the configured one."),
]


def register_command(app: typer.Typer) -> None:
	"""Register the ready and unready commands with the CLI app."""

	@app.command(name="ready")
	def ready_command(ctx: typer.Context, label: LabelOption = None, status: StatusOption = None) -> None:
		"""Add the ready label to the current branch's issue and update its status."""
		_label_command_impl(ctx, ready=True, label=label, status=status)

	@app.command(name="unready")
	def unready_command(
		ctx: typer.Context,
		label: LabelOption = None,
		unready_label: UnreadyLabelOption = None,
		status: StatusOption = None,
	) -> None:
		"""Remove the ready label from the current branch's issue, adding the unready label."""
		_label_command_impl(ctx, ready=False, label=label, status=status, unready_label=unready_label)


def _label_command_impl(
	ctx: typer.Context,
	ready: bool,
	label: str | None,
	status: str | None,
	unready_label: str | None = None,
) -> None:
	"""Implementation of the ready and unready commands."""
	from tix.scm.factory import create_provider
	from tix.utils.cli_utils import exit_with_error, handle_keyboard_interrupt, show_warning
	from tix.utils.labels import mark_ready, mark_unready
	from tix.utils.repo_select import resolve_issue_context

	from .common import COMMAND_ERRORS, console, load_config

	try:
		config = load_config(ctx)
		issue_ctx = resolve_issue_context(config)
		provider = create_provider(issue_ctx.issue_repo)

		outcome: LabelOutcome
		if ready:
			outcome = mark_ready(provider, config, issue_ctx.issue_repo, issue_ctx.issue_number, label, status)
		else:
			outcome = mark_unready(
				provider,
				config,
				issue_ctx.issue_repo,
				issue_ctx.issue_number,
				label_override=label,
				status_override=status,
				unready_label_override=unready_label,
			)

		for warning in outcome.warnings:
			show_warning(warning)
		style = "green" if outcome.changed else "yellow"
		console.print(f"[{style}]{outcome.message}[/{style}]")
	except KeyboardInterrupt:
		handle_keyboard_interrupt()
	except COMMAND_ERRORS as e:
		action = "ready" if ready else "unready"
		exit_with_error(f"Failed to mark issue as {action}", exception=e)
