"""Command for pushing the issue branch and opening a merge request."""

from __future__ import annotations

import logging
from typing import Annotated

import typer

logger = logging.getLogger(__name__)

DraftOption = Annotated[
	bool,
	typer.Option("--draft", "-d", help="Open the merge request as a draft."),
]

RemoteOption = Annotated[
	str,
	typer.Option("--remote", "-r", help="Remote to push the branch to."),
]


def register_command(app: typer.Typer) -> None:
	"""Register the mr command, and its pr alias, with the CLI app."""

	@app.command(name="mr")
	def mr_command(ctx: typer.Context, draft: DraftOption = False, remote: RemoteOption = "origin") -> None:
		"""Push the current branch and open a merge request for its issue."""
		_mr_command_impl(ctx, draft=draft, remote=remote)

	@app.command(name="pr", hidden=True)
	def pr_command(ctx: typer.Context, draft: DraftOption = False, remote: RemoteOption = "origin") -> None:
		"""Alias for mr."""
		_mr_command_impl(ctx, draft=draft, remote=remote)


def _mr_command_impl(ctx: typer.Context, draft: bool, remote: str) -> None:
	"""Implementation of the mr command."""
	from tix.scm.factory import create_provider
	from tix.scm.merge_request import create_merge_request
	from tix.utils.cli_utils import exit_with_error, handle_keyboard_interrupt, progress_indicator
	from tix.utils.repo_select import resolve_issue_context

	from .common import COMMAND_ERRORS, console, load_config

	try:
		config = load_config(ctx)
		issue_ctx = resolve_issue_context(config)
		provider = create_provider(issue_ctx.code_repo)

		issue_provider = None
		cross_repo_ref = ""
		if issue_ctx.is_cross_repo:
			issue_provider = create_provider(issue_ctx.issue_repo)
			cross_repo_ref = issue_provider.cross_repo_issue_ref(issue_ctx.issue_number)

		with progress_indicator("Pushing branch and creating merge request..."):
			request = create_merge_request(
				provider,
				issue_ctx.git_repo,
				issue_ctx.branch,
				issue_ctx.issue_number,
				target_branch=issue_ctx.code_repo.target_branch,
				remote=remote,
				is_draft=draft,
				issue_provider=issue_provider,
				cross_repo_ref=cross_repo_ref,
			)

		kind = "draft merge request" if request.is_draft else "merge request"
		console.print(f"[green]Created {kind} #{request.number}:[/green] {request.url}")
	except KeyboardInterrupt:
		handle_keyboard_interrupt()
	except COMMAND_ERRORS as e:
		exit_with_error("Failed to create merge request", exception=e)
