"""Command for creating an issue and a branch to work on it."""

from __future__ import annotations

import logging
from typing import Annotated

import typer

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 255

TitleOption = Annotated[
	str | None,
	typer.Option("--title", "-t", help="Issue title. Prompted for when omitted."),
]

AssignOption = Annotated[
	bool,
	typer.Option("--assign/--no-assign", help="Assign the new issue to yourself."),
]


def _validate_title(title: str) -> bool | str:
	if not title.strip():
		return "Title is required"
	if len(title) >= MAX_TITLE_LENGTH:
		return f"Title must be less than {MAX_TITLE_LENGTH} characters"
	return True


def register_command(app: typer.Typer) -> None:
	"""Register the create command with the CLI app."""

	@app.command(name="create")
	def create_command(ctx: typer.Context, title: TitleOption = None, assign: AssignOption = True) -> None:
		"""Create an issue, then a branch (or worktree) named after it."""
		_create_command_impl(ctx, title=title, assign=assign)


def _create_command_impl(ctx: typer.Context, title: str | None, assign: bool) -> None:
	"""Implementation of the create command."""
	import datetime

	from tix.git.repository import GitRepository
	from tix.scm.factory import create_provider, provider_kind
	from tix.scm.schemas import IssueParams
	from tix.utils.cli_utils import (
		ask_text,
		exit_with_error,
		handle_keyboard_interrupt,
		progress_indicator,
	)
	from tix.utils.naming import branch_name, generate_milestone, split_labels
	from tix.utils.repo_select import select_code_repo

	from .common import COMMAND_ERRORS, checkout_issue_branch, console, ensure_clean, load_config

	try:
		config = load_config(ctx)
		repo = select_code_repo(config, message="Select a repository to create the issue in")
		git_repo = GitRepository(repo.directory)
		ensure_clean(git_repo)

		if title is None:
			title = ask_text("Issue title:", validate=_validate_title)
		elif _validate_title(title) is not True:
			exit_with_error(str(_validate_title(title)))

		labels = ask_text("Labels (comma separated):", default=repo.default_labels)

		milestone = ""
		if provider_kind(repo) == "gitlab":
			milestone = ask_text("Milestone:", default=generate_milestone(datetime.date.today()))

		provider = create_provider(repo)
		params = IssueParams(title=title.strip(), labels=split_labels(labels), self_assign=assign, milestone=milestone)
		with progress_indicator("Creating issue..."):
			issue = provider.create_issue(params)
		console.print(f"[green]Created issue #{issue.number}:[/green] {issue.url}")

		checkout_issue_branch(git_repo, repo, branch_name(issue.number, issue.title))
	except KeyboardInterrupt:
		handle_keyboard_interrupt()
	except COMMAND_ERRORS as e:
		exit_with_error("Failed to create issue", exception=e)
