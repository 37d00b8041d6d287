"""Command for starting work on an existing issue."""

from __future__ import annotations

import logging
from typing import Annotated

import typer

logger = logging.getLogger(__name__)

ProjectArg = Annotated[
	str | None,
	typer.Argument(help="Repository holding the issue, or the issue number when given alone."),
]

IssueArg = Annotated[
	str | None,
	typer.Argument(help="Issue number."),
]


def _parse_issue_number(value: str) -> int:
	value = value.strip().lstrip("#")
	if not value.isdecimal() or int(value) <= 0:
		msg = f"Invalid issue number: {value!r}"
		raise ValueError(msg)
	return int(value)


def _validate_issue_number(value: str) -> bool | str:
	try:
		_parse_issue_number(value)
	except ValueError:
		return "Enter a positive issue number"
	return True


def register_command(app: typer.Typer) -> None:
	"""Register the start command with the CLI app."""

	@app.command(name="start")
	def start_command(ctx: typer.Context, project: ProjectArg = None, issue: IssueArg = None) -> None:
		"""
		Create a branch for an existing issue.

		Usage: tix start, tix start 123, or tix start other-repo 123 for an
		issue tracked in another configured repository.
		"""
		_start_command_impl(ctx, project=project, issue=issue)


def _start_command_impl(ctx: typer.Context, project: str | None, issue: str | None) -> None:
	"""Implementation of the start command."""
	from tix.git.repository import GitRepository
	from tix.scm.factory import create_provider
	from tix.utils.cli_utils import ask_select, ask_text, exit_with_error, handle_keyboard_interrupt
	from tix.utils.naming import branch_name
	from tix.utils.repo_select import lookup_issue_repo, select_code_repo

	from .common import COMMAND_ERRORS, checkout_issue_branch, console, ensure_clean, load_config

	# a single argument is the issue number
	if issue is None and project is not None:
		project, issue = None, project

	try:
		config = load_config(ctx)
		code_repo = select_code_repo(config)
		git_repo = GitRepository(code_repo.directory)
		ensure_clean(git_repo)

		if project is None and issue is None:
			project = ask_select("Repository holding the issue:", config.repo_names, default=code_repo.name)
		if issue is None:
			issue = ask_text("Issue number:", validate=_validate_issue_number)

		try:
			issue_number = _parse_issue_number(issue)
		except ValueError as e:
			exit_with_error(str(e))

		issue_repo = lookup_issue_repo(config, code_repo, project or "")
		provider = create_provider(issue_repo)
		found = provider.get_issue(issue_number)
		console.print(f"Starting work on issue #{found.number}: [bold]{found.title}[/bold]")

		prefix = issue_repo.name if issue_repo.name != code_repo.name else None
		checkout_issue_branch(git_repo, code_repo, branch_name(found.number, found.title, prefix))
	except KeyboardInterrupt:
		handle_keyboard_interrupt()
	except COMMAND_ERRORS as e:
		exit_with_error("Failed to start work on issue", exception=e)
