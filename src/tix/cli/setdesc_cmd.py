"""Command for generating merge request and issue descriptions from the diff."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Annotated

import typer
from rich.markdown import Markdown
from rich.panel import Panel

if TYPE_CHECKING:
	from tix.scm.base import SCMProvider
	from tix.scm.schemas import MergeRequest

logger = logging.getLogger(__name__)

RagOption = Annotated[
	bool | None,
	typer.Option(
		"--rag/--no-rag",
		help="Force retrieval over diff chunks on or off. By default it is used for large diffs only.",
	),
]

YesOption = Annotated[
	bool,
	typer.Option("--yes", "-y", help="Apply the generated text without asking."),
]


def register_command(app: typer.Typer) -> None:
	"""Register the setdesc command with the CLI app."""

	@app.command(name="setdesc")
	def setdesc_command(ctx: typer.Context, rag: RagOption = None, yes: YesOption = False) -> None:
		"""
		Generate and set the merge request and issue descriptions.

		The open merge request for the current branch's issue is described
		from its diff, then the issue itself gets a description and a
		suggested title.
		"""
		_setdesc_command_impl(ctx, rag=rag, yes=yes)


def _select_request(requests: list[MergeRequest], issue_number: int) -> MergeRequest:
	from tix.scm.errors import SCMError
	from tix.utils.cli_utils import ask_select

	if not requests:
		msg = f"No open merge requests found for issue #{issue_number}. Run 'tix mr' first."
		raise SCMError(msg)
	if len(requests) == 1:
		return requests[0]

	choices = {f"!{request.number} {request.title}": request for request in requests}
	return choices[ask_select("Multiple merge requests reference this issue. Select one:", list(choices))]


def _setdesc_command_impl(ctx: typer.Context, rag: bool | None, yes: bool) -> None:
	"""Implementation of the setdesc command."""
	from tix.llm.client import LLMContext
	from tix.llm.description import generate_issue_description, generate_mr_description
	from tix.scm.factory import create_provider
	from tix.utils.cli_utils import ask_confirm, exit_with_error, handle_keyboard_interrupt, progress_indicator
	from tix.utils.repo_select import resolve_issue_context

	from .common import COMMAND_ERRORS, console, load_config

	try:
		config = load_config(ctx)
		issue_ctx = resolve_issue_context(config)
		provider: SCMProvider = create_provider(issue_ctx.code_repo)
		issue_provider = create_provider(issue_ctx.issue_repo) if issue_ctx.is_cross_repo else provider
		issue_number = issue_ctx.issue_number

		with progress_indicator("Looking up merge requests..."):
			requests = provider.get_open_requests(issue_number)
		request = _select_request(requests, issue_number)

		with progress_indicator(f"Fetching diff of !{request.number}..."):
			diff = provider.get_request_diff(request.number)

		llm = LLMContext.from_config(config.llm)
		settings = {"use_rag": rag, "top_k": config.llm.top_k, "threshold": config.llm.rag_threshold_tokens}

		with progress_indicator("Generating merge request description..."):
			description = generate_mr_description(llm, diff, **settings)
		console.print(Panel(Markdown(description), title=f"Merge request !{request.number}", border_style="blue"))

		if yes or ask_confirm("Update the merge request description?"):
			provider.update_request_description(request.number, description)
			console.print(f"[green]Updated description of merge request !{request.number}[/green]")

		issue = issue_provider.get_issue(issue_number)
		with progress_indicator("Generating issue description..."):
			generated = generate_issue_description(llm, diff, issue.title, **settings)

		console.print(Panel(Markdown(generated.body), title=f"Issue #{issue_number}", border_style="blue"))
		if yes or ask_confirm("Update the issue description?"):
			issue_provider.update_issue_description(issue_number, generated.body)
			console.print(f"[green]Updated description of issue #{issue_number}[/green]")

		if generated.title and generated.title != issue.title:
			console.print(f"Suggested title: [bold]{generated.title}[/bold] (currently: {issue.title})")
			if yes or ask_confirm("Update the issue title?", default=False):
				issue_provider.update_issue_title(issue_number, generated.title)
				console.print(f"[green]Updated title of issue #{issue_number}[/green]")
	except KeyboardInterrupt:
		handle_keyboard_interrupt()
	except COMMAND_ERRORS as e:
		exit_with_error("Failed to set descriptions", exception=e)
