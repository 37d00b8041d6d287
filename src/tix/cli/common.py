"""Helpers shared by the tix commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import typer
from rich.console import Console

from tix.config import ConfigError, ConfigLoader
from tix.git.repository import GitError
from tix.llm.errors import LLMError
from tix.scm.errors import SCMError
from tix.utils.repo_select import RepositorySelectionError

if TYPE_CHECKING:
	from tix.config.config_schema import AppConfigSchema, RepositorySchema
	from tix.git.repository import GitRepository

logger = logging.getLogger(__name__)
console = Console()

# Errors a command reports as a failure summary instead of a traceback
COMMAND_ERRORS = (ConfigError, GitError, SCMError, LLMError, RepositorySelectionError)


def load_config(ctx: typer.Context) -> AppConfigSchema:
	"""Load the configuration selected by the global ``--config`` option."""
	config_file = ctx.meta.get("config_file")
	return ConfigLoader.get_instance(config_file=config_file).get


def ensure_clean(git_repo: GitRepository) -> None:
	"""
	Refuse to branch from a dirty working tree.

	Raises:
	    GitError: If there are uncommitted changes
	"""
	if not git_repo.is_clean():
		msg = "Git repository has uncommitted changes - commit or stash them first"
		raise GitError(msg)


def checkout_issue_branch(git_repo: GitRepository, repo: RepositorySchema, branch: str) -> None:
	"""
	Create the branch for an issue, in a new worktree when the repository uses them.

	Raises:
	    GitError: If the branch or worktree cannot be created
	"""
	if repo.worktree.enabled:
		worktree_dir = Path(repo.directory) / branch
		git_repo.add_worktree(branch, worktree_dir, repo.worktree.default_branch or None)
		console.print(f"Created worktree: [bold]{branch}[/bold] in {worktree_dir}")
		return

	git_repo.create_and_checkout_branch(branch)
	console.print(f"Created and checked out branch: [bold]{branch}[/bold]")
