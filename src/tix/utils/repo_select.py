"""Work out which configured repository and issue a command acts on."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from tix.git.repository import GitRepository
from tix.scm.factory import ensure_same_provider
from tix.utils.cli_utils import ask_select
from tix.utils.naming import extract_issue_info

if TYPE_CHECKING:
	from tix.config.config_schema import AppConfigSchema, RepositorySchema

logger = logging.getLogger(__name__)


class RepositorySelectionError(Exception):
	"""Raised when no repository or issue can be determined."""


@dataclass
class IssueContext:
	"""The repository, branch and issue a command operates on."""

	code_repo: RepositorySchema
	issue_repo: RepositorySchema
	git_repo: GitRepository
	branch: str
	issue_number: int

	@property
	def is_cross_repo(self) -> bool:
		"""Whether the issue lives in a different repository than the code."""
		return self.issue_repo.name != self.code_repo.name


def _is_within(path: Path, directory: Path) -> bool:
	return path == directory or directory in path.parents


def find_repo_for_directory(config: AppConfigSchema, cwd: Path) -> RepositorySchema | None:
	"""
	Find the code repository containing ``cwd``.

	When repositories are nested the deepest directory wins.

	Args:
	    config: Loaded configuration
	    cwd: Directory to look up

	Returns:
	    The matching repository, or None

	"""
	cwd = cwd.resolve()
	best: RepositorySchema | None = None
	best_depth = -1

	for repo in config.repositories:
		if not repo.is_code_repo:
			continue
		directory = Path(repo.directory).resolve()
		if _is_within(cwd, directory) and len(directory.parts) > best_depth:
			best = repo
			best_depth = len(directory.parts)

	if best:
		logger.info("Found matching repository '%s' for %s", best.name, cwd)
	return best


def select_code_repo(
	config: AppConfigSchema,
	cwd: Path | None = None,
	message: str = "Select a repository",
) -> RepositorySchema:
	"""
	Pick the code repository for ``cwd``, prompting when none matches.

	Raises:
	    RepositorySelectionError: If no code repositories are configured

	"""
	cwd = cwd or Path.cwd()
	repo = find_repo_for_directory(config, cwd)
	if repo:
		return repo

	code_repos = [repo.name for repo in config.repositories if repo.is_code_repo]
	if not code_repos:
		msg = "No code repositories configured. Add repositories with a 'directory' to your config file."
		raise RepositorySelectionError(msg)

	selected = config.get_repo(ask_select(message, code_repos))
	if selected is None:
		msg = "Selected repository not found"
		raise RepositorySelectionError(msg)
	logger.info("Repository selected: %s", selected.name)
	return selected


def lookup_issue_repo(config: AppConfigSchema, code_repo: RepositorySchema, project: str) -> RepositorySchema:
	"""
	Resolve the repository holding an issue.

	Args:
	    config: Loaded configuration
	    code_repo: Repository the branch lives in
	    project: Project prefix of the branch, empty for same-repo issues

	Raises:
	    RepositorySelectionError: If ``project`` is not configured
	    ProviderConfigError: If the two repositories use different hosts

	"""
	if not project or project == code_repo.name:
		return code_repo

	issue_repo = config.get_repo(project)
	if issue_repo is None:
		msg = f"Repository '{project}' not found in config"
		raise RepositorySelectionError(msg)

	ensure_same_provider(code_repo, issue_repo)
	logger.info("Cross-repo issue: code in '%s', issue in '%s'", code_repo.name, issue_repo.name)
	return issue_repo


def resolve_issue_context(config: AppConfigSchema, cwd: Path | None = None) -> IssueContext:
	"""
	Determine the repository and issue from the checked out branch.

	The branch must be named ``<issue>-...`` or ``<project>-<issue>-...``.

	Raises:
	    RepositorySelectionError: If the branch carries no issue number
	    GitError: If the repository cannot be opened

	"""
	cwd = (cwd or Path.cwd()).resolve()
	code_repo = select_code_repo(config, cwd)

	directory = Path(code_repo.directory).resolve()
	# inside a worktree the branch is read from the worktree itself
	git_repo = GitRepository(cwd if _is_within(cwd, directory) else directory)
	branch = git_repo.current_branch()
	logger.info("Current branch: %s", branch)

	try:
		project, issue_number = extract_issue_info(branch, config.repo_names)
	except ValueError as e:
		msg = f"Couldn't extract an issue number from branch '{branch}'. Are you on a feature branch?"
		raise RepositorySelectionError(msg) from e

	return IssueContext(
		code_repo=code_repo,
		issue_repo=lookup_issue_repo(config, code_repo, project),
		git_repo=git_repo,
		branch=branch,
		issue_number=issue_number,
	)
