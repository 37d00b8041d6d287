"""Pick and build the provider for a configured repository."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Literal

from .errors import ProviderConfigError
from .github import GitHubProvider
from .gitlab import GitLabProvider

if TYPE_CHECKING:
	from tix.config.config_schema import RepositorySchema

	from .base import SCMProvider

logger = logging.getLogger(__name__)

ProviderKind = Literal["github", "gitlab"]


def provider_kind(repo: RepositorySchema) -> ProviderKind:
	"""
	Return which host a repository lives on.

	Raises:
	    ProviderConfigError: Unless exactly one of ``github_repo`` and
	        ``gitlab_repo`` is set

	"""
	if bool(repo.github_repo) == bool(repo.gitlab_repo):
		msg = f"Repository '{repo.name}' must set exactly one of github_repo or gitlab_repo"
		raise ProviderConfigError(msg)
	return "github" if repo.github_repo else "gitlab"


def ensure_same_provider(code_repo: RepositorySchema, issue_repo: RepositorySchema) -> None:
	"""
	Check that a code repository and its issue repository share a host.

	Raises:
	    ProviderConfigError: If they differ
	"""
	if provider_kind(code_repo) != provider_kind(issue_repo):
		msg = (
			f"Issue repository '{issue_repo.name}' and code repository '{code_repo.name}' "
			"must use the same provider (both GitHub or both GitLab)"
		)
		raise ProviderConfigError(msg)


def create_provider(repo: RepositorySchema) -> SCMProvider:
	"""
	Build the provider for a repository.

	Raises:
	    ProviderConfigError: If the repository settings or token are missing
	"""
	if provider_kind(repo) == "github":
		logger.debug("Using GitHub provider for %s", repo.github_repo)
		return GitHubProvider(repo.github_repo)
	logger.debug("Using GitLab provider for %s", repo.gitlab_repo)
	return GitLabProvider(repo.gitlab_repo)
