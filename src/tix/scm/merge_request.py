"""Open a merge request for the current issue branch."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import typer

from .errors import RequestExistsError, SCMError
from .schemas import MergeRequestParams

if TYPE_CHECKING:
	from tix.git.repository import GitRepository

	from .base import SCMProvider
	from .schemas import MergeRequest

logger = logging.getLogger(__name__)


def create_merge_request(
	provider: SCMProvider,
	git_repo: GitRepository,
	branch: str,
	issue_number: int,
	target_branch: str = "main",
	remote: str = "origin",
	is_draft: bool = False,
	issue_provider: SCMProvider | None = None,
	cross_repo_ref: str = "",
	open_browser: bool = True,
) -> MergeRequest:
	"""
	Push ``branch`` and open a merge request for its issue.

	The request is titled ``#<issue> - <issue title>`` and inherits the
	issue's labels and milestone.

	Args:
	    provider: Provider of the code repository
	    git_repo: Local checkout holding ``branch``
	    branch: Branch to push and merge
	    issue_number: Issue the branch implements
	    target_branch: Branch to merge into
	    remote: Remote to push to
	    is_draft: Open the request as a draft
	    issue_provider: Provider of the issue's repository when it differs
	    cross_repo_ref: Issue reference for the description when the issue lives elsewhere
	    open_browser: Open the new request in the browser

	Returns:
	    The created request

	Raises:
	    RequestExistsError: If an open request for ``branch`` already exists
	    SCMError: If an API call fails
	    GitError: If the push fails

	"""
	try:
		open_requests = provider.get_open_requests(issue_number)
	except SCMError:
		logger.warning("Could not check for existing merge requests", exc_info=True)
		open_requests = []

	for request in open_requests:
		if request.source_branch == branch or branch in request.title:
			raise RequestExistsError("A merge request already exists for this branch.", request.url)

	git_repo.push(branch, remote)

	issue = (issue_provider or provider).get_issue(issue_number)
	params = MergeRequestParams(
		title=f"#{issue_number} - {issue.title}",
		source_branch=branch,
		target_branch=target_branch,
		issue_number=issue_number,
		is_draft=is_draft,
		labels=issue.labels,
		# milestones are per repository, only reuse them within the same one
		milestone_id=issue.milestone_id if issue_provider is None else None,
		description=f"Closes {cross_repo_ref}" if cross_repo_ref else "",
	)

	request = provider.create_merge_request(params)
	logger.info("Created merge request %s", request.url)

	if open_browser:
		typer.launch(request.url)

	return request
