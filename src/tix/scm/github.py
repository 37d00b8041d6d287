"""GitHub provider built on PyGithub."""

from __future__ import annotations

import contextlib
import logging
import os
from typing import TYPE_CHECKING

import requests
from github import Auth, Github
from github.GithubException import GithubException

from .base import preserve_issue_reference, references_issue
from .errors import ProviderConfigError, RequestExistsError, SCMError
from .schemas import Issue, IssueParams, MergeRequest, MergeRequestParams

if TYPE_CHECKING:
	from collections.abc import Iterator

	from github.Repository import Repository

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"
GITHUB_WEB_URL = "https://github.com"
DIFF_MEDIA_TYPE = "application/vnd.github.v3.diff"
ISSUE_REFERENCE_PREFIXES = ("Closes ", "Fixes ", "Resolves ")
REQUEST_TIMEOUT = 30


@contextlib.contextmanager
def _github_errors(action: str) -> Iterator[None]:
	"""Turn PyGithub exceptions into SCMError."""
	try:
		yield
	except GithubException as e:
		msg = f"Failed to {action}: {e}"
		logger.debug(msg)
		raise SCMError(msg) from e


class GitHubProvider:
	"""Issues and pull requests of one GitHub repository."""

	def __init__(self, repo_name: str, token: str | None = None, client: Github | None = None) -> None:
		"""
		Initialize the provider.

		Args:
		    repo_name: Repository as ``owner/repo``
		    token: API token, read from ``GITHUB_TOKEN`` when omitted
		    client: Preconfigured PyGithub client (optional)

		Raises:
		    ProviderConfigError: If the token is missing or the name is malformed

		"""
		parts = repo_name.split("/")
		if len(parts) != 2 or not all(parts):
			msg = f"Invalid GitHub repository name '{repo_name}', expected owner/repo"
			raise ProviderConfigError(msg)

		self.token = token or os.environ.get("GITHUB_TOKEN", "")
		if not self.token:
			msg = "GITHUB_TOKEN environment variable is required"
			raise ProviderConfigError(msg)

		self.repo_name = repo_name
		self.client = client or Github(auth=Auth.Token(self.token))
		self._repo: Repository | None = None

	@property
	def repo(self) -> Repository:
		"""The PyGithub repository, fetched on first use."""
		if self._repo is None:
			with _github_errors(f"load repository {self.repo_name}"):
				self._repo = self.client.get_repo(self.repo_name)
		return self._repo

	@property
	def url(self) -> str:
		"""Web URL of the repository."""
		return f"{GITHUB_WEB_URL}/{self.repo_name}"

	def cross_repo_issue_ref(self, number: int) -> str:
		"""Return ``owner/repo#<number>``."""
		return f"{self.repo_name}#{number}"

	def create_issue(self, params: IssueParams) -> Issue:
		"""
		Create an issue.

		Milestones are not set on GitHub issues.

		Raises:
		    SCMError: If the API call fails

		"""
		kwargs: dict[str, object] = {"title": params.title, "labels": params.labels}
		if params.self_assign:
			with _github_errors("get current user"):
				kwargs["assignees"] = [self.client.get_user().login]

		with _github_errors("create issue"):
			issue = self.repo.create_issue(**kwargs)

		logger.info("Created GitHub issue #%d", issue.number)
		return Issue(
			number=issue.number,
			title=issue.title,
			labels=[label.name for label in issue.labels],
			url=issue.html_url,
		)

	def get_issue(self, number: int) -> Issue:
		"""
		Fetch an issue.

		Raises:
		    SCMError: If the issue does not exist or the call fails

		"""
		with _github_errors(f"get issue #{number}"):
			issue = self.repo.get_issue(number)
			return Issue(
				number=issue.number,
				title=issue.title,
				labels=[label.name for label in issue.labels],
				milestone_id=issue.milestone.number if issue.milestone else None,
				url=issue.html_url,
			)

	def get_open_requests(self, issue_number: int) -> list[MergeRequest]:
		"""Open pull requests whose body references the issue."""
		with _github_errors("list pull requests"):
			return [
				MergeRequest(
					number=pr.number,
					title=pr.title,
					url=pr.html_url,
					is_draft=bool(pr.draft),
					source_branch=pr.head.ref,
				)
				for pr in self.repo.get_pulls(state="open")
				if references_issue(pr.body, issue_number)
			]

	def create_merge_request(self, params: MergeRequestParams) -> MergeRequest:
		"""
		Open a pull request, then copy labels and milestone onto it.

		Label and milestone failures are logged and do not fail the request.

		Raises:
		    RequestExistsError: If a pull request for the branch is already open
		    SCMError: If the API call fails

		"""
		body = params.description or f"Closes #{params.issue_number}"
		try:
			pr = self.repo.create_pull(
				base=params.target_branch,
				head=params.source_branch,
				title=params.title,
				body=body,
				draft=params.is_draft,
				maintainer_can_modify=True,
			)
		except GithubException as e:
			if "already exists" in str(e):
				raise RequestExistsError(
					"A pull request already exists for this branch.", self._existing_request_url(params)
				) from e
			msg = f"Failed to create pull request: {e}"
			raise SCMError(msg) from e

		if params.labels:
			try:
				pr.add_to_labels(*params.labels)
			except GithubException as e:
				logger.warning("Failed to apply labels to pull request #%d: %s", pr.number, e)

		if params.milestone_id:
			try:
				pr.as_issue().edit(milestone=self.repo.get_milestone(params.milestone_id))
			except GithubException as e:
				logger.warning("Failed to set milestone on pull request #%d: %s", pr.number, e)

		logger.info("Created pull request #%d", pr.number)
		return MergeRequest(
			number=pr.number,
			title=pr.title,
			url=pr.html_url,
			is_draft=bool(pr.draft),
			source_branch=params.source_branch,
		)

	def _existing_request_url(self, params: MergeRequestParams) -> str:
		try:
			for request in self.get_open_requests(params.issue_number):
				if request.source_branch == params.source_branch:
					return request.url
		except SCMError:
			logger.debug("Could not look up the existing pull request", exc_info=True)
		return f"{self.url}/pulls"

	def get_request_diff(self, number: int) -> str:
		"""
		Fetch the raw diff of a pull request.

		Raises:
		    SCMError: If the request fails

		"""
		diff_url = f"{GITHUB_API_URL}/repos/{self.repo_name}/pulls/{number}"
		headers = {"Accept": DIFF_MEDIA_TYPE, "Authorization": f"token {self.token}"}
		try:
			response = requests.get(diff_url, headers=headers, timeout=REQUEST_TIMEOUT)
			response.raise_for_status()
		except requests.RequestException as e:
			msg = f"Failed to get diff for pull request #{number}: {e}"
			logger.debug(msg)
			raise SCMError(msg) from e
		return response.text

	def update_request_description(self, number: int, description: str) -> None:
		"""Replace a pull request body, keeping its ``Closes #N`` line."""
		with _github_errors(f"update pull request #{number}"):
			pr = self.repo.get_pull(number)
			pr.edit(body=preserve_issue_reference(pr.body, description, ISSUE_REFERENCE_PREFIXES))

	def update_issue_description(self, number: int, description: str) -> None:
		"""Replace an issue body."""
		with _github_errors(f"update issue #{number}"):
			self.repo.get_issue(number).edit(body=description)

	def update_issue_title(self, number: int, title: str) -> None:
		"""Rename an issue."""
		with _github_errors(f"update issue #{number}"):
			self.repo.get_issue(number).edit(title=title)

	def add_labels_to_issue(self, number: int, labels: list[str]) -> None:
		"""Add labels to an issue."""
		with _github_errors(f"add labels to issue #{number}"):
			self.repo.get_issue(number).add_to_labels(*labels)

	def remove_labels_from_issue(self, number: int, labels: list[str]) -> None:
		"""Remove labels from an issue, ignoring labels it does not carry."""
		with _github_errors(f"remove labels from issue #{number}"):
			issue = self.repo.get_issue(number)
			current = {label.name for label in issue.labels}
			for label in labels:
				if label in current:
					issue.remove_from_labels(label)

	def update_issue_status(self, number: int, status: str) -> None:
		"""GitHub issues have no workflow status, so this does nothing."""
		logger.debug("Ignoring status '%s' for GitHub issue #%d", status, number)
