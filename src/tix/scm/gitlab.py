"""GitLab provider talking to the REST v4 API with requests."""

from __future__ import annotations

import logging
import os
import re
from typing import Any
from urllib.parse import quote

import requests

from tix.utils.polling import PollTimeoutError, poll_until

from .base import preserve_issue_reference, references_issue
from .errors import ProviderConfigError, RequestExistsError, SCMError
from .schemas import Issue, IssueParams, MergeRequest, MergeRequestParams

logger = logging.getLogger(__name__)

DEFAULT_GITLAB_URL = "https://gitlab.com"
ISSUE_REFERENCE_PREFIXES = ("Closes ", "Related to ")
DRAFT_PREFIXES = ("Draft:", "WIP:")
STATUS_LABEL_PREFIX = "status::"
CLOSE_STATUSES = {"close", "closed"}
REOPEN_STATUSES = {"open", "opened", "reopen", "reopened"}
REQUEST_TIMEOUT = 30
PAGE_SIZE = 100
DIFF_POLL_ATTEMPTS = 5
DIFF_POLL_DELAY = 2.0


class GitLabAPIError(SCMError):
	"""An error response from the GitLab API."""

	def __init__(self, message: str, status_code: int | None = None) -> None:
		"""Initialize with the HTTP status of the failed call."""
		super().__init__(message)
		self.status_code = status_code


class GitLabProvider:
	"""Issues and merge requests of one GitLab project."""

	def __init__(
		self,
		project_path: str,
		token: str | None = None,
		base_url: str | None = None,
		session: requests.Session | None = None,
	) -> None:
		"""
		Initialize the provider.

		Args:
		    project_path: Project as ``group/project``
		    token: API token, read from ``GITLAB_TOKEN`` when omitted
		    base_url: Instance URL, read from ``GITLAB_URL`` or gitlab.com
		    session: Preconfigured requests session (optional)

		Raises:
		    ProviderConfigError: If no token is available

		"""
		token = token or os.environ.get("GITLAB_TOKEN", "")
		if not token:
			msg = "GITLAB_TOKEN environment variable is required"
			raise ProviderConfigError(msg)

		self.project_path = project_path
		self.base_url = (base_url or os.environ.get("GITLAB_URL") or DEFAULT_GITLAB_URL).rstrip("/")
		self.api_url = f"{self.base_url}/api/v4"
		self.session = session or requests.Session()
		self.session.headers.update({"PRIVATE-TOKEN": token})
		self._project_url = f"{self.api_url}/projects/{quote(project_path, safe='')}"

	@property
	def url(self) -> str:
		"""Web URL of the project."""
		return f"{self.base_url}/{self.project_path}"

	def cross_repo_issue_ref(self, number: int) -> str:
		"""Return ``group/project#<number>``."""
		return f"{self.project_path}#{number}"

	def _send(self, method: str, url: str, **kwargs: Any) -> requests.Response:  # noqa: ANN401
		"""
		Call the API and check the status code.

		Raises:
		    GitLabAPIError: On transport errors or error status codes

		"""
		try:
			response = self.session.request(method, url, timeout=REQUEST_TIMEOUT, **kwargs)
		except requests.RequestException as e:
			msg = f"GitLab request {method} {url} failed: {e}"
			raise GitLabAPIError(msg) from e

		if not response.ok:
			try:
				detail = response.json().get("message", response.text)
			except ValueError:
				detail = response.text
			msg = f"GitLab request {method} {url} failed ({response.status_code}): {detail}"
			logger.debug(msg)
			raise GitLabAPIError(msg, response.status_code)

		return response

	def _request(self, method: str, url: str, **kwargs: Any) -> Any:  # noqa: ANN401
		"""Call the API and decode the JSON response."""
		response = self._send(method, url, **kwargs)
		return response.json() if response.content else None

	def _get_all(self, url: str, params: dict[str, Any]) -> list[Any]:
		"""
		Collect every page of a list endpoint.

		Pages are followed through the ``X-Next-Page`` header, which GitLab
		leaves empty on the last page.

		"""
		items: list[Any] = []
		page = "1"
		while page:
			response = self._send("GET", url, params={**params, "page": page, "per_page": PAGE_SIZE})
			items.extend(response.json() if response.content else [])
			page = response.headers.get("X-Next-Page", "")
		return items

	def _issue_url(self, number: int) -> str:
		return f"{self._project_url}/issues/{number}"

	def _mr_url(self, number: int) -> str:
		return f"{self._project_url}/merge_requests/{number}"

	def get_milestone_id(self, title: str) -> int | None:
		"""
		Find a milestone by title, creating it on the project when missing.

		Project milestones are searched first, then the milestones of the
		project's group and its ancestors.

		Args:
		    title: Milestone title

		Returns:
		    The milestone id, None for an empty title

		"""
		if not title:
			return None

		milestones = self._request("GET", f"{self._project_url}/milestones", params={"title": title})
		if milestones:
			return milestones[0]["id"]

		project = self._request("GET", self._project_url)
		namespace = project.get("namespace") or {}
		if namespace.get("kind") == "group":
			group_milestones = self._request(
				"GET",
				f"{self.api_url}/groups/{namespace['id']}/milestones",
				params={"title": title, "include_ancestors": "true"},
			)
			if group_milestones:
				return group_milestones[0]["id"]

		logger.info("Creating milestone '%s' in %s", title, self.project_path)
		milestone = self._request("POST", f"{self._project_url}/milestones", json={"title": title})
		return milestone["id"]

	@staticmethod
	def _to_issue(data: dict[str, Any]) -> Issue:
		milestone = data.get("milestone") or {}
		return Issue(
			number=data["iid"],
			title=data["title"],
			labels=list(data.get("labels") or []),
			milestone_id=milestone.get("id"),
			url=data.get("web_url", ""),
		)

	def create_issue(self, params: IssueParams) -> Issue:
		"""
		Create an issue, resolving the milestone title to an id.

		Raises:
		    SCMError: If any API call fails

		"""
		payload: dict[str, Any] = {"title": params.title, "labels": ",".join(params.labels)}
		if params.self_assign:
			payload["assignee_ids"] = [self._request("GET", f"{self.api_url}/user")["id"]]
		milestone_id = self.get_milestone_id(params.milestone)
		if milestone_id:
			payload["milestone_id"] = milestone_id

		issue = self._to_issue(self._request("POST", f"{self._project_url}/issues", json=payload))
		logger.info("Created GitLab issue #%d", issue.number)
		return issue

	def get_issue(self, number: int) -> Issue:
		"""Fetch an issue by iid."""
		return self._to_issue(self._request("GET", self._issue_url(number)))

	def get_open_requests(self, issue_number: int) -> list[MergeRequest]:
		"""Open merge requests whose description references the issue."""
		merge_requests = self._get_all(f"{self._project_url}/merge_requests", {"state": "opened"})
		return [
			MergeRequest(
				number=mr["iid"],
				title=mr["title"],
				url=mr["web_url"],
				is_draft=bool(mr.get("draft")) or mr["title"].startswith(DRAFT_PREFIXES),
				source_branch=mr.get("source_branch", ""),
			)
			for mr in merge_requests
			if references_issue(mr.get("description"), issue_number)
		]

	def create_merge_request(self, params: MergeRequestParams) -> MergeRequest:
		"""
		Open a merge request.

		Raises:
		    RequestExistsError: If a merge request for the branch is already open
		    SCMError: If the API call fails

		"""
		title = f"Draft: {params.title}" if params.is_draft else params.title
		payload: dict[str, Any] = {
			"title": title,
			"source_branch": params.source_branch,
			"target_branch": params.target_branch,
			"description": params.description or f"Closes #{params.issue_number}",
			"remove_source_branch": params.remove_source_branch,
			"squash": params.squash,
		}
		if params.labels:
			payload["labels"] = ",".join(params.labels)
		if params.milestone_id:
			payload["milestone_id"] = params.milestone_id

		try:
			mr = self._request("POST", f"{self._project_url}/merge_requests", json=payload)
		except GitLabAPIError as e:
			if "Another open merge request already exists" in str(e):
				match = re.search(r"!(\d+)", str(e))
				url = f"{self.url}/-/merge_requests/{match.group(1)}" if match else f"{self.url}/-/merge_requests"
				raise RequestExistsError("A merge request already exists for this branch.", url) from e
			raise

		logger.info("Created merge request !%d", mr["iid"])
		return MergeRequest(
			number=mr["iid"],
			title=mr["title"],
			url=mr["web_url"],
			is_draft=params.is_draft,
			source_branch=params.source_branch,
		)

	def get_request_diff(self, number: int) -> str:
		"""
		Assemble a unified diff from the latest diff version of a merge request.

		GitLab computes diff versions asynchronously after a push, so an empty
		version list is polled a few times before giving up.

		Raises:
		    SCMError: If no diff version appears or a call fails

		"""
		versions_url = f"{self._mr_url(number)}/versions"
		try:
			versions = poll_until(
				lambda: self._request("GET", versions_url),
				bool,
				max_attempts=DIFF_POLL_ATTEMPTS,
				delay=DIFF_POLL_DELAY,
			)
		except PollTimeoutError as e:
			msg = f"No diff versions found for merge request !{number}"
			raise SCMError(msg) from e

		latest = self._request("GET", f"{versions_url}/{versions[0]['id']}")
		parts = [
			f"--- a/{change['old_path']}\n+++ b/{change['new_path']}\n{change['diff']}\n"
			for change in latest.get("diffs") or []
		]
		return "".join(parts)

	def update_request_description(self, number: int, description: str) -> None:
		"""Replace a merge request description, keeping its ``Closes #N`` line."""
		existing = self._request("GET", self._mr_url(number))
		body = preserve_issue_reference(existing.get("description"), description, ISSUE_REFERENCE_PREFIXES)
		self._request("PUT", self._mr_url(number), json={"description": body})

	def update_issue_description(self, number: int, description: str) -> None:
		"""Replace an issue description."""
		self._request("PUT", self._issue_url(number), json={"description": description})

	def update_issue_title(self, number: int, title: str) -> None:
		"""Rename an issue."""
		self._request("PUT", self._issue_url(number), json={"title": title})

	def add_labels_to_issue(self, number: int, labels: list[str]) -> None:
		"""Add labels to an issue, keeping the ones it has."""
		self._request("PUT", self._issue_url(number), json={"add_labels": ",".join(labels)})

	def remove_labels_from_issue(self, number: int, labels: list[str]) -> None:
		"""Remove labels from an issue."""
		self._request("PUT", self._issue_url(number), json={"remove_labels": ",".join(labels)})

	def update_issue_status(self, number: int, status: str) -> None:
		"""
		Set an issue's status.

		``close``/``closed`` and ``open``/``reopen`` change the issue state.
		Any other value becomes the scoped label ``status::<value>``, which
		replaces the previous status label.

		"""
		normalized = status.strip().lower()
		if normalized in CLOSE_STATUSES:
			payload: dict[str, Any] = {"state_event": "close"}
		elif normalized in REOPEN_STATUSES:
			payload = {"state_event": "reopen"}
		else:
			payload = {"add_labels": f"{STATUS_LABEL_PREFIX}{status.strip()}"}
		self._request("PUT", self._issue_url(number), json=payload)
		logger.info("Updated status of issue #%d to '%s'", number, status)
