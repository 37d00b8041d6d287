"""The interface shared by the GitHub and GitLab providers."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
	from .schemas import Issue, IssueParams, MergeRequest, MergeRequestParams


@runtime_checkable
class SCMProvider(Protocol):
	"""A source code host holding issues and merge requests."""

	def create_issue(self, params: IssueParams) -> Issue:
		"""Create an issue."""
		...

	def get_issue(self, number: int) -> Issue:
		"""Fetch an issue by number."""
		...

	def get_open_requests(self, issue_number: int) -> list[MergeRequest]:
		"""Open merge requests whose description references the issue."""
		...

	def create_merge_request(self, params: MergeRequestParams) -> MergeRequest:
		"""Open a merge request."""
		...

	def get_request_diff(self, number: int) -> str:
		"""Unified diff of a merge request."""
		...

	def update_request_description(self, number: int, description: str) -> None:
		"""Replace a merge request's description, keeping its issue reference line."""
		...

	def update_issue_description(self, number: int, description: str) -> None:
		"""Replace an issue's description."""
		...

	def update_issue_title(self, number: int, title: str) -> None:
		"""Rename an issue."""
		...

	def add_labels_to_issue(self, number: int, labels: list[str]) -> None:
		"""Add labels to an issue."""
		...

	def remove_labels_from_issue(self, number: int, labels: list[str]) -> None:
		"""Remove labels from an issue."""
		...

	def update_issue_status(self, number: int, status: str) -> None:
		"""Set an issue's workflow status, where the host supports one."""
		...

	@property
	def url(self) -> str:
		"""Web URL of the repository."""
		...

	def cross_repo_issue_ref(self, number: int) -> str:
		"""Reference to an issue usable from another repository."""
		...


def references_issue(body: str | None, issue_number: int) -> bool:
	"""Whether ``body`` mentions ``#<issue_number>`` as a whole number."""
	if not body:
		return False
	return re.search(rf"#{issue_number}(?!\d)", body) is not None


def preserve_issue_reference(existing_body: str | None, description: str, prefixes: tuple[str, ...]) -> str:
	"""
	Keep the first issue reference line of ``existing_body`` above ``description``.

	Args:
	    existing_body: Current description of the merge request
	    description: New description
	    prefixes: Line prefixes that mark an issue reference, e.g. ``"Closes "``. The line must also contain ``#``

	Returns:
	    The description to store

	"""
	for line in (existing_body or "").splitlines():
		if line.startswith(prefixes) and "#" in line:
			return f"{line}\n\n{description}"
	return description
