"""Provider-neutral issue and merge request types."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class IssueParams:
	"""Parameters for creating an issue."""

	title: str
	labels: list[str] = field(default_factory=list)
	self_assign: bool = True
	milestone: str = ""


@dataclass
class Issue:
	"""An issue on GitHub or GitLab."""

	number: int
	title: str
	labels: list[str] = field(default_factory=list)
	milestone_id: int | None = None
	url: str = ""


@dataclass
class MergeRequestParams:
	"""Parameters for opening a merge or pull request."""

	title: str
	source_branch: str
	target_branch: str
	issue_number: int
	is_draft: bool = False
	labels: list[str] = field(default_factory=list)
	milestone_id: int | None = None
	description: str = ""
	remove_source_branch: bool = True
	squash: bool = False


@dataclass
class MergeRequest:
	"""A merge request (GitLab) or pull request (GitHub)."""

	number: int
	title: str
	url: str
	is_draft: bool = False
	source_branch: str = ""
