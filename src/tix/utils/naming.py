"""Branch name, label and milestone helpers."""

from __future__ import annotations

import datetime
import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
	from collections.abc import Iterable

MAX_BRANCH_TITLE_LENGTH = 50

# Project names may contain dashes; the issue is the first all-digit part.
CROSS_REPO_BRANCH_RE = re.compile(r"^(?P<project>.+?)-(?P<issue>\d+)(?:-|$)")


def truncate_and_dash_case(text: str, max_len: int = MAX_BRANCH_TITLE_LENGTH) -> str:
	"""
	Convert text to dash-case and truncate it.

	Runs of capitals stay together, so ``"setupIRSAPermissions"`` becomes
	``"setup-irsa-permissions"``. Any run of non-alphanumeric characters
	becomes a single dash, and the result never starts or ends with one.

	Args:
	    text: Text to convert, usually an issue title
	    max_len: Maximum length of the result

	Returns:
	    The dash-cased text

	"""
	result: list[str] = []
	last_was_dash = False

	for i, char in enumerate(text):
		if not char.isalnum():
			if result and not last_was_dash:
				result.append("-")
				last_was_dash = True
			continue

		if char.isupper() and i > 0 and not last_was_dash:
			prev = text[i - 1]
			nxt = text[i + 1] if i + 1 < len(text) else ""
			if prev.isalpha():
				# lower->Upper starts a word, and so does the last capital of an acronym before lowercase
				if not prev.isupper() or (nxt.isalpha() and nxt.islower()):
					result.append("-")

		result.append(char.lower())
		last_was_dash = False

	dashed = "".join(result).rstrip("-")
	return dashed[:max_len].rstrip("-")


def branch_name(issue_number: int, title: str, project: str | None = None) -> str:
	"""
	Build the branch name for an issue.

	Args:
	    issue_number: Issue number
	    title: Issue title
	    project: Name of the issue's repository when it lives in another repo

	Returns:
	    ``123-title`` or ``project-123-title``

	"""
	slug = truncate_and_dash_case(title)
	if project:
		return f"{project}-{issue_number}-{slug}"
	return f"{issue_number}-{slug}"


def extract_issue_info(branch: str, projects: Iterable[str] = ()) -> tuple[str, int]:
	"""
	Read the issue reference out of a branch name.

	Args:
	    branch: Branch name such as ``123-foo`` or ``project-123-foo``
	    projects: Known repository names, matched before falling back to
	        splitting at the first numeric part

	Returns:
	    ``(project, issue_number)``, project empty for same-repo issues

	Raises:
	    ValueError: If the branch name carries no issue number

	"""
	head, sep, _ = branch.partition("-")
	if head.isdecimal() and sep:
		return "", int(head)

	for project in sorted(projects, key=len, reverse=True):
		match = re.match(rf"{re.escape(project)}-(\d+)(?:-|$)", branch)
		if project and match:
			return project, int(match.group(1))

	match = None if head.isdecimal() else CROSS_REPO_BRANCH_RE.match(branch)
	if not match:
		msg = f"invalid branch name format: {branch}"
		raise ValueError(msg)
	return match.group("project"), int(match.group("issue"))


def generate_milestone(date: datetime.date) -> str:
	"""Return the quarter milestone for ``date``, e.g. ``2025.Q2``."""
	quarter = (date.month - 1) // 3 + 1
	return f"{date.year}.Q{quarter}"


def split_labels(labels: str) -> list[str]:
	"""Split a comma separated label string, dropping blanks."""
	return [label.strip() for label in labels.split(",") if label.strip()]
