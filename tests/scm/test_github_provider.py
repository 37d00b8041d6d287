"""Tests for the GitHub provider."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
import requests
from github.GithubException import GithubException

from tix.scm.errors import ProviderConfigError, RequestExistsError, SCMError
from tix.scm.github import GitHubProvider
from tix.scm.schemas import IssueParams, MergeRequestParams


def label(name: str) -> SimpleNamespace:
	"""A PyGithub-like label."""
	return SimpleNamespace(name=name)


def pull(number: int, body: str | None, ref: str = "feature", draft: bool = False) -> SimpleNamespace:
	"""A PyGithub-like pull request."""
	return SimpleNamespace(
		number=number,
		title=f"PR {number}",
		body=body,
		html_url=f"https://github.com/acme/webapp/pull/{number}",
		draft=draft,
		head=SimpleNamespace(ref=ref),
	)


@pytest.fixture
def client() -> MagicMock:
	"""A mocked PyGithub client."""
	mock = MagicMock()
	mock.get_user.return_value.login = "octocat"
	return mock


@pytest.fixture
def provider(client: MagicMock) -> GitHubProvider:
	"""Provider for acme/webapp on the mocked client."""
	return GitHubProvider("acme/webapp", token="ghp_test", client=client)


@pytest.fixture
def repo(client: MagicMock) -> MagicMock:
	"""The mocked repository."""
	return client.get_repo.return_value


@pytest.mark.unit
@pytest.mark.scm
class TestGitHubProviderSetup:
	"""Test cases for provider construction."""

	def test_requires_token(self) -> None:
		"""GITHUB_TOKEN must be set."""
		with pytest.raises(ProviderConfigError, match="GITHUB_TOKEN"):
			GitHubProvider("acme/webapp")

	def test_reads_token_from_environment(self, monkeypatch: pytest.MonkeyPatch, client: MagicMock) -> None:
		"""The token defaults to the environment."""
		monkeypatch.setenv("GITHUB_TOKEN", "ghp_env")

		assert GitHubProvider("acme/webapp", client=client).token == "ghp_env"

	@pytest.mark.parametrize("name", ["webapp", "acme/", "a/b/c"])
	def test_rejects_malformed_names(self, name: str) -> None:
		"""Repository names must be owner/repo."""
		with pytest.raises(ProviderConfigError, match="owner/repo"):
			GitHubProvider(name, token="t")

	def test_urls(self, provider: GitHubProvider) -> None:
		"""Web and cross-repository references use the repository name."""
		assert provider.url == "https://github.com/acme/webapp"
		assert provider.cross_repo_issue_ref(12) == "acme/webapp#12"


@pytest.mark.unit
@pytest.mark.scm
class TestGitHubIssues:
	"""Test cases for issue operations."""

	def test_create_issue_self_assigned(self, provider: GitHubProvider, repo: MagicMock) -> None:
		"""The authenticated user is assigned."""
		repo.create_issue.return_value = SimpleNamespace(
			number=5, title="New", labels=[label("bug")], html_url="https://github.com/acme/webapp/issues/5"
		)

		issue = provider.create_issue(IssueParams(title="New", labels=["bug"], milestone="2025.Q1"))

		repo.create_issue.assert_called_once_with(title="New", labels=["bug"], assignees=["octocat"])
		assert issue.number == 5
		assert issue.labels == ["bug"]

	def test_create_issue_without_assignee(self, provider: GitHubProvider, repo: MagicMock, client: MagicMock) -> None:
		"""--no-assign leaves the issue unassigned."""
		repo.create_issue.return_value = SimpleNamespace(number=6, title="New", labels=[], html_url="u")

		provider.create_issue(IssueParams(title="New", self_assign=False))

		repo.create_issue.assert_called_once_with(title="New", labels=[])
		client.get_user.assert_not_called()

	def test_get_issue(self, provider: GitHubProvider, repo: MagicMock) -> None:
		"""Issues carry their labels and milestone number."""
		repo.get_issue.return_value = SimpleNamespace(
			number=3, title="Bug", labels=[label("a"), label("b")], milestone=SimpleNamespace(number=8), html_url="u"
		)

		issue = provider.get_issue(3)

		assert issue.labels == ["a", "b"]
		assert issue.milestone_id == 8

	def test_api_errors_become_scm_errors(self, provider: GitHubProvider, repo: MagicMock) -> None:
		"""PyGithub exceptions surface as SCMError."""
		repo.get_issue.side_effect = GithubException(404, {"message": "Not Found"}, None)

		with pytest.raises(SCMError, match="get issue #3"):
			provider.get_issue(3)

	def test_remove_only_present_labels(self, provider: GitHubProvider, repo: MagicMock) -> None:
		"""Labels the issue does not carry are skipped."""
		issue = repo.get_issue.return_value
		issue.labels = [label("ready")]

		provider.remove_labels_from_issue(3, ["ready", "other"])

		issue.remove_from_labels.assert_called_once_with("ready")

	def test_add_labels(self, provider: GitHubProvider, repo: MagicMock) -> None:
		"""Labels are added in one call."""
		provider.add_labels_to_issue(3, ["a", "b"])

		repo.get_issue.return_value.add_to_labels.assert_called_once_with("a", "b")

	def test_status_is_noop(self, provider: GitHubProvider, client: MagicMock) -> None:
		"""GitHub has no issue status."""
		provider.update_issue_status(3, "review")

		client.get_repo.assert_not_called()


@pytest.mark.unit
@pytest.mark.scm
class TestGitHubPullRequests:
	"""Test cases for pull request operations."""

	def test_open_requests_filtered_by_reference(self, provider: GitHubProvider, repo: MagicMock) -> None:
		"""Only pull requests mentioning the issue are returned."""
		repo.get_pulls.return_value = [pull(1, "Closes #12"), pull(2, "Closes #123"), pull(3, None), pull(4, "see #12.")]

		requests_found = provider.get_open_requests(12)

		assert [pr.number for pr in requests_found] == [1, 4]
		repo.get_pulls.assert_called_once_with(state="open")

	def test_create_pull_request(self, provider: GitHubProvider, repo: MagicMock) -> None:
		"""Pull requests link the issue and inherit labels and milestone."""
		pr = MagicMock(number=9, title="#12 - Thing", html_url="https://github.com/acme/webapp/pull/9", draft=True)
		repo.create_pull.return_value = pr
		params = MergeRequestParams(
			title="#12 - Thing",
			source_branch="12-thing",
			target_branch="main",
			issue_number=12,
			is_draft=True,
			labels=["bug"],
			milestone_id=4,
		)

		request = provider.create_merge_request(params)

		repo.create_pull.assert_called_once_with(
			base="main",
			head="12-thing",
			title="#12 - Thing",
			body="Closes #12",
			draft=True,
			maintainer_can_modify=True,
		)
		pr.add_to_labels.assert_called_once_with("bug")
		pr.as_issue.return_value.edit.assert_called_once_with(milestone=repo.get_milestone.return_value)
		assert request.is_draft is True
		assert request.source_branch == "12-thing"

	def test_label_failure_does_not_fail_request(self, provider: GitHubProvider, repo: MagicMock) -> None:
		"""Labels are best effort."""
		pr = MagicMock(number=9, title="t", html_url="u", draft=False)
		pr.add_to_labels.side_effect = GithubException(422, {"message": "bad label"}, None)
		repo.create_pull.return_value = pr

		request = provider.create_merge_request(
			MergeRequestParams(title="t", source_branch="b", target_branch="main", issue_number=1, labels=["x"])
		)

		assert request.number == 9

	def test_existing_pull_request(self, provider: GitHubProvider, repo: MagicMock) -> None:
		"""An "already exists" error links to the open pull request."""
		repo.create_pull.side_effect = GithubException(
			422, {"message": "A pull request already exists for acme:12-thing."}, None
		)
		repo.get_pulls.return_value = [pull(7, "Closes #12", ref="12-thing")]

		with pytest.raises(RequestExistsError) as excinfo:
			provider.create_merge_request(
				MergeRequestParams(title="t", source_branch="12-thing", target_branch="main", issue_number=12)
			)

		assert excinfo.value.url == "https://github.com/acme/webapp/pull/7"

	def test_get_request_diff(self, provider: GitHubProvider) -> None:
		"""The raw diff is fetched with the diff media type."""
		response = MagicMock(text="diff --git a/x b/x\n")
		with patch("tix.scm.github.requests.get", return_value=response) as mock_get:
			diff = provider.get_request_diff(9)

		assert diff == "diff --git a/x b/x\n"
		mock_get.assert_called_once_with(
			"https://api.github.com/repos/acme/webapp/pulls/9",
			headers={"Accept": "application/vnd.github.v3.diff", "Authorization": "token ghp_test"},
			timeout=30,
		)

	def test_get_request_diff_failure(self, provider: GitHubProvider) -> None:
		"""HTTP errors surface as SCMError."""
		response = MagicMock()
		response.raise_for_status.side_effect = requests.HTTPError("404 Not Found")
		with patch("tix.scm.github.requests.get", return_value=response), pytest.raises(SCMError, match="404"):
			provider.get_request_diff(9)

	def test_update_description_keeps_issue_reference(self, provider: GitHubProvider, repo: MagicMock) -> None:
		"""The Closes line survives a description update."""
		pr = repo.get_pull.return_value
		pr.body = "Closes #12\n\nold text"

		provider.update_request_description(9, "### Summary\nnew")

		pr.edit.assert_called_once_with(body="Closes #12\n\n### Summary\nnew")
