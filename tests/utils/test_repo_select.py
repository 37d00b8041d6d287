"""Tests for working out the repository and issue of a command."""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import MagicMock, patch

import pytest

from tix.config import AppConfigSchema
from tix.scm.errors import ProviderConfigError
from tix.utils.repo_select import (
	RepositorySelectionError,
	find_repo_for_directory,
	lookup_issue_repo,
	resolve_issue_context,
	select_code_repo,
)

if TYPE_CHECKING:
	from pathlib import Path


@pytest.fixture
def nested_config(tmp_path: Path) -> AppConfigSchema:
	"""Two code repositories, one nested inside the other, plus look-alike names."""
	(tmp_path / "work" / "mono" / "service").mkdir(parents=True)
	(tmp_path / "work" / "mono-old").mkdir(parents=True)
	return AppConfigSchema(
		repositories=[
			{"name": "mono", "directory": str(tmp_path / "work" / "mono"), "github_repo": "acme/mono"},
			{"name": "service", "directory": str(tmp_path / "work" / "mono" / "service"), "github_repo": "acme/svc"},
			{"name": "tracker", "gitlab_repo": "acme/tracker"},
		]
	)


@pytest.mark.unit
class TestFindRepoForDirectory:
	"""Test cases for matching the working directory to a repository."""

	def test_exact_directory(self, nested_config: AppConfigSchema, tmp_path: Path) -> None:
		"""The repository root itself matches."""
		repo = find_repo_for_directory(nested_config, tmp_path / "work" / "mono")

		assert repo is not None
		assert repo.name == "mono"

	def test_deepest_match_wins(self, nested_config: AppConfigSchema, tmp_path: Path) -> None:
		"""A nested repository beats its parent."""
		repo = find_repo_for_directory(nested_config, tmp_path / "work" / "mono" / "service")

		assert repo is not None
		assert repo.name == "service"

	def test_prefix_of_name_is_not_a_match(self, nested_config: AppConfigSchema, tmp_path: Path) -> None:
		"""mono-old is not inside mono even though the strings share a prefix."""
		assert find_repo_for_directory(nested_config, tmp_path / "work" / "mono-old") is None


@pytest.mark.unit
class TestSelectCodeRepo:
	"""Test cases for picking the code repository."""

	def test_prompts_outside_any_repo(self, nested_config: AppConfigSchema, tmp_path: Path) -> None:
		"""Outside every repository the user chooses among code repositories."""
		with patch("tix.utils.repo_select.ask_select", return_value="service") as mock_select:
			repo = select_code_repo(nested_config, tmp_path)

		assert repo.name == "service"
		assert mock_select.call_args.args[1] == ["mono", "service"]

	def test_no_code_repositories(self, tmp_path: Path) -> None:
		"""Issue-only configurations cannot pick a code repository."""
		config = AppConfigSchema(repositories=[{"name": "tracker", "github_repo": "acme/tracker"}])

		with pytest.raises(RepositorySelectionError, match="No code repositories"):
			select_code_repo(config, tmp_path)


@pytest.mark.unit
class TestLookupIssueRepo:
	"""Test cases for cross-repository issue lookups."""

	def test_same_repo_without_project(self, nested_config: AppConfigSchema) -> None:
		"""Plain branches refer to the code repository."""
		mono = nested_config.get_repo("mono")

		assert lookup_issue_repo(nested_config, mono, "") is mono

	def test_unknown_project(self, nested_config: AppConfigSchema) -> None:
		"""Branch prefixes must name a configured repository."""
		with pytest.raises(RepositorySelectionError, match="'nope' not found"):
			lookup_issue_repo(nested_config, nested_config.get_repo("mono"), "nope")

	def test_mixed_providers_rejected(self, nested_config: AppConfigSchema) -> None:
		"""A GitHub code repository cannot track issues on GitLab."""
		with pytest.raises(ProviderConfigError):
			lookup_issue_repo(nested_config, nested_config.get_repo("mono"), "tracker")

	def test_cross_repo(self, nested_config: AppConfigSchema) -> None:
		"""Another repository on the same host is resolved by name."""
		issue_repo = lookup_issue_repo(nested_config, nested_config.get_repo("mono"), "service")

		assert issue_repo.name == "service"


@pytest.mark.unit
class TestResolveIssueContext:
	"""Test cases for resolve_issue_context."""

	def test_reads_issue_from_branch(self, nested_config: AppConfigSchema, tmp_path: Path) -> None:
		"""The issue number and repository come from the current branch."""
		cwd = tmp_path / "work" / "mono"
		with patch("tix.utils.repo_select.GitRepository") as mock_git_cls:
			mock_git_cls.return_value.current_branch.return_value = "service-17-fix-thing"

			issue_ctx = resolve_issue_context(nested_config, cwd)

		mock_git_cls.assert_called_once_with(cwd.resolve())
		assert issue_ctx.code_repo.name == "mono"
		assert issue_ctx.issue_repo.name == "service"
		assert issue_ctx.issue_number == 17
		assert issue_ctx.is_cross_repo is True

	def test_dashed_issue_repository(self, tmp_path: Path) -> None:
		"""Branches started for a repository whose name has dashes resolve back to it."""
		code_dir = tmp_path / "code"
		code_dir.mkdir()
		config = AppConfigSchema(
			repositories=[
				{"name": "webapp", "directory": str(code_dir), "github_repo": "acme/webapp"},
				{"name": "issue-tracker-2024", "github_repo": "acme/issue-tracker-2024"},
			]
		)
		with patch("tix.utils.repo_select.GitRepository") as mock_git_cls:
			mock_git_cls.return_value.current_branch.return_value = "issue-tracker-2024-12-fix-login"

			issue_ctx = resolve_issue_context(config, code_dir)

		assert issue_ctx.issue_repo.name == "issue-tracker-2024"
		assert issue_ctx.issue_number == 12

	def test_branch_without_issue(self, nested_config: AppConfigSchema, tmp_path: Path) -> None:
		"""Branches like main carry no issue."""
		git_repo = MagicMock()
		git_repo.current_branch.return_value = "main"

		with (
			patch("tix.utils.repo_select.GitRepository", return_value=git_repo),
			pytest.raises(RepositorySelectionError, match="feature branch"),
		):
			resolve_issue_context(nested_config, tmp_path / "work" / "mono")
