"""Git operations on a configured repository using pygit2 and the git CLI."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

import pygit2
from pygit2 import Commit
from pygit2 import GitError as Pygit2GitError

logger = logging.getLogger(__name__)


class GitError(Exception):
	"""Custom exception for Git-related errors."""


def run_git_command(command: list[str], cwd: Path | str | None = None) -> str:
	"""
	Run a Git command and return its output.

	Args:
	    command: Git command to run, including the ``git`` executable
	    cwd: Working directory (optional)

	Returns:
	    Command output as string

	Raises:
	    GitError: If the command fails

	"""
	try:
		result = subprocess.run(  # noqa: S603
			command,
			cwd=cwd,
			capture_output=True,
			text=True,
			check=True,
		)
	except (subprocess.CalledProcessError, FileNotFoundError) as e:
		stderr = getattr(e, "stderr", "") or str(e)
		msg = f"Git command failed: {' '.join(command)}\nError: {stderr.strip()}"
		logger.debug(msg)
		raise GitError(msg) from e
	return result.stdout


class GitRepository:
	"""A local checkout of a configured repository."""

	def __init__(self, path: Path | str) -> None:
		"""
		Open the repository containing ``path``.

		Args:
		    path: Repository directory, or any directory inside it

		Raises:
		    GitError: If no repository is found

		"""
		self.path = Path(path)
		repo_path = pygit2.discover_repository(str(self.path))
		if not repo_path:
			msg = f"Not a git repository: {self.path}"
			raise GitError(msg)
		try:
			self.repo = pygit2.Repository(repo_path)
		except Pygit2GitError as e:
			msg = f"Failed to open git repository at {self.path}: {e}"
			logger.exception(msg)
			raise GitError(msg) from e
		self.workdir = Path(self.repo.workdir) if self.repo.workdir else self.path

	def is_clean(self) -> bool:
		"""
		Check whether the working tree has no changes, untracked files included.

		Raises:
		    GitError: If ``git status`` fails

		"""
		output = run_git_command(["git", "status", "--porcelain"], cwd=self.workdir)
		is_clean = not output.strip()
		logger.debug("Repository clean check: %s", is_clean)
		return is_clean

	def current_branch(self) -> str:
		"""
		Return the short name of the checked out branch.

		Raises:
		    GitError: If HEAD is unborn or detached

		"""
		if self.repo.head_is_unborn:
			msg = "Repository has no commits yet"
			raise GitError(msg)
		if self.repo.head_is_detached:
			msg = "HEAD is not a branch"
			raise GitError(msg)
		return self.repo.head.shorthand

	def _resolve_commit(self, from_reference: str | None) -> Commit:
		if from_reference:
			try:
				return self.repo.revparse_single(from_reference).peel(Commit)
			except (KeyError, Pygit2GitError) as e:
				msg = f"Could not resolve reference '{from_reference}'"
				raise GitError(msg) from e
		if self.repo.head_is_unborn:
			msg = "Cannot create branch from unborn HEAD. Please make an initial commit."
			raise GitError(msg)
		return self.repo.head.peel(Commit)

	def create_branch(self, branch_name: str, from_reference: str | None = None) -> None:
		"""
		Create a branch without checking it out.

		Args:
		    branch_name: Name of the branch to create
		    from_reference: Branch name or commit to start from, defaults to HEAD

		Raises:
		    GitError: If the start point cannot be resolved or the branch exists

		"""
		source_commit = self._resolve_commit(from_reference)
		try:
			self.repo.create_branch(branch_name, source_commit)
		except (ValueError, Pygit2GitError) as e:
			msg = f"Failed to create branch '{branch_name}': {e}"
			logger.exception(msg)
			raise GitError(msg) from e
		logger.info("Branch '%s' created from '%s'", branch_name, source_commit.id)

	def checkout_branch(self, branch_name: str) -> None:
		"""
		Check out an existing local branch.

		Raises:
		    GitError: If the branch does not exist or checkout fails

		"""
		try:
			branch_ref = self.repo.lookup_reference(f"refs/heads/{branch_name}")
			self.repo.checkout(branch_ref)
		except (KeyError, Pygit2GitError) as e:
			msg = f"Failed to checkout branch '{branch_name}': {e}"
			logger.exception(msg)
			raise GitError(msg) from e
		logger.info("Checked out branch '%s'", branch_name)

	def create_and_checkout_branch(self, branch_name: str, from_reference: str | None = None) -> None:
		"""Create a branch and switch to it."""
		self.create_branch(branch_name, from_reference)
		self.checkout_branch(branch_name)

	def add_worktree(self, branch_name: str, worktree_path: Path, from_reference: str | None = None) -> Path:
		"""
		Create ``branch_name`` and check it out in a new worktree.

		Args:
		    branch_name: Branch to create, also used as the worktree name
		    worktree_path: Directory for the new worktree, must not exist yet
		    from_reference: Start point of the branch, defaults to HEAD

		Returns:
		    The worktree directory

		Raises:
		    GitError: If the branch or worktree cannot be created

		"""
		if worktree_path.exists():
			msg = f"Worktree directory already exists: {worktree_path}"
			raise GitError(msg)

		self.create_branch(branch_name, from_reference)
		try:
			branch_ref = self.repo.lookup_reference(f"refs/heads/{branch_name}")
			self.repo.add_worktree(branch_name, str(worktree_path), branch_ref)
		except (KeyError, ValueError, Pygit2GitError) as e:
			msg = f"Failed to create worktree '{branch_name}' at {worktree_path}: {e}"
			logger.exception(msg)
			raise GitError(msg) from e

		logger.info("Created worktree for '%s' at %s", branch_name, worktree_path)
		return worktree_path

	def push(self, branch_name: str, remote_name: str = "origin") -> None:
		"""
		Push a branch and set its upstream.

		Uses the git CLI so configured credential helpers and SSH agents apply.

		Raises:
		    GitError: If the remote is unknown or the push fails

		"""
		try:
			self.repo.remotes[remote_name]
		except KeyError as e:
			msg = f"Remote '{remote_name}' not found"
			raise GitError(msg) from e

		logger.info("Pushing branch '%s' to '%s'", branch_name, remote_name)
		run_git_command(["git", "push", "--set-upstream", remote_name, branch_name], cwd=self.workdir)
		logger.info("Branch '%s' pushed to '%s'", branch_name, remote_name)
