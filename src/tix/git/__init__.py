"""Local git repository operations."""

from .repository import GitError, GitRepository, run_git_command

__all__ = ["GitError", "GitRepository", "run_git_command"]
