"""Pydantic schemas for the tix configuration file."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from tix.llm.client import DEFAULT_COMPLETION_MODEL, DEFAULT_EMBEDDING_MODEL, DEFAULT_TEMPERATURE
from tix.rag.retriever import DEFAULT_TOP_K, RAG_TOKEN_THRESHOLD


class WorktreeSchema(BaseModel):
	"""Worktree settings for a repository."""

	enabled: bool = False
	default_branch: str = ""


class LabelSettingsMixin(BaseModel):
	"""Ready/unready labels and statuses, set globally or per repository."""

	ready_label: str = ""
	ready_status: str = ""
	unready_label: str = ""
	unready_status: str = ""


class RepositorySchema(LabelSettingsMixin):
	"""
	One configured repository.

	A repository with a ``directory`` is a code repository. One without is an
	issue tracker only, referenced from other repositories' branch names.

	"""

	name: str
	directory: str = ""
	default_labels: str = ""
	github_repo: str = ""
	gitlab_repo: str = ""
	default_branch: str = ""
	worktree: WorktreeSchema = Field(default_factory=WorktreeSchema)

	@field_validator("directory")
	@classmethod
	def expand_home(cls, value: str) -> str:
		"""Expand a leading ``~/`` in the directory."""
		if value.startswith("~/"):
			return str(Path(value).expanduser())
		return value

	@property
	def is_code_repo(self) -> bool:
		"""Whether the repository has a local checkout configured."""
		return bool(self.directory)

	@property
	def target_branch(self) -> str:
		"""Branch merge requests target."""
		return self.default_branch or "main"


class LLMSchema(BaseModel):
	"""Settings for embedding and completion calls."""

	embedding_model: str = DEFAULT_EMBEDDING_MODEL
	completion_model: str = DEFAULT_COMPLETION_MODEL
	temperature: float = Field(default=DEFAULT_TEMPERATURE, ge=0.0, le=2.0)
	base_url: str | None = None
	top_k: int = Field(default=DEFAULT_TOP_K, ge=1)
	rag_threshold_tokens: int = Field(default=RAG_TOKEN_THRESHOLD, ge=1)


class AppConfigSchema(LabelSettingsMixin):
	"""Root of the configuration file."""

	repositories: list[RepositorySchema] = Field(default_factory=list)
	llm: LLMSchema = Field(default_factory=LLMSchema)

	@property
	def repo_names(self) -> list[str]:
		"""Names of all configured repositories."""
		return [repo.name for repo in self.repositories]

	def get_repo(self, name: str) -> RepositorySchema | None:
		"""Look up a repository by name."""
		for repo in self.repositories:
			if repo.name == name:
				return repo
		return None
