"""Global test fixtures and configuration."""

from __future__ import annotations

from types import SimpleNamespace
from typing import TYPE_CHECKING
from unittest.mock import MagicMock

import pytest

from tix.config import AppConfigSchema, ConfigLoader
from tix.llm.client import LLMContext

if TYPE_CHECKING:
	from collections.abc import Iterator
	from pathlib import Path


@pytest.fixture(autouse=True)
def reset_config_loader() -> Iterator[None]:
	"""Make every test start without a cached configuration."""
	ConfigLoader._instance = None
	yield
	ConfigLoader._instance = None


@pytest.fixture(autouse=True)
def clean_provider_env(monkeypatch: pytest.MonkeyPatch) -> None:
	"""Keep real tokens from the developer's environment out of tests."""
	for name in ("GITHUB_TOKEN", "GITLAB_TOKEN", "GITLAB_URL", "OPENAI_API_KEY"):
		monkeypatch.delenv(name, raising=False)


def embeddings_response(vectors: list[list[float]]) -> SimpleNamespace:
	"""Build an object shaped like an OpenAI embeddings response."""
	return SimpleNamespace(data=[SimpleNamespace(index=i, embedding=vector) for i, vector in enumerate(vectors)])


def completion_response(content: str | None) -> SimpleNamespace:
	"""Build an object shaped like an OpenAI chat completion response."""
	message = SimpleNamespace(content=content)
	return SimpleNamespace(choices=[SimpleNamespace(message=message)])


@pytest.fixture
def mock_openai() -> MagicMock:
	"""OpenAI client whose embeddings call returns one unit vector per input."""
	client = MagicMock()

	def create_embeddings(model: str, input: list[str]) -> SimpleNamespace:  # noqa: A002
		return embeddings_response([[1.0, float(i), 0.0] for i in range(len(input))])

	client.embeddings.create.side_effect = create_embeddings
	client.chat.completions.create.return_value = completion_response("Generated text")
	return client


@pytest.fixture
def llm_context(mock_openai: MagicMock) -> LLMContext:
	"""LLM context wired to the mocked OpenAI client."""
	return LLMContext(client=mock_openai)


@pytest.fixture
def app_config(tmp_path: Path) -> AppConfigSchema:
	"""A configuration with a GitHub code repo and a GitHub issue tracker."""
	code_dir = tmp_path / "code"
	code_dir.mkdir()
	return AppConfigSchema(
		ready_label="ready",
		unready_label="in-progress",
		repositories=[
			{
				"name": "webapp",
				"directory": str(code_dir),
				"github_repo": "acme/webapp",
				"default_labels": "feature, backend",
				"default_branch": "develop",
			},
			{
				"name": "tracker",
				"github_repo": "acme/tracker",
			},
		],
	)
