"""OpenAI client context shared by the retrieval and description code."""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Literal, TypedDict

from openai import OpenAI, OpenAIError

from .errors import CompletionProviderError, EmbeddingProviderError, LLMError, NoResponseError

if TYPE_CHECKING:
	from tix.config.config_schema import LLMSchema

logger = logging.getLogger(__name__)

DEFAULT_EMBEDDING_MODEL = "text-embedding-3-small"
DEFAULT_COMPLETION_MODEL = "gpt-4o-mini"
DEFAULT_TEMPERATURE = 0.2


class MessageDict(TypedDict):
	"""Typed dictionary for chat message structure."""

	role: Literal["user", "system"]
	content: str


class LLMContext:
	"""
	Explicit handle on the OpenAI endpoints used by tix.

	One context is built per command invocation and passed down to the
	retrieval and description functions. Nothing about it is global, so
	tests can hand in a mocked client.

	"""

	def __init__(
		self,
		client: OpenAI,
		embedding_model: str = DEFAULT_EMBEDDING_MODEL,
		completion_model: str = DEFAULT_COMPLETION_MODEL,
		temperature: float = DEFAULT_TEMPERATURE,
		log: logging.Logger | None = None,
	) -> None:
		"""
		Initialize the context.

		Args:
		    client: Configured OpenAI client
		    embedding_model: Model used for embeddings
		    completion_model: Model used for chat completions
		    temperature: Sampling temperature for completions
		    log: Logger to report progress on, defaults to this module's logger

		"""
		self.client = client
		self.embedding_model = embedding_model
		self.completion_model = completion_model
		self.temperature = temperature
		self.log = log or logger

	@classmethod
	def from_config(cls, config: LLMSchema, api_key: str | None = None) -> LLMContext:
		"""
		Build a context from the ``llm`` configuration section.

		Args:
		    config: LLM configuration
		    api_key: API key, read from ``OPENAI_API_KEY`` when omitted

		Returns:
		    A ready to use context

		Raises:
		    LLMError: If no API key is available

		"""
		key = api_key or os.environ.get("OPENAI_API_KEY")
		if not key:
			msg = "OPENAI_API_KEY environment variable is not set"
			raise LLMError(msg)

		client_kwargs: dict[str, str] = {"api_key": key}
		if config.base_url:
			client_kwargs["base_url"] = config.base_url

		return cls(
			client=OpenAI(**client_kwargs),
			embedding_model=config.embedding_model,
			completion_model=config.completion_model,
			temperature=config.temperature,
		)

	def embed(self, texts: list[str]) -> list[list[float]]:
		"""
		Embed a batch of texts in one request.

		Args:
		    texts: Texts to embed

		Returns:
		    One embedding per input text, in input order

		Raises:
		    EmbeddingProviderError: If the request fails or the response is malformed

		"""
		try:
			response = self.client.embeddings.create(model=self.embedding_model, input=texts)
		except OpenAIError as e:
			msg = f"Embedding request failed: {e}"
			self.log.exception(msg)
			raise EmbeddingProviderError(msg) from e

		try:
			data = sorted(response.data, key=lambda item: item.index)
			return [list(item.embedding) for item in data]
		except (TypeError, AttributeError) as e:
			msg = f"Malformed embedding response: {e}"
			self.log.exception(msg)
			raise EmbeddingProviderError(msg) from e

	def complete(self, messages: list[MessageDict]) -> str:
		"""
		Run a chat completion and return the assistant's text.

		Args:
		    messages: Conversation to send

		Returns:
		    The text of the first choice

		Raises:
		    CompletionProviderError: If the request fails
		    NoResponseError: If the response carries no text

		"""
		try:
			response = self.client.chat.completions.create(
				model=self.completion_model,
				messages=messages,
				temperature=self.temperature,
			)
		except OpenAIError as e:
			msg = f"Completion request failed: {e}"
			self.log.exception(msg)
			raise CompletionProviderError(msg) from e

		if not getattr(response, "choices", None):
			msg = "Completion returned no choices"
			raise NoResponseError(msg)

		try:
			content = response.choices[0].message.content
		except (TypeError, AttributeError, IndexError) as e:
			msg = f"Malformed completion response: {e}"
			raise NoResponseError(msg) from e
		if not isinstance(content, str) or not content.strip():
			msg = "Completion returned an empty message"
			raise NoResponseError(msg)

		return content
