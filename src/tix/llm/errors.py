"""Custom exceptions for the embedding and completion layer."""


class LLMError(Exception):
	"""Base exception for LLM-related errors."""


class EmptyInputError(LLMError):
	"""Raised when there is nothing to embed."""


class EmbeddingProviderError(LLMError):
	"""Raised when the embeddings endpoint fails or returns a malformed response."""


class CompletionProviderError(LLMError):
	"""Raised when the chat completion endpoint fails."""


class NoResponseError(LLMError):
	"""Raised when a completion returns no usable text."""
