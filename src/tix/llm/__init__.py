"""Embedding and completion access plus description generation."""

from .client import LLMContext, MessageDict
from .errors import CompletionProviderError, EmbeddingProviderError, EmptyInputError, LLMError, NoResponseError

__all__ = [
	"CompletionProviderError",
	"EmbeddingProviderError",
	"EmptyInputError",
	"LLMContext",
	"LLMError",
	"MessageDict",
	"NoResponseError",
]
