"""Schema definitions for diff chunks and the in-memory vector store."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .similarity import cosine_similarity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Chunk:
	"""A contiguous slice of a unified diff."""

	content: str
	index: int
	file_path: str = ""
	line_count: int = 0


@dataclass
class EmbeddingVector:
	"""A chunk paired with its embedding."""

	chunk: Chunk
	embedding: list[float]


@dataclass
class SearchResult:
	"""A vector returned by a similarity search."""

	vector: EmbeddingVector
	similarity: float

	@property
	def chunk(self) -> Chunk:
		"""The chunk behind the matched vector."""
		return self.vector.chunk


@dataclass
class VectorStore:
	"""
	Flat, in-memory collection of embedding vectors.

	All vectors in one store share the same dimensionality. The store lives
	for a single description request and is never persisted.

	"""

	vectors: list[EmbeddingVector] = field(default_factory=list)

	def __post_init__(self) -> None:
		"""Validate that every initial vector has the same dimensionality."""
		initial = self.vectors
		self.vectors = []
		for vector in initial:
			self.add(vector)

	def __len__(self) -> int:
		"""Return the number of stored vectors."""
		return len(self.vectors)

	@property
	def dimension(self) -> int | None:
		"""Dimensionality of the stored embeddings, or None when empty."""
		if not self.vectors:
			return None
		return len(self.vectors[0].embedding)

	def add(self, vector: EmbeddingVector) -> None:
		"""
		Add a vector to the store.

		Args:
		    vector: The vector to add

		Raises:
		    ValueError: If the vector's dimensionality differs from the store's

		"""
		dimension = self.dimension
		if dimension is not None and len(vector.embedding) != dimension:
			msg = f"Embedding dimension {len(vector.embedding)} does not match store dimension {dimension}"
			raise ValueError(msg)
		self.vectors.append(vector)

	def search(self, query_embedding: list[float], top_k: int) -> list[SearchResult]:
		"""
		Rank stored vectors by cosine similarity to a query.

		Args:
		    query_embedding: Embedding of the query text
		    top_k: Maximum number of results

		Returns:
		    Up to ``top_k`` results, most similar first. Equal scores keep
		    insertion order.

		"""
		if top_k <= 0 or not self.vectors:
			return []

		results = [
			SearchResult(vector=vector, similarity=cosine_similarity(query_embedding, vector.embedding))
			for vector in self.vectors
		]
		# sorted() is stable, also with reverse=True
		results = sorted(results, key=lambda result: result.similarity, reverse=True)

		logger.debug("Vector search over %d vectors returned top %d", len(self.vectors), min(top_k, len(results)))
		return results[:top_k]
