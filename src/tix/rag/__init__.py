"""Diff chunking and vector retrieval for large merge request diffs."""

from .chunker import chunk_diff
from .retriever import (
	build_context_block,
	cosine_similarity,
	embed_chunks,
	estimate_token_count,
	retrieve_relevant_chunks,
	should_use_retrieval,
)
from .schemas import Chunk, EmbeddingVector, SearchResult, VectorStore

__all__ = [
	"Chunk",
	"EmbeddingVector",
	"SearchResult",
	"VectorStore",
	"build_context_block",
	"chunk_diff",
	"cosine_similarity",
	"embed_chunks",
	"estimate_token_count",
	"retrieve_relevant_chunks",
	"should_use_retrieval",
]
