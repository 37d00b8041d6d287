"""Embedding, ranking and context assembly for retrieval-augmented prompts."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tix.llm.errors import EmbeddingProviderError, EmptyInputError

from .chunker import chunk_diff
from .schemas import EmbeddingVector, VectorStore
from .similarity import cosine_similarity

if TYPE_CHECKING:
	from tix.llm.client import LLMContext

	from .schemas import Chunk, SearchResult

logger = logging.getLogger(__name__)

EMBEDDING_BATCH_SIZE = 50
DEFAULT_TOP_K = 15
CHARS_PER_TOKEN = 4
RAG_TOKEN_THRESHOLD = 50_000
MAX_CONTEXT_CHARS = 120_000

__all__ = [
	"build_context_block",
	"cosine_similarity",
	"embed_chunks",
	"estimate_token_count",
	"retrieve_relevant_chunks",
	"should_use_retrieval",
]


def estimate_token_count(text: str) -> int:
	"""Approximate the token count of ``text`` at four characters per token."""
	return len(text) // CHARS_PER_TOKEN


def should_use_retrieval(
	diff_text: str,
	forced_override: bool | None = None,
	threshold: int = RAG_TOKEN_THRESHOLD,
) -> bool:
	"""
	Decide whether a diff is too large to send whole.

	Args:
	    diff_text: The full diff
	    forced_override: Explicit user choice, returned as is when set
	    threshold: Estimated token count from which retrieval kicks in

	Returns:
	    True when the prompt should be assembled from retrieved chunks

	"""
	if forced_override is not None:
		return forced_override
	return estimate_token_count(diff_text) >= threshold


def embed_chunks(
	ctx: LLMContext,
	chunks: list[Chunk],
	batch_size: int = EMBEDDING_BATCH_SIZE,
) -> list[EmbeddingVector]:
	"""
	Embed chunk contents in sequential batches.

	Args:
	    ctx: LLM context providing the embeddings endpoint
	    chunks: Chunks to embed
	    batch_size: Maximum number of inputs per request

	Returns:
	    One vector per chunk, in chunk order

	Raises:
	    EmptyInputError: If ``chunks`` is empty
	    EmbeddingProviderError: If any batch fails or returns the wrong
	        number of embeddings. Vectors from earlier batches are discarded.

	"""
	if not chunks:
		msg = "No chunks to embed"
		raise EmptyInputError(msg)

	vectors: list[EmbeddingVector] = []
	total_batches = (len(chunks) + batch_size - 1) // batch_size

	for batch_number, start in enumerate(range(0, len(chunks), batch_size), start=1):
		batch = chunks[start : start + batch_size]
		ctx.log.debug("Embedding batch %d/%d (%d chunks)", batch_number, total_batches, len(batch))

		embeddings = ctx.embed([chunk.content for chunk in batch])
		if len(embeddings) != len(batch):
			msg = f"Embedding response for batch {batch_number} had {len(embeddings)} items, expected {len(batch)}"
			ctx.log.error(msg)
			raise EmbeddingProviderError(msg)

		vectors.extend(
			EmbeddingVector(chunk=chunk, embedding=embedding) for chunk, embedding in zip(batch, embeddings, strict=True)
		)

	ctx.log.info("Generated embeddings for %d chunks", len(vectors))
	return vectors


def embed_query(ctx: LLMContext, query: str) -> list[float]:
	"""
	Embed a single query string.

	Raises:
	    EmptyInputError: If ``query`` is blank
	    EmbeddingProviderError: If the request fails or returns nothing

	"""
	if not query.strip():
		msg = "Query text is empty"
		raise EmptyInputError(msg)

	embeddings = ctx.embed([query])
	if len(embeddings) != 1:
		msg = f"Embedding response for query had {len(embeddings)} items, expected 1"
		raise EmbeddingProviderError(msg)
	return embeddings[0]


def retrieve_relevant_chunks(
	ctx: LLMContext,
	diff: str,
	query: str,
	top_k: int = DEFAULT_TOP_K,
) -> list[SearchResult]:
	"""
	Chunk a diff and return the chunks most similar to ``query``.

	Args:
	    ctx: LLM context
	    diff: Unified diff to search
	    query: Description of the wanted output
	    top_k: Number of chunks to keep

	Returns:
	    At most ``top_k`` results, best first

	Raises:
	    EmptyInputError: If the diff has no content
	    EmbeddingProviderError: If an embeddings call fails

	"""
	chunks = chunk_diff(diff)
	ctx.log.info("Split diff into %d chunks for retrieval", len(chunks))

	store = VectorStore(embed_chunks(ctx, chunks))
	query_embedding = embed_query(ctx, query)
	results = store.search(query_embedding, top_k)

	ctx.log.info("Selected %d of %d chunks", len(results), len(store))
	return results


def build_context_block(results: list[SearchResult], max_chars: int = MAX_CONTEXT_CHARS) -> str:
	"""
	Join retrieved chunks into a single prompt section.

	Each chunk is introduced by a header with its file path and similarity.
	Chunks are added best first until ``max_chars`` would be exceeded; the
	first chunk is always included, truncated if needed.

	Args:
	    results: Search results, best first
	    max_chars: Upper bound on the size of the block

	Returns:
	    The assembled context

	"""
	sections: list[str] = []
	used = 0

	for result in results:
		file_path = result.chunk.file_path or "unknown file"
		header = f"--- Chunk {result.chunk.index + 1} (file: {file_path}, similarity: {result.similarity:.3f}) ---\n"
		section = header + result.chunk.content
		if not section.endswith("\n"):
			section += "\n"

		needed = len(section) + (1 if sections else 0)
		if used + needed > max_chars:
			if not sections:
				sections.append(section[:max_chars])
			logger.debug("Context block limit of %d characters reached", max_chars)
			break

		sections.append(section)
		used += needed

	return "\n".join(sections)
