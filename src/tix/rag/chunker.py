"""Split unified diffs into bounded, file-aligned chunks."""

from __future__ import annotations

import logging
from dataclasses import replace

from .schemas import Chunk

logger = logging.getLogger(__name__)

MAX_LINES_PER_CHUNK = 800
MIN_LINES_PER_CHUNK = 100

FILE_HEADER_PREFIX = "diff --git"
NEW_FILE_PREFIX = "+++ b/"


def _split_lines(text: str) -> list[str]:
	"""Split on newlines, keeping each line's terminator."""
	parts = text.split("\n")
	lines = [part + "\n" for part in parts[:-1]]
	if parts[-1]:
		lines.append(parts[-1])
	return lines


def chunk_diff(
	diff: str,
	max_lines: int = MAX_LINES_PER_CHUNK,
	min_lines: int = MIN_LINES_PER_CHUNK,
) -> list[Chunk]:
	"""
	Split a unified diff into chunks for embedding.

	A chunk is closed when it reaches ``max_lines`` lines, or when the next
	line opens a new file (``diff --git``) and the chunk already holds at
	least ``min_lines`` lines. Each chunk records the last ``+++ b/<path>``
	header seen before it was closed.

	Blank stretches are never emitted on their own; they stay attached to
	the following chunk, or to the last one at the end of the diff, so the
	chunk contents joined in order always reproduce ``diff`` exactly.

	Args:
	    diff: Unified diff text
	    max_lines: Hard upper bound on lines per chunk
	    min_lines: Minimum lines before a file boundary may close a chunk

	Returns:
	    Chunks in diff order, indexed from 0. Empty when the diff has no
	    visible content.

	"""
	lines = _split_lines(diff)
	chunks: list[Chunk] = []
	buffer: list[str] = []
	current_file_path = ""

	def flush() -> None:
		content = "".join(buffer)
		if not content.strip():
			# keep accumulating, the blank lines move into the next chunk
			return
		chunks.append(
			Chunk(
				content=content,
				index=len(chunks),
				file_path=current_file_path,
				line_count=len(buffer),
			)
		)
		buffer.clear()

	for i, line in enumerate(lines):
		if line.startswith(NEW_FILE_PREFIX):
			current_file_path = line[len(NEW_FILE_PREFIX) :].rstrip("\r\n")

		buffer.append(line)

		next_opens_file = i + 1 < len(lines) and lines[i + 1].startswith(FILE_HEADER_PREFIX)
		if len(buffer) >= max_lines or (next_opens_file and len(buffer) >= min_lines):
			flush()

	if buffer:
		flush()

	if buffer and chunks:
		# trailing blank lines belong to the last chunk
		last = chunks[-1]
		chunks[-1] = replace(
			last,
			content=last.content + "".join(buffer),
			line_count=last.line_count + len(buffer),
		)

	logger.debug("Chunked diff into %d chunks from %d lines", len(chunks), len(lines))
	return chunks
