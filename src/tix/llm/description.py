"""Generate merge request and issue descriptions from a diff."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from tix.rag.retriever import (
	DEFAULT_TOP_K,
	RAG_TOKEN_THRESHOLD,
	build_context_block,
	estimate_token_count,
	retrieve_relevant_chunks,
	should_use_retrieval,
)

from .errors import EmptyInputError
from .prompts import (
	FULL_DIFF_INTRO,
	ISSUE_DESCRIPTION_QUERY,
	ISSUE_DESCRIPTION_TEMPLATE,
	MR_DESCRIPTION_QUERY,
	MR_DESCRIPTION_TEMPLATE,
	RETRIEVED_DIFF_INTRO,
	SYSTEM_PROMPT,
)

if TYPE_CHECKING:
	from .client import LLMContext, MessageDict

logger = logging.getLogger(__name__)

TITLE_PREFIX = "## "


@dataclass
class IssueDescription:
	"""Generated issue text with an optional suggested title."""

	title: str
	body: str


@dataclass
class DiffContext:
	"""The diff material placed into a prompt."""

	intro: str
	text: str
	used_retrieval: bool


def build_diff_context(
	ctx: LLMContext,
	diff: str,
	query: str,
	use_rag: bool | None = None,
	top_k: int = DEFAULT_TOP_K,
	threshold: int = RAG_TOKEN_THRESHOLD,
) -> DiffContext:
	"""
	Pick the diff material for a prompt.

	Small diffs are sent whole. Large ones, or any diff when ``use_rag`` is
	True, are replaced by the chunks most relevant to ``query``.

	Args:
	    ctx: LLM context
	    diff: Full unified diff
	    query: Retrieval query describing the wanted output
	    use_rag: Force retrieval on or off, None to decide by size
	    top_k: Number of chunks to retrieve
	    threshold: Estimated token count from which retrieval is used

	Returns:
	    The prompt material

	Raises:
	    EmptyInputError: If the diff is blank

	"""
	if not diff.strip():
		msg = "The diff is empty, there is nothing to describe"
		raise EmptyInputError(msg)

	if not should_use_retrieval(diff, use_rag, threshold):
		ctx.log.info("Sending full diff (~%d tokens)", estimate_token_count(diff))
		return DiffContext(intro=FULL_DIFF_INTRO, text=diff, used_retrieval=False)

	ctx.log.info("Diff is ~%d tokens, using retrieval", estimate_token_count(diff))
	results = retrieve_relevant_chunks(ctx, diff, query, top_k=top_k)
	return DiffContext(intro=RETRIEVED_DIFF_INTRO, text=build_context_block(results), used_retrieval=True)


def _messages(prompt: str) -> list[MessageDict]:
	return [
		{"role": "system", "content": SYSTEM_PROMPT.strip()},
		{"role": "user", "content": prompt},
	]


def generate_mr_description(
	ctx: LLMContext,
	diff: str,
	use_rag: bool | None = None,
	top_k: int = DEFAULT_TOP_K,
	threshold: int = RAG_TOKEN_THRESHOLD,
) -> str:
	"""
	Generate a merge request description with Summary, For Developers and For Quality sections.

	Raises:
	    EmptyInputError: If the diff is blank
	    EmbeddingProviderError: If retrieval fails
	    CompletionProviderError: If the completion call fails
	    NoResponseError: If the model returns nothing

	"""
	diff_context = build_diff_context(ctx, diff, MR_DESCRIPTION_QUERY, use_rag, top_k, threshold)
	prompt = MR_DESCRIPTION_TEMPLATE.format(diff_intro=diff_context.intro, diff_context=diff_context.text)
	return ctx.complete(_messages(prompt)).strip()


def generate_issue_description(
	ctx: LLMContext,
	diff: str,
	current_title: str,
	use_rag: bool | None = None,
	top_k: int = DEFAULT_TOP_K,
	threshold: int = RAG_TOKEN_THRESHOLD,
) -> IssueDescription:
	"""
	Generate an issue description and a suggested title.

	Returns:
	    The suggested title (empty when the model gave none) and the body

	"""
	diff_context = build_diff_context(ctx, diff, ISSUE_DESCRIPTION_QUERY, use_rag, top_k, threshold)
	prompt = ISSUE_DESCRIPTION_TEMPLATE.format(
		current_title=current_title,
		diff_intro=diff_context.intro,
		diff_context=diff_context.text,
	)
	title, body = parse_title_and_body(ctx.complete(_messages(prompt)))
	return IssueDescription(title=title, body=body)


def parse_title_and_body(text: str) -> tuple[str, str]:
	"""
	Split a leading ``## Title`` line off generated text.

	Args:
	    text: Model output

	Returns:
	    ``(title, body)``. Without a leading ``## `` line the title is empty
	    and the body is ``text`` unchanged.

	"""
	if not text.startswith(TITLE_PREFIX):
		return "", text

	first_line, _, rest = text.partition("\n")
	return first_line[len(TITLE_PREFIX) :].strip(), rest.strip()
