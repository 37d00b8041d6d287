"""Tests for merge request and issue description generation."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from tix.llm.description import (
	build_diff_context,
	generate_issue_description,
	generate_mr_description,
	parse_title_and_body,
)
from tix.llm.errors import EmptyInputError
from tix.llm.prompts import FULL_DIFF_INTRO, MR_DESCRIPTION_QUERY, RETRIEVED_DIFF_INTRO

if TYPE_CHECKING:
	from unittest.mock import MagicMock

	from tix.llm.client import LLMContext

SMALL_DIFF = "diff --git a/app.py b/app.py\n+++ b/app.py\n@@ -1 +1 @@\n-old\n+new\n"


def sent_prompt(mock_openai: MagicMock) -> str:
	"""The user prompt of the last completion call."""
	messages = mock_openai.chat.completions.create.call_args.kwargs["messages"]
	assert messages[0]["role"] == "system"
	return messages[-1]["content"]


@pytest.mark.unit
@pytest.mark.llm
class TestBuildDiffContext:
	"""Test cases for choosing between the full diff and retrieval."""

	def test_small_diff_is_sent_whole(self, llm_context: LLMContext, mock_openai: MagicMock) -> None:
		"""Small diffs skip embeddings entirely."""
		context = build_diff_context(llm_context, SMALL_DIFF, MR_DESCRIPTION_QUERY)

		assert context.text == SMALL_DIFF
		assert context.intro == FULL_DIFF_INTRO
		assert context.used_retrieval is False
		mock_openai.embeddings.create.assert_not_called()

	def test_forced_retrieval(self, llm_context: LLMContext, mock_openai: MagicMock) -> None:
		"""use_rag=True retrieves even for a small diff."""
		context = build_diff_context(llm_context, SMALL_DIFF, MR_DESCRIPTION_QUERY, use_rag=True)

		assert context.used_retrieval is True
		assert context.intro == RETRIEVED_DIFF_INTRO
		assert "--- Chunk 1 (file: app.py" in context.text
		assert mock_openai.embeddings.create.call_count == 2

	def test_large_diff_uses_retrieval(self, llm_context: LLMContext) -> None:
		"""Crossing the threshold switches to retrieval."""
		context = build_diff_context(llm_context, SMALL_DIFF, MR_DESCRIPTION_QUERY, threshold=5)

		assert context.used_retrieval is True

	def test_forced_off(self, llm_context: LLMContext, mock_openai: MagicMock) -> None:
		"""use_rag=False sends the diff whole whatever its size."""
		context = build_diff_context(llm_context, SMALL_DIFF, MR_DESCRIPTION_QUERY, use_rag=False, threshold=1)

		assert context.used_retrieval is False
		mock_openai.embeddings.create.assert_not_called()

	def test_blank_diff_raises(self, llm_context: LLMContext) -> None:
		"""There is nothing to describe in an empty diff."""
		with pytest.raises(EmptyInputError):
			build_diff_context(llm_context, "  \n", MR_DESCRIPTION_QUERY)


@pytest.mark.unit
@pytest.mark.llm
class TestGenerateDescriptions:
	"""Test cases for the generation entry points."""

	def test_mr_description(self, llm_context: LLMContext, mock_openai: MagicMock) -> None:
		"""The MR prompt carries the diff and asks for the three sections."""
		mock_openai.chat.completions.create.return_value.choices[0].message.content = "  ### Summary\nStuff\n"

		description = generate_mr_description(llm_context, SMALL_DIFF)

		assert description == "### Summary\nStuff"
		prompt = sent_prompt(mock_openai)
		assert SMALL_DIFF in prompt
		assert "For Developers" in prompt
		assert "For Quality" in prompt

	def test_issue_description_with_title(self, llm_context: LLMContext, mock_openai: MagicMock) -> None:
		"""A leading heading becomes the suggested title."""
		mock_openai.chat.completions.create.return_value.choices[0].message.content = (
			"## Add login rate limiting\n\n### Summary\nLimits attempts."
		)

		result = generate_issue_description(llm_context, SMALL_DIFF, "Rate limit")

		assert result.title == "Add login rate limiting"
		assert result.body == "### Summary\nLimits attempts."
		assert "Rate limit" in sent_prompt(mock_openai)

	def test_issue_description_without_title(self, llm_context: LLMContext, mock_openai: MagicMock) -> None:
		"""Without a heading there is no title suggestion."""
		mock_openai.chat.completions.create.return_value.choices[0].message.content = "### Summary\nText"

		result = generate_issue_description(llm_context, SMALL_DIFF, "Title")

		assert result.title == ""
		assert result.body == "### Summary\nText"


@pytest.mark.unit
class TestParseTitleAndBody:
	"""Test cases for parse_title_and_body."""

	def test_heading_is_split_off(self) -> None:
		"""A leading '## ' line is the title."""
		assert parse_title_and_body("## My Title\n\nBody text") == ("My Title", "Body text")

	def test_no_heading(self) -> None:
		"""Text without a heading is returned unchanged as the body."""
		assert parse_title_and_body("Body only\nmore") == ("", "Body only\nmore")

	def test_subheading_is_not_a_title(self) -> None:
		"""Only a second level heading counts."""
		assert parse_title_and_body("### Summary\nx") == ("", "### Summary\nx")

	def test_title_only(self) -> None:
		"""A heading with no body gives an empty body."""
		assert parse_title_and_body("## Just a title") == ("Just a title", "")
