"""Prompt templates for merge request and issue descriptions."""

SYSTEM_PROMPT = """
You are a senior software engineer who writes clear, accurate descriptions of code changes
for merge requests and issues. Base everything you write on the changes provided.
Do not include inline citations, references or source markers in the output.
"""

MR_DESCRIPTION_QUERY = "generate a concise description covering summary, developer notes, and QA notes"

ISSUE_DESCRIPTION_QUERY = "describe the motivation, intended behavior and acceptance criteria of these changes"

FULL_DIFF_INTRO = "The full diff of the changes:"

RETRIEVED_DIFF_INTRO = (
	"The diff is too large to include in full. The most relevant excerpts are below, "
	"each labelled with its file and relevance score:"
)

MR_DESCRIPTION_TEMPLATE = """
Generate a concise and informative merge request description based on the following changes.

{diff_intro}

{diff_context}

Please format the description EXACTLY in the following structure:

### Summary

A clear and concise summary of the changes (1-3 sentences). Focus on what was done and why.

### For Developers

Technical details about implementation, architecture changes, and code modifications. Include:
- Major code changes and their purpose
- New components or modules added
- Any performance considerations
- Breaking changes or deprecations

### For Quality

Information relevant for testers and QA:
- What should be tested
- Potential edge cases to consider
- Any specific testing procedures required
- Areas that might be impacted by these changes
"""

ISSUE_DESCRIPTION_TEMPLATE = """
Given the following diff of code changes, write an issue description that outlines
what needs to change and why, as if it were written before the code was implemented. The
description should explain the motivation for the change, the intended behavior or outcome,
and any constraints or considerations, but should avoid describing the actual implementation
or code specifics. Assume the reader is a teammate reviewing this before any work has been
started.

The current issue title is: "{current_title}"

You can either keep this title or suggest a better one. If you suggest a new title, make sure
it's clear, concise, and accurately reflects the changes being made.

Keep in mind that the current title was the original intention of the change, and the new
title and description should keep that intention as their focus even if the implementation
ended up touching much more. The issue is about the intended behavior or outcome, not the
implementation.

{diff_intro}

{diff_context}

Please format the description EXACTLY in the following structure:

## <Put the title here. Keep the current title "{current_title}" or suggest a better one. It shouldn't be over 200 characters.>

### Summary

A clear and concise summary of the changes (1-3 sentences). Focus on what needs to change
and why.

### Rationale

The rationale for the change. Again, it should be 1-3 sentences, clear and concise.

### Acceptance Criteria

- [ ] High-level acceptance criteria or goals
- [ ] They shouldn't mention specific file names, functions, or code
- [ ] They should be in markdown checkboxes
- [ ] They should assume the reader is a teammate reviewing this before any work has been started.
"""
