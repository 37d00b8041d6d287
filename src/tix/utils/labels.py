"""Ready and unready label handling for issues."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

from tix.scm.errors import SCMError

if TYPE_CHECKING:
	from tix.config.config_schema import AppConfigSchema, RepositorySchema
	from tix.scm.base import SCMProvider

logger = logging.getLogger(__name__)

LabelSetting = Literal["ready_label", "ready_status", "unready_label", "unready_status"]


@dataclass
class LabelOutcome:
	"""What a ready/unready run changed."""

	message: str
	warnings: list[str] = field(default_factory=list)
	changed: bool = True


def resolve_setting(
	config: AppConfigSchema,
	repo: RepositorySchema,
	setting: LabelSetting,
	override: str | None = None,
) -> str:
	"""
	Resolve a label or status: command line override, then repository, then global config.

	Returns:
	    The value, empty when none is configured

	"""
	if override:
		return override
	return getattr(repo, setting) or getattr(config, setting) or ""


def mark_ready(
	provider: SCMProvider,
	config: AppConfigSchema,
	repo: RepositorySchema,
	issue_number: int,
	label_override: str | None = None,
	status_override: str | None = None,
) -> LabelOutcome:
	"""
	Add the ready label and set the ready status of an issue.

	A failed status update is reported as a warning.

	Raises:
	    SCMError: If the label cannot be added

	"""
	label = resolve_setting(config, repo, "ready_label", label_override)
	status = resolve_setting(config, repo, "ready_status", status_override)

	if not label and not status:
		return LabelOutcome(
			message=f"No ready label or status configured for issue #{issue_number} - no changes made",
			changed=False,
		)

	logger.info("Ready operation on %s#%d: label=%r status=%r", repo.name, issue_number, label, status)
	warnings: list[str] = []

	if label:
		try:
			provider.add_labels_to_issue(issue_number, [label])
		except SCMError as e:
			msg = f"Failed to add label '{label}' to issue #{issue_number} - check your API token permissions"
			raise SCMError(msg) from e

	if status:
		warnings.extend(_update_status(provider, issue_number, status))

	if label and status:
		message = f"Added label '{label}' and updated status to '{status}' for issue #{issue_number}"
	elif label:
		message = f"Added label '{label}' to issue #{issue_number}"
	else:
		message = f"Updated status to '{status}' for issue #{issue_number}"

	return LabelOutcome(message=message, warnings=warnings)


def mark_unready(
	provider: SCMProvider,
	config: AppConfigSchema,
	repo: RepositorySchema,
	issue_number: int,
	label_override: str | None = None,
	status_override: str | None = None,
	unready_label_override: str | None = None,
) -> LabelOutcome:
	"""
	Remove the ready label, add the unready label and set the unready status.

	The unready label is only added when a ready label was removed. Failing
	to add it, or to update the status, is reported as a warning.

	Raises:
	    SCMError: If the ready label cannot be removed

	"""
	ready_label = resolve_setting(config, repo, "ready_label", label_override)
	unready_label = resolve_setting(config, repo, "unready_label", unready_label_override)
	status = resolve_setting(config, repo, "unready_status", status_override)

	if not ready_label and not status:
		return LabelOutcome(
			message=f"No ready label or status configured for issue #{issue_number} - no changes made",
			changed=False,
		)

	logger.info(
		"Unready operation on %s#%d: ready_label=%r unready_label=%r status=%r",
		repo.name,
		issue_number,
		ready_label,
		unready_label,
		status,
	)
	warnings: list[str] = []
	added_unready = False

	if ready_label:
		try:
			provider.remove_labels_from_issue(issue_number, [ready_label])
		except SCMError as e:
			msg = f"Failed to remove label '{ready_label}' from issue #{issue_number} - check your API token permissions"
			raise SCMError(msg) from e

		if unready_label:
			try:
				provider.add_labels_to_issue(issue_number, [unready_label])
				added_unready = True
			except SCMError as e:
				logger.warning("Failed to add unready label '%s': %s", unready_label, e)
				warnings.append(f"Failed to add unready label '{unready_label}': {e}")

	if status:
		warnings.extend(_update_status(provider, issue_number, status))

	if ready_label and added_unready and status:
		message = (
			f"Removed label '{ready_label}', added label '{unready_label}', "
			f"and updated status to '{status}' for issue #{issue_number}"
		)
	elif ready_label and added_unready:
		message = f"Removed label '{ready_label}' and added label '{unready_label}' for issue #{issue_number}"
	elif ready_label and status:
		message = f"Removed label '{ready_label}' and updated status to '{status}' for issue #{issue_number}"
	elif ready_label:
		message = f"Removed label '{ready_label}' from issue #{issue_number}"
	else:
		message = f"Updated status to '{status}' for issue #{issue_number}"

	return LabelOutcome(message=message, warnings=warnings)


def _update_status(provider: SCMProvider, issue_number: int, status: str) -> list[str]:
	try:
		provider.update_issue_status(issue_number, status)
	except SCMError as e:
		logger.warning("Failed to update status of issue #%d to '%s': %s", issue_number, status, e)
		return [f"Failed to update issue status to '{status}': {e}"]
	return []
