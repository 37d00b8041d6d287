"""Exceptions raised by the SCM providers."""


class SCMError(Exception):
	"""Base exception for GitHub and GitLab errors."""


class ProviderConfigError(SCMError):
	"""Raised when a repository's provider settings are missing or inconsistent."""


class RequestExistsError(SCMError):
	"""Raised when an open merge request already exists for a branch."""

	def __init__(self, message: str, url: str = "") -> None:
		"""
		Initialize the error.

		Args:
		    message: Human readable message
		    url: Link to the existing request, or to the request list

		"""
		super().__init__(f"{message}\nView existing request: {url}" if url else message)
		self.url = url
