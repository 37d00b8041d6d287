"""GitHub and GitLab providers behind a common interface."""

from .base import SCMProvider
from .errors import ProviderConfigError, RequestExistsError, SCMError
from .factory import create_provider, ensure_same_provider, provider_kind
from .schemas import Issue, IssueParams, MergeRequest, MergeRequestParams

__all__ = [
	"Issue",
	"IssueParams",
	"MergeRequest",
	"MergeRequestParams",
	"ProviderConfigError",
	"RequestExistsError",
	"SCMError",
	"SCMProvider",
	"create_provider",
	"ensure_same_provider",
	"provider_kind",
]
