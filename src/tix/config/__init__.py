"""Configuration loading and schemas."""

from .config_loader import ConfigError, ConfigFileNotFoundError, ConfigLoader, ConfigParsingError
from .config_schema import AppConfigSchema, LLMSchema, RepositorySchema, WorktreeSchema

__all__ = [
	"AppConfigSchema",
	"ConfigError",
	"ConfigFileNotFoundError",
	"ConfigLoader",
	"ConfigParsingError",
	"LLMSchema",
	"RepositorySchema",
	"WorktreeSchema",
]
