"""Workspace configuration for phpimpl-core."""

from rules.config import (
    CONFIG_FILENAME,
    ConfigError,
    PhpImplConfig,
    ReferencesConfig,
    load_config,
)

__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "PhpImplConfig",
    "ReferencesConfig",
    "load_config",
]
