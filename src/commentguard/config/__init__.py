"""Configuration module for commentguard.

Provides configuration file loading, parsing, and validation with support for:
- Project-level config (.commentguard.yml)
- Global config (~/.commentguard/config/config.yml)
- Environment variable expansion
"""

from commentguard.config.models import (
    CheckerConfig,
    CommentGuardConfig,
    DownloadConfig,
    ResolutionConfig,
)
from commentguard.config.loader import (
    ConfigError,
    find_global_config,
    find_project_config,
    load_config,
)
from commentguard.config.validation import ConfigValidationIssue, validate_config

__all__ = [
    "CheckerConfig",
    "CommentGuardConfig",
    "DownloadConfig",
    "ResolutionConfig",
    "ConfigError",
    "load_config",
    "find_project_config",
    "find_global_config",
    "validate_config",
    "ConfigValidationIssue",
]
