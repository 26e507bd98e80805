"""Configuration file loading and merging.

Handles loading configuration from YAML files with:
- Project-level config (.commentguard.yml)
- Global config (~/.commentguard/config/config.yml)
- Environment variable expansion (${VAR})
- Config merging with proper precedence
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from commentguard.bootstrap.paths import get_commentguard_home
from commentguard.config.models import (
    CheckerConfig,
    CommentGuardConfig,
    DownloadConfig,
    ResolutionConfig,
)
from commentguard.config.validation import SECTION_SCHEMAS, ValidationSeverity, validate_config
from commentguard.core.logging import get_logger

LOGGER = get_logger(__name__)

# Config file names
PROJECT_CONFIG_NAMES = [
    ".commentguard.yml",
    ".commentguard.yaml",
    "commentguard.yml",
    "commentguard.yaml",
]
GLOBAL_CONFIG_NAME = "config.yml"

# Environment variable pattern: ${VAR} or ${VAR:-default}
ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::-([^}]*))?\}")


class ConfigError(Exception):
    """Configuration loading or parsing error."""

    pass


def load_config(
    project_root: Path,
    cli_config_path: Optional[Path] = None,
    cli_overrides: Optional[Dict[str, Any]] = None,
) -> CommentGuardConfig:
    """Load configuration with proper precedence.

    Precedence (highest to lowest):
    1. CLI flags (cli_overrides)
    2. Custom config file (cli_config_path) OR project config (.commentguard.yml)
    3. Global config (~/.commentguard/config/config.yml)
    4. Built-in defaults

    Args:
        project_root: Project root directory for finding .commentguard.yml.
        cli_config_path: Optional path to custom config file (--config flag).
        cli_overrides: Dict of CLI flag overrides.

    Returns:
        Merged CommentGuardConfig instance.

    Raises:
        ConfigError: If a config file is missing, unparsable or invalid.
    """
    sources: List[str] = []
    merged: Dict[str, Any] = {}

    # Layer 1: Global config. A broken global file never blocks a project.
    global_path = find_global_config()
    if global_path is not None:
        try:
            merged = merge_configs(merged, _load_validated(global_path))
            sources.append(f"global:{global_path}")
            LOGGER.debug(f"Loaded global config from {global_path}")
        except ConfigError as e:
            LOGGER.warning(f"Failed to load global config: {e}")

    # Layer 2: Project or custom config
    if cli_config_path:
        if not cli_config_path.exists():
            raise ConfigError(f"Config file not found: {cli_config_path}")
        merged = merge_configs(merged, _load_validated(cli_config_path))
        sources.append(f"custom:{cli_config_path}")
        LOGGER.debug(f"Loaded custom config from {cli_config_path}")
    else:
        project_path = find_project_config(project_root)
        if project_path is not None:
            merged = merge_configs(merged, _load_validated(project_path))
            sources.append(f"project:{project_path}")
            LOGGER.debug(f"Loaded project config from {project_path}")

    # Layer 3: CLI overrides
    if cli_overrides:
        merged = merge_configs(merged, cli_overrides)
        sources.append("cli")
        LOGGER.debug("Applied CLI overrides")

    config = dict_to_config(merged)
    config._config_sources = sources

    LOGGER.debug(f"Config loaded from sources: {sources}")
    return config


def find_project_config(project_root: Path) -> Optional[Path]:
    """Find config file in project root.

    Args:
        project_root: Directory to search in.

    Returns:
        Path to config file if found, None otherwise.
    """
    for name in PROJECT_CONFIG_NAMES:
        config_path = project_root / name
        if config_path.exists():
            return config_path
    return None


def find_global_config() -> Optional[Path]:
    """Find global config at ~/.commentguard/config/config.yml.

    Returns:
        Path to global config if it exists, None otherwise.
    """
    config_path = get_commentguard_home() / "config" / GLOBAL_CONFIG_NAME
    if config_path.exists():
        return config_path
    return None


def load_yaml_file(path: Path) -> Dict[str, Any]:
    """Load and parse a YAML config file.

    Performs environment variable expansion on string values.

    Args:
        path: Path to YAML file.

    Returns:
        Parsed dictionary.

    Raises:
        ConfigError: If the file cannot be read, parsed, or is not a mapping.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise ConfigError(f"Config file must be a YAML mapping, got {type(data).__name__}")

    return expand_env_vars(data)


def expand_env_vars(data: Any) -> Any:
    """Recursively expand environment variables in config values.

    Supports ${VAR} and ${VAR:-default} syntax.

    Args:
        data: Config data (dict, list, or scalar).

    Returns:
        Data with environment variables expanded.
    """
    if isinstance(data, dict):
        return {k: expand_env_vars(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [expand_env_vars(item) for item in data]
    elif isinstance(data, str):
        return ENV_VAR_PATTERN.sub(_env_var_replacer, data)
    else:
        return data


def _env_var_replacer(match: re.Match[str]) -> str:
    """Replace environment variable reference with its value."""
    var_name = match.group(1)
    default_value = match.group(2)

    value = os.environ.get(var_name)
    if value is not None:
        return value
    if default_value is not None:
        return default_value

    LOGGER.warning(f"Environment variable ${var_name} is not set and has no default")
    return ""


def coerce_typed_strings(data: Dict[str, Any]) -> Dict[str, Any]:
    """Parse string values of keys that do not accept strings.

    Environment expansion always produces strings, so `timeout: ${CHECK_TIMEOUT}`
    arrives as "10". Such values are re-read as YAML scalars and kept when
    the result has an accepted type; anything else is left for validation
    to report.

    Args:
        data: Expanded config dictionary.

    Returns:
        A copy with typed values where parsing succeeded.
    """
    result = dict(data)
    if isinstance(result.get("debug"), str):
        result["debug"] = _parse_scalar(result["debug"], (bool,))

    for section, schema in SECTION_SCHEMAS.items():
        section_data = result.get(section)
        if not isinstance(section_data, dict):
            continue
        coerced = dict(section_data)
        for key, value in section_data.items():
            accepted = schema.get(key)
            if accepted and str not in accepted and isinstance(value, str):
                coerced[key] = _parse_scalar(value, accepted)
        result[section] = coerced
    return result


def merge_configs(base: Dict[str, Any], overlay: Dict[str, Any]) -> Dict[str, Any]:
    """Deep merge two config dicts, with overlay taking precedence.

    Rules:
    - Scalar values: overlay replaces base
    - Lists: overlay replaces base (no merging)
    - Dicts: recursive merge

    Args:
        base: Base configuration dictionary.
        overlay: Overlay configuration to merge on top.

    Returns:
        Merged configuration dictionary.
    """
    result = base.copy()

    for key, overlay_value in overlay.items():
        if key in result and isinstance(result[key], dict) and isinstance(overlay_value, dict):
            result[key] = merge_configs(result[key], overlay_value)
        else:
            result[key] = overlay_value

    return result


def dict_to_config(data: Dict[str, Any]) -> CommentGuardConfig:
    """Convert a validated dict to a typed CommentGuardConfig.

    Args:
        data: Configuration dictionary.

    Returns:
        Typed CommentGuardConfig instance.

    Raises:
        ConfigError: If checker.binary_path cannot be expanded.
    """
    checker_data = data.get("checker") or {}
    defaults = CheckerConfig()
    checker = CheckerConfig(
        binary_path=_expand_binary_path(checker_data.get("binary_path")),
        timeout=_optional_float(checker_data.get("timeout", defaults.timeout)),
    )

    download_data = data.get("download") or {}
    download_defaults = DownloadConfig()
    download = DownloadConfig(
        enabled=download_data.get("enabled", download_defaults.enabled),
        version=str(download_data.get("version", download_defaults.version)),
        base_url=download_data.get("base_url", download_defaults.base_url),
    )

    resolution_data = data.get("resolution") or {}
    resolution = ResolutionConfig(
        retry_after=float(resolution_data.get("retry_after", ResolutionConfig().retry_after)),
    )

    return CommentGuardConfig(
        checker=checker,
        download=download,
        resolution=resolution,
        debug=bool(data.get("debug", False)),
    )


def _load_validated(path: Path) -> Dict[str, Any]:
    data = coerce_typed_strings(load_yaml_file(path))
    errors = [
        issue for issue in validate_config(data, source=str(path))
        if issue.severity == ValidationSeverity.ERROR
    ]
    if errors:
        raise ConfigError("; ".join(str(issue) for issue in errors))
    return data


def _optional_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    return float(value)


def _parse_scalar(value: str, accepted: Tuple[type, ...]) -> Any:
    # An empty string usually means an unset variable, never "null"
    if not value.strip():
        return value
    try:
        parsed = yaml.safe_load(value)
    except yaml.YAMLError:
        return value
    if isinstance(parsed, bool) and bool not in accepted:
        return value
    return parsed if isinstance(parsed, accepted) else value


def _expand_binary_path(value: Optional[str]) -> Optional[Path]:
    if not value:
        return None
    try:
        return Path(value).expanduser()
    except RuntimeError as e:
        raise ConfigError(f"Cannot expand checker.binary_path {value!r}: {e}") from e
