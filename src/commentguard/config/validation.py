"""Configuration validation for commentguard.

Unknown keys produce warnings with "did you mean" suggestions. Values of
the wrong type are errors, because they would break the typed config.
"""

from __future__ import annotations

from dataclasses import dataclass
from difflib import get_close_matches
from enum import Enum
from typing import Any, Dict, List, Optional, Set, Tuple

from commentguard.core.logging import get_logger

LOGGER = get_logger(__name__)

# Valid top-level keys
VALID_TOP_LEVEL_KEYS: Set[str] = {
    "checker",
    "download",
    "resolution",
    "debug",
}

# Valid keys per section, with the accepted value types
SECTION_SCHEMAS: Dict[str, Dict[str, Tuple[type, ...]]] = {
    "checker": {
        "binary_path": (str, type(None)),
        "timeout": (int, float, type(None)),
    },
    "download": {
        "enabled": (bool,),
        "version": (str,),
        "base_url": (str,),
    },
    "resolution": {
        "retry_after": (int, float),
    },
}

# Lower bounds for numeric keys: (minimum, whether the minimum itself is allowed)
NUMERIC_BOUNDS: Dict[str, Tuple[float, bool]] = {
    "checker.timeout": (0, False),
    "resolution.retry_after": (0, True),
}


class ValidationSeverity(str, Enum):
    """Severity of a validation issue."""

    WARNING = "warning"
    ERROR = "error"


@dataclass
class ConfigValidationIssue:
    """A validation issue found in a configuration file."""

    message: str
    source: str
    severity: ValidationSeverity = ValidationSeverity.WARNING
    key: Optional[str] = None
    suggestion: Optional[str] = None

    def __str__(self) -> str:
        msg = f"{self.message} in {self.source}"
        if self.suggestion:
            msg += f" (did you mean '{self.suggestion}'?)"
        return msg


def validate_config(
    data: Dict[str, Any],
    source: str,
) -> List[ConfigValidationIssue]:
    """Validate a configuration dictionary.

    Does not raise; callers decide what to do with errors.

    Args:
        data: Config dictionary to validate.
        source: Source file path for messages.

    Returns:
        List of validation issues.
    """
    issues: List[ConfigValidationIssue] = []

    if not isinstance(data, dict):
        issues.append(ConfigValidationIssue(
            message=f"Config must be a mapping, got {type(data).__name__}",
            source=source,
            severity=ValidationSeverity.ERROR,
        ))
        return issues

    for key in data.keys():
        if key not in VALID_TOP_LEVEL_KEYS:
            issues.append(ConfigValidationIssue(
                message=f"Unknown top-level key '{key}'",
                source=source,
                key=key,
                suggestion=_suggest_key(key, VALID_TOP_LEVEL_KEYS),
            ))

    debug = data.get("debug")
    if debug is not None and not isinstance(debug, bool):
        issues.append(ConfigValidationIssue(
            message="'debug' must be a boolean",
            source=source,
            severity=ValidationSeverity.ERROR,
            key="debug",
        ))

    for section, schema in SECTION_SCHEMAS.items():
        section_data = data.get(section)
        if section_data is None:
            continue
        if not isinstance(section_data, dict):
            issues.append(ConfigValidationIssue(
                message=f"'{section}' must be a mapping, got {type(section_data).__name__}",
                source=source,
                severity=ValidationSeverity.ERROR,
                key=section,
            ))
            continue

        for key, value in section_data.items():
            if key not in schema:
                issues.append(ConfigValidationIssue(
                    message=f"Unknown key '{section}.{key}'",
                    source=source,
                    key=f"{section}.{key}",
                    suggestion=_suggest_key(key, set(schema)),
                ))
                continue
            # bool is an int subclass; only accept it where bool is listed
            wrong_bool = isinstance(value, bool) and bool not in schema[key]
            if wrong_bool or not isinstance(value, schema[key]):
                expected = " or ".join(
                    "null" if t is type(None) else t.__name__ for t in schema[key]
                )
                issues.append(ConfigValidationIssue(
                    message=f"'{section}.{key}' must be {expected}, got {type(value).__name__}",
                    source=source,
                    severity=ValidationSeverity.ERROR,
                    key=f"{section}.{key}",
                ))
                continue
            bound_issue = _check_bounds(f"{section}.{key}", value, source)
            if bound_issue is not None:
                issues.append(bound_issue)

    for issue in issues:
        _log_issue(issue)
    return issues


def _suggest_key(invalid_key: str, valid_keys: Set[str]) -> Optional[str]:
    """Suggest a valid key for a potential typo.

    Args:
        invalid_key: The invalid key entered.
        valid_keys: Set of valid keys.

    Returns:
        Closest matching valid key, or None if no good match.
    """
    matches = get_close_matches(invalid_key, list(valid_keys), n=1, cutoff=0.6)
    return matches[0] if matches else None


def _log_issue(issue: ConfigValidationIssue) -> None:
    if issue.severity == ValidationSeverity.ERROR:
        LOGGER.error(str(issue))
    else:
        LOGGER.warning(str(issue))


def _check_bounds(dotted_key: str, value: Any, source: str) -> Optional[ConfigValidationIssue]:
    if dotted_key not in NUMERIC_BOUNDS or not isinstance(value, (int, float)):
        return None
    minimum, inclusive = NUMERIC_BOUNDS[dotted_key]
    if value > minimum or (inclusive and value == minimum):
        return None
    relation = "at least" if inclusive else "greater than"
    return ConfigValidationIssue(
        message=f"'{dotted_key}' must be {relation} {minimum}, got {value}",
        source=source,
        severity=ValidationSeverity.ERROR,
        key=dotted_key,
    )
