"""Data models shared by the resolver, the invoker and the CLI.

HookInput mirrors the JSON document AI agent hooks deliver on stdin and
that the checker binary expects on its own stdin.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple


class Outcome(str, Enum):
    """Outcome of one checker invocation."""

    CLEAN = "clean"
    FLAGGED = "flagged"
    INDETERMINATE = "indeterminate"


class ErrorKind(str, Enum):
    """Why an invocation ended up indeterminate."""

    NOT_FOUND = "not_found"
    STALE_REFERENCE = "stale_reference"
    SPAWN_FAILURE = "spawn_failure"
    PROTOCOL_VIOLATION = "protocol_violation"
    TIMEOUT = "timeout"


@dataclass(frozen=True)
class EditPair:
    """One replacement of a multi-edit tool call."""

    old_string: str
    new_string: str

    def to_dict(self) -> Dict[str, str]:
        return {"old_string": self.old_string, "new_string": self.new_string}


@dataclass(frozen=True)
class ToolInput:
    """Tool-specific fields of a hook payload. All fields are optional."""

    file_path: Optional[str] = None
    content: Optional[str] = None
    old_string: Optional[str] = None
    new_string: Optional[str] = None
    edits: Optional[Tuple[EditPair, ...]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the wire form, omitting absent fields."""
        data: Dict[str, Any] = {}
        for key in ("file_path", "content", "old_string", "new_string"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        if self.edits is not None:
            data["edits"] = [edit.to_dict() for edit in self.edits]
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ToolInput":
        edits = data.get("edits")
        parsed_edits: Optional[Tuple[EditPair, ...]] = None
        if isinstance(edits, list):
            parsed_edits = tuple(
                EditPair(
                    old_string=str(edit.get("old_string", "")),
                    new_string=str(edit.get("new_string", "")),
                )
                for edit in edits
                if isinstance(edit, Mapping)
            )
        return cls(
            file_path=_optional_str(data.get("file_path")),
            content=_optional_str(data.get("content")),
            old_string=_optional_str(data.get("old_string")),
            new_string=_optional_str(data.get("new_string")),
            edits=parsed_edits,
        )


@dataclass(frozen=True)
class HookInput:
    """Structured payload handed to the checker on stdin.

    Not mutated after construction; to_json() is the only serialization.
    """

    session_id: str
    tool_name: str
    transcript_path: str
    cwd: str
    hook_event_name: str
    tool_input: ToolInput = field(default_factory=ToolInput)
    tool_response: Any = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "session_id": self.session_id,
            "tool_name": self.tool_name,
            "transcript_path": self.transcript_path,
            "cwd": self.cwd,
            "hook_event_name": self.hook_event_name,
            "tool_input": self.tool_input.to_dict(),
        }
        if self.tool_response is not None:
            data["tool_response"] = self.tool_response
        return data

    def to_json(self) -> str:
        """Serialize to a single JSON document.

        Raises:
            TypeError: If tool_response holds a non-JSON value.
        """
        return json.dumps(self.to_dict(), ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "HookInput":
        """Build a payload from a decoded hook document.

        Missing string fields become empty strings; a missing or malformed
        tool_input becomes an empty ToolInput.
        """
        tool_input = data.get("tool_input")
        return cls(
            session_id=str(data.get("session_id", "")),
            tool_name=str(data.get("tool_name", "")),
            transcript_path=str(data.get("transcript_path", "")),
            cwd=str(data.get("cwd", "")),
            hook_event_name=str(data.get("hook_event_name", "")),
            tool_input=ToolInput.from_dict(tool_input) if isinstance(tool_input, Mapping) else ToolInput(),
            tool_response=data.get("tool_response"),
        )

    @classmethod
    def from_json(cls, text: str) -> "HookInput":
        """Parse a hook document.

        Raises:
            ValueError: If text is not a JSON object.
        """
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError(f"Hook input must be a JSON object, got {type(data).__name__}")
        return cls.from_dict(data)


@dataclass(frozen=True)
class CheckResult:
    """Public result of a check: either flagged with a message or clean."""

    flagged: bool = False
    message: str = ""

    @classmethod
    def clean(cls) -> "CheckResult":
        return cls(flagged=False, message="")


@dataclass(frozen=True)
class InvocationOutcome:
    """Detailed result of one invocation, kept for diagnostics and tests."""

    outcome: Outcome
    message: str = ""
    error: Optional[ErrorKind] = None
    exit_code: Optional[int] = None
    stderr: str = ""
    detail: str = ""

    @classmethod
    def indeterminate(
        cls,
        error: ErrorKind,
        detail: str = "",
        exit_code: Optional[int] = None,
        stderr: str = "",
    ) -> "InvocationOutcome":
        return cls(
            outcome=Outcome.INDETERMINATE,
            error=error,
            detail=detail,
            exit_code=exit_code,
            stderr=stderr,
        )

    def to_check_result(self) -> CheckResult:
        """Collapse to the public result; indeterminate counts as clean."""
        if self.outcome == Outcome.FLAGGED:
            return CheckResult(flagged=True, message=self.message)
        return CheckResult.clean()


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)
