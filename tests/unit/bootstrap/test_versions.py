"""Tests for tool version lookup."""

from __future__ import annotations

import pytest

from commentguard.bootstrap.versions import get_tool_version


class TestGetToolVersion:
    """Tests for get_tool_version."""

    def test_comment_checker_version(self) -> None:
        version = get_tool_version("comment-checker")
        assert version
        assert version[0].isdigit()

    def test_unknown_tool_with_default(self) -> None:
        assert get_tool_version("no-such-tool", default="1.0") == "1.0"

    def test_unknown_tool_raises(self) -> None:
        with pytest.raises(KeyError, match="no-such-tool"):
            get_tool_version("no-such-tool")
