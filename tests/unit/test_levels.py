"""Unit tests for log levels."""

from __future__ import annotations

import pytest

from logkeeper.core.exceptions import InvalidLevelError
from logkeeper.core.levels import Level


class TestLevelTags:
    """Tests for the bracketed header tags."""

    @pytest.mark.parametrize("level,tag", [
        (Level.DEBUG, b"[DEBUG]"),
        (Level.INFO, b"[INFO]"),
        (Level.WARN, b"[WARN]"),
        (Level.ERROR, b"[ERROR]"),
        (Level.FATAL, b"[FATAL]"),
    ])
    def test_tag(self, level, tag):
        """Each level renders a fixed bracketed label."""
        assert level.tag == tag

    def test_ordering(self):
        """Levels compare by severity."""
        assert Level.DEBUG < Level.INFO < Level.WARN < Level.ERROR < Level.FATAL


class TestLevelParse:
    """Tests for Level.parse."""

    @pytest.mark.parametrize("value,expected", [
        (Level.WARN, Level.WARN),
        (3, Level.ERROR),
        ("info", Level.INFO),
        ("WARNING", Level.WARN),
        (" fatal ", Level.FATAL),
    ])
    def test_parse_valid(self, value, expected):
        """Levels, numbers and names are accepted."""
        assert Level.parse(value) is expected

    @pytest.mark.parametrize("value", [-1, 5, 99, "TRACE", ""])
    def test_parse_invalid(self, value):
        """Out-of-range values raise instead of being clamped."""
        with pytest.raises(InvalidLevelError):
            Level.parse(value)

    def test_invalid_level_is_value_error(self):
        """InvalidLevelError can be caught as ValueError."""
        with pytest.raises(ValueError):
            Level.parse(42)
