"""Unit tests for formatting helpers."""

from datetime import datetime

import pytest

from app.models import Message
from app.viewer.formatting import format_timestamp, has_spam_score, preview, short_tag, to_milliseconds


class TestTimestamps:
    """Test suite for timestamp normalisation and formatting."""

    def test_seconds_are_scaled(self) -> None:
        """Test that values below 10**12 are treated as seconds."""
        assert to_milliseconds(1700000000) == 1700000000000

    def test_milliseconds_are_kept(self) -> None:
        """Test that values at or above 10**12 are already milliseconds."""
        assert to_milliseconds(10**12) == 10**12
        assert to_milliseconds(1700000000000) == 1700000000000

    def test_format_seconds_and_millis_agree(self) -> None:
        """Test that both units format to the same local time."""
        expected = datetime.fromtimestamp(1700000000).strftime("%Y-%m-%d %H:%M:%S")

        assert format_timestamp(1700000000) == expected
        assert format_timestamp(1700000000000) == expected

    @pytest.mark.parametrize("value", [None, 0, "", "later"])
    def test_empty_and_invalid(self, value) -> None:
        """Test that missing or invalid timestamps format as empty text."""
        assert format_timestamp(value) == ""


class TestMessageHelpers:
    """Test suite for tag, preview and spam helpers."""

    @pytest.mark.parametrize(
        ("tag", "expected"),
        [("acme.signup-1", "signup-1"), ("a.b.c", "b.c"), ("signup-1", "signup-1"), (None, ""), ("", "")],
    )
    def test_short_tag(self, tag, expected) -> None:
        """Test that the namespace segment is stripped."""
        assert short_tag(tag) == expected

    def test_preview_collapses_whitespace(self) -> None:
        """Test that the preview is single-line."""
        message = Message(text="Reset\n\n  your   password")

        assert preview(message) == "Reset your password"

    def test_preview_prefers_subject_and_truncates(self) -> None:
        """Test truncation to 100 characters without ellipsis."""
        message = Message(subject="x" * 150, text="ignored")

        assert preview(message) == "x" * 100

    def test_spam_score_definedness(self) -> None:
        """Test that a zero score counts as defined."""
        assert has_spam_score(Message(spam_score=0)) is True
        assert has_spam_score(Message()) is False
