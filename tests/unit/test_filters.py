"""Unit tests for filter handling and query encoding."""

import pytest

from app.models import QueryParams
from app.viewer.filters import apply_filters, default_params, encode_query, parse_number


class TestApplyFilters:
    """Test suite for apply_filters."""

    def test_trims_and_drops_empty_strings(self) -> None:
        """Test that text fields are trimmed and blanks become absent."""
        params = apply_filters({"tag": "  signup-1  ", "tag_prefix": "   "})

        assert params.tag == "signup-1"
        assert params.tag_prefix is None

    def test_numeric_fields_are_parsed(self) -> None:
        """Test numeric parsing of timestamps and pagination."""
        params = apply_filters(
            {"timestamp_from": "1700000000000", "timestamp_to": " 1700000100000 ", "limit": "10", "offset": "20"}
        )

        assert params.timestamp_from == 1700000000000
        assert params.timestamp_to == 1700000100000
        assert params.limit == 10
        assert params.offset == 20

    @pytest.mark.parametrize("raw", ["", "abc", "0", None])
    def test_limit_and_offset_fall_back(self, raw) -> None:
        """Test that falsy or unparseable pagination uses the defaults."""
        params = apply_filters({"limit": raw, "offset": raw})

        assert params.limit == 50
        assert params.offset == 0

    def test_unparseable_timestamps_become_absent(self) -> None:
        """Test that bad timestamps are dropped rather than rejected."""
        params = apply_filters({"timestamp_from": "soon", "timestamp_to": ""})

        assert params.timestamp_from is None
        assert params.timestamp_to is None

    def test_flags(self) -> None:
        """Test checkbox style flags."""
        assert apply_filters({"headers": True, "spam_report": "on"}).headers is True
        assert apply_filters({"headers": True, "spam_report": "on"}).spam_report is True
        assert apply_filters({"headers": False, "spam_report": ""}).headers is None
        assert apply_filters({}).spam_report is None

    def test_parse_number_keeps_fractions(self) -> None:
        """Test that non-integral numbers survive parsing."""
        assert parse_number("1.5") == 1.5
        assert parse_number("nan") is None


class TestEncodeQuery:
    """Test suite for encode_query."""

    def test_default_params(self) -> None:
        """Test that defaults encode to the limit only (offset 0 is falsy)."""
        assert encode_query(default_params()) == {"limit": "50"}

    def test_emits_only_truthy_fields(self) -> None:
        """Test that absent and empty fields are left out."""
        params = QueryParams(tag="signup-1", tag_prefix=None, limit=5, offset=10, headers=True, spam_report=None)

        assert encode_query(params) == {"tag": "signup-1", "limit": "5", "offset": "10", "headers": "true"}

    def test_flags_are_literal_true(self) -> None:
        """Test that boolean flags encode as "true"."""
        query = encode_query(QueryParams(headers=True, spam_report=True))

        assert query["headers"] == "true"
        assert query["spam_report"] == "true"

    def test_clear_is_equivalent_to_initial_state(self) -> None:
        """Test that resetting filters reproduces the initial query."""
        filtered = apply_filters({"tag": "x", "limit": "5", "headers": True})

        assert encode_query(filtered) != encode_query(QueryParams())
        assert encode_query(default_params()) == encode_query(QueryParams())
