"""Unit tests for link extraction."""

from app.viewer.links import extract_links, resolve_href


class TestExtractLinks:
    """Test suite for extract_links."""

    def test_html_and_text_links_in_discovery_order(self) -> None:
        """Test anchors first, then text URLs."""
        links = extract_links('<a href="https://a.test">x</a>', "see https://b.test now")

        assert links == ["https://a.test/", "https://b.test"]

    def test_deduplicates(self) -> None:
        """Test that repeated links appear once."""
        html = '<a href="https://a.test/x">1</a><a href="https://a.test/x">2</a>'

        assert extract_links(html, "https://a.test/x and https://a.test/x") == ["https://a.test/x"]

    def test_anchors_without_href_are_ignored(self) -> None:
        """Test that <a> without href contributes nothing."""
        assert extract_links('<a name="top">top</a>', None) == []

    def test_no_sources(self) -> None:
        """Test that missing bodies give no links."""
        assert extract_links(None, None) == []

    def test_relative_href_resolves_against_base(self) -> None:
        """Test relative resolution when a base URL is known."""
        assert resolve_href("/confirm?id=1", "http://localhost:8787/") == "http://localhost:8787/confirm?id=1"

    def test_relative_href_without_base_is_kept(self) -> None:
        """Test that relative links stay as written without a base."""
        assert resolve_href("confirm") == "confirm"
