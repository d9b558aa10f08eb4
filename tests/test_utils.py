"""Tests for HTML and URI utility functions."""

from __future__ import annotations

import pytest

from gospel_library_mcp.utils import (
    MAX_URI_LENGTH,
    clean_snippet,
    extract_media,
    extract_uri,
    html_to_markdown,
    html_to_text,
    media_format,
    media_quality,
    validate_content_uri,
)

CHAPTER_HTML = """
<html>
<head><title>Alma 32</title><style>.verse { color: red; }</style></head>
<body>
    <h1>Alma 32</h1>
    <p class="verse">21 And now as I said concerning <strong>faith</strong>,
    faith is not to have a perfect <em>knowledge</em> of things.</p>
    <script>console.log("tracking");</script>
    <a href="/study/scriptures/bofm/alma/33">Next chapter</a>
</body>
</html>
"""


class TestHtmlToMarkdown:
    """Tests for html_to_markdown function."""

    def test_basic_conversion(self) -> None:
        """Test basic HTML to markdown conversion."""
        result = html_to_markdown(CHAPTER_HTML, strip_tags=["script", "style"])

        assert "# Alma 32" in result
        assert "**faith**" in result
        assert "console.log" not in result

    def test_links_preserved(self) -> None:
        """Test that links are preserved in markdown."""
        result = html_to_markdown(CHAPTER_HTML)

        assert "/study/scriptures/bofm/alma/33" in result
        assert "Next chapter" in result


class TestHtmlToText:
    """Tests for html_to_text function."""

    def test_default_tag_stripping(self) -> None:
        """Test that scripts and styles are removed by default."""
        result = html_to_text(CHAPTER_HTML)

        assert "Alma 32" in result
        assert "faith" in result
        assert "console.log" not in result
        assert ".verse" not in result
        assert "<strong>" not in result

    def test_custom_tag_stripping(self) -> None:
        """Test that only the listed tags are stripped."""
        result = html_to_text(CHAPTER_HTML, strip_tags=["a"])

        assert "Next chapter" not in result
        assert "faith" in result

    def test_no_blank_lines(self) -> None:
        """Test that blank lines are collapsed."""
        result = html_to_text(CHAPTER_HTML)

        assert "\n\n" not in result


class TestCleanSnippet:
    """Tests for clean_snippet function."""

    def test_bold_becomes_emphasis(self) -> None:
        """Test that search highlights become markdown emphasis."""
        assert clean_snippet("Ask in <b>faith</b>") == "Ask in **faith**"

    def test_tags_dropped_and_whitespace_collapsed(self) -> None:
        """Test that other tags are dropped and whitespace collapsed."""
        assert clean_snippet("line one<br>\n   line <i>two</i>") == "line one line two"

    @pytest.mark.parametrize("value", [None, "", "<br>", "   "])
    def test_empty(self, value: str | None) -> None:
        """Test that empty snippets become None."""
        assert clean_snippet(value) is None


class TestExtractUri:
    """Tests for extract_uri function."""

    def test_study_link(self) -> None:
        """Test that the /study prefix and query string are removed."""
        link = "https://www.churchofjesuschrist.org/study/scriptures/bofm/alma/32?lang=eng&id=p21#p21"
        assert extract_uri(link) == "/scriptures/bofm/alma/32"

    def test_other_link(self) -> None:
        """Test that links outside /study keep their path."""
        assert extract_uri("https://www.churchofjesuschrist.org/media/video/x") == "/media/video/x"


class TestValidateContentUri:
    """Tests for validate_content_uri function."""

    @pytest.mark.parametrize(
        "uri",
        [
            "/scriptures/bofm/alma/32",
            "/general-conference/2024/04/57nelson",
            "/manual/come-follow-me-for-home-and-church-book-of-mormon-2024/05",
        ],
    )
    def test_valid(self, uri: str) -> None:
        """Test that content URIs are accepted."""
        assert validate_content_uri(uri)

    @pytest.mark.parametrize(
        "uri",
        [
            "",
            "scriptures/bofm/alma/32",
            "/scriptures/bofm/alma/32?lang=eng",
            "/../../etc/passwd",
            "/scriptures bofm",
            "https://example.com/x",
        ],
    )
    def test_invalid(self, uri: str) -> None:
        """Test that malformed URIs are rejected."""
        assert not validate_content_uri(uri)

    def test_too_long(self) -> None:
        """Test that overlong URIs are rejected."""
        assert not validate_content_uri("/" + "a" * MAX_URI_LENGTH)


class TestMediaHelpers:
    """Tests for media URL helpers."""

    @pytest.mark.parametrize(
        "url,expected",
        [
            ("https://media.example.org/talk.mp3", "mp3"),
            ("https://media.example.org/talk-720p.MP4?download=true", "mp4"),
            ("https://media.example.org/stream/12345", None),
        ],
    )
    def test_media_format(self, url: str, expected: str | None) -> None:
        """Test that the format comes from the file extension."""
        assert media_format(url) == expected

    def test_media_quality(self) -> None:
        """Test quality detection from a label or the URL."""
        assert media_quality("https://media.example.org/talk-1080p.mp4") == "1080p"
        assert media_quality("https://media.example.org/talk.mp4", "360p") == "360p"
        assert media_quality("https://media.example.org/talk.mp4") is None

    def test_extract_media(self) -> None:
        """Test that audio, video and image sources are found once each."""
        html = """
        <video>
            <source src="https://media.example.org/talk-720p.mp4" data-quality="720p">
            <source src="https://media.example.org/talk-360p.mp4">
        </video>
        <audio src="https://media.example.org/talk.mp3"></audio>
        <img src="https://media.example.org/figure.jpg">
        <img src="https://media.example.org/figure.jpg">
        <picture><source src="https://media.example.org/banner.webp"></picture>
        """

        media = {item["url"]: item for item in extract_media(html)}

        assert set(media) == {
            "https://media.example.org/talk-720p.mp4",
            "https://media.example.org/talk-360p.mp4",
            "https://media.example.org/talk.mp3",
            "https://media.example.org/figure.jpg",
        }
        assert media["https://media.example.org/talk-720p.mp4"]["type"] == "video"
        assert media["https://media.example.org/talk-720p.mp4"]["quality"] == "720p"
        assert media["https://media.example.org/talk-360p.mp4"]["quality"] == "360p"
        assert media["https://media.example.org/talk.mp3"]["type"] == "audio"
        assert media["https://media.example.org/talk.mp3"]["quality"] is None
        assert media["https://media.example.org/figure.jpg"]["format"] == "jpg"
