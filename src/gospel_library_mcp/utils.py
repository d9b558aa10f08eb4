"""Utility functions for HTML and URI processing."""

from __future__ import annotations

import re
from urllib.parse import urlparse

from bs4 import BeautifulSoup
from markdownify import markdownify

CONTENT_URI_PATTERN = re.compile(r"^/[A-Za-z0-9\-_/]+$")
MAX_URI_LENGTH = 500


def html_to_markdown(html: str, strip_tags: list[str] | None = None) -> str:
    """Convert HTML to markdown format.

    Args:
        html: The HTML content to convert
        strip_tags: List of HTML tags to strip (e.g., ['script', 'style'])

    Returns:
        Markdown formatted text
    """
    soup = BeautifulSoup(html, "lxml")

    if strip_tags:
        for tag in strip_tags:
            for element in soup.find_all(tag):
                element.decompose()

    markdown = markdownify(str(soup), heading_style="ATX")
    return markdown.strip()


def html_to_text(html: str, strip_tags: list[str] | None = None) -> str:
    """Extract plain text from HTML.

    Args:
        html: The HTML content to process
        strip_tags: List of HTML tags to strip (default: script, style, meta, link, noscript)

    Returns:
        Plain text content, one block per line
    """
    soup = BeautifulSoup(html, "lxml")

    default_strip_tags = ["script", "style", "meta", "link", "noscript"]
    tags_to_strip = strip_tags if strip_tags is not None else default_strip_tags

    for tag in tags_to_strip:
        for element in soup.find_all(tag):
            element.decompose()

    text = soup.get_text(separator="\n", strip=True)

    # Clean up multiple newlines
    lines = [line.strip() for line in text.split("\n") if line.strip()]
    return "\n".join(lines)


def clean_snippet(html: str | None) -> str | None:
    """Turn a search-result HTML snippet into one line of text.

    Bold highlights become markdown ``**`` emphasis, other tags are dropped
    and whitespace is collapsed.

    >>> clean_snippet("<b>Faith</b> is <i>not</i>\\n a perfect knowledge")
    '**Faith** is not a perfect knowledge'
    """
    if not html:
        return None
    soup = BeautifulSoup(html, "lxml")
    for bold in soup.find_all("b"):
        bold.replace_with(f"**{bold.get_text()}**")
    text = " ".join(soup.get_text().split())
    return text or None


def extract_uri(link: str) -> str:
    """Convert a Gospel Library link to a content URI.

    >>> extract_uri("https://www.churchofjesuschrist.org/study/scriptures/bofm/alma/32?lang=eng")
    '/scriptures/bofm/alma/32'
    """
    path = urlparse(link).path or link
    if path.startswith("/study/"):
        path = path[len("/study"):]
    return path


def validate_content_uri(uri: str) -> bool:
    """Check that a URI is safe to pass to the content API."""
    return len(uri) < MAX_URI_LENGTH and bool(CONTENT_URI_PATTERN.match(uri))


MEDIA_QUALITY_PATTERN = re.compile(r"(1080p|720p|360p)")

_MEDIA_TAGS = {"audio": "audio", "video": "video", "img": "image"}


def media_format(url: str) -> str | None:
    """File extension of a media URL, lowercased.

    >>> media_format("https://media.example.org/talk-720p.MP4?download=true")
    'mp4'
    """
    name = urlparse(url).path.rsplit("/", 1)[-1]
    if "." not in name:
        return None
    return name.rsplit(".", 1)[-1].lower() or None


def media_quality(url: str, label: str | None = None) -> str | None:
    match = MEDIA_QUALITY_PATTERN.search(label or "") or MEDIA_QUALITY_PATTERN.search(url)
    return match.group(1) if match else None


def extract_media(html: str) -> list[dict[str, str | None]]:
    """Find audio, video and image sources in an HTML body.

    ``<source>`` children of ``<audio>``/``<video>`` take their parent's type.

    Returns:
        One dict per distinct URL with ``type``, ``url``, ``format`` and ``quality``
    """
    soup = BeautifulSoup(html, "lxml")
    found: dict[str, dict[str, str | None]] = {}

    for element in soup.find_all(["audio", "video", "img", "source"]):
        if element.name == "source":
            parent = element.find_parent(["audio", "video"])
            if parent is None:
                continue
            media_type = _MEDIA_TAGS[parent.name]
        else:
            media_type = _MEDIA_TAGS[element.name]

        url = element.get("src")
        if not url or url in found:
            continue
        label = element.get("data-quality") or element.get("label")
        found[url] = {
            "type": media_type,
            "url": url,
            "format": media_format(url),
            "quality": media_quality(url, label) if media_type == "video" else None,
        }

    return list(found.values())
