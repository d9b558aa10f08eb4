"""Pydantic models for fetched Gospel Library documents."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field


class Footnote(BaseModel):
    """A footnote attached to a document."""

    marker: str = Field(description="Footnote marker as shown in the text")
    content: str = Field(description="Footnote text")
    references: list[dict[str, str]] = Field(
        default_factory=list, description="Linked references (href, text)"
    )


class ContentResponse(BaseModel):
    """Response model for fetch_content."""

    uri: str = Field(description="URI that was fetched")
    title: str = Field(description="Document title")
    content: str = Field(description="Document body as text, markdown or HTML")
    format: str = Field(description="text, markdown or html")
    metadata: dict[str, Any] = Field(
        default_factory=dict, description="Publication, content type, media URLs..."
    )
    footnotes: list[Footnote] = Field(default_factory=list, description="Footnotes")


class StructureItem(BaseModel):
    """One entry in a browsed Gospel Library structure."""

    title: str = Field(description="Entry title")
    uri: str | None = Field(default=None, description="URI to browse or fetch, if the entry has one")
    type: str = Field(description="collection, book, chapter, section, session or item")
    description: str | None = Field(default=None, description="Subtitle or summary")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Speaker, date, image...")
    children: list[StructureItem] = Field(default_factory=list, description="Nested entries")


class BrowseResponse(BaseModel):
    """Response model for browse_structure."""

    uri: str = Field(description="URI that was browsed")
    title: str | None = Field(default=None, description="Title of the browsed node")
    depth: int = Field(description="Levels that were expanded")
    items: list[StructureItem] = Field(default_factory=list, description="Top-level entries")


class MediaItem(BaseModel):
    """An audio, video or image file attached to a document."""

    type: Literal["audio", "video", "image"] = Field(description="Media type")
    url: str = Field(description="Media URL")
    format: str | None = Field(default=None, description="File format, e.g. mp3 or mp4")
    quality: str | None = Field(default=None, description="Video quality, e.g. 720p")
    language: str | None = Field(default=None, description="Language code")


class MediaResponse(BaseModel):
    """Response model for fetch_media."""

    uri: str = Field(description="URI of the document")
    title: str = Field(description="Document title")
    speaker: str | None = Field(default=None, description="Speaker or author")
    date: str | None = Field(default=None, description="Publication date")
    description: str | None = Field(default=None, description="Document summary")
    thumbnail_url: str | None = Field(default=None, description="Thumbnail image")
    media: list[MediaItem] = Field(default_factory=list, description="Media matching the filters")
    available_types: list[str] = Field(
        default_factory=list, description="Media types the document has before filtering"
    )
