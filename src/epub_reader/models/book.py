"""Data models for a loaded book."""

import base64

from pydantic import BaseModel, ConfigDict, Field


class CoverImage(BaseModel):
    """Cover image resolved from the package document."""

    model_config = ConfigDict(frozen=True)

    path: str
    media_type: str
    data: bytes = Field(exclude=True, repr=False)

    @property
    def data_uri(self) -> str:
        """Cover encoded as a ``data:`` URI."""
        payload = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.media_type};base64,{payload}"


class BookMetadata(BaseModel):
    """Book-level metadata."""

    model_config = ConfigDict(frozen=True)

    title: str = "Unknown Title"
    author: str = "Unknown Author"
    cover_image: CoverImage | None = None


class Chapter(BaseModel):
    """Chapter title and plain-text content."""

    model_config = ConfigDict(frozen=True)

    title: str
    content: str
    index: int = 0
    source: str = ""


class LoadedBook(BaseModel):
    """Result of loading an EPUB archive."""

    model_config = ConfigDict(frozen=True)

    metadata: BookMetadata
    chapters: list[Chapter] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
