"""Data models."""

from epub_reader.models.book import (
    BookMetadata,
    Chapter,
    CoverImage,
    LoadedBook,
)
from epub_reader.models.epub import (
    ManifestItem,
    PackageDocument,
    PackageLocation,
)
from epub_reader.models.output import (
    BookOutput,
    ChapterMetadata,
    ChapterOutput,
)

__all__ = [
    # Book models
    "CoverImage",
    "BookMetadata",
    "Chapter",
    "LoadedBook",
    # Package models
    "PackageLocation",
    "ManifestItem",
    "PackageDocument",
    # Output models
    "ChapterMetadata",
    "ChapterOutput",
    "BookOutput",
]
