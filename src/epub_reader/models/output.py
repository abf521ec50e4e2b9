"""Data models for extracted output files."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class ChapterMetadata(BaseModel):
    """Metadata accompanying chapter content."""

    chapter_index: int
    title: str
    source_file: str
    source_path: str
    extracted_at: datetime = Field(default_factory=datetime.now)
    word_count: int
    character_count: int
    paragraph_count: int


class ChapterOutput(BaseModel):
    """Complete chapter output."""

    metadata: ChapterMetadata
    content: str
    format: Literal["text", "json"] = "json"


class BookOutput(BaseModel):
    """Complete book output manifest."""

    book_title: str
    author: str
    cover_file: str | None = None
    cover_media_type: str | None = None
    total_chapters: int
    extracted_chapters: list[int]
    output_directory: str
    created_at: datetime = Field(default_factory=datetime.now)
    chapters: list[ChapterMetadata]
    warnings: list[str] = Field(default_factory=list)
