"""Write extracted chapters to an output directory."""

from datetime import datetime
from pathlib import Path
from typing import Literal

from epub_reader.models.book import Chapter, CoverImage, LoadedBook
from epub_reader.models.output import BookOutput, ChapterMetadata, ChapterOutput


def get_stats(content: str) -> dict[str, int]:
    """Calculate content statistics."""
    words = content.split()
    paragraphs = [p for p in content.split("\n\n") if p.strip()]
    return {
        "word_count": len(words),
        "character_count": len(content),
        "paragraph_count": len(paragraphs),
    }


class OutputWriter:
    """Write extracted chapters to output directory."""

    def __init__(self, output_dir: Path, source_path: Path):
        """Initialize output writer.

        Args:
            output_dir: Directory to write output files
            source_path: Path to the source EPUB
        """
        self.output_dir = output_dir
        self.source_path = source_path
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def write_chapter(
        self,
        chapter: Chapter,
        output_format: Literal["text", "json"] = "text",
    ) -> tuple[Path, ChapterMetadata]:
        """Write a single chapter as plain text or JSON."""
        stats = get_stats(chapter.content)

        metadata = ChapterMetadata(
            chapter_index=chapter.index,
            title=chapter.title,
            source_file=chapter.source,
            source_path=str(self.source_path),
            extracted_at=datetime.now(),
            word_count=stats["word_count"],
            character_count=stats["character_count"],
            paragraph_count=stats["paragraph_count"],
        )

        stem = f"chapter_{chapter.index + 1:03d}"
        if output_format == "json":
            output = ChapterOutput(
                metadata=metadata,
                content=chapter.content,
                format=output_format,
            )
            filepath = self.output_dir / f"{stem}.json"
            filepath.write_text(output.model_dump_json(indent=2), encoding="utf-8")
        else:
            filepath = self.output_dir / f"{stem}.txt"
            filepath.write_text(
                f"{chapter.title}\n\n{chapter.content}\n", encoding="utf-8"
            )

        return filepath, metadata

    def write_cover(self, cover: CoverImage) -> Path:
        """Write the cover image bytes next to the chapters."""
        suffix = ".jpg" if cover.media_type == "image/jpeg" else ".png"
        filepath = self.output_dir / f"cover{suffix}"
        filepath.write_bytes(cover.data)
        return filepath

    def write_manifest(
        self,
        book: LoadedBook,
        extracted_indices: list[int],
        chapter_metadata: list[ChapterMetadata],
        cover_path: Path | None = None,
    ) -> Path:
        """Write book manifest file."""
        cover = book.metadata.cover_image
        manifest = BookOutput(
            book_title=book.metadata.title,
            author=book.metadata.author,
            cover_file=cover_path.name if cover_path else None,
            cover_media_type=cover.media_type if cover else None,
            total_chapters=len(book.chapters),
            extracted_chapters=extracted_indices,
            output_directory=str(self.output_dir),
            created_at=datetime.now(),
            chapters=chapter_metadata,
            warnings=book.warnings,
        )

        filepath = self.output_dir / "manifest.json"
        filepath.write_text(manifest.model_dump_json(indent=2), encoding="utf-8")
        return filepath
