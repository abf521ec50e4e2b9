"""Load an EPUB archive into metadata and plain-text chapters."""

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from epub_reader.core.archive import ZipArchive
from epub_reader.core.container import locate_package
from epub_reader.core.cover import CoverResolver
from epub_reader.core.package import read_package
from epub_reader.core.reading_order import resolve_reading_order
from epub_reader.core.transducer import transduce_chapter
from epub_reader.errors import EntryNotFound, EntryUnreadable
from epub_reader.models.book import BookMetadata, Chapter, LoadedBook

log = logging.getLogger(__name__)


class EpubParser:
    """Parse an opened EPUB archive and extract its readable content."""

    def __init__(self, archive: ZipArchive, workers: int = 1):
        self.archive = archive
        self.workers = max(1, workers)
        self.warnings: list[str] = []

    def parse(self) -> LoadedBook:
        """Run the whole pipeline.

        Raises:
            MalformedArchive: container.xml missing or unusable.
            MalformedPackage: package document missing or unreadable.
        """
        self.warnings = []
        location = locate_package(self.archive)
        package = read_package(self.archive, location)

        cover = CoverResolver(self.archive, location.directory).resolve(package)
        if cover is None:
            self.warnings.append("No cover image found")

        metadata = BookMetadata(
            title=package.title,
            author=package.author,
            cover_image=cover,
        )

        dangling: list[str] = []
        paths = resolve_reading_order(
            package.spine, package.manifest, location.directory, dangling
        )
        for idref in dangling:
            self.warnings.append(f"Spine item {idref!r} is not in the manifest")

        return LoadedBook(
            metadata=metadata,
            chapters=self._get_chapters(paths),
            warnings=list(self.warnings),
        )

    def _get_chapters(self, paths: list[str]) -> list[Chapter]:
        """Transduce every chapter, keeping spine order."""
        if self.workers > 1 and len(paths) > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as pool:
                results = list(pool.map(self._load_chapter, paths))
        else:
            results = [self._load_chapter(path) for path in paths]

        chapters = []
        for path, chapter in zip(paths, results):
            if chapter is None:
                continue
            if not chapter.content.strip():
                log.debug("Chapter %s is empty after extraction", path)
                self.warnings.append(f"Skipped empty chapter {path}")
                continue
            chapters.append(chapter.model_copy(update={"index": len(chapters)}))
        return chapters

    def _load_chapter(self, path: str) -> Chapter | None:
        """Read and transduce one chapter; None when it cannot be read."""
        try:
            markup = self.archive.read_text(path)
        except EntryNotFound:
            log.warning("Chapter entry %s not found", path)
            self.warnings.append(f"Missing chapter {path}")
            return None
        except (EntryUnreadable, OSError, RuntimeError, ValueError) as e:
            log.warning("Cannot read chapter %s: %s", path, e)
            self.warnings.append(f"Unreadable chapter {path}")
            return None

        return transduce_chapter(markup, source=path)


def load(archive_bytes: bytes, workers: int = 1) -> LoadedBook:
    """Load an EPUB from raw bytes.

    Raises:
        LoadError: ``MalformedArchive`` or ``MalformedPackage`` when the
            bytes are not a usable EPUB.
    """
    with ZipArchive(archive_bytes) as archive:
        return EpubParser(archive, workers=workers).parse()


def load_path(path: Path, workers: int = 1) -> LoadedBook:
    """Load an EPUB file from disk."""
    return load(path.read_bytes(), workers=workers)
