"""Resolve, load and encode the book cover image."""

import logging
from collections.abc import Iterator

from epub_reader.core.archive import ZipArchive
from epub_reader.core.markup import find_elements, get_attr, parse_descriptor
from epub_reader.core.reading_order import resolve_href
from epub_reader.errors import EntryNotFound, EntryUnreadable
from epub_reader.models.book import CoverImage
from epub_reader.models.epub import PackageDocument

log = logging.getLogger(__name__)

COVER_IMAGE_PROPERTY = "cover-image"


def media_type_for(href: str) -> str:
    """Infer the image MIME type from the file extension."""
    ext = href.rsplit(".", 1)[-1].lower() if "." in href else ""
    if ext in ("jpg", "jpeg"):
        return "image/jpeg"
    return "image/png"


def find_cover_meta_id(package: PackageDocument) -> str | None:
    """Manifest id named by ``<meta name="cover" content="...">``."""
    soup = parse_descriptor(package.raw)
    for meta in find_elements(soup, "meta"):
        name = get_attr(meta, "name")
        content = get_attr(meta, "content")
        if name and name.lower() == "cover" and content:
            return content
    return None


def _scan_items_by_id(raw: str, item_id: str) -> Iterator[str]:
    """Hrefs of every raw ``item`` whose id matches, case-insensitively."""
    wanted = item_id.lower()
    for item in find_elements(parse_descriptor(raw), "item"):
        candidate = get_attr(item, "id")
        href = get_attr(item, "href")
        if candidate and href and candidate.lower() == wanted:
            yield href


class CoverResolver:
    """Try cover strategies in priority order; first loadable image wins.

    1. ``<meta name="cover">`` id resolved through the parsed manifest.
    2. Manifest item with the ``cover-image`` property.
    3. The meta id looked up again by rescanning raw ``item`` elements.
    """

    def __init__(self, archive: ZipArchive, directory: str):
        self.archive = archive
        self.directory = directory

    def resolve(self, package: PackageDocument) -> CoverImage | None:
        """Return the cover image, or None if no strategy succeeds."""
        cover_id = find_cover_meta_id(package)

        if cover_id:
            item = package.manifest.get(cover_id)
            if item is not None:
                cover = self._load(item.href)
                if cover is not None:
                    return cover

        for item in package.manifest.values():
            if COVER_IMAGE_PROPERTY in item.properties:
                cover = self._load(item.href)
                if cover is not None:
                    return cover

        if cover_id:
            for href in _scan_items_by_id(package.raw, cover_id):
                cover = self._load(href)
                if cover is not None:
                    return cover

        log.info("No cover image found")
        return None

    def _load(self, href: str) -> CoverImage | None:
        """Read and wrap the image at ``href``; None on any failure."""
        path = resolve_href(self.directory, href)
        try:
            data = self.archive.read_bytes(path)
        except EntryNotFound:
            log.debug("Cover candidate %s not in archive", path)
            return None
        except (EntryUnreadable, OSError, RuntimeError, ValueError) as e:
            log.warning("Cannot read cover candidate %s: %s", path, e)
            return None

        return CoverImage(path=path, media_type=media_type_for(href), data=data)


def resolve_cover(
    package: PackageDocument, directory: str, archive: ZipArchive
) -> CoverImage | None:
    """Convenience wrapper around :class:`CoverResolver`."""
    return CoverResolver(archive, directory).resolve(package)
