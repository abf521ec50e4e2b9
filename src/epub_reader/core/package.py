"""Parse metadata, manifest and spine out of the package (OPF) document."""

import logging

from epub_reader.core.archive import ZipArchive
from epub_reader.core.markup import (
    element_text,
    find_element,
    find_elements,
    get_attr,
    parse_descriptor,
)
from epub_reader.errors import EntryNotFound, EntryUnreadable, MalformedPackage
from epub_reader.models.epub import ManifestItem, PackageDocument, PackageLocation

log = logging.getLogger(__name__)

UNKNOWN_TITLE = "Unknown Title"
UNKNOWN_AUTHOR = "Unknown Author"


def read_package(archive: ZipArchive, location: PackageLocation) -> PackageDocument:
    """Read and parse the package document.

    Raises:
        MalformedPackage: If the entry is missing or cannot be read.
    """
    try:
        text = archive.read_text(location.path)
    except EntryNotFound as e:
        raise MalformedPackage(f"Missing OPF file: {location.path}") from e
    except (EntryUnreadable, OSError, RuntimeError, ValueError) as e:
        raise MalformedPackage(f"Cannot read OPF file {location.path}: {e}") from e

    return parse_package(text)


def parse_package(text: str) -> PackageDocument:
    """Parse package document text. Missing fields degrade to placeholders."""
    soup = parse_descriptor(text)

    return PackageDocument(
        title=_first_text(soup, "title") or UNKNOWN_TITLE,
        author=_first_text(soup, "creator") or UNKNOWN_AUTHOR,
        manifest=_parse_manifest(soup),
        spine=_parse_spine(soup),
        raw=text,
    )


def _first_text(soup, name: str) -> str | None:
    element = find_element(soup, name)
    if element is None:
        return None
    return element_text(element) or None


def _parse_manifest(soup) -> dict[str, ManifestItem]:
    manifest: dict[str, ManifestItem] = {}

    for item in find_elements(soup, "item"):
        item_id = get_attr(item, "id")
        href = get_attr(item, "href")
        if not item_id or not href:
            log.debug("Skipping manifest item without id/href: %s", item.attrs)
            continue
        if item_id in manifest:
            # First occurrence wins
            log.debug("Duplicate manifest id %r ignored", item_id)
            continue

        manifest[item_id] = ManifestItem(
            id=item_id,
            href=href,
            media_type=get_attr(item, "media-type"),
            properties=frozenset((get_attr(item, "properties") or "").split()),
        )

    return manifest


def _parse_spine(soup) -> list[str]:
    spine = []
    for itemref in find_elements(soup, "itemref"):
        idref = get_attr(itemref, "idref")
        if idref:
            spine.append(idref)
    return spine
