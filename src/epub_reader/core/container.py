"""Locate the package document through META-INF/container.xml."""

import logging

from epub_reader.core.archive import ZipArchive
from epub_reader.core.markup import find_elements, get_attr, parse_descriptor
from epub_reader.errors import EntryNotFound, EntryUnreadable, MalformedArchive
from epub_reader.models.epub import PackageLocation

log = logging.getLogger(__name__)

CONTAINER_PATH = "META-INF/container.xml"


def find_full_path(container_xml: str) -> str | None:
    """Find the ``full-path`` attribute naming the package document.

    ``rootfile`` elements are checked first; any other element carrying
    ``full-path`` is accepted as a fallback.
    """
    soup = parse_descriptor(container_xml)

    for rootfile in find_elements(soup, "rootfile"):
        full_path = get_attr(rootfile, "full-path")
        if full_path:
            return full_path

    for tag in soup.find_all(True):
        full_path = get_attr(tag, "full-path")
        if full_path:
            return full_path

    return None


def locate_package(archive: ZipArchive) -> PackageLocation:
    """Return the package document location.

    Raises:
        MalformedArchive: If the container descriptor is missing,
            unreadable, or names no package document.
    """
    try:
        container_xml = archive.read_text(CONTAINER_PATH)
    except EntryNotFound as e:
        raise MalformedArchive("Missing container.xml") from e
    except (EntryUnreadable, OSError, RuntimeError, ValueError) as e:
        raise MalformedArchive(f"Cannot read container.xml: {e}") from e

    full_path = find_full_path(container_xml)
    if not full_path:
        raise MalformedArchive("Cannot find OPF path in container.xml")

    log.debug("Package document at %s", full_path)
    return PackageLocation(path=full_path.lstrip("/"))
