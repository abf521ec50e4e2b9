"""Resolve the spine into an ordered list of chapter entry paths."""

import logging
import posixpath
from urllib.parse import unquote

from epub_reader.models.epub import ManifestItem

log = logging.getLogger(__name__)


def resolve_href(directory: str, href: str) -> str:
    """Resolve a manifest href against the package document directory."""
    href = unquote(href.split("#", 1)[0])
    if href.startswith("/"):
        return posixpath.normpath(href).lstrip("/")
    path = posixpath.normpath(directory + href)
    return path.lstrip("/") if path != "." else ""


def resolve_reading_order(
    spine: list[str],
    manifest: dict[str, ManifestItem],
    directory: str,
    dangling: list[str] | None = None,
) -> list[str]:
    """Map spine idrefs to archive paths, in spine order.

    Idrefs with no manifest item are skipped; they are appended to
    ``dangling`` when a list is given.
    """
    paths = []
    for idref in spine:
        item = manifest.get(idref)
        if item is None:
            log.warning("Spine references unknown manifest id %r", idref)
            if dangling is not None:
                dangling.append(idref)
            continue
        paths.append(resolve_href(directory, item.href))
    return paths
