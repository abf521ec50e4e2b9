"""Read-only access to entries of a ZIP-packaged EPUB."""

import io
import logging
import re
import zipfile
import zlib

from epub_reader.errors import EntryNotFound, EntryUnreadable, MalformedArchive

log = logging.getLogger(__name__)

_XML_ENCODING_RE = re.compile(rb"""^\s*<\?xml[^>]*encoding\s*=\s*["']([\w.:-]+)["']""")


class ZipArchive:
    """Named-entry access over an in-memory ZIP archive."""

    def __init__(self, data: bytes):
        try:
            self._zip = zipfile.ZipFile(io.BytesIO(data))
        except (zipfile.BadZipFile, ValueError) as e:
            raise MalformedArchive(f"Not a ZIP archive: {e}") from e
        self._names = set(self._zip.namelist())

    def list_entries(self) -> list[str]:
        """Entry paths in archive order."""
        return self._zip.namelist()

    def has_entry(self, path: str) -> bool:
        """Check whether an entry exists."""
        return path in self._names

    def read_bytes(self, path: str) -> bytes:
        """Read an entry as raw bytes.

        Raises:
            EntryNotFound: No entry with that path.
            EntryUnreadable: Bad CRC or broken compressed stream.
        """
        if path not in self._names:
            raise EntryNotFound(path)
        try:
            with self._zip.open(path, "r") as handle:
                return handle.read()
        except (zipfile.BadZipFile, zlib.error) as e:
            raise EntryUnreadable(path, str(e)) from e

    def read_text(self, path: str) -> str:
        """Read an entry as text.

        Tries UTF-16 when a BOM says so, UTF-8 (BOM stripped), then the encoding named in an XML
        declaration, then latin-1 which never fails.
        """
        raw = self.read_bytes(path)
        if raw[:2] in (b"\xff\xfe", b"\xfe\xff"):
            return raw.decode("utf-16")
        try:
            return raw.decode("utf-8-sig")
        except UnicodeDecodeError:
            pass

        match = _XML_ENCODING_RE.match(raw)
        if match:
            encoding = match.group(1).decode("ascii")
            try:
                return raw.decode(encoding)
            except (LookupError, UnicodeDecodeError):
                log.debug("Declared encoding %s failed for %s", encoding, path)

        return raw.decode("latin-1")

    def close(self) -> None:
        self._zip.close()

    def __enter__(self) -> "ZipArchive":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
