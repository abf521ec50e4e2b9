"""Exceptions raised while loading EPUB archives."""


class EpubReaderError(Exception):
    """Base class for all epub-reader errors."""


class EntryNotFound(EpubReaderError, KeyError):
    """Archive entry does not exist."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(path)

    def __str__(self) -> str:
        return f"Archive entry not found: {self.path}"


class EntryUnreadable(EpubReaderError):
    """Archive entry exists but its stored data is corrupt."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read archive entry {path}: {reason}")


class LoadError(EpubReaderError):
    """Fatal failure while loading a book."""

    kind = "load_error"

    def __init__(self, message: str, kind: str | None = None):
        if kind is not None:
            self.kind = kind
        self.message = message
        super().__init__(f"{self.kind}: {message}")


class MalformedArchive(LoadError):
    """Container descriptor missing or unreadable, or not a ZIP at all."""

    kind = "malformed_archive"


class MalformedPackage(LoadError):
    """Package (OPF) document missing or unreadable."""

    kind = "malformed_package"
