"""Data models for EPUB package structure."""

from pydantic import BaseModel, ConfigDict, Field


class PackageLocation(BaseModel):
    """Location of the package (OPF) document inside the archive."""

    model_config = ConfigDict(frozen=True)

    path: str

    @property
    def directory(self) -> str:
        """Containing directory, with trailing slash, or "" at the root."""
        return self.path[: self.path.rfind("/") + 1]


class ManifestItem(BaseModel):
    """Single ``item`` declared in the manifest."""

    model_config = ConfigDict(frozen=True)

    id: str
    href: str
    media_type: str | None = None
    properties: frozenset[str] = Field(default_factory=frozenset)


class PackageDocument(BaseModel):
    """Parsed package document: metadata, manifest and spine."""

    title: str = "Unknown Title"
    author: str = "Unknown Author"
    manifest: dict[str, ManifestItem] = Field(default_factory=dict)
    spine: list[str] = Field(default_factory=list)
    raw: str = Field(default="", repr=False)
