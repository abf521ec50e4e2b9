from __future__ import annotations

import io
import zipfile
from pathlib import Path
from typing import Callable, Mapping

import pytest

CONTAINER_XML = """<?xml version="1.0" encoding="UTF-8"?>
<container version="1.0" xmlns="urn:oasis:names:tc:opendocument:xmlns:container">
  <rootfiles>
    <rootfile full-path="OEBPS/content.opf" media-type="application/oebps-package+xml"/>
  </rootfiles>
</container>
"""

JPEG_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00fake-jpeg"
PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-png"


def build_opf(
    manifest: str,
    spine: str,
    metadata: str = "<dc:title>Test Book</dc:title><dc:creator>Ann Author</dc:creator>",
) -> str:
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<package xmlns="http://www.idpf.org/2007/opf" version="3.0" unique-identifier="uid">
  <metadata xmlns:dc="http://purl.org/dc/elements/1.1/">
    {metadata}
  </metadata>
  <manifest>
    {manifest}
  </manifest>
  <spine>
    {spine}
  </spine>
</package>
"""


def build_chapter(body: str, head_title: str = "") -> str:
    return f"""<?xml version="1.0" encoding="utf-8"?>
<!DOCTYPE html>
<html xmlns="http://www.w3.org/1999/xhtml">
<head>
  <title>{head_title}</title>
  <style>p {{ margin: 0; }}</style>
</head>
<body>
{body}
</body>
</html>
"""


def build_epub(entries: Mapping[str, str | bytes], container: str | None = CONTAINER_XML) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        zf.writestr("mimetype", "application/epub+zip")
        if container is not None:
            zf.writestr("META-INF/container.xml", container)
        for name, data in entries.items():
            zf.writestr(name, data)
    return buffer.getvalue()



def corrupt_entry(data: bytes, name: str) -> bytes:
    """Flip the first stored byte of an entry so its CRC check fails."""
    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        info = zf.getinfo(name)
    header = info.header_offset
    name_len = int.from_bytes(data[header + 26 : header + 28], "little")
    extra_len = int.from_bytes(data[header + 28 : header + 30], "little")
    start = header + 30 + name_len + extra_len
    buffer = bytearray(data)
    buffer[start] ^= 0xFF
    return bytes(buffer)


SAMPLE_MANIFEST = """
    <item id="cover" href="cover.jpg" media-type="image/jpeg" properties="cover-image"/>
    <item id="ch1" href="ch1.xhtml" media-type="application/xhtml+xml"/>
    <item id="ch2" href="ch2.xhtml" media-type="application/xhtml+xml"/>
"""
SAMPLE_SPINE = '<itemref idref="ch1"/><itemref idref="ch2"/>'
SAMPLE_CH1 = "<h1>Intro</h1><p>Hello <b>world</b>.</p><ul><li>A</li><li>B</li></ul>"
SAMPLE_CH2 = "<h1>Second</h1><p>One.</p><p>Two.</p>"


@pytest.fixture
def make_epub() -> Callable[..., bytes]:
    return build_epub


@pytest.fixture
def sample_epub_bytes() -> bytes:
    return build_epub(
        {
            "OEBPS/content.opf": build_opf(SAMPLE_MANIFEST, SAMPLE_SPINE),
            "OEBPS/cover.jpg": JPEG_BYTES,
            "OEBPS/ch1.xhtml": build_chapter(SAMPLE_CH1, head_title="Book"),
            "OEBPS/ch2.xhtml": build_chapter(SAMPLE_CH2, head_title="Book"),
        }
    )


@pytest.fixture
def sample_epub(tmp_path: Path, sample_epub_bytes: bytes) -> Path:
    path = tmp_path / "sample book.epub"
    path.write_bytes(sample_epub_bytes)
    return path
