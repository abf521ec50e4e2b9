from __future__ import annotations

from pathlib import Path

import pytest

from epub_reader.core.archive import ZipArchive
from epub_reader.core.epub_parser import EpubParser, load, load_path
from epub_reader.errors import LoadError

from conftest import (
    CONTAINER_XML,
    JPEG_BYTES,
    SAMPLE_MANIFEST,
    build_chapter,
    build_epub,
    build_opf,
    corrupt_entry,
)


def test_end_to_end_scenario(sample_epub_bytes: bytes) -> None:
    book = load(sample_epub_bytes)

    assert book.metadata.title == "Test Book"
    assert book.metadata.author == "Ann Author"
    assert book.chapters[0].title == "Intro"
    assert book.chapters[0].content == "Hello world.\n\n• A\n• B"
    assert book.chapters[1].title == "Second"
    assert book.chapters[1].content == "One.\n\nTwo."
    assert [c.index for c in book.chapters] == [0, 1]
    assert book.chapters[0].source == "OEBPS/ch1.xhtml"

    cover = book.metadata.cover_image
    assert cover is not None
    assert cover.media_type == "image/jpeg"
    assert cover.data == JPEG_BYTES
    assert cover.data_uri.startswith("data:image/jpeg;base64,")
    assert book.warnings == []


def test_load_path(sample_epub: Path) -> None:
    assert load_path(sample_epub).metadata.title == "Test Book"


def test_reading_order_follows_spine_not_manifest() -> None:
    manifest = """
        <item id="z" href="z.xhtml"/>
        <item id="y" href="y.xhtml"/>
        <item id="x" href="x.xhtml"/>
    """
    data = build_epub(
        {
            "OEBPS/content.opf": build_opf(manifest, '<itemref idref="x"/><itemref idref="y"/><itemref idref="z"/>'),
            "OEBPS/x.xhtml": build_chapter("<h1>X</h1><p>x</p>"),
            "OEBPS/y.xhtml": build_chapter("<h1>Y</h1><p>y</p>"),
            "OEBPS/z.xhtml": build_chapter("<h1>Z</h1><p>z</p>"),
        }
    )
    assert [c.title for c in load(data).chapters] == ["X", "Y", "Z"]


def test_dangling_idref_is_dropped() -> None:
    spine = '<itemref idref="ch1"/><itemref idref="ghost"/><itemref idref="ch2"/>'
    data = build_epub(
        {
            "OEBPS/content.opf": build_opf(SAMPLE_MANIFEST, spine),
            "OEBPS/ch1.xhtml": build_chapter("<h1>Intro</h1><p>First</p>"),
            "OEBPS/ch2.xhtml": build_chapter("<h1>Second</h1><p>Second body</p>"),
        }
    )
    book = load(data)
    assert len(book.chapters) == 3 - 1
    assert [c.title for c in book.chapters] == ["Intro", "Second"]
    assert any("ghost" in warning for warning in book.warnings)


def test_missing_optional_parts_degrade() -> None:
    data = build_epub(
        {
            "content.opf": build_opf(
                '<item id="c1" href="c1.html"/><item id="c2" href="c2.html"/>',
                '<itemref idref="c1"/><itemref idref="c2"/>',
                metadata="",
            ),
            "c1.html": "<html><body><p>Only text</p></body></html>",
        },
        container=CONTAINER_XML.replace("OEBPS/content.opf", "content.opf"),
    )
    book = load(data)
    assert book.metadata.title == "Unknown Title"
    assert book.metadata.author == "Unknown Author"
    assert book.metadata.cover_image is None
    assert len(book.chapters) == 1
    assert book.chapters[0].title == "Chapter"
    assert book.chapters[0].content == "Only text"
    assert "Missing chapter c2.html" in book.warnings
    assert "No cover image found" in book.warnings


def test_empty_chapters_are_excluded() -> None:
    data = build_epub(
        {
            "OEBPS/content.opf": build_opf(
                '<item id="a" href="a.xhtml"/><item id="b" href="b.xhtml"/><item id="c" href="c.xhtml"/>',
                '<itemref idref="a"/><itemref idref="b"/><itemref idref="c"/>',
            ),
            "OEBPS/a.xhtml": build_chapter("<p>First</p>"),
            "OEBPS/b.xhtml": build_chapter("<h1>Blank</h1><div>  &nbsp; </div>"),
            "OEBPS/c.xhtml": build_chapter("<p>Third</p>"),
        }
    )
    book = load(data)
    assert [c.content for c in book.chapters] == ["First", "Third"]
    assert [c.index for c in book.chapters] == [0, 1]


@pytest.mark.parametrize(
    ("entries", "container", "kind"),
    [
        ({}, None, "malformed_archive"),
        ({}, "<container/>", "malformed_archive"),
        ({}, CONTAINER_XML, "malformed_package"),
    ],
)
def test_structural_failures_abort_the_load(entries: dict, container: str | None, kind: str) -> None:
    with pytest.raises(LoadError) as excinfo:
        load(build_epub(entries, container=container))
    assert excinfo.value.kind == kind
    assert str(excinfo.value).startswith(f"{kind}: ")


def test_garbage_bytes_fail_as_malformed_archive() -> None:
    with pytest.raises(LoadError) as excinfo:
        load(b"PK but not really")
    assert excinfo.value.kind == "malformed_archive"


def test_corrupt_chapter_is_skipped(sample_epub_bytes: bytes) -> None:
    book = load(corrupt_entry(sample_epub_bytes, "OEBPS/ch1.xhtml"))
    assert [c.title for c in book.chapters] == ["Second"]
    assert book.chapters[0].index == 0
    assert "Unreadable chapter OEBPS/ch1.xhtml" in book.warnings


def test_corrupt_cover_gives_no_cover(sample_epub_bytes: bytes) -> None:
    book = load(corrupt_entry(sample_epub_bytes, "OEBPS/cover.jpg"))
    assert book.metadata.cover_image is None
    assert "No cover image found" in book.warnings
    assert len(book.chapters) == 2


def test_corrupt_container_fails_as_malformed_archive(sample_epub_bytes: bytes) -> None:
    with pytest.raises(LoadError) as excinfo:
        load(corrupt_entry(sample_epub_bytes, "META-INF/container.xml"))
    assert excinfo.value.kind == "malformed_archive"


def test_parallel_workers_keep_spine_order() -> None:
    count = 12
    manifest = "".join(f'<item id="c{i}" href="c{i}.xhtml"/>' for i in range(count))
    spine = "".join(f'<itemref idref="c{i}"/>' for i in reversed(range(count)))
    entries = {"OEBPS/content.opf": build_opf(manifest, spine)}
    for i in range(count):
        entries[f"OEBPS/c{i}.xhtml"] = build_chapter(f"<h1>Chapter {i}</h1><p>Body {i}</p>")
    data = build_epub(entries)

    with ZipArchive(data) as archive:
        parallel = EpubParser(archive, workers=4).parse()
    sequential = load(data)

    assert parallel.chapters == sequential.chapters
    assert [c.title for c in parallel.chapters] == [f"Chapter {i}" for i in reversed(range(count))]


def test_reload_is_independent(sample_epub_bytes: bytes) -> None:
    assert load(sample_epub_bytes) == load(sample_epub_bytes)


def test_ebooklib_generated_book(tmp_path: Path) -> None:
    epub = pytest.importorskip("ebooklib.epub")

    book = epub.EpubBook()
    book.set_identifier("epub-reader-test")
    book.set_title("Generated Book")
    book.set_language("en")
    book.add_author("Jane Doe")
    book.set_cover("cover.jpg", JPEG_BYTES)

    first = epub.EpubHtml(title="One", file_name="one.xhtml", lang="en")
    first.content = "<h1>One</h1><p>First chapter.</p>"
    second = epub.EpubHtml(title="Two", file_name="two.xhtml", lang="en")
    second.content = "<h1>Two</h1><p>Second &amp; last.</p><ul><li>x</li></ul>"
    book.add_item(first)
    book.add_item(second)
    book.toc = (first, second)
    book.add_item(epub.EpubNcx())
    book.add_item(epub.EpubNav())
    book.spine = [second, first]

    path = tmp_path / "generated.epub"
    epub.write_epub(str(path), book, {})

    loaded = load_path(path)
    assert loaded.metadata.title == "Generated Book"
    assert loaded.metadata.author == "Jane Doe"
    assert loaded.metadata.cover_image is not None
    assert loaded.metadata.cover_image.media_type == "image/jpeg"
    assert loaded.metadata.cover_image.data == JPEG_BYTES
    assert [c.title for c in loaded.chapters] == ["Two", "One"]
    assert loaded.chapters[0].content == "Second & last.\n\n• x"
    assert loaded.chapters[1].content == "First chapter."
