"""Tolerant tag and attribute scanning for EPUB descriptor documents.

Container and package documents are parsed with BeautifulSoup's
``html.parser`` backend rather than an XML parser, so undeclared
namespaces, stray ampersands and unclosed tags do not abort the load.
Element and attribute names are matched on their local name, which makes
``dc:title``, ``opf:item`` and plain ``item`` equivalent.
"""

from bs4 import BeautifulSoup, Tag


def parse_descriptor(text: str) -> BeautifulSoup:
    """Parse container/package markup leniently."""
    return BeautifulSoup(text, "html.parser")


def local_name(name: str | None) -> str:
    """Strip any namespace prefix and lowercase."""
    if not name:
        return ""
    return name.rsplit(":", 1)[-1].lower()


def find_elements(soup: BeautifulSoup | Tag, name: str) -> list[Tag]:
    """All elements with the given local name, in document order."""
    wanted = name.lower()
    return soup.find_all(lambda tag: local_name(tag.name) == wanted)


def find_element(soup: BeautifulSoup | Tag, name: str) -> Tag | None:
    """First element with the given local name."""
    wanted = name.lower()
    return soup.find(lambda tag: local_name(tag.name) == wanted)


def get_attr(tag: Tag, name: str) -> str | None:
    """Value of an attribute found by scanning every attribute of ``tag``.

    Attribute position is irrelevant; the first attribute whose local
    name matches wins. Values are returned stripped.
    """
    wanted = name.lower()
    for attr, value in tag.attrs.items():
        if local_name(attr) != wanted:
            continue
        if isinstance(value, list):
            value = " ".join(value)
        if value is None:
            return None
        return value.strip()
    return None


def element_text(tag: Tag) -> str:
    """Text content with whitespace runs collapsed."""
    return " ".join(tag.get_text().split())
