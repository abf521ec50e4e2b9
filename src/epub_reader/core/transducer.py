"""Convert chapter XHTML into plain text for a text-only renderer.

The conversion is a fixed sequence of passes over the raw markup. Later
passes rely on what earlier ones established: source whitespace is
collapsed before list and paragraph breaks are inserted, so the only
newlines left in the text are the ones the passes put there.

Output shape:
    - paragraphs separated by exactly one blank line
    - list items on their own line, prefixed with ``"• "``; nested lists
      are flattened, no indentation is kept
    - ``<br>`` becomes a single newline
"""

import html
import re
import warnings

from bs4 import BeautifulSoup, XMLParsedAsHTMLWarning

from epub_reader.models.book import Chapter

# Chapters are XHTML; parsing them as HTML is intended
warnings.filterwarnings("ignore", category=XMLParsedAsHTMLWarning)

DEFAULT_TITLE = "Chapter"
BULLET = "• "

ENTITIES = {
    "nbsp": " ",
    "amp": "&",
    "lt": "<",
    "gt": ">",
    "quot": '"',
    "#39": "'",
    "apos": "'",
    "mdash": "—",
    "ndash": "–",
    "hellip": "…",
    "rsquo": "'",
    "lsquo": "'",
    "rdquo": '"',
    "ldquo": '"',
}

_FLAGS = re.IGNORECASE | re.DOTALL

_TAG_RE = re.compile(r"</?[a-zA-Z!?][^>]*>")
_BODY_OPEN_RE = re.compile(r"<body\b[^>]*>", re.IGNORECASE)
_BODY_CLOSE_RE = re.compile(r"</body\s*>", re.IGNORECASE)
_COMMENT_RE = re.compile(r"<!--.*?-->", re.DOTALL)
_NOISE_EMPTY_RE = re.compile(r"<(?:script|style|header|footer)\b[^>]*/>", _FLAGS)
_NOISE_RE = re.compile(
    r"<(script|style|header|footer)\b[^>]*>.*?</\1\s*>", _FLAGS
)
_TITLEPAGE_RE = re.compile(
    r"<div\b[^>]*\bclass\s*=\s*[\"']titlepage[\"'][^>]*>.*?</div\s*>\s*</div\s*>\s*</div\s*>",
    _FLAGS,
)
_HEADING_RE = re.compile(r"<h([1-6])\b[^>]*>(.*?)</h\1\s*>", _FLAGS)
_WRAPPER_RE = re.compile(r"</?(?:section|div)\b[^>]*>", re.IGNORECASE)
_WHITESPACE_RE = re.compile(r"\s+")
_LI_OPEN_RE = re.compile(r"<li\b[^>]*>", re.IGNORECASE)
_LI_CLOSE_RE = re.compile(r"</li\s*>", re.IGNORECASE)
_LIST_RE = re.compile(r"</?(?:ol|ul)\b[^>]*>", re.IGNORECASE)
_NAV_RE = re.compile(r"</?nav\b[^>]*>", re.IGNORECASE)
_ANCHOR_RE = re.compile(r"<a\b[^>]*>(.*?)</a\s*>", _FLAGS)
_PARAGRAPH_BOUNDARY_RE = re.compile(r"</p\s*>\s*<p\b[^>]*>", re.IGNORECASE)
_PARAGRAPH_CLOSE_RE = re.compile(r"</p\s*>", re.IGNORECASE)
_PARAGRAPH_OPEN_RE = re.compile(r"<p\b[^>]*>", re.IGNORECASE)
_HEADING_CLOSE_RE = re.compile(r"</h[1-6]\s*>", re.IGNORECASE)
_BREAK_RE = re.compile(r"<br\b[^>]*>", re.IGNORECASE)
_ENTITY_RE = re.compile(
    "&(" + "|".join(re.escape(name) for name in ENTITIES) + ");"
)


def extract_title(markup: str) -> str:
    """Extract a chapter title from h1, h2 or title, in that order."""
    soup = BeautifulSoup(markup, "lxml")
    for tag in ["h1", "h2", "title"]:
        element = soup.find(tag)
        if element:
            text = " ".join(element.get_text().split())
            if text:
                return text
    return DEFAULT_TITLE


def decode_entities(text: str) -> str:
    """Decode the supported named entities; leave any other as-is."""
    return _ENTITY_RE.sub(lambda m: ENTITIES[m.group(1)], text)


def _isolate_body(text: str) -> str:
    match = _BODY_OPEN_RE.search(text)
    if not match:
        return text
    body = text[match.end():]
    close = _BODY_CLOSE_RE.search(body)
    return body[: close.start()] if close else body


def _heading_text(inner: str) -> str:
    return " ".join(html.unescape(_TAG_RE.sub("", inner)).split())


def _remove_title_blocks(text: str, title: str) -> str:
    text = _TITLEPAGE_RE.sub("", text)

    def drop_matching(match: re.Match) -> str:
        heading = _heading_text(match.group(2))
        return "" if heading.casefold() == title.casefold() else match.group(0)

    return _HEADING_RE.sub(drop_matching, text)


def _normalize_lines(text: str) -> str:
    """Trim lines, drop bullet-only lines, allow one blank line at most."""
    bullet_only = BULLET.strip()
    lines: list[str] = []
    for raw_line in text.split("\n"):
        line = " ".join(raw_line.split())
        if line == bullet_only:
            continue
        if not line and (not lines or not lines[-1]):
            continue
        lines.append(line)
    return "\n".join(lines).strip()


def transduce(markup: str, title: str | None = None) -> str:
    """Convert chapter markup to formatted plain text.

    Args:
        markup: Chapter (X)HTML.
        title: Chapter title to de-duplicate from the body. Extracted
            from the markup when omitted.

    Returns:
        Plain text; empty when the chapter has no readable content.
    """
    if title is None:
        title = extract_title(markup)

    # Tagless input is already formatted text; keep its line structure and
    # leave its entities alone
    has_markup = _TAG_RE.search(markup) is not None

    text = _isolate_body(markup)

    text = _COMMENT_RE.sub("", text)
    text = _NOISE_EMPTY_RE.sub("", text)
    text = _NOISE_RE.sub("", text)

    text = _remove_title_blocks(text, title)

    text = _WRAPPER_RE.sub("", text)

    if has_markup:
        text = _WHITESPACE_RE.sub(" ", text)

    text = _LI_OPEN_RE.sub("\n" + BULLET, text)
    text = _LI_CLOSE_RE.sub("", text)
    text = _LIST_RE.sub("\n", text)
    text = _NAV_RE.sub("", text)

    text = _ANCHOR_RE.sub(r"\1", text)

    text = _PARAGRAPH_BOUNDARY_RE.sub("\n\n", text)
    text = _PARAGRAPH_CLOSE_RE.sub("\n\n", text)
    text = _PARAGRAPH_OPEN_RE.sub("", text)
    text = _HEADING_CLOSE_RE.sub("\n\n", text)
    text = _BREAK_RE.sub("\n", text)

    if has_markup:
        text = decode_entities(text)

    text = _TAG_RE.sub("", text)

    return _normalize_lines(text)


def transduce_chapter(markup: str, index: int = 0, source: str = "") -> Chapter:
    """Extract title and content of one chapter."""
    title = extract_title(markup)
    return Chapter(
        title=title,
        content=transduce(markup, title),
        index=index,
        source=source,
    )
