"""
Reads one HTML or Markdown input into a parsed document unit.
"""
import logging
from dataclasses import dataclass

import markdown
from lxml import etree, html

from ..utils.errors import ReadError
from .locator import file_basename, file_extension


log = logging.getLogger("htmlbook")

MARKDOWN_EXTENSIONS = ["extra", "sane_lists"]
EMPTY_DOCUMENT = "<html><body></body></html>"


@dataclass(frozen=True)
class SourceDocument:
    """
    One loaded input.

    `origin` is the name as the user gave it ("" for standard input),
    `location` is the local file that was actually read and `base` is what
    relative links inside the document resolve against.
    """
    origin: str
    filename: str
    base: str
    location: str
    markup: str
    root: etree._Element


def markup_for(name: str) -> str:
    """Inputs named *.md are Markdown, everything else is HTML."""
    return "markdown" if file_extension(name).lower() == "md" else "html"


def parse_markup(data: bytes, markup: str) -> etree._Element:
    """
    Parses raw bytes into an lxml HTML tree.

    Markdown is rendered to HTML first. Input without any element, such as
    a comment-only file, gives an empty document rather than an error.
    """
    if markup == "markdown":
        text = data.decode("utf-8", errors="replace")
        data = markdown.markdown(text, extensions=MARKDOWN_EXTENSIONS).encode("utf-8")

    if not data.strip():
        return html.document_fromstring(EMPTY_DOCUMENT)

    try:
        return html.document_fromstring(data)
    except etree.ParserError:
        # lxml reports "Document is empty" when nothing but comments was parsed
        return html.document_fromstring(EMPTY_DOCUMENT)
    except ValueError as e:
        raise ReadError(f"Unable to parse document: {e}") from e


def read_document(origin: str, location: str, base: str) -> SourceDocument:
    """Loads the located file `location` that was requested as `origin`."""
    markup = markup_for(origin or location)
    try:
        with open(location, "rb") as f:
            data = f.read()
    except OSError as e:
        raise ReadError(f'Unable to open "{origin}": {e.strerror or e}') from e

    root = parse_markup(data, markup)
    log.debug(f"Read {markup} document '{origin}' from {location}")
    return SourceDocument(
        origin=origin,
        filename=file_basename(origin),
        base=base,
        location=location,
        markup=markup,
        root=root,
    )


def read_stream(stream) -> SourceDocument:
    """Loads standard input (or any binary stream) as one HTML document."""
    data = stream.read()
    if isinstance(data, str):
        data = data.encode("utf-8")
    return SourceDocument(
        origin="",
        filename="",
        base=".",
        location="",
        markup="html",
        root=parse_markup(data, "html"),
    )
