"""Reading a PDF file into a :class:`PdfDocument`."""

from __future__ import annotations

from typing import BinaryIO

from .document import PdfDocument
from .objects import PdfObject, parse_object
from .properties import read_properties
from .xref import (
    STARTXREF_PATTERN,
    TRAILER_PATTERN,
    PdfFormatError,
    XrefEntry,
    find_xref_entries,
)


def parse_xref(raw: bytes) -> list[XrefEntry]:
    """Return the cross-reference entries of ``raw``."""
    return find_xref_entries(raw)


def parse_trailer(raw: bytes) -> int:
    """Return the root object id named by the trailer's ``/Root``."""
    trailer = TRAILER_PATTERN.search(raw)
    if trailer is None:
        raise PdfFormatError("trailer not found")
    startxref = STARTXREF_PATTERN.search(raw)
    if startxref is None:
        raise PdfFormatError("startxref not found")
    props = read_properties(raw[trailer.end():startxref.start()])
    root = props.get("Root")
    if root is None:
        raise PdfFormatError("/Root not found")
    root_id, _ = root.as_reference()
    return root_id


def _pages_object(doc: PdfDocument) -> PdfObject | None:
    root = doc.get(doc.root_id)
    if root is None:
        raise PdfFormatError("root object not found")
    pages = root.read_properties().get("Pages")
    if pages is None:
        raise PdfFormatError("/Pages not found")
    pages_id, _ = pages.as_reference()
    return doc.get(pages_id)


def parse_pdf(source: bytes | bytearray | BinaryIO) -> PdfDocument:
    """Parse PDF bytes, or a binary stream holding them, into a document."""
    if isinstance(source, (bytes, bytearray, memoryview)):
        raw = bytes(source)
    else:
        raw = source.read()
    doc = PdfDocument(xrefs=parse_xref(raw), root_id=parse_trailer(raw))
    for entry in doc.xrefs:
        if entry.in_use:
            doc.put(parse_object(raw, entry.offset))
    doc.pages_obj = _pages_object(doc)
    return doc