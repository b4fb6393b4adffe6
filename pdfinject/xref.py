"""Cross-reference table entries and the byte patterns that locate PDF structure."""

from __future__ import annotations

import re
from dataclasses import dataclass

XREF_PATTERN = re.compile(rb"xref")
XREF_LINE_PATTERN = re.compile(rb"[0-9]{10}[\t ]+[0-9]{5}[\t ][f,n]")
START_OBJ_PATTERN = re.compile(rb"[0-9]+[\n\r\t ]0[\n\r\t ]obj")
END_OBJ_PATTERN = re.compile(rb"endobj")
TRAILER_PATTERN = re.compile(rb"trailer")
STARTXREF_PATTERN = re.compile(rb"startxref")

_INTEGER = re.compile(r"[+-]?[0-9]+")
_WHITESPACE = " \t\n\r\v\f"


class PdfFormatError(ValueError):
    """Raised when PDF data does not have the expected structure."""


def _parse_int(text: str) -> int:
    text = text.strip(_WHITESPACE)
    if not _INTEGER.fullmatch(text):
        raise PdfFormatError(f"invalid integer: {text!r}")
    return int(text)


@dataclass(frozen=True)
class XrefEntry:
    """One ``nnnnnnnnnn ggggg x`` line of a cross-reference table."""

    offset: int
    generation: int
    keyword: str

    @property
    def in_use(self) -> bool:
        return self.keyword == "n"


def parse_xref_line(line: str | bytes) -> XrefEntry:
    """Parse a single cross-reference line."""
    if isinstance(line, (bytes, bytearray)):
        line = bytes(line).decode("latin-1")
    tokens = line.strip(_WHITESPACE).split(" ")
    if len(tokens) < 3:
        raise PdfFormatError("bad xref format")
    offset = _parse_int(tokens[0])
    generation = _parse_int(tokens[1])
    keyword = tokens[2].strip(_WHITESPACE)
    if keyword not in ("n", "f"):
        raise PdfFormatError(f"unknown xref keyword: {keyword!r}")
    return XrefEntry(offset, generation, keyword)


def find_xref_entries(raw: bytes) -> list[XrefEntry]:
    """Return every cross-reference line found after the first ``xref`` keyword."""
    marker = XREF_PATTERN.search(raw)
    if marker is None:
        raise PdfFormatError("xref not found")
    start = marker.end()
    return [
        parse_xref_line(match.group())
        for match in XREF_LINE_PATTERN.finditer(raw)
        if match.start() >= start
    ]