"""Opening an existing PDF, rearranging its pages and writing it back out."""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace
from os import PathLike
from pathlib import Path
from typing import BinaryIO

from .document import PdfDocument
from .objects import PdfObject
from .parser import parse_pdf
from .xref import PdfFormatError

PDF_HEADER = b"%PDF-1.7\n\n"


class FontStyle(enum.IntFlag):
    """Font style bits."""

    REGULAR = 0
    ITALIC = 1
    BOLD = 2
    UNDERLINE = 4


def convert_style(style: str) -> FontStyle:
    """Turn a style string such as ``"BI"`` or ``"u"`` into style bits."""
    style = style.upper()
    result = FontStyle.REGULAR
    if "B" in style:
        result |= FontStyle.BOLD
    if "I" in style:
        result |= FontStyle.ITALIC
    if "U" in style:
        result |= FontStyle.UNDERLINE
    return result


@dataclass(frozen=True)
class _XrefRow:
    offset: int
    generation: str
    flag: str


class PdfEditor:
    """Edits the page list of an existing PDF and serialises the result."""

    def __init__(self) -> None:
        self._doc: PdfDocument | None = None

    @property
    def document(self) -> PdfDocument:
        """The opened document."""
        if self._doc is None:
            raise RuntimeError("no PDF has been opened")
        return self._doc

    def open(self, path: str | PathLike[str]) -> None:
        """Open the PDF file at ``path``."""
        self._doc = parse_pdf(Path(path).read_bytes())

    def open_from(self, stream: BinaryIO | bytes) -> None:
        """Open a PDF from a binary stream or from bytes."""
        self._doc = parse_pdf(stream)

    def _check_page(self, page_ids: list[int], target_page: int, action: str) -> None:
        if target_page < 1 or target_page > len(page_ids):
            raise IndexError(f"No desired page to {action}: {target_page}")

    def duplicate_page_after(self, target_page: int, position: int) -> None:
        """Copy page ``target_page`` (1-based) and insert the copy after index ``position``.

        ``position`` is a 0-based page index; negative values count from the end.
        """
        doc = self.document
        page_ids = doc.page_ids()
        self._check_page(page_ids, target_page, "copy")

        original = doc.get(page_ids[target_page - 1])
        if original is None:
            raise PdfFormatError(f"page object {page_ids[target_page - 1]} not found")
        page = replace(original)
        props = page.read_properties()
        contents = props.get("Contents")
        if contents is None:
            raise PdfFormatError("No Contents property in this object")
        content_id, _ = contents.as_reference()
        content = doc.get(content_id)
        if content is None:
            raise PdfFormatError(f"content object {content_id} not found")
        new_content_id = doc.put_new(content)
        contents.set_reference(new_content_id, 0)
        page.set_properties(props)
        page_id = doc.put_new(page)

        if position < 0:
            position += len(page_ids)
        if not 0 <= position < len(page_ids):
            raise IndexError(f"position out of range: {position}")
        page_ids.insert(position + 1, page_id)
        self._set_pages(page_ids)

    def remove_page(self, target_page: int) -> None:
        """Remove page ``target_page`` (1-based) from the page list."""
        page_ids = self.document.page_ids()
        self._check_page(page_ids, target_page, "remove")
        del page_ids[target_page - 1]
        self._set_pages(page_ids)

    def _set_pages(self, page_ids: list[int]) -> None:
        pages = self.document.pages_obj
        if pages is None:
            raise PdfFormatError("/Pages object not found")
        props = pages.read_properties()
        count = props.get("Count")
        kids = props.get("Kids")
        if count is None or kids is None:
            raise PdfFormatError("/Pages object lacks /Count or /Kids")
        count.raw = str(len(page_ids))
        kids.set_reference_array(page_ids)
        pages.set_properties(props)

    def page_count(self) -> int:
        """Return the number of pages, or 0 when the page tree cannot be read."""
        try:
            return len(self.document.page_ids())
        except PdfFormatError:
            return 0

    def save(self, path: str | PathLike[str]) -> None:
        """Write the document to the file at ``path``."""
        Path(path).write_bytes(self.to_bytes())

    def save_to(self, stream: BinaryIO) -> None:
        """Write the document to a binary stream."""
        stream.write(self.to_bytes())

    def to_bytes(self) -> bytes:
        """Serialise the document as a complete PDF file."""
        doc = self.document
        out = bytearray(PDF_HEADER)
        offsets: dict[int, int] = {}
        for obj in doc.objects:
            offsets[obj.obj_id] = len(out)
            out += f"\n{obj.obj_id} 0 obj\n".encode("latin-1")
            out += obj.data.strip()
            out += b"\nendobj\n"
        self._write_xref(out, offsets, doc.max_id(), doc.root_id)
        return bytes(out)

    @staticmethod
    def _write_xref(out: bytearray, offsets: dict[int, int], size: int, root_id: int) -> None:
        xref_offset = len(out)
        rows = [_XrefRow(0, "65535", "f")]
        last_free = 0
        for obj_id in range(1, size + 1):
            if obj_id in offsets:
                rows.append(_XrefRow(offsets[obj_id], "00000", "n"))
            else:
                rows.append(_XrefRow(0, "65535", "f"))
                index = len(rows) - 1
                rows[last_free] = replace(rows[last_free], offset=index)
                last_free = index

        parts = ["\nxref\n", f"0 {size + 1}\r\n"]
        parts.extend(f"{row.offset:010d} {row.generation} {row.flag} \n" for row in rows)
        parts.append("trailer\n<<\n")
        parts.append(f"/Size {size + 1}\n")
        parts.append(f"/Root {root_id} 0 R\n")
        parts.append(">>\n")
        parts.append("startxref\n")
        parts.append(str(xref_offset))
        parts.append("\n%%EOF\n")
        out += "".join(parts).encode("latin-1")


__all__ = ["FontStyle", "PdfEditor", "PdfObject", "convert_style"]