"""An in-memory PDF: its objects, trailer root and page tree."""

from __future__ import annotations

import re
import zlib
from dataclasses import dataclass, field, replace

from .objects import PdfObject
from .properties import Properties, PropertyKind, read_property
from .xref import PdfFormatError, XrefEntry

_STREAM = b"stream"
_INTEGER = re.compile(r"[+-]?[0-9]+")


def _parse_int(text: str) -> int:
    text = text.strip()
    if not _INTEGER.fullmatch(text):
        raise PdfFormatError(f"invalid integer: {text!r}")
    return int(text)


def extract_stream(data: bytes, length: int, compressed: bool) -> bytes:
    """Return the ``length`` bytes of stream data in ``data``, inflated if ``compressed``."""
    index = data.find(_STREAM)
    if index == -1:
        raise PdfFormatError("stream not found")
    body = data[index + len(_STREAM):].strip()
    if length < 0 or length > len(body):
        raise PdfFormatError(f"stream length {length} out of range")
    body = body[:length]
    if not compressed:
        return body
    try:
        return zlib.decompress(body)
    except zlib.error as exc:
        raise PdfFormatError(f"bad compressed stream: {exc}") from exc


@dataclass
class PdfDocument:
    """The objects of a PDF file in file order; object ids may repeat."""

    root_id: int = 0
    xrefs: list[XrefEntry] = field(default_factory=list)
    objects: list[PdfObject] = field(default_factory=list)
    pages_obj: PdfObject | None = None

    def __len__(self) -> int:
        return len(self.objects)

    def put(self, obj: PdfObject) -> None:
        """Append an object as is."""
        self.objects.append(obj)

    def put_new(self, obj: PdfObject) -> int:
        """Store a copy of ``obj`` under a fresh id and return that id."""
        new_id = self.max_id() + 1
        self.put(replace(obj, obj_id=new_id))
        return new_id

    def remove(self, obj_id: int) -> None:
        """Remove the first object with ``obj_id``."""
        index = next(
            (i for i, obj in enumerate(self.objects) if obj.obj_id == obj_id), None
        )
        if index is None:
            raise KeyError(f"object {obj_id} not found")
        del self.objects[index]

    def get(self, obj_id: int) -> PdfObject | None:
        """Return the object with ``obj_id``.

        When several objects share the id, the last one that has ``/Annots``
        wins; otherwise the first one is returned.
        """
        matches = [obj for obj in self.objects if obj.obj_id == obj_id]
        if not matches:
            return None
        result = matches[0]
        if len(matches) > 1:
            for obj in matches:
                try:
                    props = obj.read_properties()
                except PdfFormatError:
                    continue
                if props.get("Annots") is not None:
                    result = obj
        return result

    def page_ids(self) -> list[int]:
        """Return the ids of all page objects in page-tree order."""
        root = self.get(self.root_id)
        if root is None:
            raise PdfFormatError("root object not found")
        pages = root.read_properties().get("Pages")
        if pages is None:
            raise PdfFormatError("/Pages not found")
        root_pages_id, _ = pages.as_reference()

        cache: dict[int, Properties | None] = {}

        def props_of(obj_id: int) -> Properties | None:
            if obj_id not in cache:
                obj = self.get(obj_id)
                try:
                    cache[obj_id] = obj.read_properties() if obj is not None else None
                except PdfFormatError:
                    cache[obj_id] = None
            return cache[obj_id]

        def kids_of(obj_id: int) -> list[int] | None:
            props = props_of(obj_id)
            if props is None or props.get("Pages") is None:
                return None
            kids = props.get("Kids")
            if kids is None:
                return None
            try:
                return kids.as_reference_array()[0]
            except PdfFormatError:
                return None

        def is_page(obj_id: int) -> bool:
            props = props_of(obj_id)
            return props is not None and props.get("Page") is not None

        results: list[int] = []

        def visit(obj_id: int) -> None:
            kids = kids_of(obj_id)
            if kids is not None:
                for kid in kids:
                    visit(kid)
            elif is_page(obj_id):
                results.append(obj_id)

        visit(root_pages_id)
        return results

    def max_id(self) -> int:
        """Return the largest object id, or 0 for an empty document."""
        return max([0, *(obj.obj_id for obj in self.objects)])

    def stream_length(self, data: bytes) -> int:
        """Return the stream length from ``/Length`` or ``/Length1`` of ``data``."""
        prop = read_property(data, "Length")
        if prop is None:
            prop = read_property(data, "Length1")
        if prop is None:
            raise PdfFormatError("/Length or /Length1 not found")
        kind = prop.kind()
        if kind is PropertyKind.NUMBER:
            return _parse_int(prop.raw)
        if kind is PropertyKind.DICTIONARY:
            obj_id, _ = prop.as_reference()
            obj = self.get(obj_id)
            if obj is None:
                raise PdfFormatError(f"length object {obj_id} not found")
            return _parse_int(obj.data.decode("latin-1"))
        raise PdfFormatError("/Length or /Length1 wrong type")