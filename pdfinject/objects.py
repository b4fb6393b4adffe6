"""Indirect objects as they appear between ``N 0 obj`` and ``endobj``."""

from __future__ import annotations

import re
from dataclasses import dataclass

from .properties import Properties, read_properties
from .protection import Protection, rc4
from .xref import END_OBJ_PATTERN, START_OBJ_PATTERN, PdfFormatError

_STREAM = b"stream"
_ENDSTREAM = b"endstream"
_INTEGER = re.compile(r"[+-]?[0-9]+")


def object_id_from_header(line: str | bytes) -> int:
    """Return the object id from an ``N G obj`` header line."""
    if isinstance(line, (bytes, bytearray)):
        line = bytes(line).decode("latin-1")
    tokens = line.split()
    if len(tokens) < 3:
        raise PdfFormatError("bad start obj")
    if not _INTEGER.fullmatch(tokens[0]):
        raise PdfFormatError(f"invalid object id: {tokens[0]!r}")
    return int(tokens[0])


@dataclass
class PdfObject:
    """The id and raw body bytes of one indirect object."""

    obj_id: int = 0
    data: bytes = b""

    def read_properties(self) -> Properties:
        """Parse the top-level dictionary of this object."""
        return read_properties(self.data)

    def set_properties(self, props: Properties) -> None:
        """Replace the body with a dictionary built from ``props``."""
        body = "".join(f"/{prop.key} {prop.raw}" for prop in props)
        self.data = f"<<\n{body}>>\n".encode("latin-1")

    def encrypt(self, protection: Protection) -> None:
        """Encrypt the stream of this object in place, if it has one."""
        start = self.data.find(_STREAM)
        if start == -1:
            return
        end = self.data.rfind(_ENDSTREAM)
        body_start = start + len(_STREAM)
        if end < body_start:
            raise PdfFormatError("endstream not found")
        head = self.data[:start]
        body = self.data[body_start:end].strip(b"\r\n")
        encrypted = rc4(protection.object_key(self.obj_id), body)
        self.data = head + _STREAM + b"\n" + encrypted + b"\n" + _ENDSTREAM


def parse_object(raw: bytes, offset: int) -> PdfObject:
    """Parse the indirect object that starts at byte ``offset`` of ``raw``."""
    end = END_OBJ_PATTERN.search(raw, offset)
    if end is None:
        raise PdfFormatError("bad endobj")
    segment = raw[offset:end.start()]
    header = START_OBJ_PATTERN.search(segment)
    if header is None:
        raise PdfFormatError("bad start obj")
    obj_id = object_id_from_header(header.group())
    return PdfObject(obj_id, bytes(segment[header.end():]))