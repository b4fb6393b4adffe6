"""Reading and writing the key/value properties of PDF dictionaries."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import Iterable

from .xref import PdfFormatError

_INTEGER = re.compile(r"[+-]?[0-9]+")
_WHITESPACE = " \t\n\r\v\f"

_LINE = re.compile(r"[\r\n\t ]+")
_BEFORE_SLASH = re.compile(r"[\r\n\t ]+/")
_BEFORE_OPEN_BRACKET = re.compile(r"[\r\n\t ]+\[")
_BEFORE_CLOSE_BRACKET = re.compile(r"[\r\n\t ]+\]")
_BEFORE_OPEN_DICT = re.compile(r"[\r\n\t ]+<<")
_BEFORE_CLOSE_DICT = re.compile(r"[\r\n\t ]+>>")


class ObjectIDNotFound(PdfFormatError):
    """Raised when a value does not hold an ``id gen R`` reference."""


def _parse_int(text: str) -> int:
    text = text.strip(_WHITESPACE)
    if not _INTEGER.fullmatch(text):
        raise PdfFormatError(f"invalid integer: {text!r}")
    return int(text)


def _is_int(text: str) -> bool:
    return bool(_INTEGER.fullmatch(text.strip(_WHITESPACE)))


class PropertyKind(enum.Enum):
    """What a raw property value looks like."""

    DICTIONARY = "dictionary"  # an indirect reference such as ``5 0 R``
    OBJECT = "object"
    ARRAY = "array"
    NUMBER = "number"


def property_kind(raw: str) -> PropertyKind:
    """Classify a raw property value."""
    raw = raw.strip(_WHITESPACE)
    if len(raw) > 2 and raw.startswith("<<"):
        return PropertyKind.OBJECT
    if len(raw) > 1 and raw.startswith("["):
        return PropertyKind.ARRAY
    if _is_int(raw):
        return PropertyKind.NUMBER
    return PropertyKind.DICTIONARY


def read_reference(text: str) -> tuple[int, int]:
    """Read the object id from an ``id gen R`` reference; the revision is reported as 0."""
    text = text.strip(_WHITESPACE)
    if not text:
        raise ObjectIDNotFound("Object ID not found")
    tokens = text.split(" ")
    if len(tokens) != 3:
        raise ObjectIDNotFound("Object ID not found")
    return _parse_int(tokens[0]), 0


def read_reference_array(text: str) -> tuple[list[int], list[int]]:
    """Read object ids and revisions from a ``[id gen R id gen R ...]`` array."""
    text = text.replace("[", "").replace("]", "").strip(_WHITESPACE)
    tokens = text.split(" ")
    obj_ids: list[int] = []
    revisions: list[int] = []
    for start in range(0, len(tokens), 3):
        group = tokens[start:start + 2]
        obj_ids.append(_parse_int(group[0]))
        if len(group) < 2:
            raise PdfFormatError(f"incomplete reference in array: {text!r}")
        revisions.append(_parse_int(group[1]))
    return obj_ids, revisions


@dataclass
class Property:
    """A single ``/Key value`` entry with its value kept as raw text."""

    key: str = ""
    raw: str = ""

    def set_reference(self, obj_id: int, revision: int) -> None:
        self.raw = f"{obj_id} {revision} R"

    def set_reference_array(
        self, obj_ids: Iterable[int], revisions: Iterable[int] | None = None
    ) -> None:
        obj_ids = list(obj_ids)
        revisions = [0] * len(obj_ids) if revisions is None else list(revisions)
        body = "".join(f"{obj_id} {rev} R " for obj_id, rev in zip(obj_ids, revisions))
        self.raw = f"[{body}]"

    def as_reference(self) -> tuple[int, int]:
        return read_reference(self.raw)

    def as_reference_array(self) -> tuple[list[int], list[int]]:
        return read_reference_array(self.raw)

    def kind(self) -> PropertyKind:
        return property_kind(self.raw)


class Properties(list):
    """An ordered list of properties that may repeat keys."""

    def get(self, key: str) -> Property | None:
        """Return the first property named ``key``, or None."""
        return next((prop for prop in self if prop.key == key), None)


def _normalise(body: str) -> str:
    body = body.strip(_WHITESPACE)
    body = _LINE.sub(" ", body)
    body = _BEFORE_SLASH.sub("/", body)
    body = _BEFORE_OPEN_BRACKET.sub("[", body)
    body = _BEFORE_CLOSE_BRACKET.sub("]", body)
    body = _BEFORE_OPEN_DICT.sub("<<", body)
    body = _BEFORE_CLOSE_DICT.sub(">>", body)
    return body


def _split_properties(text: str) -> Properties:
    props = Properties()
    current = Property()
    state = ""
    angle = square = 0
    i = 0
    while i < len(text):
        ch = text[i]
        if state == "":
            if ch == "/":
                current = Property()
                props.append(current)
                state = "key"
            i += 1
        elif state == "key":
            if ch == " ":
                state, angle, square = "val", 0, 0
                i += 1
            elif ch in "<[":
                state, angle, square = "val", 0, 0
            elif ch == "/":
                state = ""
            else:
                current.key += ch
                i += 1
        else:
            if ch == "<":
                angle += 1
            elif ch == "[":
                square += 1
            elif ch == ">":
                angle -= 1
            elif ch == "]":
                square -= 1
            balanced = angle == 0 and square == 0
            if ch in "]>" and balanced:
                current.raw += ch
                state = ""
                i += 1
            elif ch == "/" and balanced:
                state = ""
            else:
                current.raw += ch
                i += 1
    return props


def read_properties(raw: bytes | str) -> Properties:
    """Read the top-level properties of an object's ``<< ... >>`` dictionary."""
    data = raw.encode("latin-1") if isinstance(raw, str) else bytes(raw)
    head = data
    stream_at = data.find(b"stream")
    if stream_at != -1:
        head = data[:stream_at]
    start = head.find(b"<<")
    end = head.rfind(b">>")
    if start == -1 or end == -1 or start > end:
        raise PdfFormatError("bad obj properties")
    body = data[start + 2:end].decode("latin-1")
    return _split_properties(_normalise(body))


def read_property(raw: bytes | str, key: str) -> Property | None:
    """Return the property named ``key`` from an object's dictionary, or None."""
    return read_properties(raw).get(key)