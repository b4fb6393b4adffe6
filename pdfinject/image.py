"""Image XObjects, soft masks and image holders for embedding pictures in a PDF."""

from __future__ import annotations

import base64
import binascii
import io
from dataclasses import dataclass, field
from hashlib import md5
from os import PathLike
from pathlib import Path
from typing import BinaryIO

from PIL import Image, UnidentifiedImageError

from .imageinfo import ImageInfo, build_image_properties, image_rect_to_size, parse_image
from .protection import Protection, rc4


@dataclass
class Rect:
    """A width and a height in PDF points."""

    w: float = 0.0
    h: float = 0.0


@dataclass(frozen=True)
class ImageHolder:
    """Raw image bytes together with an identifier used for caching."""

    id: str
    data: bytes


def image_holder_from_bytes(data: bytes) -> ImageHolder:
    """Hold ``data`` under the hex MD5 digest of its content."""
    data = bytes(data)
    return ImageHolder(md5(data).hexdigest(), data)


def image_holder_from_path(path: str | PathLike[str]) -> ImageHolder:
    """Hold the content of the file at ``path`` under the path itself."""
    return ImageHolder(str(path), Path(path).read_bytes())


def _stream_object(head: bytes, data: bytes, obj_id: int, protection: Protection | None) -> bytes:
    parts = [head, f"/Length {len(data)}\n>>\n".encode("latin-1"), b"stream\n"]
    if protection is not None:
        parts.append(rc4(protection.object_key(obj_id), data))
        parts.append(b"\n")
    else:
        parts.append(data)
    parts.append(b"\nendstream\n")
    return b"".join(parts)


@dataclass
class SMask:
    """The soft mask (alpha channel) object of an image."""

    info: ImageInfo = field(default_factory=ImageInfo)
    data: bytes = b""
    protection: Protection | None = None
    buffer: bytes = b""

    def build(self, obj_id: int) -> bytes:
        """Render the mask as the body of object ``obj_id`` and return it."""
        self.buffer = _stream_object(
            build_image_properties(self.info), self.data, obj_id, self.protection
        )
        return self.buffer


@dataclass
class ImageObject:
    """An image XObject built from JPEG or PNG bytes."""

    raw: bytes = b""
    info: ImageInfo = field(default_factory=ImageInfo)
    protection: Protection | None = None
    buffer: bytes = b""

    def set_image(self, data: bytes | BinaryIO) -> None:
        """Take the image bytes, or read them from a binary stream."""
        if isinstance(data, (bytes, bytearray, memoryview)):
            self.raw = bytes(data)
        else:
            self.raw = data.read()

    def parse(self) -> None:
        """Read the image's format, size and colour data."""
        self.info = parse_image(self.raw)

    def build(self, obj_id: int) -> bytes:
        """Render the image as the body of object ``obj_id`` and return it."""
        self.buffer = _stream_object(
            build_image_properties(self.info), self.info.data, obj_id, self.protection
        )
        return self.buffer

    def create_smask(self) -> SMask | None:
        """Return the soft mask of the image, or None when it has no alpha."""
        if not self.info.has_smask:
            return None
        width = self.info.width
        mask_info = ImageInfo(
            width=width,
            height=self.info.height,
            colspace="DeviceGray",
            bits_per_component="8",
            filter=self.info.filter,
            decode_parms=f"/Predictor 15 /Colors 1 /BitsPerComponent 8 /Columns {width}",
        )
        return SMask(info=mask_info, data=self.info.smask, protection=self.protection)

    def rect(self) -> Rect:
        """Return the default size of the image in PDF points."""
        try:
            with Image.open(io.BytesIO(self.raw)) as img:
                width, height = img.size
        except (UnidentifiedImageError, OSError, SyntaxError) as exc:
            raise ValueError(f"cannot read image: {exc}") from exc
        w, h = image_rect_to_size(width, height)
        return Rect(w, h)

    def set_smask_obj_id(self, obj_id: int) -> None:
        """Point the image's ``/SMask`` at object ``obj_id``."""
        self.info.smask_obj_id = obj_id


def image_from_bytes(data: bytes) -> tuple[ImageObject, SMask | None]:
    """Parse image bytes into an image object and its soft mask, if any."""
    image = ImageObject()
    image.set_image(data)
    image.parse()
    return image, image.create_smask()


def image_from_base64(text: str | bytes) -> tuple[ImageObject, SMask | None]:
    """Parse a base64-encoded image into an image object and its soft mask, if any."""
    try:
        data = base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError(f"invalid base64 image: {exc}") from exc
    return image_from_bytes(data)