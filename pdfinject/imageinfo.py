"""Reading JPEG and PNG images into the pieces a PDF image XObject needs."""

from __future__ import annotations

import io
import zlib
from dataclasses import dataclass

from PIL import Image, UnidentifiedImageError

PNG_MAGIC = b"\x89PNG\r\n\x1a\n"
PNG_IHDR = b"IHDR"

_JPEG_COLOR_SPACES = {
    "RGB": "DeviceRGB",
    "YCbCr": "DeviceRGB",
    "L": "DeviceGray",
    "CMYK": "DeviceCMYK",
}
_WHITESPACE = b" \t\n\r\v\f"


@dataclass
class ImageInfo:
    """Dimensions, colour data and stream bytes of a parsed image."""

    width: int = 0
    height: int = 0
    format_name: str = ""
    colspace: str = ""
    bits_per_component: str = ""
    filter: str = ""
    decode_parms: str = ""
    trns: bytes = b""
    smask: bytes = b""
    smask_obj_id: int = 0
    pal: bytes = b""
    device_rgb_obj_id: int = 0
    data: bytes = b""

    @property
    def is_indexed(self) -> bool:
        return self.colspace == "Indexed"

    @property
    def has_smask(self) -> bool:
        return bool(self.smask)


def compress(data: bytes) -> bytes:
    """Deflate ``data`` with zlib at the fastest level."""
    return zlib.compress(bytes(data), 1)


def build_image_properties(info: ImageInfo) -> bytes:
    """Return the opening of an image XObject dictionary, without ``/Length``."""
    lines = [
        "<</Type /XObject\n",
        "/Subtype /Image\n",
        f"/Width {info.width}\n",
        f"/Height {info.height}\n",
    ]
    if info.is_indexed:
        size = len(info.pal) // 3 - 1
        lines.append(
            f"/ColorSpace [/Indexed /DeviceRGB {size} {info.device_rgb_obj_id + 1} 0 R]\n"
        )
    else:
        lines.append(f"/ColorSpace /{info.colspace}\n")
        if info.colspace == "DeviceCMYK":
            lines.append("/Decode [1 0 1 0 1 0 1 0]\n")
    lines.append(f"/BitsPerComponent {info.bits_per_component}\n")
    if info.filter.strip():
        lines.append(f"/Filter /{info.filter}\n")
    if info.decode_parms.strip():
        lines.append(f"/DecodeParms <<{info.decode_parms}>>\n")
    if info.trns:
        masks = "".join(f"{value} {value} " for value in info.trns)
        lines.append(f"/Mask [{masks}]\n")
    if info.has_smask:
        lines.append(f"/SMask {info.smask_obj_id} 0 R\n")
    return "".join(lines).encode("latin-1")


def image_rect_to_size(width: int, height: int) -> tuple[float, float]:
    """Convert pixel dimensions to a default size in PDF points."""
    w = width * 72 // 128
    h = height * 72 // 128
    if w == 0:
        w = h * width // height
    if h == 0:
        h = w * height // width
    return float(w), float(h)


def parse_image(data: bytes) -> ImageInfo:
    """Parse JPEG or PNG bytes; raise ValueError for anything else."""
    data = bytes(data)
    try:
        with Image.open(io.BytesIO(data)) as img:
            format_name = (img.format or "").lower()
            mode = img.mode
            width, height = img.size
    except (UnidentifiedImageError, OSError, SyntaxError) as exc:
        raise ValueError(f"cannot read image: {exc}") from exc

    info = ImageInfo(format_name=format_name)
    if format_name == "jpeg":
        colspace = _JPEG_COLOR_SPACES.get(mode)
        if colspace is None:
            raise ValueError("color model not support")
        info.colspace = colspace
        info.bits_per_component = "8"
        info.filter = "DCTDecode"
        info.width = width
        info.height = height
        info.data = data
    elif format_name == "png":
        _parse_png(data, info)
    else:
        raise ValueError(f"unsupported image format: {format_name or 'unknown'}")
    return info


class _Reader:
    def __init__(self, data: bytes) -> None:
        self._data = data
        self._pos = 0

    def read(self, size: int) -> bytes:
        if size < 0 or self._pos + size > len(self._data):
            raise ValueError("unexpected end of PNG data")
        chunk = self._data[self._pos:self._pos + size]
        self._pos += size
        return chunk

    def read_uint(self) -> int:
        return int.from_bytes(self.read(4), "big")

    def read_byte(self) -> int:
        return self.read(1)[0]

    def skip(self, size: int) -> None:
        self._pos += size


def _parse_png(raw: bytes, info: ImageInfo) -> None:
    reader = _Reader(raw)
    if reader.read(8) != PNG_MAGIC:
        raise ValueError("Not a PNG file")
    reader.skip(4)
    if reader.read(4) != PNG_IHDR:
        raise ValueError("Incorrect PNG file")

    width = reader.read_uint()
    height = reader.read_uint()
    bpc = reader.read_byte()
    if bpc > 8:
        raise ValueError("16-bit depth not supported")
    color_type = reader.read_byte()
    if color_type in (0, 4):
        colspace = "DeviceGray"
    elif color_type in (2, 6):
        colspace = "DeviceRGB"
    elif color_type == 3:
        colspace = "Indexed"
    else:
        raise ValueError("Unknown color type")
    if reader.read_byte() != 0:
        raise ValueError("Unknown compression method")
    if reader.read_byte() != 0:
        raise ValueError("Unknown filter method")
    if reader.read_byte() != 0:
        raise ValueError("Interlacing not supported")
    reader.skip(4)

    pal = b""
    trns = b""
    idat = bytearray()
    while True:
        length = reader.read_uint()
        chunk_type = reader.read(4)
        if chunk_type == b"PLTE":
            pal = reader.read(length)
            reader.skip(4)
        elif chunk_type == b"tRNS":
            t = reader.read(length)
            if color_type == 0:
                trns = t[1:2]
            elif color_type == 2:
                trns = bytes(t[1:6:2])
            else:
                pos = t.find(b"\x00")
                if pos >= 0:
                    trns = bytes([pos])
            reader.skip(4)
        elif chunk_type == b"IDAT":
            idat += reader.read(length)
            reader.skip(4)
        elif chunk_type == b"IEND":
            break
        else:
            reader.skip(length + 4)
        if length <= 0:
            break

    info.trns = trns
    info.pal = pal
    if colspace == "Indexed" and not pal.strip(_WHITESPACE):
        raise ValueError("Missing palette")

    info.width = width
    info.height = height
    info.colspace = colspace
    info.bits_per_component = str(bpc)
    info.filter = "FlateDecode"
    colors = 3 if colspace == "DeviceRGB" else 1
    info.decode_parms = (
        f"/Predictor 15 /Colors  {colors} /BitsPerComponent "
        f"{info.bits_per_component} /Columns {width}"
    )

    if color_type >= 4:
        color, alpha = _split_alpha(bytes(idat), width, height, color_type)
        info.smask = compress(alpha)
        info.data = compress(color)
    else:
        info.data = bytes(idat)


def _split_alpha(
    compressed: bytes, width: int, height: int, color_type: int
) -> tuple[bytes, bytes]:
    try:
        pixels = zlib.decompress(compressed)
    except zlib.error as exc:
        raise ValueError(f"bad PNG image data: {exc}") from exc
    step = 2 if color_type == 4 else 4
    row_length = step * width
    if len(pixels) < (1 + row_length) * height:
        raise ValueError("PNG image data too short")

    color = bytearray()
    alpha = bytearray()
    for row in range(height):
        pos = (1 + row_length) * row
        color.append(pixels[pos])
        alpha.append(pixels[pos])
        line = pixels[pos + 1:pos + 1 + row_length]
        if color_type == 4:
            color += line[0::2]
            alpha += line[1::2]
        else:
            for j in range(0, len(line), 4):
                color += line[j:j + 3]
            alpha += line[3::4]
    return bytes(color), bytes(alpha)