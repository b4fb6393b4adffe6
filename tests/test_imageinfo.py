import io
import struct
import zlib

import pytest
from PIL import Image

from pdfinject.imageinfo import (
    ImageInfo,
    build_image_properties,
    compress,
    image_rect_to_size,
    parse_image,
)


def _encode(img, fmt="PNG", **kwargs):
    buf = io.BytesIO()
    img.save(buf, fmt, **kwargs)
    return buf.getvalue()


def _chunk(kind, body):
    return (
        struct.pack(">I", len(body))
        + kind
        + body
        + struct.pack(">I", zlib.crc32(kind + body) & 0xFFFFFFFF)
    )


def _raw_png(color_type, interlace=0, with_palette=False):
    header = struct.pack(">IIBBBBB", 1, 1, 8, color_type, 0, 0, interlace)
    parts = [b"\x89PNG\r\n\x1a\n", _chunk(b"IHDR", header)]
    if with_palette:
        parts.append(_chunk(b"PLTE", b"\x00\x00\x00"))
    parts.append(_chunk(b"IDAT", zlib.compress(b"\x00\x00")))
    parts.append(_chunk(b"IEND", b""))
    return b"".join(parts)


def test_png_rgb():
    info = parse_image(_encode(Image.new("RGB", (3, 2), (10, 20, 30))))
    assert info.format_name == "png"
    assert (info.width, info.height) == (3, 2)
    assert info.colspace == "DeviceRGB"
    assert info.bits_per_component == "8"
    assert info.filter == "FlateDecode"
    assert info.decode_parms.endswith("/Columns 3")
    assert "/Colors  3" in info.decode_parms
    assert len(zlib.decompress(info.data)) == 2 * (1 + 3 * 3)
    assert not info.has_smask


def test_png_rgba_splits_alpha():
    img = Image.new("RGBA", (4, 3), (1, 2, 3, 200))
    info = parse_image(_encode(img))
    color = zlib.decompress(info.data)
    alpha = zlib.decompress(info.smask)
    assert info.has_smask
    assert len(color) == 3 * (1 + 3 * 4)
    assert len(alpha) == 3 * (1 + 4)


def test_png_gray_alpha_splits_alpha():
    img = Image.new("LA", (5, 2), (7, 9))
    info = parse_image(_encode(img))
    assert info.colspace == "DeviceGray"
    assert len(zlib.decompress(info.data)) == 2 * (1 + 5)
    assert len(zlib.decompress(info.smask)) == 2 * (1 + 5)


def test_png_gray_with_transparency():
    info = parse_image(_encode(Image.new("L", (2, 2), 0), transparency=5))
    assert info.colspace == "DeviceGray"
    assert info.trns == bytes([5])


def test_png_rgb_with_transparency():
    info = parse_image(_encode(Image.new("RGB", (2, 2)), transparency=(1, 2, 3)))
    assert info.trns == bytes([1, 2, 3])


def test_png_palette():
    img = Image.new("P", (2, 2), 0)
    img.putpalette([255, 0, 0, 0, 255, 0])
    info = parse_image(_encode(img, transparency=1))
    assert info.is_indexed
    assert len(info.pal) % 3 == 0 and len(info.pal) >= 6
    assert info.trns == bytes([1])


def test_png_16_bit_rejected():
    data = _encode(Image.new("I;16", (2, 2)))
    with pytest.raises(ValueError, match="16-bit"):
        parse_image(data)


def test_png_interlaced_rejected():
    with pytest.raises(ValueError, match="Interlacing"):
        parse_image(_raw_png(0, interlace=1))


def test_png_missing_palette():
    with pytest.raises(ValueError, match="Missing palette"):
        parse_image(_raw_png(3))


def test_png_raw_palette_ok():
    info = parse_image(_raw_png(3, with_palette=True))
    assert info.pal == b"\x00\x00\x00"
    assert info.data == zlib.compress(b"\x00\x00")


@pytest.mark.parametrize(
    "mode, colspace",
    [("RGB", "DeviceRGB"), ("L", "DeviceGray"), ("CMYK", "DeviceCMYK")],
)
def test_jpeg(mode, colspace):
    data = _encode(Image.new(mode, (6, 4)), "JPEG")
    info = parse_image(data)
    assert info.format_name == "jpeg"
    assert info.colspace == colspace
    assert info.filter == "DCTDecode"
    assert info.bits_per_component == "8"
    assert (info.width, info.height) == (6, 4)
    assert info.data == data


def test_unsupported_format():
    with pytest.raises(ValueError):
        parse_image(_encode(Image.new("RGB", (2, 2)), "GIF"))


def test_garbage_rejected():
    with pytest.raises(ValueError):
        parse_image(b"not an image at all")


def test_compress_round_trip():
    payload = bytes(range(256)) * 4
    assert zlib.decompress(compress(payload)) == payload


def test_build_properties_cmyk():
    info = ImageInfo(width=2, height=3, colspace="DeviceCMYK",
                     bits_per_component="8", filter="DCTDecode")
    out = build_image_properties(info)
    assert out.startswith(b"<</Type /XObject\n/Subtype /Image\n/Width 2\n/Height 3\n")
    assert b"/ColorSpace /DeviceCMYK\n/Decode [1 0 1 0 1 0 1 0]\n" in out
    assert b"/Filter /DCTDecode\n" in out
    assert b"/DecodeParms" not in out
    assert b"/SMask" not in out


def test_build_properties_indexed_mask_smask():
    info = ImageInfo(width=1, height=1, colspace="Indexed", bits_per_component="8",
                     pal=b"\x00" * 6, device_rgb_obj_id=4, trns=bytes([5]),
                     smask=b"x", smask_obj_id=7, decode_parms="/Predictor 15")
    out = build_image_properties(info)
    assert b"/ColorSpace [/Indexed /DeviceRGB 1 5 0 R]\n" in out
    assert b"/Mask [5 5 ]\n" in out
    assert b"/SMask 7 0 R\n" in out
    assert b"/DecodeParms <</Predictor 15>>\n" in out


def test_image_rect_to_size():
    assert image_rect_to_size(128, 256) == (72.0, 144.0)


def test_image_rect_to_size_keeps_ratio():
    w, h = image_rect_to_size(640, 480)
    assert w * 480 == pytest.approx(h * 640, rel=0.01)