"""Small helpers for embedding TrueType subsets and drawing styles."""

from __future__ import annotations

ENTRY_SELECTORS = (
    0, 0, 1, 1, 2, 2,
    2, 2, 3, 3, 3, 3,
    3, 3, 3, 3, 4, 4,
    4, 4, 4, 4, 4, 4,
    4, 4, 4, 4, 4, 4, 4,
)

ARG_1_AND_2_ARE_WORDS = 1
WE_HAVE_A_SCALE = 8
MORE_COMPONENTS = 32
WE_HAVE_AN_X_AND_Y_SCALE = 64
WE_HAVE_A_TWO_BY_TWO = 128


def embedded_font_subset_name(name: str) -> str:
    """Return a font name usable as a PDF ``/BaseFont`` or ``/FontName``."""
    return name.replace(" ", "+").replace("/", "+")


def _two_bytes(data: bytes, offset: int) -> bytes:
    if offset < 0 or offset + 2 > len(data):
        raise IndexError(f"cannot read 2 bytes at offset {offset}")
    return bytes(data[offset:offset + 2])


def read_short(data: bytes, offset: int) -> int:
    """Read a big-endian signed 16-bit integer at ``offset``."""
    return int.from_bytes(_two_bytes(data, offset), "big", signed=True)


def read_ushort(data: bytes, offset: int) -> int:
    """Read a big-endian unsigned 16-bit integer at ``offset``."""
    return int.from_bytes(_two_bytes(data, offset), "big")


def parse_style(style: str) -> str:
    """Map a draw/fill style (``D``, ``F``, ``DF``, ``FD``) to a path operator."""
    if style == "F":
        return "f"
    if style in ("FD", "DF"):
        return "B"
    return "S"


def check_sum(data: bytes) -> int:
    """Return the TrueType table checksum of ``data``, whose length is a multiple of 4."""
    if len(data) % 4:
        raise ValueError("checksum data length must be a multiple of 4")
    lanes = [sum(data[lane::4]) for lane in range(4)]
    total = (lanes[0] << 24) + (lanes[1] << 16) + (lanes[2] << 8) + lanes[3]
    return total & 0xFFFFFFFF