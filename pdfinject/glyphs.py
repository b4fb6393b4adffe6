"""Character-to-glyph maps and the ToUnicode CMap built from them."""

from __future__ import annotations

from .protection import Protection, rc4

_CMAP_PREFIX = (
    "/CIDInit /ProcSet findresource begin\n"
    "12 dict begin\n"
    "begincmap\n"
    "/CIDSystemInfo << /Registry (Adobe)/Ordering (UCS)/Supplement 0>> def\n"
    "/CMapName /Adobe-Identity-UCS def /CMapType 2 def\n"
)
_CMAP_SUFFIX = "endcmap CMapName currentdict /CMap defineresource pop end end"


class GlyphMap:
    """Characters mapped to glyph indexes, kept in insertion order."""

    def __init__(self) -> None:
        self._positions: dict[str, int] = {}
        self._keys: list[str] = []
        self._values: list[int] = []

    def set(self, char: str, glyph: int) -> None:
        """Record ``glyph`` for ``char``; a later entry for the same char wins."""
        self._positions[char] = len(self._keys)
        self._keys.append(char)
        self._values.append(glyph)

    def __contains__(self, char: object) -> bool:
        return char in self._positions

    def __len__(self) -> int:
        return len(self._keys)

    def index(self, char: str) -> int:
        """Return the position of the entry for ``char``; raise KeyError if absent."""
        try:
            return self._positions[char]
        except KeyError:
            raise KeyError(char) from None

    def get(self, char: str) -> int | None:
        """Return the glyph index of ``char``, or None if it has none."""
        position = self._positions.get(char)
        return None if position is None else self._values[position]

    def keys(self) -> list[str]:
        return list(self._keys)

    def values(self) -> list[int]:
        return list(self._values)


def build_to_unicode_cmap(
    glyph_map: GlyphMap, obj_id: int, protection: Protection | None = None
) -> bytes:
    """Return a ToUnicode CMap stream object mapping glyph indexes back to characters."""
    pairs: list[tuple[int, str]] = []
    low, high = 65536, -1
    for char in glyph_map.keys():
        index = glyph_map.get(char)
        low = min(low, index)
        high = max(high, index)
        pairs.append((index, char))

    first_char: dict[int, str] = {}
    for index, char in pairs:
        first_char.setdefault(index, char)

    lines = [
        _CMAP_PREFIX,
        "1 begincodespacerange\n",
        f"<{low:04X}><{high:04X}>\n",
        "endcodespacerange\n",
        f"{len(pairs)} beginbfrange\n",
    ]
    for index, _ in pairs:
        lines.append(f"<{index:04X}><{index:04X}><{ord(first_char[index]):04X}>\n")
    lines.append("endbfrange\n")
    lines.append(_CMAP_SUFFIX)
    lines.append("\n")
    body = "".join(lines).encode("latin-1")

    if protection is not None:
        payload = rc4(protection.object_key(obj_id), body)
    else:
        payload = body
    return (
        f"<<\n/Length {len(body)}\n>>\nstream\n".encode("latin-1")
        + payload
        + b"endstream\n"
    )