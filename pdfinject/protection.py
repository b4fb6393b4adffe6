"""Standard RC4 40-bit PDF password protection."""

from __future__ import annotations

import enum
import secrets
from hashlib import md5

PADDING = bytes(
    [
        0x28, 0xBF, 0x4E, 0x5E, 0x4E, 0x75, 0x8A, 0x41,
        0x64, 0x00, 0x4E, 0x56, 0xFF, 0xFA, 0x01, 0x08,
        0x2E, 0x2E, 0x00, 0xB6, 0xD0, 0x68, 0x3E, 0x80,
        0x2F, 0x0C, 0xA9, 0xFE, 0x64, 0x53, 0x69, 0x7A,
    ]
)

_RANDOM_CHARS = "abcdef0123456789"


class Permission(enum.IntFlag):
    """Permission bits granted to the user."""

    PRINT = 4
    MODIFY = 8
    COPY = 16
    ANNOT_FORMS = 32


def rc4(key: bytes, data: bytes) -> bytes:
    """Encrypt or decrypt ``data`` with the RC4 stream cipher."""
    if not 1 <= len(key) <= 256:
        raise ValueError(f"invalid RC4 key size {len(key)}")
    state = list(range(256))
    j = 0
    for i in range(256):
        j = (j + state[i] + key[i % len(key)]) & 0xFF
        state[i], state[j] = state[j], state[i]
    out = bytearray()
    i = j = 0
    for byte in data:
        i = (i + 1) & 0xFF
        j = (j + state[i]) & 0xFF
        state[i], state[j] = state[j], state[i]
        out.append(byte ^ state[(state[i] + state[j]) & 0xFF])
    return bytes(out)


def _as_bytes(value: bytes | str | None) -> bytes:
    if value is None:
        return b""
    if isinstance(value, str):
        return value.encode("latin-1")
    return bytes(value)


def _pad(value: bytes) -> bytes:
    return (value + PADDING)[:32]


class Protection:
    """Encryption values (O, U, P and the document key) for a protected PDF."""

    def __init__(
        self,
        permissions: int,
        user_pass: bytes | str | None = b"",
        owner_pass: bytes | str | None = None,
    ) -> None:
        protection = 192 | int(permissions)
        owner = _as_bytes(owner_pass)
        if not owner:
            owner = "".join(secrets.choice(_RANDOM_CHARS) for _ in range(24)).encode("ascii")
        user_padded = _pad(_as_bytes(user_pass))
        owner_padded = _pad(owner)

        self.o_value = rc4(md5(owner_padded).digest()[:5], user_padded)
        digest = md5(
            user_padded + self.o_value + bytes([protection & 0xFF, 0xFF, 0xFF, 0xFF])
        ).digest()
        self.encryption_key = digest[:5]
        self.u_value = rc4(self.encryption_key, PADDING)
        self.p_value = -((protection ^ 255) + 1)

    def object_key(self, obj_id: int) -> bytes:
        """Return the RC4 key used for the object with ``obj_id``."""
        low = (obj_id & 0xFFFFFFFF).to_bytes(4, "little")[:3]
        return md5(self.encryption_key + low + b"\x00\x00").digest()[:10]