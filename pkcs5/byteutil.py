"""
byteutil.py — small, stateless byte helpers used by the PBKDF2 engine.

The engine itself only needs store_int32_be() (block counter) and the
wipe()/wiped() pair (zeroing transient secrets). The remaining helpers
(hex, fixed-width loads/stores, size formatting) are general utilities
kept for callers and for the CLI.

Integer loads follow two's-complement semantics: load_int32_be(b"\\xff"*4)
is -1, not 4294967295.

Copyright:
  (c) 2025 Robert Dowell. Educational use encouraged.
"""

from __future__ import annotations
import contextlib
import string
import struct
from typing import Iterator, Optional

_UNITS = "KMGTPE"
_HEX_DIGITS = frozenset(string.hexdigits)

# =========================
# Hex / comparison / formatting
# =========================

def bytes_to_hex(data: Optional[bytes]) -> Optional[str]:
    """Lowercase hex string, or None for None."""
    if data is None:
        return None
    return bytes(data).hex()

def hex_to_bytes(text: Optional[str]) -> Optional[bytes]:
    """
    Decode pairs of hex digits. Returns None for None or for strings shorter
    than two characters; a trailing odd digit is ignored. Anything that is
    not a hex digit (whitespace included) raises ValueError.
    """
    if text is None or len(text) < 2:
        return None
    pairs = text[: len(text) // 2 * 2]
    bad = [c for c in pairs if c not in _HEX_DIGITS]
    if bad:
        raise ValueError(f"not a hex string: {text!r} (bad character {bad[0]!r})")
    return bytes.fromhex(pairs)

def human_readable_byte_count(count: int) -> str:
    """1023 -> '1023 B', 1024 -> '1.0 KB', 1536 -> '1.5 KB' (base 1024)."""
    unit = 1024
    if count < unit:
        return f"{count} B"
    exp = 1
    while exp < len(_UNITS) and count >= unit ** (exp + 1):
        exp += 1
    return "%.1f %sB" % (count / unit ** exp, _UNITS[exp - 1])

def arrays_are_equal(a: bytes, b: bytes) -> bool:
    """Plain length-then-content comparison (not constant time)."""
    if len(a) != len(b):
        return False
    for x, y in zip(a, b):
        if x != y:
            return False
    return True

# =========================
# Fixed-width integer packing
# =========================

def store_int32_be(value: int, buf: bytearray, offset: int) -> None:
    """Write the low 32 bits of value big-endian at buf[offset:offset+4]."""
    struct.pack_into(">I", buf, offset, value & 0xFFFFFFFF)

def store_int32_le(value: int, buf: bytearray, offset: int) -> None:
    struct.pack_into("<I", buf, offset, value & 0xFFFFFFFF)

def store_int64_le(value: int, buf: bytearray, offset: int) -> None:
    struct.pack_into("<Q", buf, offset, value & 0xFFFFFFFFFFFFFFFF)

def load_int16_be(buf: bytes, offset: int) -> int:
    return struct.unpack_from(">h", buf, offset)[0]

def load_int32_be(buf: bytes, offset: int) -> int:
    return struct.unpack_from(">i", buf, offset)[0]

def load_int32_le(buf: bytes, offset: int) -> int:
    return struct.unpack_from("<i", buf, offset)[0]

def load_int64_be(buf: bytes, offset: int) -> int:
    return struct.unpack_from(">q", buf, offset)[0]

def load_int64_le(buf: bytes, offset: int) -> int:
    return struct.unpack_from("<q", buf, offset)[0]

# =========================
# Secret wiping
# =========================

def wipe(buf: bytearray) -> None:
    """Overwrite a mutable buffer with zeros, in place."""
    buf[:] = bytes(len(buf))

@contextlib.contextmanager
def wiped(*buffers: bytearray) -> Iterator[None]:
    """
    Zero every buffer when the block exits, whether it returns or raises.

        work = bytearray(64)
        with wiped(work):
            ...
    """
    try:
        yield
    finally:
        for buf in buffers:
            wipe(buf)
