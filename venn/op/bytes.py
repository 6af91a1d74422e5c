# venn/op/bytes.py
# Canonical encodings (LEB128 varints, length-framed UTF-8)
# Every hash in the engine is taken over these bytes, never over repr()/json

from __future__ import annotations
from typing import Iterable


def varu(n: int) -> bytes:
    """
    Encode unsigned integer as LEB128 varint.

    Signature masks are Python ints and can exceed 64 bits when N > 64,
    so no upper bound is enforced here.

    Args:
        n: unsigned integer (must be >= 0)

    Returns:
        bytes: LEB128 varint

    Raises:
        ValueError: if n < 0
    """
    if n < 0:
        raise ValueError("varu expects unsigned (n >= 0)")

    out = bytearray()
    while True:
        byte = n & 0x7F
        n >>= 7
        if n:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            break
    return bytes(out)


def unvaru(b: bytes) -> tuple[int, bytes]:
    """
    Decode LEB128 varint from bytes.

    Used only in tests; no stage decodes.

    Args:
        b: bytes starting with LEB128 varint

    Returns:
        (value, remaining_bytes): decoded value and unconsumed bytes
    """
    result = 0
    shift = 0
    i = 0

    while i < len(b):
        byte = b[i]
        i += 1
        result |= (byte & 0x7F) << shift
        if not (byte & 0x80):
            return result, b[i:]
        shift += 7

    raise ValueError("Incomplete LEB128 varint")


def encode_str(s: str) -> bytes:
    """Encode string as <len><utf-8 bytes>."""
    raw = s.encode("utf-8")
    return varu(len(raw)) + raw


def decode_str(b: bytes) -> tuple[str, bytes]:
    """Inverse of encode_str; returns (string, remaining_bytes). Used only in tests."""
    length, remaining = unvaru(b)
    if len(remaining) < length:
        raise ValueError(f"Truncated string: need {length} bytes, have {len(remaining)}")
    return remaining[:length].decode("utf-8"), remaining[length:]


def frame_strings(values: Iterable[str]) -> bytes:
    """
    Frame string list as <count><s1>...<sk>.

    Order is preserved; callers sort first when they need a canonical form.
    """
    values = list(values)
    out = bytearray()
    out += varu(len(values))
    for v in values:
        out += encode_str(v)
    return bytes(out)


def encode_region(mask: int, values: Iterable[str]) -> bytes:
    """
    Encode one region as <mask varint><framed values>.

    Args:
        mask: signature bitmask
        values: region elements in canonical order

    Returns:
        bytes: region encoding
    """
    return varu(mask) + frame_strings(values)
