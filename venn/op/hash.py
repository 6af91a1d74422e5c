# venn/op/hash.py
# BLAKE3 hashing helpers (BLAKE3 only, hex digests)

from __future__ import annotations
from typing import Iterable
from blake3 import blake3
from .bytes import encode_region


def hash_bytes(b: bytes) -> str:
    """
    Hash bytes with BLAKE3, return hex digest.

    Args:
        b: bytes to hash

    Returns:
        str: hex digest (64 hex chars = 256 bits)
    """
    return blake3(b).hexdigest()


def hash_regions(regions: Iterable[tuple[int, Iterable[str]]]) -> str:
    """
    Hash a sequence of (mask, values) regions.

    The caller supplies regions in canonical order; the digest is taken
    incrementally so large partitions are never concatenated in memory.
    """
    h = blake3()
    count = 0
    for mask, values in regions:
        h.update(encode_region(mask, values))
        count += 1
    h.update(count.to_bytes(8, "little"))
    return h.hexdigest()
