# venn/op/mask.py
# Finite index sets as bitmasks
# Bit i of a mask is set iff origin index i belongs to the signature

from __future__ import annotations
from numbers import Integral
from typing import FrozenSet, Iterable, Iterator, List, Tuple, Union
from .errors import InvalidInput

# A signature as callers write it: an int mask or any iterable of indices
SignatureLike = Union[int, Iterable[int]]


def _check_index(i) -> int:
    if isinstance(i, bool) or not isinstance(i, Integral):
        raise InvalidInput(f"signature index must be an integer, got {i!r}")
    i = int(i)
    if i < 0:
        raise InvalidInput(f"signature index must be >= 0, got {i}")
    return i


def to_indices(signature: SignatureLike) -> FrozenSet[int]:
    """
    Normalize a signature to its distinct indices without building a mask.

    Contract:
    - int → the set bits of the mask (must be >= 0)
    - iterable of integers → its distinct members; order and repetition are irrelevant
    - str/bytes, bool, and non-integer indices are rejected, never coerced

    Raises:
        InvalidInput: on a malformed signature or a negative index/mask
    """
    if isinstance(signature, bool) or isinstance(signature, (str, bytes)):
        raise InvalidInput(f"signature must be a mask or indices, got {signature!r}")
    if isinstance(signature, Integral):
        signature = int(signature)
        if signature < 0:
            raise InvalidInput(f"signature mask must be >= 0, got {signature}")
        return frozenset(mask_indices(signature))

    try:
        items = iter(signature)
    except TypeError:
        raise InvalidInput(f"signature must be a mask or indices, got {signature!r}") from None
    return frozenset(_check_index(i) for i in items)


def to_mask(signature: SignatureLike) -> int:
    """
    Normalize a signature to its bitmask.

    Callers holding untrusted indices bound them first (see
    RegionIndex.region); the mask has one bit per index value.

    Raises:
        InvalidInput: as to_indices
    """
    if isinstance(signature, Integral) and not isinstance(signature, bool):
        if signature < 0:
            raise InvalidInput(f"signature mask must be >= 0, got {signature}")
        return int(signature)
    mask = 0
    for i in to_indices(signature):
        mask |= 1 << i
    return mask


def mask_indices(mask: int) -> Tuple[int, ...]:
    """Ascending indices of the set bits in mask."""
    out = []
    i = 0
    while mask:
        if mask & 1:
            out.append(i)
        mask >>= 1
        i += 1
    return tuple(out)


def full_mask(n: int) -> int:
    """Mask with bits 0..n-1 set."""
    return (1 << n) - 1


def iter_masks(n: int) -> Iterator[int]:
    """
    Enumerate all non-empty signatures over n sets in canonical order.

    Canonical order is ascending mask value, so for n=3:
    {0}, {1}, {0,1}, {2}, {0,2}, {1,2}, {0,1,2}
    """
    return iter(range(1, full_mask(n) + 1))


def all_signatures(n: int) -> List[Tuple[int, ...]]:
    """All 2^n − 1 non-empty signatures as index tuples, canonical order."""
    return [mask_indices(m) for m in iter_masks(n)]
