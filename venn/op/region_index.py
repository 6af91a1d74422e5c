# venn/op/region_index.py
# Region index: exact-combination lookup by order-independent signature

from __future__ import annotations
from numbers import Integral
from typing import Dict, List, Tuple
from .mask import SignatureLike, full_mask, iter_masks, mask_indices, to_indices
from .partition import Partition, Region


def sets_equal(a: SignatureLike, b: SignatureLike) -> bool:
    """
    True iff a and b denote the same distinct indices.

    Order and repetition are irrelevant: [0, 1], (1, 0) and [1, 0, 1]
    all equal each other and the mask 0b11.

    Raises:
        InvalidInput: on a negative or non-integer index
    """
    return to_indices(a) == to_indices(b)


class RegionIndex:
    """
    Answers "which elements belong to exactly combination C?".

    Lookups are keyed by mask, so two signatures that are sets_equal
    always hit the same region. A combination with no realized region
    yields an empty list, never an error.
    """

    def __init__(self, partition: Partition):
        self.partition = partition
        self._by_mask: Dict[int, Region] = {r.mask: r for r in partition.regions}

    @property
    def n(self) -> int:
        return self.partition.n

    def region(self, signature: SignatureLike) -> Region | None:
        # Masks above 2^n − 1 name a set that does not exist
        if isinstance(signature, Integral) and not isinstance(signature, bool) and signature > full_mask(self.n):
            return None
        indices = to_indices(signature)
        if any(i >= self.n for i in indices):
            return None
        mask = 0
        for i in indices:
            mask |= 1 << i
        return self._by_mask.get(mask)

    def find(self, signature: SignatureLike) -> List[str]:
        """Elements of exactly this combination (fresh list, possibly empty)."""
        r = self.region(signature)
        return list(r.values) if r is not None else []

    def count(self, signature: SignatureLike) -> int:
        r = self.region(signature)
        return r.count if r is not None else 0

    def all_regions(self) -> List[Tuple[Tuple[int, ...], List[str]]]:
        """
        Every non-empty combination of the n sets with its values.

        Returns 2^n − 1 (indices, values) pairs in canonical order,
        including combinations whose region is empty.
        """
        return [(mask_indices(m), self.find(m)) for m in iter_masks(self.n)]
