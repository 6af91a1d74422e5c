# venn/op/partition.py
# Partition builder: group elements by identical signature into regions
# Region order: ascending mask. Element order inside a region: ascending str.

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple
from .errors import InvalidInput
from .hash import hash_regions
from .mask import full_mask, mask_indices
from .receipts import PartitionRc
from .signature import resolve_signatures


@dataclass(frozen=True)
class Region:
    """
    All elements sharing one exact signature.

    Fields:
    - mask: signature bitmask (bit i ⇔ set i)
    - indices: ascending origin indices, same information as mask
    - values: elements in canonical (ascending) order
    """
    mask: int
    indices: Tuple[int, ...]
    values: Tuple[str, ...]

    @property
    def count(self) -> int:
        return len(self.values)


@dataclass(frozen=True)
class Partition:
    """
    Complete set of realized regions for one collection of input sets.

    Immutable; a new Partition is built whenever any input changes.
    """
    n: int
    labels: Tuple[str, ...]
    regions: Tuple[Region, ...]
    receipt: PartitionRc


def default_labels(n: int) -> Tuple[str, ...]:
    return tuple(f"set{i}" for i in range(n))


def _check_labels(labels: Optional[Sequence[str]], n: int) -> Tuple[str, ...]:
    if labels is None:
        return default_labels(n)
    labels = tuple(labels)
    if len(labels) != n:
        raise InvalidInput(f"got {len(labels)} labels for {n} sets")
    return labels


def build_partition(
    signature_map: Dict[str, int],
    n: int,
    labels: Optional[Sequence[str]] = None,
) -> Partition:
    """
    Group elements with identical signature into one region each.

    Contract:
    - every element lands in exactly one region
    - only non-empty regions are materialized (empty ones are answered by the index)
    - regions ordered by ascending mask; for n=3:
      {0}, {1}, {0,1}, {2}, {0,2}, {1,2}, {0,1,2}
    - values sorted ascending so repeated runs give identical output

    Args:
        signature_map: element → mask, from resolve_signatures
        n: number of input sets the masks refer to
        labels: display label per set (defaults to set0..set{n-1})

    Returns:
        Partition with its PartitionRc

    Raises:
        InvalidInput: n < 0, label count mismatch, or a mask outside 1..2^n − 1
    """
    if n < 0:
        raise InvalidInput(f"number of sets must be >= 0, got {n}")
    labels = _check_labels(labels, n)
    limit = full_mask(n)

    groups: Dict[int, List[str]] = {}
    for element, mask in signature_map.items():
        if mask <= 0 or mask > limit:
            raise InvalidInput(
                f"element {element!r} has signature mask {mask} outside 1..{limit} for n={n}"
            )
        groups.setdefault(mask, []).append(element)

    regions = tuple(
        Region(mask=m, indices=mask_indices(m), values=tuple(sorted(groups[m])))
        for m in sorted(groups)
    )

    size_hist = [r.count for r in regions]
    receipt = PartitionRc(
        n=n,
        region_count=len(regions),
        realized_masks=[r.mask for r in regions],
        size_hist=size_hist,
        element_count=sum(size_hist),
        partition_hash=hash_regions((r.mask, r.values) for r in regions),
    )

    return Partition(n=n, labels=labels, regions=regions, receipt=receipt)


def partition(
    sets: Sequence[Sequence[str]],
    n: Optional[int] = None,
    labels: Optional[Sequence[str]] = None,
) -> Partition:
    """Resolve signatures and build the partition in one call."""
    signature_map, sig_rc = resolve_signatures(sets, n)
    return build_partition(signature_map, sig_rc.n, labels)
