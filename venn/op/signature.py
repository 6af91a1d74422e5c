# venn/op/signature.py
# Signature resolver: element → bitmask of the input sets containing it

from __future__ import annotations
from typing import Dict, List, Optional, Sequence, Tuple
import numpy as np
from blake3 import blake3
from .bytes import encode_str, varu
from .errors import InvalidInput
from .receipts import SignatureRc

# Widest N whose masks still fit an int64 matmul (bit 63 is the sign bit)
_INT64_MAX_SETS = 62


def _validate_sets(sets: Optional[Sequence], n: Optional[int]) -> int:
    """
    Check the input contract and return the effective set count.

    Raises:
        InvalidInput: n < 0, sets missing, len(sets) != n, a set is None,
                      or a set is a bare string
    """
    if n is not None and n < 0:
        raise InvalidInput(f"number of sets must be >= 0, got {n}")
    if sets is None:
        if n:
            raise InvalidInput(f"declared {n} sets but none were supplied")
        return 0

    if n is None:
        n = len(sets)

    if len(sets) < n:
        raise InvalidInput(f"declared {n} sets but only {len(sets)} were supplied")
    if len(sets) > n:
        raise InvalidInput(f"declared {n} sets but {len(sets)} were supplied")

    for i, s in enumerate(sets):
        if s is None:
            raise InvalidInput(f"input set {i} is missing")
        if isinstance(s, (str, bytes)):
            raise InvalidInput(f"input set {i} is a bare string, expected a sequence of elements")

    return n


def _distinct_elements(s, i: int) -> Tuple[set, int]:
    """Deduplicate one input set; returns (distinct, raw element count)."""
    distinct = set()
    total = 0
    for e in s:
        total += 1
        if not isinstance(e, str):
            raise InvalidInput(f"input set {i}: element {e!r} is not a string")
        distinct.add(e)
    return distinct, total


def membership_matrix(
    distinct_sets: List[set],
    universe: List[str],
) -> np.ndarray:
    """
    Boolean membership matrix M with M[k, i] = (universe[k] ∈ set i).

    Args:
        distinct_sets: deduplicated input sets, index-aligned
        universe: sorted union of all sets

    Returns:
        np.ndarray: (|universe|, n) bool array
    """
    n = len(distinct_sets)
    row_of = {e: k for k, e in enumerate(universe)}
    M = np.zeros((len(universe), n), dtype=bool)
    for i, s in enumerate(distinct_sets):
        if s:
            rows = np.fromiter((row_of[e] for e in s), dtype=np.int64, count=len(s))
            M[rows, i] = True
    return M


def masks_from_matrix(M: np.ndarray) -> List[int]:
    """
    Collapse each matrix row to its signature mask (bit i ⇔ column i).

    Up to 62 sets the rows are weighted in one int64 matmul; beyond that
    masks are accumulated as Python ints, which are unbounded.
    """
    U, n = M.shape
    if n <= _INT64_MAX_SETS:
        weights = np.left_shift(np.int64(1), np.arange(n, dtype=np.int64))
        return [int(m) for m in M.astype(np.int64) @ weights] if U else []

    masks = [0] * U
    for i in range(n):
        bit = 1 << i
        for k in np.flatnonzero(M[:, i]):
            masks[int(k)] |= bit
    return masks


def resolve_signatures(
    sets: Sequence[Sequence[str]],
    n: Optional[int] = None,
) -> Tuple[Dict[str, int], SignatureRc]:
    """
    Map every element of the universe to the set of indices containing it.

    Contract:
    - sig[e] has bit i set iff e ∈ sets[i] (duplicates within a set collapse)
    - n = 0 → empty mapping, no error
    - n = 1 → every element maps to {0} (mask 1)
    - mapping iterates in ascending element order

    Args:
        sets: input sets, sets[i] is the set with origin index i
        n: declared number of sets (defaults to len(sets))

    Returns:
        (signature_map, SignatureRc)

    Raises:
        InvalidInput: if the input contract is violated (see _validate_sets)
    """
    n = _validate_sets(sets, n)

    resolved = [_distinct_elements(sets[i], i) for i in range(n)]
    distinct_sets = [d for d, _ in resolved]
    universe = sorted(set().union(*distinct_sets))

    M = membership_matrix(distinct_sets, universe)
    masks = masks_from_matrix(M)

    signature_map = dict(zip(universe, masks))

    h = blake3()
    for e, m in signature_map.items():
        h.update(encode_str(e))
        h.update(varu(m))

    receipt = SignatureRc(
        n=n,
        universe_size=len(universe),
        set_sizes=[len(s) for s in distinct_sets],
        duplicate_counts=[total - len(d) for d, total in resolved],
        membership_hash=h.hexdigest(),
    )

    return signature_map, receipt
