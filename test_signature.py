#!/usr/bin/env python3
"""Signature Resolver Tests"""

import numpy as np
from venn.op.signature import (
    InvalidInput,
    membership_matrix,
    masks_from_matrix,
    resolve_signatures,
)


def test_three_sets():
    """Test masks for the three-set example."""
    print("Testing three-set signatures...")

    sig, rc = resolve_signatures([["a", "b"], ["b", "c"], ["c", "d"]])

    assert sig == {"a": 0b001, "b": 0b011, "c": 0b110, "d": 0b100}, f"Unexpected signatures {sig}"
    assert list(sig) == ["a", "b", "c", "d"], "Mapping should iterate in element order"
    assert rc.n == 3
    assert rc.universe_size == 4
    assert rc.set_sizes == [2, 2, 2]

    print("  ✓ Three-set signatures correct")


def test_duplicates_collapse():
    """Test duplicates within one set are idempotent."""
    print("Testing duplicate collapse...")

    sig, rc = resolve_signatures([["x", "x", "y"], ["y", "y", "y"]])

    assert sig == {"x": 0b01, "y": 0b11}, f"Unexpected signatures {sig}"
    assert rc.set_sizes == [2, 1]
    assert rc.duplicate_counts == [1, 2]

    print("  ✓ Duplicates collapse")


def test_zero_sets():
    """Test N=0 yields an empty mapping without error."""
    print("Testing N=0...")

    sig, rc = resolve_signatures([])
    assert sig == {}
    assert rc.n == 0 and rc.universe_size == 0

    sig, rc = resolve_signatures([], n=0)
    assert sig == {}

    print("  ✓ N=0 is empty")


def test_single_set():
    """Test N=1 maps every element to {0}."""
    print("Testing N=1...")

    sig, _ = resolve_signatures([["y", "x"]])
    assert sig == {"x": 1, "y": 1}

    print("  ✓ N=1 maps to {0}")


def test_empty_sets_allowed():
    """Test empty input sets are valid."""
    print("Testing empty input sets...")

    sig, rc = resolve_signatures([[], ["a"], []])
    assert sig == {"a": 0b010}
    assert rc.set_sizes == [0, 1, 0]

    print("  ✓ Empty sets are valid")


def test_missing_set_fails():
    """Test declared N=3 with two sets raises InvalidInput."""
    print("Testing missing set...")

    raised = False
    try:
        resolve_signatures([["a"], ["b"]], n=3)
    except InvalidInput:
        raised = True
    assert raised, "Expected InvalidInput for fewer sets than declared"

    raised = False
    try:
        resolve_signatures([["a"], None, ["b"]])
    except InvalidInput:
        raised = True
    assert raised, "Expected InvalidInput for a None set"

    print("  ✓ Missing set rejected")


def test_bad_inputs_fail():
    """Test negative N, non-string elements and bare strings are rejected."""
    print("Testing invalid inputs...")

    for sets, n in [([], -1), ([["a", 3]], None), (["abc"], None), ([["a"], ["b"]], 1)]:
        raised = False
        try:
            resolve_signatures(sets, n)
        except InvalidInput:
            raised = True
        assert raised, f"Expected InvalidInput for sets={sets!r}, n={n}"

    # InvalidInput is a ValueError so generic callers still see a failure
    assert issubclass(InvalidInput, ValueError)

    print("  ✓ Invalid inputs rejected")


def test_wide_masks():
    """Test N beyond int64 width uses unbounded masks."""
    print("Testing N=70...")

    sets = [[] for _ in range(70)]
    sets[0].append("x")
    sets[69].append("x")
    sets[65].append("y")

    sig, _ = resolve_signatures(sets)
    assert sig["x"] == (1 << 69) | 1, f"Unexpected mask {sig['x']}"
    assert sig["y"] == 1 << 65

    print("  ✓ Wide masks correct")


def test_membership_matrix():
    """Test matrix layout and mask collapse."""
    print("Testing membership matrix...")

    M = membership_matrix([{"a"}, {"a", "b"}], ["a", "b"])
    assert M.dtype == np.bool_
    assert M.tolist() == [[True, True], [False, True]]
    assert masks_from_matrix(M) == [0b11, 0b10]

    print("  ✓ Membership matrix correct")


def test_determinism():
    """Test the membership hash is independent of input order."""
    print("Testing determinism...")

    _, rc1 = resolve_signatures([["b", "a"], ["c"]])
    _, rc2 = resolve_signatures([["a", "b", "a"], ["c"]])
    _, rc3 = resolve_signatures([["a", "b"], ["d"]])

    assert rc1.membership_hash == rc2.membership_hash
    assert rc1.membership_hash != rc3.membership_hash

    print("  ✓ Determinism verified")


def run_tests():
    print("\n" + "="*60)
    print("Signature Resolver Tests")
    print("="*60 + "\n")

    test_three_sets()
    test_duplicates_collapse()
    test_zero_sets()
    test_single_set()
    test_empty_sets_allowed()
    test_missing_set_fails()
    test_bad_inputs_fail()
    test_wide_masks()
    test_membership_matrix()
    test_determinism()

    print("\n" + "="*60)
    print("✓ All signature tests passed")
    print("="*60 + "\n")


if __name__ == "__main__":
    run_tests()
