#!/usr/bin/env python3
"""Filter and Export Tests"""

from venn.op.errors import InvalidInput
from venn.op.export import (
    VENN3_ANCHOR_ORDER,
    clipboard_text,
    list_text,
    region_label,
    region_table,
)
from venn.op.filters import (
    filter_by_gene,
    filter_partition_by_gene,
    filter_sets_by_gene,
    gene_of,
    threshold_elements,
)
from venn.op.partition import partition
from venn.op.region_index import RegionIndex


RECORDS = [
    {"mutation": "S:N501Y", "proportion": 0.98},
    {"mutation": "S:D614G", "proportion": 0.5},
    {"mutation": "ORF1a:T1001I", "proportion": 0.49},
    {"mutation": "N:R203K", "proportion": 0.7},
]


def test_threshold_inclusive():
    """Test the proportion threshold keeps values >= threshold, in input order."""
    print("Testing proportion threshold...")

    assert threshold_elements(RECORDS, 0.5) == ["S:N501Y", "S:D614G", "N:R203K"]
    assert threshold_elements(RECORDS, 0.0) == [r["mutation"] for r in RECORDS]
    assert threshold_elements(RECORDS, 1.0) == []
    assert threshold_elements([], 0.5) == []

    print("  ✓ Threshold inclusive")


def test_threshold_validation():
    """Test out-of-range thresholds and malformed records fail."""
    print("Testing threshold validation...")

    for bad in (-0.1, 1.5):
        raised = False
        try:
            threshold_elements(RECORDS, bad)
        except InvalidInput:
            raised = True
        assert raised, f"Expected InvalidInput for min_proportion={bad}"

    raised = False
    try:
        threshold_elements([{"mutation": "S:N501Y"}], 0.5)
    except InvalidInput:
        raised = True
    assert raised, "Expected InvalidInput for missing proportion"

    print("  ✓ Threshold validation works")


def test_gene_filter():
    """Test gene prefix selection."""
    print("Testing gene filter...")

    assert gene_of("S:N501Y") == "S"
    assert gene_of("ORF1a:T1001I") == "ORF1a"
    assert gene_of("plain") == "plain"

    values = ["S:N501Y", "ORF1a:T1001I", "N:R203K", "S:D614G"]
    assert filter_by_gene(values, ["S"]) == ["S:N501Y", "S:D614G"]
    assert filter_by_gene(values, ["S", "N"]) == ["S:N501Y", "N:R203K", "S:D614G"]
    assert filter_by_gene(values, []) == []

    print("  ✓ Gene filter works")


def test_gene_filter_stage_equivalence():
    """Test filtering regions equals filtering inputs first."""
    print("Testing pre/post gene filter equivalence...")

    sets = [
        ["S:N501Y", "S:D614G", "N:R203K"],
        ["S:D614G", "ORF1a:T1001I"],
        ["N:R203K", "S:D614G", "S:E484K"],
    ]
    genes = ["S"]

    post = filter_partition_by_gene(partition(sets, labels=["A", "B", "C"]), genes)
    pre = partition(filter_sets_by_gene(sets, genes), labels=["A", "B", "C"])

    assert post == pre, "Post-filtered partition should equal pre-filtered partition"
    assert RegionIndex(post).find([0, 1, 2]) == ["S:D614G"]
    assert RegionIndex(post).find([0, 2]) == [], "N:R203K is not in gene S"
    assert RegionIndex(post).find([2]) == ["S:E484K"]

    # A missing set passes through so partition() can reject it
    assert filter_sets_by_gene([["S:D614G", "N:R203K"], None], genes) == [["S:D614G"], None]

    print("  ✓ Pre/post gene filter equivalent")


def test_region_table():
    """Test rows handed to the rendering collaborator."""
    print("Testing region table...")

    index = RegionIndex(partition([["a", "b"], ["b", "c"], ["c", "d"]], labels=["A", "B", "C"]))

    rows = region_table(index)
    assert len(rows) == 7
    assert rows[2] == {"indices": [0, 1], "label": "A ∩ B", "values": ["b"], "count": 1}
    assert rows[6] == {"indices": [0, 1, 2], "label": "A ∩ B ∩ C", "values": [], "count": 0}

    anchored = region_table(index, VENN3_ANCHOR_ORDER)
    assert [r["label"] for r in anchored] == ["A", "B", "C", "A ∩ B ∩ C", "A ∩ B", "A ∩ C", "B ∩ C"]
    assert [r["count"] for r in anchored] == [1, 0, 1, 0, 1, 0, 1]

    print("  ✓ Region table correct")


def test_text_export():
    """Test clipboard and list text."""
    print("Testing text export...")

    assert clipboard_text(["a", "b"]) == "a,b"
    assert clipboard_text([]) == ""
    assert list_text(["a", "b"]) == "a, b"
    assert list_text([]) == "-"
    assert region_label((0, 2), ["A", "B", "C"]) == "A ∩ C"

    print("  ✓ Text export correct")


def run_tests():
    print("\n" + "="*60)
    print("Filter and Export Tests")
    print("="*60 + "\n")

    test_threshold_inclusive()
    test_threshold_validation()
    test_gene_filter()
    test_gene_filter_stage_equivalence()
    test_region_table()
    test_text_export()

    print("\n" + "="*60)
    print("✓ All filter and export tests passed")
    print("="*60 + "\n")


if __name__ == "__main__":
    run_tests()
