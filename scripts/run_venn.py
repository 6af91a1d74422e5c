#!/usr/bin/env python3
# scripts/run_venn.py
# Region runner with determinism harness

"""
Load N proportion datasets, threshold them, compute exact-membership
regions, and print one row per combination.

Determinism:
- Run the pipeline twice on the same input
- Compare table_hash of both runs
- NONDETERMINISTIC_EXECUTION if hashes differ within the same env
- NONDETERMINISTIC_ENV (warning) if env fingerprints differ

Output:
- Region table to --out (JSON) if given
- Both run receipts to --receipts (JSONL) if given
"""

from __future__ import annotations
import argparse
import sys
from pathlib import Path
from typing import Any, Dict, FrozenSet, List

# Add project root to path
repo_root = Path(__file__).parent.parent
sys.path.insert(0, str(repo_root))

from venn.io.load_data import load_dataset
from venn.io.save import write_json, write_jsonl
from venn.op.errors import InvalidInput
from venn.op.export import clipboard_text, list_text, region_table
from venn.op.filters import DEFAULT_MIN_PROPORTION, GENE_FILTER_STAGES
from venn.op.receipts import aggregate
from venn.op.region_index import sets_equal
from venn.runner import compute_venn_from_datasets


def run_with_determinism(
    datasets: List[Dict[str, Any]],
    min_proportion: float,
    genes: List[str],
    gene_filter_stage: str,
) -> Dict[str, Any]:
    """
    Run the pipeline twice and check determinism.

    Returns:
        {
            "result": "PASS" | "NONDETERMINISTIC_EXECUTION" | "NONDETERMINISTIC_ENV",
            "table_hash_run1": str,
            "table_hash_run2": str,
            "rows": [...],
            "receipts": [run1, run2],
        }
    """
    runs = []
    for _ in range(2):
        _, index, run_rc = compute_venn_from_datasets(
            datasets,
            min_proportion=min_proportion,
            genes=genes,
            gene_filter_stage=gene_filter_stage,
        )
        runs.append((index, aggregate(run_rc)))

    (index1, rc1), (_, rc2) = runs

    if rc1["env"] != rc2["env"]:
        result = "NONDETERMINISTIC_ENV"
    elif rc1["table_hash"] != rc2["table_hash"]:
        result = "NONDETERMINISTIC_EXECUTION"
    else:
        result = "PASS"

    return {
        "result": result,
        "table_hash_run1": rc1["table_hash"],
        "table_hash_run2": rc2["table_hash"],
        "rows": region_table(index1),
        "receipts": [rc1, rc2],
    }


def index_list(text: str) -> FrozenSet[int]:
    """argparse type for --copy: '0,2' → {0, 2}."""
    try:
        indices = frozenset(int(i) for i in text.split(",") if i.strip())
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected comma-separated set indices, got {text!r}") from None
    if any(i < 0 for i in indices):
        raise argparse.ArgumentTypeError(f"set indices must be >= 0, got {text!r}")
    return indices


def print_rows(rows: List[Dict[str, Any]], show_values: bool) -> None:
    width = max((len(r["label"]) for r in rows), default=0)
    for r in rows:
        print(f"  {r['label']:<{width}}  {r['count']:>6}")
        if show_values:
            print(f"    {list_text(r['values'])}")


def main():
    """
    Main entry point.

    Usage:
        python scripts/run_venn.py a.json b.json c.json [--min-proportion 0.5]
                                   [--gene S --gene ORF1a] [--gene-stage post]
                                   [--out out/regions.json] [--receipts out/receipts/venn.jsonl]
    """
    parser = argparse.ArgumentParser(description="Exact-membership regions of N datasets")
    parser.add_argument("datasets", nargs="*", help="Dataset JSON files, one per set")
    parser.add_argument("--min-proportion", type=float, default=DEFAULT_MIN_PROPORTION,
                        help="Inclusive proportion threshold (default: %(default)s)")
    parser.add_argument("--gene", action="append", default=[], help="Keep only this gene (repeatable)")
    parser.add_argument("--gene-stage", choices=GENE_FILTER_STAGES, default="post",
                        help="Apply the gene filter before or after partitioning")
    parser.add_argument("--expect", type=int, default=None,
                        help="Declared number of datasets; mismatch is an error")
    parser.add_argument("--values", action="store_true", help="Print region values")
    parser.add_argument("--copy", type=index_list, default=None,
                        help="Print comma-joined values of one region, e.g. --copy 0,2")
    parser.add_argument("--out", type=str, default=None, help="Region table JSON path")
    parser.add_argument("--receipts", type=str, default=None, help="Receipts JSONL path")

    args = parser.parse_args()

    if args.expect is not None and args.expect != len(args.datasets):
        print(f"✗ INVALID_INPUT: declared {args.expect} datasets, got {len(args.datasets)}")
        sys.exit(2)

    datasets = [load_dataset(p) for p in args.datasets]

    print(f"Datasets: {len(datasets)}")
    for ds in datasets:
        print(f"  {ds['label']} ({len(ds['payload'])} records)")
    print(f"Min proportion: {args.min_proportion}")
    if args.gene:
        print(f"Genes: {', '.join(args.gene)} ({args.gene_stage})")

    try:
        summary = run_with_determinism(datasets, args.min_proportion, args.gene, args.gene_stage)
    except InvalidInput as e:
        print(f"✗ INVALID_INPUT: {e}")
        sys.exit(2)

    print("\n" + "=" * 60)
    print("REGIONS")
    print("=" * 60)
    print_rows(summary["rows"], args.values)

    if args.copy is not None:
        match = [r for r in summary["rows"] if sets_equal(r["indices"], args.copy)]
        print(f"\n{clipboard_text(match[0]['values']) if match else ''}")

    if args.out:
        write_json(args.out, summary["rows"])
        print(f"\nRegion table written to: {args.out}")
    if args.receipts:
        write_jsonl(args.receipts, summary["receipts"])
        print(f"Receipts written to: {args.receipts}")

    print(f"\ntable_hash: {summary['table_hash_run1']}")
    if summary["result"] == "NONDETERMINISTIC_EXECUTION":
        print("\n❌ NONDETERMINISTIC_EXECUTION detected!")
        sys.exit(1)
    elif summary["result"] == "NONDETERMINISTIC_ENV":
        print("\n⚠️  Environment fingerprints differ between runs")
    else:
        print("\n✓ Deterministic across 2 runs")


if __name__ == "__main__":
    main()
