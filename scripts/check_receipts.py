#!/usr/bin/env python3
# scripts/check_receipts.py
# Receipt comparison tool for region runs

from __future__ import annotations
import json
import sys
from typing import Any

# Sections whose differences are environmental, not computational
ENV_KEYS = ("env",)


def load_jsonl(path: str) -> list[dict]:
    """Load JSONL file as list of records."""
    with open(path, encoding="utf-8") as f:
        return [json.loads(line) for line in f if line.strip()]


def deep_diff(a: Any, b: Any, path: str = "") -> list[str]:
    """
    Recursively find differences between two receipt values.

    Lists are compared element-wise so a changed region size points at
    its position in size_hist instead of reporting the whole list.
    """
    if isinstance(a, dict) and isinstance(b, dict):
        diffs = []
        only_a = set(a) - set(b)
        only_b = set(b) - set(a)
        if only_a:
            diffs.append(f"{path}: keys only in A: {sorted(only_a)}")
        if only_b:
            diffs.append(f"{path}: keys only in B: {sorted(only_b)}")
        for key in sorted(set(a) & set(b)):
            diffs.extend(deep_diff(a[key], b[key], f"{path}.{key}" if path else key))
        return diffs

    if isinstance(a, list) and isinstance(b, list) and len(a) == len(b):
        diffs = []
        for i, (x, y) in enumerate(zip(a, b)):
            diffs.extend(deep_diff(x, y, f"{path}[{i}]"))
        return diffs

    return [] if a == b else [f"{path}: {a!r} != {b!r}"]


def compare_records(rec_a: dict, rec_b: dict, label: str) -> tuple[list[str], list[str]]:
    """Split differences into (computational, environmental)."""
    env_a = {k: rec_a.get(k) for k in ENV_KEYS}
    env_b = {k: rec_b.get(k) for k in ENV_KEYS}
    body_a = {k: v for k, v in rec_a.items() if k not in ENV_KEYS}
    body_b = {k: v for k, v in rec_b.items() if k not in ENV_KEYS}
    return deep_diff(body_a, body_b, label), deep_diff(env_a, env_b, label)


def main():
    """
    Compare two receipt JSONL files.

    Usage:
        python scripts/check_receipts.py <file1.jsonl> <file2.jsonl>

    Exit codes:
        0: receipts match (environment differences are only warned about)
        1: receipts differ
    """
    if len(sys.argv) != 3:
        print("Usage: python scripts/check_receipts.py <file1.jsonl> <file2.jsonl>")
        sys.exit(1)

    file_a, file_b = sys.argv[1], sys.argv[2]

    print("Comparing receipts:")
    print(f"  A: {file_a}")
    print(f"  B: {file_b}")

    records_a = load_jsonl(file_a)
    records_b = load_jsonl(file_b)

    if len(records_a) != len(records_b):
        print(f"✗ RECEIPTS_DIFFER: record count mismatch ({len(records_a)} vs {len(records_b)})")
        sys.exit(1)

    all_match = True
    for i, (rec_a, rec_b) in enumerate(zip(records_a, records_b)):
        diffs, env_diffs = compare_records(rec_a, rec_b, f"record[{i}]")
        if env_diffs:
            print(f"\n⚠️  Environment differs in record {i}:")
            for diff in env_diffs[:5]:
                print(f"  {diff}")
        if diffs:
            all_match = False
            print(f"\n✗ Differences in record {i} (table_hash {rec_a.get('table_hash', '?')[:12]} vs {rec_b.get('table_hash', '?')[:12]}):")
            for diff in diffs[:10]:
                print(f"  {diff}")
            if len(diffs) > 10:
                print(f"  ... and {len(diffs) - 10} more differences")

    if all_match:
        print(f"✓ RECEIPTS_MATCH ({len(records_a)} records)")
        return

    print("\n✗ RECEIPTS_DIFFER")
    sys.exit(1)


if __name__ == "__main__":
    main()
