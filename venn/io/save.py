# venn/io/save.py
# Minimal JSON writer for region tables and receipts

from __future__ import annotations
import json
import os
from typing import Any


def _ensure_parent(path: str) -> None:
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)


def write_json(path: str, obj: Any) -> None:
    """
    Write object as JSON to file.

    Creates parent directories if needed. Keys are written in insertion
    order; ensure_ascii is off so labels like "A ∩ B" stay readable.
    """
    _ensure_parent(path)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(obj, f, ensure_ascii=False, indent=2)


def write_jsonl(path: str, records: list[Any]) -> None:
    """
    Write list of objects as JSONL (one compact JSON object per line).

    Used for receipts output.
    """
    _ensure_parent(path)
    with open(path, "w", encoding="utf-8") as f:
        for record in records:
            f.write(json.dumps(record, separators=(",", ":"), ensure_ascii=False) + "\n")
