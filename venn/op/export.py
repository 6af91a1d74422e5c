# venn/op/export.py
# Region rows handed to rendering/export collaborators (no layout here)

from __future__ import annotations
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple
from .mask import SignatureLike, iter_masks, mask_indices, to_indices
from .region_index import RegionIndex

LABEL_SEPARATOR = " ∩ "
CLIPBOARD_SEPARATOR = ","
LIST_SEPARATOR = ", "
EMPTY_LIST_TEXT = "-"

# Three-set diagram anchor order: outer regions, centre, then pairwise lenses
VENN3_ANCHOR_ORDER: Tuple[Tuple[int, ...], ...] = (
    (0,), (1,), (2,), (0, 1, 2), (0, 1), (0, 2), (1, 2),
)


def region_label(indices: Sequence[int], labels: Sequence[str]) -> str:
    """'A ∩ B' style label for a combination of sets."""
    return LABEL_SEPARATOR.join(labels[i] for i in indices)


def region_table(
    index: RegionIndex,
    signatures: Optional[Iterable[SignatureLike]] = None,
) -> List[Dict[str, Any]]:
    """
    One row per requested combination: indices, label, values, count.

    Args:
        index: RegionIndex over a partition
        signatures: combinations to report (default: all 2^n − 1, canonical order)

    Returns:
        list of {"indices", "label", "values", "count"} dicts
    """
    labels = index.partition.labels
    if signatures is None:
        combos = (mask_indices(m) for m in iter_masks(index.n))
    else:
        combos = (tuple(sorted(to_indices(s))) for s in signatures)

    rows = []
    for indices in combos:
        values = index.find(indices)
        rows.append({
            "indices": list(indices),
            "label": region_label(indices, labels) if all(i < len(labels) for i in indices) else "",
            "values": values,
            "count": len(values),
        })
    return rows


def clipboard_text(values: Iterable[str]) -> str:
    return CLIPBOARD_SEPARATOR.join(values)


def list_text(values: Sequence[str]) -> str:
    return LIST_SEPARATOR.join(values) if len(values) else EMPTY_LIST_TEXT
