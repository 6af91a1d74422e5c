#!/usr/bin/env python3
# venn/runner.py
# End-to-end pipeline with receipts and determinism hashes

"""
Pipeline (frozen order, no reordering):
[threshold filter] → [gene filter: pre] → Signatures → Partition → [gene filter: post] → Index

Every stage contributes a receipt and its BLAKE3 hash; table_hash
summarizes the run. Two runs on identical input must produce the same
table_hash within the same environment.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional, Sequence, Tuple

from venn.op.errors import InvalidInput
from venn.op.filters import (
    DEFAULT_MIN_PROPORTION,
    GENE_FILTER_STAGES,
    filter_partition_by_gene,
    filter_sets_by_gene,
    threshold_elements,
)
from venn.op.hash import hash_bytes
from venn.op.partition import Partition, build_partition
from venn.op.receipts import FilterRc, RunRc, env_fingerprint, section_hash
from venn.op.region_index import RegionIndex
from venn.op.signature import resolve_signatures


def table_hash_of(hashes: Dict[str, str]) -> str:
    """BLAKE3(concat(sorted(section_key + ':' + hash)))."""
    parts = [f"{k}:{hashes[k]}" for k in sorted(hashes)]
    return hash_bytes("|".join(parts).encode())


def compute_venn(
    sets: Sequence[Sequence[str]],
    labels: Optional[Sequence[str]] = None,
    n: Optional[int] = None,
    genes: Optional[Sequence[str]] = None,
    gene_filter_stage: str = "post",
    extra_sections: Optional[Dict[str, Any]] = None,
) -> Tuple[Partition, RegionIndex, RunRc]:
    """
    Run the region pipeline on already-selected element lists.

    Args:
        sets: input sets, sets[i] has origin index i
        labels: display label per set
        n: declared set count (defaults to len(sets))
        genes: optional gene selection; empty/None means no gene filter
        gene_filter_stage: "post" filters computed regions, "pre" filters inputs
        extra_sections: upstream receipts to fold into the run (e.g. filter)

    Returns:
        (partition, index, run_rc)

    Raises:
        InvalidInput: on any input contract violation (fail-closed)
    """
    if gene_filter_stage not in GENE_FILTER_STAGES:
        raise InvalidInput(
            f"gene_filter_stage must be one of {GENE_FILTER_STAGES}, got {gene_filter_stage!r}"
        )

    env = env_fingerprint()
    sections: Dict[str, Any] = dict(extra_sections or {})
    genes = list(genes or [])

    # Step 1: optional gene filter on inputs
    if genes and gene_filter_stage == "pre" and sets is not None:
        sets = filter_sets_by_gene(sets, genes)

    # Step 2: signatures
    signature_map, sig_rc = resolve_signatures(sets, n)
    sections["signature"] = sig_rc

    # Step 3: partition
    part = build_partition(signature_map, sig_rc.n, labels)

    # Step 4: optional gene filter on regions
    if genes and gene_filter_stage == "post":
        part = filter_partition_by_gene(part, genes)
    sections["partition"] = part.receipt

    # Partition property: every element in exactly one region
    post_filtered = bool(genes) and gene_filter_stage == "post"
    if not post_filtered and part.receipt.element_count != sig_rc.universe_size:
        raise ValueError(
            f"partition covers {part.receipt.element_count} elements, "
            f"universe has {sig_rc.universe_size}"
        )

    hashes = {key: section_hash(rc) for key, rc in sections.items()}

    run_rc = RunRc(
        env=env,
        labels=list(part.labels),
        sections=sections,
        hashes=hashes,
        table_hash=table_hash_of(hashes),
        notes={"genes": genes, "gene_filter_stage": gene_filter_stage} if genes else None,
    )

    return part, RegionIndex(part), run_rc


def compute_venn_from_datasets(
    datasets: List[Dict[str, Any]],
    min_proportion: float = DEFAULT_MIN_PROPORTION,
    genes: Optional[Sequence[str]] = None,
    gene_filter_stage: str = "post",
) -> Tuple[Partition, RegionIndex, RunRc]:
    """
    Threshold each proportion dataset, then run compute_venn.

    Args:
        datasets: [{"label": str, "payload": [{"mutation", "proportion"}, ...]}, ...]
        min_proportion: inclusive threshold applied to every dataset
        genes: optional gene selection
        gene_filter_stage: "post" or "pre"

    Returns:
        (partition, index, run_rc)
    """
    sets = []
    kept = []
    dropped = []
    for i, ds in enumerate(datasets):
        if ds is None or ds.get("payload") is None:
            raise InvalidInput(f"dataset {i} is missing")
        elements = threshold_elements(ds["payload"], min_proportion)
        sets.append(elements)
        kept.append(len(elements))
        dropped.append(len(ds["payload"]) - len(elements))

    filter_rc = FilterRc(
        min_proportion=float(min_proportion),
        kept=kept,
        dropped=dropped,
        genes=sorted(set(genes or [])),
        gene_filter_stage=gene_filter_stage,
    )

    labels = [ds.get("label", f"set{i}") for i, ds in enumerate(datasets)]

    return compute_venn(
        sets,
        labels=labels,
        genes=genes,
        gene_filter_stage=gene_filter_stage,
        extra_sections={"filter": filter_rc},
    )
