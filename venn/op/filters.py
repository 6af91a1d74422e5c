# venn/op/filters.py
# Upstream element selection: proportion threshold and gene (label-prefix) filter

from __future__ import annotations
from typing import Any, Iterable, List, Mapping, Optional, Sequence
import numpy as np
from .errors import InvalidInput
from .partition import Partition, build_partition

DEFAULT_MIN_PROPORTION = 0.5

# Mutation labels look like "S:N501Y"; the gene is everything before the first ':'
GENE_SEPARATOR = ":"

GENE_FILTER_STAGES = ("pre", "post")


def threshold_elements(
    records: Sequence[Mapping[str, Any]],
    min_proportion: float = DEFAULT_MIN_PROPORTION,
    key: str = "mutation",
) -> List[str]:
    """
    Keep the elements whose proportion is at least min_proportion.

    Contract:
    - inclusive comparison: proportion >= min_proportion
    - input order is preserved (the engine sorts later)

    Args:
        records: [{"mutation": str, "proportion": float}, ...]
        min_proportion: threshold in [0, 1]
        key: record field holding the element

    Returns:
        list of element values passing the threshold

    Raises:
        InvalidInput: threshold outside [0, 1] or a record missing a field
    """
    if not 0.0 <= min_proportion <= 1.0:
        raise InvalidInput(f"min_proportion must be in [0, 1], got {min_proportion}")
    if len(records) == 0:
        return []

    try:
        proportions = np.array([float(r["proportion"]) for r in records], dtype=np.float64)
        elements = [r[key] for r in records]
    except KeyError as e:
        raise InvalidInput(f"record missing field {e}") from e

    keep = proportions >= min_proportion
    return [elements[k] for k in np.flatnonzero(keep)]


def gene_of(value: str) -> str:
    return value.split(GENE_SEPARATOR)[0]


def filter_by_gene(values: Iterable[str], genes: Iterable[str]) -> List[str]:
    """Values whose gene prefix is one of genes; order preserved."""
    selected = set(genes)
    return [v for v in values if gene_of(v) in selected]


def filter_sets_by_gene(
    sets: Sequence[Optional[Sequence[str]]],
    genes: Iterable[str],
) -> List[Optional[List[str]]]:
    """Apply the gene filter to every input set before partitioning."""
    genes = list(genes)
    return [filter_by_gene(s, genes) if s is not None else None for s in sets]


def filter_partition_by_gene(partition: Partition, genes: Iterable[str]) -> Partition:
    """
    Apply the gene filter to an already-built partition.

    Regions that lose all their values disappear from the result; the
    index still answers them as empty. Since membership of an element
    never depends on other elements, this equals filtering the inputs
    first and partitioning afterwards.
    """
    selected = set(genes)
    signature_map = {
        v: r.mask
        for r in partition.regions
        for v in r.values
        if gene_of(v) in selected
    }
    return build_partition(signature_map, partition.n, partition.labels)
