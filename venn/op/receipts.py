# venn/op/receipts.py
# Receipts kernel and environment fingerprinting
# Every stage returns a receipt next to its result; receipts are the audit trail

from __future__ import annotations
import platform
import sys
import json
from dataclasses import dataclass, asdict
from importlib.metadata import version, PackageNotFoundError
from typing import Any
import numpy as np
from .hash import hash_bytes


@dataclass
class EnvRc:
    """
    Environment fingerprint.

    Two runs are only comparable hash-for-hash when their fingerprints
    match; a differing fingerprint is reported as NONDETERMINISTIC_ENV,
    not as an execution failure.
    """
    platform: str
    endian: str
    py_version: str
    numpy_version: str
    blake3_version: str
    build_flags_hash: str


def env_fingerprint() -> EnvRc:
    """
    Capture environment fingerprint for determinism checking.

    Returns:
        EnvRc: environment receipt
    """
    try:
        b3v = version("blake3")
    except PackageNotFoundError:
        b3v = "unknown"

    build_info = {
        "py_version": sys.version,
        "implementation": platform.python_implementation(),
        "version_info": list(sys.version_info),
    }
    flags = hash_bytes(json.dumps(build_info, sort_keys=True).encode())

    return EnvRc(
        platform=platform.platform(),
        endian=sys.byteorder,
        py_version=platform.python_version(),
        numpy_version=np.__version__,
        blake3_version=b3v,
        build_flags_hash=flags,
    )


@dataclass(frozen=True)
class SignatureRc:
    """
    Signature resolution receipt.

    Fields:
    - n: declared number of input sets
    - universe_size: |⋃ InputSet[i]|
    - set_sizes: distinct elements per set
    - duplicate_counts: collapsed repeats per set (input length − distinct)
    - membership_hash: BLAKE3 over (element, mask) pairs in element order
    """
    n: int
    universe_size: int
    set_sizes: list[int]
    duplicate_counts: list[int]
    membership_hash: str


@dataclass(frozen=True)
class PartitionRc:
    """
    Partition receipt.

    Fields:
    - region_count: realized (non-empty) regions, always <= 2^n − 1
    - realized_masks: masks of realized regions, ascending
    - size_hist: region sizes aligned with realized_masks
    - element_count: Σ size_hist, equals universe_size
    - partition_hash: BLAKE3 over canonical region encoding
    """
    n: int
    region_count: int
    realized_masks: list[int]
    size_hist: list[int]
    element_count: int
    partition_hash: str


@dataclass(frozen=True)
class FilterRc:
    """
    Upstream filtering receipt.

    Fields:
    - min_proportion: inclusive threshold applied to each dataset
    - kept / dropped: per-set record counts after / removed by threshold
    - genes: label prefixes selected (empty = no gene filter)
    - gene_filter_stage: "pre" (before partition) or "post" (on regions)
    """
    min_proportion: float
    kept: list[int]
    dropped: list[int]
    genes: list[str]
    gene_filter_stage: str


@dataclass
class RunRc:
    """
    Root receipt container for a single pipeline run.

    No timestamps: two runs on identical input must serialize identically.
    """
    env: EnvRc
    labels: list[str]
    sections: dict[str, Any]
    hashes: dict[str, str]
    table_hash: str
    notes: dict[str, Any] | None = None


def aggregate(run: dict | RunRc) -> dict:
    """
    Convert nested receipts (dataclasses or dicts) to JSON-serializable dict.

    Args:
        run: RunRc or dict containing receipts

    Returns:
        dict: plain representation
    """
    def to_plain(x: Any) -> Any:
        """Recursively convert dataclasses to dicts."""
        if hasattr(x, "__dataclass_fields__"):
            return {k: to_plain(v) for k, v in asdict(x).items()}
        if isinstance(x, dict):
            return {str(k): to_plain(v) for k, v in x.items()}
        if isinstance(x, (list, tuple)):
            return [to_plain(v) for v in x]
        if isinstance(x, np.integer):
            return int(x)
        return x

    return to_plain(run)


def section_hash(rc: Any) -> str:
    """BLAKE3 of a receipt's canonical JSON (sorted keys, compact)."""
    plain = aggregate({"rc": rc})["rc"]
    return hash_bytes(json.dumps(plain, sort_keys=True, separators=(",", ":")).encode())
