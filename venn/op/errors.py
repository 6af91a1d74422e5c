# venn/op/errors.py
# Caller-side contract violations (fail-closed, never an empty partition)

from __future__ import annotations


class InvalidInput(ValueError):
    """
    Raised when the caller breaks the input contract.

    Covers: negative set count, a set missing at a declared index, a
    set-count mismatch, a non-string element, a negative signature index,
    and out-of-range filter parameters. An empty region is never an error.
    """
