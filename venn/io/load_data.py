# venn/io/load_data.py
# Proportion dataset JSON loader

from __future__ import annotations
import json
from pathlib import Path
from typing import Any


def load_dataset(path: str) -> dict[str, Any]:
    """
    Load one proportion dataset from JSON.

    Expected format:
    {
        "label": "B.1.1.7",
        "payload": [{"mutation": "S:N501Y", "proportion": 0.98}, ...]
    }

    A bare list is accepted as the payload; the label then defaults to
    the file stem.

    Args:
        path: path to dataset JSON file

    Returns:
        dict: {"label": str, "payload": list}
    """
    with open(path, "r") as f:
        data = json.load(f)

    if isinstance(data, list):
        return {"label": Path(path).stem, "payload": data}

    if "payload" not in data:
        raise ValueError(f"{path}: dataset has no 'payload' field")

    return {"label": data.get("label", Path(path).stem), "payload": data["payload"]}
