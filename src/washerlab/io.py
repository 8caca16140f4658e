from __future__ import annotations

import json
import logging
import os
import re
from typing import Any, Dict, List

from .types import DEFAULT_NAME
from .validate import ValidationError


logger = logging.getLogger("washerlab.io")


def to_slug(value: Any) -> str:
    slug = re.sub(r"[^a-z0-9._-]+", "-", str(value).strip().lower()).strip("-")
    return slug or DEFAULT_NAME


def _ensure_parent(path: str) -> None:
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)


def save_text(text: str, path: str) -> None:
    _ensure_parent(path)
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(text)
    logger.debug("wrote %d chars to %s", len(text), path)


def save_json(data, path: str) -> None:
    _ensure_parent(path)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
        f.write("\n")


def load_batch(path: str) -> List[Dict[str, Any]]:
    """
    Read a batch file: a non-empty JSON array of washer objects.

    Only the file structure is checked here, before anything is generated.
    Geometry errors surface later, per item, and abort the run after the
    earlier items have already been written.
    """
    with open(path, "r", encoding="utf-8") as f:
        raw = f.read()
    try:
        items = json.loads(raw)
    except json.JSONDecodeError:
        raise ValidationError(f"Invalid JSON in {path}") from None

    if not isinstance(items, list):
        raise ValidationError("Batch input must be a JSON array of washer objects.")
    if not items:
        raise ValidationError("Batch input array is empty.")
    for i, item in enumerate(items):
        if not isinstance(item, dict):
            raise ValidationError(f"Batch item at index {i} must be an object.")
    return items
