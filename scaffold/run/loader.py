from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

import yaml

from scaffold.errors import CollectionFormatError


def load_collection(path: Path) -> Dict[str, Any]:
    """Read a collection export (JSON, or YAML for hand-written fixtures)."""
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Collection file not found: {p}")

    text = p.read_text(encoding="utf-8")
    try:
        if p.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (ValueError, yaml.YAMLError) as e:
        raise CollectionFormatError(f"Could not parse collection {p}: {e}") from e

    if not isinstance(data, dict):
        raise CollectionFormatError(f"Collection {p} must be a JSON object")
    return data
