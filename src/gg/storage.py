"""Storage utilities for the small JSON files gg keeps under its home."""

import json
from pathlib import Path
from typing import Any, Optional
from pydantic import BaseModel
from datetime import datetime


class DateTimeEncoder(json.JSONEncoder):
    """JSON encoder that handles datetime objects."""

    def default(self, obj: object) -> str:
        if isinstance(obj, datetime):
            return obj.isoformat()
        return super().default(obj)


def read_json(path: Path) -> Any:
    """Read a JSON file.

    Args:
        path: Path to the JSON file.

    Returns:
        Parsed JSON value.
    """
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def read_json_or_none(path: Path) -> Optional[Any]:
    """Read a JSON file, returning None when it is missing or corrupt."""
    if not path.exists():
        return None
    try:
        return read_json(path)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None


def write_json(path: Path, data: Any, indent: Optional[int] = 2) -> None:
    """Write a JSON file.

    Args:
        path: Path to the JSON file.
        data: Value (or Pydantic model) to write.
        indent: Indentation, None for compact output.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    if isinstance(data, BaseModel):
        data = data.model_dump(mode="json")

    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=indent, cls=DateTimeEncoder)
