"""Saved tool chains and the curated toolbelts."""
from pathlib import Path
from typing import Optional

from .config import get_chains_path
from .models import ToolRef
from .storage import read_json_or_none, write_json

# Curated toolbelts
TOOLBELTS: dict[str, list[str]] = {
    "webdev": [
        "npm:eslint",
        "npm:prettier",
        "npm:typescript",
        "npm:jest",
        "npm:playwright",
    ],
    "media": [
        "brew:ffmpeg",
        "brew:imagemagick",
        "brew:exiftool",
    ],
    "sec": [
        "brew:semgrep",
        "npm:snyk",
        "brew:trivy",
    ],
    "data": [
        "brew:duckdb",
        "brew:jq",
        "npm:csvtojson",
    ],
    "devops": [
        "brew:terraform",
        "brew:kubectl",
        "brew:docker",
    ],
}


class ChainStore:
    """One JSON list of `type:name` refs per chain under <home>/chains."""

    def __init__(self, root: Optional[Path] = None):
        self.root = root or get_chains_path()

    def _path(self, name: str) -> Path:
        return self.root / f"{name}.json"

    def save(self, name: str, tools: list[str]) -> Path:
        path = self._path(name)
        write_json(path, tools, indent=None)
        return path

    def load(self, name: str) -> Optional[list[str]]:
        """Refs of a saved chain, or None if it does not exist."""
        data = read_json_or_none(self._path(name))
        if not isinstance(data, list):
            return None
        return [str(t) for t in data]

    def list(self) -> dict[str, int]:
        """Saved chain names mapped to their tool counts."""
        if not self.root.exists():
            return {}
        chains = {}
        for path in sorted(self.root.glob("*.json")):
            tools = self.load(path.stem)
            chains[path.stem] = len(tools) if tools else 0
        return chains


def parse_refs(refs: list[str]) -> list[tuple[str, Optional[ToolRef]]]:
    """Pair each raw ref with its parsed ToolRef (None if malformed)."""
    return [(ref, ToolRef.parse(ref)) for ref in refs]
