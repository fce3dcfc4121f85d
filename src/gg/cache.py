"""File-per-key JSON cache for registry lookups.

Each queried package or formula is stored as `<cache>/<kind>/<name>.json`.
There is no size bound; old entries are only removed by `gg cache clean`.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Iterator, Optional

from .config import get_cache_path
from .storage import read_json_or_none, write_json

CACHE_KINDS = ("npm", "brew")
DEFAULT_MAX_AGE_DAYS = 7


def cache_filename(name: str) -> str:
    """File name for a cache key. Scoped npm names (@scope/pkg) are flattened."""
    return name.replace("/", "__") + ".json"


class PackageCache:
    """Read-through cache for one kind of package (npm or brew)."""

    def __init__(self, kind: str, root: Optional[Path] = None):
        self.kind = kind
        self.dir = (root or get_cache_path()) / kind

    def path_for(self, name: str) -> Path:
        return self.dir / cache_filename(name)

    def get(self, name: str) -> Optional[dict[str, Any]]:
        """Cached document for name, or None on a miss."""
        data = read_json_or_none(self.path_for(name))
        return data if isinstance(data, dict) else None

    def put(self, name: str, data: dict[str, Any]) -> None:
        write_json(self.path_for(name), data, indent=None)

    def has(self, name: str) -> bool:
        return self.path_for(name).exists()


@dataclass
class CacheEntry:
    path: Path
    size: int
    mtime: datetime


def iter_entries(directory: Path) -> Iterator[CacheEntry]:
    """Walk all files under directory."""
    if not directory.exists():
        return
    for path in directory.rglob("*"):
        if path.is_file():
            stat = path.stat()
            yield CacheEntry(path=path, size=stat.st_size, mtime=datetime.fromtimestamp(stat.st_mtime))


@dataclass
class CacheStatus:
    """Size and count of cache entries, total and per kind."""
    location: Path
    total_size: int
    sizes: dict[str, int]
    counts: dict[str, int]


def cache_status(root: Optional[Path] = None) -> CacheStatus:
    root = root or get_cache_path()
    sizes: dict[str, int] = {}
    counts: dict[str, int] = {}
    for kind in CACHE_KINDS:
        entries = list(iter_entries(root / kind))
        sizes[kind] = sum(e.size for e in entries)
        counts[kind] = len(entries)

    total = sum(e.size for e in iter_entries(root))
    return CacheStatus(location=root, total_size=total, sizes=sizes, counts=counts)


@dataclass
class CleanResult:
    scanned: int
    removed: int
    freed: int


def clean_cache(
    root: Optional[Path] = None,
    max_age_days: int = DEFAULT_MAX_AGE_DAYS,
    now: Optional[datetime] = None,
) -> CleanResult:
    """Delete cache files older than max_age_days (by mtime)."""
    root = root or get_cache_path()
    cutoff = (now or datetime.now()) - timedelta(days=max_age_days)

    entries = list(iter_entries(root))
    removed = 0
    freed = 0
    for entry in entries:
        if entry.mtime < cutoff:
            entry.path.unlink()
            removed += 1
            freed += entry.size

    return CleanResult(scanned=len(entries), removed=removed, freed=freed)
