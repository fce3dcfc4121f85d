"""npm registry lookups with a read-through cache."""

from typing import Any, Optional

import httpx

from ..cache import PackageCache
from .base import get_json, make_client

NPM_REGISTRY_URL = "https://registry.npmjs.org"


class NpmRegistry:
    """Fetch `<pkg>/latest` documents from the npm registry."""

    def __init__(self, client: Optional[httpx.Client] = None, cache: Optional[PackageCache] = None):
        self.client = make_client(client)
        self.cache = cache or PackageCache("npm")

    def fetch(self, name: str) -> dict[str, Any]:
        """Fetch the latest version document, bypassing the cache."""
        return get_json(self.client, f"{NPM_REGISTRY_URL}/{name}/latest", "npm registry", name)

    def lookup(self, name: str) -> tuple[dict[str, Any], bool]:
        """Return (document, was_cached). Fresh documents are cached."""
        cached = self.cache.get(name)
        if cached is not None:
            return cached, True

        info = self.fetch(name)
        self.cache.put(name, info)
        return info, False
