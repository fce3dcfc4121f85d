"""Homebrew formula lookups: local `brew` first, formulae.brew.sh as fallback."""

import json
import subprocess
from typing import Any, Optional

import httpx

from ..cache import PackageCache
from .base import get_json, make_client

BREW_API_URL = "https://formulae.brew.sh/api/formula"


def _formula_installed(formula: dict[str, Any]) -> bool:
    installed = formula.get("installed")
    return isinstance(installed, list) and len(installed) > 0


class BrewRegistry:
    """Look up Homebrew formulae."""

    def __init__(
        self,
        client: Optional[httpx.Client] = None,
        cache: Optional[PackageCache] = None,
        brew_bin: str = "brew",
    ):
        self.client = make_client(client)
        self.cache = cache or PackageCache("brew")
        self.brew_bin = brew_bin

    def local_info(self, name: str) -> Optional[dict[str, Any]]:
        """`brew info <name> --json=v2` first formula, or None if brew can't answer."""
        try:
            result = subprocess.run(
                [self.brew_bin, "info", name, "--json=v2"],
                capture_output=True,
                text=True,
            )
        except FileNotFoundError:
            return None
        if result.returncode != 0:
            return None

        try:
            data = json.loads(result.stdout)
        except json.JSONDecodeError:
            return None

        formulae = data.get("formulae") if isinstance(data, dict) else None
        if isinstance(formulae, list) and formulae and isinstance(formulae[0], dict):
            return formulae[0]
        return None

    def fetch(self, name: str) -> dict[str, Any]:
        return get_json(self.client, f"{BREW_API_URL}/{name}.json", "Homebrew API", name)

    def lookup(self, name: str) -> tuple[dict[str, Any], bool, bool]:
        """Return (formula, installed, was_cached)."""
        local = self.local_info(name)
        if local is not None:
            return local, _formula_installed(local), False

        cached = self.cache.get(name)
        if cached is not None:
            return cached, False, True

        info = self.fetch(name)
        self.cache.put(name, info)
        return info, False, False

    def is_installed(self, name: str) -> bool:
        local = self.local_info(name)
        return local is not None and _formula_installed(local)

    def install(self, name: str) -> bool:
        """Run `brew install`, streaming its output. True on success."""
        try:
            result = subprocess.run([self.brew_bin, "install", name])
        except FileNotFoundError:
            return False
        return result.returncode == 0
