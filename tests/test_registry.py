"""Tests for the npm, Homebrew and GitHub clients."""

from pathlib import Path

import httpx
import pytest

from gg.cache import PackageCache
from gg.errors import NotFoundError, RegistryError
from gg.registry import BrewRegistry, GitHubClient, NpmRegistry


class CountingHandler:
    """MockTransport handler that records requested URLs."""

    def __init__(self, status: int = 200, payload=None):
        self.status = status
        self.payload = payload if payload is not None else {}
        self.urls: list[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.urls.append(str(request.url))
        return httpx.Response(self.status, json=self.payload)


def client_for(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


class TestNpmRegistry:
    """Tests for NpmRegistry."""

    def test_lookup_caches(self, tmp_path: Path) -> None:
        handler = CountingHandler(payload={"name": "prettier", "version": "3.3.3"})
        registry = NpmRegistry(client_for(handler), PackageCache("npm", tmp_path))

        info, cached = registry.lookup("prettier")
        assert info["version"] == "3.3.3"
        assert cached is False

        info, cached = registry.lookup("prettier")
        assert cached is True
        assert handler.urls == ["https://registry.npmjs.org/prettier/latest"]

    def test_not_found(self, tmp_path: Path) -> None:
        registry = NpmRegistry(client_for(CountingHandler(status=404)), PackageCache("npm", tmp_path))

        with pytest.raises(NotFoundError):
            registry.lookup("no-such-package-xyz")
        assert not registry.cache.has("no-such-package-xyz")

    def test_server_error(self, tmp_path: Path) -> None:
        registry = NpmRegistry(client_for(CountingHandler(status=503)), PackageCache("npm", tmp_path))

        with pytest.raises(RegistryError, match="503"):
            registry.lookup("prettier")

    def test_non_object_body(self, tmp_path: Path) -> None:
        registry = NpmRegistry(client_for(CountingHandler(payload=[1, 2])), PackageCache("npm", tmp_path))

        with pytest.raises(RegistryError, match="JSON object"):
            registry.fetch("prettier")


class TestBrewRegistry:
    """Tests for BrewRegistry without a local brew binary."""

    def test_falls_back_to_api(self, tmp_path: Path) -> None:
        handler = CountingHandler(payload={"name": "jq", "versions": {"stable": "1.7.1"}})
        registry = BrewRegistry(client_for(handler), PackageCache("brew", tmp_path), brew_bin="gg-test-no-brew")

        info, installed, cached = registry.lookup("jq")

        assert info["versions"]["stable"] == "1.7.1"
        assert installed is False
        assert cached is False
        assert handler.urls == ["https://formulae.brew.sh/api/formula/jq.json"]

        _, _, cached = registry.lookup("jq")
        assert cached is True
        assert len(handler.urls) == 1

    def test_missing_brew_means_not_installed(self, tmp_path: Path) -> None:
        registry = BrewRegistry(client_for(CountingHandler()), PackageCache("brew", tmp_path), brew_bin="gg-test-no-brew")

        assert registry.local_info("jq") is None
        assert registry.is_installed("jq") is False
        assert registry.install("jq") is False


class TestGitHubClient:
    """Tests for GitHubClient."""

    def test_get_repo_with_token(self) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers.get("authorization")
            return httpx.Response(200, json={"full_name": "cli/cli"})

        client = GitHubClient(client_for(handler), token="ghp_test")

        assert client.get_repo("cli/cli") == {"full_name": "cli/cli"}
        assert seen["url"] == "https://api.github.com/repos/cli/cli"
        assert seen["auth"] == "Bearer ghp_test"

    def test_anonymous(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert "authorization" not in request.headers
            return httpx.Response(404, json={"message": "Not Found"})

        with pytest.raises(NotFoundError):
            GitHubClient(client_for(handler)).get_repo("o/missing")
