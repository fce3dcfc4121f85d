"""Key-value storage for license records and usage counters."""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from typing import Callable
from urllib.parse import quote

import httpx

from ..errors import GGError

CLOUDFLARE_API_URL = "https://api.cloudflare.com/client/v4"


class KVError(GGError):
    """A KV backend request failed."""


class KeyValueStore(ABC):
    """Minimal string KV interface (Workers KV semantics)."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the value for key, or None if missing or expired."""

    @abstractmethod
    def put(self, key: str, value: str, ttl: int | None = None) -> None:
        """Store value under key, optionally expiring after ttl seconds."""

    @abstractmethod
    def list(self, prefix: str = "") -> list[str]:
        """Return all keys starting with prefix."""


class MemoryKeyValueStore(KeyValueStore):
    """Process-local store for development and tests."""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._data: dict[str, tuple[str, float | None]] = {}
        self._clock = clock

    def _live(self, key: str) -> str | None:
        item = self._data.get(key)
        if item is None:
            return None
        value, expires_at = item
        if expires_at is not None and self._clock() >= expires_at:
            del self._data[key]
            return None
        return value

    def get(self, key: str) -> str | None:
        return self._live(key)

    def put(self, key: str, value: str, ttl: int | None = None) -> None:
        expires_at = self._clock() + ttl if ttl else None
        self._data[key] = (value, expires_at)

    def list(self, prefix: str = "") -> list[str]:
        return sorted(k for k in list(self._data) if k.startswith(prefix) and self._live(k) is not None)


class CloudflareKVStore(KeyValueStore):
    """Workers KV namespace accessed through the Cloudflare REST API."""

    def __init__(
        self,
        account_id: str,
        namespace_id: str,
        api_token: str,
        client: httpx.Client | None = None,
    ):
        self.base_url = f"{CLOUDFLARE_API_URL}/accounts/{account_id}/storage/kv/namespaces/{namespace_id}"
        self.client = client or httpx.Client(timeout=15.0)
        self.api_token = api_token

    def _build_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.api_token}"}

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            response = self.client.request(method, f"{self.base_url}{path}", headers=self._build_headers(), **kwargs)
        except httpx.HTTPError as e:
            raise KVError(f"Cloudflare KV request failed: {e}") from e
        return response

    def get(self, key: str) -> str | None:
        response = self._request("GET", f"/values/{quote(key, safe='')}")
        if response.status_code == 404:
            return None
        if response.status_code != 200:
            raise KVError("Cloudflare KV read failed", extra_info={"key": key, "status": response.status_code})
        return response.text

    def put(self, key: str, value: str, ttl: int | None = None) -> None:
        params = {"expiration_ttl": ttl} if ttl else None
        response = self._request(
            "PUT",
            f"/values/{quote(key, safe='')}",
            params=params,
            content=value.encode("utf-8"),
        )
        if response.status_code != 200:
            raise KVError("Cloudflare KV write failed", extra_info={"key": key, "status": response.status_code})

    def list(self, prefix: str = "") -> list[str]:
        keys: list[str] = []
        cursor = ""
        while True:
            params = {"prefix": prefix}
            if cursor:
                params["cursor"] = cursor
            response = self._request("GET", "/keys", params=params)
            if response.status_code != 200:
                raise KVError("Cloudflare KV list failed", extra_info={"prefix": prefix, "status": response.status_code})

            body = response.json()
            keys.extend(item["name"] for item in body.get("result", []))
            cursor = (body.get("result_info") or {}).get("cursor") or ""
            if not cursor:
                return keys
