"""Shared request helper for the registry clients."""

from typing import Any, Optional

import httpx

from ..errors import NotFoundError, RegistryError

DEFAULT_TIMEOUT = 30.0
USER_AGENT = "gg-cli"


def make_client(client: Optional[httpx.Client] = None) -> httpx.Client:
    """Return the given client, or a new one with gg's defaults."""
    if client is not None:
        return client
    return httpx.Client(
        timeout=DEFAULT_TIMEOUT,
        follow_redirects=True,
        headers={"User-Agent": USER_AGENT},
    )


def get_json(
    client: httpx.Client,
    url: str,
    source: str,
    name: str,
    headers: Optional[dict[str, str]] = None,
) -> dict[str, Any]:
    """GET url and decode a JSON object.

    Raises:
        NotFoundError: On 404.
        RegistryError: On transport errors, other non-200 codes or bad JSON.
    """
    try:
        response = client.get(url, headers=headers)
    except httpx.HTTPError as e:
        raise RegistryError(source, f"request failed: {e}") from e

    if response.status_code == 404:
        raise NotFoundError(source, name)
    if response.status_code != 200:
        raise RegistryError(source, "unexpected response", status=response.status_code)

    try:
        data = response.json()
    except ValueError as e:
        raise RegistryError(source, f"failed to parse response: {e}") from e

    if not isinstance(data, dict):
        raise RegistryError(source, "expected a JSON object")
    return data
