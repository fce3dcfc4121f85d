"""LLM provider interface and stream parsing helpers."""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from contextlib import nullcontext
from typing import Any, Callable, ContextManager, Iterable, Iterator, Optional

import httpx

from ..errors import ProviderError

REQUEST_TIMEOUT = 120.0
STREAM_TIMEOUT = 300.0

TextCallback = Callable[[str], None]


@dataclass
class Completion:
    """Text and token usage of one model reply."""
    text: str
    input_tokens: int = 0
    output_tokens: int = 0
    model: str = ""


def iter_sse_data(lines: Iterable[str]) -> Iterator[dict[str, Any]]:
    """Yield decoded `data:` payloads from a Server-Sent-Events stream.

    Stops at `[DONE]`; lines that are not data or not JSON are skipped.
    """
    for line in lines:
        line = line.strip()
        if not line.startswith("data:"):
            continue
        data = line[len("data:"):].strip()
        if data == "[DONE]":
            break
        try:
            event = json.loads(data)
        except json.JSONDecodeError:
            continue
        if isinstance(event, dict):
            yield event


def iter_ndjson(lines: Iterable[str]) -> Iterator[dict[str, Any]]:
    """Yield objects from a newline-delimited JSON stream, skipping bad lines."""
    for line in lines:
        line = line.strip()
        if not line:
            continue
        try:
            item = json.loads(line)
        except json.JSONDecodeError:
            continue
        if isinstance(item, dict):
            yield item


class LLMProvider(ABC):
    """Base interface for the chat providers gg can forward to."""

    name: str = "provider"

    def __init__(self, model: str, temperature: float, max_tokens: int, client: Optional[httpx.Client] = None):
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._client = client

    def _http(self, timeout: float) -> ContextManager[httpx.Client]:
        if self._client is not None:
            return nullcontext(self._client)
        return httpx.Client(timeout=timeout)

    def _check(self, response: httpx.Response) -> None:
        if response.status_code != 200:
            response.read()
            raise ProviderError(self.name, f"({response.status_code}): {response.text}", status=response.status_code)

    def _post(self, url: str, body: dict[str, Any], headers: dict[str, str]) -> dict[str, Any]:
        try:
            with self._http(REQUEST_TIMEOUT) as client:
                response = client.post(url, json=body, headers=headers)
        except httpx.HTTPError as e:
            raise ProviderError(self.name, str(e)) from e
        self._check(response)
        try:
            return response.json()
        except ValueError as e:
            raise ProviderError(self.name, f"invalid JSON response: {e}") from e

    def _stream_lines(self, url: str, body: dict[str, Any], headers: dict[str, str]) -> Iterator[str]:
        try:
            with self._http(STREAM_TIMEOUT) as client:
                with client.stream("POST", url, json=body, headers=headers) as response:
                    self._check(response)
                    yield from response.iter_lines()
        except httpx.HTTPError as e:
            raise ProviderError(self.name, str(e)) from e

    @abstractmethod
    def complete(self, prompt: str, system_prompt: Optional[str] = None) -> Completion:
        """Generate a full reply for the prompt."""

    @abstractmethod
    def stream(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        on_text: Optional[TextCallback] = None,
    ) -> Completion:
        """Stream a reply, calling on_text with each fragment as it arrives."""
