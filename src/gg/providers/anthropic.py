"""Anthropic Messages API provider."""

from typing import Any, Optional

import httpx

from ..errors import ProviderError
from .base import Completion, LLMProvider, TextCallback, iter_sse_data

ANTHROPIC_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_VERSION = "2023-06-01"


class AnthropicProvider(LLMProvider):
    name = "Claude"

    def __init__(
        self,
        api_key: str,
        model: str,
        temperature: float = 0.7,
        max_tokens: int = 4096,
        client: Optional[httpx.Client] = None,
    ):
        if not api_key:
            raise ProviderError(self.name, "API key not configured")
        super().__init__(model, temperature, max_tokens, client)
        self.api_key = api_key

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "x-api-key": self.api_key,
            "anthropic-version": ANTHROPIC_VERSION,
        }

    def _body(self, prompt: str, system_prompt: Optional[str], stream: bool) -> dict[str, Any]:
        body: dict[str, Any] = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system_prompt:
            body["system"] = system_prompt
        if stream:
            body["stream"] = True
        return body

    def complete(self, prompt: str, system_prompt: Optional[str] = None) -> Completion:
        data = self._post(ANTHROPIC_URL, self._body(prompt, system_prompt, False), self._headers())
        text = "".join(
            block.get("text", "")
            for block in data.get("content", [])
            if isinstance(block, dict) and block.get("type") == "text"
        )
        usage = data.get("usage") or {}
        return Completion(
            text=text,
            input_tokens=int(usage.get("input_tokens", 0) or 0),
            output_tokens=int(usage.get("output_tokens", 0) or 0),
            model=data.get("model", self.model),
        )

    def stream(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        on_text: Optional[TextCallback] = None,
    ) -> Completion:
        lines = self._stream_lines(ANTHROPIC_URL, self._body(prompt, system_prompt, True), self._headers())
        return parse_anthropic_stream(lines, on_text, self.model)


def parse_anthropic_stream(lines, on_text: Optional[TextCallback] = None, model: str = "") -> Completion:
    """Collect text deltas and usage from an Anthropic SSE stream."""
    parts: list[str] = []
    completion = Completion(text="", model=model)

    for event in iter_sse_data(lines):
        event_type = event.get("type")
        if event_type == "content_block_delta":
            delta = event.get("delta") or {}
            if delta.get("type") == "text_delta":
                text = delta.get("text", "")
                parts.append(text)
                if on_text:
                    on_text(text)
        elif event_type == "message_start":
            message = event.get("message") or {}
            usage = message.get("usage") or event.get("usage") or {}
            completion.input_tokens = int(usage.get("input_tokens", 0) or 0) or completion.input_tokens
            completion.model = message.get("model", completion.model)
        elif event_type == "message_delta":
            usage = event.get("usage") or {}
            completion.output_tokens = int(usage.get("output_tokens", 0) or 0) or completion.output_tokens

    completion.text = "".join(parts)
    return completion
