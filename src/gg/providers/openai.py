"""OpenAI Chat Completions provider."""

from typing import Any, Optional

import httpx

from ..errors import ProviderError
from .base import Completion, LLMProvider, TextCallback, iter_sse_data

OPENAI_URL = "https://api.openai.com/v1/chat/completions"


def _messages(prompt: str, system_prompt: Optional[str]) -> list[dict[str, str]]:
    messages: list[dict[str, str]] = []
    if system_prompt:
        messages.append({"role": "system", "content": system_prompt})
    messages.append({"role": "user", "content": prompt})
    return messages


class OpenAIProvider(LLMProvider):
    name = "OpenAI"

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
            "Authorization": f"Bearer {self.api_key}",
        }

    def _body(self, prompt: str, system_prompt: Optional[str], stream: bool) -> dict[str, Any]:
        body: dict[str, Any] = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
            "messages": _messages(prompt, system_prompt),
        }
        if stream:
            body["stream"] = True
            body["stream_options"] = {"include_usage": True}
        return body

    def complete(self, prompt: str, system_prompt: Optional[str] = None) -> Completion:
        data = self._post(OPENAI_URL, self._body(prompt, system_prompt, False), self._headers())
        choices = data.get("choices") or []
        message = choices[0].get("message", {}) if choices else {}
        usage = data.get("usage") or {}
        return Completion(
            text=message.get("content") or "",
            input_tokens=int(usage.get("prompt_tokens", 0) or 0),
            output_tokens=int(usage.get("completion_tokens", 0) or 0),
            model=data.get("model", self.model),
        )

    def stream(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        on_text: Optional[TextCallback] = None,
    ) -> Completion:
        lines = self._stream_lines(OPENAI_URL, self._body(prompt, system_prompt, True), self._headers())
        return parse_openai_stream(lines, on_text, self.model)


def parse_openai_stream(lines, on_text: Optional[TextCallback] = None, model: str = "") -> Completion:
    """Collect content deltas and the final usage chunk from an OpenAI SSE stream."""
    parts: list[str] = []
    completion = Completion(text="", model=model)

    for chunk in iter_sse_data(lines):
        for choice in chunk.get("choices") or []:
            delta = choice.get("delta") or {}
            text = delta.get("content")
            if text:
                parts.append(text)
                if on_text:
                    on_text(text)
        usage = chunk.get("usage")
        if isinstance(usage, dict):
            completion.input_tokens = int(usage.get("prompt_tokens", 0) or 0)
            completion.output_tokens = int(usage.get("completion_tokens", 0) or 0)

    completion.text = "".join(parts)
    return completion
