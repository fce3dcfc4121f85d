"""Ollama local chat provider (newline-delimited JSON streaming)."""

from typing import Any, Optional

import httpx

from .base import Completion, LLMProvider, TextCallback, iter_ndjson
from .openai import _messages

DEFAULT_OLLAMA_URL = "http://localhost:11434"


class OllamaProvider(LLMProvider):
    name = "Ollama"

    def __init__(
        self,
        model: str,
        endpoint: str = DEFAULT_OLLAMA_URL,
        temperature: float = 0.7,
        max_tokens: int = 4096,
        client: Optional[httpx.Client] = None,
    ):
        super().__init__(model, temperature, max_tokens, client)
        self.url = endpoint.rstrip("/") + "/api/chat"

    def _body(self, prompt: str, system_prompt: Optional[str], stream: bool) -> dict[str, Any]:
        return {
            "model": self.model,
            "messages": _messages(prompt, system_prompt),
            "stream": stream,
            "options": {"temperature": self.temperature, "num_predict": self.max_tokens},
        }

    def complete(self, prompt: str, system_prompt: Optional[str] = None) -> Completion:
        data = self._post(self.url, self._body(prompt, system_prompt, False), {})
        message = data.get("message") or {}
        return Completion(
            text=message.get("content", ""),
            input_tokens=int(data.get("prompt_eval_count", 0) or 0),
            output_tokens=int(data.get("eval_count", 0) or 0),
            model=data.get("model", self.model),
        )

    def stream(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        on_text: Optional[TextCallback] = None,
    ) -> Completion:
        lines = self._stream_lines(self.url, self._body(prompt, system_prompt, True), {})
        return parse_ollama_stream(lines, on_text, self.model)


def parse_ollama_stream(lines, on_text: Optional[TextCallback] = None, model: str = "") -> Completion:
    """Collect message content and final counters from an Ollama NDJSON stream."""
    parts: list[str] = []
    completion = Completion(text="", model=model)

    for item in iter_ndjson(lines):
        message = item.get("message") or {}
        text = message.get("content", "")
        if text:
            parts.append(text)
            if on_text:
                on_text(text)
        if item.get("done"):
            completion.input_tokens = int(item.get("prompt_eval_count", 0) or 0)
            completion.output_tokens = int(item.get("eval_count", 0) or 0)
            break

    completion.text = "".join(parts)
    return completion
