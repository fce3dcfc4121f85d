"""Agent-to-agent: compress LLM chat API responses."""
import json
import sys
from pathlib import Path
from typing import Optional

import typer

from ..config import load_all
from ..console import echo_lines, fail
from ..errors import ConfigError, ProviderError
from ..codeblocks import extract_code_blocks
from ..formatting import CHAT_TEXT_LIMIT, ChatSummary, format_chat, summarize_chat_response
from ..providers import build_provider
from .ask import PROVIDERS


def a2a(
    source: Optional[Path] = typer.Argument(None, help="Response JSON file ('-' or omitted reads stdin)"),
    ask: Optional[str] = typer.Option(None, "--ask", help="Send this prompt and compress the reply"),
    provider: Optional[str] = typer.Option(None, "--provider", "-p", help="anthropic, openai or ollama"),
    limit: int = typer.Option(CHAT_TEXT_LIMIT, "--limit", "-n", help="Max characters of reply text"),
) -> None:
    """Compress an Anthropic/OpenAI/Ollama chat response into a few lines.

    Examples:
        curl ... | gg a2a
        gg a2a response.json
        gg a2a --ask "summarize REST vs gRPC" -p ollama
    """
    if ask:
        echo_lines(format_chat(_ask(ask, provider), text_limit=limit))
        return

    if source is None or str(source) == "-":
        raw = sys.stdin.read()
    else:
        if not source.is_file():
            fail(f"File not found: {source}")
        raw = source.read_text(encoding="utf-8")

    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as e:
        fail("Input is not JSON", e)
    if not isinstance(payload, dict):
        fail("Expected a JSON object")

    summary = summarize_chat_response(payload)
    echo_lines(format_chat(summary, raw_size=len(raw), text_limit=limit))


def _ask(prompt: str, provider: Optional[str]) -> ChatSummary:
    if provider and provider not in PROVIDERS:
        fail(f"Unknown provider: {provider}")
    try:
        config, secrets = load_all()
        llm = build_provider(config, secrets, provider=provider)
        completion = llm.complete(prompt)
    except (ConfigError, ProviderError) as e:
        fail("Request failed", e)

    return ChatSummary(
        provider=provider or config.api.provider,
        model=completion.model,
        text=completion.text,
        input_tokens=completion.input_tokens,
        output_tokens=completion.output_tokens,
        files=list(extract_code_blocks(completion.text)),
    )
