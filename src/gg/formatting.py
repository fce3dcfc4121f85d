"""Compress registry, GitHub and LLM payloads into terse labeled lines.

Every formatter takes a decoded JSON payload (dict) and returns a list of
output lines. Nothing here does I/O, so the same functions serve the CLI
commands, chains and tests.
"""
from dataclasses import dataclass, field
from typing import Any, Optional

from .codeblocks import extract_code_blocks

# Approximate token cost of a compressed summary, per tool type
TOKEN_COSTS = {
    "npm": 18,
    "brew": 22,
    "git": 12,
}
DEFAULT_TOKEN_COST = 20

PR_BODY_LIMIT = 500
CHAT_TEXT_LIMIT = 400


def token_cost(tool_type: str) -> int:
    """Approximate token cost for a tool summary of this type."""
    return TOKEN_COSTS.get(tool_type, DEFAULT_TOKEN_COST)


def truncate(s: str, max_len: int) -> str:
    """Cut s to max_len characters, appending '...' if it was cut."""
    if len(s) <= max_len:
        return s
    return s[:max_len] + "..."


def format_size(size: int) -> str:
    """Human readable size with 1024 units (e.g. '1.5 KB')."""
    unit = 1024
    if size < unit:
        return f"{size} B"
    div, exp = unit, 0
    n = size // unit
    while n >= unit:
        div *= unit
        exp += 1
        n //= unit
    return f"{size / div:.1f} {'KMGTPE'[exp]}B"


def estimate_tokens(chars: int) -> int:
    """Rough token estimate for a character count (4 characters per token)."""
    return (chars + 3) // 4


def _str(data: dict, key: str) -> str:
    value = data.get(key)
    return value if isinstance(value, str) else ""


# === Package registries ===

def format_npm(info: dict[str, Any], fn: Optional[str] = None) -> list[str]:
    """Summarize an npm `/<pkg>/latest` document."""
    name = _str(info, "name")
    version = _str(info, "version")
    desc = _str(info, "description")

    lines = [f"📦 {name}@{version}"]
    if desc:
        lines.append(f"   {desc}")

    details = []
    license_name = info.get("license")
    if isinstance(license_name, str) and license_name:
        details.append(license_name)
    deps = info.get("dependencies")
    if isinstance(deps, dict):
        details.append(f"{len(deps)} deps")
    homepage = _str(info, "homepage")
    if homepage:
        details.append(homepage)
    if details:
        lines.append("   " + " · ".join(details))

    if fn:
        lines.append("")
        lines.append(f"🎯 Function: {fn}")

    lines.append("")
    lines.append(f"🔌 MCP Endpoint: npm:{name}")
    lines.append(f"   Token cost: ~{token_cost('npm')}")
    return lines


def brew_version(info: dict[str, Any]) -> str:
    versions = info.get("versions")
    if isinstance(versions, dict):
        stable = versions.get("stable")
        if isinstance(stable, str):
            return stable
    return ""


def format_brew(info: dict[str, Any], installed: bool, show_install_hint: bool = True) -> list[str]:
    """Summarize a Homebrew formula document (API or `brew info --json=v2`)."""
    name = _str(info, "name")
    desc = _str(info, "desc")
    status = "✓ installed" if installed else "not installed"

    lines = [f"🍺 {name}@{brew_version(info)} ({status})"]
    if desc:
        lines.append(f"   {desc}")

    if not installed and show_install_hint:
        lines.append("")
        lines.append(f"   Install: brew install {name}")
        lines.append(f"   Or use: gg brew -i {name}")

    lines.append("")
    lines.append(f"🔌 MCP Endpoint: brew:{name}")
    lines.append(f"   Token cost: ~{token_cost('brew')}")
    return lines


# === GitHub ===

def format_repo(data: dict[str, Any]) -> list[str]:
    """Summarize a GitHub `/repos/{owner}/{repo}` document."""
    full_name = _str(data, "full_name")
    lines = [f"📦 {full_name}"]

    desc = _str(data, "description")
    if desc:
        lines.append(f"   {desc}")

    stars = data.get("stargazers_count", 0)
    forks = data.get("forks_count", 0)
    issues = data.get("open_issues_count", 0)
    lines.append(f"   ★ {stars} | forks {forks} | open issues {issues}")

    meta = []
    language = _str(data, "language")
    if language:
        meta.append(language)
    branch = _str(data, "default_branch")
    if branch:
        meta.append(f"branch {branch}")
    license_info = data.get("license")
    if isinstance(license_info, dict) and license_info.get("spdx_id"):
        meta.append(license_info["spdx_id"])
    pushed = _str(data, "pushed_at")
    if pushed:
        meta.append(f"pushed {pushed[:10]}")
    if meta:
        lines.append("   " + " · ".join(meta))

    lines.append("")
    lines.append("MCP endpoint:")
    lines.append(f"  https://api.github.com/repos/{full_name}")
    return lines


def format_pr(pr: dict[str, Any]) -> list[str]:
    """Summarize `gh pr view --json ...` output."""
    author = pr.get("author") or {}
    login = author.get("login", "") if isinstance(author, dict) else ""

    lines = [
        f"PR #{pr.get('number', '?')}: {_str(pr, 'title')}",
        f"Author: {login} | State: {_str(pr, 'state')}",
        f"Branch: {_str(pr, 'headRefName')} → {_str(pr, 'baseRefName')}",
        f"Changes: +{pr.get('additions', 0)} -{pr.get('deletions', 0)} ({pr.get('changedFiles', 0)} files)",
    ]

    body = _str(pr, "body").strip()
    if body:
        lines.append("")
        lines.append("Description:")
        lines.append(truncate(body, PR_BODY_LIMIT))

    lines.append("")
    lines.append(f"URL: {_str(pr, 'url')}")
    return lines


# === LLM chat responses ===

@dataclass
class ChatSummary:
    """The parts of an LLM chat response worth keeping."""
    provider: str
    model: str = ""
    text: str = ""
    stop_reason: str = ""
    input_tokens: int = 0
    output_tokens: int = 0
    files: list[str] = field(default_factory=list)


def detect_chat_provider(payload: dict[str, Any]) -> str:
    """Guess which API produced a chat response."""
    if payload.get("type") == "message" or isinstance(payload.get("content"), list):
        return "anthropic"
    if "choices" in payload:
        return "openai"
    if "message" in payload or "response" in payload or "done" in payload:
        return "ollama"
    return "unknown"


def summarize_chat_response(payload: dict[str, Any]) -> ChatSummary:
    """Pull provider, model, text, stop reason and usage out of a chat response."""
    provider = detect_chat_provider(payload)
    summary = ChatSummary(provider=provider, model=_str(payload, "model"))
    usage = payload.get("usage") if isinstance(payload.get("usage"), dict) else {}

    if provider == "anthropic":
        summary.text = "".join(
            block.get("text", "")
            for block in payload.get("content", [])
            if isinstance(block, dict) and block.get("type") == "text"
        )
        summary.stop_reason = _str(payload, "stop_reason")
        summary.input_tokens = int(usage.get("input_tokens", 0) or 0)
        summary.output_tokens = int(usage.get("output_tokens", 0) or 0)
    elif provider == "openai":
        choices = payload.get("choices") or []
        first = choices[0] if choices and isinstance(choices[0], dict) else {}
        message = first.get("message") or {}
        summary.text = message.get("content") or ""
        summary.stop_reason = first.get("finish_reason") or ""
        summary.input_tokens = int(usage.get("prompt_tokens", 0) or 0)
        summary.output_tokens = int(usage.get("completion_tokens", 0) or 0)
    elif provider == "ollama":
        message = payload.get("message")
        if isinstance(message, dict):
            summary.text = message.get("content") or ""
        else:
            summary.text = _str(payload, "response")
        summary.stop_reason = _str(payload, "done_reason") or ("stop" if payload.get("done") else "")
        summary.input_tokens = int(payload.get("prompt_eval_count", 0) or 0)
        summary.output_tokens = int(payload.get("eval_count", 0) or 0)

    summary.files = list(extract_code_blocks(summary.text))
    return summary


def format_chat(summary: ChatSummary, raw_size: int = 0, text_limit: int = CHAT_TEXT_LIMIT) -> list[str]:
    """Render a ChatSummary as terse lines."""
    header = f"🤖 {summary.provider}"
    if summary.model:
        header += f" {summary.model}"
    if summary.stop_reason:
        header += f" ({summary.stop_reason})"
    lines = [header]

    if summary.input_tokens or summary.output_tokens:
        lines.append(f"   tokens: {summary.input_tokens} in / {summary.output_tokens} out")

    text = summary.text.strip()
    if text:
        lines.append("")
        lines.append(truncate(text, text_limit))

    if summary.files:
        lines.append("")
        lines.append(f"📝 {len(summary.files)} file(s): {', '.join(summary.files)}")

    if raw_size:
        compact = sum(len(line) + 1 for line in lines)
        lines.append("")
        lines.append(f"📉 {raw_size} → {compact} chars (~{estimate_tokens(compact)} tokens)")

    return lines
