"""Tests for payload compression."""

from gg.formatting import (
    ChatSummary,
    detect_chat_provider,
    estimate_tokens,
    format_brew,
    format_chat,
    format_npm,
    format_pr,
    format_repo,
    format_size,
    summarize_chat_response,
    token_cost,
    truncate,
)


NPM_DOC = {
    "name": "prettier",
    "version": "3.3.3",
    "description": "Prettier is an opinionated code formatter",
    "license": "MIT",
    "homepage": "https://prettier.io",
    "dependencies": {},
    "readme": "x" * 5000,
    "maintainers": [{"name": "a"}, {"name": "b"}],
}


class TestHelpers:
    """Tests for small formatting helpers."""

    def test_token_costs(self) -> None:
        assert token_cost("npm") == 18
        assert token_cost("brew") == 22
        assert token_cost("git") == 12
        assert token_cost("pip") == 20

    def test_truncate(self) -> None:
        assert truncate("short", 10) == "short"
        assert truncate("abcdefghij", 10) == "abcdefghij"
        assert truncate("abcdefghijk", 10) == "abcdefghij..."

    def test_format_size(self) -> None:
        assert format_size(0) == "0 B"
        assert format_size(1023) == "1023 B"
        assert format_size(1024) == "1.0 KB"
        assert format_size(1536) == "1.5 KB"
        assert format_size(5 * 1024 * 1024) == "5.0 MB"

    def test_estimate_tokens(self) -> None:
        assert estimate_tokens(0) == 0
        assert estimate_tokens(4) == 1
        assert estimate_tokens(5) == 2


class TestPackageFormatting:
    """Tests for npm and brew summaries."""

    def test_npm_summary(self) -> None:
        """The summary keeps name, version, description and endpoint only."""
        lines = format_npm(NPM_DOC)

        assert lines[0] == "📦 prettier@3.3.3"
        assert "   Prettier is an opinionated code formatter" in lines
        assert "   MIT · 0 deps · https://prettier.io" in lines
        assert "🔌 MCP Endpoint: npm:prettier" in lines
        assert "   Token cost: ~18" in lines
        assert not any("xxxx" in line for line in lines)

    def test_npm_function_line(self) -> None:
        lines = format_npm({"name": "lodash", "version": "4.17.21"}, fn="debounce")

        assert "🎯 Function: debounce" in lines

    def test_npm_missing_fields(self) -> None:
        """Missing optional fields are simply omitted."""
        lines = format_npm({"name": "tiny", "version": "1.0.0"})

        assert lines[0] == "📦 tiny@1.0.0"
        assert not any("deps" in line for line in lines)

    def test_brew_not_installed_shows_hint(self) -> None:
        info = {"name": "jq", "desc": "Lightweight JSON processor", "versions": {"stable": "1.7.1"}}
        lines = format_brew(info, installed=False)

        assert lines[0] == "🍺 jq@1.7.1 (not installed)"
        assert "   Install: brew install jq" in lines
        assert "   Or use: gg brew -i jq" in lines
        assert "   Token cost: ~22" in lines

    def test_brew_installed(self) -> None:
        info = {"name": "jq", "versions": {"stable": "1.7.1"}}
        lines = format_brew(info, installed=True)

        assert lines[0] == "🍺 jq@1.7.1 (✓ installed)"
        assert not any("Install:" in line for line in lines)


class TestGitHubFormatting:
    """Tests for repository and PR summaries."""

    def test_repo_summary(self) -> None:
        data = {
            "full_name": "cli/cli",
            "description": "GitHub's official command line tool",
            "stargazers_count": 37000,
            "forks_count": 5800,
            "open_issues_count": 700,
            "language": "Go",
            "default_branch": "trunk",
            "license": {"spdx_id": "MIT"},
            "pushed_at": "2024-05-01T12:00:00Z",
        }
        lines = format_repo(data)

        assert lines[0] == "📦 cli/cli"
        assert "   ★ 37000 | forks 5800 | open issues 700" in lines
        assert "   Go · branch trunk · MIT · pushed 2024-05-01" in lines
        assert lines[-1] == "  https://api.github.com/repos/cli/cli"

    def test_pr_summary_truncates_body(self) -> None:
        pr = {
            "number": 42,
            "title": "Add feature",
            "author": {"login": "octocat"},
            "state": "OPEN",
            "headRefName": "gg-ask-1",
            "baseRefName": "main",
            "additions": 10,
            "deletions": 2,
            "changedFiles": 3,
            "body": "b" * 600,
            "url": "https://github.com/o/r/pull/42",
        }
        lines = format_pr(pr)

        assert lines[0] == "PR #42: Add feature"
        assert lines[1] == "Author: octocat | State: OPEN"
        assert lines[2] == "Branch: gg-ask-1 → main"
        assert lines[3] == "Changes: +10 -2 (3 files)"
        assert "b" * 500 + "..." in lines
        assert lines[-1] == "URL: https://github.com/o/r/pull/42"


class TestChatCompression:
    """Tests for LLM chat response compression."""

    def test_detect_provider(self) -> None:
        assert detect_chat_provider({"type": "message", "content": []}) == "anthropic"
        assert detect_chat_provider({"choices": []}) == "openai"
        assert detect_chat_provider({"message": {}, "done": True}) == "ollama"
        assert detect_chat_provider({"foo": 1}) == "unknown"

    def test_anthropic_response(self) -> None:
        payload = {
            "type": "message",
            "model": "claude-sonnet-4-5",
            "content": [
                {"type": "text", "text": "Here:\n```python:app.py\nprint(1)\n```"},
                {"type": "tool_use", "name": "x"},
            ],
            "stop_reason": "end_turn",
            "usage": {"input_tokens": 12, "output_tokens": 34},
        }
        summary = summarize_chat_response(payload)

        assert summary.provider == "anthropic"
        assert summary.model == "claude-sonnet-4-5"
        assert summary.stop_reason == "end_turn"
        assert summary.input_tokens == 12
        assert summary.output_tokens == 34
        assert summary.files == ["app.py"]

    def test_openai_response(self) -> None:
        payload = {
            "model": "gpt-4o",
            "choices": [{"message": {"content": "hello"}, "finish_reason": "stop"}],
            "usage": {"prompt_tokens": 5, "completion_tokens": 1},
        }
        summary = summarize_chat_response(payload)

        assert summary.provider == "openai"
        assert summary.text == "hello"
        assert summary.stop_reason == "stop"
        assert (summary.input_tokens, summary.output_tokens) == (5, 1)

    def test_ollama_response(self) -> None:
        payload = {
            "model": "qwen2.5-coder",
            "message": {"role": "assistant", "content": "hi"},
            "done": True,
            "prompt_eval_count": 7,
            "eval_count": 3,
        }
        summary = summarize_chat_response(payload)

        assert summary.provider == "ollama"
        assert summary.text == "hi"
        assert summary.stop_reason == "stop"
        assert summary.output_tokens == 3

    def test_format_chat_reports_savings(self) -> None:
        summary = ChatSummary(provider="openai", model="gpt-4o", text="a" * 1000, stop_reason="stop")
        lines = format_chat(summary, raw_size=5000, text_limit=100)

        assert lines[0] == "🤖 openai gpt-4o (stop)"
        assert "a" * 100 + "..." in lines
        assert lines[-1].startswith("📉 5000 → ")
        assert lines[-1].endswith("tokens)")

    def test_format_chat_without_raw_size(self) -> None:
        lines = format_chat(ChatSummary(provider="ollama", text="ok"))

        assert lines == ["🤖 ollama", "", "ok"]
