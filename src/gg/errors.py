"""Exceptions raised by gg and secret masking for printed errors."""

import re

ExtraInfoType = dict[str, str | int | None]

# Patterns for secrets that must never be echoed back to a terminal or agent
_SECRET_PATTERNS = [
    (re.compile(r"sk-ant-[a-zA-Z0-9_-]+"), "sk-ant-***"),
    (re.compile(r"sk-(?!ant-)[a-zA-Z0-9_-]{8,}"), "sk-***"),
    (re.compile(r"mcpb_[a-zA-Z0-9]+"), "mcpb_***"),
    (re.compile(r"gg_pro_[a-zA-Z0-9_]+"), "gg_pro_***"),
]


def sanitize(message: str) -> str:
    """Mask API keys and license keys inside a message."""
    for pattern, replacement in _SECRET_PATTERNS:
        message = pattern.sub(replacement, message)
    return message


class GGError(Exception):
    """Base error for gg."""

    def __init__(self, message: str, extra_info: ExtraInfoType | None = None):
        msg = message
        if extra_info:
            msg += " (" + ", ".join(f"{key}: {value}" for key, value in extra_info.items() if value is not None) + ")"
        super().__init__(msg)


class ConfigError(GGError):
    """Missing or unreadable configuration or secrets."""


class RegistryError(GGError):
    """A package registry or GitHub API request failed."""

    def __init__(self, source: str, message: str, status: int | None = None):
        super().__init__(f"{source}: {message}", extra_info={"status": status})


class NotFoundError(RegistryError):
    """The requested package, formula or repository does not exist."""

    def __init__(self, source: str, name: str):
        super().__init__(source, f"not found: {name}", status=404)
        self.name = name


class ProviderError(GGError):
    """An LLM provider request failed."""

    def __init__(self, provider: str, message: str, status: int | None = None):
        super().__init__(f"{provider} API error: {message}", extra_info={"status": status})
        self.status = status


class GitError(GGError):
    """A git or gh subprocess failed."""
