"""Pydantic models for gg configuration and local records."""

from pydantic import BaseModel, Field
from typing import Literal, Optional

from . import __version__


PRO_KEY_PREFIX = "gg_pro_"

ProviderName = Literal["anthropic", "openai", "ollama"]


# === Config ===

class GGSection(BaseModel):
    """The [gg] table of config.toml."""

    version: str = __version__
    tier: Literal["free", "pro"] = "free"


class APISection(BaseModel):
    """The [api] table of config.toml."""

    provider: ProviderName = "anthropic"
    claude_model: str = "claude-sonnet-4-5-20250929"
    claude_temperature: float = 0.7
    maaza_model: str = "maaza-slm-360m"
    openai_model: str = "gpt-4o"
    ollama_model: str = "qwen2.5-coder"
    ollama_url: str = "http://localhost:11434"
    max_tokens: int = 4096


class GitHubSection(BaseModel):
    """The [github] table of config.toml."""

    default_branch: str = "main"


class GGConfig(BaseModel):
    """Plain (unencrypted) configuration for gg."""

    gg: GGSection = Field(default_factory=GGSection)
    api: APISection = Field(default_factory=APISection)
    github: GitHubSection = Field(default_factory=GitHubSection)


class Secrets(BaseModel):
    """API keys and license, stored age-encrypted under a [keys] table."""

    claude_api_key: str = ""
    openai_api_key: str = ""
    maaza_api_key: str = ""
    pro_license_key: str = ""

    @property
    def is_pro(self) -> bool:
        return bool(self.pro_license_key) and self.pro_license_key.startswith(PRO_KEY_PREFIX)


# === Usage ===

class UsageStats(BaseModel):
    """Monthly usage counters kept in stats.json."""

    month: str = ""
    ask_count: int = 0
    edit_count: int = 0
    run_count: int = 0
    total_tokens: int = 0
    input_tokens: int = 0
    output_tokens: int = 0
    estimated_cost: float = 0.0


# === Chains ===

class ToolRef(BaseModel):
    """A `type:name` reference to a tool, e.g. npm:prettier."""

    type: str
    name: str

    @classmethod
    def parse(cls, ref: str) -> Optional["ToolRef"]:
        """Parse `type:name`, splitting on the first colon. None if malformed."""
        tool_type, sep, name = ref.partition(":")
        if not sep or not tool_type or not name:
            return None
        return cls(type=tool_type, name=name)

    def __str__(self) -> str:
        return f"{self.type}:{self.name}"
