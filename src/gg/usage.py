"""Monthly usage counters and token cost estimates (stats.json)."""
from datetime import datetime
from pathlib import Path
from typing import Literal, Optional

from pydantic import ValidationError

from .config import get_stats_path
from .models import UsageStats
from .storage import read_json_or_none, write_json

# Claude Sonnet pricing in dollars per million tokens
INPUT_PRICE_PER_M = 3.0
OUTPUT_PRICE_PER_M = 15.0

CommandType = Literal["ask", "edit", "run"]


def current_month(now: Optional[datetime] = None) -> str:
    return (now or datetime.now()).strftime("%Y-%m")


def estimate_cost(input_tokens: int, output_tokens: int) -> float:
    return input_tokens / 1_000_000 * INPUT_PRICE_PER_M + output_tokens / 1_000_000 * OUTPUT_PRICE_PER_M


class UsageTracker:
    """Read-modify-write access to stats.json. Not safe for concurrent writers."""

    def __init__(self, path: Optional[Path] = None):
        self.path = path or get_stats_path()

    def load(self) -> Optional[UsageStats]:
        """Stored stats, or None if nothing has been recorded yet."""
        data = read_json_or_none(self.path)
        if not isinstance(data, dict):
            return None
        try:
            return UsageStats.model_validate(data)
        except ValidationError:
            return None

    def _current(self, now: Optional[datetime] = None) -> UsageStats:
        month = current_month(now)
        stats = self.load()
        if stats is None or stats.month != month:
            stats = UsageStats(month=month)
        return stats

    def record_command(self, command: CommandType, now: Optional[datetime] = None) -> UsageStats:
        stats = self._current(now)
        if command == "ask":
            stats.ask_count += 1
        elif command == "edit":
            stats.edit_count += 1
        elif command == "run":
            stats.run_count += 1
        write_json(self.path, stats)
        return stats

    def record_tokens(self, input_tokens: int, output_tokens: int, now: Optional[datetime] = None) -> UsageStats:
        stats = self._current(now)
        stats.input_tokens += input_tokens
        stats.output_tokens += output_tokens
        stats.total_tokens = stats.input_tokens + stats.output_tokens
        stats.estimated_cost = estimate_cost(stats.input_tokens, stats.output_tokens)
        write_json(self.path, stats)
        return stats
