"""Append-only log of gg invocations at <home>/logs/commands.log.

Each line is `timestamp | command | args`. `gg logs` reads it back.
"""

import os
import shlex
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from pydantic import BaseModel

from .config import LOGS_DIR, get_gg_home

COMMAND_LOG_FILE = "commands.log"
MAX_LOG_BYTES = 10 * 1024 * 1024

# Any non-empty value turns the log off
NO_LOG_ENV = "GG_NO_LOG"

SEPARATOR = " | "

# Verbs whose first argument is a sub-command (e.g. "cache clean")
_TWO_WORD_COMMANDS = {"cache", "chain", "config", "logs"}


class LogEntry(BaseModel):
    """One logged invocation."""

    timestamp: str
    command: str
    args: str = ""

    def to_line(self) -> str:
        return SEPARATOR.join([self.timestamp, self.command, self.args]) + "\n"

    @classmethod
    def from_line(cls, line: str) -> Optional["LogEntry"]:
        fields = line.rstrip("\n").split(SEPARATOR, 2)
        if len(fields) < 2:
            return None
        return cls(timestamp=fields[0], command=fields[1], args=fields[2] if len(fields) == 3 else "")


def get_logs_path(home: Optional[Path] = None) -> Path:
    return (home or get_gg_home()) / LOGS_DIR


def is_logging_enabled() -> bool:
    return not os.environ.get(NO_LOG_ENV)


class CommandLog:
    """The log file plus a single `.1` backup once it outgrows MAX_LOG_BYTES."""

    def __init__(self, home: Optional[Path] = None):
        self.dir = get_logs_path(home)
        self.path = self.dir / COMMAND_LOG_FILE

    @property
    def backup_path(self) -> Path:
        return self.dir / f"{COMMAND_LOG_FILE}.1"

    def _rotate_if_full(self) -> None:
        if self.path.exists() and self.path.stat().st_size > MAX_LOG_BYTES:
            self.path.replace(self.backup_path)

    def append(self, entry: LogEntry) -> None:
        self.dir.mkdir(parents=True, exist_ok=True)
        self._rotate_if_full()
        with self.path.open("a", encoding="utf-8") as f:
            f.write(entry.to_line())

    def entries(self) -> list[LogEntry]:
        if not self.path.exists():
            return []
        with self.path.open("r", encoding="utf-8") as f:
            parsed = (LogEntry.from_line(line) for line in f if line.strip())
            return [entry for entry in parsed if entry is not None]

    def clear(self) -> bool:
        """Delete the log. False if there was nothing to delete."""
        if not self.path.exists():
            return False
        self.path.unlink()
        return True


def log_command(command: str, args: list[str], home: Optional[Path] = None) -> None:
    """Record one invocation unless GG_NO_LOG is set.

    Args containing spaces are quoted so the line stays readable.
    """
    if not is_logging_enabled():
        return

    entry = LogEntry(
        timestamp=datetime.now().isoformat(timespec="seconds"),
        command=command,
        args=" ".join(shlex.quote(a) if " " in a else a for a in args),
    )
    CommandLog(home).append(entry)


def split_command(argv: list[str]) -> tuple[str, list[str]]:
    """Split argv (without the program name) into command and remaining args."""
    if not argv:
        return "unknown", []

    head, rest = argv[0], argv[1:]
    if head in _TWO_WORD_COMMANDS and rest and not rest[0].startswith("-"):
        return f"{head} {rest[0]}", rest[1:]
    return head, rest


def log_from_cli() -> None:
    """Log sys.argv. Called from the CLI callback for every command."""
    if len(sys.argv) > 1:
        log_command(*split_command(sys.argv[1:]))
