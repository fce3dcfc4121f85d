"""Extract `language:path` fenced code blocks from model replies and apply them."""

import re
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

# ```python:src/app.py
# ...
# ```
CODE_BLOCK_RE = re.compile(r"```[a-z]*:([^\n]+)\n([\s\S]*?)```")


@dataclass
class FileChange:
    """A file the model asked to write."""
    path: str
    content: str


def extract_code_blocks(response: str) -> dict[str, str]:
    """Map each labeled path to its content.

    Later blocks for the same path replace earlier ones; dict order follows
    first appearance.
    """
    files: dict[str, str] = {}
    for match in CODE_BLOCK_RE.finditer(response):
        path = match.group(1).strip()
        if path:
            files[path] = match.group(2)
    return files


def is_safe_path(path: str) -> bool:
    """True if path is relative and stays inside the working tree."""
    if not path or "\\" in path:
        return False
    pure = PurePosixPath(path)
    if pure.is_absolute():
        return False
    return ".." not in pure.parts


def plan_changes(response: str) -> tuple[list[FileChange], list[str]]:
    """Split extracted blocks into writable changes and rejected paths."""
    changes: list[FileChange] = []
    rejected: list[str] = []
    for path, content in extract_code_blocks(response).items():
        if is_safe_path(path):
            changes.append(FileChange(path=path, content=content))
        else:
            rejected.append(path)
    return changes, rejected


def write_changes(changes: list[FileChange], root: Path) -> tuple[list[str], list[tuple[str, str]]]:
    """Write changes below root, creating parent directories.

    Returns:
        (written paths, [(path, error message)] for failures)
    """
    written: list[str] = []
    failed: list[tuple[str, str]] = []

    for change in changes:
        target = root / change.path
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(change.content, encoding="utf-8")
        except OSError as e:
            failed.append((change.path, str(e)))
            continue
        written.append(change.path)

    return written, failed
