"""GitHub REST lookups."""

import os
from typing import Any, Optional

import httpx

from .base import get_json, make_client

GITHUB_API_URL = "https://api.github.com"


class GitHubClient:
    """Thin client for the GitHub repository endpoint."""

    def __init__(self, client: Optional[httpx.Client] = None, token: Optional[str] = None):
        self.client = make_client(client)
        self.token = token if token is not None else os.environ.get("GITHUB_TOKEN", "")

    def _build_headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def get_repo(self, full_name: str) -> dict[str, Any]:
        """Fetch `/repos/{owner}/{repo}`."""
        return get_json(
            self.client,
            f"{GITHUB_API_URL}/repos/{full_name}",
            "GitHub API",
            full_name,
            headers=self._build_headers(),
        )
