"""HTTP clients for npm, Homebrew and GitHub."""
from .npm import NpmRegistry
from .brew import BrewRegistry
from .github import GitHubClient

__all__ = ["NpmRegistry", "BrewRegistry", "GitHubClient"]
