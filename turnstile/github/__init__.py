"""GitHub REST API access."""

from .client import IN_PROGRESS, GitHubClient

__all__ = ["GitHubClient", "IN_PROGRESS"]
