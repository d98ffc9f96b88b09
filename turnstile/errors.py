"""Error types raised by turnstile."""

from typing import Optional


class TurnstileError(Exception):
    """Base class for all turnstile errors."""


class ConfigError(TurnstileError):
    """Missing or invalid configuration."""


class LookupMissError(TurnstileError):
    """Something that must exist in a fetched listing was not there."""


class WorkflowNotFoundError(LookupMissError):
    """No workflow in the repository has the requested display name."""

    def __init__(self, repo: str, workflow_name: str) -> None:
        self.repo = repo
        self.workflow_name = workflow_name
        super().__init__(f"No workflow named {workflow_name!r} in repository {repo}")


class CurrentRunNotFoundError(LookupMissError):
    """The current run is missing from its own repository's in-progress runs."""

    def __init__(self, repo: str, run_id: int) -> None:
        self.repo = repo
        self.run_id = run_id
        super().__init__(f"Run {run_id} is not among the in-progress runs of {repo}")


class GitHubAPIError(TurnstileError):
    """A GitHub REST call failed."""

    def __init__(self, message: str, status_code: Optional[int] = None, url: Optional[str] = None) -> None:
        self.status_code = status_code
        self.url = url
        prefix = f"GitHub API error {status_code}" if status_code else "GitHub API request failed"
        target = f" ({url})" if url else ""
        super().__init__(f"{prefix}{target}: {message}")
