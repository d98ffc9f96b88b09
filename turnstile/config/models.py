"""Configuration models."""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_POLL_INTERVAL = 60.0


class RunContext(BaseModel):
    """Identity of the workflow run doing the waiting."""

    token: Optional[str] = Field(None, description="GitHub API token", repr=False)
    run_id: int = Field(..., description="ID of the current workflow run")
    workflow_name: str = Field(..., description="Display name of the current workflow")
    owner: str = Field(..., description="Owner of the monitored repositories")
    repository: str = Field(..., description="Repository the current run belongs to")
    branch: str = Field(..., description="Branch to scope competing runs to")

    class Config:
        """Pydantic config."""

        frozen = True

    @field_validator("workflow_name", "owner", "branch")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be empty")
        return v


class MonitoredRepo(BaseModel):
    """A repository whose in-progress runs compete with the current run."""

    name: str = Field(..., description="Repository name under the context owner")
    workflow_name: Optional[str] = Field(
        None,
        description="Workflow display name to look up (default: the current workflow name)",
    )

    class Config:
        """Pydantic config."""

        frozen = True

    def resolve_workflow_name(self, context: RunContext) -> str:
        """Workflow name to look for in this repository."""
        return self.workflow_name or context.workflow_name


def default_repos() -> List[MonitoredRepo]:
    """The companion repository first, then the home repository."""
    return [
        MonitoredRepo(name="docs", workflow_name="Build and deploy testing"),
        MonitoredRepo(name="pulumi-hugo"),
    ]


class GateSettings(BaseModel):
    """Everything the gate needs to run."""

    context: RunContext
    repos: List[MonitoredRepo] = Field(default_factory=default_repos)
    poll_interval: float = Field(DEFAULT_POLL_INTERVAL, description="Seconds between checks", gt=0)
    api_url: str = Field(DEFAULT_API_URL, description="GitHub REST API base URL")
    timeout: float = Field(30.0, description="HTTP timeout in seconds", gt=0)
    per_page: int = Field(100, description="Page size for list calls", ge=1, le=100)

    @field_validator("repos")
    @classmethod
    def exactly_two(cls, v: List[MonitoredRepo]) -> List[MonitoredRepo]:
        """The gate compares a companion repository with the home repository."""
        if len(v) != 2:
            raise ValueError(f"Exactly two repositories must be monitored, got {len(v)}")
        return v

    @property
    def companion_repo(self) -> MonitoredRepo:
        return self.repos[0]

    @property
    def home_repo(self) -> MonitoredRepo:
        """The repository the current run lives in."""
        return self.repos[1]
