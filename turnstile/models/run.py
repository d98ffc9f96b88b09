"""Workflow run models."""

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from .base import ApiModel, parse_timestamp


class RunRecord(ApiModel):
    """A single workflow run as listed by the Actions API."""

    id: int = Field(..., description="Run ID")
    name: Optional[str] = Field(None, description="Workflow name of the run")
    status: Optional[str] = Field(None, description="Run status (queued, in_progress, completed)")
    html_url: str = Field(..., description="Link to the run on github.com")
    created_at: datetime = Field(..., description="When the run was created")
    run_started_at: Optional[datetime] = Field(None, description="When the current attempt started")
    head_branch: Optional[str] = Field(None, description="Branch the run belongs to")
    head_sha: Optional[str] = Field(None, description="Commit the run is building")

    @field_validator("created_at", "run_started_at", mode="before")
    @classmethod
    def parse_times(cls, v):
        """Accept ISO-8601 strings as returned by GitHub."""
        return parse_timestamp(v)

    def started_before(self, moment: datetime) -> bool:
        """Whether this run started strictly before ``moment``."""
        return self.run_started_at is not None and self.run_started_at < moment
