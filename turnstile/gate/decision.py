"""Results of a single gate check."""

from datetime import datetime
from typing import Iterable, List, Optional

from pydantic import BaseModel, Field

from ..models import RunRecord, WorkflowRef


def competing_runs(runs: Iterable[RunRecord], anchor_time: datetime) -> List[RunRecord]:
    """Runs that started strictly before ``anchor_time``, newest ID first."""
    ordered = sorted(runs, key=lambda run: run.id, reverse=True)
    return [run for run in ordered if run.started_before(anchor_time)]


class RepoCompetition(BaseModel):
    """Competing runs found in one monitored repository."""

    repo: str = Field(..., description="owner/name of the repository")
    workflow: WorkflowRef = Field(..., description="Workflow whose runs were listed")
    in_progress: int = Field(0, description="In-progress runs on the branch, before filtering")
    competing: List[RunRecord] = Field(default_factory=list, description="Runs started before the anchor")


class GateDecision(BaseModel):
    """Outcome of one check: clear, or blocked by earlier runs."""

    workflow_name: str = Field(..., description="Current workflow name")
    branch: str = Field(..., description="Branch the check was scoped to")
    anchor: RunRecord = Field(..., description="The current run")
    repos: List[RepoCompetition] = Field(default_factory=list, description="Companion repo first, home repo last")

    @property
    def competing(self) -> List[RunRecord]:
        """All competing runs, companion repository first."""
        return [run for repo in self.repos for run in repo.competing]

    @property
    def blocking(self) -> Optional[RunRecord]:
        """The run reported as the one being waited on.

        This is the first entry of the concatenated lists, not the most
        recent run across both repositories.
        """
        competing = self.competing
        return competing[0] if competing else None

    @property
    def clear(self) -> bool:
        return not self.competing
