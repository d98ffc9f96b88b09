"""Workflow definitions."""

from typing import Optional

from pydantic import Field

from .base import ApiModel


class WorkflowRef(ApiModel):
    """A workflow defined in a repository."""

    id: int = Field(..., description="Workflow ID")
    name: str = Field(..., description="Workflow display name")
    path: Optional[str] = Field(None, description="Path of the workflow file")
    state: Optional[str] = Field(None, description="Workflow state (active, disabled_manually, ...)")
