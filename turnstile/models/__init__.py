"""Data models for GitHub Actions objects."""

from .run import RunRecord
from .workflow import WorkflowRef

__all__ = ["RunRecord", "WorkflowRef"]
