"""Run gate: wait for earlier in-progress runs to finish."""

from .decision import GateDecision, RepoCompetition, competing_runs
from .gate import RunGate, report

__all__ = ["GateDecision", "RepoCompetition", "RunGate", "competing_runs", "report"]
