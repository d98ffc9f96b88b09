"""Configuration management for turnstile."""

from .loader import Config, derive_branch, load_context, load_file, load_settings
from .models import GateSettings, MonitoredRepo, RunContext, default_repos

__all__ = [
    "Config",
    "GateSettings",
    "MonitoredRepo",
    "RunContext",
    "default_repos",
    "derive_branch",
    "load_context",
    "load_file",
    "load_settings",
]
