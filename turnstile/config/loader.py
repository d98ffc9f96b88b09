"""Configuration loader."""

import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from pydantic import ValidationError

from ..errors import ConfigError
from .models import GateSettings, RunContext

REF_PREFIX = "refs/heads/"

# The run context always comes from the environment.
FILE_KEYS = frozenset({"poll_interval", "repos", "api_url", "timeout", "per_page"})


def derive_branch(head_ref: Optional[str], ref: Optional[str]) -> str:
    """Branch of the current run.

    Pull request runs carry the branch in ``GITHUB_HEAD_REF``; push runs only
    have the full ref.
    """
    if head_ref:
        return head_ref
    if not ref:
        raise ConfigError("Neither GITHUB_HEAD_REF nor GITHUB_REF is set")
    return ref.replace(REF_PREFIX, "", 1) if ref.startswith(REF_PREFIX) else ref


def load_context(environ: Optional[Mapping[str, str]] = None) -> RunContext:
    """Read the current run's identity from the Actions environment."""
    env = os.environ if environ is None else environ

    missing = [
        name
        for name in ("GITHUB_RUN_ID", "GITHUB_WORKFLOW", "GITHUB_REPOSITORY")
        if not env.get(name)
    ]
    if missing:
        raise ConfigError(f"Missing environment variables: {', '.join(missing)}")

    try:
        run_id = int(env["GITHUB_RUN_ID"], 10)
    except ValueError:
        raise ConfigError(f"GITHUB_RUN_ID is not a number: {env['GITHUB_RUN_ID']!r}")

    owner, sep, repository = env["GITHUB_REPOSITORY"].partition("/")
    if not owner or not repository or sep != "/":
        raise ConfigError("GITHUB_REPOSITORY must be in owner/repo format")

    branch = derive_branch(env.get("GITHUB_HEAD_REF"), env.get("GITHUB_REF"))

    try:
        return RunContext(
            token=env.get("GITHUB_TOKEN") or None,
            run_id=run_id,
            workflow_name=env["GITHUB_WORKFLOW"],
            owner=owner,
            repository=repository,
            branch=branch,
        )
    except ValidationError as e:
        raise ConfigError(f"Invalid run context: {e}")


def load_file(config_path: Path) -> Dict[str, Any]:
    """Load optional gate settings from a YAML file."""
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with open(config_path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file must contain a mapping: {config_path}")
    return data


def load_settings(
    config_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
    **overrides: Any,
) -> GateSettings:
    """Build gate settings from the environment, a config file and overrides.

    Later sources win: environment, then file, then keyword overrides.
    """
    env = os.environ if environ is None else environ
    values: Dict[str, Any] = {"context": load_context(env)}

    if env.get("GITHUB_API_URL"):
        values["api_url"] = env["GITHUB_API_URL"]
    if env.get("TURNSTILE_POLL_INTERVAL"):
        values["poll_interval"] = env["TURNSTILE_POLL_INTERVAL"]

    if config_path is not None:
        file_values = load_file(config_path)
        unknown = sorted(str(key) for key in set(file_values) - FILE_KEYS)
        if unknown:
            raise ConfigError(f"Unsupported keys in {config_path}: {', '.join(unknown)}")
        values.update(file_values)

    values.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return GateSettings(**values)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}")


class Config:
    """Configuration manager."""

    def __init__(
        self,
        config_path: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
        **overrides: Any,
    ) -> None:
        self.config_path = config_path
        self.environ = environ
        self.overrides = overrides
        self._settings: Optional[GateSettings] = None

    @property
    def settings(self) -> GateSettings:
        """Get loaded settings."""
        if self._settings is None:
            self._settings = load_settings(self.config_path, self.environ, **self.overrides)
        return self._settings

    @property
    def context(self) -> RunContext:
        return self.settings.context
