from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any
from urllib.parse import parse_qs

import httpx
import pytest

from turnstile.config import GateSettings, RunContext
from turnstile.github import GitHubClient

EPOCH = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)
OWNER = "pulumi"
BRANCH = "feature/nav"
CURRENT_RUN_ID = 5000


def ts(seconds: int) -> str:
    """ISO timestamp ``seconds`` after a fixed epoch."""
    return (EPOCH + timedelta(seconds=seconds)).strftime("%Y-%m-%dT%H:%M:%SZ")


def at(seconds: int) -> datetime:
    return EPOCH + timedelta(seconds=seconds)


def run_payload(run_id: int, started: int | None, created: int | None = None, repo: str = "pulumi-hugo") -> dict[str, Any]:
    created = started if created is None else created
    return {
        "id": run_id,
        "name": "Build",
        "status": "in_progress",
        "html_url": f"https://github.com/{OWNER}/{repo}/actions/runs/{run_id}",
        "created_at": ts(created if created is not None else 0),
        "run_started_at": ts(started) if started is not None else None,
        "head_branch": BRANCH,
        "head_sha": f"{run_id:040x}",
    }


class FakeGitHub:
    """In-memory stand-in for the Actions endpoints the gate calls."""

    def __init__(self) -> None:
        self.workflows: dict[str, list[dict[str, Any]]] = {}
        self.runs: dict[tuple[str, int], list[dict[str, Any]]] = {}
        self.requests: list[httpx.Request] = []

    def add_workflow(self, repo: str, workflow_id: int, name: str) -> None:
        self.workflows.setdefault(repo, []).append(
            {"id": workflow_id, "name": name, "path": f".github/workflows/{workflow_id}.yml", "state": "active"}
        )

    def add_runs(self, repo: str, workflow_id: int, *runs: dict[str, Any]) -> None:
        self.runs.setdefault((repo, workflow_id), []).extend(runs)

    def paths(self) -> list[str]:
        return [request.url.path for request in self.requests]

    def _page(self, request: httpx.Request, key: str, items: list[dict[str, Any]]) -> httpx.Response:
        query = parse_qs(request.url.query.decode())
        per_page = int(query.get("per_page", ["30"])[0])
        page = int(query.get("page", ["1"])[0])
        start = (page - 1) * per_page
        chunk = items[start:start + per_page]

        headers = {}
        if start + per_page < len(items):
            next_url = request.url.copy_set_param("page", str(page + 1))
            headers["Link"] = f'<{next_url}>; rel="next"'
        return httpx.Response(200, json={"total_count": len(items), key: chunk}, headers=headers)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        parts = request.url.path.strip("/").split("/")
        # [api prefix/]repos/{owner}/{repo}/actions/workflows[/{id}/runs]
        if "repos" in parts:
            parts = parts[parts.index("repos"):]
        if len(parts) < 5 or parts[0] != "repos" or parts[3:5] != ["actions", "workflows"]:
            return httpx.Response(404, json={"message": "Not Found"})

        repo = parts[2]
        if len(parts) == 5:
            if repo not in self.workflows:
                return httpx.Response(404, json={"message": "Not Found"})
            return self._page(request, "workflows", self.workflows[repo])

        workflow_id = int(parts[5])
        query = parse_qs(request.url.query.decode())
        branch = query.get("branch", [None])[0]
        status = query.get("status", [None])[0]
        runs = [
            run
            for run in self.runs.get((repo, workflow_id), [])
            if (branch is None or run["head_branch"] == branch)
            and (status is None or run["status"] == status)
        ]
        return self._page(request, "workflow_runs", runs)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def env() -> dict[str, str]:
    return {
        "GITHUB_TOKEN": "ghp_0123456789abcdef",
        "GITHUB_RUN_ID": str(CURRENT_RUN_ID),
        "GITHUB_WORKFLOW": "Build",
        "GITHUB_REPOSITORY": f"{OWNER}/pulumi-hugo",
        "GITHUB_HEAD_REF": "",
        "GITHUB_REF": f"refs/heads/{BRANCH}",
    }


@pytest.fixture
def context() -> RunContext:
    return RunContext(
        token="ghp_0123456789abcdef",
        run_id=CURRENT_RUN_ID,
        workflow_name="Build",
        owner=OWNER,
        repository="pulumi-hugo",
        branch=BRANCH,
    )


@pytest.fixture
def settings(context: RunContext) -> GateSettings:
    return GateSettings(context=context, poll_interval=60)


@pytest.fixture
def github() -> FakeGitHub:
    fake = FakeGitHub()
    fake.add_workflow("docs", 11, "Build and deploy testing")
    fake.add_workflow("docs", 12, "Lint")
    fake.add_workflow("pulumi-hugo", 21, "Build")
    return fake


@pytest.fixture
def client_for(settings: GateSettings):
    def make(fake: FakeGitHub) -> GitHubClient:
        return GitHubClient.from_settings(settings, transport=fake.transport())

    return make
