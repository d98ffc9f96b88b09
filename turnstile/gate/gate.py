"""Check-and-wait loop that serializes runs of a workflow on a branch."""

import asyncio
from typing import Any, Awaitable, Callable, List, Optional

import pendulum
from rich.console import Console
from rich.markup import escape

from ..config import GateSettings, MonitoredRepo
from ..errors import CurrentRunNotFoundError
from ..github import GitHubClient
from .decision import GateDecision, RepoCompetition, competing_runs

console = Console()

SleepFn = Callable[[float], Awaitable[None]]


async def gather_or_cancel(*aws: Awaitable[Any]) -> List[Any]:
    """Like asyncio.gather, but cancel the remaining awaitables once one fails.

    The first failure in argument order is raised.
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    _, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
    for task in pending:
        task.cancel()
    if pending:
        await asyncio.wait(pending)

    errors = [task.exception() for task in tasks if not task.cancelled()]
    for error in errors:
        if error is not None:
            raise error
    return [task.result() for task in tasks]


class RunGate:
    """Blocks until no earlier in-progress run of the workflow remains.

    Every check looks up both workflows, lists their in-progress runs on the
    current branch, and anchors on the current run's creation time in the
    home repository. Nothing is carried over between checks. Errors are not
    caught here.
    """

    def __init__(
        self,
        settings: GateSettings,
        client: GitHubClient,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        self.settings = settings
        self.client = client
        self._sleep = sleep
        self.checks = 0

    async def check(self) -> GateDecision:
        """Run one check without waiting."""
        ctx = self.settings.context
        companion = self.settings.companion_repo
        home = self.settings.home_repo

        companion_workflow, home_workflow = await gather_or_cancel(
            self._find_workflow(companion),
            self._find_workflow(home),
        )

        companion_runs, home_runs = await gather_or_cancel(
            self.client.list_workflow_runs(ctx.owner, companion.name, companion_workflow.id, ctx.branch),
            self.client.list_workflow_runs(ctx.owner, home.name, home_workflow.id, ctx.branch),
        )

        anchor = next((run for run in home_runs if run.id == ctx.run_id), None)
        if anchor is None:
            raise CurrentRunNotFoundError(f"{ctx.owner}/{home.name}", ctx.run_id)

        self.checks += 1
        return GateDecision(
            workflow_name=ctx.workflow_name,
            branch=ctx.branch,
            anchor=anchor,
            repos=[
                RepoCompetition(
                    repo=f"{ctx.owner}/{companion.name}",
                    workflow=companion_workflow,
                    in_progress=len(companion_runs),
                    competing=competing_runs(companion_runs, anchor.created_at),
                ),
                RepoCompetition(
                    repo=f"{ctx.owner}/{home.name}",
                    workflow=home_workflow,
                    in_progress=len(home_runs),
                    competing=competing_runs(home_runs, anchor.created_at),
                ),
            ],
        )

    async def wait(self) -> GateDecision:
        """Check repeatedly until clear, sleeping between checks."""
        while True:
            decision = await self.check()
            report(decision)

            if decision.clear:
                return decision

            console.print(
                f"[dim]{pendulum.now().to_datetime_string()} "
                f"next check in {self.settings.poll_interval:g}s[/dim]"
            )
            await self._sleep(self.settings.poll_interval)

    async def _find_workflow(self, repo: MonitoredRepo):
        ctx = self.settings.context
        return await self.client.find_workflow(ctx.owner, repo.name, repo.resolve_workflow_name(ctx))


def report(decision: GateDecision, out: Optional[Console] = None) -> None:
    """Print the outcome of a check."""
    out = out or console
    if decision.clear:
        out.print("[green]Continuing.[/green]")
        return

    for repo in decision.repos:
        out.print(
            f"Found {len(repo.competing)} other {escape(decision.workflow_name)} job(s) "
            f"running on branch {escape(decision.branch)}."
        )
    out.print(f"[yellow]Waiting for {escape(decision.blocking.html_url)} to complete before continuing.[/yellow]")
