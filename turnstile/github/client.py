"""Async client for the GitHub Actions REST API."""

from typing import Any, Dict, List, Optional

import httpx
from rich.console import Console
from rich.markup import escape

from ..config.models import DEFAULT_API_URL, GateSettings
from ..errors import GitHubAPIError, WorkflowNotFoundError
from ..models import RunRecord, WorkflowRef

console = Console()

API_VERSION = "2022-11-28"
IN_PROGRESS = "in_progress"


class GitHubClient:
    """Thin wrapper over the Actions endpoints used by the gate."""

    def __init__(
        self,
        token: Optional[str] = None,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
        per_page: int = 100,
        user_agent: str = "turnstile/0.1 (workflow run gate)",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            token: Token sent as a bearer credential; anonymous when None
            api_url: REST API base URL
            timeout: Per-request timeout in seconds
            per_page: Page size for list endpoints
            user_agent: User-Agent header value
            transport: Custom httpx transport (for testing)
        """
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": API_VERSION,
            "User-Agent": user_agent,
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self.per_page = per_page
        self._client = httpx.AsyncClient(
            base_url=api_url.rstrip("/"),
            headers=headers,
            timeout=timeout,
            follow_redirects=True,
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls,
        settings: GateSettings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "GitHubClient":
        """Create a client for the gate's context and API settings."""
        return cls(
            token=settings.context.token,
            api_url=settings.api_url,
            timeout=settings.timeout,
            per_page=settings.per_page,
            transport=transport,
        )

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _get(self, url: str, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        try:
            response = await self._client.get(url, params=params)
        except httpx.HTTPError as e:
            raise GitHubAPIError(str(e) or type(e).__name__, url=url) from e

        if response.is_error:
            message = response.reason_phrase
            try:
                body = response.json()
                if isinstance(body, dict) and body.get("message"):
                    message = body["message"]
            except ValueError:
                pass
            raise GitHubAPIError(message, status_code=response.status_code, url=str(response.url))

        return response

    async def paginate(self, path: str, key: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """Collect ``key`` items from every page, following ``Link: rel="next"``."""
        query = dict(params or {})
        query.setdefault("per_page", self.per_page)

        items: List[Dict[str, Any]] = []
        url: Optional[str] = path
        while url:
            response = await self._get(url, params=query)
            payload = response.json()
            if not isinstance(payload, dict) or not isinstance(payload.get(key), list):
                raise GitHubAPIError(f"Unexpected response shape, missing {key!r}", url=str(response.url))
            items.extend(payload[key])

            # The next link already carries the query string.
            url = response.links.get("next", {}).get("url")
            query = None

        return items

    async def list_workflows(self, owner: str, repo: str) -> List[WorkflowRef]:
        """List the workflows defined in a repository."""
        items = await self.paginate(f"/repos/{owner}/{repo}/actions/workflows", "workflows")
        return [WorkflowRef.model_validate(item) for item in items]

    async def find_workflow(self, owner: str, repo: str, name: str) -> WorkflowRef:
        """Find a workflow by exact, case-sensitive display name."""
        for workflow in await self.list_workflows(owner, repo):
            if workflow.name == name:
                return workflow
        raise WorkflowNotFoundError(f"{owner}/{repo}", name)

    async def list_workflow_runs(
        self,
        owner: str,
        repo: str,
        workflow_id: int,
        branch: str,
        status: str = IN_PROGRESS,
    ) -> List[RunRecord]:
        """List every run of a workflow with the given status on a branch."""
        items = await self.paginate(
            f"/repos/{owner}/{repo}/actions/workflows/{workflow_id}/runs",
            "workflow_runs",
            params={"branch": branch, "status": status},
        )
        console.print(
            f"[dim]{owner}/{repo}: {len(items)} {status} run(s) of workflow {workflow_id} on {escape(branch)}[/dim]"
        )
        return [RunRecord.model_validate(item) for item in items]
