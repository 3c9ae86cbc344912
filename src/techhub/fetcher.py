"""GitHub data fetching via REST API."""

from typing import Optional

import httpx

from techhub.config import DEFAULT_GITHUB_API_URL
from techhub.errors import GitHubError
from techhub.models import IssueSummary, Organization, Repository

MAX_ISSUES = 20
ISSUE_BODY_LIMIT = 500


def truncate(text: Optional[str], limit: int = ISSUE_BODY_LIMIT) -> str:
    """Cut ``text`` to ``limit`` characters, marking the cut with an ellipsis."""
    if not text:
        return ""
    if len(text) <= limit:
        return text
    return text[:limit].rstrip() + "…"


class GitHubFetcher:
    """Fetches repositories, organizations and issues from the GitHub REST API."""

    def __init__(
        self, token: Optional[str] = None, base_url: str = DEFAULT_GITHUB_API_URL
    ) -> None:
        self.token = token
        self.base_url = base_url
        self._client: Optional[httpx.AsyncClient] = None
        self._saml_fallback = False  # True if we dropped auth due to SAML

    # ── HTTP plumbing ─────────────────────────────────────────────────────

    @property
    def headers(self) -> dict[str, str]:
        h: dict[str, str] = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self.token and not self._saml_fallback:
            h["Authorization"] = f"Bearer {self.token}"
        return h

    async def _client_instance(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=self.headers,
                timeout=30.0,
            )
        return self._client

    async def _rebuild_client_without_auth(self) -> None:
        """Drop auth and rebuild client for SAML-protected public repos."""
        if self._client:
            await self._client.aclose()
            self._client = None
        self._saml_fallback = True
        await self._client_instance()

    async def _get(self, path: str, **kwargs) -> httpx.Response:  # type: ignore[no-untyped-def]
        """GET with automatic SAML fallback and rate-limit awareness."""
        client = await self._client_instance()
        resp = await client.get(path, **kwargs)
        if resp.status_code == 403 and "SAML" in resp.text:
            await self._rebuild_client_without_auth()
            client = await self._client_instance()
            resp = await client.get(path, **kwargs)
        if resp.status_code == 403 and "rate limit" in resp.text.lower():
            remaining = resp.headers.get("x-ratelimit-remaining", "0")
            if self.is_unauthenticated:
                hint = (
                    "Running unauthenticated (60 req/hour). "
                    "Sign in with GitHub to get 5 000 req/hour."
                )
            else:
                hint = (
                    f"Authenticated rate limit hit (remaining: {remaining}). "
                    "Wait a few minutes and retry."
                )
            raise httpx.HTTPStatusError(
                f"GitHub API rate limit exceeded. {hint}",
                request=resp.request,
                response=resp,
            )
        return resp

    @property
    def is_unauthenticated(self) -> bool:
        """True if no token is in use (none given, or SAML fallback)."""
        return not self.token or self._saml_fallback

    def _require_token(self) -> None:
        if not self.token:
            raise GitHubError("GitHub authentication required", status_code=401)

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    # ── Repositories ──────────────────────────────────────────────────────

    async def fetch_repo_info(self, owner: str, repo: str) -> Repository:
        """Fetch repository metadata."""
        resp = await self._get(f"/repos/{owner}/{repo}")
        resp.raise_for_status()
        return Repository.model_validate(resp.json())

    async def search_repositories(
        self, query: str, sort: str = "stars", per_page: int = 50
    ) -> list[Repository]:
        """Search public repositories, best matches by ``sort`` first."""
        if sort not in ("stars", "updated", "forks"):
            sort = "stars"
        resp = await self._get(
            "/search/repositories",
            params={
                "q": query,
                "sort": sort,
                "order": "desc",
                "per_page": str(per_page),
            },
        )
        resp.raise_for_status()
        return [Repository.model_validate(item) for item in resp.json().get("items", [])]

    async def fetch_user_repositories(
        self,
        visibility: str = "all",
        sort: str = "updated",
        direction: str = "desc",
    ) -> list[Repository]:
        """Repositories of the authenticated user."""
        self._require_token()
        resp = await self._get(
            "/user/repos",
            params={
                "visibility": visibility,
                "sort": sort,
                "direction": direction,
                "per_page": "100",
            },
        )
        resp.raise_for_status()
        return [Repository.model_validate(item) for item in resp.json()]

    async def fetch_user_organizations(self) -> list[Organization]:
        """Organizations the authenticated user belongs to."""
        self._require_token()
        resp = await self._get("/user/orgs", params={"per_page": "100"})
        resp.raise_for_status()
        return [Organization.model_validate(item) for item in resp.json()]

    async def fetch_org_repositories(
        self,
        org: str,
        type: str = "all",
        sort: str = "updated",
        direction: str = "desc",
    ) -> list[Repository]:
        """Repositories of an organization."""
        resp = await self._get(
            f"/orgs/{org}/repos",
            params={
                "type": type,
                "sort": sort,
                "direction": direction,
                "per_page": "100",
            },
        )
        resp.raise_for_status()
        return [Repository.model_validate(item) for item in resp.json()]

    # ── Issues ────────────────────────────────────────────────────────────

    async def fetch_open_issues(
        self, owner: str, repo: str, limit: int = MAX_ISSUES
    ) -> list[IssueSummary]:
        """Fetch the most recently updated open issues (excludes PRs)."""
        limit = min(limit, MAX_ISSUES)
        if limit <= 0:
            return []
        resp = await self._get(
            f"/repos/{owner}/{repo}/issues",
            params={
                "state": "open",
                "sort": "updated",
                "direction": "desc",
                # PRs come back from this endpoint too; over-fetch and filter
                "per_page": "50",
            },
        )
        resp.raise_for_status()
        issues: list[IssueSummary] = []
        for item in resp.json():
            if "pull_request" in item:
                continue
            issues.append(
                IssueSummary(
                    number=item["number"],
                    title=item["title"],
                    author=(item.get("user") or {}).get("login", "ghost"),
                    created_at=item["created_at"],
                    updated_at=item.get("updated_at") or item["created_at"],
                    comments=item.get("comments", 0),
                    labels=[l["name"] for l in item.get("labels", [])],
                    body=truncate(item.get("body")),
                )
            )
            if len(issues) >= limit:
                break
        return issues
