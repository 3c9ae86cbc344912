"""AI-powered analysis engine.

Orchestrates GitHub data fetching and AI gateway calls for repository
and issue-screenshot analyses.
"""

import logging
from typing import Callable, Optional

import httpx

from techhub.config import Settings
from techhub.errors import GitHubError, InvalidRequestError
from techhub.fetcher import GitHubFetcher
from techhub.gateway import AIGatewayClient
from techhub.models import IssueSummary, Repository
from techhub.prompts import build_repository_messages, build_screenshot_messages

logger = logging.getLogger(__name__)


class Analyzer:
    """Repository and screenshot analysis backed by the AI gateway."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        github_token: Optional[str] = None,
        on_status: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.settings = settings or Settings.from_env()
        self.github_token = github_token or self.settings.github_token
        self._on_status = on_status or (lambda _: None)
        self._fetcher = GitHubFetcher(
            token=self.github_token, base_url=self.settings.github_api_url
        )
        self._gateway: Optional[AIGatewayClient] = None

    # ── Status helper ─────────────────────────────────────────────────────

    def _status(self, msg: str) -> None:
        self._on_status(msg)

    # ── Gateway lifecycle ─────────────────────────────────────────────────

    def _ensure_gateway(self) -> AIGatewayClient:
        """Lazily build the gateway client; the key is checked per call."""
        api_key = self.settings.require_api_key()
        if self._gateway is None:
            s = self.settings
            self._gateway = AIGatewayClient(
                api_key=api_key,
                url=s.ai_gateway_url,
                model=s.ai_model,
                timeout=s.request_timeout,
                max_attempts=s.max_attempts,
                base_delay_ms=s.retry_base_delay_ms,
                max_delay_ms=s.retry_max_delay_ms,
            )
        return self._gateway

    async def close(self) -> None:
        """Tear down resources."""
        await self._fetcher.close()
        if self._gateway:
            await self._gateway.close()

    # ── Repository analysis ───────────────────────────────────────────────

    async def analyze_repository(
        self, repository: Repository, prompt: Optional[str] = None
    ) -> str:
        """Summarize a repository, or answer ``prompt`` about it."""
        gateway = self._ensure_gateway()
        logger.info("Analyzing repository %s", repository.full_name)

        self._status("Fetching open issues …")
        issues = await self._fetch_issues(repository)

        self._status("Generating analysis …")
        messages = build_repository_messages(repository, issues, prompt)
        analysis = await gateway.complete(messages)

        self._status("Done!")
        return analysis

    async def _fetch_issues(self, repository: Repository) -> list[IssueSummary]:
        """Open issues for the prompt; a GitHub failure yields no issues."""
        owner, name = repository.owner_and_name
        if not owner or not name:
            return []
        try:
            return await self._fetcher.fetch_open_issues(owner, name)
        except (httpx.HTTPError, GitHubError) as e:
            logger.warning("Could not fetch issues for %s: %s", repository.full_name, e)
            return []

    # ── Screenshot analysis ───────────────────────────────────────────────

    async def analyze_issue_screenshot(
        self, image_base64: Optional[str], repository_name: str
    ) -> str:
        """Diagnose the issue shown in a screenshot and propose a fix."""
        gateway = self._ensure_gateway()
        if not image_base64:
            raise InvalidRequestError("No image provided")
        logger.info("Analyzing issue screenshot for repository: %s", repository_name)

        self._status("Sending vision request …")
        messages = build_screenshot_messages(to_data_uri(image_base64), repository_name)
        analysis = await gateway.complete_with_retry(messages)

        self._status("Done!")
        return analysis


def to_data_uri(image_base64: str, mime_type: str = "image/png") -> str:
    """Wrap bare base64 image data as a data URI; data URIs pass through."""
    if image_base64.startswith("data:"):
        return image_base64
    return f"data:{mime_type};base64,{image_base64}"
