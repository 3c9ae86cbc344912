"""AI gateway client (OpenAI-style chat completions over HTTP)."""

import asyncio
import json
import logging
from typing import Any, Awaitable, Callable, Optional

import httpx

from techhub.config import DEFAULT_GATEWAY_URL, DEFAULT_MODEL
from techhub.errors import (
    GatewayError,
    GatewayPaymentRequiredError,
    GatewayRateLimitError,
    GatewayResponseError,
    GatewayStatusError,
    GatewayUnavailableError,
    MissingAnalysisError,
)

logger = logging.getLogger(__name__)


def backoff_delay(attempt: int, base_ms: int = 1000, cap_ms: int = 5000) -> float:
    """Seconds to wait after failed attempt number ``attempt`` (1-based)."""
    return min(base_ms * 2 ** (attempt - 1), cap_ms) / 1000


class AIGatewayClient:
    """Sends chat-completion requests to the AI gateway."""

    def __init__(
        self,
        api_key: str,
        url: str = DEFAULT_GATEWAY_URL,
        model: str = DEFAULT_MODEL,
        timeout: float = 60.0,
        max_attempts: int = 3,
        base_delay_ms: int = 1000,
        max_delay_ms: int = 5000,
        sleep: Optional[Callable[[float], Awaitable[Any]]] = None,
    ) -> None:
        self.api_key = api_key
        self.url = url
        self.model = model
        self.timeout = timeout
        self.max_attempts = max_attempts
        self.base_delay_ms = base_delay_ms
        self.max_delay_ms = max_delay_ms
        self._sleep = sleep or asyncio.sleep
        self._client: Optional[httpx.AsyncClient] = None

    # ── HTTP plumbing ─────────────────────────────────────────────────────

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    async def _client_instance(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(headers=self.headers, timeout=self.timeout)
        return self._client

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "AIGatewayClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # ── Requests ──────────────────────────────────────────────────────────

    def build_payload(self, messages: list[dict]) -> dict:
        return {"model": self.model, "messages": messages}

    async def complete(self, messages: list[dict]) -> str:
        """POST one chat completion and return the first choice's content."""
        client = await self._client_instance()
        try:
            resp = await client.post(self.url, json=self.build_payload(messages))
        except httpx.HTTPError as e:
            raise GatewayUnavailableError(f"AI gateway request failed: {e}") from e

        if resp.status_code == 429:
            raise GatewayRateLimitError()
        if resp.status_code == 402:
            raise GatewayPaymentRequiredError()
        if not resp.is_success:
            logger.error("AI gateway error: %s %s", resp.status_code, resp.text)
            raise GatewayStatusError(resp.status_code, resp.text)

        text = resp.text
        if not text.strip():
            raise GatewayUnavailableError("Empty response from AI gateway")
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            logger.error("Could not parse AI gateway response: %s", e)
            raise GatewayResponseError("Invalid JSON response from AI gateway") from e

        content = _first_choice_content(data)
        if not content:
            raise MissingAnalysisError("No analysis content in response")
        return content

    async def complete_with_retry(self, messages: list[dict]) -> str:
        """Like :meth:`complete`, retrying transient failures with backoff.

        429 and 402 are raised at once; any other gateway failure is retried
        until ``max_attempts`` is reached, then the last error is raised.
        """
        for attempt in range(1, self.max_attempts + 1):
            logger.info("AI request attempt %d of %d", attempt, self.max_attempts)
            try:
                content = await self.complete(messages)
            except GatewayError as e:
                if not e.retryable:
                    raise
                logger.warning("Attempt %d failed: %s", attempt, e)
                if attempt == self.max_attempts:
                    raise
                wait = backoff_delay(attempt, self.base_delay_ms, self.max_delay_ms)
                logger.info("Waiting %.1fs before retry …", wait)
                await self._sleep(wait)
                continue
            logger.info("AI request succeeded on attempt %d", attempt)
            return content
        raise GatewayUnavailableError("AI gateway was not called")  # max_attempts < 1


def _first_choice_content(data: Any) -> Optional[str]:
    """Extract ``choices[0].message.content`` or None."""
    if not isinstance(data, dict):
        return None
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        return None
    message = choices[0].get("message")
    if not isinstance(message, dict):
        return None
    content = message.get("content")
    return content if isinstance(content, str) else None
