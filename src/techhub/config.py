"""Runtime configuration resolved from the environment."""

import os
from typing import Optional

from pydantic import BaseModel

from techhub.errors import ConfigurationError

DEFAULT_GATEWAY_URL = "https://ai.gateway.lovable.dev/v1/chat/completions"
DEFAULT_MODEL = "google/gemini-2.5-flash"
DEFAULT_GITHUB_API_URL = "https://api.github.com"

CORS_HEADERS: dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


class Settings(BaseModel):
    """Service settings."""

    ai_gateway_api_key: Optional[str] = None
    ai_gateway_url: str = DEFAULT_GATEWAY_URL
    ai_model: str = DEFAULT_MODEL
    github_token: Optional[str] = None
    github_api_url: str = DEFAULT_GITHUB_API_URL
    request_timeout: float = 60.0
    max_attempts: int = 3
    retry_base_delay_ms: int = 1000
    retry_max_delay_ms: int = 5000
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables (and a loaded .env)."""
        env = os.environ
        return cls(
            ai_gateway_api_key=env.get("AI_GATEWAY_API_KEY") or env.get("LOVABLE_API_KEY") or None,
            ai_gateway_url=env.get("AI_GATEWAY_URL") or DEFAULT_GATEWAY_URL,
            ai_model=env.get("AI_MODEL") or DEFAULT_MODEL,
            github_token=env.get("GITHUB_TOKEN") or env.get("GH_TOKEN") or None,
            log_level=env.get("TECHHUB_LOG_LEVEL") or "INFO",
        )

    def require_api_key(self) -> str:
        """Return the gateway key, failing if it is not configured."""
        if not self.ai_gateway_api_key:
            raise ConfigurationError("AI_GATEWAY_API_KEY is not configured")
        return self.ai_gateway_api_key
