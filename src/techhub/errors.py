"""Exception hierarchy.

Each exception carries the HTTP status code the web layer answers with.
Inner layers raise these; ``techhub.app`` translates them into
``{"error": ...}`` responses.
"""

from typing import Optional


class TechHubError(Exception):
    """Base exception for the entire application."""

    status_code = 500


class ConfigurationError(TechHubError):
    """A required setting (e.g. the AI gateway key) is missing."""


class InvalidRequestError(TechHubError):
    """The request body is empty, malformed, or missing a required field."""


# ── AI gateway ──────────────────────────────────────────────────────────────


class GatewayError(TechHubError):
    """Any failure talking to the AI gateway."""

    retryable = True


class GatewayRateLimitError(GatewayError):
    """The gateway answered 429."""

    status_code = 429
    retryable = False

    def __init__(self, message: str = "Rate limits exceeded, please try again later.") -> None:
        super().__init__(message)


class GatewayPaymentRequiredError(GatewayError):
    """The gateway answered 402."""

    status_code = 402
    retryable = False

    def __init__(
        self, message: str = "Payment required, please add credits to your workspace."
    ) -> None:
        super().__init__(message)


class GatewayStatusError(GatewayError):
    """The gateway answered with a non-2xx status other than 429/402."""

    def __init__(self, upstream_status: int, body: str = "") -> None:
        super().__init__(f"AI gateway returned status {upstream_status}")
        self.upstream_status = upstream_status
        self.body = body


class GatewayUnavailableError(GatewayError):
    """The gateway could not be reached or sent an empty response."""


class GatewayResponseError(GatewayError):
    """The gateway response body was not valid JSON."""


class MissingAnalysisError(GatewayError):
    """The gateway response carried no message content."""


# ── GitHub ──────────────────────────────────────────────────────────────────


class GitHubError(TechHubError):
    """A GitHub REST API call failed."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code
