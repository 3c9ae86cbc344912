"""FastAPI application exposing the analysis and browse endpoints."""

import json
import logging
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError

from techhub import __version__
from techhub.analysis.health import build_health_report
from techhub.analysis.sections import parse_analysis
from techhub.analyzer import Analyzer
from techhub.config import CORS_HEADERS, Settings
from techhub.errors import (
    GatewayError,
    GatewayResponseError,
    GitHubError,
    InvalidRequestError,
    MissingAnalysisError,
    TechHubError,
)
from techhub.fetcher import GitHubFetcher
from techhub.models import (
    AnalysisResponse,
    AnalysisSection,
    AnalyzeRepositoryRequest,
    AnalyzeScreenshotRequest,
    ErrorResponse,
    HealthReport,
    Organization,
    Repository,
)

logger = logging.getLogger(__name__)

INCOMPLETE_RESPONSE_MESSAGE = "Received incomplete response from AI. Please try again."
UNAVAILABLE_MESSAGE = "AI service temporarily unavailable. Please try again in a moment."
UNEXPECTED_GITHUB_DATA_MESSAGE = "Unexpected response from GitHub. Please try again later."


# ── Helpers ───────────────────────────────────────────────────────────────

def _error(message: str, status_code: int = 500) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content=ErrorResponse(error=message).model_dump()
    )


def _settings(request: Request) -> Settings:
    """Fixed settings if the app was built with some, else read the env now."""
    settings = request.app.state.settings
    return settings if settings is not None else Settings.from_env()


def _bearer_token(request: Request) -> Optional[str]:
    auth = request.headers.get("authorization", "")
    scheme, _, token = auth.partition(" ")
    if scheme.lower() == "bearer" and token.strip():
        return token.strip()
    return None


async def _read_json(request: Request) -> dict:
    raw = await request.body()
    if not raw.strip():
        raise InvalidRequestError("Request body is empty")
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InvalidRequestError("Invalid JSON in request body") from e
    if not isinstance(data, dict):
        raise InvalidRequestError("Request body must be a JSON object")
    return data


def _fetcher(request: Request) -> GitHubFetcher:
    settings = _settings(request)
    return GitHubFetcher(
        token=_bearer_token(request) or settings.github_token,
        base_url=settings.github_api_url,
    )


def github_error_message(error: httpx.HTTPStatusError) -> str:
    """User-facing message for a failed GitHub call."""
    status = error.response.status_code
    text = error.response.text
    if status == 404:
        return "Repository or resource not found on GitHub."
    if status == 403:
        if "rate limit" in str(error).lower() or "rate limit" in text.lower():
            return str(error)
        if "SAML" in text:
            return (
                "This org requires SAML SSO. Authorize your token for the "
                "organization and try again."
            )
        return "Access denied. The repository may be private or your token lacks permissions."
    if status == 401:
        return "Authentication failed. Please sign in with GitHub again."
    return f"GitHub API error ({status}): {error.response.reason_phrase}"


def screenshot_error_message(error: TechHubError) -> str:
    """Collapse gateway failures into a retry hint for the screenshot flow."""
    if isinstance(error, GatewayResponseError):
        return INCOMPLETE_RESPONSE_MESSAGE
    if isinstance(error, GatewayError) and not isinstance(error, MissingAnalysisError):
        return UNAVAILABLE_MESSAGE
    return str(error)


# ── App factory ───────────────────────────────────────────────────────────

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application.

    With ``settings=None`` configuration is read from the environment on
    every request, so a missing gateway key fails the call rather than
    the import.
    """
    app = FastAPI(title="TechHub", version=__version__)
    app.state.settings = settings

    @app.middleware("http")
    async def cors(request: Request, call_next):  # type: ignore[no-untyped-def]
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=CORS_HEADERS)
        response = await call_next(request)
        for key, value in CORS_HEADERS.items():
            response.headers[key] = value
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_error(_request: Request, exc: RequestValidationError) -> JSONResponse:
        return _error(f"Invalid request payload: {exc.errors()}", 422)

    @app.exception_handler(httpx.HTTPStatusError)
    async def github_status_error(_request: Request, exc: httpx.HTTPStatusError) -> JSONResponse:
        return _error(github_error_message(exc), exc.response.status_code)

    @app.exception_handler(httpx.TransportError)
    async def github_transport_error(_request: Request, exc: httpx.TransportError) -> JSONResponse:
        logger.error("GitHub request failed: %s", exc)
        return _error("Could not connect to GitHub. Check your internet connection.", 502)

    @app.exception_handler(GitHubError)
    async def github_error(_request: Request, exc: GitHubError) -> JSONResponse:
        return _error(str(exc), exc.status_code)

    @app.exception_handler(ValidationError)
    async def github_data_error(_request: Request, exc: ValidationError) -> JSONResponse:
        logger.error("Unexpected GitHub payload: %s", exc)
        return _error(UNEXPECTED_GITHUB_DATA_MESSAGE, 502)

    @app.exception_handler(json.JSONDecodeError)
    async def github_json_error(_request: Request, exc: json.JSONDecodeError) -> JSONResponse:
        logger.error("Could not parse GitHub response: %s", exc)
        return _error(UNEXPECTED_GITHUB_DATA_MESSAGE, 502)

    @app.exception_handler(Exception)
    async def unhandled_error(_request: Request, exc: Exception) -> JSONResponse:
        # Runs outside the middleware stack, so CORS headers are set here.
        logger.exception("Unhandled error: %s", exc)
        response = _error("Internal server error", 500)
        response.headers.update(CORS_HEADERS)
        return response

    # ── Analysis ──────────────────────────────────────────────────────────

    @app.post("/analyze-repository")
    async def analyze_repository(request: Request) -> JSONResponse:
        analyzer: Optional[Analyzer] = None
        try:
            data = await _read_json(request)
            if not data.get("repository"):
                raise InvalidRequestError("No repository provided")
            try:
                body = AnalyzeRepositoryRequest.model_validate(data)
            except ValidationError as e:
                raise InvalidRequestError(f"Invalid repository data: {e.error_count()} error(s)") from e

            analyzer = Analyzer(settings=_settings(request))
            analysis = await analyzer.analyze_repository(body.repository, body.prompt)
            return JSONResponse(content=AnalysisResponse(analysis=analysis).model_dump())
        except TechHubError as e:
            if e.status_code in (429, 402):
                return _error(str(e), e.status_code)
            logger.exception("Error in analyze-repository")
            return _error(str(e))
        except Exception as e:
            logger.exception("Unexpected error in analyze-repository")
            return _error(str(e) or "Unknown error")
        finally:
            if analyzer:
                await analyzer.close()

    @app.post("/analyze-issue-screenshot")
    async def analyze_issue_screenshot(request: Request) -> JSONResponse:
        analyzer: Optional[Analyzer] = None
        try:
            data = await _read_json(request)
            try:
                body = AnalyzeScreenshotRequest.model_validate(data)
            except ValidationError as e:
                raise InvalidRequestError("Invalid screenshot request") from e

            analyzer = Analyzer(settings=_settings(request))
            analysis = await analyzer.analyze_issue_screenshot(
                body.image_base64, body.repository_name
            )
            return JSONResponse(content=AnalysisResponse(analysis=analysis).model_dump())
        except TechHubError as e:
            if e.status_code in (429, 402):
                return _error(str(e), e.status_code)
            logger.exception("Error in analyze-issue-screenshot")
            return _error(screenshot_error_message(e))
        except Exception:
            logger.exception("Unexpected error in analyze-issue-screenshot")
            return _error("Failed to analyze screenshot")
        finally:
            if analyzer:
                await analyzer.close()

    @app.post("/analysis/sections")
    async def analysis_sections(body: AnalysisResponse) -> list[AnalysisSection]:
        return parse_analysis(body.analysis)

    # ── Browse ────────────────────────────────────────────────────────────

    @app.get("/repositories/search")
    async def search_repositories(request: Request, q: str, sort: str = "stars") -> list[Repository]:
        fetcher = _fetcher(request)
        try:
            return await fetcher.search_repositories(q, sort=sort)
        finally:
            await fetcher.close()

    @app.post("/repositories/health")
    async def repositories_health(repositories: list[Repository]) -> HealthReport:
        return build_health_report(repositories)

    @app.get("/repos/{owner}/{repo}")
    async def repository_info(request: Request, owner: str, repo: str) -> Repository:
        fetcher = _fetcher(request)
        try:
            return await fetcher.fetch_repo_info(owner, repo)
        finally:
            await fetcher.close()

    @app.get("/user/repos")
    async def user_repositories(
        request: Request,
        visibility: str = "all",
        sort: str = "updated",
        direction: str = "desc",
    ) -> list[Repository]:
        fetcher = _fetcher(request)
        try:
            return await fetcher.fetch_user_repositories(visibility, sort, direction)
        finally:
            await fetcher.close()

    @app.get("/user/orgs")
    async def user_organizations(request: Request) -> list[Organization]:
        fetcher = _fetcher(request)
        try:
            return await fetcher.fetch_user_organizations()
        finally:
            await fetcher.close()

    @app.get("/orgs/{org}/repos")
    async def org_repositories(
        request: Request,
        org: str,
        type: str = "all",
        sort: str = "updated",
        direction: str = "desc",
    ) -> list[Repository]:
        fetcher = _fetcher(request)
        try:
            return await fetcher.fetch_org_repositories(org, type, sort, direction)
        finally:
            await fetcher.close()

    return app
