"""Pytest configuration and fixtures."""

import pytest

from techhub.config import Settings


@pytest.fixture(scope="session")
def anyio_backend():
    """Configure anyio backend for async tests."""
    return "asyncio"


@pytest.fixture
def settings():
    """Settings with a gateway key and no backoff waits."""
    return Settings(
        ai_gateway_api_key="test-key",
        retry_base_delay_ms=0,
        retry_max_delay_ms=0,
    )


@pytest.fixture
def repository_data():
    """A repository record as returned by the GitHub API."""
    return {
        "id": 1296269,
        "name": "hello-world",
        "full_name": "octocat/hello-world",
        "description": "My first repository on GitHub!",
        "language": "Python",
        "stargazers_count": 80,
        "forks_count": 9,
        "open_issues_count": 3,
        "created_at": "2011-01-26T19:01:12Z",
        "updated_at": "2025-01-15T10:00:00Z",
        "topics": ["octocat", "api"],
        "license": {"key": "mit", "name": "MIT License"},
        "html_url": "https://github.com/octocat/hello-world",
        "private": False,
        "owner": {"login": "octocat", "avatar_url": "https://github.com/images/octocat.png"},
        "watchers_count": 80,
    }
