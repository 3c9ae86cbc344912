"""Shared payload builders for tests."""

GATEWAY_URL = "https://ai.gateway.lovable.dev/v1/chat/completions"
GITHUB_URL = "https://api.github.com"


def completion(content: str) -> dict:
    """A minimal chat-completions response body."""
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def issue(number: int, title: str = "Bug", body: str = "Something broke", **extra) -> dict:
    """An issue record as returned by the GitHub issues API."""
    data = {
        "number": number,
        "title": title,
        "body": body,
        "user": {"login": "reporter"},
        "state": "open",
        "created_at": "2025-01-10T00:00:00Z",
        "updated_at": "2025-01-15T00:00:00Z",
        "comments": 2,
        "labels": [{"name": "bug"}],
        "html_url": f"https://github.com/octocat/hello-world/issues/{number}",
    }
    data.update(extra)
    return data
