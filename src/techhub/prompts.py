"""Prompt text and chat-message builders for the AI gateway."""

from typing import Optional

from techhub.models import IssueSummary, Repository

REPOSITORY_SUMMARY_PROMPT = """\
You are a GitHub repository analyst. Provide a comprehensive summary of this repository including:
- Main purpose and functionality
- Technology stack and quality indicators
- Activity and maintenance status
- Strengths and potential use cases
- Any notable concerns or considerations
Be concise but informative."""

REPOSITORY_QUESTION_PROMPT = (
    "You are a GitHub repository analyst. Answer the user's question about this "
    "repository based on the provided metadata. Be concise and insightful."
)

SCREENSHOT_SYSTEM_PROMPT = """\
You are an expert software engineer and technical problem solver.
Analyze the GitHub issue screenshot provided and generate a comprehensive solution.

Your response should include:

## 🔍 Issue Summary
- Brief description of the problem shown in the screenshot
- Affected components/modules
- Severity level (Critical/High/Medium/Low)

## 🎯 Root Cause Analysis
- What is causing this issue?
- Technical context and dependencies
- Related code areas

## ✅ Recommended Solution
- Step-by-step solution approach
- Code examples or pseudocode where applicable
- Configuration changes needed

## 🛠️ Implementation Steps
1. Specific actionable steps to fix the issue
2. Testing recommendations
3. Potential side effects to watch for

## 📚 Additional Resources
- Related documentation
- Similar issues or patterns
- Best practices to prevent recurrence

Be specific, actionable, and technical. Format with clear markdown sections."""


def build_repository_context(repository: Repository) -> str:
    """Render repository metadata as the prompt's data block."""
    topics = ", ".join(repository.topics) if repository.topics else "None"
    license_name = repository.license.name if repository.license else "No license"
    return "\n".join(
        [
            f"Repository: {repository.full_name}",
            f"Description: {repository.description or 'No description'}",
            f"Language: {repository.language or 'Not specified'}",
            f"Stars: {repository.stargazers_count}",
            f"Forks: {repository.forks_count}",
            f"Open Issues: {repository.open_issues_count}",
            f"Created: {repository.created_at}",
            f"Last Updated: {repository.updated_at}",
            f"Topics: {topics}",
            f"License: {license_name}",
        ]
    )


def format_issues(issues: list[IssueSummary]) -> str:
    blocks = []
    for issue in issues:
        labels = ", ".join(issue.labels) or "none"
        block = (
            f"#{issue.number} {issue.title}\n"
            f"  Author: @{issue.author} | Created: {issue.created_at} | "
            f"Updated: {issue.updated_at} | Comments: {issue.comments} | Labels: {labels}"
        )
        if issue.body:
            block += f"\n  {issue.body}"
        blocks.append(block)
    return "\n\n".join(blocks)


def build_repository_messages(
    repository: Repository,
    issues: list[IssueSummary],
    prompt: Optional[str] = None,
) -> list[dict]:
    """Chat messages for a repository summary, or a question about it."""
    context = build_repository_context(repository)
    system_prompt = REPOSITORY_QUESTION_PROMPT if prompt else REPOSITORY_SUMMARY_PROMPT
    user_message = prompt or f"Analyze this repository:\n\n{context}"

    content = f"{user_message}\n\nRepository Data:\n{context}"
    if issues:
        content += f"\n\nOpen Issues:\n{format_issues(issues)}"

    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": content},
    ]


def build_screenshot_messages(image_data_uri: str, repository_name: str) -> list[dict]:
    """Multimodal chat messages: instruction text plus the screenshot."""
    return [
        {"role": "system", "content": SCREENSHOT_SYSTEM_PROMPT},
        {
            "role": "user",
            "content": [
                {
                    "type": "text",
                    "text": (
                        f"Analyze this GitHub issue screenshot from repository: "
                        f"{repository_name}. Provide a detailed solution."
                    ),
                },
                {"type": "image_url", "image_url": {"url": image_data_uri}},
            ],
        },
    ]
