"""Repository health — heuristic score from activity and popularity."""

from datetime import datetime, timezone
from typing import Optional

from techhub.models import HealthReport, HealthScore, Repository


def _days_since(timestamp: Optional[str], now: datetime) -> Optional[int]:
    if not timestamp:
        return None
    try:
        dt = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return (now - dt).days


def compute_health_score(
    repository: Repository, now: Optional[datetime] = None
) -> HealthScore:
    """Score a repository 0–100.

    Recency of the last update is worth up to 40 points, stars up to 30,
    forks up to 20, and a low open-issue-to-star ratio up to 10.
    """
    now = now or datetime.now(timezone.utc)
    score = 0

    days = _days_since(repository.updated_at, now)
    if days is not None:
        if days <= 7:
            score += 40
        elif days <= 30:
            score += 30
        elif days <= 90:
            score += 20
        elif days <= 365:
            score += 10

    stars = repository.stargazers_count
    if stars >= 1000:
        score += 30
    elif stars >= 100:
        score += 25
    elif stars >= 10:
        score += 15
    elif stars >= 1:
        score += 5

    forks = repository.forks_count
    if forks >= 100:
        score += 20
    elif forks >= 10:
        score += 15
    elif forks >= 1:
        score += 10

    issue_ratio = repository.open_issues_count / max(stars, 1)
    if issue_ratio <= 0.1:
        score += 10
    elif issue_ratio <= 0.3:
        score += 7
    elif issue_ratio <= 0.5:
        score += 5

    return HealthScore(
        full_name=repository.full_name,
        score=min(100, max(0, score)),
        days_since_update=days,
    )


def build_health_report(
    repositories: list[Repository], now: Optional[datetime] = None
) -> HealthReport:
    """Aggregate health scores and totals across repositories."""
    if not repositories:
        return HealthReport()

    scores = [compute_health_score(r, now) for r in repositories]
    average = sum(s.score for s in scores) / len(scores)

    if average >= 80:
        trend = "excellent"
    elif average >= 60:
        trend = "good"
    else:
        trend = "needs-attention"

    # Healthiest first
    scores.sort(key=lambda s: -s.score)

    return HealthReport(
        repositories=scores,
        average_score=round(average, 1),
        trend=trend,
        total_stars=sum(r.stargazers_count for r in repositories),
        total_forks=sum(r.forks_count for r in repositories),
        total_issues=sum(r.open_issues_count for r in repositories),
        top_performer=scores[0].full_name,
        needs_attention=scores[-1].full_name,
    )
