"""Tests for the repository health module."""

from datetime import datetime, timedelta, timezone

from techhub.analysis.health import build_health_report, compute_health_score
from techhub.models import Repository

NOW = datetime(2025, 6, 1, tzinfo=timezone.utc)


def _repo(
    name: str = "a/b",
    days_ago: int = 1,
    stars: int = 0,
    forks: int = 0,
    issues: int = 0,
) -> Repository:
    updated = (NOW - timedelta(days=days_ago)).isoformat().replace("+00:00", "Z")
    return Repository(
        full_name=name,
        updated_at=updated,
        stargazers_count=stars,
        forks_count=forks,
        open_issues_count=issues,
    )


class TestComputeHealthScore:
    def test_perfect_score(self):
        score = compute_health_score(_repo(days_ago=2, stars=5000, forks=500, issues=10), NOW)
        assert score.score == 100
        assert score.days_since_update == 2

    def test_recency_buckets(self):
        assert compute_health_score(_repo(days_ago=20), NOW).score == 30 + 10
        assert compute_health_score(_repo(days_ago=60), NOW).score == 20 + 10
        assert compute_health_score(_repo(days_ago=200), NOW).score == 10 + 10
        assert compute_health_score(_repo(days_ago=800), NOW).score == 10

    def test_star_and_fork_buckets(self):
        score = compute_health_score(_repo(days_ago=800, stars=150, forks=12), NOW)
        assert score.score == 25 + 15 + 10

    def test_issue_ratio(self):
        # 30 issues / 100 stars = 0.3
        score = compute_health_score(_repo(days_ago=800, stars=100, issues=30), NOW)
        assert score.score == 25 + 7
        # ratio above 0.5 earns nothing
        score = compute_health_score(_repo(days_ago=800, stars=10, issues=9), NOW)
        assert score.score == 15

    def test_missing_timestamp(self):
        score = compute_health_score(Repository(full_name="a/b"), NOW)
        assert score.days_since_update is None
        assert score.score == 10


class TestBuildHealthReport:
    def test_empty(self):
        report = build_health_report([], NOW)
        assert report.repositories == []
        assert report.average_score == 0.0
        assert report.top_performer is None
        assert report.needs_attention is None

    def test_totals_and_trend(self):
        repos = [
            _repo("a/healthy", days_ago=1, stars=2000, forks=200, issues=5),
            _repo("a/stale", days_ago=900, stars=0, forks=0, issues=4),
        ]
        report = build_health_report(repos, NOW)
        assert report.total_stars == 2000
        assert report.total_forks == 200
        assert report.total_issues == 9
        # (100 + 0) / 2
        assert report.average_score == 50.0
        assert report.trend == "needs-attention"
        assert report.repositories[0].full_name == "a/healthy"
        assert report.top_performer == "a/healthy"
        assert report.needs_attention == "a/stale"

    def test_excellent(self):
        report = build_health_report([_repo(days_ago=1, stars=2000, forks=200)], NOW)
        assert report.trend == "excellent"

    def test_good(self):
        report = build_health_report([_repo(days_ago=3, stars=50, forks=5)], NOW)
        # 40 + 15 + 10 + 10
        assert report.average_score == 75.0
        assert report.trend == "good"

    def test_extremes_follow_scores_not_input_order(self):
        repos = [
            _repo("a/middling", days_ago=60, stars=50),
            _repo("a/stale", days_ago=900),
            _repo("a/healthy", days_ago=1, stars=2000, forks=200),
        ]
        report = build_health_report(repos, NOW)
        assert report.top_performer == "a/healthy"
        assert report.needs_attention == "a/stale"

    def test_single_repository_is_both(self):
        report = build_health_report([_repo("a/only")], NOW)
        assert report.top_performer == report.needs_attention == "a/only"
