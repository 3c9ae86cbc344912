"""Data models for techhub."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# ── Raw GitHub data ───────────────────────────────────────────────────────

class License(BaseModel):
    """Repository license as reported by GitHub."""

    model_config = ConfigDict(extra="allow")

    name: str


class Owner(BaseModel):
    """Repository owner (user or organization)."""

    model_config = ConfigDict(extra="allow")

    login: str
    avatar_url: str = ""


class Repository(BaseModel):
    """GitHub repository metadata.

    Records come straight from the GitHub API and are forwarded unmodified,
    so keys this model does not declare are kept.
    """

    model_config = ConfigDict(extra="allow")

    id: Optional[int] = None
    name: Optional[str] = None
    full_name: str
    description: Optional[str] = None
    language: Optional[str] = None
    stargazers_count: int = 0
    forks_count: int = 0
    open_issues_count: int = 0
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    topics: list[str] = Field(default_factory=list)
    license: Optional[License] = None
    html_url: Optional[str] = None
    private: bool = False
    owner: Optional[Owner] = None

    @property
    def owner_and_name(self) -> tuple[str, str]:
        owner, _, name = self.full_name.partition("/")
        return owner, name


class IssueSummary(BaseModel):
    """An open issue reduced to what the analysis prompt needs."""

    number: int
    title: str
    author: str
    created_at: str
    updated_at: str
    comments: int = 0
    labels: list[str] = Field(default_factory=list)
    body: str = ""


class Organization(BaseModel):
    """A GitHub organization the user belongs to."""

    model_config = ConfigDict(extra="allow")

    login: str
    description: Optional[str] = None
    avatar_url: str = ""


# ── Request / response payloads ───────────────────────────────────────────

class AnalyzeRepositoryRequest(BaseModel):
    """Body of POST /analyze-repository."""

    repository: Repository
    prompt: Optional[str] = None


class AnalyzeScreenshotRequest(BaseModel):
    """Body of POST /analyze-issue-screenshot."""

    model_config = ConfigDict(populate_by_name=True)

    image_base64: Optional[str] = Field(default=None, alias="imageBase64")
    repository_name: str = Field(default="", alias="repositoryName")


class AnalysisResponse(BaseModel):
    analysis: str


class ErrorResponse(BaseModel):
    error: str


# ── Analysis post-processing ─────────────────────────────────────────────

class SectionKind(str, Enum):
    """Classification of a markdown analysis section."""

    overview = "overview"
    priority = "priority"
    recommendation = "recommendation"
    technical = "technical"
    general = "general"


class AnalysisSection(BaseModel):
    """One `## ` section of an AI analysis."""

    title: str
    content: str
    kind: SectionKind = SectionKind.general


class ContentItem(BaseModel):
    """A single non-empty line inside a section."""

    text: str
    is_bullet: bool = False
    is_highlight: bool = False


# ── Repository health ─────────────────────────────────────────────────────

class HealthScore(BaseModel):
    """Heuristic 0–100 health score for one repository."""

    full_name: str
    score: int = 0
    days_since_update: Optional[int] = None


class HealthReport(BaseModel):
    """Aggregate health across a set of repositories."""

    repositories: list[HealthScore] = Field(default_factory=list)
    average_score: float = 0.0
    trend: str = ""  # "excellent", "good", "needs-attention"
    total_stars: int = 0
    total_forks: int = 0
    total_issues: int = 0
    top_performer: Optional[str] = None
    needs_attention: Optional[str] = None
    generated_at: datetime = Field(default_factory=datetime.now)
