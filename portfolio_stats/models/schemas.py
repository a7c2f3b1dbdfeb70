"""Pydantic models for upstream data and response payloads."""

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Profile(BaseModel):
    """Read-only projection of a GitHub user profile."""

    model_config = ConfigDict(frozen=True)

    login: str
    name: str | None = None
    avatar_url: str
    html_url: str
    followers: int = Field(default=0, ge=0)
    following: int = Field(default=0, ge=0)
    public_repos: int = Field(default=0, ge=0)


class Repository(BaseModel):
    """Snapshot of one repository as returned by the repos listing."""

    model_config = ConfigDict(frozen=True)

    name: str
    html_url: str
    description: str | None = None
    stargazers_count: int = Field(default=0, ge=0)
    forks_count: int = Field(default=0, ge=0)
    language: str | None = None
    private: bool = False
    archived: bool = False
    fork: bool = False
    pushed_at: datetime | None = None

    @field_validator("pushed_at")
    @classmethod
    def assume_utc(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @property
    def is_eligible(self) -> bool:
        """Public, non-archived repositories count towards the stats."""
        return not self.private and not self.archived


class RepoTotals(BaseModel):
    """Summed counters over eligible repositories."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    total_stars: int = Field(default=0, alias="totalStars")
    total_forks: int = Field(default=0, alias="totalForks")
    # Derived: stars + forks per repository, not GitHub's watcher count
    total_watchers: int = Field(default=0, alias="totalWatchers")


class LanguageCount(BaseModel):
    """One bucket of the language histogram."""

    model_config = ConfigDict(frozen=True)

    name: str
    count: int


class RepoCard(BaseModel):
    """Reduced repository shape used in the latest list."""

    model_config = ConfigDict(frozen=True)

    name: str
    url: str
    description: str | None = None
    stars: int
    forks: int
    language: str | None = None

    @classmethod
    def from_repository(cls, repo: Repository) -> "RepoCard":
        return cls(
            name=repo.name,
            url=repo.html_url,
            description=repo.description,
            stars=repo.stargazers_count,
            forks=repo.forks_count,
            language=repo.language,
        )


class StatsPayload(BaseModel):
    """Successful aggregation result, the unit stored in the cache."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    ok: Literal[True] = True
    profile: Profile
    stats: RepoTotals
    top_languages: list[LanguageCount] = Field(default_factory=list, alias="topLanguages")
    repo_count: int = Field(default=0, alias="repoCount")
    latest: list[RepoCard] = Field(default_factory=list)


class ErrorPayload(BaseModel):
    """Failure result returned to the caller, never cached."""

    ok: Literal[False] = False
    error: str
    detail: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "healthy"
    version: str = "1.0.0"
    github_api_reachable: bool = True
    cache_populated: bool = False
    cache_age_seconds: float | None = None
