"""Reduce a profile and its repositories into the stats payload."""

from collections import Counter
from collections.abc import Iterable, Sequence
from datetime import datetime, timezone

from portfolio_stats.models.schemas import (
    LanguageCount,
    Profile,
    RepoCard,
    Repository,
    RepoTotals,
    StatsPayload,
)

TOP_LANGUAGES = 5
LATEST_LIMIT = 6

_NEVER_PUSHED = datetime.min.replace(tzinfo=timezone.utc)


def eligible_repositories(repositories: Iterable[Repository]) -> list[Repository]:
    """Drop private and archived repositories."""
    return [repo for repo in repositories if repo.is_eligible]


def sum_totals(repositories: Sequence[Repository]) -> RepoTotals:
    stars = sum(repo.stargazers_count for repo in repositories)
    forks = sum(repo.forks_count for repo in repositories)
    return RepoTotals(
        total_stars=stars,
        total_forks=forks,
        total_watchers=stars + forks,
    )


def rank_languages(
    repositories: Iterable[Repository],
    limit: int = TOP_LANGUAGES,
) -> list[LanguageCount]:
    """
    Count repositories per primary language.

    Repositories without a detected language are left out. Equal counts
    keep the order in which the language was first seen.
    """
    counts = Counter(repo.language for repo in repositories if repo.language)
    return [LanguageCount(name=name, count=count) for name, count in counts.most_common(limit)]


def latest_repositories(
    repositories: Iterable[Repository],
    limit: int = LATEST_LIMIT,
) -> list[RepoCard]:
    """Most recently pushed repositories first; never-pushed ones last."""
    ordered = sorted(
        repositories,
        key=lambda repo: repo.pushed_at or _NEVER_PUSHED,
        reverse=True,
    )
    return [RepoCard.from_repository(repo) for repo in ordered[:limit]]


def aggregate(
    profile: Profile,
    repositories: Iterable[Repository],
    *,
    top_languages: int = TOP_LANGUAGES,
    latest_limit: int = LATEST_LIMIT,
) -> StatsPayload:
    """
    Build the stats payload for one account.

    Pure: the inputs are not modified and a new payload is returned on every
    call, so the same input always yields an equal payload.
    """
    eligible = eligible_repositories(repositories)
    return StatsPayload(
        profile=profile,
        stats=sum_totals(eligible),
        top_languages=rank_languages(eligible, top_languages),
        repo_count=len(eligible),
        latest=latest_repositories(eligible, latest_limit),
    )
