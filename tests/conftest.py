"""Shared test fixtures and sample data."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from portfolio_stats.config import Settings
from portfolio_stats.main import app
from portfolio_stats.models.schemas import Profile, Repository
from portfolio_stats.routers import github, health
from portfolio_stats.services.cache import SingleSlotCache
from portfolio_stats.services.github_client import GitHubClient
from portfolio_stats.services.stats import StatsService

# Trimmed GitHub API responses for octocat
SAMPLE_PROFILE_DATA = {
    "login": "octocat",
    "id": 583231,
    "name": "The Octocat",
    "avatar_url": "https://avatars.githubusercontent.com/u/583231?v=4",
    "html_url": "https://github.com/octocat",
    "followers": 21000,
    "following": 9,
    "public_repos": 8,
}


def make_repo_data(name: str, **overrides) -> dict:
    """Repository item as returned by GET /users/{username}/repos."""
    data = {
        "name": name,
        "full_name": f"octocat/{name}",
        "html_url": f"https://github.com/octocat/{name}",
        "description": f"{name} description",
        "stargazers_count": 1,
        "forks_count": 0,
        "watchers_count": 1,
        "language": "Python",
        "private": False,
        "archived": False,
        "fork": False,
        "pushed_at": "2024-01-01T00:00:00Z",
    }
    data.update(overrides)
    return data


SAMPLE_REPOS_DATA = [
    make_repo_data(
        "Hello-World",
        stargazers_count=2500,
        forks_count=2000,
        language="Ruby",
        pushed_at="2024-06-10T12:00:00Z",
    ),
    make_repo_data(
        "Spoon-Knife",
        stargazers_count=12000,
        forks_count=140000,
        language="HTML",
        pushed_at="2024-06-12T08:30:00Z",
    ),
    make_repo_data(
        "linguist",
        stargazers_count=500,
        forks_count=200,
        language="Ruby",
        pushed_at="2024-05-01T00:00:00Z",
    ),
    make_repo_data(
        "octocat.github.io",
        stargazers_count=10,
        forks_count=5,
        language=None,
        pushed_at="2024-03-01T00:00:00Z",
    ),
    make_repo_data(
        "secret-plans",
        stargazers_count=999,
        forks_count=999,
        language="Go",
        private=True,
        pushed_at="2024-07-01T00:00:00Z",
    ),
    make_repo_data(
        "old-thing",
        stargazers_count=777,
        forks_count=777,
        language="Perl",
        archived=True,
        pushed_at="2024-07-02T00:00:00Z",
    ),
]


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def settings():
    """Test settings."""
    return Settings(
        github_username="octocat",
        github_token=None,
        cache_ttl_seconds=900,
        github_api_timeout=5.0,
    )


@pytest.fixture
def sample_profile_data():
    """Sample profile data for testing."""
    return dict(SAMPLE_PROFILE_DATA)


@pytest.fixture
def sample_repos_data():
    """Sample repository list for testing."""
    return [dict(repo) for repo in SAMPLE_REPOS_DATA]


@pytest.fixture
def sample_profile(sample_profile_data) -> Profile:
    return Profile.model_validate(sample_profile_data)


@pytest.fixture
def sample_repositories(sample_repos_data) -> list[Repository]:
    return [Repository.model_validate(repo) for repo in sample_repos_data]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(settings):
    """Fresh cache instance for each test."""
    return SingleSlotCache(ttl_seconds=settings.cache_ttl_seconds)


@pytest.fixture
def mock_github_client(sample_profile, sample_repositories):
    """Mocked GitHub client."""
    mock_client = AsyncMock(spec=GitHubClient)
    mock_client.fetch_account.return_value = (sample_profile, sample_repositories)
    mock_client.check_health.return_value = True
    return mock_client


@pytest.fixture
def stats_service(settings, mock_github_client, cache, clock):
    return StatsService(settings, mock_github_client, cache, clock=clock)


@pytest_asyncio.fixture
async def test_client(mock_github_client, cache, stats_service):
    """AsyncClient for testing with mocked dependencies."""
    app.dependency_overrides[github.get_stats_service] = lambda: stats_service
    app.dependency_overrides[health.get_github_client] = lambda: mock_github_client
    app.dependency_overrides[health.get_cache] = lambda: cache

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()
