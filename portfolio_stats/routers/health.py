"""Health check endpoints."""

from fastapi import APIRouter, Depends

from portfolio_stats.models.schemas import HealthResponse
from portfolio_stats.services.cache import SingleSlotCache
from portfolio_stats.services.github_client import GitHubClient

router = APIRouter(prefix="/api", tags=["Health"])


async def get_github_client() -> GitHubClient:
    """Placeholder - overridden in main.py."""
    raise NotImplementedError


async def get_cache() -> SingleSlotCache:
    """Placeholder - overridden in main.py."""
    raise NotImplementedError


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check endpoint",
)
async def health_check(
    github_client: GitHubClient = Depends(get_github_client),
    cache: SingleSlotCache = Depends(get_cache),
) -> HealthResponse:
    """
    Check the health of the service.

    Verifies:
    - Service is running
    - GitHub API is reachable

    Also reports whether a stats payload is cached and how old it is.
    """
    github_healthy = await github_client.check_health()
    cache_stats = cache.stats()

    return HealthResponse(
        status="healthy" if github_healthy else "degraded",
        version="1.0.0",
        github_api_reachable=github_healthy,
        cache_populated=cache_stats["populated"],
        cache_age_seconds=cache_stats["age_seconds"],
    )


@router.get(
    "/health/live",
    summary="Liveness probe",
    description="Simple liveness check for container orchestration",
)
async def liveness():
    """Simple liveness check - returns 200 if service is running."""
    return {"status": "alive"}


@router.get(
    "/health/ready",
    summary="Readiness probe",
)
async def readiness(
    github_client: GitHubClient = Depends(get_github_client),
):
    """Readiness check - verifies external dependencies."""
    github_ok = await github_client.check_health()
    if not github_ok:
        return {"status": "not_ready", "reason": "GitHub API unreachable"}
    return {"status": "ready"}
