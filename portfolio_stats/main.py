"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from portfolio_stats.config import get_settings
from portfolio_stats.exceptions import unexpected_error_handler
from portfolio_stats.routers import github, health
from portfolio_stats.services.cache import SingleSlotCache
from portfolio_stats.services.github_client import GitHubClient
from portfolio_stats.services.stats import StatsService

logging.basicConfig(
    level=logging.DEBUG if get_settings().debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

github_client: GitHubClient | None = None
cache: SingleSlotCache | None = None
stats_service: StatsService | None = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown of resources.
    """
    global github_client, cache, stats_service

    settings = get_settings()
    logger.info(f"Starting {settings.app_name}")
    if not settings.github_username:
        logger.warning("No GitHub username configured; /api/github will fail")

    github_client = GitHubClient(settings)
    await github_client.start()

    cache = SingleSlotCache(ttl_seconds=settings.cache_ttl_seconds)
    stats_service = StatsService(settings, github_client, cache)

    logger.info("Services initialized successfully")

    yield

    logger.info("Shutting down services")
    await github_client.close()


def create_app() -> FastAPI:
    """Application factory."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Cached GitHub profile and repository stats for a portfolio site",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_exception_handler(Exception, unexpected_error_handler)

    async def get_github_client_dep():
        return github_client

    async def get_cache_dep():
        return cache

    async def get_stats_service_dep():
        return stats_service

    app.dependency_overrides[github.get_stats_service] = get_stats_service_dep
    app.dependency_overrides[health.get_github_client] = get_github_client_dep
    app.dependency_overrides[health.get_cache] = get_cache_dep

    app.include_router(health.router)
    app.include_router(github.router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "portfolio_stats.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
