"""GitHub stats endpoint."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from portfolio_stats.config import Settings, get_settings
from portfolio_stats.models.schemas import ErrorPayload, StatsPayload
from portfolio_stats.services.stats import StatsService

router = APIRouter(prefix="/api", tags=["GitHub"])


async def get_stats_service() -> StatsService:
    """Placeholder - overridden in main.py."""
    raise NotImplementedError


@router.get(
    "/github",
    response_model=StatsPayload,
    summary="Get aggregated GitHub profile stats",
    description="Profile, star/fork totals, top languages and latest repositories "
    "of the configured account, cached in memory.",
    responses={
        200: {"description": "Successfully aggregated stats"},
        500: {"model": ErrorPayload, "description": "Configuration or GitHub API failure"},
    },
)
async def get_github_stats(
    service: StatsService = Depends(get_stats_service),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    """
    Get stats for the configured GitHub account.

    Results are cached for the configured TTL (default: 15 minutes). The
    Cache-Control header lets a shared HTTP cache in front of the service
    keep the response as well; failures are never marked cacheable.
    """
    lookup = await service.lookup()
    payload = lookup.payload

    if isinstance(payload, ErrorPayload):
        return JSONResponse(status_code=500, content=payload.model_dump())

    return JSONResponse(
        content=payload.model_dump(mode="json", by_alias=True),
        headers={
            "Cache-Control": settings.cache_control,
            "X-Cache": "HIT" if lookup.cached else "MISS",
        },
    )
