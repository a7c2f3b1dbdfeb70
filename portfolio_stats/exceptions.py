"""Custom exceptions and FastAPI exception handlers."""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class StatsError(Exception):
    """Base class for failures that end up in an error payload."""

    error = "stats_error"

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(detail)


class ConfigurationError(StatsError):
    """Raised when the account to aggregate is not configured."""

    error = "configuration_error"


class UpstreamError(StatsError):
    """Raised when GitHub API returns an error or a malformed body."""

    error = "upstream_error"

    def __init__(self, status_code: int, detail: str):
        self.status_code = status_code
        super().__init__(detail)

    def __str__(self) -> str:
        return f"GitHub API error ({self.status_code}): {self.detail}"


class AuthenticationError(UpstreamError):
    """Raised when a credentialed request is rejected with 401 or 403."""


class TransportError(StatsError):
    """Raised when GitHub API cannot be reached."""

    error = "transport_error"


async def unexpected_error_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handle anything that escaped the stats service."""
    logger.exception(f"Unhandled error on {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={
            "ok": False,
            "error": "unexpected_error",
            "detail": str(exc) or exc.__class__.__name__,
        },
    )
