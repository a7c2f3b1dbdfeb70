"""Async GitHub API client using httpx."""

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from portfolio_stats.config import Settings
from portfolio_stats.exceptions import (
    AuthenticationError,
    TransportError,
    UpstreamError,
)
from portfolio_stats.models.schemas import Profile, Repository

logger = logging.getLogger(__name__)

AUTH_FAILURE_STATUSES = (401, 403)


class GitHubClient:
    """Async client for the GitHub users and repositories API."""

    def __init__(
        self,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._base_url = settings.github_api_base_url
        self._timeout = settings.github_api_timeout
        self._token = settings.github_token
        self._user_agent = settings.github_user_agent
        self._page_size = settings.github_page_size
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "GitHubClient":
        await self.start()
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()

    @property
    def has_token(self) -> bool:
        return bool(self._token)

    async def start(self) -> None:
        """Initialize the HTTP client."""
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": self._user_agent,
        }
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers=headers,
            timeout=self._timeout,
            transport=self._transport,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def fetch_account(self, username: str) -> tuple[Profile, list[Repository]]:
        """Fetch the profile, then every owned repository with the same credentials."""
        profile, authenticated = await self.fetch_profile(username)
        repositories = await self.fetch_repositories(username, authenticated=authenticated)
        return profile, repositories

    async def fetch_profile(self, username: str) -> tuple[Profile, bool]:
        """
        Fetch a GitHub user profile.

        A credentialed request rejected with 401/403 is retried once without
        the token; the outcome of that retry is final.

        Returns:
            The profile and whether the successful request carried the token.

        Raises:
            UpstreamError: On any other non-success status or a malformed body
            TransportError: If GitHub API cannot be reached
        """
        authenticated = self.has_token
        try:
            response, data = await self._get(f"/users/{username}", authenticated=authenticated)
        except AuthenticationError as exc:
            logger.warning(
                f"Token rejected by GitHub API ({exc.status_code}), "
                "retrying profile request without credentials"
            )
            authenticated = False
            response, data = await self._get(f"/users/{username}", authenticated=False)

        if not isinstance(data, dict):
            raise UpstreamError(
                status_code=response.status_code,
                detail="Malformed profile response from GitHub API",
            )
        try:
            profile = Profile.model_validate(data)
        except ValidationError as e:
            raise UpstreamError(
                status_code=response.status_code,
                detail=f"Malformed profile response from GitHub API: {e}",
            )
        return profile, authenticated

    async def fetch_repositories(
        self,
        username: str,
        authenticated: bool = False,
    ) -> list[Repository]:
        """
        Fetch every repository owned by a user, following pagination.

        Pages are requested until one comes back empty or short, or until
        a Link header is present without a "next" relation. A full page
        without any Link header is treated as "there may be more".
        """
        repositories: list[Repository] = []
        page = 1
        while True:
            response, chunk = await self._get(
                f"/users/{username}/repos",
                authenticated=authenticated,
                params={
                    "type": "owner",
                    "sort": "pushed",
                    "per_page": self._page_size,
                    "page": page,
                },
            )
            if not isinstance(chunk, list):
                raise UpstreamError(
                    status_code=response.status_code,
                    detail="Malformed repository list from GitHub API",
                )
            try:
                repositories.extend(Repository.model_validate(item) for item in chunk)
            except ValidationError as e:
                raise UpstreamError(
                    status_code=response.status_code,
                    detail=f"Malformed repository in GitHub API response: {e}",
                )

            if not self._has_next_page(response, len(chunk)):
                break
            page += 1

        logger.info(f"Fetched {len(repositories)} repositories for {username} in {page} page(s)")
        return repositories

    async def check_health(self) -> bool:
        """Check if GitHub API is reachable."""
        if not self._client:
            return False
        try:
            response = await self._client.get("/rate_limit")
            return response.status_code == 200
        except httpx.HTTPError:
            return False

    def _has_next_page(self, response: httpx.Response, count: int) -> bool:
        if count == 0 or count < self._page_size:
            return False
        if "link" in response.headers:
            return "next" in response.links
        return True

    def _auth_headers(self, authenticated: bool) -> dict[str, str]:
        if authenticated and self._token:
            return {"Authorization": f"Bearer {self._token}"}
        return {}

    async def _get(
        self,
        path: str,
        authenticated: bool,
        params: dict[str, Any] | None = None,
    ) -> tuple[httpx.Response, Any]:
        """
        Issue one GET request and decode its JSON body.

        Raises:
            AuthenticationError: If a credentialed request got 401/403
            UpstreamError: For other non-success statuses or a success
                response whose body is not JSON
            TransportError: On timeouts and connection failures
        """
        if not self._client:
            raise RuntimeError("Client not initialized. Call start() first.")

        try:
            response = await self._client.get(
                path,
                params=params,
                headers=self._auth_headers(authenticated),
            )
        except httpx.TimeoutException:
            raise TransportError("GitHub API request timed out")
        except httpx.RequestError as e:
            raise TransportError(f"Failed to connect to GitHub API: {str(e)}")

        try:
            data = response.json()
        except ValueError:
            if response.is_success:
                raise UpstreamError(
                    status_code=response.status_code,
                    detail=f"Malformed JSON in GitHub API response: {response.text[:200]!r}",
                )
            data = None

        if not response.is_success:
            detail = _error_detail(response, data)
            if authenticated and response.status_code in AUTH_FAILURE_STATUSES:
                raise AuthenticationError(status_code=response.status_code, detail=detail)
            raise UpstreamError(status_code=response.status_code, detail=detail)

        return response, data


def _error_detail(response: httpx.Response, data: Any) -> str:
    """Prefer GitHub's JSON `message`, then the raw body, then the status."""
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return response.text or f"HTTP {response.status_code}"
