"""Rate-limit aware HTTP client for the GitHub REST API.

On a quota-exhaustion response the client waits a fixed cooldown and retries
the same request once. A second quota failure raises QuotaExhaustedError.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

from talentscout.core.config import GitHubConfig
from talentscout.core.errors import QuotaExhaustedError, RemoteError
from talentscout.core.monitor import PerformanceMonitor

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


def is_quota_exhausted(response: httpx.Response) -> bool:
    """True for 429, or a 403 that carries rate-limit semantics."""
    if response.status_code == 429:
        return True
    if response.status_code != 403:
        return False
    if response.headers.get("x-ratelimit-remaining") == "0":
        return True
    return "rate limit" in _error_message(response).lower()


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.reason_phrase


class GitHubClient:
    """Async JSON client. Use as ``async with GitHubClient(...) as client``."""

    def __init__(
        self,
        config: GitHubConfig,
        monitor: PerformanceMonitor,
        token: str | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._config = config
        self._monitor = monitor
        self._sleep = sleep

        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": config.user_agent,
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        else:
            logger.warning("No GitHub token configured - running at reduced rate limit")

        self._http = httpx.AsyncClient(
            base_url=config.base_url,
            headers=headers,
            timeout=httpx.Timeout(config.timeout_seconds),
            transport=transport,
        )

    @property
    def authenticated(self) -> bool:
        return "Authorization" in self._http.headers

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    async def close(self) -> None:
        await self._http.aclose()

    async def fetch(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        *,
        api_name: str = "github",
    ) -> Any:
        """GET ``path`` and return the decoded JSON body.

        Raises:
            QuotaExhaustedError: rate limit still exhausted after one cooldown.
            RemoteError: any other non-2xx status or transport failure.
        """
        response = await self._request(path, params, api_name)

        if is_quota_exhausted(response):
            logger.warning(
                "Rate limit exceeded on %s - waiting %.0fs before one retry",
                path, self._config.cooldown_seconds,
            )
            await self._sleep(self._config.cooldown_seconds)
            response = await self._request(path, params, api_name)
            if is_quota_exhausted(response):
                raise QuotaExhaustedError(response.status_code, _error_message(response))

        if not response.is_success:
            raise RemoteError(response.status_code, _error_message(response))

        try:
            return response.json()
        except ValueError as e:
            msg = f"Invalid JSON from {path}: {e}"
            raise RemoteError(response.status_code, msg) from e

    async def _request(
        self,
        path: str,
        params: dict[str, Any] | None,
        api_name: str,
    ) -> httpx.Response:
        start = time.perf_counter()
        try:
            response = await self._http.get(path, params=params)
        except httpx.HTTPError as e:
            self._monitor.track_api_call(f"{api_name} (failed)", _elapsed_ms(start))
            msg = f"{type(e).__name__} requesting {path}: {e}"
            raise RemoteError(0, msg) from e

        name = api_name if response.is_success else f"{api_name} (failed)"
        self._monitor.track_api_call(name, _elapsed_ms(start))
        logger.debug("GET %s -> %d", path, response.status_code)
        return response


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000
