"""GitHub candidate source: cache-then-fetch for every remote resource."""

import logging
from collections.abc import Callable
from typing import Any

from talentscout.core.cache import CacheStore
from talentscout.core.config import CacheConfig, EnrichmentConfig, GitHubConfig
from talentscout.core.schemas import ActivityEvent, CandidateIdentity, RepoSummary, UserProfile
from talentscout.platforms.base import CandidateSource
from talentscout.platforms.github.client import GitHubClient
from talentscout.platforms.github.parser import (
    parse_events,
    parse_profile,
    parse_repos,
    parse_search_items,
)

logger = logging.getLogger(__name__)

_MISS = object()


class GitHubAdapter(CandidateSource):
    """Reads raw payloads from the cache, falling back to the API on a miss.

    Only successful responses are cached. Payloads are cached raw and parsed
    on every read, so a parser change never needs a cache flush.
    """

    def __init__(
        self,
        client: GitHubClient,
        cache: CacheStore,
        github_config: GitHubConfig | None = None,
        cache_config: CacheConfig | None = None,
        enrichment_config: EnrichmentConfig | None = None,
    ) -> None:
        self._client = client
        self._cache = cache
        self._github = github_config or GitHubConfig()
        self._cache_config = cache_config or CacheConfig()
        self._enrichment = enrichment_config or EnrichmentConfig()

    @property
    def source_id(self) -> str:
        return "github"

    async def search_users(self, query: str) -> list[CandidateIdentity]:
        payload = await self._cached_fetch(
            "search",
            (query,),
            "/search/users",
            {
                "q": query,
                "per_page": self._github.per_page,
                "page": 1,
                "sort": "followers",
                "order": "desc",
            },
            extract=lambda body: body.get("items", []) if isinstance(body, dict) else body,
        )
        return parse_search_items(payload, query)

    async def get_profile(self, candidate_id: str) -> UserProfile:
        payload = await self._cached_fetch(
            "profile", (candidate_id,), f"/users/{candidate_id}", None,
        )
        return parse_profile(payload)

    async def get_repositories(self, candidate_id: str) -> list[RepoSummary]:
        payload = await self._cached_fetch(
            "repos",
            (candidate_id,),
            f"/users/{candidate_id}/repos",
            {"per_page": self._enrichment.repos_per_page, "sort": "updated"},
        )
        return parse_repos(payload)

    async def get_events(self, candidate_id: str) -> list[ActivityEvent]:
        payload = await self._cached_fetch(
            "events",
            (candidate_id,),
            f"/users/{candidate_id}/events",
            {"per_page": self._enrichment.events_per_page},
        )
        return parse_events(payload)

    async def _cached_fetch(
        self,
        namespace: str,
        key_params: tuple[str, ...],
        path: str,
        params: dict[str, Any] | None,
        extract: Callable[[Any], Any] | None = None,
    ) -> Any:
        key = CacheStore.generate_key(namespace, *key_params)
        cached = self._cache.get(key, _MISS)
        if cached is not _MISS:
            logger.debug("Cache hit: %s %s", namespace, key_params)
            return cached

        logger.debug("Cache miss: %s %s", namespace, key_params)
        body = await self._client.fetch(path, params, api_name=namespace)
        payload = extract(body) if extract is not None else body
        self._cache.set(key, payload, self._cache_config.ttl_for(namespace))
        return payload
