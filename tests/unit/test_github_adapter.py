"""Tests for the cache-then-fetch GitHub adapter."""

from pathlib import Path

import httpx
import pytest

from talentscout.core.cache import CacheStore
from talentscout.core.config import CacheConfig, GitHubConfig
from talentscout.core.errors import RemoteError
from talentscout.core.monitor import PerformanceMonitor
from talentscout.platforms.github.adapter import GitHubAdapter
from talentscout.platforms.github.client import GitHubClient


async def _no_sleep(seconds: float) -> None:
    return None


class FakeApi:
    """Routes paths to canned JSON and counts requests per path."""

    def __init__(self, routes: dict[str, httpx.Response]) -> None:
        self.routes = routes
        self.hits: dict[str, int] = {}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.hits[path] = self.hits.get(path, 0) + 1
        self.requests.append(request)
        if path not in self.routes:
            return httpx.Response(404, json={"message": "Not Found"})
        return self.routes[path]


@pytest.fixture
def cache(tmp_path: Path) -> CacheStore:
    return CacheStore(tmp_path / "cache")


def _adapter(api: FakeApi, cache: CacheStore, cache_config: CacheConfig | None = None) -> GitHubAdapter:
    config = GitHubConfig(base_url="https://api.test", per_page=10)
    client = GitHubClient(
        config, PerformanceMonitor(), "t", transport=httpx.MockTransport(api), sleep=_no_sleep,
    )
    return GitHubAdapter(client, cache, config, cache_config)


USER = {"login": "octocat", "created_at": "2015-01-01T00:00:00Z", "public_repos": 3}


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestGitHubAdapter:
    async def test_search_params(self, cache: CacheStore) -> None:
        api = FakeApi({"/search/users": httpx.Response(200, json={"items": [{"login": "a"}]})})
        adapter = _adapter(api, cache)

        result = await adapter.search_users("language:rust followers:>50")

        assert [i.id for i in result] == ["a"]
        params = api.requests[0].url.params
        assert params["q"] == "language:rust followers:>50"
        assert params["per_page"] == "10"
        assert params["sort"] == "followers"
        assert params["order"] == "desc"

    async def test_second_call_served_from_cache(self, cache: CacheStore) -> None:
        api = FakeApi({"/users/octocat": httpx.Response(200, json=USER)})
        adapter = _adapter(api, cache)

        first = await adapter.get_profile("octocat")
        second = await adapter.get_profile("octocat")

        assert first == second
        assert api.hits["/users/octocat"] == 1
        assert cache.stats().hits == 1

    async def test_search_caches_item_list(self, cache: CacheStore) -> None:
        api = FakeApi({"/search/users": httpx.Response(200, json={"total_count": 1, "items": [{"login": "a"}]})})
        adapter = _adapter(api, cache)
        await adapter.search_users("q")

        key = CacheStore.generate_key("search", "q")
        assert cache.get(key) == [{"login": "a"}]

    async def test_cached_null_body_is_a_hit(self, cache: CacheStore) -> None:
        api = FakeApi({"/search/users": httpx.Response(
            200, content=b"null", headers={"content-type": "application/json"},
        )})
        adapter = _adapter(api, cache)

        assert await adapter.search_users("q") == []
        assert await adapter.search_users("q") == []

        assert api.hits["/search/users"] == 1
        assert cache.stats().hits == 1

    async def test_failures_not_cached(self, cache: CacheStore) -> None:
        api = FakeApi({})
        adapter = _adapter(api, cache)

        for _ in range(2):
            with pytest.raises(RemoteError):
                await adapter.get_events("ghost")
        assert api.hits["/users/ghost/events"] == 2
        assert cache.stats().writes == 0

    async def test_repos_request(self, cache: CacheStore) -> None:
        api = FakeApi({"/users/octocat/repos": httpx.Response(200, json=[{"name": "r", "language": "Go"}])})
        adapter = _adapter(api, cache)

        repos = await adapter.get_repositories("octocat")

        assert repos[0].primary_language == "Go"
        params = api.requests[0].url.params
        assert params["per_page"] == "100"
        assert params["sort"] == "updated"

    async def test_namespace_ttl(self, tmp_path: Path) -> None:
        clock_now = [1000.0]
        cache = CacheStore(tmp_path, clock=lambda: clock_now[0])
        api = FakeApi({"/users/octocat/events": httpx.Response(200, json=[])})
        adapter = _adapter(api, cache, CacheConfig(namespace_ttl_seconds={"events": 5}))

        await adapter.get_events("octocat")
        clock_now[0] += 6
        await adapter.get_events("octocat")

        assert api.hits["/users/octocat/events"] == 2

    def test_source_id(self, cache: CacheStore) -> None:
        assert _adapter(FakeApi({}), cache).source_id == "github"
