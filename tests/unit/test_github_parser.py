"""Tests for GitHub payload parsing."""

from datetime import datetime, timezone

import pytest

from talentscout.platforms.github.parser import (
    parse_events,
    parse_profile,
    parse_repos,
    parse_search_items,
    parse_timestamp,
)


def _user(**overrides: object) -> dict:
    base = {
        "login": "octocat",
        "name": "The Octocat",
        "location": "San Francisco",
        "hireable": True,
        "created_at": "2011-01-25T18:44:36Z",
        "public_repos": 8,
        "followers": 9000,
        "html_url": "https://github.com/octocat",
    }
    base.update(overrides)
    return base


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------


class TestParseSearchItems:
    def test_items_from_dict(self) -> None:
        payload = {"total_count": 2, "items": [
            {"login": "a", "score": 1.5, "html_url": "https://github.com/a"},
            {"login": "b"},
        ]}
        result = parse_search_items(payload, "language:go")
        assert [i.id for i in result] == ["a", "b"]
        assert result[0].search_score == 1.5
        assert result[0].query == "language:go"
        assert result[1].search_score == 0.0

    def test_bare_list(self) -> None:
        result = parse_search_items([{"login": "a"}], "q")
        assert len(result) == 1

    def test_skips_items_without_login(self) -> None:
        result = parse_search_items([{"login": ""}, {"id": 3}, "junk", {"login": "ok"}], "q")
        assert [i.id for i in result] == ["ok"]

    def test_non_list_is_empty(self) -> None:
        assert parse_search_items({"items": "nope"}, "q") == []
        assert parse_search_items(None, "q") == []


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------


class TestParseProfile:
    def test_full_profile(self) -> None:
        profile = parse_profile(_user())
        assert profile.login == "octocat"
        assert profile.name == "The Octocat"
        assert profile.hireable is True
        assert profile.created_at == datetime(2011, 1, 25, 18, 44, 36, tzinfo=timezone.utc)
        assert profile.public_repos == 8
        assert profile.followers == 9000

    def test_nulls_become_defaults(self) -> None:
        profile = parse_profile(_user(name=None, location="", hireable=None, followers=None))
        assert profile.name is None
        assert profile.location is None
        assert profile.hireable is False
        assert profile.followers == 0

    def test_missing_login_raises(self) -> None:
        with pytest.raises(ValueError, match="login"):
            parse_profile({"created_at": "2011-01-25T18:44:36Z"})

    def test_missing_created_at_raises(self) -> None:
        with pytest.raises(ValueError, match="created_at"):
            parse_profile(_user(created_at=None))

    def test_non_dict_raises(self) -> None:
        with pytest.raises(ValueError):
            parse_profile(["octocat"])


# ---------------------------------------------------------------------------
# Repositories
# ---------------------------------------------------------------------------


class TestParseRepos:
    def test_maps_fields(self) -> None:
        repos = parse_repos([{
            "name": "ml-toolkit",
            "description": "Tools",
            "language": "Python",
            "stargazers_count": 12,
            "forks_count": 3,
            "topics": ["TensorFlow", "ML"],
        }])
        repo = repos[0]
        assert repo.primary_language == "Python"
        assert repo.star_count == 12
        assert repo.fork_count == 3
        assert repo.topics == frozenset({"tensorflow", "ml"})

    def test_skips_malformed(self) -> None:
        repos = parse_repos([{"description": "no name"}, 42, {"name": "ok"}])
        assert [r.name for r in repos] == ["ok"]

    def test_missing_counts_default_zero(self) -> None:
        repo = parse_repos([{"name": "x", "stargazers_count": None}])[0]
        assert repo.star_count == 0
        assert repo.topics == frozenset()

    def test_non_list_raises(self) -> None:
        with pytest.raises(ValueError, match="list of repositories"):
            parse_repos({"message": "Not Found"})


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


class TestParseEvents:
    def test_maps_events(self) -> None:
        events = parse_events([
            {"type": "PushEvent", "repo": {"name": "octocat/hello"}, "created_at": "2024-05-01T10:00:00Z"},
            {"type": "WatchEvent"},
        ])
        assert events[0].repo_name == "octocat/hello"
        assert events[0].created_at is not None
        assert events[1].repo_name is None

    def test_skips_untyped(self) -> None:
        assert parse_events([{"repo": {}}]) == []

    def test_non_list_raises(self) -> None:
        with pytest.raises(ValueError, match="list of events"):
            parse_events("oops")


class TestParseTimestamp:
    def test_z_suffix(self) -> None:
        ts = parse_timestamp("2020-02-03T04:05:06Z")
        assert ts is not None
        assert ts.tzinfo is not None

    def test_invalid(self) -> None:
        assert parse_timestamp("yesterday") is None
        assert parse_timestamp(None) is None
        assert parse_timestamp(123) is None
