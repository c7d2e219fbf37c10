"""Tests for configuration models and YAML loading."""

from pathlib import Path
from textwrap import dedent

import pytest
from pydantic import ValidationError

from talentscout.core.config import (
    CacheConfig,
    EnrichmentConfig,
    GitHubConfig,
    QueryConfig,
    ScoringConfig,
    Settings,
)
from talentscout.core.skills import SkillTables

REPO_ROOT = Path(__file__).resolve().parents[2]


class TestGitHubConfig:
    def test_defaults(self) -> None:
        g = GitHubConfig()
        assert g.base_url == "https://api.github.com"
        assert g.token_env == "GITHUB_TOKEN"
        assert g.cooldown_seconds == 60.0

    def test_trailing_slash_stripped(self) -> None:
        assert GitHubConfig(base_url="https://ghe.example.com/api/v3/").base_url == "https://ghe.example.com/api/v3"

    def test_per_page_bounds(self) -> None:
        with pytest.raises(ValidationError):
            GitHubConfig(per_page=0)
        with pytest.raises(ValidationError):
            GitHubConfig(per_page=101)

    def test_resolve_token(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SCOUT_TOKEN", "  abc  ")
        assert GitHubConfig(token_env="SCOUT_TOKEN").resolve_token() == "abc"

    def test_resolve_token_missing(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("SCOUT_TOKEN", raising=False)
        assert GitHubConfig(token_env="SCOUT_TOKEN").resolve_token() is None


class TestCacheConfig:
    def test_defaults(self) -> None:
        c = CacheConfig()
        assert c.default_ttl_seconds == 3600.0
        assert c.max_memory_entries == 200

    def test_ttl_for_namespace(self) -> None:
        c = CacheConfig(namespace_ttl_seconds={"profile": 86400})
        assert c.ttl_for("profile") == 86400
        assert c.ttl_for("events") == 3600.0

    def test_non_positive_namespace_ttl(self) -> None:
        with pytest.raises(ValidationError, match="must be positive"):
            CacheConfig(namespace_ttl_seconds={"search": 0})

    def test_default_ttl_positive(self) -> None:
        with pytest.raises(ValidationError):
            CacheConfig(default_ttl_seconds=0)


class TestQueryConfig:
    def test_defaults(self) -> None:
        q = QueryConfig()
        assert q.max_skills == 5
        assert q.max_queries == 6
        assert q.level_filters["senior"].min_followers == 100

    def test_max_queries_bound(self) -> None:
        with pytest.raises(ValidationError):
            QueryConfig(max_queries=9)


class TestEnrichmentConfig:
    def test_defaults(self) -> None:
        e = EnrichmentConfig()
        assert e.batch_size == 5
        assert e.batch_delay_seconds == 2.0

    def test_batch_size_min(self) -> None:
        with pytest.raises(ValidationError):
            EnrichmentConfig(batch_size=0)


class TestScoringConfig:
    def test_defaults(self) -> None:
        s = ScoringConfig()
        assert s.required_skills_weight == 40.0
        assert s.preferred_skills_weight == 20.0
        assert s.result_budget == 20

    def test_budget_min(self) -> None:
        with pytest.raises(ValidationError):
            ScoringConfig(result_budget=0)


class TestSkillTables:
    def test_keys_lowercased(self) -> None:
        t = SkillTables(implied={"TensorFlow": ("python",)})
        assert t.implied_by("tensorflow") == ("python",)
        assert t.implied_by("TENSORFLOW") == ("python",)

    def test_tables_read_only(self) -> None:
        t = SkillTables(implied={"a": ("b",)})
        with pytest.raises(TypeError):
            t.implied["c"] = ("d",)  # type: ignore[index]

    def test_default_tables(self) -> None:
        t = SkillTables()
        assert t.implied_by("TensorFlow") == ("python", "numpy", "pandas")
        assert t.languages_for("react") == ("JavaScript", "TypeScript")
        with pytest.raises(TypeError):
            t.language_filters["cobol"] = ("COBOL",)  # type: ignore[index]

    def test_unknown_skill_defaults(self) -> None:
        t = SkillTables()
        assert t.implied_by("cobol") == ()
        assert t.languages_for("cobol") == t.default_language_filters


class TestSettings:
    def test_defaults(self) -> None:
        settings = Settings()
        assert settings.skills.implied_by("django") == ("python", "sql")
        assert settings.enrichment.batch_size == 5

    def test_load_from_yaml(self, tmp_path: Path) -> None:
        yaml_content = dedent("""\
            github:
              token_env: MY_TOKEN
              cooldown_seconds: 5
            cache:
              directory: /tmp/scout-cache
              namespace_ttl_seconds:
                profile: 86400
            queries:
              max_queries: 4
            enrichment:
              batch_size: 3
            scoring:
              result_budget: 10
            skills:
              vocabulary: [Elixir, Phoenix]
            llm:
              provider: openai
        """)
        config_file = tmp_path / "settings.yaml"
        config_file.write_text(yaml_content)

        settings = Settings.from_yaml(config_file)

        assert settings.github.token_env == "MY_TOKEN"
        assert settings.github.cooldown_seconds == 5.0
        assert settings.cache.ttl_for("profile") == 86400
        assert settings.queries.max_queries == 4
        assert settings.enrichment.batch_size == 3
        assert settings.scoring.result_budget == 10
        assert settings.skills.vocabulary == ("elixir", "phoenix")
        assert settings.llm.provider == "openai"

    def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        config_file = tmp_path / "settings.yaml"
        config_file.write_text("")
        settings = Settings.from_yaml(config_file)
        assert settings.enrichment.batch_size == 5

    def test_file_not_found(self) -> None:
        with pytest.raises(FileNotFoundError):
            Settings.from_yaml("/nonexistent/path.yaml")

    def test_invalid_value_raises(self, tmp_path: Path) -> None:
        config_file = tmp_path / "settings.yaml"
        config_file.write_text("enrichment:\n  batch_size: -1\n")
        with pytest.raises(ValidationError):
            Settings.from_yaml(config_file)

    def test_load_example_settings(self) -> None:
        """The shipped example config must be valid."""
        settings = Settings.from_yaml(REPO_ROOT / "config" / "settings.example.yaml")
        assert settings.cache.ttl_for("profile") == 86400
        assert settings.queries.level_filters["mid"].created_before == "2021-01-01"
