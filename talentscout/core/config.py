"""Configuration models and YAML loader for the talent scout pipeline."""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from talentscout.core.skills import SkillTables


class GitHubConfig(BaseModel):
    """Candidate-source API connection settings."""

    base_url: str = "https://api.github.com"
    token_env: str = "GITHUB_TOKEN"
    timeout_seconds: float = Field(default=30.0, gt=0)
    cooldown_seconds: float = Field(default=60.0, ge=0)
    per_page: int = Field(default=30, ge=1, le=100)
    user_agent: str = "talentscout"

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    def resolve_token(self) -> str | None:
        """Read the API token from the configured environment variable."""
        token = os.environ.get(self.token_env, "").strip()
        return token or None


class CacheConfig(BaseModel):
    """Two-tier cache settings. TTLs are in seconds."""

    directory: str = "data/cache"
    default_ttl_seconds: float = Field(default=3600.0, gt=0)
    max_memory_entries: int = Field(default=200, ge=1)
    namespace_ttl_seconds: dict[str, float] = Field(default_factory=dict)

    @field_validator("namespace_ttl_seconds")
    @classmethod
    def positive_ttls(cls, v: dict[str, float]) -> dict[str, float]:
        for name, ttl in v.items():
            if ttl <= 0:
                msg = f"TTL for namespace '{name}' must be positive"
                raise ValueError(msg)
        return v

    def ttl_for(self, namespace: str) -> float:
        return self.namespace_ttl_seconds.get(namespace, self.default_ttl_seconds)


class LevelFilter(BaseModel):
    """Coarse quality filter appended to queries for a seniority level."""

    min_followers: int = Field(default=0, ge=0)
    created_before: str | None = None


def _default_level_filters() -> dict[str, LevelFilter]:
    return {
        "senior": LevelFilter(min_followers=100, created_before="2019-01-01"),
        "mid": LevelFilter(min_followers=50, created_before="2021-01-01"),
    }


class QueryConfig(BaseModel):
    """Bounds on search query construction."""

    max_skills: int = Field(default=5, ge=1, le=8)
    max_queries: int = Field(default=6, ge=1, le=8)
    level_filters: dict[str, LevelFilter] = Field(default_factory=_default_level_filters)


class EnrichmentConfig(BaseModel):
    """Batching for the enrichment stage."""

    batch_size: int = Field(default=5, ge=1, le=50)
    batch_delay_seconds: float = Field(default=2.0, ge=0)
    repos_per_page: int = Field(default=100, ge=1, le=100)
    events_per_page: int = Field(default=100, ge=1, le=100)


class ScoringConfig(BaseModel):
    """Weights and thresholds for rule-based candidate scoring."""

    required_skills_weight: float = 40.0
    preferred_skills_weight: float = 20.0
    level_match_bonus: float = 20.0
    adjacent_level_bonus: float = 10.0
    years_in_range_bonus: float = 10.0
    stars_bonus: float = 5.0
    stars_threshold: int = Field(default=50, ge=0)
    repos_bonus: float = 5.0
    repos_threshold: int = Field(default=15, ge=0)
    availability_bonus: float = 5.0
    result_budget: int = Field(default=20, ge=1)


class LLMConfig(BaseModel):
    """Provider used to turn job descriptions into requirements."""

    provider: str = "anthropic"
    model: str | None = None


class Settings(BaseModel):
    """Top-level settings loaded from YAML."""

    github: GitHubConfig = Field(default_factory=GitHubConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    queries: QueryConfig = Field(default_factory=QueryConfig)
    enrichment: EnrichmentConfig = Field(default_factory=EnrichmentConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    skills: SkillTables = Field(default_factory=SkillTables)
    llm: LLMConfig = Field(default_factory=LLMConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Settings":
        """Load settings from a YAML file."""
        path = Path(path)
        if not path.exists():
            msg = f"Config file not found: {path}"
            raise FileNotFoundError(msg)
        raw: dict[str, Any] = yaml.safe_load(path.read_text()) or {}
        return cls.model_validate(raw)
