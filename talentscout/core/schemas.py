"""Core data models for the candidate-acquisition pipeline."""

from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator, model_validator


class SeniorityLevel(str, Enum):
    JUNIOR = "junior"
    MID = "mid"
    SENIOR = "senior"


# Titles that map onto the three-level scale.
SENIORITY_ALIASES: dict[str, SeniorityLevel] = {
    "intern": SeniorityLevel.JUNIOR,
    "entry": SeniorityLevel.JUNIOR,
    "junior": SeniorityLevel.JUNIOR,
    "mid": SeniorityLevel.MID,
    "middle": SeniorityLevel.MID,
    "intermediate": SeniorityLevel.MID,
    "senior": SeniorityLevel.SENIOR,
    "staff": SeniorityLevel.SENIOR,
    "lead": SeniorityLevel.SENIOR,
    "principal": SeniorityLevel.SENIOR,
}


class YearsRange(BaseModel):
    """Inclusive window of expected years of experience."""

    model_config = ConfigDict(frozen=True)

    min: float = Field(default=0.0, ge=0.0)
    max: float = Field(default=0.0, ge=0.0)

    @model_validator(mode="before")
    @classmethod
    def swap_inverted(cls, data: Any) -> Any:
        if isinstance(data, dict):
            lo, hi = data.get("min"), data.get("max")
            if lo is not None and hi is not None and lo > hi:
                data = {**data, "min": hi, "max": lo}
        return data

    def contains(self, years: float) -> bool:
        return self.min <= years <= self.max


class JobRequirements(BaseModel):
    """Structured requirements handed to the pipeline. Read-only input."""

    model_config = ConfigDict(frozen=True)

    title: str = ""
    required_skills: list[str] = Field(default_factory=list)
    preferred_skills: list[str] = Field(default_factory=list)
    level: SeniorityLevel | None = None
    years_experience: YearsRange | None = None

    @field_validator("required_skills", "preferred_skills")
    @classmethod
    def strip_skills(cls, v: list[str]) -> list[str]:
        return [s.strip() for s in v if s and s.strip()]

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: Any) -> Any:
        if v is None or isinstance(v, SeniorityLevel):
            return v
        key = str(v).lower().strip()
        if not key:
            return None
        if key not in SENIORITY_ALIASES:
            msg = f"level must be one of {sorted(SENIORITY_ALIASES)}, got '{key}'"
            raise ValueError(msg)
        return SENIORITY_ALIASES[key]

    @classmethod
    def from_yaml(cls, path: str | Path) -> "JobRequirements":
        """Load requirements from a YAML file."""
        path = Path(path)
        if not path.exists():
            msg = f"Requirements file not found: {path}"
            raise FileNotFoundError(msg)
        raw: dict[str, Any] = yaml.safe_load(path.read_text()) or {}
        return cls.model_validate(raw)

    def to_yaml(self, path: str | Path) -> None:
        """Write requirements to a YAML file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        data = self.model_dump(mode="json")
        path.write_text(yaml.dump(data, default_flow_style=False, sort_keys=False))


class CandidateIdentity(BaseModel):
    """A user handle returned by the search endpoint."""

    model_config = ConfigDict(frozen=True)

    id: str
    search_score: float = 0.0
    query: str = ""
    html_url: str = ""
    avatar_url: str = ""


class UserProfile(BaseModel):
    """Account-level data from the profile endpoint."""

    model_config = ConfigDict(frozen=True)

    login: str
    name: str | None = None
    location: str | None = None
    hireable: bool = False
    created_at: datetime
    public_repos: int = Field(default=0, ge=0)
    followers: int = Field(default=0, ge=0)
    html_url: str = ""


class RepoSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    description: str | None = None
    primary_language: str | None = None
    star_count: int = Field(default=0, ge=0)
    fork_count: int = Field(default=0, ge=0)
    topics: frozenset[str] = Field(default_factory=frozenset)


class ActivityEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str
    repo_name: str | None = None
    created_at: datetime | None = None


class ExperienceSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    years_active: float = Field(default=0.0, ge=0.0)
    total_stars: int = Field(default=0, ge=0)
    total_forks: int = Field(default=0, ge=0)
    repo_count: int = Field(default=0, ge=0)
    level: SeniorityLevel = SeniorityLevel.JUNIOR


class CandidateProfile(BaseModel):
    """An enriched candidate. Every enrichment run builds a fresh instance.

    ``degraded`` names the sub-resources that failed and were replaced by
    empty data.
    """

    model_config = ConfigDict(frozen=True)

    identity: CandidateIdentity
    display_name: str
    location: str | None = None
    available: bool = False
    joined_at: datetime
    followers: int = Field(default=0, ge=0)
    html_url: str = ""
    repositories: tuple[RepoSummary, ...] = ()
    activity_events: tuple[ActivityEvent, ...] = ()
    derived_skills: frozenset[str] = Field(default_factory=frozenset)
    experience: ExperienceSummary
    degraded: frozenset[str] = Field(default_factory=frozenset)

    @property
    def id(self) -> str:
        return self.identity.id


class SkillsMatch(BaseModel):
    model_config = ConfigDict(frozen=True)

    required: int = Field(default=0, ge=0)
    preferred: int = Field(default=0, ge=0)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total(self) -> int:
        return self.required + self.preferred


class ScoredCandidate(BaseModel):
    """Wrapper that pairs a frozen CandidateProfile with a relevance score."""

    model_config = ConfigDict(frozen=True)

    profile: CandidateProfile
    score: float = Field(default=0.0, ge=0.0, le=100.0)
    skills_match: SkillsMatch = Field(default_factory=SkillsMatch)


class CacheStats(BaseModel):
    """Snapshot of cache counters."""

    hits: int = 0
    misses: int = 0
    memory_hits: int = 0
    disk_hits: int = 0
    writes: int = 0
    memory_size: int = 0
    max_memory_size: int = 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def hit_rate(self) -> float:
        """Hit rate as a percentage of all lookups."""
        total = self.hits + self.misses
        if total == 0:
            return 0.0
        return round(self.hits / total * 100, 2)


class OperationStat(BaseModel):
    name: str
    duration_ms: float
    percentage: float


class ApiStat(BaseModel):
    name: str
    count: int
    total_ms: float
    average_ms: float
    min_ms: float
    max_ms: float


class PerformanceSummary(BaseModel):
    total_ms: float
    operations: list[OperationStat] = Field(default_factory=list)
    api_calls: list[ApiStat] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


class PipelineResult(BaseModel):
    """Everything a single pipeline run produced."""

    requirements: JobRequirements
    queries: list[str]
    identities_found: int
    enriched_count: int
    candidates: list[ScoredCandidate]
    cache_stats: CacheStats
    performance: PerformanceSummary
    searched_at: datetime = Field(default_factory=datetime.now)
