"""Enrichment stage: profile, repositories and events for each candidate.

Candidates are processed in fixed-size batches. Inside a batch every
candidate, and each of its three sub-fetches, runs concurrently. Batches run
one after another with a fixed delay between them (none after the last).

Failure policy per candidate:
  - profile fails      -> candidate dropped (warning)
  - repositories fail  -> empty tuple, recorded in ``degraded``
  - events fail        -> empty tuple, recorded in ``degraded``
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from datetime import datetime, timezone
from typing import Any

from talentscout.core.config import EnrichmentConfig
from talentscout.core.errors import EnrichmentPartialFailure, RemoteError
from talentscout.core.monitor import PerformanceMonitor
from talentscout.core.schemas import (
    CandidateIdentity,
    CandidateProfile,
    ExperienceSummary,
    JobRequirements,
    RepoSummary,
    SeniorityLevel,
    UserProfile,
)
from talentscout.core.skills import SkillTables
from talentscout.platforms.base import CandidateSource

logger = logging.getLogger(__name__)

DAYS_PER_YEAR = 365.0

# Errors scoped to a single sub-fetch. ValueError covers malformed payloads
# (pydantic's ValidationError is a ValueError).
_CANDIDATE_ERRORS = (RemoteError, ValueError)


def derive_skills(repos: Iterable[RepoSummary], vocabulary: Iterable[str]) -> frozenset[str]:
    """Primary languages plus vocabulary keywords found in repository text.

    Matching is a case-insensitive substring test, so "ml" also matches
    "html". That is accepted.
    """
    skills: set[str] = set()
    texts: list[str] = []
    for repo in repos:
        if repo.primary_language:
            skills.add(repo.primary_language.lower())
        texts.append(repo.name)
        if repo.description:
            texts.append(repo.description)
        texts.extend(sorted(repo.topics))

    blob = " ".join(texts).lower()
    if blob:
        skills.update(kw for kw in vocabulary if kw and kw in blob)
    return frozenset(skills)


def classify_level(years_active: float, total_stars: int, repo_count: int) -> SeniorityLevel:
    """Any single strong signal is enough to promote a level."""
    if years_active > 5 or total_stars > 100 or repo_count > 20:
        return SeniorityLevel.SENIOR
    if years_active > 2 or total_stars > 20 or repo_count > 10:
        return SeniorityLevel.MID
    return SeniorityLevel.JUNIOR


def calculate_experience(
    profile: UserProfile,
    repos: list[RepoSummary],
    now: datetime,
) -> ExperienceSummary:
    """Aggregate account age and repository totals into an ExperienceSummary."""
    joined = profile.created_at
    if joined.tzinfo is None:
        joined = joined.replace(tzinfo=timezone.utc)
    elapsed_days = (now - joined).total_seconds() / 86400
    years_active = max(0.0, elapsed_days / DAYS_PER_YEAR)

    total_stars = sum(r.star_count for r in repos)
    total_forks = sum(r.fork_count for r in repos)
    repo_count = max(profile.public_repos, len(repos))

    return ExperienceSummary(
        years_active=years_active,
        total_stars=total_stars,
        total_forks=total_forks,
        repo_count=repo_count,
        level=classify_level(years_active, total_stars, repo_count),
    )


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Enricher:
    """Turns candidate identities into CandidateProfiles.

    Usage::

        enricher = Enricher(source, settings.skills, settings.enrichment, monitor)
        profiles = await enricher.enrich(identities, requirements)
    """

    def __init__(
        self,
        source: CandidateSource,
        tables: SkillTables,
        config: EnrichmentConfig,
        monitor: PerformanceMonitor,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._source = source
        self._tables = tables
        self._config = config
        self._monitor = monitor
        self._sleep = sleep
        self._clock = clock

    async def enrich(
        self,
        identities: list[CandidateIdentity],
        requirements: JobRequirements,
    ) -> list[CandidateProfile]:
        """Enrich every identity. Candidate-scoped failures never propagate."""
        size = self._config.batch_size
        batches = [identities[i:i + size] for i in range(0, len(identities), size)]
        enriched: list[CandidateProfile] = []

        for number, batch in enumerate(batches, start=1):
            with self._monitor.operation(f"Enrichment batch {number}"):
                results = await asyncio.gather(
                    *(self._enrich_one(identity) for identity in batch),
                    return_exceptions=True,
                )

            for identity, result in zip(batch, results):
                if isinstance(result, EnrichmentPartialFailure):
                    logger.warning("Dropping candidate '%s': %s", identity.id, result)
                elif isinstance(result, BaseException):
                    raise result
                else:
                    enriched.append(result)

            if number < len(batches):
                await self._sleep(self._config.batch_delay_seconds)

        logger.info(
            "Enriched %d/%d candidates for '%s'",
            len(enriched), len(identities), requirements.title or "untitled role",
        )
        return enriched

    async def _enrich_one(self, identity: CandidateIdentity) -> CandidateProfile:
        cid = identity.id
        profile_res, repos_res, events_res = await asyncio.gather(
            self._source.get_profile(cid),
            self._source.get_repositories(cid),
            self._source.get_events(cid),
            return_exceptions=True,
        )

        if isinstance(profile_res, BaseException):
            if isinstance(profile_res, _CANDIDATE_ERRORS):
                raise EnrichmentPartialFailure(cid, "profile", profile_res) from profile_res
            raise profile_res

        degraded: set[str] = set()
        repos = self._degrade(cid, "repositories", repos_res, degraded)
        events = self._degrade(cid, "events", events_res, degraded)

        with self._monitor.operation("Skills extraction"):
            skills = derive_skills(repos, self._tables.vocabulary)
        with self._monitor.operation("Experience calculation"):
            experience = calculate_experience(profile_res, repos, self._clock())

        return CandidateProfile(
            identity=identity,
            display_name=profile_res.name or profile_res.login,
            location=profile_res.location,
            available=profile_res.hireable,
            joined_at=profile_res.created_at,
            followers=profile_res.followers,
            html_url=profile_res.html_url or identity.html_url,
            repositories=tuple(repos),
            activity_events=tuple(events),
            derived_skills=skills,
            experience=experience,
            degraded=frozenset(degraded),
        )

    def _degrade(
        self,
        cid: str,
        resource: str,
        result: Any,
        degraded: set[str],
    ) -> list[Any]:
        """Return ``result``, or an empty list if the sub-fetch failed."""
        if not isinstance(result, BaseException):
            return result
        if not isinstance(result, _CANDIDATE_ERRORS):
            raise result
        logger.warning("%s - continuing without it", EnrichmentPartialFailure(cid, resource, result))
        degraded.add(resource)
        return []
