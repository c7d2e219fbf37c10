"""Orchestrator: wires query building, search, enrichment and scoring.

Data flow:
  1. Query builder  -> bounded list of search queries
  2. Search         -> unique candidate identities
  3. Enrichment     -> CandidateProfiles (batched, rate limited)
  4. Scoring        -> ranked, truncated ScoredCandidates

The cache, HTTP client and monitor are built once per run by ``run_pipeline``
and closed when the run ends.
"""

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime

import httpx

from talentscout.core.cache import CacheStore
from talentscout.core.config import Settings
from talentscout.core.monitor import PerformanceMonitor
from talentscout.core.schemas import JobRequirements, PipelineResult
from talentscout.pipeline.enricher import Enricher
from talentscout.pipeline.query_builder import build_queries
from talentscout.pipeline.scorer import score_candidates
from talentscout.pipeline.search import search_candidates
from talentscout.platforms.base import CandidateSource
from talentscout.platforms.github.adapter import GitHubAdapter
from talentscout.platforms.github.client import GitHubClient
from talentscout.requirements.extractor import RequirementsExtractor

logger = logging.getLogger(__name__)


class TalentPipeline:
    """One candidate-acquisition run over an already-built source.

    Usage::

        pipeline = TalentPipeline(settings, source, cache, monitor)
        result = await pipeline.run(requirements)
    """

    def __init__(
        self,
        settings: Settings,
        source: CandidateSource,
        cache: CacheStore,
        monitor: PerformanceMonitor,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._settings = settings
        self._source = source
        self._cache = cache
        self._monitor = monitor
        self._enricher = Enricher(
            source,
            settings.skills,
            settings.enrichment,
            monitor,
            sleep=sleep,
        )

    async def run(self, requirements: JobRequirements) -> PipelineResult:
        """Execute the full pipeline. Always returns, possibly with no candidates."""
        s = self._settings

        with self._monitor.operation("Query building"):
            queries = build_queries(requirements, s.skills, s.queries)
        logger.info("Built %d search queries", len(queries))

        with self._monitor.operation("Candidate search"):
            identities = await search_candidates(queries, self._source)
        logger.info("Found %d unique candidates", len(identities))

        with self._monitor.operation("Candidate enrichment"):
            profiles = await self._enricher.enrich(identities, requirements)

        with self._monitor.operation("Candidate scoring"):
            ranked = score_candidates(profiles, requirements, s.scoring)
        logger.info("Ranked %d candidates (budget %d)", len(ranked), s.scoring.result_budget)

        return PipelineResult(
            requirements=requirements,
            queries=queries,
            identities_found=len(identities),
            enriched_count=len(profiles),
            candidates=ranked,
            cache_stats=self._cache.stats(),
            performance=self._monitor.summary(),
        )

    async def run_from_description(
        self,
        job_description: str,
        extractor: RequirementsExtractor,
    ) -> PipelineResult:
        """Extract requirements from free text, then run the pipeline."""
        with self._monitor.operation("Requirements extraction"):
            requirements = await asyncio.to_thread(extractor.extract, job_description)
        return await self.run(requirements)


def build_cache(settings: Settings) -> CacheStore:
    c = settings.cache
    return CacheStore(
        c.directory,
        default_ttl=c.default_ttl_seconds,
        max_memory_entries=c.max_memory_entries,
    )


async def run_pipeline(
    settings: Settings,
    requirements: JobRequirements | None = None,
    *,
    job_description: str | None = None,
    extractor: RequirementsExtractor | None = None,
    token: str | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> PipelineResult:
    """Build every collaborator, run the pipeline, and tear everything down.

    Pass either ``requirements`` or ``job_description`` with an ``extractor``.
    ``token`` defaults to the environment variable named in settings.
    """
    if requirements is None and (job_description is None or extractor is None):
        msg = "either requirements or job_description with an extractor is required"
        raise ValueError(msg)

    monitor = PerformanceMonitor()
    cache = build_cache(settings)
    use_token = token if token is not None else settings.github.resolve_token()

    try:
        async with GitHubClient(
            settings.github, monitor, use_token, transport=transport, sleep=sleep,
        ) as client:
            source = GitHubAdapter(
                client, cache, settings.github, settings.cache, settings.enrichment,
            )
            pipeline = TalentPipeline(settings, source, cache, monitor, sleep=sleep)
            if requirements is not None:
                result = await pipeline.run(requirements)
            else:
                result = await pipeline.run_from_description(job_description, extractor)
    finally:
        cache.close()

    monitor.log_report()
    return result


def export_results_json(result: PipelineResult) -> str:
    """Export a pipeline result as a JSON string."""
    candidates = []
    for rank, s in enumerate(result.candidates, start=1):
        p = s.profile
        exp = p.experience
        candidates.append({
            "rank": rank,
            "username": p.id,
            "name": p.display_name,
            "score": round(s.score, 1),
            "profile_url": p.html_url,
            "location": p.location,
            "available": p.available,
            "followers": p.followers,
            "experience": {
                "level": exp.level.value,
                "years_active": round(exp.years_active, 1),
                "total_stars": exp.total_stars,
                "total_forks": exp.total_forks,
                "repo_count": exp.repo_count,
            },
            "skills": sorted(p.derived_skills),
            "skills_match": s.skills_match.model_dump(),
            "degraded": sorted(p.degraded),
            "found_by_query": p.identity.query,
        })

    data = {
        "searched_at": _iso(result.searched_at),
        "requirements": result.requirements.model_dump(mode="json"),
        "queries": result.queries,
        "identities_found": result.identities_found,
        "enriched_count": result.enriched_count,
        "total_candidates": len(candidates),
        "candidates": candidates,
        "cache_stats": result.cache_stats.model_dump(),
        "performance": result.performance.model_dump(),
    }
    return json.dumps(data, indent=2)


def _iso(value: datetime) -> str:
    return value.isoformat(timespec="seconds")
