"""Rule-based relevance scoring for enriched candidates.

Score range: 0-100 (clamped). With default weights:
  required skills   fraction x 40
  preferred skills  fraction x 20
  level             exact +20, one level below +10
  years in range    +10
  activity          +5 stars, +5 repositories
  availability      +5
"""

import logging
from collections.abc import Iterable

from talentscout.core.config import ScoringConfig
from talentscout.core.schemas import (
    CandidateProfile,
    JobRequirements,
    ScoredCandidate,
    SeniorityLevel,
    SkillsMatch,
)

logger = logging.getLogger(__name__)

_LEVEL_ORDER = [SeniorityLevel.JUNIOR, SeniorityLevel.MID, SeniorityLevel.SENIOR]


def skill_matches(skill: str, candidate_skills: Iterable[str]) -> bool:
    """Case-insensitive substring containment in either direction."""
    wanted = skill.lower().strip()
    if not wanted:
        return False
    for have in candidate_skills:
        have = have.lower().strip()
        if have and (wanted in have or have in wanted):
            return True
    return False


def count_matches(skills: list[str], candidate_skills: Iterable[str]) -> int:
    pool = list(candidate_skills)
    return sum(1 for s in skills if skill_matches(s, pool))


def level_bonus(
    candidate_level: SeniorityLevel,
    wanted: SeniorityLevel | None,
    config: ScoringConfig,
) -> float:
    """Exact level match, or one level below the requested one."""
    if wanted is None:
        return 0.0
    if candidate_level == wanted:
        return config.level_match_bonus
    if _LEVEL_ORDER.index(wanted) - _LEVEL_ORDER.index(candidate_level) == 1:
        return config.adjacent_level_bonus
    return 0.0


def score_candidate(
    profile: CandidateProfile,
    requirements: JobRequirements,
    config: ScoringConfig,
) -> ScoredCandidate:
    """Score a single candidate.

    Args:
        profile: The enriched candidate.
        requirements: Job requirements to score against.
        config: Weights and thresholds.

    Returns:
        ScoredCandidate wrapping the profile with a score 0-100.
    """
    score = 0.0
    exp = profile.experience

    required = count_matches(requirements.required_skills, profile.derived_skills)
    preferred = count_matches(requirements.preferred_skills, profile.derived_skills)

    # Empty lists contribute nothing.
    if requirements.required_skills:
        score += required / len(requirements.required_skills) * config.required_skills_weight
    if requirements.preferred_skills:
        score += preferred / len(requirements.preferred_skills) * config.preferred_skills_weight

    score += level_bonus(exp.level, requirements.level, config)

    window = requirements.years_experience
    if window is not None and window.contains(exp.years_active):
        score += config.years_in_range_bonus

    if exp.total_stars > config.stars_threshold:
        score += config.stars_bonus
    if exp.repo_count > config.repos_threshold:
        score += config.repos_bonus

    if profile.available:
        score += config.availability_bonus

    # Clamp to 0-100
    score = max(0.0, min(100.0, score))

    return ScoredCandidate(
        profile=profile,
        score=score,
        skills_match=SkillsMatch(required=required, preferred=preferred),
    )


def score_candidates(
    profiles: list[CandidateProfile],
    requirements: JobRequirements,
    config: ScoringConfig,
) -> list[ScoredCandidate]:
    """Score, sort by score desc (stable), and keep the top ``result_budget``."""
    scored = [score_candidate(p, requirements, config) for p in profiles]
    scored.sort(key=lambda s: s.score, reverse=True)
    if len(scored) > config.result_budget:
        logger.debug("Truncating %d scored candidates to %d", len(scored), config.result_budget)
    return scored[: config.result_budget]
