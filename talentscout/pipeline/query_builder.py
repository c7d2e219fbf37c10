"""Search query construction from job requirements.

Pure functions - the same requirements and tables always yield the same
queries, in the same order.
"""

import logging

from talentscout.core.config import LevelFilter, QueryConfig
from talentscout.core.schemas import JobRequirements, SeniorityLevel
from talentscout.core.skills import SkillTables

logger = logging.getLogger(__name__)


def critical_skills(
    requirements: JobRequirements,
    tables: SkillTables,
    max_skills: int,
) -> list[str]:
    """Pick the skills that get their own query.

    Required skills are used (preferred ones only when nothing is required).
    A skill implied by another listed skill is dropped, since the implying
    skill's query already searches for it.
    """
    skills = requirements.required_skills or requirements.preferred_skills
    lowered = [s.lower() for s in skills]

    implied: set[str] = set()
    for skill in lowered:
        implied.update(tables.implied_by(skill))

    picked: list[str] = []
    seen: set[str] = set()
    for skill, low in zip(skills, lowered):
        if low in seen or low in implied:
            continue
        seen.add(low)
        picked.append(skill)
    return picked[:max_skills]


def level_filter_tokens(
    level: SeniorityLevel | None,
    level_filters: dict[str, LevelFilter],
) -> list[str]:
    """Follower / account-age qualifiers for a seniority level."""
    if level is None:
        return []
    f = level_filters.get(level.value)
    if f is None:
        return []
    tokens: list[str] = []
    if f.min_followers > 0:
        tokens.append(f"followers:>{f.min_followers}")
    if f.created_before:
        tokens.append(f"created:<{f.created_before}")
    return tokens


def build_skill_query(
    skill: str,
    tables: SkillTables,
    level_tokens: list[str],
) -> str:
    """One query: skill + implied skills + language filters + level filters."""
    parts = [skill]
    parts.extend(tables.implied_by(skill))
    parts.extend(f"language:{lang}" for lang in tables.languages_for(skill))
    parts.extend(level_tokens)
    return " ".join(parts)


def build_queries(
    requirements: JobRequirements,
    tables: SkillTables,
    config: QueryConfig,
) -> list[str]:
    """Build the bounded, de-duplicated list of search queries."""
    skills = critical_skills(requirements, tables, config.max_skills)
    level_tokens = level_filter_tokens(requirements.level, config.level_filters)

    queries = [build_skill_query(s, tables, level_tokens) for s in skills]

    # General experience query when the level is known.
    if skills and level_tokens:
        queries.append(" ".join(level_tokens))

    unique = list(dict.fromkeys(queries))[: config.max_queries]
    logger.debug("Built %d queries from %d critical skills", len(unique), len(skills))
    return unique
