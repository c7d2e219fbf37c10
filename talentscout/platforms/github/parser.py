"""Convert raw GitHub JSON payloads into pipeline models.

Pure functions - no network access.
"""

import logging
from datetime import datetime
from typing import Any

from talentscout.core.schemas import ActivityEvent, CandidateIdentity, RepoSummary, UserProfile

logger = logging.getLogger(__name__)


def parse_search_items(payload: Any, query: str) -> list[CandidateIdentity]:
    """Map ``/search/users`` items to identities, skipping items without a login."""
    items = payload.get("items", []) if isinstance(payload, dict) else payload
    if not isinstance(items, list):
        return []
    identities: list[CandidateIdentity] = []
    for item in items:
        if not isinstance(item, dict) or not item.get("login"):
            continue
        identities.append(
            CandidateIdentity(
                id=item["login"],
                search_score=float(item.get("score") or 0.0),
                query=query,
                html_url=item.get("html_url") or "",
                avatar_url=item.get("avatar_url") or "",
            ),
        )
    return identities


def parse_profile(payload: Any) -> UserProfile:
    """Map a ``/users/{id}`` payload to a UserProfile.

    Raises:
        ValueError: if the payload has no login or no parseable creation date.
    """
    if not isinstance(payload, dict) or not payload.get("login"):
        msg = "Profile payload is missing 'login'"
        raise ValueError(msg)
    created_at = parse_timestamp(payload.get("created_at"))
    if created_at is None:
        msg = f"Profile '{payload['login']}' has no valid created_at"
        raise ValueError(msg)
    return UserProfile(
        login=payload["login"],
        name=payload.get("name") or None,
        location=payload.get("location") or None,
        hireable=bool(payload.get("hireable")),
        created_at=created_at,
        public_repos=max(0, int(payload.get("public_repos") or 0)),
        followers=max(0, int(payload.get("followers") or 0)),
        html_url=payload.get("html_url") or "",
    )


def parse_repos(payload: Any) -> list[RepoSummary]:
    """Map ``/users/{id}/repos`` to summaries. Malformed items are skipped."""
    if not isinstance(payload, list):
        msg = f"Expected a list of repositories, got {type(payload).__name__}"
        raise ValueError(msg)
    repos: list[RepoSummary] = []
    for item in payload:
        if not isinstance(item, dict) or not item.get("name"):
            logger.debug("Skipping malformed repository item")
            continue
        repos.append(
            RepoSummary(
                name=item["name"],
                description=item.get("description"),
                primary_language=item.get("language"),
                star_count=max(0, int(item.get("stargazers_count") or 0)),
                fork_count=max(0, int(item.get("forks_count") or 0)),
                topics=frozenset(t.lower() for t in item.get("topics") or [] if t),
            ),
        )
    return repos


def parse_events(payload: Any) -> list[ActivityEvent]:
    """Map ``/users/{id}/events`` to activity events."""
    if not isinstance(payload, list):
        msg = f"Expected a list of events, got {type(payload).__name__}"
        raise ValueError(msg)
    events: list[ActivityEvent] = []
    for item in payload:
        if not isinstance(item, dict) or not item.get("type"):
            continue
        repo = item.get("repo") or {}
        events.append(
            ActivityEvent(
                type=item["type"],
                repo_name=repo.get("name") if isinstance(repo, dict) else None,
                created_at=parse_timestamp(item.get("created_at")),
            ),
        )
    return events


def parse_timestamp(value: Any) -> datetime | None:
    """Parse GitHub's ISO-8601 timestamps (``2015-03-01T12:00:00Z``)."""
    if not value or not isinstance(value, str):
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
