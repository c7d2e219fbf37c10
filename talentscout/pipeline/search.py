"""Search stage: run every query and merge the results.

Search is best-effort. A failing query (remote error or malformed response)
is logged and skipped; whatever the other queries return is still used.
"""

import logging
from collections.abc import Iterable

from talentscout.core.errors import RemoteError
from talentscout.core.schemas import CandidateIdentity
from talentscout.platforms.base import CandidateSource

logger = logging.getLogger(__name__)


class DeduplicationFilter:
    """Remove duplicates by identity handle.

    Stateful: tracks seen IDs across calls within the same filter instance.
    The first occurrence of a handle wins.
    """

    def __init__(self) -> None:
        self._seen: set[str] = set()

    def __call__(self, candidates: Iterable[CandidateIdentity]) -> list[CandidateIdentity]:
        result: list[CandidateIdentity] = []
        total = 0
        for c in candidates:
            total += 1
            if c.id not in self._seen:
                self._seen.add(c.id)
                result.append(c)
        deduped = total - len(result)
        if deduped:
            logger.debug("DeduplicationFilter: removed %d duplicates", deduped)
        return result


async def search_candidates(
    queries: list[str],
    source: CandidateSource,
    dedup_filter: DeduplicationFilter | None = None,
) -> list[CandidateIdentity]:
    """Run ``queries`` in order and return unique identities in first-seen order."""
    dedup = dedup_filter or DeduplicationFilter()
    unique: list[CandidateIdentity] = []
    failed = 0

    for query in queries:
        try:
            found = await source.search_users(query)
        except (RemoteError, ValueError) as e:
            failed += 1
            logger.warning("Search failed for query '%s': %s", query, e)
            continue
        new = dedup(found)
        logger.info("Query '%s': %d results, %d new", query, len(found), len(new))
        unique.extend(new)

    if failed:
        logger.warning("%d of %d search queries failed", failed, len(queries))
    return unique
