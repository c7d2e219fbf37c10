"""Error taxonomy for the candidate-acquisition pipeline.

Query- and candidate-scoped errors are caught where they occur and logged;
anything else propagates to the caller.
"""


class TalentScoutError(Exception):
    """Base class for all pipeline errors."""


class RemoteError(TalentScoutError):
    """The candidate-source API answered with a non-success status.

    ``status`` is 0 when no HTTP response was received (timeout, DNS, reset).
    """

    def __init__(self, status: int, message: str) -> None:
        self.status = status
        self.message = message
        super().__init__(f"HTTP {status}: {message}")


class QuotaExhaustedError(RemoteError):
    """Rate limit still exhausted after the single cooldown retry."""


class CacheCorruptionError(TalentScoutError):
    """An on-disk cache entry could not be read or parsed."""

    def __init__(self, key: str, reason: str) -> None:
        self.key = key
        self.reason = reason
        super().__init__(f"Corrupt cache entry {key}: {reason}")


class EnrichmentPartialFailure(TalentScoutError):
    """One sub-fetch failed while enriching a single candidate."""

    def __init__(self, candidate_id: str, resource: str, cause: Exception) -> None:
        self.candidate_id = candidate_id
        self.resource = resource
        self.cause = cause
        super().__init__(f"Failed to fetch {resource} for '{candidate_id}': {cause}")
