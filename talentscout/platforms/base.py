"""Abstract base class for candidate sources."""

from abc import ABC, abstractmethod

from talentscout.core.schemas import ActivityEvent, CandidateIdentity, RepoSummary, UserProfile


class CandidateSource(ABC):
    """Base class that every candidate source must implement.

    Methods raise ``RemoteError`` when the underlying request fails.
    """

    @property
    @abstractmethod
    def source_id(self) -> str:
        """Unique identifier for this source (e.g. 'github')."""

    @abstractmethod
    async def search_users(self, query: str) -> list[CandidateIdentity]:
        """Run one search query and return the matching identities."""

    @abstractmethod
    async def get_profile(self, candidate_id: str) -> UserProfile:
        """Return the account profile for a candidate."""

    @abstractmethod
    async def get_repositories(self, candidate_id: str) -> list[RepoSummary]:
        """Return the candidate's public repositories."""

    @abstractmethod
    async def get_events(self, candidate_id: str) -> list[ActivityEvent]:
        """Return the candidate's recent public activity."""
