"""Turn free-text job descriptions into JobRequirements.

Two adapters share the ``RequirementsExtractor`` interface:
  - LLMRequirementsExtractor     - delegates to an LLM provider
  - KeywordRequirementsExtractor - offline vocabulary scan
"""

import logging
import re
from typing import Protocol

from talentscout.core.schemas import JobRequirements, SENIORITY_ALIASES, YearsRange
from talentscout.core.skills import SKILL_VOCABULARY
from talentscout.requirements.llm.base import LLMProvider, parse_response

logger = logging.getLogger(__name__)

MAX_REQUIRED_SKILLS = 5

# Headings after which skills count as "preferred".
_PREFERRED_MARKERS = re.compile(
    r"nice to have|nice-to-have|preferred|bonus|plus:|good to have",
    re.IGNORECASE,
)
_YEARS = re.compile(r"(\d{1,2})\s*(?:\+|plus)?\s*(?:-|to)?\s*(\d{1,2})?\s*\+?\s*years?", re.IGNORECASE)


class RequirementsExtractor(Protocol):
    def extract(self, job_description: str) -> JobRequirements: ...


class LLMRequirementsExtractor:
    """Extracts requirements with an LLM provider."""

    def __init__(self, provider: LLMProvider, model: str | None = None) -> None:
        self._provider = provider
        self._model = model

    def extract(self, job_description: str) -> JobRequirements:
        if not job_description.strip():
            msg = "job description is empty"
            raise ValueError(msg)
        raw = self._provider.complete(job_description, model=self._model)
        requirements = parse_response(raw)
        if len(requirements.required_skills) > MAX_REQUIRED_SKILLS:
            requirements = requirements.model_copy(
                update={"required_skills": requirements.required_skills[:MAX_REQUIRED_SKILLS]},
            )
        logger.info(
            "Extracted requirements for '%s': %d required, %d preferred skills",
            requirements.title, len(requirements.required_skills), len(requirements.preferred_skills),
        )
        return requirements


def _keyword_pattern(keyword: str) -> re.Pattern[str]:
    return re.compile(rf"(?<![\w+#.]){re.escape(keyword)}(?![\w+#])", re.IGNORECASE)


class KeywordRequirementsExtractor:
    """Vocabulary-based extraction that needs no network access.

    Skills before a "nice to have" style heading are required, skills after
    it preferred. Level comes from seniority words in the title, years from
    the first "N+ years" phrase.
    """

    def __init__(self, vocabulary: tuple[str, ...] = SKILL_VOCABULARY) -> None:
        self._patterns = [(kw, _keyword_pattern(kw)) for kw in vocabulary]

    def extract(self, job_description: str) -> JobRequirements:
        text = job_description.strip()
        if not text:
            msg = "job description is empty"
            raise ValueError(msg)

        title = self._title(text)
        marker = _PREFERRED_MARKERS.search(text)
        head, tail = (text[:marker.start()], text[marker.start():]) if marker else (text, "")

        required = self._find_skills(head)[:MAX_REQUIRED_SKILLS]
        preferred = [s for s in self._find_skills(tail) if s not in required]

        return JobRequirements(
            title=title,
            required_skills=required,
            preferred_skills=preferred,
            level=self._level(title) or self._level(text[:500]),
            years_experience=self._years(text),
        )

    def _find_skills(self, text: str) -> list[str]:
        # Order by first appearance in the text.
        found: list[tuple[int, str]] = []
        for kw, pattern in self._patterns:
            m = pattern.search(text)
            if m:
                found.append((m.start(), kw))
        return [kw for _, kw in sorted(found)]

    @staticmethod
    def _title(text: str) -> str:
        first = next((line for line in text.splitlines() if line.strip()), "")
        return first.strip().lstrip("#").strip()

    @staticmethod
    def _level(text: str) -> str | None:
        words = re.findall(r"[a-z]+", text.lower())
        for word in words:
            if word in SENIORITY_ALIASES:
                return word
        return None

    @staticmethod
    def _years(text: str) -> YearsRange | None:
        m = _YEARS.search(text)
        if not m:
            return None
        lo = float(m.group(1))
        hi = float(m.group(2)) if m.group(2) else lo + 5
        return YearsRange(min=lo, max=hi)
