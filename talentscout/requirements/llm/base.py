"""Abstract base class for LLM providers and shared logic."""

import json
import os
import re
from abc import ABC, abstractmethod

from talentscout.core.schemas import JobRequirements

SYSTEM_PROMPT = (
    "You are a job requirements analyzer. Extract structured hiring "
    "requirements from the job description provided.\n\n"
    "Return ONLY a JSON object (no markdown, no explanation) with these fields:\n"
    "- title (string): the exact job title\n"
    '- level (string): one of "junior", "mid", "senior", "lead", "principal"\n'
    "- years_experience (object): {\"min\": number, \"max\": number}\n"
    "- required_skills (list[str]): at most 5 critical technical skills. Prefer "
    "advanced frameworks over the languages they imply (TensorFlow over Python, "
    "React over JavaScript, Spring over Java, PostgreSQL over SQL)\n"
    "- preferred_skills (list[str]): nice-to-have technical skills\n\n"
    "Avoid basic programming languages in required_skills unless they are the "
    "only requirement."
)

USER_PROMPT_TEMPLATE = "Job description:\n\n{job_text}"

# Defaults for fields the model leaves out.
_DEFAULTS: dict[str, object] = {
    "title": "Software Developer",
    "level": "mid",
    "years_experience": {"min": 2, "max": 5},
    "required_skills": [],
    "preferred_skills": [],
}


def parse_response(raw_text: str) -> JobRequirements:
    """Parse an LLM response text into JobRequirements.

    Handles markdown-wrapped JSON (```json ... ```), plain JSON, and JSON
    surrounded by chatter. Missing fields get defaults; an inverted
    years range is swapped.
    """
    cleaned = re.sub(r"^```(?:json)?\s*\n?", "", raw_text.strip())
    cleaned = re.sub(r"\n?```\s*$", "", cleaned)
    start, end = cleaned.find("{"), cleaned.rfind("}")
    if start != -1 and end > start:
        cleaned = cleaned[start:end + 1]

    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        msg = f"Failed to parse LLM response as JSON: {e}"
        raise ValueError(msg) from e

    if not isinstance(data, dict):
        msg = "LLM response is not a JSON object"
        raise ValueError(msg)

    merged = {**_DEFAULTS, **{k: v for k, v in data.items() if v is not None}}
    return JobRequirements.model_validate(merged)


class LLMProvider(ABC):
    """Base class that every LLM provider must implement."""

    @property
    @abstractmethod
    def provider_id(self) -> str:
        """Unique identifier for this provider (e.g. 'anthropic')."""

    @abstractmethod
    def complete(
        self,
        job_text: str,
        model: str | None = None,
        *,
        system: str | None = None,
    ) -> str:
        """Send job description text to the LLM and return raw response text.

        Args:
            job_text: Plain-text job description.
            model: Override the provider's default model. None uses default.
            system: Override the system prompt. None falls back to SYSTEM_PROMPT.

        Returns:
            Raw text response from the LLM (expected to be JSON).
        """

    @property
    @abstractmethod
    def default_model(self) -> str:
        """The default model ID used when no override is specified."""

    @property
    @abstractmethod
    def env_var(self) -> str | None:
        """Environment variable name for the API key, or None if not needed."""

    def require_api_key(self) -> str:
        """Read the API key from ``env_var``.

        Raises:
            ValueError: if the variable is unset or blank.
        """
        key = os.environ.get(self.env_var or "", "").strip()
        if not key:
            msg = f"{self.env_var} environment variable is required"
            raise ValueError(msg)
        return key
