"""OpenAI-backed requirements extraction (JSON mode)."""

import logging
from typing import Any

from talentscout.requirements.llm.base import SYSTEM_PROMPT, USER_PROMPT_TEMPLATE, LLMProvider

logger = logging.getLogger(__name__)


class OpenAIProvider(LLMProvider):
    """Chat Completions API with ``response_format=json_object``."""

    @property
    def provider_id(self) -> str:
        return "openai"

    @property
    def default_model(self) -> str:
        return "gpt-4o-mini"

    @property
    def env_var(self) -> str:
        return "OPENAI_API_KEY"

    def complete(
        self,
        job_text: str,
        model: str | None = None,
        *,
        system: str | None = None,
    ) -> str:
        client = self._client(self.require_api_key())
        use_model = model or self.default_model

        logger.info("Extracting requirements with %s (%d chars)", use_model, len(job_text))
        response = client.chat.completions.create(
            model=use_model,
            temperature=0,
            response_format={"type": "json_object"},
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT if system is None else system},
                {"role": "user", "content": USER_PROMPT_TEMPLATE.format(job_text=job_text)},
            ],
        )
        choice = response.choices[0]
        if getattr(choice, "finish_reason", None) == "length":
            logger.warning("OpenAI response was truncated; JSON may be incomplete")
        return choice.message.content or ""

    @staticmethod
    def _client(api_key: str) -> Any:
        try:
            import openai
        except ImportError:
            msg = (
                "openai is required for LLM requirements extraction. "
                "Install with: pip install 'talentscout[openai]'"
            )
            raise ImportError(msg) from None
        return openai.OpenAI(api_key=api_key)
