"""Claude-backed requirements extraction."""

import logging
from typing import Any

from talentscout.requirements.llm.base import SYSTEM_PROMPT, USER_PROMPT_TEMPLATE, LLMProvider

logger = logging.getLogger(__name__)

MAX_OUTPUT_TOKENS = 1024


class AnthropicProvider(LLMProvider):
    """Messages API. The SDK is imported on first use."""

    @property
    def provider_id(self) -> str:
        return "anthropic"

    @property
    def default_model(self) -> str:
        return "claude-sonnet-4-20250514"

    @property
    def env_var(self) -> str:
        return "ANTHROPIC_API_KEY"

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
        message = client.messages.create(
            model=use_model,
            max_tokens=MAX_OUTPUT_TOKENS,
            temperature=0,
            system=SYSTEM_PROMPT if system is None else system,
            messages=[{"role": "user", "content": USER_PROMPT_TEMPLATE.format(job_text=job_text)}],
        )
        # Responses may be split over several text blocks.
        return "".join(getattr(block, "text", "") for block in message.content)

    @staticmethod
    def _client(api_key: str) -> Any:
        try:
            import anthropic
        except ImportError:
            msg = (
                "anthropic is required for LLM requirements extraction. "
                "Install with: pip install 'talentscout[anthropic]'"
            )
            raise ImportError(msg) from None
        return anthropic.Anthropic(api_key=api_key)
