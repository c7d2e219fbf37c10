"""LLM provider registry with lazy loading.

Usage:
    from talentscout.requirements.llm import get_provider, parse_response

    provider = get_provider("anthropic")
    raw = provider.complete(job_text)
    requirements = parse_response(raw)
"""

import importlib

from talentscout.requirements.llm.base import LLMProvider, parse_response

__all__ = ["LLMProvider", "available_providers", "get_provider", "parse_response"]

# Lazy registry: maps provider name → (module_path, class_name)
_REGISTRY: dict[str, tuple[str, str]] = {
    "anthropic": ("talentscout.requirements.llm.anthropic", "AnthropicProvider"),
    "openai": ("talentscout.requirements.llm.openai", "OpenAIProvider"),
}


def get_provider(name: str) -> LLMProvider:
    """Instantiate and return an LLM provider by name.

    Args:
        name: Provider identifier (anthropic, openai).

    Returns:
        An LLMProvider instance.

    Raises:
        ValueError: If the provider name is unknown.
    """
    if name not in _REGISTRY:
        valid = ", ".join(sorted(_REGISTRY))
        msg = f"Unknown LLM provider '{name}'. Available: {valid}"
        raise ValueError(msg)

    module_path, class_name = _REGISTRY[name]
    module = importlib.import_module(module_path)
    cls = getattr(module, class_name)
    return cls()  # type: ignore[no-any-return]


def available_providers() -> list[str]:
    """Return sorted list of registered provider names."""
    return sorted(_REGISTRY)
