"""Generation backends: OpenAI Assistants, Claude and Gemini behind a common protocol."""

from shipwright.config import Settings
from shipwright.errors import InvalidRequest
from shipwright.llm.anthropic_provider import ClaudeProvider
from shipwright.llm.base import GenerationBackend, build_generation_prompt
from shipwright.llm.gemini_provider import GeminiProvider
from shipwright.llm.openai_provider import OpenAIAssistantProvider

PROVIDERS = ("openai", "gemini", "claude")

_MISSING_CREDENTIALS = {
    "openai": "OpenAI provider selected, but OPENAI_API_KEY or ASSISTANT_ID is missing or invalid.",
    "gemini": "Gemini provider selected, but GOOGLE_API_KEY is missing or invalid.",
    "claude": "Claude provider selected, but ANTHROPIC_API_KEY is missing or invalid.",
}


def _is_configured(name: str, settings: Settings) -> bool:
    if name == "openai":
        return bool(settings.openai_api_key and settings.assistant_id)
    if name == "gemini":
        return bool(settings.google_api_key)
    if name == "claude":
        return bool(settings.anthropic_api_key)
    return False


def available_backends(settings: Settings) -> list[str]:
    """Names of the backends whose credentials are configured."""
    return [name for name in PROVIDERS if _is_configured(name, settings)]


def check_backend(name: str, settings: Settings) -> None:
    """Raise InvalidRequest unless ``name`` is a known, configured backend."""
    if name not in PROVIDERS:
        raise InvalidRequest(f"Invalid apiProvider. Must be one of: {', '.join(PROVIDERS)}")
    if not _is_configured(name, settings):
        raise InvalidRequest(_MISSING_CREDENTIALS[name])


def get_backend(name: str, settings: Settings) -> GenerationBackend:
    """Return the generation backend for ``name`` built from settings."""
    check_backend(name, settings)
    if name == "claude":
        return ClaudeProvider(
            api_key=settings.anthropic_api_key,
            model=settings.shipwright_anthropic_model,
            max_tokens=settings.shipwright_anthropic_max_tokens,
        )
    if name == "gemini":
        return GeminiProvider(
            api_key=settings.google_api_key,
            model=settings.shipwright_gemini_model,
            timeout=settings.shipwright_gemini_timeout,
        )
    return OpenAIAssistantProvider(
        assistant_id=settings.assistant_id,
        api_key=settings.openai_api_key,
        poll_interval=settings.shipwright_poll_interval,
        max_poll_attempts=settings.shipwright_max_poll_attempts,
    )


__all__ = [
    "PROVIDERS",
    "GenerationBackend",
    "ClaudeProvider",
    "GeminiProvider",
    "OpenAIAssistantProvider",
    "available_backends",
    "build_generation_prompt",
    "check_backend",
    "get_backend",
]
