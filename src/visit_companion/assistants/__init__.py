from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Any

from ..config import BACKENDS, OpenAISettings, ProxySettings
from ..errors import ConfigurationError
from ..llm import OpenAICompletionClient
from .base import VisitAssistant, VisitRecord
from .llm_assistant import LLMVisitAssistant
from .offline import OfflineVisitAssistant
from .proxy import ProxyVisitAssistant

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from ..config import CompanionConfig

__all__ = [
    "VisitAssistant",
    "VisitRecord",
    "OfflineVisitAssistant",
    "LLMVisitAssistant",
    "ProxyVisitAssistant",
    "create_assistant",
    "build_assistant_from_config",
    "resolve_openai_api_key",
    "resolve_proxy_base_url",
]

logger = logging.getLogger(__name__)


def create_assistant(name: str, **kwargs: Any) -> VisitAssistant:
    """Factory for building visit assistants by backend name."""
    normalized = name.lower().strip()
    if normalized == "offline":
        return OfflineVisitAssistant()
    if normalized == "openai":
        return LLMVisitAssistant(**kwargs)
    if normalized == "proxy":
        return ProxyVisitAssistant(**kwargs)
    raise ConfigurationError(
        f"Unknown backend '{name}'. Expected one of: {', '.join(BACKENDS)}."
    )


def build_assistant_from_config(config: "CompanionConfig") -> VisitAssistant:
    """Build the assistant for config.backend, wiring in its client explicitly."""
    normalized = config.backend.lower().strip()
    if normalized == "openai":
        api_key = resolve_openai_api_key(config.openai)
        client = OpenAICompletionClient(config.openai, api_key=api_key)
        return create_assistant(normalized, client=client)
    if normalized == "proxy":
        return create_assistant(
            normalized,
            base_url=resolve_proxy_base_url(config.proxy),
            timeout=config.proxy.request_timeout,
        )
    return create_assistant(config.backend)


def resolve_openai_api_key(settings: OpenAISettings) -> str:
    """Resolve the API key from explicit config or the configured environment variable."""
    if settings.api_key:
        return settings.api_key
    env_name = settings.api_key_env or "OPENAI_API_KEY"
    value = os.environ.get(env_name)
    if value:
        return value
    raise ConfigurationError(
        f"OpenAI API key not provided. Use --openai-api-key or set {env_name}."
    )


def resolve_proxy_base_url(settings: ProxySettings) -> str:
    if settings.base_url:
        return settings.base_url
    value = os.environ.get(settings.base_url_env or "CLOUD_FUNCTION_BASE_URL", "")
    if not value:
        logger.warning(
            "Proxy base URL not found in config or %s; AI features will not work.",
            settings.base_url_env,
        )
    return value
