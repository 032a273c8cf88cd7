from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable

from ..config import OpenAISettings

logger = logging.getLogger(__name__)

# Replaced in tests; resolved from the optional ``openai`` package on first use.
OpenAI: Callable[..., Any] | None = None

MAX_ATTEMPTS = 3
MAX_BACKOFF_SECONDS = 5

OPERATION_LABELS = {
    "summary": "visit summary",
    "answer": "question answer",
    "suggestions": "question suggestions",
}


@dataclass(slots=True)
class CompletionMetadata:
    """What a completion is for: the assistant operation and its reading level."""

    operation: str
    reading_level: int | None = None
    prompt_chars: int | None = None

    @property
    def label(self) -> str:
        return OPERATION_LABELS.get(self.operation, self.operation)


class OpenAICompletionClient:
    """
    Sends one system/user prompt pair to the OpenAI Responses API.

    Each assistant operation is a single synchronous completion. Failures are
    retried with capped exponential backoff; after the last attempt a
    ``RuntimeError`` is raised, which the assistant turns into its fallback.
    """

    def __init__(self, settings: OpenAISettings, api_key: str) -> None:
        if not api_key:
            raise ValueError("OpenAI API key is required for the openai backend.")
        self._settings = settings
        self._client = _openai_class()(
            api_key=api_key,
            base_url=settings.base_url,
            organization=settings.organization,
        )

    @property
    def settings(self) -> OpenAISettings:
        return self._settings

    def complete(
        self,
        *,
        system_prompt: str,
        user_prompt: str,
        metadata: CompletionMetadata,
    ) -> str:
        """Return the model's text for one assistant operation."""
        last_error: Exception | None = None
        for attempt in range(1, MAX_ATTEMPTS + 1):
            try:
                response = self._client.responses.create(
                    model=self._settings.model,
                    input=[
                        {"role": "system", "content": system_prompt},
                        {"role": "user", "content": user_prompt},
                    ],
                    temperature=self._settings.temperature,
                    max_output_tokens=self._settings.max_output_tokens,
                    top_p=self._settings.top_p,
                    timeout=self._settings.request_timeout,
                )
                text = self._extract_text(response)
            except Exception as exc:
                last_error = exc
                logger.warning(
                    "Model call for %s failed on attempt %s of %s: %s",
                    metadata.label,
                    attempt,
                    MAX_ATTEMPTS,
                    exc,
                )
                if attempt < MAX_ATTEMPTS:
                    time.sleep(min(2 ** (attempt - 1), MAX_BACKOFF_SECONDS))
                continue
            logger.debug(
                "Received %s from %s (%s chars, reading level %s, prompt %s chars)",
                metadata.label,
                self._settings.model,
                len(text),
                metadata.reading_level,
                metadata.prompt_chars,
            )
            return text
        raise RuntimeError(
            f"Could not get a {metadata.label} from OpenAI "
            f"after {MAX_ATTEMPTS} attempts."
        ) from last_error

    @staticmethod
    def _extract_text(response: Any) -> str:
        """Read ``output_text``, or the first text segment when the SDK omits it."""
        text = getattr(response, "output_text", None)
        if isinstance(text, str) and text:
            return text
        for item in getattr(response, "output", None) or []:
            for segment in _field(item, "content") or []:
                segment_text = _field(segment, "text")
                if segment_text:
                    return str(segment_text)
        raise RuntimeError("OpenAI response contained no text output.")


def _field(item: Any, name: str) -> Any:
    if isinstance(item, dict):
        return item.get(name)
    return getattr(item, name, None)


def _openai_class() -> Callable[..., Any]:
    global OpenAI
    if OpenAI is None:
        try:
            from openai import OpenAI as openai_cls
        except ImportError as exc:
            raise RuntimeError(
                "The openai backend needs the optional dependency: "
                "pip install 'visit-companion[llm-openai]'."
            ) from exc
        OpenAI = openai_cls
    return OpenAI
