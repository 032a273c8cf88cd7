from __future__ import annotations

import base64
import logging
from pathlib import Path
from typing import Any, Sequence, cast

import requests

from ..errors import ConfigurationError, ProxyError
from ..models import SummaryRequest, VisitSummary
from .base import VisitAssistant, VisitRecord, visit_summary_text

logger = logging.getLogger(__name__)

SUMMARY_ENDPOINT = "transcribeAndSummarize"
ANSWER_ENDPOINT = "answerQuestion"
SUGGEST_ENDPOINT = "suggestQuestions"


def audio_mime_type(path: Path) -> str:
    """Map a recording file to the MIME type the proxy expects."""
    return "audio/mp4" if path.suffix.lower() == ".m4a" else "audio/mpeg"


class ProxyVisitAssistant(VisitAssistant):
    """
    Visit assistant backed by the serverless proxy that fronts the AI service.

    The proxy transcribes and summarizes audio recordings itself, so summaries
    need an audio file rather than a transcript. Every call is a JSON POST to
    ``{base_url}/{endpoint}``.
    """

    name = "proxy"

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 300.0,
        session: requests.Session | None = None,
    ) -> None:
        if not base_url:
            raise ConfigurationError(
                "Proxy base URL is not configured; set proxy.base_url or "
                "the CLOUD_FUNCTION_BASE_URL environment variable."
            )
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session

    @property
    def base_url(self) -> str:
        return self._base_url

    def _check_summary_request(self, request: SummaryRequest) -> None:
        if request.audio_path is None:
            raise ValueError("The proxy backend summarizes audio; provide a recording.")
        if not request.audio_path.is_file():
            raise ValueError(f"Recording not found: {request.audio_path}")

    def _summarize(self, request: SummaryRequest) -> VisitSummary:
        audio_path = cast(Path, request.audio_path)
        audio_data = base64.b64encode(audio_path.read_bytes()).decode("ascii")
        mime_type = audio_mime_type(audio_path)
        logger.info(
            "Sending %s (%s, %s base64 chars) to proxy",
            audio_path.name,
            mime_type,
            len(audio_data),
        )
        payload = self._post(
            SUMMARY_ENDPOINT,
            {
                "audioData": audio_data,
                "mimeType": mime_type,
                "readingLevel": request.reading_level,
            },
        )
        return VisitSummary.from_payload(payload)

    def _answer(self, question: str, visit_context: str, reading_level: int) -> str:
        payload = self._post(
            ANSWER_ENDPOINT,
            {
                "question": question,
                "visitContext": visit_context,
                "readingLevel": reading_level,
            },
        )
        return str(payload.get("answer") or "")

    def _suggest(self, visit_history: Sequence[VisitRecord]) -> list[str]:
        history = [{"summary": visit_summary_text(record)} for record in visit_history]
        payload = self._post(SUGGEST_ENDPOINT, {"visitHistory": history})
        questions = payload.get("questions") or []
        if not isinstance(questions, list):
            return []
        return [str(question) for question in questions]

    def _post(self, endpoint: str, body: dict[str, Any]) -> dict[str, Any]:
        url = f"{self._base_url}/{endpoint}"
        poster = self._session.post if self._session is not None else requests.post
        response = poster(url, json=body, timeout=self._timeout)
        logger.debug("Proxy %s responded with HTTP %s", endpoint, response.status_code)
        if not response.ok:
            raise _proxy_error(response)
        data = response.json()
        if not isinstance(data, dict):
            raise ProxyError(response.status_code, None, "Unexpected response body.")
        correlation_id = data.get("correlationId")
        if correlation_id:
            logger.debug("Proxy %s correlation id %s", endpoint, correlation_id)
        return data


def _proxy_error(response: requests.Response) -> ProxyError:
    """Build a ProxyError from the proxy's JSON error body, or its raw text."""
    text = response.text
    try:
        data = response.json()
    except ValueError:
        return ProxyError(response.status_code, None, text)
    if not isinstance(data, dict):
        return ProxyError(response.status_code, None, text)
    error_code = data.get("error")
    message = data.get("message") or error_code or text
    return ProxyError(
        response.status_code,
        str(error_code) if error_code else None,
        str(message),
    )
