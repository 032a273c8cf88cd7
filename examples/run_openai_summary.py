"""Minimal example: calibrate a reading level, then summarize a visit with OpenAI."""

from __future__ import annotations

import os

from visit_companion.assistants import LLMVisitAssistant
from visit_companion.config import load_config
from visit_companion.llm import OpenAICompletionClient
from visit_companion.models import SummaryRequest
from visit_companion.onboarding import UserPreferences, calibrate_reading_level


def main() -> None:
    config = load_config()
    api_key = (
        config.openai.api_key
        or os.environ.get(config.openai.api_key_env or "OPENAI_API_KEY")
        or ""
    )
    if not api_key:
        raise RuntimeError(
            "Set the OpenAI API key before running this example "
            f"({config.openai.api_key_env})."
        )

    preferences = UserPreferences()
    preferences.apply_analysis(
        calibrate_reading_level(
            [
                "My daughter has cystic fibrosis and we visit the clinic every month.",
                "I want to know which treatments help her breathe and what the test numbers mean.",
            ]
        )
    )

    client = OpenAICompletionClient(config.openai, api_key=api_key)
    assistant = LLMVisitAssistant(client)

    transcript = (
        "Doctor: Her FEV1 went from 72 to 83 percent since the last visit. "
        "The airway clearance routine is working, so keep doing it twice a day. "
        "We will repeat the sputum culture in three months."
    )
    summary = assistant.summarize_visit(
        SummaryRequest(reading_level=preferences.reading_level, transcript=transcript)
    )
    print("Reading level:", preferences.reading_level)
    print("Summary:\n", summary.summary)
    for point in summary.key_points:
        print(" -", point)


if __name__ == "__main__":
    main()
