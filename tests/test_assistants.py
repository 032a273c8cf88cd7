from __future__ import annotations

import json
from typing import Any

import pytest

from visit_companion.assistants import (
    LLMVisitAssistant,
    OfflineVisitAssistant,
    ProxyVisitAssistant,
    build_assistant_from_config,
    create_assistant,
)
from visit_companion.assistants.base import (
    FALLBACK_ANSWER_TEXT,
    FALLBACK_QUESTIONS,
    FALLBACK_SUMMARY_TEXT,
    NO_ANSWER_TEXT,
    STARTER_QUESTIONS,
)
from visit_companion.config import CompanionConfig, OpenAISettings, ProxySettings
from visit_companion.errors import ConfigurationError
from visit_companion.llm import openai_client as oa_client
from visit_companion.models import SummaryRequest, VisitSummary


class DummyClient:
    """Stands in for OpenAICompletionClient and records every call."""

    def __init__(self, *outputs: str) -> None:
        self.outputs = list(outputs)
        self.calls: list[dict[str, Any]] = []

    def complete(self, *, system_prompt: str, user_prompt: str, metadata: Any) -> str:
        self.calls.append(
            {"system": system_prompt, "user": user_prompt, "metadata": metadata}
        )
        return self.outputs.pop(0)


class FailingClient:
    def complete(self, **_: Any) -> str:
        raise RuntimeError("OpenAI summary failed after retries.")


def test_llm_summary_parses_model_json():
    output = "Here you go:\n" + json.dumps(
        {
            "summary": "Lungs are doing better.",
            "keyPoints": ["Lung function improved"],
            "diagnoses": ["Asthma"],
            "actions": ["Keep using the inhaler"],
            "medicalTerms": [
                {"term": "FEV1", "explanation": "How much air you blow out in one second."},
                {"explanation": "missing term is dropped"},
            ],
        }
    )
    client = DummyClient(output)
    assistant = LLMVisitAssistant(client)

    summary = assistant.summarize_visit(
        SummaryRequest(reading_level=6, transcript="Doctor: her FEV1 is up.")
    )

    assert summary.summary == "Lungs are doing better."
    assert summary.key_points == ["Lung function improved"]
    assert summary.transcript == "Doctor: her FEV1 is up."
    assert [term.term for term in summary.medical_terms] == ["FEV1"]
    call = client.calls[0]
    assert "6th grader" in call["user"]
    assert "chronic pulmonary conditions" in call["system"]
    assert call["metadata"].operation == "summary"
    assert call["metadata"].reading_level == 6


def test_llm_summary_falls_back_on_unparseable_output():
    assistant = LLMVisitAssistant(DummyClient("I could not listen to that."))
    summary = assistant.summarize_visit(SummaryRequest(reading_level=8, transcript="hi"))

    assert summary.summary == FALLBACK_SUMMARY_TEXT
    assert summary.key_points == ["Unable to process audio at this time"]
    assert summary.actions == ["Try recording again with clear audio"]


def test_llm_summary_falls_back_on_client_failure():
    assistant = LLMVisitAssistant(FailingClient())
    summary = assistant.summarize_visit(SummaryRequest(reading_level=8, transcript="hi"))
    assert summary.summary == FALLBACK_SUMMARY_TEXT


def test_llm_summary_requires_transcript(tmp_path):
    assistant = LLMVisitAssistant(DummyClient())
    with pytest.raises(ValueError):
        assistant.summarize_visit(
            SummaryRequest(reading_level=8, audio_path=tmp_path / "visit.m4a")
        )


def test_llm_answer_and_fallbacks():
    client = DummyClient("  Her lungs are stronger.  ", "   ")
    assistant = LLMVisitAssistant(client)

    assert assistant.answer_question("How are her lungs?", "FEV1 up 15%.", 9) == (
        "Her lungs are stronger."
    )
    assert assistant.answer_question("Anything else?", "FEV1 up 15%.", 9) == NO_ANSWER_TEXT
    assert "Parent's question: How are her lungs?" in client.calls[0]["user"]

    failing = LLMVisitAssistant(FailingClient())
    assert failing.answer_question("Why?", "notes", 9) == FALLBACK_ANSWER_TEXT

    with pytest.raises(ValueError):
        assistant.answer_question("  ", "notes", 9)
    with pytest.raises(ValueError):
        assistant.answer_question("Why?", " \n ", 9)
    assert len(client.calls) == 2


def test_llm_suggestions():
    client = DummyClient('["Is the new inhaler working?", "When is the next test?"]')
    assistant = LLMVisitAssistant(client)
    history = [
        VisitSummary(summary="Lung function improved."),
        {"summary": "Started a new inhaler."},
        "Follow-up in three months.",
    ]

    questions = assistant.suggest_questions(history)

    assert questions == ["Is the new inhaler working?", "When is the next test?"]
    assert "Lung function improved." in client.calls[0]["user"]
    assert "Started a new inhaler." in client.calls[0]["user"]


def test_suggestions_use_starters_without_history():
    client = DummyClient()
    assistant = LLMVisitAssistant(client)

    assert assistant.suggest_questions([]) == list(STARTER_QUESTIONS)
    assert client.calls == []


def test_suggestions_render_unrecognized_visits_as_missing():
    client = DummyClient('["What changed since last time?"]')
    assistant = LLMVisitAssistant(client)

    questions = assistant.suggest_questions([42, None, {"summary": "New inhaler."}])

    assert questions == ["What changed since last time?"]
    prompt = client.calls[0]["user"]
    assert prompt.count("No summary") == 2
    assert "New inhaler." in prompt


def test_suggestions_fall_back_on_unparseable_output():
    assistant = LLMVisitAssistant(DummyClient("Ask about sleep."))
    assert assistant.suggest_questions(["visit"]) == list(FALLBACK_QUESTIONS)


def test_offline_assistant_returns_canned_content():
    assistant = OfflineVisitAssistant()
    summary = assistant.summarize_visit(
        SummaryRequest(reading_level=8, transcript=" transcript ")
    )

    assert summary.transcript == "transcript"
    assert summary.diagnoses == ["Chronic pulmonary condition"]
    assert len(summary.medical_terms) == 2
    assert assistant.answer_question("Why?", "notes", 8).startswith("Based on the visit notes")
    assert len(assistant.suggest_questions(["visit"])) == 4

    with pytest.raises(ValueError):
        assistant.summarize_visit(SummaryRequest(reading_level=8))


def test_create_assistant_rejects_unknown_backend():
    with pytest.raises(ConfigurationError):
        create_assistant("carrier-pigeon")


def test_build_assistant_from_config_defaults_to_offline():
    assert isinstance(build_assistant_from_config(CompanionConfig()), OfflineVisitAssistant)


def test_build_openai_assistant_requires_key(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    with pytest.raises(ConfigurationError):
        build_assistant_from_config(CompanionConfig(backend="openai"))


def test_build_openai_assistant_reads_key_from_env(monkeypatch):
    class DummyOpenAI:
        def __init__(self, **_: Any) -> None:
            pass

    monkeypatch.setattr(oa_client, "OpenAI", DummyOpenAI)
    monkeypatch.setenv("COMPANION_KEY", "env-key")
    config = CompanionConfig(
        backend="openai", openai=OpenAISettings(api_key_env="COMPANION_KEY")
    )

    assistant = build_assistant_from_config(config)

    assert isinstance(assistant, LLMVisitAssistant)


def test_build_proxy_assistant(monkeypatch):
    monkeypatch.setenv("CLOUD_FUNCTION_BASE_URL", "https://example.test/fn/")
    assistant = build_assistant_from_config(CompanionConfig(backend="proxy"))
    assert isinstance(assistant, ProxyVisitAssistant)
    assert assistant.base_url == "https://example.test/fn"

    monkeypatch.delenv("CLOUD_FUNCTION_BASE_URL")
    with pytest.raises(ConfigurationError):
        build_assistant_from_config(
            CompanionConfig(backend="proxy", proxy=ProxySettings())
        )
