from __future__ import annotations

import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any, List, TypedDict

import typer
import yaml

from .assistants import VisitAssistant, build_assistant_from_config
from .config import CompanionConfig, load_config
from .errors import ConfigurationError
from .models import Document, ReadingLevelAnalysis, SummaryRequest
from .onboarding import (
    ONBOARDING_QUESTIONS,
    UserPreferences,
    calibrate_reading_level,
    count_words,
    meets_minimum,
)
from .prompts import reading_level_guidance
from .readability import analyze_reading_level

app = typer.Typer(help="Visit Companion CLI.", no_args_is_help=True)

# File types the reading-level command expands into Document instances.
SUPPORTED_INPUT_EXTENSIONS = {".txt"}


class DocumentAnalysis(TypedDict):
    doc_id: str
    grade: int
    description: str
    confidence: str
    wordCount: int


@app.callback()
def main_callback(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log backend activity at DEBUG level."
    ),
) -> None:
    """Reading-level calibration and AI visit summaries for parents."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command("reading-level")
def reading_level_command(
    text: str | None = typer.Option(None, "--text", "-t", help="Text to analyze."),
    input_path: Path | None = typer.Option(
        None,
        exists=True,
        readable=True,
        dir_okay=True,
        file_okay=True,
        help="A .txt file or a directory of .txt files.",
    ),
) -> None:
    """Estimate the SMOG reading grade of text and emit a JSON summary."""
    if (text is None) == (input_path is None):
        raise typer.BadParameter("Provide exactly one of --text or --input-path.")
    if text is not None:
        documents = [Document(doc_id="<text>", text=text)]
    else:
        documents = _load_documents(input_path)
    summary = [
        _analysis_dict(doc.doc_id, analyze_reading_level(doc.text))
        for doc in documents
    ]
    typer.echo(json.dumps({"documents": summary}, indent=2))


@app.command()
def onboard(
    responses: List[str] = typer.Option(
        ...,
        "--response",
        "-r",
        help="Answer to an onboarding question; repeat once per question.",
    ),
) -> None:
    """Calibrate the reading level from onboarding answers."""
    if len(responses) != len(ONBOARDING_QUESTIONS):
        raise typer.BadParameter(
            f"Expected {len(ONBOARDING_QUESTIONS)} responses, got {len(responses)}."
        )
    for question, response in zip(ONBOARDING_QUESTIONS, responses):
        if not meets_minimum(question, response):
            raise typer.BadParameter(
                f"'{question.title}' needs at least {question.min_words} words "
                f"(got {count_words(response)})."
            )
    analysis = calibrate_reading_level(responses)
    preferences = UserPreferences()
    preferences.apply_analysis(analysis)
    typer.echo(
        json.dumps(
            {"analysis": analysis.to_dict(), "preferences": asdict(preferences)},
            indent=2,
        )
    )


@app.command()
def guidance(
    reading_level: int | None = typer.Option(None, "--reading-level", "-l", min=1),
    config: Path | None = typer.Option(None, "--config", "-c"),
) -> None:
    """Print the phrasing guidance used for a reading level."""
    cfg = load_config(config)
    level = reading_level if reading_level is not None else cfg.reading_level
    typer.echo(reading_level_guidance(level))


@app.command()
def summarize(
    transcript: Path | None = typer.Option(
        None, exists=True, dir_okay=False, readable=True, help="Visit transcript text."
    ),
    recording: Path | None = typer.Option(
        None, exists=True, dir_okay=False, readable=True, help="Visit audio recording."
    ),
    reading_level: int | None = typer.Option(None, "--reading-level", "-l", min=1),
    config: Path | None = typer.Option(None, "--config", "-c"),
    backend: str | None = typer.Option(
        None, "--backend", "-b", help="Backend to use: offline, openai or proxy."
    ),
    openai_model: str | None = typer.Option(None, "--openai-model"),
    openai_api_key: str | None = typer.Option(
        None, "--openai-api-key", help="Explicit OpenAI API key (prefer env vars)."
    ),
    proxy_url: str | None = typer.Option(
        None, "--proxy-url", help="Base URL of the serverless proxy."
    ),
) -> None:
    """Summarize a visit transcript or recording and emit JSON."""
    cfg = load_config(config)
    _apply_backend_overrides(cfg, backend, openai_model, openai_api_key, proxy_url)
    assistant = _build_assistant(cfg)
    request = SummaryRequest(
        reading_level=_resolve_reading_level(cfg, reading_level),
        transcript=transcript.read_text(encoding="utf-8") if transcript else None,
        audio_path=recording,
    )
    try:
        summary = assistant.summarize_visit(request)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    typer.echo(json.dumps(summary.to_dict(), indent=2))


@app.command()
def ask(
    question: str = typer.Option(..., "--question", "-q"),
    visit_context: Path = typer.Option(
        ..., exists=True, dir_okay=False, readable=True, help="Visit notes to answer from."
    ),
    reading_level: int | None = typer.Option(None, "--reading-level", "-l", min=1),
    config: Path | None = typer.Option(None, "--config", "-c"),
    backend: str | None = typer.Option(None, "--backend", "-b"),
    openai_model: str | None = typer.Option(None, "--openai-model"),
    openai_api_key: str | None = typer.Option(None, "--openai-api-key"),
    proxy_url: str | None = typer.Option(None, "--proxy-url"),
) -> None:
    """Answer a question about a visit."""
    cfg = load_config(config)
    _apply_backend_overrides(cfg, backend, openai_model, openai_api_key, proxy_url)
    assistant = _build_assistant(cfg)
    try:
        answer = assistant.answer_question(
            question,
            visit_context.read_text(encoding="utf-8"),
            _resolve_reading_level(cfg, reading_level),
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    typer.echo(answer)


@app.command("suggest-questions")
def suggest_questions(
    history: Path | None = typer.Option(
        None,
        exists=True,
        dir_okay=False,
        readable=True,
        help="JSON list of past visits (summaries or summary strings), newest first.",
    ),
    config: Path | None = typer.Option(None, "--config", "-c"),
    backend: str | None = typer.Option(None, "--backend", "-b"),
    openai_model: str | None = typer.Option(None, "--openai-model"),
    openai_api_key: str | None = typer.Option(None, "--openai-api-key"),
    proxy_url: str | None = typer.Option(None, "--proxy-url"),
) -> None:
    """Suggest questions to ask at the next visit."""
    cfg = load_config(config)
    _apply_backend_overrides(cfg, backend, openai_model, openai_api_key, proxy_url)
    visits = _load_history(history) if history else []
    assistant = _build_assistant(cfg)
    questions = assistant.suggest_questions(visits)
    typer.echo(json.dumps({"questions": questions}, indent=2))


@app.command("print-config")
def print_config() -> None:
    """Print the default configuration as YAML."""
    cfg = CompanionConfig()
    typer.echo(yaml.safe_dump(cfg.to_dict(), sort_keys=False))


def main() -> None:
    app()


def _apply_backend_overrides(
    config: CompanionConfig,
    backend: str | None,
    openai_model: str | None,
    openai_api_key: str | None,
    proxy_url: str | None,
) -> None:
    """Apply CLI overrides to backend-related config fields when provided."""
    if backend:
        config.backend = backend
    if openai_model:
        config.openai.model = openai_model
    if openai_api_key:
        config.openai.api_key = openai_api_key
    if proxy_url:
        config.proxy.base_url = proxy_url


def _build_assistant(config: CompanionConfig) -> VisitAssistant:
    try:
        return build_assistant_from_config(config)
    except (ConfigurationError, RuntimeError) as exc:
        raise typer.BadParameter(str(exc)) from exc


def _resolve_reading_level(config: CompanionConfig, override: int | None) -> int:
    return override if override is not None else config.reading_level


def _load_documents(input_path: Path) -> List[Document]:
    """Expand a file or directory into documents keyed by relative path."""
    if input_path.is_file():
        return [Document(input_path.name, input_path.read_text(encoding="utf-8"))]
    files = sorted(
        p
        for p in input_path.rglob("*")
        if p.is_file() and p.suffix.lower() in SUPPORTED_INPUT_EXTENSIONS
    )
    return [
        Document(str(file.relative_to(input_path)), file.read_text(encoding="utf-8"))
        for file in files
    ]


def _load_history(path: Path) -> List[Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"{path} is not valid JSON: {exc}") from exc
    if not isinstance(data, list):
        raise typer.BadParameter(f"{path} must contain a JSON list of visits.")
    for index, visit in enumerate(data):
        if not isinstance(visit, (dict, str)):
            raise typer.BadParameter(
                f"{path}: visit {index} must be an object or a summary string."
            )
    return data


def _analysis_dict(doc_id: str, analysis: ReadingLevelAnalysis) -> DocumentAnalysis:
    payload = analysis.to_dict()
    return {
        "doc_id": doc_id,
        "grade": payload["grade"],
        "description": payload["description"],
        "confidence": payload["confidence"],
        "wordCount": payload["wordCount"],
    }


if __name__ == "__main__":
    main()
