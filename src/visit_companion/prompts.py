from __future__ import annotations

from typing import Sequence

SYSTEM_PROMPT = (
    "You are a medical visit assistant helping parents of children with chronic "
    "pulmonary conditions.\n"
    "Your responsibilities:\n"
    "- Focus on what matters to parents: what was said, what it means, what to do.\n"
    "- Explain medical terms in plain language.\n"
    "- Never invent facts that are not in the material you are given.\n"
    "- Be supportive and clear."
)

SUMMARY_PROMPT_TEMPLATE = (
    "Here is the transcript of a doctor's visit. Create a helpful summary.\n"
    "\n"
    "{guidance}\n"
    "\n"
    "-----\n"
    "{transcript}\n"
    "-----\n"
    "\n"
    "Please provide your response in the following JSON format:\n"
    "{{\n"
    '  "transcript": "the transcript, lightly cleaned up",\n'
    '  "summary": "2-3 sentence overview of the visit",\n'
    '  "keyPoints": ["point 1", "point 2", "point 3"],\n'
    '  "diagnoses": ["diagnosis 1", "diagnosis 2"],\n'
    '  "actions": ["action 1", "action 2"],\n'
    '  "medicalTerms": [\n'
    '    {{"term": "Medical Term", "explanation": "Simple explanation adapted to reading level"}}\n'
    "  ]\n"
    "}}\n"
    "\n"
    "Write the summary and explanations at the specified reading level."
)

ANSWER_PROMPT_TEMPLATE = (
    "Visit context:\n"
    "{visit_context}\n"
    "\n"
    "Parent's question: {question}\n"
    "\n"
    "{guidance}\n"
    "\n"
    "Please answer the question based on the visit notes above. If the information "
    "isn't in the visit notes, say so and suggest they ask their doctor."
)

SUGGESTION_PROMPT_TEMPLATE = (
    "Based on these recent doctor visits for a child with a chronic pulmonary "
    "condition, suggest 4-5 important questions the parent should ask at their "
    "next visit.\n"
    "\n"
    "Recent visits:\n"
    "{recent_visits}\n"
    "\n"
    "Return ONLY a JSON array of question strings, like:\n"
    '["Question 1?", "Question 2?", "Question 3?"]'
)

MAX_RECENT_VISITS = 3
MISSING_SUMMARY = "No summary"


def reading_level_guidance(reading_level: int) -> str:
    """Return the phrasing instruction that matches a reading grade."""
    if reading_level <= 6:
        return (
            "Use very simple words and short sentences (under 10 words). "
            "Explain everything like you're talking to a 6th grader."
        )
    if reading_level <= 8:
        return (
            "Use clear, straightforward language. Keep sentences under 15 words. "
            "Avoid complex medical jargon."
        )
    if reading_level <= 10:
        return (
            "Use moderate vocabulary appropriate for a high school student. "
            "Technical terms are okay if explained simply."
        )
    return (
        "Use standard medical terminology with clear explanations. "
        "Write at a college reading level."
    )


def build_summary_prompt(transcript: str, reading_level: int) -> str:
    return SUMMARY_PROMPT_TEMPLATE.format(
        guidance=reading_level_guidance(reading_level),
        transcript=transcript.strip(),
    )


def build_answer_prompt(question: str, visit_context: str, reading_level: int) -> str:
    return ANSWER_PROMPT_TEMPLATE.format(
        visit_context=visit_context.strip(),
        question=question.strip(),
        guidance=reading_level_guidance(reading_level),
    )


def build_suggestion_prompt(visit_summaries: Sequence[str | None]) -> str:
    """Build the planner prompt from the most recent visit summaries (newest first)."""
    recent = [
        summary or MISSING_SUMMARY for summary in visit_summaries[:MAX_RECENT_VISITS]
    ]
    return SUGGESTION_PROMPT_TEMPLATE.format(recent_visits="\n\n".join(recent))
