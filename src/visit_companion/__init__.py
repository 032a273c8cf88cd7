"""
visit_companion package exports convenience helpers for library consumers.
"""

from __future__ import annotations

from .assistants import build_assistant_from_config, create_assistant
from .config import CompanionConfig, config_from_dict, config_from_yaml, load_config
from .models import ReadingLevelAnalysis, SummaryRequest, VisitSummary
from .onboarding import UserPreferences, calibrate_reading_level
from .prompts import reading_level_guidance
from .readability import analyze_reading_level

__all__ = [
    "CompanionConfig",
    "config_from_dict",
    "config_from_yaml",
    "load_config",
    "create_assistant",
    "build_assistant_from_config",
    "ReadingLevelAnalysis",
    "SummaryRequest",
    "VisitSummary",
    "UserPreferences",
    "calibrate_reading_level",
    "reading_level_guidance",
    "analyze_reading_level",
]

__version__ = "0.1.0"
