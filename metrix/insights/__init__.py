"""Insights package - narrative reports from a text-generation provider."""

from .analyzer import summarize, build_prompt, parse_insight, FALLBACK_INSIGHT
from .gemini import GeminiInsightProvider, build_insight_provider

__all__ = [
    "summarize",
    "build_prompt",
    "parse_insight",
    "FALLBACK_INSIGHT",
    "GeminiInsightProvider",
    "build_insight_provider",
]
