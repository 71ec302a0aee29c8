"""
Narrative insight generation.

summarize() condenses the payload (recent metrics, busiest endpoints) into a
prompt and asks an insight provider for a JSON report. Providers are any
object with ``async generate(prompt: str) -> str``. Every failure degrades to
FALLBACK_INSIGHT; connectivity is never affected.
"""

import json
import logging
from typing import Any, List, Optional

from metrix.models.entities import Insight

logger = logging.getLogger(__name__)

RECENT_POINTS = 10
TOP_ENDPOINTS = 5

FALLBACK_INSIGHT = Insight(
    summary="The analysis service is currently unavailable or the API key is missing.",
    anomalies=["Data analysis could not be performed."],
    recommendations=["Check your API key."],
)

INSIGHT_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "summary": {"type": "STRING"},
        "anomalies": {"type": "ARRAY", "items": {"type": "STRING"}},
        "recommendations": {"type": "ARRAY", "items": {"type": "STRING"}},
    },
}

PROMPT_TEMPLATE = """You are a senior DevOps engineer and data analyst. Analyze the website metrics below.

Metric data (most recent samples):
{metrics}

Most used endpoints:
{endpoints}

Your task:
1. Write a short summary of the overall traffic situation.
2. Identify possible anomalies (e.g. high error rate, sudden latency increase).
3. Suggest performance improvements.
"""


class InsightFormatError(ValueError):
    """Provider output is not a valid insight document."""


def _call_volume(record: Any) -> float:
    calls = record.get("calls") if isinstance(record, dict) else None
    if isinstance(calls, (int, float)) and not isinstance(calls, bool):
        return calls
    return 0


def build_prompt(
    metrics: List[Any],
    endpoints: List[Any],
    recent_points: int = RECENT_POINTS,
    top_endpoints: int = TOP_ENDPOINTS,
) -> str:
    """Prompt with the last ``recent_points`` samples and busiest endpoints."""
    recent = metrics[-recent_points:] if recent_points > 0 else []
    top = sorted(endpoints, key=_call_volume, reverse=True)[:top_endpoints]
    return PROMPT_TEMPLATE.format(
        metrics=json.dumps(recent, default=str),
        endpoints=json.dumps(top, default=str),
    )


def _string_list(doc: dict, key: str) -> List[str]:
    value = doc.get(key, [])
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise InsightFormatError(f"'{key}' must be a list of strings")
    return value


def parse_insight(text: Optional[str]) -> Insight:
    """Validate provider output and build an Insight."""
    if not text:
        raise InsightFormatError("empty response from insight provider")
    try:
        doc = json.loads(text)
    except json.JSONDecodeError as e:
        raise InsightFormatError(f"insight is not valid JSON: {e}") from e
    if not isinstance(doc, dict) or not isinstance(doc.get("summary"), str):
        raise InsightFormatError("insight has no summary")

    return Insight(
        summary=doc["summary"],
        anomalies=_string_list(doc, "anomalies"),
        recommendations=_string_list(doc, "recommendations"),
    )


async def summarize(
    metrics: List[Any],
    endpoints: List[Any],
    provider,
    recent_points: int = RECENT_POINTS,
    top_endpoints: int = TOP_ENDPOINTS,
) -> Insight:
    """
    Produce a narrative insight for the given payload slices.

    Returns FALLBACK_INSIGHT when there is no provider or anything goes wrong.
    """
    if provider is None:
        logger.warning("Insight analysis skipped: no provider configured")
        return FALLBACK_INSIGHT

    try:
        prompt = build_prompt(metrics, endpoints, recent_points, top_endpoints)
        text = await provider.generate(prompt)
        return parse_insight(text)
    except Exception:
        logger.exception("Insight analysis failed")
        return FALLBACK_INSIGHT
