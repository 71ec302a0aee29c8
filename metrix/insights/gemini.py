"""Gemini insight provider over the generateContent REST API."""

import logging
from typing import Any, Dict, Optional

import httpx

from metrix.config.loader import get_insights_api_key
from metrix.insights.analyzer import INSIGHT_SCHEMA

logger = logging.getLogger(__name__)

GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-2.5-flash"


class GeminiInsightProvider:
    """Asks Gemini for a JSON insight document matching INSIGHT_SCHEMA."""

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        client: Optional[httpx.AsyncClient] = None,
        base_url: str = GEMINI_API_BASE,
        timeout: float = 60.0,
    ):
        if not api_key:
            raise ValueError("Gemini API key is required")
        self.api_key = api_key
        self.model = model
        self.client = client
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    @property
    def url(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    def build_request(self, prompt: str) -> Dict[str, Any]:
        return {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": INSIGHT_SCHEMA,
            },
        }

    async def generate(self, prompt: str) -> str:
        """Return the model's text output; raises on HTTP or format errors."""
        headers = {"x-goog-api-key": self.api_key, "Content-Type": "application/json"}
        body = self.build_request(prompt)

        if self.client is not None:
            resp = await self.client.post(self.url, headers=headers, json=body, timeout=self.timeout)
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(self.url, headers=headers, json=body)
        resp.raise_for_status()

        return extract_text(resp.json())


def extract_text(data: Any) -> str:
    """Concatenate the text parts of the first candidate."""
    try:
        parts = data["candidates"][0]["content"]["parts"]
    except (KeyError, IndexError, TypeError) as e:
        raise ValueError("No response from Gemini") from e
    text = "".join(p.get("text", "") for p in parts if isinstance(p, dict))
    if not text:
        raise ValueError("No response from Gemini")
    return text


def build_insight_provider(
    config: Dict[str, Any],
    client: Optional[httpx.AsyncClient] = None,
) -> Optional[GeminiInsightProvider]:
    """Provider from config, or None when no API key is available."""
    api_key = get_insights_api_key(config)
    if not api_key:
        logger.info("No insight API key configured; insights will use the fallback")
        return None
    model = (config.get("insights") or {}).get("model") or DEFAULT_MODEL
    return GeminiInsightProvider(api_key=api_key, model=model, client=client)
