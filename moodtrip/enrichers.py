"""
enrichers.py — Summary and tag generation for an idea prompt.

Both enrichers have a deterministic fallback and an optional generative
backend (Gemini). Neither ever raises: backend failures or empty answers fall
through to the fallback.

  SummaryEnricher.summarize(prompt) → non-empty text
  TagEnricher.tag(prompt)           → 3–5 unique lowercase tags
"""

from __future__ import annotations

import logging
import random
from typing import Iterable, List, Optional

from google import genai
from google.genai import types
from pydantic import BaseModel, Field

from .config import Settings
from .keyword_tables import FALLBACK_TAGS, MAX_TAGS, MIN_TAGS, SUMMARY_TEMPLATES, TAG_RULES
from .models import ProviderError
from .query_synthesizer import matches_any

logger = logging.getLogger(__name__)


SUMMARY_SYSTEM_PROMPT = """\
You are a travel expert who creates evocative, inspiring summaries of travel ideas.
Write a 2-3 sentence summary that captures the essence and appeal of the travel experience.
Focus on the emotional journey, unique experiences, and what makes this destination special."""

TAGS_SYSTEM_PROMPT = """\
You are a travel expert who extracts relevant tags from travel descriptions.
Return 3-5 short, descriptive, lowercase tags that capture the key aspects of the idea:
destination type, activities, budget level, travel style, unique features."""


class TagList(BaseModel):
    tags: List[str] = Field(description="3-5 short lowercase travel tags")


# ── Generative backend ────────────────────────────────────────────────────────

class GeminiTextBackend:
    """Gemini text generation for summaries and tags. Raises ProviderError."""

    def __init__(self, settings: Settings, client=None) -> None:
        if not settings.gemini_api_key and client is None:
            raise ProviderError("GEMINI_API_KEY not configured")
        self.settings = settings
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = genai.Client(
                api_key=self.settings.gemini_api_key,
                http_options=types.HttpOptions(timeout=int(self.settings.http_timeout * 1000)),
            )
        return self._client

    def summarize(self, prompt: str) -> str:
        try:
            response = self.client.models.generate_content(
                model=self.settings.text_model,
                contents=f"Create a compelling travel summary for this idea: {prompt}",
                config=types.GenerateContentConfig(
                    system_instruction=SUMMARY_SYSTEM_PROMPT,
                    temperature=0.7,
                    max_output_tokens=200,
                ),
            )
        except Exception as e:
            raise ProviderError(f"Gemini summary failed: {e}") from e
        return (response.text or "").strip()

    def tag(self, prompt: str) -> List[str]:
        try:
            response = self.client.models.generate_content(
                model=self.settings.text_model,
                contents=f"Extract tags from this travel idea: {prompt}",
                config=types.GenerateContentConfig(
                    system_instruction=TAGS_SYSTEM_PROMPT,
                    temperature=0.3,
                    response_mime_type="application/json",
                    response_schema=TagList,
                ),
            )
            return TagList.model_validate_json(response.text or "").tags
        except Exception as e:
            raise ProviderError(f"Gemini tags failed: {e}") from e


# ── Summary ───────────────────────────────────────────────────────────────────

class SummaryEnricher:

    def __init__(self, backend: Optional[GeminiTextBackend] = None, rng: Optional[random.Random] = None) -> None:
        self.backend = backend
        self._rng = rng or random.Random()

    def summarize(self, prompt: str) -> str:
        if self.backend is not None:
            try:
                text = self.backend.summarize(prompt)
                if text:
                    return text
                logger.warning("Generative summary was empty — using template")
            except Exception as e:
                logger.warning("Generative summary failed — using template: %s", e)
        return self._rng.choice(SUMMARY_TEMPLATES)


# ── Tags ──────────────────────────────────────────────────────────────────────

def normalize_tags(tags: Iterable[str]) -> List[str]:
    """Dedupe (first occurrence wins), pad with FALLBACK_TAGS to 3, cap at 5."""
    result: List[str] = []
    for tag in tags:
        tag = (tag or "").strip().lower()
        if tag and tag not in result:
            result.append(tag)
    result = result[:MAX_TAGS]
    for fallback in FALLBACK_TAGS:
        if len(result) >= MIN_TAGS:
            break
        if fallback not in result:
            result.append(fallback)
    return result


def rule_tags(prompt: str) -> List[str]:
    """Tags whose trigger keywords appear in the prompt, in rule order."""
    text = (prompt or "").lower()
    return [tag for _, tag, keywords in TAG_RULES if matches_any(text, keywords, inflected=True)]


class TagEnricher:

    def __init__(self, backend: Optional[GeminiTextBackend] = None) -> None:
        self.backend = backend

    def tag(self, prompt: str) -> List[str]:
        if self.backend is not None:
            try:
                tags = [t for t in self.backend.tag(prompt) if t and t.strip()]
                if tags:
                    return normalize_tags(tags)
                logger.warning("Generative tags were empty — using keyword rules")
            except Exception as e:
                logger.warning("Generative tags failed — using keyword rules: %s", e)
        return normalize_tags(rule_tags(prompt))


def build_enrichers(settings: Settings):
    """(SummaryEnricher, TagEnricher) wired to Gemini when a key is configured."""
    backend = GeminiTextBackend(settings) if settings.gemini_api_key else None
    return SummaryEnricher(backend), TagEnricher(backend)
