"""
query_synthesizer.py — Turn a free-text trip prompt into one stock-photo query.

Priority:
  1. Destination match (LOCATION_QUERIES), framed with social + season context
  2. Activity match (ACTIVITY_QUERIES), season-adjusted
  3. First three meaningful words + "travel destination"
  4. "travel vacation destination"

Usage:
    from moodtrip.query_synthesizer import synthesize, synthesize_premium
    synthesize("Ski week in Switzerland with the kids")
    # → "family enjoying switzerland alps winter snow"
"""

from __future__ import annotations

import random
import re
from functools import lru_cache
from typing import Iterable, Mapping, Optional, Tuple

from .keyword_tables import (
    ACTIVITY_QUERIES,
    DEFAULT_SOCIAL_PHRASE,
    FALLBACK_QUERY_SUFFIX,
    GENERIC_QUERY,
    LOCATION_QUERIES,
    PREMIUM_ADJECTIVES,
    SEASON_KEYWORDS,
    SEASON_PHRASES,
    SOCIAL_KEYWORDS,
    SOCIAL_PHRASES,
    STOPWORDS,
)


# ── Keyword matching ──────────────────────────────────────────────────────────

SIBILANT_ENDINGS = ("s", "x", "z", "ch", "sh")


@lru_cache(maxsize=1024)
def _pattern(keyword: str, inflected: bool) -> "re.Pattern[str]":
    tail = ""
    if inflected:
        endings = "s|es|ing" if keyword.endswith(SIBILANT_ENDINGS) else "s|ing"
        tail = f"(?:{endings})?"
    return re.compile(rf"\b{re.escape(keyword)}{tail}\b")


def matches_keyword(text: str, keyword: str, inflected: bool = False) -> bool:
    """
    Whole-word keyword test on lowercased text.
    inflected=True also accepts -s, -ing and, after a sibilant, -es
    ("mountain" matches "mountains", "beach" matches "beaches", but "ski"
    does not match "skies").
    """
    return _pattern(keyword.lower(), inflected).search(text) is not None


def matches_any(text: str, keywords: Iterable[str], inflected: bool = False) -> bool:
    return any(matches_keyword(text, k, inflected) for k in keywords)


def _first_match(text: str, table: Mapping[str, str]) -> Optional[str]:
    for key, phrase in table.items():
        if matches_keyword(text, key):
            return phrase
    return None


def _detect(text: str, groups: Mapping[str, Tuple[str, ...]]) -> Optional[str]:
    for name, keywords in groups.items():
        if matches_any(text, keywords):
            return name
    return None


def detect_season(prompt: str) -> Optional[str]:
    return _detect(prompt.lower(), SEASON_KEYWORDS)


def detect_social_context(prompt: str) -> Optional[str]:
    return _detect(prompt.lower(), SOCIAL_KEYWORDS)


# ── Public API ────────────────────────────────────────────────────────────────

def synthesize(prompt: str) -> str:
    """Build exactly one search query for the prompt. Pure and deterministic."""
    text = (prompt or "").lower()
    season = detect_season(text)
    season_phrase = SEASON_PHRASES.get(season, "") if season else ""

    location = _first_match(text, LOCATION_QUERIES)
    if location:
        social = detect_social_context(text)
        social_phrase = SOCIAL_PHRASES[social] if social else DEFAULT_SOCIAL_PHRASE
        return _join(social_phrase, location, season_phrase)

    activity = _first_match(text, ACTIVITY_QUERIES)
    if activity:
        return _join(activity, season_phrase)

    words = [w for w in re.split(r"[^a-z0-9'-]+", text) if len(w) > 2 and w not in STOPWORDS]
    if words:
        return _join(" ".join(words[:3]), FALLBACK_QUERY_SUFFIX)

    return GENERIC_QUERY


def synthesize_premium(prompt: str, rng: Optional[random.Random] = None) -> str:
    """synthesize() plus one quality-signaling adjective, to bias ranking upward."""
    adjective = (rng or random).choice(PREMIUM_ADJECTIVES)
    return f"{synthesize(prompt)} {adjective}"


def _join(*parts: str) -> str:
    return " ".join(p for p in parts if p)
