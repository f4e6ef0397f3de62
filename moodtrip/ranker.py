"""
ranker.py — Score and select stock-search candidates.

Scoring is additive, each candidate starts at 0:
  human presence text  +20   (people / family / friends / couple ...)
  emotional text       +15   activity text +12   lifestyle text +10
  engagement           likes/200 ≤5, downloads/100 ≤5, views/2000 ≤3
  composition          landscape ratio +3, resolution tiers +3/+2/+2
  dominant color       mid-range brightness +5
  minor                sponsored +1, premium +2, recency ≤+2, photographer ≤+2

Selection: score ≥ primary threshold, best first, top N. When fewer than N
pass, the relaxed threshold is applied to the full candidate set instead.
Ties keep provider order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence

from .config import RankerConfig
from .keyword_tables import (
    ACTIVITY_WORDS,
    EMOTIONAL_WORDS,
    HUMAN_PRESENCE_WORDS,
    LIFESTYLE_WORDS,
    URL_PREFERENCE,
)
from .models import CandidateImage
from .palette import hex_to_rgb, luminance
from .query_synthesizer import matches_any

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoredCandidate:
    candidate: CandidateImage
    score: float
    position: int   # index in the provider's result list

    @property
    def url(self) -> Optional[str]:
        return best_url(self.candidate)


def best_url(candidate: CandidateImage) -> Optional[str]:
    """Highest-resolution variant available: full > raw > regular > small."""
    for key in URL_PREFERENCE:
        url = candidate.urls.get(key)
        if url:
            return url
    return None


class ImageQualityRanker:

    def __init__(
        self,
        config: Optional[RankerConfig] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.config = config or RankerConfig()
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    # ── Scoring ───────────────────────────────────────────────────────────────

    def score(self, candidate: CandidateImage) -> float:
        cfg = self.config
        text = candidate.text
        total = 0.0

        if matches_any(text, HUMAN_PRESENCE_WORDS):
            total += cfg.human_presence_weight
        if matches_any(text, EMOTIONAL_WORDS):
            total += cfg.emotional_weight
        if matches_any(text, ACTIVITY_WORDS):
            total += cfg.activity_weight
        if matches_any(text, LIFESTYLE_WORDS):
            total += cfg.lifestyle_weight

        total += min(candidate.likes / cfg.likes_divisor, cfg.likes_cap)
        total += min(candidate.downloads / cfg.downloads_divisor, cfg.downloads_cap)
        total += min(candidate.views / cfg.views_divisor, cfg.views_cap)

        total += self._composition(candidate)
        total += self._brightness(candidate.color)
        total += self._minor_bonuses(candidate)
        return total

    def _composition(self, candidate: CandidateImage) -> float:
        cfg = self.config
        if candidate.width <= 0 or candidate.height <= 0:
            return 0.0
        bonus = 0.0
        ratio = candidate.width / candidate.height
        if cfg.landscape_min_ratio <= ratio <= cfg.landscape_max_ratio:
            bonus += cfg.landscape_bonus
        pixels = candidate.width * candidate.height
        for min_pixels, tier_bonus in cfg.resolution_tiers:
            if pixels >= min_pixels:
                bonus += tier_bonus
        return bonus

    def _brightness(self, color: str) -> float:
        if not color:
            return 0.0
        try:
            lum = luminance(*hex_to_rgb(color))
        except ValueError:
            return 0.0
        if self.config.brightness_min <= lum <= self.config.brightness_max:
            return self.config.brightness_bonus
        return 0.0

    def _minor_bonuses(self, candidate: CandidateImage) -> float:
        cfg = self.config
        bonus = 0.0
        if candidate.sponsored:
            bonus += cfg.sponsored_bonus
        if candidate.premium:
            bonus += cfg.premium_bonus

        if candidate.created_at is not None:
            created = candidate.created_at
            if created.tzinfo is None:
                created = created.replace(tzinfo=timezone.utc)
            age_days = (self._clock() - created).total_seconds() / 86400
            if 0 <= age_days < cfg.fresh_days:
                bonus += cfg.fresh_bonus
            elif 0 <= age_days < cfg.recent_days:
                bonus += cfg.recent_bonus

        photographer = 0.0
        if candidate.photographer_total_photos > cfg.prolific_photos:
            photographer += 1.0
        if candidate.photographer_total_likes > cfg.well_liked_likes:
            photographer += 1.0
        bonus += min(photographer, cfg.photographer_cap)
        return bonus

    # ── Selection ─────────────────────────────────────────────────────────────

    def score_all(self, candidates: Sequence[CandidateImage], start: int = 0) -> List[ScoredCandidate]:
        """
        Score every candidate once, sorted best first (stable on ties).
        start offsets positions so a later result page ranks after an earlier one.
        """
        scored = [
            ScoredCandidate(candidate=c, score=self.score(c), position=start + i)
            for i, c in enumerate(candidates)
        ]
        return _best_first(scored)

    def count_passing(self, scored: Sequence[ScoredCandidate]) -> int:
        """How many already-scored candidates clear the primary threshold."""
        threshold = self.config.primary_threshold
        return sum(1 for s in scored if s.score >= threshold)

    def rank(self, candidates: Sequence[CandidateImage]) -> List[ScoredCandidate]:
        """Top-N selection with threshold relaxation."""
        return self.select(self.score_all(candidates))

    def select(self, scored: Sequence[ScoredCandidate]) -> List[ScoredCandidate]:
        """Top-N of already-scored candidates, relaxing the threshold when too few pass."""
        cfg = self.config
        scored = _best_first(scored)

        selected = [s for s in scored if s.score >= cfg.primary_threshold]
        if len(selected) < cfg.top_n:
            logger.debug(
                "Only %d/%d candidates scored ≥ %s — relaxing to %s",
                len(selected), len(scored), cfg.primary_threshold, cfg.relaxed_threshold,
            )
            selected = [s for s in scored if s.score >= cfg.relaxed_threshold]

        return [s for s in selected if s.url][: cfg.top_n]

    def top_urls(self, candidates: Sequence[CandidateImage]) -> List[str]:
        return [s.url for s in self.rank(candidates)]


def _best_first(scored: Sequence[ScoredCandidate]) -> List[ScoredCandidate]:
    return sorted(scored, key=lambda s: (-s.score, s.position))
