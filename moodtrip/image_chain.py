"""
image_chain.py — Acquire moodboard images through an ordered provider chain.

Strategies (in priority order):
  1. GenerativeStrategy   — Imagen, only when GEMINI_API_KEY is configured
  2. StockSearchStrategy  — Unsplash with the premium query, ranked; retries
                            with the plain query when fewer than top-N clear
                            the primary threshold
  3. PlaceholderStrategy  — 4 picsum URLs, cannot fail

ImageProviderChain.acquire() never raises: each strategy's failure is caught
and logged, and the placeholder guarantees a usable result.

Usage:
    chain = ImageProviderChain.from_settings(settings)
    result = chain.acquire("Summer week in Santorini with friends")
    result.urls, result.provider, result.source
"""

from __future__ import annotations

import logging
import random
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Sequence

from rich.console import Console

from .config import Settings
from .models import CandidateImage, ImageResult, ImageSource, ProviderError
from .providers import GeminiImageProvider, UnsplashSearchProvider, placeholder_urls
from .query_synthesizer import synthesize, synthesize_premium
from .ranker import ImageQualityRanker

logger = logging.getLogger(__name__)
console = Console(stderr=True)


# ── Strategy interface ────────────────────────────────────────────────────────

class ImageStrategy(ABC):
    provider: str = ""
    source: ImageSource = ImageSource.STOCK

    @abstractmethod
    def acquire(self, prompt: str) -> ImageResult:
        """Return images for prompt or raise ProviderError."""


class GenerativeStrategy(ImageStrategy):
    source = ImageSource.GENERATED

    def __init__(self, generator: GeminiImageProvider, count: int = 4) -> None:
        self.generator = generator
        self.count = count
        self.provider = getattr(generator, "name", "Generative")

    def acquire(self, prompt: str) -> ImageResult:
        urls = self.generator.generate(prompt, self.count)[: self.count]
        if not urls:
            raise ProviderError("Generative provider returned no images")
        return ImageResult(urls=urls, provider=self.provider, source=self.source)


class StockSearchStrategy(ImageStrategy):
    source = ImageSource.STOCK

    def __init__(
        self,
        search: UnsplashSearchProvider,
        ranker: Optional[ImageQualityRanker] = None,
        candidate_count: int = 20,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.search = search
        self.ranker = ranker or ImageQualityRanker()
        self.candidate_count = candidate_count
        self.provider = getattr(search, "name", "Stock")
        self._rng = rng

    def acquire(self, prompt: str) -> ImageResult:
        top_n = self.ranker.config.top_n
        premium_query = synthesize_premium(prompt, self._rng)
        candidates = self.search.search(premium_query, self.candidate_count, "landscape")
        scored = self.ranker.score_all(candidates)

        if self.ranker.count_passing(scored) < top_n:
            plain_query = synthesize(prompt)
            logger.info(
                "Premium query %r gave too few strong matches — retrying with %r",
                premium_query, plain_query,
            )
            extra = _unseen(candidates, self.search.search(plain_query, self.candidate_count, "landscape"))
            scored += self.ranker.score_all(extra, start=len(candidates))

        urls = [s.url for s in self.ranker.select(scored)]
        if not urls:
            raise ProviderError(f"No stock candidates cleared the quality bar ({len(scored)} seen)")
        return ImageResult(urls=urls, provider=self.provider, source=self.source)


class PlaceholderStrategy(ImageStrategy):
    provider = "Contextual Placeholder (Picsum)"
    source = ImageSource.STOCK

    def __init__(self, count: int = 4, now: Optional[Callable[[], float]] = None) -> None:
        self.count = count
        self._now = now

    def acquire(self, prompt: str) -> ImageResult:
        return ImageResult(
            urls=placeholder_urls(prompt, self.count, self._now),
            provider=self.provider,
            source=self.source,
        )


def _photo_key(c: CandidateImage):
    return c.id or c.urls.get("regular") or id(c)


def _unseen(first: Sequence[CandidateImage], second: Sequence[CandidateImage]) -> List[CandidateImage]:
    """Photos from the second result page that the first page did not already return."""
    seen = {_photo_key(c) for c in first}
    fresh = []
    for c in second:
        key = _photo_key(c)
        if key in seen:
            continue
        seen.add(key)
        fresh.append(c)
    return fresh


# ── Chain ─────────────────────────────────────────────────────────────────────

class ImageProviderChain:

    def __init__(self, strategies: Sequence[ImageStrategy], fallback: Optional[ImageStrategy] = None) -> None:
        self.strategies = list(strategies)
        self.fallback = fallback or PlaceholderStrategy()

    @classmethod
    def from_settings(cls, settings: Settings, ranker: Optional[ImageQualityRanker] = None) -> "ImageProviderChain":
        strategies: List[ImageStrategy] = []
        if settings.has_generative_images:
            strategies.append(GenerativeStrategy(GeminiImageProvider(settings), settings.image_count))
        if settings.has_stock_search:
            strategies.append(StockSearchStrategy(
                UnsplashSearchProvider(settings),
                ranker or ImageQualityRanker(settings.ranker),
                settings.stock_candidate_count,
            ))
        return cls(strategies, PlaceholderStrategy(settings.image_count))

    def acquire(self, prompt: str) -> ImageResult:
        for strategy in self.strategies:
            try:
                result = strategy.acquire(prompt)
            except Exception as e:
                logger.warning("%s failed, falling back: %s", strategy.provider, e)
                console.print(f"  [yellow]⚠ {strategy.provider} failed: {e}[/yellow]")
                continue
            if result.urls:
                console.print(
                    f"  [dim]{len(result.urls)} image(s) from {result.provider}[/dim]"
                )
                return result
            logger.warning("%s returned no images, falling back", strategy.provider)

        logger.warning("All image providers failed — using placeholders")
        return self.fallback.acquire(prompt)
