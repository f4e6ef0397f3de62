"""
config.py — Explicit configuration for providers, enrichers and the ranker.

Settings are read from the environment (and .env) once, at the entry point,
then passed into each component at construction. Nothing below the entry
point reads os.environ.

Usage:
    from dotenv import load_dotenv
    from moodtrip.config import Settings

    load_dotenv()
    settings = Settings.from_env()
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

DEFAULT_SITE_URL = "http://localhost:3001"
DEFAULT_IMAGE_MODEL = "imagen-3.0-generate-002"
DEFAULT_TEXT_MODEL = "gemini-2.5-flash"


@dataclass
class RankerConfig:
    """Thresholds and weights for the stock image quality ranker."""
    primary_threshold: float = 15.0
    relaxed_threshold: float = 10.0
    top_n: int = 4

    # Text signals
    human_presence_weight: float = 20.0
    emotional_weight: float = 15.0
    activity_weight: float = 12.0
    lifestyle_weight: float = 10.0

    # Engagement: min(count / divisor, cap)
    likes_divisor: float = 200.0
    likes_cap: float = 5.0
    downloads_divisor: float = 100.0
    downloads_cap: float = 5.0
    views_divisor: float = 2000.0
    views_cap: float = 3.0

    # Composition
    landscape_min_ratio: float = 1.2
    landscape_max_ratio: float = 2.5
    landscape_bonus: float = 3.0
    resolution_tiers: tuple = ((2_000_000, 3.0), (5_000_000, 2.0), (10_000_000, 2.0))

    # Dominant color luminance window (0-1)
    brightness_min: float = 0.2
    brightness_max: float = 0.8
    brightness_bonus: float = 5.0

    # Minor bonuses
    sponsored_bonus: float = 1.0
    premium_bonus: float = 2.0
    recent_days: int = 30
    recent_bonus: float = 1.0
    fresh_days: int = 7
    fresh_bonus: float = 2.0
    prolific_photos: int = 100
    well_liked_likes: int = 1000
    photographer_cap: float = 2.0


@dataclass
class Settings:
    gemini_api_key: Optional[str] = None
    unsplash_access_key: Optional[str] = None
    site_url: str = DEFAULT_SITE_URL
    media_dir: Optional[Path] = None
    http_timeout: float = 8.0
    image_model: str = DEFAULT_IMAGE_MODEL
    text_model: str = DEFAULT_TEXT_MODEL
    max_workers: int = 4
    stock_candidate_count: int = 20
    image_count: int = 4
    ranker: RankerConfig = field(default_factory=RankerConfig)

    @property
    def has_generative_images(self) -> bool:
        return bool(self.gemini_api_key)

    @property
    def has_stock_search(self) -> bool:
        return bool(self.unsplash_access_key)

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if env is None else env
        media_dir = env.get("MOODTRIP_MEDIA_DIR")
        return cls(
            gemini_api_key=env.get("GEMINI_API_KEY") or None,
            unsplash_access_key=env.get("UNSPLASH_ACCESS_KEY") or None,
            site_url=(env.get("MOODTRIP_SITE_URL") or DEFAULT_SITE_URL).rstrip("/"),
            media_dir=Path(media_dir) if media_dir else None,
            http_timeout=float(env.get("MOODTRIP_HTTP_TIMEOUT") or 8),
            image_model=env.get("MOODTRIP_IMAGE_MODEL") or DEFAULT_IMAGE_MODEL,
            text_model=env.get("MOODTRIP_TEXT_MODEL") or DEFAULT_TEXT_MODEL,
            max_workers=int(env.get("MOODTRIP_MAX_WORKERS") or 4),
        )
