"""
providers.py — External image providers behind the image provider chain.

  GeminiImageProvider     — Imagen via google-genai; writes PNGs, returns URLs
  UnsplashSearchProvider  — stock search, returns CandidateImage hits
  placeholder_urls()      — deterministic picsum URLs, no network

Providers raise ProviderError on any failure (including timeouts); the chain
decides what to do next.
"""

from __future__ import annotations

import json
import logging
import tempfile
import time
import urllib.parse
import urllib.request
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from google import genai
from google.genai import types

from .config import Settings
from .keyword_tables import PLACEHOLDER_GENERIC, PLACEHOLDER_TOPICS, PLACEHOLDER_URL
from .models import CandidateImage, ProviderError
from .query_synthesizer import matches_any

logger = logging.getLogger(__name__)

UNSPLASH_SEARCH_URL = "https://api.unsplash.com/search/photos"

IMAGE_PROMPT_TEMPLATE = """\
Travel moodboard photograph for this trip idea: {prompt}

Technical requirements:
- Wide landscape atmospheric photo, fills frame edge-to-edge
- Show people genuinely enjoying the place, candid and warm
- Absolutely no text, UI elements, logos, watermarks, or typography
- Professional travel photography quality, rich natural color"""


# ── Generative provider ───────────────────────────────────────────────────────

class GeminiImageProvider:
    """Imagen text-to-image. Generated bytes are written under media_dir/generated."""

    name = "Google Imagen"

    def __init__(self, settings: Settings, client: Optional[Any] = None) -> None:
        if not settings.gemini_api_key and client is None:
            raise ProviderError("GEMINI_API_KEY not configured")
        self.settings = settings
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = genai.Client(
                api_key=self.settings.gemini_api_key,
                http_options=types.HttpOptions(timeout=int(self.settings.http_timeout * 1000 * 4)),
            )
        return self._client

    def generate(self, prompt: str, count: Optional[int] = None) -> List[str]:
        count = count or self.settings.image_count
        try:
            response = self.client.models.generate_images(
                model=self.settings.image_model,
                prompt=IMAGE_PROMPT_TEMPLATE.format(prompt=prompt[:800]),
                config=types.GenerateImagesConfig(
                    number_of_images=count,
                    aspect_ratio="16:9",
                ),
            )
        except Exception as e:
            raise ProviderError(f"Imagen request failed: {e}") from e

        images = [g.image.image_bytes for g in (response.generated_images or []) if g.image]
        images = [b for b in images if b]
        if not images:
            raise ProviderError("Imagen returned no images")
        return self._save(images)

    def _save(self, images: List[bytes]) -> List[str]:
        stamp = int(time.time() * 1000)
        if self.settings.media_dir is not None:
            out_dir = Path(self.settings.media_dir) / "generated"
            out_dir.mkdir(parents=True, exist_ok=True)
            urls = []
            for i, data in enumerate(images, 1):
                fname = f"gen_{stamp}_{i}.png"
                (out_dir / fname).write_bytes(data)
                urls.append(f"/generated/{fname}")
            return urls

        out_dir = Path(tempfile.mkdtemp(prefix="moodtrip_"))
        urls = []
        for i, data in enumerate(images, 1):
            path = out_dir / f"gen_{stamp}_{i}.png"
            path.write_bytes(data)
            urls.append(path.resolve().as_uri())
        return urls


# ── Stock search provider ─────────────────────────────────────────────────────

def _fetch_json(url: str, headers: Dict[str, str], timeout: float) -> Any:
    req = urllib.request.Request(url, headers=headers)
    with urllib.request.urlopen(req, timeout=timeout) as resp:
        return json.loads(resp.read().decode("utf-8"))


def _parse_timestamp(raw: Optional[str]) -> Optional[datetime]:
    if not raw:
        return None
    try:
        return datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return None


def candidate_from_unsplash(photo: Dict[str, Any]) -> CandidateImage:
    """Map one Unsplash photo JSON object onto a CandidateImage."""
    user = photo.get("user") or {}
    return CandidateImage(
        id=str(photo.get("id", "")),
        urls={k: v for k, v in (photo.get("urls") or {}).items() if v},
        description=photo.get("description") or "",
        alt_description=photo.get("alt_description") or "",
        likes=int(photo.get("likes") or 0),
        downloads=int(photo.get("downloads") or 0),
        views=int(photo.get("views") or 0),
        width=int(photo.get("width") or 0),
        height=int(photo.get("height") or 0),
        color=photo.get("color") or "",
        created_at=_parse_timestamp(photo.get("created_at")),
        sponsored=bool(photo.get("sponsorship")),
        premium=bool(photo.get("premium")),
        photographer_total_photos=int(user.get("total_photos") or 0),
        photographer_total_likes=int(user.get("total_likes") or 0),
    )


class UnsplashSearchProvider:

    name = "Unsplash"

    def __init__(
        self,
        settings: Settings,
        fetch_json: Optional[Callable[[str, Dict[str, str], float], Any]] = None,
    ) -> None:
        if not settings.unsplash_access_key:
            raise ProviderError("UNSPLASH_ACCESS_KEY not configured")
        self.settings = settings
        self._fetch_json = fetch_json or _fetch_json

    def search(self, query: str, count: int = 20, orientation: str = "landscape") -> List[CandidateImage]:
        params = urllib.parse.urlencode({
            "query": query,
            "per_page": max(1, min(count, 30)),
            "orientation": orientation,
            "order_by": "relevant",
        })
        headers = {
            "Authorization": f"Client-ID {self.settings.unsplash_access_key}",
            "Accept-Version": "v1",
            "User-Agent": "MoodTripBot/1.0",
        }
        try:
            data = self._fetch_json(f"{UNSPLASH_SEARCH_URL}?{params}", headers, self.settings.http_timeout)
        except Exception as e:
            raise ProviderError(f"Unsplash search failed for {query!r}: {e}") from e

        results = (data or {}).get("results") or []
        candidates = [candidate_from_unsplash(p) for p in results if isinstance(p, dict)]
        logger.debug("Unsplash: %d candidates for %r", len(candidates), query)
        return candidates


# ── Placeholder provider ──────────────────────────────────────────────────────

def placeholder_topics(prompt: str) -> tuple:
    text = (prompt or "").lower()
    for triggers, topics in PLACEHOLDER_TOPICS:
        if matches_any(text, triggers, inflected=True):
            return topics
    return PLACEHOLDER_GENERIC


def placeholder_urls(prompt: str, count: int = 4, now: Optional[Callable[[], float]] = None) -> List[str]:
    """count distinct picsum URLs keyed by the current time and a topic bucket."""
    stamp = int((now or time.time)() * 1000)
    topics = placeholder_topics(prompt)
    return [
        PLACEHOLDER_URL.format(stamp=stamp, topic=topics[i % len(topics)], n=i + 1)
        for i in range(count)
    ]
