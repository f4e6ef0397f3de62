"""
palette.py — Derive a 5-color palette from moodboard images.

Per image (up to 3), the image is quantized and the population-weighted
swatches are matched against five HSL targets:

  vibrant · muted · dark vibrant · light vibrant · dark muted

Colors accumulate across images until 5 are collected. Short results are
padded from SYNTHETIC_COLORS; no images or no extractable color at all gives
DEFAULT_PALETTE. extract() always returns exactly 5 hex strings.

Usage:
    from moodtrip.palette import PaletteExtractor
    PaletteExtractor(settings).extract(["https://.../photo.jpg"])
    # → ["#2C6E8F", "#7A8B92", "#123A4F", "#9FD3EC", "#3B4A50"]
"""

from __future__ import annotations

import colorsys
import io
import logging
import random
import urllib.request
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple
from urllib.parse import urlparse
from urllib.request import url2pathname

import numpy as np
from PIL import Image

from .config import DEFAULT_SITE_URL, Settings
from .keyword_tables import DEFAULT_PALETTE, SYNTHETIC_COLORS
from .models import ExtractionError

logger = logging.getLogger(__name__)

PALETTE_SIZE = 5
MAX_IMAGES = 3
QUANTIZE_COLORS = 64
THUMBNAIL_SIZE = (160, 160)

# ── Color math ────────────────────────────────────────────────────────────────

def hex_to_rgb(hex_str: str) -> Tuple[int, int, int]:
    h = hex_str.strip().lstrip("#")
    if len(h) == 3:
        h = "".join(c * 2 for c in h)
    if len(h) != 6:
        raise ValueError(f"Not a hex color: {hex_str!r}")
    return int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)


def rgb_to_hex(r: int, g: int, b: int) -> str:
    return f"#{int(r):02X}{int(g):02X}{int(b):02X}"


def luminance(r: int, g: int, b: int) -> float:
    """Perceived luminance (0–1). > 0.5 → light color."""
    return (0.299 * r + 0.587 * g + 0.114 * b) / 255


# ── Swatch targets ────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class SwatchTarget:
    name: str
    target_luma: float
    min_luma: float
    max_luma: float
    target_saturation: float
    min_saturation: float
    max_saturation: float


_VIBRANT_SAT = dict(target_saturation=1.0, min_saturation=0.35, max_saturation=1.0)
_MUTED_SAT = dict(target_saturation=0.3, min_saturation=0.0, max_saturation=0.4)

# Selection order; earlier targets get first pick of the swatches.
SWATCH_TARGETS: Tuple[SwatchTarget, ...] = (
    SwatchTarget("vibrant", 0.5, 0.3, 0.7, **_VIBRANT_SAT),
    SwatchTarget("light_vibrant", 0.74, 0.55, 1.0, **_VIBRANT_SAT),
    SwatchTarget("dark_vibrant", 0.26, 0.0, 0.45, **_VIBRANT_SAT),
    SwatchTarget("muted", 0.5, 0.3, 0.7, **_MUTED_SAT),
    SwatchTarget("dark_muted", 0.26, 0.0, 0.45, **_MUTED_SAT),
)

# Order in which found swatches are appended to the palette
PALETTE_ORDER: Tuple[str, ...] = ("vibrant", "muted", "dark_vibrant", "light_vibrant", "dark_muted")

WEIGHT_SATURATION = 3.0
WEIGHT_LUMA = 6.5
WEIGHT_POPULATION = 0.5


def _quantized_swatches(img: Image.Image) -> List[Tuple[Tuple[int, int, int], int]]:
    """Median-cut the image down to QUANTIZE_COLORS and count each color."""
    img = img.convert("RGB")
    img.thumbnail(THUMBNAIL_SIZE)
    quantized = img.quantize(colors=QUANTIZE_COLORS, method=Image.Quantize.MEDIANCUT)
    flat = quantized.getpalette() or []
    n_colors = len(flat) // 3
    counts = np.bincount(np.asarray(quantized).ravel(), minlength=n_colors)

    swatches = []
    for idx in range(min(n_colors, len(counts))):
        population = int(counts[idx])
        if population > 0:
            swatches.append(((flat[idx * 3], flat[idx * 3 + 1], flat[idx * 3 + 2]), population))
    return swatches


def extract_swatches(img: Image.Image) -> Dict[str, str]:
    """
    Match quantized swatches against SWATCH_TARGETS.
    Returns {target name: hex} for the targets that found a color.
    Raises ExtractionError when the image yields no swatches at all.
    """
    try:
        swatches = _quantized_swatches(img)
    except Exception as e:
        raise ExtractionError(f"Quantization failed: {e}") from e
    if not swatches:
        raise ExtractionError("Image produced no swatches")

    max_population = max(pop for _, pop in swatches)
    hls = {rgb: colorsys.rgb_to_hls(rgb[0] / 255, rgb[1] / 255, rgb[2] / 255) for rgb, _ in swatches}
    used: set = set()
    found: Dict[str, str] = {}

    for target in SWATCH_TARGETS:
        best_rgb, best_value = None, -1.0
        for rgb, population in swatches:
            if rgb in used:
                continue
            _, luma, saturation = hls[rgb]
            if not (target.min_luma <= luma <= target.max_luma):
                continue
            if not (target.min_saturation <= saturation <= target.max_saturation):
                continue
            value = (
                (1 - abs(saturation - target.target_saturation)) * WEIGHT_SATURATION
                + (1 - abs(luma - target.target_luma)) * WEIGHT_LUMA
                + (population / max_population) * WEIGHT_POPULATION
            ) / (WEIGHT_SATURATION + WEIGHT_LUMA + WEIGHT_POPULATION)
            if value > best_value:
                best_rgb, best_value = rgb, value
        if best_rgb is not None:
            used.add(best_rgb)
            found[target.name] = rgb_to_hex(*best_rgb)

    return found


# ── Image loading ─────────────────────────────────────────────────────────────

def load_image(url: str, timeout: float = 8.0) -> Image.Image:
    """Open a file:// or http(s) URL as a PIL image."""
    if url.startswith("file://"):
        path = Path(url2pathname(urlparse(url).path))
        with path.open("rb") as fh:
            data = fh.read()
    else:
        req = urllib.request.Request(url, headers={"User-Agent": "MoodTripBot/1.0"})
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            data = resp.read()
    img = Image.open(io.BytesIO(data))
    img.load()
    return img


# ── Extractor ─────────────────────────────────────────────────────────────────

class PaletteExtractor:

    def __init__(
        self,
        settings: Optional[Settings] = None,
        loader: Optional[Callable[[str], Image.Image]] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.settings = settings or Settings()
        self._loader = loader or (lambda url: load_image(url, self.settings.http_timeout))
        self._rng = rng or random.Random()

    def resolve_url(self, url: str) -> str:
        """Site-relative URLs → absolute (local mirror file if present, else site URL)."""
        if not url.startswith("/") or url.startswith("//"):
            return url
        media_dir = self.settings.media_dir
        if media_dir is not None:
            local = Path(media_dir) / url.lstrip("/")
            if local.exists():
                return local.resolve().as_uri()
        base = (self.settings.site_url or DEFAULT_SITE_URL).rstrip("/")
        return f"{base}{url}"

    def swatches_for(self, url: str) -> List[str]:
        """Palette-ordered swatch colors for one image URL."""
        img = self._loader(self.resolve_url(url))
        found = extract_swatches(img)
        return [found[name] for name in PALETTE_ORDER if name in found]

    def extract(self, urls: Sequence[str]) -> List[str]:
        """Exactly PALETTE_SIZE hex colors. Never raises."""
        try:
            urls = [u for u in (urls or []) if u]
            if not urls:
                return list(DEFAULT_PALETTE)

            colors: List[str] = []
            for url in urls[:MAX_IMAGES]:
                try:
                    colors.extend(self.swatches_for(url))
                except Exception as e:
                    logger.warning("Palette extraction failed for %s: %s", url, e)
                    continue
                if len(colors) >= PALETTE_SIZE:
                    break

            if not colors:
                logger.info("No swatches extracted from %d image(s) — using default palette", len(urls))
                return list(DEFAULT_PALETTE)

            while len(colors) < PALETTE_SIZE:
                colors.append(self._rng.choice(SYNTHETIC_COLORS))
            return colors[:PALETTE_SIZE]

        except Exception:
            logger.exception("Palette extraction crashed — using default palette")
            return list(DEFAULT_PALETTE)
