import random
import re
from pathlib import Path

import pytest
from PIL import Image as PILImage

from conftest import solid_image
from moodtrip.config import Settings
from moodtrip.keyword_tables import DEFAULT_PALETTE, SYNTHETIC_COLORS
from moodtrip.models import ExtractionError
from moodtrip.palette import PaletteExtractor, extract_swatches, hex_to_rgb, luminance, rgb_to_hex

HEX = re.compile(r"^#[0-9A-F]{6}$")


def striped_image() -> PILImage.Image:
    """Five horizontal bands, one per swatch target."""
    bands = [
        (230, 30, 30),     # vibrant red
        (120, 140, 130),   # muted grey-green
        (20, 40, 140),     # dark vibrant blue
        (250, 200, 120),   # light vibrant amber
        (50, 60, 55),      # dark muted
    ]
    img = PILImage.new("RGB", (50, 50))
    for i, color in enumerate(bands):
        img.paste(color, (0, i * 10, 50, (i + 1) * 10))
    return img


class MapLoader:
    def __init__(self, images):
        self.images = images
        self.requested = []

    def __call__(self, url):
        self.requested.append(url)
        img = self.images.get(url)
        if img is None:
            raise OSError(f"404 {url}")
        return img


def test_color_helpers():
    assert hex_to_rgb("#fff") == (255, 255, 255)
    assert hex_to_rgb("#1A2B3C") == (26, 43, 60)
    assert rgb_to_hex(26, 43, 60) == "#1A2B3C"
    assert luminance(255, 255, 255) == pytest.approx(1.0)
    with pytest.raises(ValueError):
        hex_to_rgb("#12")


def test_extract_swatches_finds_all_targets():
    found = extract_swatches(striped_image())
    assert set(found) == {"vibrant", "muted", "dark_vibrant", "light_vibrant", "dark_muted"}
    assert all(HEX.match(c) for c in found.values())
    assert len(set(found.values())) == 5


def test_solid_color_yields_single_vibrant_swatch():
    found = extract_swatches(solid_image((255, 0, 0)))
    assert found == {"vibrant": "#FF0000"}


def test_extract_returns_five_from_rich_image():
    loader = MapLoader({"https://img.test/a.jpg": striped_image()})
    colors = PaletteExtractor(loader=loader).extract(["https://img.test/a.jpg"])
    assert len(colors) == 5
    assert all(HEX.match(c) for c in colors)


def test_pads_with_synthetic_colors_when_under_returned():
    loader = MapLoader({"https://img.test/red.jpg": solid_image((255, 0, 0))})
    colors = PaletteExtractor(loader=loader, rng=random.Random(1)).extract(["https://img.test/red.jpg"])
    assert len(colors) == 5
    assert colors[0] == "#FF0000"
    assert all(c in SYNTHETIC_COLORS for c in colors[1:])


def test_empty_input_returns_default_palette():
    assert PaletteExtractor().extract([]) == list(DEFAULT_PALETTE)
    assert PaletteExtractor().extract(None) == list(DEFAULT_PALETTE)


def test_all_failing_urls_return_default_palette():
    loader = MapLoader({})
    colors = PaletteExtractor(loader=loader).extract(["https://x/1", "https://x/2"])
    assert colors == list(DEFAULT_PALETTE)
    assert len(loader.requested) == 2


def test_failing_image_is_skipped():
    loader = MapLoader({"https://x/good": striped_image()})
    colors = PaletteExtractor(loader=loader).extract(["https://x/bad", "https://x/good"])
    assert len(colors) == 5
    assert loader.requested == ["https://x/bad", "https://x/good"]


def test_only_first_three_images_are_sampled():
    red = solid_image((255, 0, 0))
    loader = MapLoader({f"https://x/{i}": red for i in range(5)})
    PaletteExtractor(loader=loader).extract([f"https://x/{i}" for i in range(5)])
    assert loader.requested == ["https://x/0", "https://x/1", "https://x/2"]


def test_stops_once_five_colors_collected():
    loader = MapLoader({"https://x/1": striped_image(), "https://x/2": striped_image()})
    PaletteExtractor(loader=loader).extract(["https://x/1", "https://x/2"])
    assert loader.requested == ["https://x/1"]


def test_relative_urls_resolve_against_site_url():
    extractor = PaletteExtractor(Settings(site_url="https://moodtrip.test"))
    assert extractor.resolve_url("/images/ideas/1/image-1.jpg") == "https://moodtrip.test/images/ideas/1/image-1.jpg"
    assert extractor.resolve_url("https://cdn.test/a.jpg") == "https://cdn.test/a.jpg"


def test_relative_urls_prefer_local_mirror(tmp_path: Path):
    local = tmp_path / "images" / "ideas" / "1" / "image-1.png"
    local.parent.mkdir(parents=True)
    striped_image().save(local)
    extractor = PaletteExtractor(Settings(media_dir=tmp_path))
    resolved = extractor.resolve_url("/images/ideas/1/image-1.png")
    assert resolved.startswith("file://")
    assert len(extractor.extract(["/images/ideas/1/image-1.png"])) == 5


def test_blank_image_raises_extraction_error():
    with pytest.raises(ExtractionError):
        extract_swatches(PILImage.new("RGB", (0, 0)))
