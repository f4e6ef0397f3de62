"""
downloader.py — Mirror acquired image URLs into the local media directory.

    <media_dir>/images/ideas/<idea_id>/image-<n>.<ext>
    → stored as /images/ideas/<idea_id>/image-<n>.<ext>

A failed download keeps the original URL for that slot, so the result always
has one URL per input, in input order.
"""

from __future__ import annotations

import logging
import urllib.request
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path, PurePosixPath
from typing import List, Sequence
from urllib.parse import urlparse

logger = logging.getLogger(__name__)

IMAGE_EXTS = {"jpg", "jpeg", "png", "webp", "gif"}


def file_extension(url: str) -> str:
    suffix = PurePosixPath(urlparse(url).path).suffix.lower().lstrip(".")
    return suffix if suffix in IMAGE_EXTS else "jpg"


def download_and_save_image(url: str, idea_id: str, index: int, media_dir: Path, timeout: float = 8.0) -> str:
    """Download one image. Returns the public path, or the original URL on failure."""
    if url.startswith("/"):
        return url   # already site-local
    try:
        idea_dir = Path(media_dir) / "images" / "ideas" / idea_id
        idea_dir.mkdir(parents=True, exist_ok=True)
        filename = f"image-{index + 1}.{file_extension(url)}"

        req = urllib.request.Request(url, headers={"User-Agent": "MoodTripBot/1.0"})
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            data = resp.read()
        if not data:
            raise ValueError("empty response body")
        (idea_dir / filename).write_bytes(data)
        return f"/images/ideas/{idea_id}/{filename}"

    except Exception as e:
        logger.warning("Error downloading image %s: %s", url, e)
        return url


def download_and_save_images(urls: Sequence[str], idea_id: str, media_dir: Path, timeout: float = 8.0) -> List[str]:
    if not urls:
        return []
    with ThreadPoolExecutor(max_workers=min(4, len(urls))) as pool:
        futures = [
            pool.submit(download_and_save_image, url, idea_id, i, media_dir, timeout)
            for i, url in enumerate(urls)
        ]
        return [f.result() for f in futures]
