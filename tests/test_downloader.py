import io
import urllib.error

import pytest

from moodtrip import downloader


class FakeResponse(io.BytesIO):
    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


@pytest.mark.parametrize("url,ext", [
    ("https://x.test/a/photo.PNG?w=100", "png"),
    ("https://x.test/a/photo.webp", "webp"),
    ("https://images.unsplash.com/photo-123?ixid=abc", "jpg"),
    ("https://x.test/file.tiff", "jpg"),
])
def test_file_extension(url, ext):
    assert downloader.file_extension(url) == ext


def test_downloads_into_idea_folder(tmp_path, monkeypatch):
    monkeypatch.setattr(downloader.urllib.request, "urlopen", lambda req, timeout: FakeResponse(b"bytes"))
    path = downloader.download_and_save_image("https://x.test/p.png", "idea-1", 1, tmp_path)
    assert path == "/images/ideas/idea-1/image-2.png"
    assert (tmp_path / "images" / "ideas" / "idea-1" / "image-2.png").read_bytes() == b"bytes"


def test_site_local_urls_are_left_alone(tmp_path):
    assert downloader.download_and_save_image("/generated/g.png", "idea-1", 0, tmp_path) == "/generated/g.png"


def test_failed_download_keeps_original_url(tmp_path, monkeypatch):
    def boom(req, timeout):
        raise urllib.error.URLError("offline")

    monkeypatch.setattr(downloader.urllib.request, "urlopen", boom)
    assert downloader.download_and_save_image("https://x.test/p.jpg", "idea-1", 0, tmp_path) == "https://x.test/p.jpg"


def test_empty_body_keeps_original_url(tmp_path, monkeypatch):
    monkeypatch.setattr(downloader.urllib.request, "urlopen", lambda req, timeout: FakeResponse(b""))
    assert downloader.download_and_save_image("https://x.test/p.jpg", "idea-1", 0, tmp_path) == "https://x.test/p.jpg"


def test_batch_preserves_order_and_slots(tmp_path, monkeypatch):
    def fake_urlopen(req, timeout):
        if "bad" in req.full_url:
            raise urllib.error.URLError("404")
        return FakeResponse(b"ok")

    monkeypatch.setattr(downloader.urllib.request, "urlopen", fake_urlopen)
    urls = ["https://x.test/1.jpg", "https://x.test/bad.jpg", "https://x.test/3.jpg"]
    result = downloader.download_and_save_images(urls, "idea-7", tmp_path)
    assert result == [
        "/images/ideas/idea-7/image-1.jpg",
        "https://x.test/bad.jpg",
        "/images/ideas/idea-7/image-3.jpg",
    ]
    assert downloader.download_and_save_images([], "idea-7", tmp_path) == []
