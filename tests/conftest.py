from __future__ import annotations

import pytest
from PIL import Image as PILImage

from moodtrip.models import AvailabilitySample, CandidateImage, Group, Idea, ImageResult, ImageSource, ProviderError
from moodtrip.store import InMemoryRecordStore


class FakeChain:
    """Image chain stand-in that records calls."""

    def __init__(self, urls=None, provider="Fake Stock", source=ImageSource.STOCK, error=None):
        self.urls = urls if urls is not None else ["https://img.test/1.jpg", "https://img.test/2.jpg"]
        self.provider = provider
        self.source = source
        self.error = error
        self.calls = []

    def acquire(self, prompt):
        self.calls.append(prompt)
        if self.error:
            raise self.error
        return ImageResult(urls=list(self.urls), provider=self.provider, source=self.source)


class FakePalette:
    def __init__(self, colors=None, error=None):
        self.colors = colors or ["#111111", "#222222", "#333333", "#444444", "#555555"]
        self.error = error
        self.calls = []

    def extract(self, urls):
        self.calls.append(list(urls))
        if self.error:
            raise self.error
        return list(self.colors)


class FakeSummarizer:
    def __init__(self, text="A lovely trip.", error=None):
        self.text = text
        self.error = error
        self.calls = 0

    def summarize(self, prompt):
        self.calls += 1
        if self.error:
            raise self.error
        return self.text


class FakeTagger:
    def __init__(self, tags=None, error=None):
        self.tags = tags or ["beach", "summer", "food"]
        self.error = error
        self.calls = 0

    def tag(self, prompt):
        self.calls += 1
        if self.error:
            raise self.error
        return list(self.tags)


class FakeSearch:
    """Stock search returning canned pages keyed by call order."""

    name = "Fake Unsplash"

    def __init__(self, *pages, error=None):
        self.pages = list(pages)
        self.error = error
        self.queries = []

    def search(self, query, count=20, orientation="landscape"):
        self.queries.append((query, count, orientation))
        if self.error:
            raise self.error
        if not self.pages:
            return []
        return self.pages.pop(0)


class FailingGenerator:
    name = "Broken Imagen"

    def generate(self, prompt, count=None):
        raise ProviderError("quota exceeded")


def make_candidate(idx=0, description="", **kwargs) -> CandidateImage:
    defaults = dict(
        id=f"photo-{idx}",
        urls={"regular": f"https://img.test/{idx}/regular.jpg", "small": f"https://img.test/{idx}/small.jpg"},
        description=description,
    )
    defaults.update(kwargs)
    return CandidateImage(**defaults)


def solid_image(color, size=(64, 48)) -> PILImage.Image:
    return PILImage.new("RGB", size, color)


@pytest.fixture
def store():
    s = InMemoryRecordStore()
    s.add_group(Group(id="g1", slug="alps-crew", name="Alps Crew"))
    return s


@pytest.fixture
def draft_idea(store):
    return store.add_idea(Idea(id="idea-1", prompt="Summer beach week in Mexico with friends", group_id="g1"))


@pytest.fixture
def availability(store):
    for month, user, value in [(5, "u1", 80), (6, "u1", 60), (6, "u2", 80), (7, "u1", 40)]:
        store.add_availability(AvailabilitySample(group_id="g1", user_id=user, month=month, score=value))
    return store
